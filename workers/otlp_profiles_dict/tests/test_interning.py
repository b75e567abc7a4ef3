"""Tests for the interning store (insert-or-find over ordered tables)."""
from otlp_profiles_dict.core.interning import InternTable, InterningStore, canonical_key
from otlp_profiles_dict.io.common import AnyValue, KeyValue
from otlp_profiles_dict.io.development import Function, Line, Location, ProfilesDictionary


class TestInternTable:
    """Tests for InternTable.insert_or_find()."""

    def test_first_occurrence_fixes_position(self):
        table = InternTable("string", lambda s: s)
        assert table.insert_or_find("a") == 0
        assert table.insert_or_find("b") == 1
        assert table.insert_or_find("a") == 0
        assert table.entries == ["a", "b"]

    def test_counts_inserts_and_reuses(self):
        table = InternTable("string", lambda s: s)
        for text in ["", "x", "", "x", "y"]:
            table.insert_or_find(text)
        assert table.inserted == 3
        assert table.reused == 2
        assert len(table) == 3

    def test_exact_text_equality_no_normalization(self):
        table = InternTable("string", lambda s: s)
        positions = [table.insert_or_find(s) for s in ["Main", "main", "main "]]
        assert positions == [0, 1, 2]


class TestCanonicalKey:
    """Structural equality is over every field of the dictionary form."""

    def test_equal_functions_share_key(self):
        a = Function(name_strindex=1, system_name_strindex=1, filename_strindex=2, start_line=3)
        b = Function(name_strindex=1, system_name_strindex=1, filename_strindex=2, start_line=3)
        assert canonical_key(a) == canonical_key(b)

    def test_start_line_is_part_of_key(self):
        a = Function(name_strindex=1, start_line=3)
        b = Function(name_strindex=1, start_line=4)
        assert canonical_key(a) != canonical_key(b)

    def test_absent_mapping_differs_from_zero(self):
        assert canonical_key(Location(address=1)) != canonical_key(
            Location(address=1, mapping_index=0)
        )

    def test_nested_lines_compared(self):
        a = Location(address=1, line=[Line(function_index=0, line=5)])
        b = Location(address=1, line=[Line(function_index=0, line=6)])
        assert canonical_key(a) != canonical_key(b)

    def test_attribute_value_kinds_distinguished(self):
        as_string = KeyValue(key="k", value=AnyValue(string_value="1"))
        as_int = KeyValue(key="k", value=AnyValue(int_value=1))
        assert canonical_key(as_string) != canonical_key(as_int)


class TestInterningStore:

    def test_composite_dedup_by_structure(self):
        store = InterningStore()
        first = store.functions.insert_or_find(Function(name_strindex=1, start_line=2))
        second = store.functions.insert_or_find(Function(name_strindex=1, start_line=2))
        assert first == second == 0
        assert len(store.functions) == 1

    def test_tables_names(self):
        assert set(InterningStore().tables()) == {
            "string", "function", "mapping", "location", "attribute", "link",
        }

    def test_to_dictionary_preserves_order(self):
        store = InterningStore()
        for text in ["", "b", "a"]:
            store.strings.insert_or_find(text)
        store.attributes.insert_or_find(KeyValue(key="k"))
        d = store.to_dictionary()
        assert isinstance(d, ProfilesDictionary)
        assert d.string_table == ["", "b", "a"]
        assert d.attribute_table == [KeyValue(key="k")]
        assert d.function_table == []
