"""Tests for the post-conversion invariant checks."""
from otlp_profiles_dict.core.invariants import check_invariants
from otlp_profiles_dict.io import development as dev


def _batch(dictionary: dev.ProfilesDictionary, *profiles: dev.Profile) -> dev.ProfilesData:
    return dev.ProfilesData(
        resource_profiles=[
            dev.ResourceProfiles(scope_profiles=[dev.ScopeProfiles(profiles=list(profiles))]),
        ],
        dictionary=dictionary,
    )


class TestIndexBounds:

    def test_valid_batch_passes(self):
        d = dev.ProfilesDictionary(
            string_table=["", "f"],
            function_table=[dev.Function(name_strindex=1)],
            location_table=[dev.Location(line=[dev.Line(function_index=0)])],
        )
        profile = dev.Profile(
            location_indices=[0],
            sample=[dev.Sample(locations_start_index=0, locations_length=1)],
        )
        assert check_invariants(_batch(d, profile)) == []

    def test_dangling_function_index(self):
        d = dev.ProfilesDictionary(
            string_table=[""],
            location_table=[dev.Location(line=[dev.Line(function_index=2)])],
        )
        (violation,) = check_invariants(_batch(d))
        assert violation["check"] == "index_bounds"
        assert violation["ids"] == ["location_table[0].line[0].function_index=2 (>= 0)"]

    def test_dangling_link_in_profile(self):
        d = dev.ProfilesDictionary(string_table=[""])
        profile = dev.Profile(sample=[dev.Sample(link_index=0)])
        (violation,) = check_invariants(_batch(d, profile))
        assert "sample[0].link_index=0" in violation["ids"][0]

    def test_empty_slice_start_not_checked(self):
        d = dev.ProfilesDictionary(string_table=[""])
        profile = dev.Profile(sample=[dev.Sample(locations_start_index=0, locations_length=0)])
        assert check_invariants(_batch(d, profile)) == []

    def test_absent_mapping_not_checked(self):
        d = dev.ProfilesDictionary(string_table=[""], location_table=[dev.Location(address=1)])
        assert check_invariants(_batch(d)) == []


class TestNoDuplicates:

    def test_duplicate_strings(self):
        d = dev.ProfilesDictionary(string_table=["", "a", "a"])
        (violation,) = check_invariants(_batch(d))
        assert violation["check"] == "no_duplicates"
        assert violation["ids"] == ["string_table[2] == string_table[1]"]

    def test_duplicate_functions(self):
        d = dev.ProfilesDictionary(
            string_table=[""],
            function_table=[dev.Function(start_line=1), dev.Function(start_line=1)],
        )
        (violation,) = check_invariants(_batch(d))
        assert violation["ids"] == ["function_table[1] == function_table[0]"]

    def test_locations_differing_only_in_mapping_presence_are_distinct(self):
        d = dev.ProfilesDictionary(
            string_table=[""],
            mapping_table=[dev.Mapping()],
            location_table=[dev.Location(address=1), dev.Location(address=1, mapping_index=0)],
        )
        assert check_invariants(_batch(d)) == []
