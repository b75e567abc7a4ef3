"""
Reference resolvers — re-derive the shared index of an entity that an
earlier conversion step already interned.

Two resolution modes (see ``policy.profile.ResolutionMode``):

  LOOSE  key lookup over the whole shared table, first match in table
         order.  Keys are narrower than the interning keys:
           mapping   (memory_start, memory_limit, file_offset)
           location  address
         so entities that differ only outside the key can be merged.
  EXACT  the shared index recorded for the same local entity of the
         current profile.

Function resolution always compares the full text + start line, which
coincides with its interning key.

Every resolver returns ``None`` when the reference cannot be resolved;
the caller decides how to degrade.  Pure functions, no IO.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

from otlp_profiles_dict.core.interning import InternTable, InterningStore
from otlp_profiles_dict.errors import ConversionError
from otlp_profiles_dict.io import experimental as exp
from otlp_profiles_dict.io.common import KeyValue
from otlp_profiles_dict.io.development import Function, Location, Mapping
from otlp_profiles_dict.policy.profile import ConversionProfile, ResolutionMode

T = TypeVar("T")

FunctionTextKey = Tuple[str, str, str, int]


# ── Local (per-profile) side ─────────────────────────────────────────────────

@dataclass
class LocalTables:
    """
    One source profile's private tables plus the shared positions its
    entities were interned at, filled in as conversion proceeds.

    ``*_positions[i]`` is the shared index of local entity ``i``.
    """

    profile: exp.Profile
    mapping_positions: List[int] = field(default_factory=list)
    function_positions: List[int] = field(default_factory=list)
    location_positions: List[int] = field(default_factory=list)

    def text(self, position: int) -> str:
        """Literal text at *position* of the local string table."""
        strings = self.profile.string_table
        if 0 <= position < len(strings):
            return strings[position]
        if position == 0 and not strings:
            # string_table[0] is reserved for "" even when the table is empty
            return ""
        raise ConversionError(
            f"string index {position} out of range "
            f"(string_table has {len(strings)} entries)"
        )

    def attribute(self, position: int) -> KeyValue:
        table = self.profile.attribute_table
        if 0 <= position < len(table):
            return table[position]
        raise ConversionError(
            f"attribute index {position} out of range "
            f"(attribute_table has {len(table)} entries)"
        )

    def function_text_key(self, function: exp.Function) -> FunctionTextKey:
        return (
            self.text(function.name),
            self.text(function.system_name),
            self.text(function.filename),
            function.start_line,
        )


# ── Shared side ──────────────────────────────────────────────────────────────

class TableResolver(Generic[T]):
    """
    Key index over an ``InternTable`` that may still be growing.

    New entries are indexed lazily on each lookup; ``setdefault`` keeps
    the first position per key, which matches a front-to-back scan.
    """

    def __init__(self, table: InternTable[T], key: Callable[[T], Hashable]):
        self._table = table
        self._key = key
        self._index: Dict[Hashable, int] = {}
        self._synced = 0

    def _sync(self) -> None:
        entries = self._table.entries
        for position in range(self._synced, len(entries)):
            self._index.setdefault(self._key(entries[position]), position)
        self._synced = len(entries)

    def resolve(self, key: Hashable) -> Optional[int]:
        self._sync()
        return self._index.get(key)


def mapping_range_key(mapping) -> Tuple[int, int, int]:
    """Loose mapping key; works on source and dictionary mappings alike."""
    return (mapping.memory_start, mapping.memory_limit, mapping.file_offset)


def location_address_key(location) -> int:
    """Loose location key: the address only."""
    return location.address


class ReferenceResolvers:
    """The mapping, function and location resolvers of one batch."""

    def __init__(self, store: InterningStore, profile: ConversionProfile):
        self._profile = profile
        strings = store.strings

        def dictionary_function_key(function: Function) -> FunctionTextKey:
            return (
                strings[function.name_strindex],
                strings[function.system_name_strindex],
                strings[function.filename_strindex],
                function.start_line,
            )

        self._mappings: TableResolver[Mapping] = TableResolver(
            store.mappings, mapping_range_key,
        )
        self._functions: TableResolver[Function] = TableResolver(
            store.functions, dictionary_function_key,
        )
        self._locations: TableResolver[Location] = TableResolver(
            store.locations, location_address_key,
        )

    def mapping(self, local: LocalTables, position: int) -> Optional[int]:
        """Shared index of local mapping *position*, or None."""
        mappings = local.profile.mapping
        if not 0 <= position < len(mappings):
            return None
        if self._profile.mapping_resolution == ResolutionMode.EXACT:
            return _recorded(local.mapping_positions, position)
        return self._mappings.resolve(mapping_range_key(mappings[position]))

    def function(self, local: LocalTables, position: int) -> Optional[int]:
        """Shared index of local function *position*, or None."""
        functions = local.profile.function
        if not 0 <= position < len(functions):
            return None
        return self._functions.resolve(local.function_text_key(functions[position]))

    def location(self, local: LocalTables, position: int) -> Optional[int]:
        """Shared index of local location *position*, or None."""
        locations = local.profile.location
        if not 0 <= position < len(locations):
            return None
        if self._profile.location_resolution == ResolutionMode.EXACT:
            return _recorded(local.location_positions, position)
        return self._locations.resolve(location_address_key(locations[position]))


def _recorded(positions: List[int], position: int) -> Optional[int]:
    if 0 <= position < len(positions):
        return positions[position]
    return None
