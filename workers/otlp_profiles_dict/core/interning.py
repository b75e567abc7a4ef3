"""
Interning store — the shared, deduplicated tables of one batch.

Each table is an ordered list plus a position map keyed by a canonical
form of the entry, so insert-or-find is O(1) expected while keeping
first-occurrence (insertion-order) positions.  Entries are never removed
or relocated.

Pure data structures, no IO.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, Hashable, Iterator, List, TypeVar

from pydantic import BaseModel

from otlp_profiles_dict.io.common import KeyValue
from otlp_profiles_dict.io.development import (
    Function,
    Link,
    Location,
    Mapping,
    ProfilesDictionary,
)

log = logging.getLogger(__name__)

T = TypeVar("T")


def _freeze(value: Any) -> Hashable:
    """Turn a ``model_dump()`` tree into nested tuples."""
    if isinstance(value, dict):
        return tuple((k, _freeze(v)) for k, v in value.items())
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def canonical_key(entity: BaseModel) -> Hashable:
    """Structural-equality key of a dictionary-form entity (every field)."""
    return _freeze(entity.model_dump())


def _text_key(value: str) -> Hashable:
    return value


class InternTable(Generic[T]):
    """Ordered table with insert-or-find semantics."""

    def __init__(self, name: str, key: Callable[[T], Hashable]):
        self.name = name
        self.entries: List[T] = []
        self._key = key
        self._positions: Dict[Hashable, int] = {}
        self.inserted = 0
        self.reused = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, position: int) -> T:
        return self.entries[position]

    def __iter__(self) -> Iterator[T]:
        return iter(self.entries)

    def insert_or_find(self, candidate: T) -> int:
        """
        Return the position of the first entry equal to *candidate*,
        appending it first if no equal entry exists.
        """
        key = self._key(candidate)
        position = self._positions.get(key)
        if position is not None:
            self.reused += 1
            return position
        position = len(self.entries)
        self.entries.append(candidate)
        self._positions[key] = position
        self.inserted += 1
        return position


class InterningStore:
    """
    The six shared tables of a ``ProfilesDictionary`` under construction.

    Owned by the traversal orchestrator and mutated in place by every
    entity converter; single-threaded by contract.
    """

    def __init__(self) -> None:
        self.strings: InternTable[str] = InternTable("string", _text_key)
        self.functions: InternTable[Function] = InternTable("function", canonical_key)
        self.mappings: InternTable[Mapping] = InternTable("mapping", canonical_key)
        self.locations: InternTable[Location] = InternTable("location", canonical_key)
        self.attributes: InternTable[KeyValue] = InternTable("attribute", canonical_key)
        self.links: InternTable[Link] = InternTable("link", canonical_key)

    def tables(self) -> Dict[str, InternTable]:
        return {
            t.name: t
            for t in (
                self.strings,
                self.functions,
                self.mappings,
                self.locations,
                self.attributes,
                self.links,
            )
        }

    def to_dictionary(self) -> ProfilesDictionary:
        """Snapshot the tables as a target-schema ``ProfilesDictionary``."""
        log.debug(
            "dictionary sizes: %s",
            {name: len(t) for name, t in self.tables().items()},
        )
        return ProfilesDictionary(
            mapping_table=list(self.mappings),
            location_table=list(self.locations),
            function_table=list(self.functions),
            link_table=list(self.links),
            string_table=list(self.strings),
            attribute_table=list(self.attributes),
        )
