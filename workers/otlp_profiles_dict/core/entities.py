"""
Entity converters — translate one profile-local entity into its
dictionary form and intern it into the shared store.

Dictionary form is compared for deduplication, so two entities from
different profiles that reference the same *text* through different
local string positions unify.

Cross-references to entities interned by an earlier step go through
``ReferenceResolvers``.  An unresolved reference is never fatal: it is
degraded (optional index omitted, required index set to 0) and appended
to the caller's ``unresolved`` list.

Pure functions, no IO.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from otlp_profiles_dict.core.interning import InterningStore
from otlp_profiles_dict.core.resolvers import LocalTables, ReferenceResolvers
from otlp_profiles_dict.io import development as dev
from otlp_profiles_dict.io import experimental as exp
from otlp_profiles_dict.io.common import KeyValue
from otlp_profiles_dict.io.schema import (
    ReferenceKind,
    UnresolvedReason,
    UnresolvedReference,
)

log = logging.getLogger(__name__)


# ── Strings ──────────────────────────────────────────────────────────────────

def convert_string(
    local: LocalTables,
    position: int,
    store: InterningStore,
) -> int:
    """Intern the text at local *position*; exact text equality."""
    return store.strings.insert_or_find(local.text(position))


def convert_value_type(
    local: LocalTables,
    value_type: exp.ValueType,
    store: InterningStore,
) -> dev.ValueType:
    return dev.ValueType(
        type_strindex=convert_string(local, value_type.type, store),
        unit_strindex=convert_string(local, value_type.unit, store),
        aggregation_temporality=value_type.aggregation_temporality,
    )


# ── Attributes and links ─────────────────────────────────────────────────────

def intern_attribute(attribute: KeyValue, store: InterningStore) -> int:
    """Attributes are copied verbatim; full structural equality."""
    return store.attributes.insert_or_find(attribute)


def convert_link(link: exp.Link) -> dev.Link:
    return dev.Link(trace_id=link.trace_id, span_id=link.span_id)


def intern_link(link: exp.Link, store: InterningStore) -> int:
    return store.links.insert_or_find(convert_link(link))


# ── Functions and mappings ───────────────────────────────────────────────────

def convert_function(
    local: LocalTables,
    function: exp.Function,
    store: InterningStore,
) -> int:
    """Resolve the three text fields, keep start_line, intern."""
    candidate = dev.Function(
        name_strindex=convert_string(local, function.name, store),
        system_name_strindex=convert_string(local, function.system_name, store),
        filename_strindex=convert_string(local, function.filename, store),
        start_line=function.start_line,
    )
    return store.functions.insert_or_find(candidate)


def convert_mapping(
    local: LocalTables,
    mapping: exp.Mapping,
    store: InterningStore,
) -> int:
    """
    Copy range, offset and capability flags, resolve the filename, intern.

    The mapping's attributes are interned into the shared attribute table,
    but the dictionary mapping does not reference them.
    """
    filename_strindex = convert_string(local, mapping.filename, store)
    for position in mapping.attributes:
        intern_attribute(local.attribute(position), store)
    candidate = dev.Mapping(
        memory_start=mapping.memory_start,
        memory_limit=mapping.memory_limit,
        file_offset=mapping.file_offset,
        filename_strindex=filename_strindex,
        has_functions=mapping.has_functions,
        has_filenames=mapping.has_filenames,
        has_line_numbers=mapping.has_line_numbers,
        has_inline_frames=mapping.has_inline_frames,
    )
    return store.mappings.insert_or_find(candidate)


# ── Locations ────────────────────────────────────────────────────────────────

def convert_location(
    local: LocalTables,
    position: int,
    store: InterningStore,
    resolvers: ReferenceResolvers,
    unresolved: List[UnresolvedReference],
) -> int:
    """
    Convert local location *position* and intern it.

    Mapping and function references are re-derived through the resolvers,
    so mappings and functions of this profile must already be interned.
    """
    location = local.profile.location[position]

    mapping_index = resolvers.mapping(local, location.mapping_index)
    # No mapping table at all means "no mapping", not a broken reference.
    if mapping_index is None and local.profile.mapping:
        unresolved.append(_unresolved(
            ReferenceKind.LOCATION_MAPPING,
            position,
            location.mapping_index,
            len(local.profile.mapping),
        ))

    lines: List[dev.Line] = []
    for line in location.line:
        function_index: Optional[int] = resolvers.function(local, line.function_index)
        if function_index is None:
            unresolved.append(_unresolved(
                ReferenceKind.LINE_FUNCTION,
                position,
                line.function_index,
                len(local.profile.function),
            ))
            function_index = 0
        lines.append(dev.Line(
            function_index=function_index,
            line=line.line,
            column=line.column,
        ))

    attribute_indices = [
        intern_attribute(local.attribute(p), store) for p in location.attributes
    ]

    candidate = dev.Location(
        mapping_index=mapping_index,
        address=location.address,
        line=lines,
        is_folded=location.is_folded,
        attribute_indices=attribute_indices,
    )
    return store.locations.insert_or_find(candidate)


# ── Samples ──────────────────────────────────────────────────────────────────

def convert_sample(
    local: LocalTables,
    position: int,
    store: InterningStore,
    resolvers: ReferenceResolvers,
    unresolved: List[UnresolvedReference],
) -> dev.Sample:
    """
    Convert local sample *position*.

    The starting location is re-derived through the location resolver;
    an unresolved start defaults to 0.  A link is attached only when the
    sample's link position falls inside the local link table.
    """
    sample = local.profile.sample[position]

    start_index = resolvers.location(local, sample.locations_start_index)
    if start_index is None:
        unresolved.append(_unresolved(
            ReferenceKind.SAMPLE_LOCATION,
            position,
            sample.locations_start_index,
            len(local.profile.location),
        ))
        start_index = 0

    link_index: Optional[int] = None
    if 0 <= sample.link < len(local.profile.link_table):
        link_index = intern_link(local.profile.link_table[sample.link], store)

    return dev.Sample(
        locations_start_index=start_index,
        locations_length=sample.locations_length,
        value=list(sample.value),
        attribute_indices=[
            intern_attribute(local.attribute(p), store) for p in sample.attributes
        ],
        link_index=link_index,
        timestamps_unix_nano=list(sample.timestamps_unix_nano),
    )


# ── Helpers ──────────────────────────────────────────────────────────────────

def _unresolved(
    kind: ReferenceKind,
    entity_index: int,
    local_index: int,
    local_size: int,
) -> UnresolvedReference:
    reason = (
        UnresolvedReason.NO_MATCH
        if 0 <= local_index < local_size
        else UnresolvedReason.OUT_OF_RANGE
    )
    log.debug(
        "unresolved %s: entity %d -> local %d (%s)",
        kind.value, entity_index, local_index, reason.value,
    )
    return UnresolvedReference(
        kind=kind,
        reason=reason,
        entity_index=entity_index,
        local_index=local_index,
    )
