"""
Profile conversion — one v1experimental ``ProfileContainer`` into one
v1development ``Profile`` referencing only the shared dictionary.

Table kinds are interned in a fixed order so that dictionary positions
are reproducible:

    links → strings → attributes → mappings → functions → locations → samples

followed by the profile-level fields (sample types, period type,
comments, default sample type, container attributes).
"""
from __future__ import annotations

import logging
from typing import List

from otlp_profiles_dict.core.entities import (
    convert_function,
    convert_location,
    convert_mapping,
    convert_sample,
    convert_string,
    convert_value_type,
    intern_attribute,
    intern_link,
)
from otlp_profiles_dict.core.interning import InterningStore
from otlp_profiles_dict.core.resolvers import LocalTables, ReferenceResolvers
from otlp_profiles_dict.io import development as dev
from otlp_profiles_dict.io import experimental as exp
from otlp_profiles_dict.io.schema import UnresolvedReference

log = logging.getLogger(__name__)


def add_to_dictionary(
    local: LocalTables,
    store: InterningStore,
    resolvers: ReferenceResolvers,
    unresolved: List[UnresolvedReference],
) -> List[dev.Sample]:
    """
    Intern every local table of *local* and convert its samples.

    Fills ``local.*_positions`` as a side effect; returns the converted
    samples.
    """
    source = local.profile

    for link in source.link_table:
        intern_link(link, store)

    # The whole local string table, referenced or not.
    for text in source.string_table:
        store.strings.insert_or_find(text)

    for attribute in source.attribute_table:
        intern_attribute(attribute, store)

    local.mapping_positions = [
        convert_mapping(local, mapping, store) for mapping in source.mapping
    ]
    local.function_positions = [
        convert_function(local, function, store) for function in source.function
    ]

    # Locations need the mapping and function tables built above.
    for position in range(len(source.location)):
        local.location_positions.append(
            convert_location(local, position, store, resolvers, unresolved)
        )

    # Samples need the location table built above.
    return [
        convert_sample(local, position, store, resolvers, unresolved)
        for position in range(len(source.sample))
    ]


def convert_profile(
    container: exp.ProfileContainer,
    store: InterningStore,
    resolvers: ReferenceResolvers,
    unresolved: List[UnresolvedReference],
) -> dev.Profile:
    """Convert one profile container; *store* grows in place."""
    source = container.profile
    local = LocalTables(profile=source)

    samples = add_to_dictionary(local, store, resolvers, unresolved)

    sample_type = [convert_value_type(local, vt, store) for vt in source.sample_type]
    period_type = (
        convert_value_type(local, source.period_type, store)
        if source.period_type is not None
        else None
    )
    comment_strindices = [convert_string(local, p, store) for p in source.comment]
    default_sample_type_index = convert_string(local, source.default_sample_type, store)
    attribute_indices = [intern_attribute(kv, store) for kv in container.attributes]

    log.debug(
        "profile %s: %d locations, %d samples",
        container.profile_id.hex() or "<no id>",
        len(local.location_positions),
        len(samples),
    )

    return dev.Profile(
        sample_type=sample_type,
        sample=samples,
        location_indices=list(local.location_positions),
        time_nanos=container.start_time_unix_nano,
        duration_nanos=container.end_time_unix_nano - container.start_time_unix_nano,
        period_type=period_type,
        period=source.period,
        comment_strindices=comment_strindices,
        default_sample_type_index=default_sample_type_index,
        profile_id=container.profile_id,
        dropped_attributes_count=container.dropped_attributes_count,
        original_payload_format=container.original_payload_format,
        original_payload=container.original_payload,
        attribute_indices=attribute_indices,
    )
