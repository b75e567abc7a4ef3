"""
Target data contract — OTLP ``profiles/v1development``.

Profiles no longer own tables: every ``*_index`` / ``*_strindex`` /
``*_indices`` field is a position into the batch-wide
``ProfilesDictionary`` attached to ``ProfilesData``.

``Location.mapping_index`` and ``Sample.link_index`` are proto3
``optional``: ``None`` (absent) is distinct from ``0``.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from otlp_profiles_dict.io.common import (
    AggregationTemporality,
    Bytes,
    InstrumentationScope,
    Int64,
    KeyValue,
    OtlpModel,
    Resource,
    Temporality,
)


# ── Dictionary entities ─────────────────────────────────────────────────────

class Function(OtlpModel):
    name_strindex: int = 0
    system_name_strindex: int = 0
    filename_strindex: int = 0
    start_line: Int64 = 0


class Mapping(OtlpModel):
    memory_start: Int64 = 0
    memory_limit: Int64 = 0
    file_offset: Int64 = 0
    filename_strindex: int = 0
    has_functions: bool = False
    has_filenames: bool = False
    has_line_numbers: bool = False
    has_inline_frames: bool = False


class Line(OtlpModel):
    function_index: int = 0
    line: Int64 = 0
    column: Int64 = 0


class Location(OtlpModel):
    mapping_index: Optional[int] = None
    address: Int64 = 0
    line: List[Line] = Field(default_factory=list)
    is_folded: bool = False
    attribute_indices: List[int] = Field(default_factory=list)


class Link(OtlpModel):
    trace_id: Bytes = b""
    span_id: Bytes = b""


class ProfilesDictionary(OtlpModel):
    """Batch-wide deduplicated tables, addressed by position."""

    mapping_table: List[Mapping] = Field(default_factory=list)
    location_table: List[Location] = Field(default_factory=list)
    function_table: List[Function] = Field(default_factory=list)
    link_table: List[Link] = Field(default_factory=list)
    string_table: List[str] = Field(default_factory=list)
    attribute_table: List[KeyValue] = Field(default_factory=list)


# ── Profiles ─────────────────────────────────────────────────────────────────

class ValueType(OtlpModel):
    type_strindex: int = 0
    unit_strindex: int = 0
    aggregation_temporality: Temporality = AggregationTemporality.UNSPECIFIED


class Sample(OtlpModel):
    locations_start_index: int = 0
    locations_length: int = 0
    value: List[Int64] = Field(default_factory=list)
    attribute_indices: List[int] = Field(default_factory=list)
    link_index: Optional[int] = None
    timestamps_unix_nano: List[Int64] = Field(default_factory=list)


class Profile(OtlpModel):
    sample_type: List[ValueType] = Field(default_factory=list)
    sample: List[Sample] = Field(default_factory=list)
    location_indices: List[int] = Field(default_factory=list)
    time_nanos: Int64 = 0
    duration_nanos: Int64 = 0
    period_type: Optional[ValueType] = None
    period: Int64 = 0
    comment_strindices: List[int] = Field(default_factory=list)
    default_sample_type_index: int = 0
    profile_id: Bytes = b""
    dropped_attributes_count: int = 0
    original_payload_format: str = ""
    original_payload: Bytes = b""
    attribute_indices: List[int] = Field(default_factory=list)


class ScopeProfiles(OtlpModel):
    scope: Optional[InstrumentationScope] = None
    profiles: List[Profile] = Field(default_factory=list)
    schema_url: str = ""


class ResourceProfiles(OtlpModel):
    resource: Optional[Resource] = None
    scope_profiles: List[ScopeProfiles] = Field(default_factory=list)
    schema_url: str = ""


class ProfilesData(OtlpModel):
    resource_profiles: List[ResourceProfiles] = Field(default_factory=list)
    dictionary: ProfilesDictionary = Field(default_factory=ProfilesDictionary)
