"""
Source data contract — OTLP ``profiles/v1experimental``.

Every ``ProfileContainer`` carries a pprof-extended ``Profile`` with its
own private tables.  All ``*_index`` / table-reference fields below are
positions into the *same profile's* tables; ``string_table[0]`` is the
empty string by convention.
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


class ValueType(OtlpModel):
    type: Int64 = 0
    unit: Int64 = 0
    aggregation_temporality: Temporality = AggregationTemporality.UNSPECIFIED


class Label(OtlpModel):
    key: Int64 = 0
    str_: Int64 = Field(0, alias="str")
    num: Int64 = 0
    num_unit: Int64 = 0


class Sample(OtlpModel):
    location_index: List[Int64] = Field(default_factory=list)
    locations_start_index: Int64 = 0
    locations_length: Int64 = 0
    stacktrace_id_index: int = 0
    value: List[Int64] = Field(default_factory=list)
    label: List[Label] = Field(default_factory=list)
    attributes: List[Int64] = Field(default_factory=list)
    link: Int64 = 0
    timestamps_unix_nano: List[Int64] = Field(default_factory=list)


class Mapping(OtlpModel):
    id: Int64 = 0
    memory_start: Int64 = 0
    memory_limit: Int64 = 0
    file_offset: Int64 = 0
    filename: Int64 = 0
    build_id: Int64 = 0
    attributes: List[Int64] = Field(default_factory=list)
    has_functions: bool = False
    has_filenames: bool = False
    has_line_numbers: bool = False
    has_inline_frames: bool = False


class Line(OtlpModel):
    function_index: Int64 = 0
    line: Int64 = 0
    column: Int64 = 0


class Location(OtlpModel):
    id: Int64 = 0
    mapping_index: Int64 = 0
    address: Int64 = 0
    line: List[Line] = Field(default_factory=list)
    is_folded: bool = False
    type_index: int = 0
    attributes: List[Int64] = Field(default_factory=list)


class Function(OtlpModel):
    id: Int64 = 0
    name: Int64 = 0
    system_name: Int64 = 0
    filename: Int64 = 0
    start_line: Int64 = 0


class Link(OtlpModel):
    trace_id: Bytes = b""
    span_id: Bytes = b""


class Profile(OtlpModel):
    """pprof-extended profile: samples plus the profile-local tables."""

    sample_type: List[ValueType] = Field(default_factory=list)
    sample: List[Sample] = Field(default_factory=list)
    mapping: List[Mapping] = Field(default_factory=list)
    location: List[Location] = Field(default_factory=list)
    location_indices: List[Int64] = Field(default_factory=list)
    function: List[Function] = Field(default_factory=list)
    attribute_table: List[KeyValue] = Field(default_factory=list)
    link_table: List[Link] = Field(default_factory=list)
    string_table: List[str] = Field(default_factory=list)
    drop_frames: Int64 = 0
    keep_frames: Int64 = 0
    time_nanos: Int64 = 0
    duration_nanos: Int64 = 0
    period_type: Optional[ValueType] = None
    period: Int64 = 0
    comment: List[Int64] = Field(default_factory=list)
    default_sample_type: Int64 = 0


class ProfileContainer(OtlpModel):
    profile_id: Bytes = b""
    start_time_unix_nano: Int64 = 0
    end_time_unix_nano: Int64 = 0
    attributes: List[KeyValue] = Field(default_factory=list)
    dropped_attributes_count: int = 0
    original_payload_format: str = ""
    original_payload: Bytes = b""
    profile: Profile = Field(default_factory=Profile)


class ScopeProfiles(OtlpModel):
    scope: Optional[InstrumentationScope] = None
    profiles: List[ProfileContainer] = Field(default_factory=list)
    schema_url: str = ""


class ResourceProfiles(OtlpModel):
    resource: Optional[Resource] = None
    scope_profiles: List[ScopeProfiles] = Field(default_factory=list)
    schema_url: str = ""


class ProfilesData(OtlpModel):
    resource_profiles: List[ResourceProfiles] = Field(default_factory=list)
