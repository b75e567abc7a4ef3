"""
Common — OTLP ``common/v1`` and ``resource/v1`` models shared by both
profile schemas, plus the protojson wire scalars.

protojson conventions handled here:
  - field names are lowerCamelCase (original snake_case names also accepted)
  - 64-bit integers are JSON strings on output, strings or numbers on input
  - ``bytes`` are base64 (standard on output, standard or URL-safe on input)
  - enums are emitted by name, accepted by name or number
  - non-finite doubles are the strings "NaN", "Infinity", "-Infinity"
"""
from __future__ import annotations

import base64
import binascii
import math
from enum import IntEnum
from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


# ── Wire scalars ─────────────────────────────────────────────────────────────

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def _int64_to_json(value: int) -> str:
    return str(value)


def _bytes_from_json(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    padded = value + "=" * (-len(value) % 4)
    if "-" in value or "_" in value:
        padded = padded.translate(_URLSAFE_TO_STANDARD)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid base64 bytes field: {exc}") from exc


def _bytes_to_json(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


def _double_to_json(value: float) -> Union[float, str]:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return value


Int64 = Annotated[int, PlainSerializer(_int64_to_json, return_type=str, when_used="json")]
"""int64 / uint64 / fixed64, a decimal string in JSON."""

Bytes = Annotated[
    bytes,
    BeforeValidator(_bytes_from_json),
    PlainSerializer(_bytes_to_json, return_type=str, when_used="json"),
]

Double = Annotated[float, PlainSerializer(_double_to_json, when_used="json")]
"""double; NaN and infinities become the protojson strings in JSON."""


class AggregationTemporality(IntEnum):
    UNSPECIFIED = 0
    DELTA = 1
    CUMULATIVE = 2


_TEMPORALITY_PREFIX = "AGGREGATION_TEMPORALITY_"


def _temporality_from_json(value: Any) -> Any:
    if isinstance(value, str) and value.lstrip("-").isdigit():
        return int(value)
    if isinstance(value, str):
        name = value[len(_TEMPORALITY_PREFIX):] if value.startswith(_TEMPORALITY_PREFIX) else value
        try:
            return AggregationTemporality[name]
        except KeyError:
            raise ValueError(f"unknown aggregation temporality: {value!r}") from None
    return value


def _temporality_to_json(value: AggregationTemporality) -> str:
    return _TEMPORALITY_PREFIX + AggregationTemporality(value).name


Temporality = Annotated[
    AggregationTemporality,
    BeforeValidator(_temporality_from_json),
    PlainSerializer(_temporality_to_json, return_type=str, when_used="json"),
]


# ── Base model ───────────────────────────────────────────────────────────────

class OtlpModel(BaseModel):
    """Base for every OTLP message: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ── common/v1 ────────────────────────────────────────────────────────────────

class AnyValue(OtlpModel):
    """``oneof value``: exactly one field is expected to be set."""

    string_value: Optional[str] = None
    bool_value: Optional[bool] = None
    int_value: Optional[Int64] = None
    double_value: Optional[Double] = None
    array_value: Optional[ArrayValue] = None
    kvlist_value: Optional[KeyValueList] = None
    bytes_value: Optional[Bytes] = None


class ArrayValue(OtlpModel):
    values: List[AnyValue] = Field(default_factory=list)


class KeyValueList(OtlpModel):
    values: List[KeyValue] = Field(default_factory=list)


class KeyValue(OtlpModel):
    key: str = ""
    value: Optional[AnyValue] = None


class InstrumentationScope(OtlpModel):
    name: str = ""
    version: str = ""
    attributes: List[KeyValue] = Field(default_factory=list)
    dropped_attributes_count: int = 0


# ── resource/v1 ──────────────────────────────────────────────────────────────

class Resource(OtlpModel):
    attributes: List[KeyValue] = Field(default_factory=list)
    dropped_attributes_count: int = 0


AnyValue.model_rebuild()
ArrayValue.model_rebuild()
KeyValueList.model_rebuild()
KeyValue.model_rebuild()
