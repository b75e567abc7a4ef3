"""
Schema — Pydantic model for the conversion report.

The converted batch itself is ``io.development.ProfilesData``; the report
is a side output describing what the conversion did:

  - dictionary table sizes and insert / reuse counts per table
  - every reference that could not be resolved (and was degraded)
  - post-conversion invariant violations

Runtime contract fields (present in every report):
  package_name, converter_version, profile_id, schema_version.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from otlp_profiles_dict import CONVERTER_VERSION, PACKAGE_NAME, SCHEMA_VERSION


# ── Enums ────────────────────────────────────────────────────────────────────

class ReferenceKind(str, Enum):
    LOCATION_MAPPING = "LOCATION_MAPPING"       # Location.mapping_index → omitted
    LINE_FUNCTION = "LINE_FUNCTION"             # Line.function_index → 0
    SAMPLE_LOCATION = "SAMPLE_LOCATION"         # Sample.locations_start_index → 0


class UnresolvedReason(str, Enum):
    OUT_OF_RANGE = "OUT_OF_RANGE"     # local position outside the local table
    NO_MATCH = "NO_MATCH"             # no shared entry matched the resolver key


# ── Unresolved reference ─────────────────────────────────────────────────────

class UnresolvedReference(BaseModel):
    """One cross-reference that was degraded instead of resolved."""

    kind: ReferenceKind
    reason: UnresolvedReason
    resource_index: int = 0
    scope_index: int = 0
    profile_index: int = 0
    entity_index: int = 0          # local position of the referencing entity
    local_index: int = 0           # local position it referenced


# ── Table statistics ─────────────────────────────────────────────────────────

class TableStats(BaseModel):
    size: int = 0
    inserted: int = 0
    reused: int = 0


# ── Top-level report ────────────────────────────────────────────────────────

class ConversionReport(BaseModel):
    """conversion_report.json: summary of one batch conversion."""

    package_name: str = PACKAGE_NAME
    converter_version: str = CONVERTER_VERSION
    schema_version: str = SCHEMA_VERSION
    profile_id: str = "otlp-profiles-dict-v0"

    resource_count: int = 0
    scope_count: int = 0
    profile_count: int = 0

    tables: Dict[str, TableStats] = Field(default_factory=dict)

    unresolved: List[UnresolvedReference] = Field(default_factory=list)
    unresolved_counts: Dict[str, int] = Field(default_factory=dict)

    invariant_violations: List[Dict[str, Any]] = Field(default_factory=list)

    # NOTE: timestamp is the only field that differs between two runs over
    # the same input; the converted batch itself is fully deterministic.
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
