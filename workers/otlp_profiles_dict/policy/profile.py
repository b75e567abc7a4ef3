"""
Profile — frozen configuration for otlp_profiles_dict.

The conversion has no tunable numeric parameters; the only choices are
how loosely later structures re-derive references to entities that an
earlier step already interned.  ``v0()`` reproduces the historical
behaviour and is the default everywhere.

Contract: the profile_id uniquely identifies the configuration and is
recorded in every conversion report.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResolutionMode(str, Enum):
    """How a reference to an already-interned entity is re-derived.

    LOOSE
        Match against the whole shared table by a partial key
        (mappings: memory start + limit + file offset; sample
        locations: address only).  First match in table order wins.
    EXACT
        Use the shared index recorded when the referenced local entity
        of the same profile was interned.
    """

    LOOSE = "LOOSE"
    EXACT = "EXACT"


@dataclass(frozen=True)
class ConversionProfile:
    """Immutable conversion configuration."""

    # ── Reference resolution ─────────────────────────────────────────
    mapping_resolution: ResolutionMode = ResolutionMode.LOOSE
    location_resolution: ResolutionMode = ResolutionMode.LOOSE

    # ── Identity ─────────────────────────────────────────────────────
    profile_id: str = "otlp-profiles-dict-v0"

    @classmethod
    def v0(cls) -> ConversionProfile:
        """Return the canonical v0 profile (loose resolvers)."""
        return cls()

    @classmethod
    def exact(cls) -> ConversionProfile:
        """Positional resolution for both mappings and sample locations."""
        return cls(
            mapping_resolution=ResolutionMode.EXACT,
            location_resolution=ResolutionMode.EXACT,
            profile_id="otlp-profiles-dict-exact",
        )

    @classmethod
    def from_modes(
        cls,
        mapping_resolution: ResolutionMode,
        location_resolution: ResolutionMode,
    ) -> ConversionProfile:
        """Build a profile from explicit modes; profile_id encodes both."""
        if (mapping_resolution, location_resolution) == (
            ResolutionMode.LOOSE, ResolutionMode.LOOSE,
        ):
            return cls.v0()
        if (mapping_resolution, location_resolution) == (
            ResolutionMode.EXACT, ResolutionMode.EXACT,
        ):
            return cls.exact()
        return cls(
            mapping_resolution=mapping_resolution,
            location_resolution=location_resolution,
            profile_id=(
                "otlp-profiles-dict-"
                f"map-{mapping_resolution.value.lower()}-"
                f"loc-{location_resolution.value.lower()}"
            ),
        )
