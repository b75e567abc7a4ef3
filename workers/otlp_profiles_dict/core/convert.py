"""
Conversion orchestration — walk resource → scope → profile, converting
every profile against one shared dictionary, and assemble the
v1development batch plus a conversion report.

Traversal order fixes dictionary insertion order and therefore every
emitted index; the same input always yields the same output.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import List, NamedTuple, Optional

from otlp_profiles_dict.core.interning import InterningStore
from otlp_profiles_dict.core.invariants import check_invariants
from otlp_profiles_dict.core.profile_convert import convert_profile
from otlp_profiles_dict.core.resolvers import ReferenceResolvers
from otlp_profiles_dict.io import development as dev
from otlp_profiles_dict.io import experimental as exp
from otlp_profiles_dict.io.schema import (
    ConversionReport,
    TableStats,
    UnresolvedReference,
)
from otlp_profiles_dict.policy.profile import ConversionProfile

log = logging.getLogger(__name__)


class ConversionResult(NamedTuple):
    data: dev.ProfilesData
    report: ConversionReport


class _Batch:
    """Mutable state of one batch conversion."""

    def __init__(self, profile: ConversionProfile):
        self.store = InterningStore()
        self.resolvers = ReferenceResolvers(self.store, profile)
        self.report = ConversionReport(profile_id=profile.profile_id)


def _convert_profiles(
    containers: List[exp.ProfileContainer],
    batch: _Batch,
    resource_index: int,
    scope_index: int,
) -> List[dev.Profile]:
    out: List[dev.Profile] = []
    for profile_index, container in enumerate(containers):
        unresolved: List[UnresolvedReference] = []
        out.append(convert_profile(container, batch.store, batch.resolvers, unresolved))
        for ref in unresolved:
            ref.resource_index = resource_index
            ref.scope_index = scope_index
            ref.profile_index = profile_index
        batch.report.unresolved.extend(unresolved)
        batch.report.profile_count += 1
    return out


def _convert_scope_profiles(
    scopes: List[exp.ScopeProfiles],
    batch: _Batch,
    resource_index: int,
) -> List[dev.ScopeProfiles]:
    out: List[dev.ScopeProfiles] = []
    for scope_index, xsp in enumerate(scopes):
        out.append(dev.ScopeProfiles(
            scope=xsp.scope,
            profiles=_convert_profiles(xsp.profiles, batch, resource_index, scope_index),
            schema_url=xsp.schema_url,
        ))
        batch.report.scope_count += 1
    return out


def _convert_resource_profiles(
    xrp: exp.ResourceProfiles,
    batch: _Batch,
    resource_index: int,
) -> dev.ResourceProfiles:
    out = dev.ResourceProfiles(
        resource=xrp.resource,
        scope_profiles=_convert_scope_profiles(xrp.scope_profiles, batch, resource_index),
        schema_url=xrp.schema_url,
    )
    batch.report.resource_count += 1
    return out


def convert_profiles_data(
    source: exp.ProfilesData,
    profile: Optional[ConversionProfile] = None,
) -> ConversionResult:
    """
    Convert a v1experimental batch into a v1development batch.

    Parameters
    ----------
    source : exp.ProfilesData
        Decoded input batch.  Not modified.
    profile : ConversionProfile, optional
        Resolution configuration.  Defaults to ConversionProfile.v0().

    Returns
    -------
    ConversionResult
        ``(data, report)``; ``data.dictionary`` is the single shared
        dictionary every converted profile indexes into.

    Raises
    ------
    ConversionError
        A profile references a local string or attribute that does not
        exist.
    """
    if profile is None:
        profile = ConversionProfile.v0()

    batch = _Batch(profile)

    resource_profiles = [
        _convert_resource_profiles(xrp, batch, resource_index)
        for resource_index, xrp in enumerate(source.resource_profiles)
    ]
    data = dev.ProfilesData(
        resource_profiles=resource_profiles,
        dictionary=batch.store.to_dictionary(),
    )

    report = batch.report
    report.tables = {
        name: TableStats(size=len(table), inserted=table.inserted, reused=table.reused)
        for name, table in batch.store.tables().items()
    }
    report.unresolved_counts = dict(Counter(ref.kind.value for ref in report.unresolved))
    report.invariant_violations = check_invariants(data)

    if report.unresolved:
        log.warning(
            "%d unresolved references degraded: %s",
            len(report.unresolved), report.unresolved_counts,
        )
    log.info(
        "converted %d profiles (%d resources, %d scopes); dictionary: %s",
        report.profile_count,
        report.resource_count,
        report.scope_count,
        {name: stats.size for name, stats in report.tables.items()},
    )
    return ConversionResult(data=data, report=report)
