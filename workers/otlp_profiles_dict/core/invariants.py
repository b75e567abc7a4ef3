"""
Invariants — post-conversion checks on a v1development batch.

  - every emitted index is inside the dictionary table it references
  - no dictionary table holds two equal entries

Each check logs a warning and returns a violation dict; violations are
attached to the conversion report.  An empty sample slice
(``locations_length == 0``) references no location, so its start index
is not checked.

Pure functions, no IO.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Tuple

from otlp_profiles_dict.core.interning import canonical_key
from otlp_profiles_dict.io import development as dev

log = logging.getLogger(__name__)

# (path, index, table name)
_Ref = Tuple[str, int, str]


def check_invariants(data: dev.ProfilesData) -> List[Dict[str, Any]]:
    """Run all invariant checks.  Returns a list of violation dicts."""
    violations: List[Dict[str, Any]] = []
    violations.extend(_check_index_bounds(data))
    violations.extend(_check_no_duplicates(data.dictionary))
    if violations:
        log.warning("Invariant violations detected: %d", len(violations))
    else:
        log.debug("All invariant checks passed")
    return violations


# ── Index validity ───────────────────────────────────────────────────────────

def _dictionary_refs(d: dev.ProfilesDictionary) -> Iterator[_Ref]:
    for i, f in enumerate(d.function_table):
        yield f"function_table[{i}].name_strindex", f.name_strindex, "string_table"
        yield f"function_table[{i}].system_name_strindex", f.system_name_strindex, "string_table"
        yield f"function_table[{i}].filename_strindex", f.filename_strindex, "string_table"
    for i, m in enumerate(d.mapping_table):
        yield f"mapping_table[{i}].filename_strindex", m.filename_strindex, "string_table"
    for i, loc in enumerate(d.location_table):
        if loc.mapping_index is not None:
            yield f"location_table[{i}].mapping_index", loc.mapping_index, "mapping_table"
        for j, line in enumerate(loc.line):
            yield f"location_table[{i}].line[{j}].function_index", line.function_index, "function_table"
        for j, a in enumerate(loc.attribute_indices):
            yield f"location_table[{i}].attribute_indices[{j}]", a, "attribute_table"


def _value_type_refs(prefix: str, vt: dev.ValueType) -> Iterator[_Ref]:
    yield f"{prefix}.type_strindex", vt.type_strindex, "string_table"
    yield f"{prefix}.unit_strindex", vt.unit_strindex, "string_table"


def _profile_refs(prefix: str, p: dev.Profile) -> Iterator[_Ref]:
    for i, vt in enumerate(p.sample_type):
        yield from _value_type_refs(f"{prefix}.sample_type[{i}]", vt)
    if p.period_type is not None:
        yield from _value_type_refs(f"{prefix}.period_type", p.period_type)
    for i, s in enumerate(p.comment_strindices):
        yield f"{prefix}.comment_strindices[{i}]", s, "string_table"
    yield f"{prefix}.default_sample_type_index", p.default_sample_type_index, "string_table"
    for i, loc in enumerate(p.location_indices):
        yield f"{prefix}.location_indices[{i}]", loc, "location_table"
    for i, a in enumerate(p.attribute_indices):
        yield f"{prefix}.attribute_indices[{i}]", a, "attribute_table"
    for i, sample in enumerate(p.sample):
        sp = f"{prefix}.sample[{i}]"
        if sample.locations_length > 0:
            yield f"{sp}.locations_start_index", sample.locations_start_index, "location_table"
        for j, a in enumerate(sample.attribute_indices):
            yield f"{sp}.attribute_indices[{j}]", a, "attribute_table"
        if sample.link_index is not None:
            yield f"{sp}.link_index", sample.link_index, "link_table"


def _all_refs(data: dev.ProfilesData) -> Iterator[_Ref]:
    yield from _dictionary_refs(data.dictionary)
    for r, rp in enumerate(data.resource_profiles):
        for s, sp in enumerate(rp.scope_profiles):
            for p, profile in enumerate(sp.profiles):
                yield from _profile_refs(
                    f"resource_profiles[{r}].scope_profiles[{s}].profiles[{p}]",
                    profile,
                )


def _check_index_bounds(data: dev.ProfilesData) -> List[Dict[str, Any]]:
    """Every index must address an existing dictionary entry."""
    sizes = {
        "string_table": len(data.dictionary.string_table),
        "function_table": len(data.dictionary.function_table),
        "mapping_table": len(data.dictionary.mapping_table),
        "location_table": len(data.dictionary.location_table),
        "attribute_table": len(data.dictionary.attribute_table),
        "link_table": len(data.dictionary.link_table),
    }
    bad = [
        f"{path}={index} (>= {sizes[table]})"
        for path, index, table in _all_refs(data)
        if not 0 <= index < sizes[table]
    ]
    if bad:
        msg = f"dangling dictionary indices: {bad}"
        log.warning("INVARIANT: %s", msg)
        return [{"check": "index_bounds", "ids": bad, "message": msg}]
    return []


# ── No duplicates ────────────────────────────────────────────────────────────

def _check_no_duplicates(d: dev.ProfilesDictionary) -> List[Dict[str, Any]]:
    """No table may hold two structurally equal entries."""
    tables = {
        "string_table": list(d.string_table),
        "function_table": [canonical_key(e) for e in d.function_table],
        "mapping_table": [canonical_key(e) for e in d.mapping_table],
        "location_table": [canonical_key(e) for e in d.location_table],
        "attribute_table": [canonical_key(e) for e in d.attribute_table],
        "link_table": [canonical_key(e) for e in d.link_table],
    }
    violations: List[Dict[str, Any]] = []
    for name, keys in tables.items():
        first: Dict[Any, int] = {}
        dupes: List[str] = []
        for position, key in enumerate(keys):
            if key in first:
                dupes.append(f"{name}[{position}] == {name}[{first[key]}]")
            else:
                first[key] = position
        if dupes:
            msg = f"duplicate {name} entries: {dupes}"
            log.warning("INVARIANT: %s", msg)
            violations.append({"check": "no_duplicates", "ids": dupes, "message": msg})
    return violations
