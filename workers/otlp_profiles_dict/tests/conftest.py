"""
Shared pytest fixtures for otlp_profiles_dict tests.

All fixtures are pure-Python dicts in the v1experimental shape (snake_case
field names, which the models accept alongside protojson camelCase).
``make_batch`` wraps profile containers into a validated ProfilesData.
"""
import pytest

from otlp_profiles_dict.io import experimental as exp


# ── Profile containers ──────────────────────────────────────────────────────

@pytest.fixture
def simple_container():
    """One profile: one mapping, one function, one location, one sample."""
    return {
        "profile_id": bytes(range(16)),
        "start_time_unix_nano": 1_000,
        "end_time_unix_nano": 4_000,
        "dropped_attributes_count": 2,
        "original_payload_format": "pprof",
        "original_payload": b"\x1f\x8b raw",
        "profile": {
            "string_table": ["", "samples", "count", "main", "main.c", "/bin/app"],
            "sample_type": [
                {"type": 1, "unit": 2, "aggregation_temporality": 2},
            ],
            "period_type": {"type": 1, "unit": 2},
            "period": 10,
            "comment": [3],
            "default_sample_type": 1,
            "mapping": [
                {
                    "memory_start": 0x1000,
                    "memory_limit": 0x2000,
                    "file_offset": 0,
                    "filename": 5,
                    "has_functions": True,
                },
            ],
            "function": [
                {"name": 3, "system_name": 3, "filename": 4, "start_line": 7},
            ],
            "location": [
                {
                    "mapping_index": 0,
                    "address": 0x1010,
                    "line": [{"function_index": 0, "line": 9, "column": 2}],
                    "is_folded": True,
                },
            ],
            "sample": [
                {
                    "locations_start_index": 0,
                    "locations_length": 1,
                    "value": [5, -3],
                    "timestamps_unix_nano": [1_500, 2_500],
                },
            ],
        },
    }


@pytest.fixture
def shared_function_containers():
    """
    Two profiles defining the same function (name "main", filename
    "main.c", start line 1) through different local string positions.
    """
    first = {
        "start_time_unix_nano": 100,
        "end_time_unix_nano": 150,
        "profile": {
            "string_table": ["", "main", "main.c"],
            "function": [{"name": 1, "system_name": 1, "filename": 2, "start_line": 1}],
            "location": [
                {"address": 0x10, "line": [{"function_index": 0, "line": 3}]},
            ],
            "sample": [{"locations_start_index": 0, "locations_length": 1, "value": [1]}],
        },
    }
    second = {
        "start_time_unix_nano": 200,
        "end_time_unix_nano": 260,
        "profile": {
            "string_table": ["", "main.c", "other", "main"],
            "function": [{"name": 3, "system_name": 3, "filename": 1, "start_line": 1}],
            "location": [
                {"address": 0x20, "line": [{"function_index": 0, "line": 4}]},
            ],
            "sample": [{"locations_start_index": 0, "locations_length": 1, "value": [2]}],
        },
    }
    return [first, second]


@pytest.fixture
def attributes_container():
    """Profile exercising attribute and link tables."""
    return {
        "attributes": [
            {"key": "thread.name", "value": {"string_value": "worker-1"}},
        ],
        "profile": {
            "string_table": ["", "lib.so"],
            "attribute_table": [
                {"key": "build", "value": {"string_value": "abc"}},
                {"key": "cpu", "value": {"int_value": 3}},
            ],
            "link_table": [
                {"trace_id": b"\x01" * 16, "span_id": b"\x02" * 8},
            ],
            "mapping": [
                {"memory_start": 0x1000, "memory_limit": 0x2000, "filename": 1, "attributes": [0]},
            ],
            "location": [
                {"mapping_index": 0, "address": 0x1100, "attributes": [1]},
            ],
            "sample": [
                {"locations_start_index": 0, "locations_length": 1, "value": [1], "link": 0, "attributes": [1]},
                {"locations_start_index": 0, "locations_length": 1, "value": [2], "link": 7},
            ],
        },
    }


# ── Batch builder ────────────────────────────────────────────────────────────

@pytest.fixture
def make_batch():
    """
    Build a validated v1experimental ProfilesData.

    ``make_batch(c1, c2)`` puts every container in one resource / one
    scope; ``make_batch([c1], [c2])`` puts each list in its own resource.
    """
    def _make(*groups):
        if groups and isinstance(groups[0], dict):
            groups = (list(groups),)
        return exp.ProfilesData.model_validate({
            "resource_profiles": [
                {
                    "resource": {
                        "attributes": [
                            {"key": "service.name", "value": {"string_value": f"svc-{i}"}},
                        ],
                    },
                    "schema_url": f"https://example.test/resource/{i}",
                    "scope_profiles": [
                        {
                            "scope": {"name": "profiler", "version": "1.0"},
                            "schema_url": "https://example.test/scope",
                            "profiles": list(containers),
                        },
                    ],
                }
                for i, containers in enumerate(groups)
            ],
        })

    return _make
