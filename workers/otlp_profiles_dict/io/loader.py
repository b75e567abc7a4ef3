"""
Loader — decode a v1experimental ``ProfilesData`` protojson document.

The whole buffer is decoded at once; there is no streaming.  Field names
may be lowerCamelCase (protojson) or the original snake_case; unknown
fields are ignored.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from otlp_profiles_dict.errors import DecodeError
from otlp_profiles_dict.io.experimental import ProfilesData

logger = logging.getLogger(__name__)


def decode_profiles_data(payload: Union[bytes, str]) -> ProfilesData:
    """
    Parse one protojson buffer into the source representation.

    Raises DecodeError if the buffer is not JSON or does not match the
    v1experimental shape.
    """
    if not payload or not payload.strip():
        raise DecodeError("empty input: expected a ProfilesData JSON document")
    try:
        data = ProfilesData.model_validate_json(payload)
    except ValidationError as exc:
        raise DecodeError(
            f"invalid v1experimental ProfilesData: {exc.error_count()} error(s)\n{exc}"
        ) from exc
    logger.debug(
        "decoded %d bytes: %d resource profiles",
        len(payload), len(data.resource_profiles),
    )
    return data


def load_profiles_data(path: Path) -> ProfilesData:
    """Read *path* and decode it."""
    return decode_profiles_data(path.read_bytes())
