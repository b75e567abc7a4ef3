"""
Writer — encode the converted v1development batch as protojson, and
the conversion report as plain JSON.

protojson output rules: lowerCamelCase names, default-valued fields
omitted, optional fields (``mappingIndex``, ``linkIndex``) emitted
whenever set, 64-bit integers as strings, bytes as standard base64.
"""
import json
from pathlib import Path
from typing import Optional

from pydantic_core import PydanticSerializationError

from otlp_profiles_dict.errors import EncodeError
from otlp_profiles_dict.io.development import ProfilesData
from otlp_profiles_dict.io.schema import ConversionReport


def encode_profiles_data(data: ProfilesData, pretty: bool = False) -> bytes:
    """Serialize *data*; raises EncodeError if it cannot be encoded."""
    try:
        doc = data.model_dump(mode="json", by_alias=True, exclude_defaults=True)
        if pretty:
            text = json.dumps(doc, indent=2, allow_nan=False) + "\n"
        else:
            text = json.dumps(doc, separators=(",", ":"), allow_nan=False)
    except (PydanticSerializationError, ValueError) as exc:
        raise EncodeError(f"cannot encode ProfilesData: {exc}") from exc
    return text.encode("utf-8")


def encode_report(report: ConversionReport) -> bytes:
    try:
        text = json.dumps(
            report.model_dump(mode="json"), indent=2, sort_keys=True, allow_nan=False,
        )
    except ValueError as exc:
        raise EncodeError(f"cannot encode conversion report: {exc}") from exc
    return (text + "\n").encode("utf-8")


def write_outputs(
    data: ProfilesData,
    output_path: Path,
    report: Optional[ConversionReport] = None,
    report_path: Optional[Path] = None,
    pretty: bool = False,
) -> Path:
    """
    Write the converted batch to *output_path* and, when both are given,
    the report to *report_path*.

    Everything is encoded before anything is written, so an encode
    failure leaves no partial output.  Creates parent directories.
    Returns *output_path*.
    """
    payload = encode_profiles_data(data, pretty=pretty)
    report_payload = encode_report(report) if report is not None and report_path else None

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(payload)

    if report_payload is not None and report_path is not None:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_bytes(report_payload)

    return output_path
