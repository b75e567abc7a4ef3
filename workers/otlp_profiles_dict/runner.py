"""
Runner — top-level orchestration: protojson bytes in → converted
protojson bytes out.

Ties together loader, core conversion and writer.  Called from the API
endpoint, from the CLI, or programmatically.  Errors surface as
``DecodeError`` / ``ConversionError`` / ``EncodeError``; the caller
decides whether to abort or report.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from otlp_profiles_dict.core.convert import ConversionResult, convert_profiles_data
from otlp_profiles_dict.errors import ConversionError, DecodeError, EncodeError
from otlp_profiles_dict.io.loader import decode_profiles_data, load_profiles_data
from otlp_profiles_dict.io.writer import encode_profiles_data, encode_report, write_outputs
from otlp_profiles_dict.policy.profile import ConversionProfile, ResolutionMode

logger = logging.getLogger(__name__)


# ── Public API ───────────────────────────────────────────────────────────────

def run_convert_from_bytes(
    payload: bytes,
    profile: Optional[ConversionProfile] = None,
    pretty: bool = False,
) -> Tuple[bytes, ConversionResult]:
    """
    Decode, convert and re-encode one batch held in memory.

    Returns
    -------
    (encoded_output, ConversionResult)
    """
    source = decode_profiles_data(payload)
    result = convert_profiles_data(source, profile)
    return encode_profiles_data(result.data, pretty=pretty), result


def run_convert_from_paths(
    input_path: Path,
    output_path: Path,
    profile: Optional[ConversionProfile] = None,
    report_path: Optional[Path] = None,
    pretty: bool = False,
) -> ConversionResult:
    """
    Convert the batch in *input_path* and write it to *output_path*.

    Parameters
    ----------
    input_path : Path
        v1experimental protojson document.
    output_path : Path
        Destination of the v1development protojson document.
    profile : ConversionProfile, optional
        Defaults to ConversionProfile.v0().
    report_path : Path, optional
        If given, the conversion report is written there as well.
    pretty : bool
        Indent the output document.
    """
    source = load_profiles_data(input_path)
    result = convert_profiles_data(source, profile)
    write_outputs(
        result.data,
        output_path,
        report=result.report,
        report_path=report_path,
        pretty=pretty,
    )
    logger.info("converted batch written to %s", output_path)
    return result


# ── CLI ──────────────────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "otlp_profiles_dict — convert OTLP profiles v1experimental "
            "(per-profile tables) to v1development (shared dictionary)"
        ),
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=None,
        help="v1experimental ProfilesData JSON (default: stdin)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Where to write the v1development JSON (default: stdout)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Also write the conversion report JSON to this path",
    )
    parser.add_argument(
        "--exact-mappings",
        action="store_true",
        help="Resolve location→mapping references positionally instead of "
             "by (memory start, limit, file offset)",
    )
    parser.add_argument(
        "--exact-locations",
        action="store_true",
        help="Resolve sample→location references positionally instead of "
             "by address",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the output document",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv=None) -> int:
    """CLI entry point for otlp_profiles_dict."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    profile = ConversionProfile.from_modes(
        mapping_resolution=(
            ResolutionMode.EXACT if args.exact_mappings else ResolutionMode.LOOSE
        ),
        location_resolution=(
            ResolutionMode.EXACT if args.exact_locations else ResolutionMode.LOOSE
        ),
    )

    if args.input is not None and not args.input.exists():
        logger.error("File not found: %s", args.input)
        return 1

    try:
        payload = args.input.read_bytes() if args.input else sys.stdin.buffer.read()
        output, result = run_convert_from_bytes(payload, profile, pretty=args.pretty)
        report_payload = encode_report(result.report) if args.report else None
    except DecodeError as e:
        logger.error("Failed to decode input: %s", e)
        return 1
    except ConversionError as e:
        logger.error("Failed to convert batch: %s", e)
        return 1
    except EncodeError as e:
        logger.error("Failed to encode output: %s", e)
        return 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(output)
    else:
        sys.stdout.buffer.write(output)
        sys.stdout.flush()

    if report_payload is not None:
        args.report.parent.mkdir(parents=True, exist_ok=True)
        args.report.write_bytes(report_payload)

    report = result.report
    logger.info(
        "Profiles: %d, unresolved references: %d, invariant violations: %d",
        report.profile_count,
        len(report.unresolved),
        len(report.invariant_violations),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
