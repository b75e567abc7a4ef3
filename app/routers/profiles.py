"""
Profiles Router
OTLP profiles v1experimental → v1development dictionary conversion.

Runs the otlp_profiles_dict package over a protojson document posted as
the raw request body.  Nothing is written to disk.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from otlp_profiles_dict.errors import ConversionError, DecodeError, EncodeError  # type: ignore
from otlp_profiles_dict.io.schema import ConversionReport  # type: ignore
from otlp_profiles_dict.policy.profile import ConversionProfile, ResolutionMode  # type: ignore
from otlp_profiles_dict.runner import run_convert_from_bytes  # type: ignore

from app.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def _conversion_profile(
    exact_mappings: Optional[bool],
    exact_locations: Optional[bool],
) -> ConversionProfile:
    """Query parameters override the service-wide defaults from settings."""
    mapping_mode = settings.MAPPING_RESOLUTION
    location_mode = settings.LOCATION_RESOLUTION
    if exact_mappings is not None:
        mapping_mode = ResolutionMode.EXACT if exact_mappings else ResolutionMode.LOOSE
    if exact_locations is not None:
        location_mode = ResolutionMode.EXACT if exact_locations else ResolutionMode.LOOSE
    return ConversionProfile.from_modes(mapping_mode, location_mode)


async def _convert(
    request: Request,
    exact_mappings: Optional[bool],
    exact_locations: Optional[bool],
):
    payload = await request.body()
    profile = _conversion_profile(exact_mappings, exact_locations)
    try:
        return run_convert_from_bytes(payload, profile)
    except DecodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConversionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except EncodeError as e:
        logger.error("encode failure: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


# =============================================================================
# Router
# =============================================================================

router = APIRouter()


@router.post(
    "/convert",
    status_code=status.HTTP_200_OK,
    summary="Convert a v1experimental ProfilesData document to v1development",
)
async def convert_endpoint(
    request: Request,
    exact_mappings: Optional[bool] = Query(None, description="Resolve mappings positionally"),
    exact_locations: Optional[bool] = Query(None, description="Resolve sample locations positionally"),
):
    """
    Body: a v1experimental ``ProfilesData`` protojson document.

    Returns the v1development document.  Report highlights are exposed
    as ``X-Profiles-*`` headers; use ``/convert/report`` for the full
    report.
    """
    output, result = await _convert(request, exact_mappings, exact_locations)
    report = result.report
    return Response(
        content=output,
        media_type="application/json",
        headers={
            "X-Profiles-Conversion-Profile": report.profile_id,
            "X-Profiles-Count": str(report.profile_count),
            "X-Profiles-Unresolved": str(len(report.unresolved)),
            "X-Profiles-Invariant-Violations": str(len(report.invariant_violations)),
        },
    )


@router.post(
    "/convert/report",
    response_model=ConversionReport,
    status_code=status.HTTP_200_OK,
    summary="Convert a batch and return only the conversion report",
)
async def convert_report_endpoint(
    request: Request,
    exact_mappings: Optional[bool] = Query(None, description="Resolve mappings positionally"),
    exact_locations: Optional[bool] = Query(None, description="Resolve sample locations positionally"),
):
    _, result = await _convert(request, exact_mappings, exact_locations)
    return result.report
