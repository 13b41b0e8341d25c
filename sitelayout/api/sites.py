"""
Site ingestion API endpoints.

Parses uploaded KML/KMZ survey files into sites and lists the
exclusion zone types a site can carry.
"""
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from sitelayout.config import get_settings
from sitelayout.models.site import Site
from sitelayout.schemas.exclusion_zone import ExclusionZoneTypesResponse, ZONE_TYPE_INFO
from sitelayout.schemas.site import SiteParseResponse, SiteSchema
from sitelayout.services.kml_parser import (
    KMLParseError,
    KMLParser,
    SiteFileDelegate,
    square_meters_to_acres,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sites", tags=["Sites"])


def get_site_file_delegate() -> Optional[SiteFileDelegate]:
    """
    Parser for site formats other than KML/KMZ.

    None by default, so other formats are rejected. Override this
    dependency to plug in an external parser.
    """
    return None


# =============================================================================
# Exclusion Zone Types
# =============================================================================


@router.get(
    "/exclusion-zone-types",
    response_model=ExclusionZoneTypesResponse,
    summary="Get available exclusion zone types",
    description="Returns all exclusion zone types with their display labels and colors.",
    tags=["Exclusion Zones"],
)
async def get_zone_types() -> ExclusionZoneTypesResponse:
    """Get all available exclusion zone types."""
    return ExclusionZoneTypesResponse(types=ZONE_TYPE_INFO)


# =============================================================================
# Site File Parsing
# =============================================================================


@router.post(
    "/parse",
    response_model=SiteParseResponse,
    summary="Parse site file",
    description="Parse a KML or KMZ file into boundaries, exclusion zones and a centroid.",
)
async def parse_site_file(
    file: Annotated[UploadFile, File(description="KML or KMZ survey file")],
    delegate: Optional[SiteFileDelegate] = Depends(get_site_file_delegate),
) -> SiteParseResponse:
    """
    Parse an uploaded site file.

    Every polygon placemark is classified as a boundary or an exclusion
    zone from its folder and name. Nothing is stored; the parsed site is
    returned for the client to hold and send back with layout requests.
    """
    settings = get_settings()

    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    content = await file.read()

    if len(content) > settings.max_upload_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size is {settings.max_upload_size_mb}MB.",
        )

    try:
        result = await run_in_threadpool(KMLParser.parse, content, file.filename, delegate)
    except KMLParseError as e:
        logger.info(f"Rejected site file '{file.filename}': {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    if not result.boundaries and not result.exclusion_zones:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No polygon geometry found in file",
        )

    site_name = file.filename.rsplit(".", 1)[0] or file.filename
    site = Site.from_parse_result(result, name=site_name)

    return SiteParseResponse(
        site=SiteSchema.model_validate(site),
        source=KMLParser.get_extension(file.filename).lstrip(".") or "unknown",
        source_file_name=file.filename,
        source_file_size=len(content),
        placemark_count=result.placemark_count,
        total_area_acres=round(square_meters_to_acres(site.total_area), 2),
    )
