"""
Layout API endpoints.

Stateless: every request carries the site (as returned by the parse
endpoint) and the generation inputs. Placement runs in the threadpool
so large sites do not block the event loop.
"""
import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from sitelayout.models.layout import LayoutMode
from sitelayout.schemas.layout import (
    CapacityEstimateResponse,
    EstimateCapacityRequest,
    GenerateLayoutRequest,
    GeneratedLayoutSchema,
    GeoJSONFeatureCollection,
    LayoutRenderRequest,
    RenderDataResponse,
)
from sitelayout.services.layout_generator import (
    LayoutGenerationError,
    estimate_capacity,
    generate_layout,
    generate_legacy_layout,
)
from sitelayout.services.render_adapter import layout_to_geojson, layout_to_render_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/layouts", tags=["Layouts"])


@router.post(
    "/generate",
    response_model=GeneratedLayoutSchema,
    summary="Generate layout",
    description="Pack a site's boundaries with panel frames (or legacy rows).",
)
async def generate(request: GenerateLayoutRequest) -> GeneratedLayoutSchema:
    """
    Generate a layout for the supplied site.

    - **site**: parsed site, must have a centroid and at least one boundary
    - **module**: module dimensions and wattage
    - **parameters**: frame shape, spacing, orientation and setback
    - **mode**: `frames` (default) or `legacy_rows`
    """
    site = request.site.to_domain()
    module = request.module.to_domain()
    parameters = request.parameters.to_domain()

    generator = generate_legacy_layout if request.mode == LayoutMode.LEGACY_ROWS else generate_layout

    try:
        layout = await run_in_threadpool(generator, site, module, parameters)
    except LayoutGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return GeneratedLayoutSchema.model_validate(layout)


@router.post(
    "/estimate",
    response_model=CapacityEstimateResponse,
    summary="Estimate capacity",
    description="Fast area-based capacity estimate for live previews.",
)
async def estimate(request: EstimateCapacityRequest) -> CapacityEstimateResponse:
    """Approximate panel count and DC capacity without placing frames."""
    result = estimate_capacity(
        request.usable_area_sqm,
        request.module.to_domain(),
        request.parameters.to_domain(),
    )
    return CapacityEstimateResponse.model_validate(result)


@router.post(
    "/render",
    response_model=RenderDataResponse,
    summary="Get render data",
    description="Convert a generated layout to panel geometry in local meters.",
)
async def render(request: LayoutRenderRequest) -> RenderDataResponse:
    """Panel positions, rotations and dimensions for 2D/3D viewers."""
    site = request.site.to_domain()
    if site.centroid is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Site must have a centroid for rendering",
        )

    data = await run_in_threadpool(
        layout_to_render_data,
        request.layout.to_domain(),
        site,
        request.mounting_height_m,
    )
    return RenderDataResponse.model_validate(data)


@router.post(
    "/geojson",
    response_model=GeoJSONFeatureCollection,
    summary="Export layout as GeoJSON",
    description="Frame footprints as Polygons, or legacy rows as LineStrings.",
)
async def export_geojson(request: LayoutRenderRequest) -> GeoJSONFeatureCollection:
    """Layout overlay for map display."""
    site = request.site.to_domain()
    if site.centroid is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Site must have a centroid for GeoJSON export",
        )

    collection = await run_in_threadpool(layout_to_geojson, request.layout.to_domain(), site)
    logger.info(f"Exported {len(collection['features'])} features for site {site.id}")
    return GeoJSONFeatureCollection(**collection)
