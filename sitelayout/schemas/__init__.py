"""
Pydantic schemas for API request/response models.
"""
from sitelayout.schemas.exclusion_zone import (
    ExclusionZoneTypeInfo,
    ExclusionZoneTypesResponse,
    ZONE_TYPE_INFO,
)
from sitelayout.schemas.layout import (
    CapacityEstimateResponse,
    EstimateCapacityRequest,
    FramePlacementSchema,
    GenerateLayoutRequest,
    GeneratedLayoutSchema,
    GeoJSONFeatureCollection,
    LayoutParametersSchema,
    LayoutRenderRequest,
    LayoutSummarySchema,
    ModuleInputSchema,
    PanelRowSchema,
    RenderDataResponse,
)
from sitelayout.schemas.site import (
    ExclusionZoneSchema,
    GeoCoordinateSchema,
    SiteBoundarySchema,
    SiteParseResponse,
    SiteSchema,
)

__all__ = [
    # Site schemas
    "GeoCoordinateSchema",
    "SiteBoundarySchema",
    "ExclusionZoneSchema",
    "SiteSchema",
    "SiteParseResponse",
    # Exclusion zone schemas
    "ExclusionZoneTypeInfo",
    "ExclusionZoneTypesResponse",
    "ZONE_TYPE_INFO",
    # Layout schemas
    "ModuleInputSchema",
    "LayoutParametersSchema",
    "GenerateLayoutRequest",
    "EstimateCapacityRequest",
    "FramePlacementSchema",
    "PanelRowSchema",
    "LayoutSummarySchema",
    "GeneratedLayoutSchema",
    "CapacityEstimateResponse",
    "LayoutRenderRequest",
    "RenderDataResponse",
    "GeoJSONFeatureCollection",
]
