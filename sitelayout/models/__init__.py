"""
Domain models for site ingestion and layout generation.
"""
from sitelayout.models.exclusion_zone import (
    ZONE_TYPE_DEFAULTS,
    ExclusionZoneType,
    SiteExclusionZone,
)
from sitelayout.models.geo import GeoCoordinate, LocalCoordinate
from sitelayout.models.layout import (
    CapacityEstimate,
    FramePlacement,
    GeneratedLayout,
    LayoutMode,
    LayoutParameters,
    LayoutSummary,
    ModuleInput,
    PanelRow,
)
from sitelayout.models.site import Site, SiteBoundary

__all__ = [
    "GeoCoordinate",
    "LocalCoordinate",
    "ExclusionZoneType",
    "SiteExclusionZone",
    "ZONE_TYPE_DEFAULTS",
    "Site",
    "SiteBoundary",
    "ModuleInput",
    "LayoutParameters",
    "LayoutMode",
    "FramePlacement",
    "PanelRow",
    "LayoutSummary",
    "GeneratedLayout",
    "CapacityEstimate",
]
