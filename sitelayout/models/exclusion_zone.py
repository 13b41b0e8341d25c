"""
Exclusion zone model - land the layout must avoid entirely.

Zones come from surveyed site files (wetlands, setbacks, structures, ...).
No frame may touch or overlap a zone polygon.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from sitelayout.models.geo import GeoCoordinate


class ExclusionZoneType(str, Enum):
    """Types of exclusion zones recognised during site ingestion."""
    
    WETLAND = "wetland"
    SETBACK = "setback"
    EASEMENT = "easement"
    SLOPE = "slope"
    FLOOD_ZONE = "flood_zone"
    TREE_COVER = "tree_cover"
    STRUCTURE = "structure"
    WATER_BODY = "water_body"
    OTHER = "other"


# Display metadata for each zone type
ZONE_TYPE_DEFAULTS = {
    ExclusionZoneType.WETLAND: {
        "label": "Wetland",
        "color": "#0ea5e9",  # Sky
    },
    ExclusionZoneType.SETBACK: {
        "label": "Setback",
        "color": "#ef4444",  # Red
    },
    ExclusionZoneType.EASEMENT: {
        "label": "Easement",
        "color": "#a855f7",  # Purple
    },
    ExclusionZoneType.SLOPE: {
        "label": "Steep Slope",
        "color": "#f97316",  # Orange
    },
    ExclusionZoneType.FLOOD_ZONE: {
        "label": "Flood Zone",
        "color": "#3b82f6",  # Blue
    },
    ExclusionZoneType.TREE_COVER: {
        "label": "Tree Cover",
        "color": "#22c55e",  # Green
    },
    ExclusionZoneType.STRUCTURE: {
        "label": "Structure",
        "color": "#78716c",  # Stone
    },
    ExclusionZoneType.WATER_BODY: {
        "label": "Water Body",
        "color": "#06b6d4",  # Cyan
    },
    ExclusionZoneType.OTHER: {
        "label": "Other",
        "color": "#6b7280",  # Gray
    },
}


@dataclass
class SiteExclusionZone:
    """A polygon within which no frame may be placed."""
    id: str
    name: str
    type: ExclusionZoneType
    coordinates: list[GeoCoordinate] = field(default_factory=list)
    area: Optional[float] = None  # Square meters
    description: Optional[str] = None
