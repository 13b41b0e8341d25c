"""
Pydantic schemas for exclusion zone metadata endpoints.
"""
from pydantic import BaseModel

from sitelayout.models.exclusion_zone import ZONE_TYPE_DEFAULTS, ExclusionZoneType


class ExclusionZoneTypeInfo(BaseModel):
    """Information about an exclusion zone type."""
    type: ExclusionZoneType
    label: str
    color: str


# Zone type metadata for frontend
ZONE_TYPE_INFO = [
    ExclusionZoneTypeInfo(type=zone_type, **defaults)
    for zone_type, defaults in ZONE_TYPE_DEFAULTS.items()
]


class ExclusionZoneTypesResponse(BaseModel):
    """Response schema for listing available zone types."""
    
    types: list[ExclusionZoneTypeInfo]
