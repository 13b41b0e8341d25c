"""
Pydantic schemas for Site API endpoints.
"""
import uuid
from typing import Optional

from pydantic import BaseModel, Field

from sitelayout.models.exclusion_zone import ExclusionZoneType, SiteExclusionZone
from sitelayout.models.geo import GeoCoordinate
from sitelayout.models.site import Site, SiteBoundary


class GeoCoordinateSchema(BaseModel):
    """Geographic coordinate in degrees."""
    
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    elevation: Optional[float] = Field(None, description="Elevation in meters")
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> GeoCoordinate:
        return GeoCoordinate(
            latitude=self.latitude,
            longitude=self.longitude,
            elevation=self.elevation,
        )


class SiteBoundarySchema(BaseModel):
    """Buildable land polygon."""
    
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Boundary"
    coordinates: list[GeoCoordinateSchema] = Field(
        ...,
        min_length=3,
        description="Closed ring of at least 3 points (closing point optional)",
    )
    area: Optional[float] = Field(None, ge=0, description="Area in square meters")
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> SiteBoundary:
        return SiteBoundary(
            id=self.id,
            name=self.name,
            coordinates=[c.to_domain() for c in self.coordinates],
            area=self.area,
        )


class ExclusionZoneSchema(BaseModel):
    """Polygon the layout must avoid."""
    
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Exclusion Zone"
    type: ExclusionZoneType = ExclusionZoneType.OTHER
    coordinates: list[GeoCoordinateSchema] = Field(..., min_length=3)
    area: Optional[float] = Field(None, ge=0, description="Area in square meters")
    description: Optional[str] = Field(None, max_length=1000)
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> SiteExclusionZone:
        return SiteExclusionZone(
            id=self.id,
            name=self.name,
            type=self.type,
            coordinates=[c.to_domain() for c in self.coordinates],
            area=self.area,
            description=self.description,
        )


class SiteSchema(BaseModel):
    """A site with its boundaries, exclusion zones and derived metrics."""
    
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Site"
    boundaries: list[SiteBoundarySchema] = Field(default_factory=list)
    exclusion_zones: list[ExclusionZoneSchema] = Field(default_factory=list)
    centroid: Optional[GeoCoordinateSchema] = Field(
        None, description="Required for layout generation"
    )
    total_area: float = Field(0.0, ge=0, description="Total boundary area in square meters")
    usable_area: float = Field(0.0, ge=0, description="Boundary area minus exclusions")
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> Site:
        return Site(
            id=self.id,
            name=self.name,
            boundaries=[b.to_domain() for b in self.boundaries],
            exclusion_zones=[z.to_domain() for z in self.exclusion_zones],
            centroid=self.centroid.to_domain() if self.centroid else None,
            total_area=self.total_area,
            usable_area=self.usable_area,
        )


class SiteParseResponse(BaseModel):
    """Response schema for a parsed site file."""
    
    site: SiteSchema
    source: str = Field(..., description="Source format (kml, kmz, or delegated extension)")
    source_file_name: str
    source_file_size: int
    placemark_count: int
    total_area_acres: float
