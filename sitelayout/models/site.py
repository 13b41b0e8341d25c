"""
Site model - surveyed land with boundaries and exclusion zones.
"""
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from sitelayout.models.exclusion_zone import SiteExclusionZone
from sitelayout.models.geo import GeoCoordinate

if TYPE_CHECKING:
    from sitelayout.services.kml_parser import KMLParseResult


@dataclass
class SiteBoundary:
    """Buildable land as a closed ring of at least 3 distinct points."""
    id: str
    name: str
    coordinates: list[GeoCoordinate] = field(default_factory=list)
    area: Optional[float] = None  # Square meters


@dataclass
class Site:
    """
    A site owns zero or more boundaries and exclusion zones.
    
    The centroid is required before a layout can be generated; every
    consumer derives its local projection from it.
    """
    id: str
    name: str
    boundaries: list[SiteBoundary] = field(default_factory=list)
    exclusion_zones: list[SiteExclusionZone] = field(default_factory=list)
    centroid: Optional[GeoCoordinate] = None
    total_area: float = 0.0
    usable_area: float = 0.0
    
    @classmethod
    def from_parse_result(
        cls,
        result: "KMLParseResult",
        name: str,
        site_id: Optional[str] = None,
    ) -> "Site":
        """Build a site from ingested boundaries and exclusion zones."""
        excluded = sum(zone.area or 0.0 for zone in result.exclusion_zones)
        return cls(
            id=site_id or str(uuid.uuid4()),
            name=name,
            boundaries=list(result.boundaries),
            exclusion_zones=list(result.exclusion_zones),
            centroid=result.centroid,
            total_area=result.total_area,
            usable_area=max(result.total_area - excluded, 0.0),
        )
