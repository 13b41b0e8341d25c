"""
Local tangent-plane projection.

Maps geographic coordinates to a flat meter grid centered on an origin
using an equirectangular approximation. Accurate for site extents of a
few kilometers; error grows for sites spanning degrees of latitude or
near the poles. That limitation is accepted, not corrected.
"""
import math
from typing import Iterable, Optional

from sitelayout.models.geo import GeoCoordinate, LocalCoordinate

METERS_PER_DEGREE_LAT = 111139.0


class LocalProjection:
    """Bidirectional mapping between lat/lng and local meters around an origin."""

    def __init__(self, origin: GeoCoordinate):
        self.origin = origin
        self.meters_per_degree_lat = METERS_PER_DEGREE_LAT
        self.meters_per_degree_lng = METERS_PER_DEGREE_LAT * math.cos(
            math.radians(origin.latitude)
        )

    @property
    def scale(self) -> tuple[float, float]:
        """(meters per degree latitude, meters per degree longitude)."""
        return self.meters_per_degree_lat, self.meters_per_degree_lng

    def to_local(self, coord: GeoCoordinate) -> LocalCoordinate:
        """Convert lat/lng to local meters (x east, y north)."""
        return LocalCoordinate(
            x=(coord.longitude - self.origin.longitude) * self.meters_per_degree_lng,
            y=(coord.latitude - self.origin.latitude) * self.meters_per_degree_lat,
        )

    def to_global(
        self,
        local: tuple[float, float],
        elevation: Optional[float] = None,
    ) -> GeoCoordinate:
        """Convert local meters back to lat/lng."""
        x, y = local
        return GeoCoordinate(
            latitude=self.origin.latitude + y / self.meters_per_degree_lat,
            longitude=self.origin.longitude + x / self.meters_per_degree_lng,
            elevation=elevation,
        )

    def ring_to_local(self, coords: Iterable[GeoCoordinate]) -> list[LocalCoordinate]:
        """Project a whole ring of coordinates."""
        return [self.to_local(c) for c in coords]


def mean_coordinate(coords: Iterable[GeoCoordinate]) -> Optional[GeoCoordinate]:
    """Unweighted mean of a set of coordinates, or None if empty."""
    total_lat = 0.0
    total_lng = 0.0
    count = 0
    for coord in coords:
        total_lat += coord.latitude
        total_lng += coord.longitude
        count += 1

    if count == 0:
        return None

    return GeoCoordinate(latitude=total_lat / count, longitude=total_lng / count)
