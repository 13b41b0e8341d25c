"""
Coordinate value types.
"""
from dataclasses import dataclass
from typing import NamedTuple, Optional


@dataclass(frozen=True)
class GeoCoordinate:
    """Geographic coordinate in degrees, with optional elevation in meters."""
    latitude: float
    longitude: float
    elevation: Optional[float] = None


class LocalCoordinate(NamedTuple):
    """
    Planar coordinate in meters relative to a projection origin.
    
    x grows east, y grows north. Only meaningful together with the
    projection that produced it.
    """
    x: float
    y: float
