"""
Shared fixtures and site builders for layout tests.

Sites are described in local meters around ORIGIN and converted to
lat/lng through the same projection the generator uses, so expected
frame positions can be worked out by hand.
"""
import pytest
from shapely.geometry import Polygon

from sitelayout.models import (
    ExclusionZoneType,
    GeoCoordinate,
    LayoutParameters,
    ModuleInput,
    Site,
    SiteBoundary,
    SiteExclusionZone,
)
from sitelayout.services.geometry import calculate_frame_corners, polygon_area
from sitelayout.services.projection import LocalProjection

ORIGIN = GeoCoordinate(latitude=35.0, longitude=-101.0)


def square(half_size: float, cx: float = 0.0, cy: float = 0.0) -> list[tuple[float, float]]:
    """Counter-clockwise square ring in local meters."""
    return [
        (cx - half_size, cy - half_size),
        (cx + half_size, cy - half_size),
        (cx + half_size, cy + half_size),
        (cx - half_size, cy + half_size),
    ]


def to_geo(ring, origin: GeoCoordinate = ORIGIN) -> list[GeoCoordinate]:
    projection = LocalProjection(origin)
    return [projection.to_global(point) for point in ring]


def make_site(boundaries, exclusions=(), origin: GeoCoordinate = ORIGIN) -> Site:
    """Build a site from local-meter rings, centered on ORIGIN."""
    site_boundaries = [
        SiteBoundary(
            id=f"boundary-{i}",
            name=f"Boundary {i}",
            coordinates=to_geo(ring, origin),
            area=polygon_area(ring),
        )
        for i, ring in enumerate(boundaries)
    ]
    zones = [
        SiteExclusionZone(
            id=f"zone-{i}",
            name=f"Zone {i}",
            type=ExclusionZoneType.OTHER,
            coordinates=to_geo(ring, origin),
            area=polygon_area(ring),
        )
        for i, ring in enumerate(exclusions)
    ]
    total = sum(b.area for b in site_boundaries)
    return Site(
        id="test-site",
        name="Test Site",
        boundaries=site_boundaries,
        exclusion_zones=zones,
        centroid=origin,
        total_area=total,
        usable_area=max(total - sum(z.area for z in zones), 0.0),
    )


def frame_polygon(frame, origin: GeoCoordinate = ORIGIN) -> Polygon:
    """Ground footprint of a placed frame as a shapely polygon in local meters."""
    projection = LocalProjection(origin)
    center = projection.to_local(frame.center_coord)
    return Polygon(calculate_frame_corners(center, frame.width_m, frame.height_m, frame.rotation_deg))


@pytest.fixture
def module():
    """2 m x 1 m, 500 W module: a 1x2 frame is 4 m x 1 m."""
    return ModuleInput(length_mm=2000, width_mm=1000, wattage=500, name="Test 500")


@pytest.fixture
def params():
    """Flat, south-facing 1x2 frames with a 1 m row gap and no setback."""
    return LayoutParameters(
        tilt_angle=0,
        azimuth=180,
        frame_rows=1,
        frame_columns=2,
        module_gap_m=0,
        frame_gap_x=0,
        frame_gap_y=1.0,
        corridor_width=0,
        boundary_setback_m=0,
    )


@pytest.fixture
def square_site():
    """100 m x 100 m boundary centered on the origin."""
    return make_site([square(50)])


@pytest.fixture
def sample_kml() -> str:
    """Survey file with a parcel, a wetland folder, a derived layer and a loose barn."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <name>Test Survey</name>
    <Folder>
      <name>Parcel Boundary</name>
      <Placemark>
        <name>Parcel A</name>
        <Polygon>
          <outerBoundaryIs>
            <LinearRing>
              <coordinates>
                -101.004,35.000,0 -101.000,35.000,0 -101.000,35.004,0
                -101.004,35.004,0 -101.004,35.000,0
              </coordinates>
            </LinearRing>
          </outerBoundaryIs>
        </Polygon>
      </Placemark>
    </Folder>
    <Folder>
      <name>Exclusions</name>
      <Folder>
        <name>Wetlands</name>
        <Placemark>
          <name>Area 1</name>
          <Polygon>
            <outerBoundaryIs>
              <LinearRing>
                <coordinates>
                  -101.0035,35.0005 -101.0030,35.0005 -101.0030,35.0010
                  -101.0035,35.0010 -101.0035,35.0005
                </coordinates>
              </LinearRing>
            </outerBoundaryIs>
          </Polygon>
        </Placemark>
      </Folder>
    </Folder>
    <Folder>
      <name>Buildable Area</name>
      <Placemark>
        <name>Net buildable</name>
        <Polygon>
          <outerBoundaryIs>
            <LinearRing>
              <coordinates>
                -101.0035,35.0005 -101.0005,35.0005 -101.0005,35.0035
                -101.0035,35.0035 -101.0035,35.0005
              </coordinates>
            </LinearRing>
          </outerBoundaryIs>
        </Polygon>
      </Placemark>
    </Folder>
    <Placemark>
      <name>Existing barn</name>
      <Polygon>
        <outerBoundaryIs>
          <LinearRing>
            <coordinates>
              -101.0010,35.0030 -101.0008,35.0030 -101.0008,35.0032
              -101.0010,35.0032 -101.0010,35.0030
            </coordinates>
          </LinearRing>
        </outerBoundaryIs>
      </Polygon>
    </Placemark>
  </Document>
</kml>
"""
