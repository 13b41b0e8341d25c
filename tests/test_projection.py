"""
Unit tests for the local equirectangular projection.
"""
import math

import pytest

from sitelayout.models import GeoCoordinate
from sitelayout.services.projection import (
    METERS_PER_DEGREE_LAT,
    LocalProjection,
    mean_coordinate,
)


class TestLocalProjection:
    """Tests for LocalProjection."""
    
    @pytest.fixture
    def projection(self):
        return LocalProjection(GeoCoordinate(latitude=35.0, longitude=-101.0))
    
    def test_origin_maps_to_zero(self, projection):
        local = projection.to_local(projection.origin)
        assert local.x == 0
        assert local.y == 0
    
    def test_one_degree_latitude(self, projection):
        local = projection.to_local(GeoCoordinate(latitude=36.0, longitude=-101.0))
        assert local.x == 0
        assert local.y == pytest.approx(METERS_PER_DEGREE_LAT)
    
    def test_longitude_scale_shrinks_with_latitude(self):
        equator = LocalProjection(GeoCoordinate(latitude=0.0, longitude=0.0))
        sixty = LocalProjection(GeoCoordinate(latitude=60.0, longitude=0.0))
        
        assert equator.scale[1] == pytest.approx(METERS_PER_DEGREE_LAT)
        assert sixty.scale[1] == pytest.approx(METERS_PER_DEGREE_LAT / 2)
        assert sixty.scale[0] == METERS_PER_DEGREE_LAT
    
    def test_axes_point_east_and_north(self, projection):
        north_east = projection.to_local(GeoCoordinate(latitude=35.001, longitude=-100.999))
        assert north_east.x > 0
        assert north_east.y > 0
    
    def test_round_trip(self, projection):
        coord = GeoCoordinate(latitude=35.0123, longitude=-101.0456)
        back = projection.to_global(projection.to_local(coord))
        
        assert back.latitude == pytest.approx(coord.latitude, abs=1e-12)
        assert back.longitude == pytest.approx(coord.longitude, abs=1e-12)
    
    def test_to_global_carries_elevation(self, projection):
        coord = projection.to_global((100.0, -50.0), elevation=12.5)
        assert coord.elevation == 12.5
        assert coord.latitude < 35.0
        assert coord.longitude > -101.0
    
    def test_ring_to_local(self, projection):
        ring = [
            GeoCoordinate(35.0, -101.0),
            GeoCoordinate(35.0, -100.99),
            GeoCoordinate(35.01, -100.99),
        ]
        local = projection.ring_to_local(ring)
        
        assert len(local) == 3
        expected_x = 0.01 * METERS_PER_DEGREE_LAT * math.cos(math.radians(35.0))
        assert local[1].x == pytest.approx(expected_x)
        assert local[2].y == pytest.approx(0.01 * METERS_PER_DEGREE_LAT)


class TestMeanCoordinate:
    """Tests for mean_coordinate."""
    
    def test_empty(self):
        assert mean_coordinate([]) is None
    
    def test_mean(self):
        center = mean_coordinate([
            GeoCoordinate(10.0, 20.0),
            GeoCoordinate(12.0, 24.0),
        ])
        assert center == GeoCoordinate(11.0, 22.0)
    
    def test_accepts_generator(self):
        coords = (GeoCoordinate(float(i), 0.0) for i in range(5))
        assert mean_coordinate(coords).latitude == pytest.approx(2.0)
