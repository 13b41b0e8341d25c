"""
Unit tests for the render adapter and GeoJSON export.
"""
import math
from dataclasses import replace

import pytest

from sitelayout.models import LayoutParameters
from sitelayout.services.layout_generator import generate_layout, generate_legacy_layout
from sitelayout.services.render_adapter import layout_to_geojson, layout_to_render_data

from conftest import make_site, square


@pytest.fixture
def legacy_layout(module):
    site = make_site([square(50.5)])
    params = LayoutParameters(tilt_angle=0, azimuth=180, boundary_setback_m=0, gcr=0.5, row_gap_m=0)
    return site, generate_legacy_layout(site, module, params)


class TestRenderData:
    """Tests for layout_to_render_data."""
    
    @pytest.fixture
    def frame_layout(self, square_site, module, params):
        return generate_layout(square_site, module, replace(params, tilt_angle=30))
    
    def test_one_table_per_frame(self, frame_layout, square_site):
        data = layout_to_render_data(frame_layout, square_site)
        
        assert len(data.panels) == len(frame_layout.frames)
        assert data.units == "meters"
        assert data.latitude == square_site.centroid.latitude
        assert data.longitude == square_site.centroid.longitude
        assert data.layers[0]["entity_count"] == len(data.panels)
    
    def test_table_uses_physical_height(self, frame_layout, square_site):
        panel = layout_to_render_data(frame_layout, square_site).panels[0]
        frame = frame_layout.frames[0]
        
        assert panel.table_width == pytest.approx(4.0)
        assert panel.table_height == pytest.approx(1.0)
        assert frame.height_m == pytest.approx(math.cos(math.radians(30)))
        assert panel.module_rows == 1
        assert panel.module_columns == 2
        assert panel.tilt_angle == 30
        assert panel.id == "gen-frame-0"
    
    def test_mounting_height(self, frame_layout, square_site):
        default = layout_to_render_data(frame_layout, square_site).panels[0]
        raised = layout_to_render_data(frame_layout, square_site, mounting_height_m=1.5).panels[0]
        
        assert default.mounting_height == 0.5
        assert raised.mounting_height == 1.5
    
    def test_rotation_in_radians(self, square_site, module, params):
        layout = generate_layout(square_site, module, replace(params, azimuth=225))
        panel = layout_to_render_data(layout, square_site).panels[0]
        assert panel.rotation == pytest.approx(math.pi / 4)
    
    def test_bounds_are_padded(self, frame_layout, square_site):
        data = layout_to_render_data(frame_layout, square_site, padding_m=10)
        xs = [p.position[0] for p in data.panels]
        
        assert data.bounds.min[0] == pytest.approx(min(xs) - 10)
        assert data.bounds.max[0] == pytest.approx(max(xs) + 10)
        assert data.bounds.size[0] == pytest.approx(max(xs) - min(xs) + 20)
        assert data.bounds.center[0] == pytest.approx(0.0, abs=1e-6)
    
    def test_empty_layout_bounds(self, square_site, module, params):
        layout = generate_layout(square_site, module, replace(params, boundary_setback_m=60))
        data = layout_to_render_data(layout, square_site, padding_m=50)
        
        assert data.panels == []
        assert data.bounds.min == (-50, -50, 0)
        assert data.bounds.max == (50, 50, 0)
    
    def test_legacy_rows_expand_to_modules(self, module, legacy_layout):
        site, layout = legacy_layout
        data = layout_to_render_data(layout, site)

        assert len(data.panels) == layout.summary.total_panels
        panel = data.panels[0]
        assert panel.module_rows == 1
        assert panel.module_columns == 1
        assert panel.table_width == pytest.approx(module.length_m)
        assert panel.table_height == pytest.approx(module.width_m)
        assert panel.rotation == pytest.approx(0.0, abs=1e-9)

    def test_legacy_modules_spread_along_row(self, legacy_layout):
        site, layout = legacy_layout
        data = layout_to_render_data(layout, site)
        first_row = data.panels[:layout.rows[0].panel_count]
        xs = [p.position[0] for p in first_row]

        assert xs == sorted(xs)
        assert xs[0] > -50.5
        assert xs[-1] < 50.5

    def test_missing_centroid(self, frame_layout, square_site):
        square_site.centroid = None
        with pytest.raises(ValueError):
            layout_to_render_data(frame_layout, square_site)


class TestGeoJSON:
    """Tests for layout_to_geojson."""
    
    def test_frames_as_polygons(self, square_site, module, params):
        layout = generate_layout(square_site, module, params)
        collection = layout_to_geojson(layout, square_site)
        
        assert collection["type"] == "FeatureCollection"
        assert len(collection["features"]) == len(layout.frames)
        
        feature = collection["features"][0]
        assert feature["geometry"]["type"] == "Polygon"
        ring = feature["geometry"]["coordinates"][0]
        assert len(ring) == 5
        assert ring[0] == ring[-1]
        assert feature["properties"]["feature_type"] == "frame"
        assert feature["properties"]["panels"] == 2
    
    def test_coordinates_are_lng_lat(self, square_site, module, params):
        layout = generate_layout(square_site, module, params)
        lng, lat = layout_to_geojson(layout, square_site)["features"][0]["geometry"]["coordinates"][0][0]
        
        assert lng == pytest.approx(square_site.centroid.longitude, abs=0.001)
        assert lat == pytest.approx(square_site.centroid.latitude, abs=0.001)
    
    def test_legacy_rows_as_linestrings(self, legacy_layout):
        site, layout = legacy_layout
        collection = layout_to_geojson(layout, site)
        
        assert len(collection["features"]) == len(layout.rows)
        feature = collection["features"][0]
        assert feature["geometry"]["type"] == "LineString"
        assert len(feature["geometry"]["coordinates"]) == 2
        assert feature["properties"]["panel_count"] == layout.rows[0].panel_count
    
    def test_missing_centroid(self, square_site, module, params):
        layout = generate_layout(square_site, module, params)
        square_site.centroid = None
        with pytest.raises(ValueError):
            layout_to_geojson(layout, square_site)
