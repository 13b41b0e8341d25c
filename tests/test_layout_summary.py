"""
Unit tests for layout summaries and legacy row synthesis.
"""
import pytest

from sitelayout.models import FramePlacement, PanelRow
from sitelayout.services.layout_summary import (
    frames_to_legacy_rows,
    summarize_frames,
    summarize_rows,
)
from sitelayout.services.projection import LocalProjection

from conftest import ORIGIN


@pytest.fixture
def projection():
    return LocalProjection(ORIGIN)


def _frame(projection, index, row_index, col_index, x, y, boundary_index=0, rotation_deg=0.0):
    return FramePlacement(
        index=index,
        row_index=row_index,
        col_index=col_index,
        frame_rows=1,
        frame_columns=2,
        center_coord=projection.to_global((x, y)),
        width_m=4.0,
        height_m=1.0,
        rotation_deg=rotation_deg,
        boundary_index=boundary_index,
    )


class TestFramesToLegacyRows:
    """Tests for grouping frames into PanelRow records."""
    
    def test_groups_by_boundary_and_row(self, projection):
        frames = [
            _frame(projection, 0, 0, 1, 2.0, 0.0),
            _frame(projection, 1, 0, 0, -2.0, 0.0),
            _frame(projection, 2, 1, 0, 0.0, 5.0),
            # Same grid row index, different boundary
            _frame(projection, 3, 0, 0, 100.0, 0.0, boundary_index=1),
        ]
        rows = frames_to_legacy_rows(frames, projection)
        
        assert [row.index for row in rows] == [0, 1, 2]
        assert [row.panel_count for row in rows] == [4, 2, 2]
        assert rows[0].length_m == pytest.approx(8.0)
        assert rows[1].length_m == pytest.approx(4.0)
    
    def test_row_runs_between_outer_frame_edges(self, projection):
        frames = [
            _frame(projection, 0, 0, 0, -10.0, 3.0),
            _frame(projection, 1, 0, 5, 10.0, 3.0),
        ]
        row = frames_to_legacy_rows(frames, projection)[0]
        start = projection.to_local(row.start_coord)
        end = projection.to_local(row.end_coord)
        
        assert start.x == pytest.approx(-12.0)
        assert end.x == pytest.approx(12.0)
        assert start.y == pytest.approx(3.0)
        # Gap between the frames is not represented
        assert row.length_m == pytest.approx(24.0)
    
    def test_rotated_row(self, projection):
        frames = [_frame(projection, 0, 0, 0, 0.0, 0.0, rotation_deg=90.0)]
        row = frames_to_legacy_rows(frames, projection)[0]
        start = projection.to_local(row.start_coord)
        end = projection.to_local(row.end_coord)
        
        assert start.x == pytest.approx(0.0, abs=1e-9)
        assert start.y == pytest.approx(-2.0)
        assert end.y == pytest.approx(2.0)
    
    def test_empty(self, projection):
        assert frames_to_legacy_rows([], projection) == []


class TestSummaries:
    """Tests for summary statistics."""
    
    def test_summarize_frames(self, module, params, projection):
        frames = [_frame(projection, i, 0, i, i * 4.0, 0.0) for i in range(10)]
        summary = summarize_frames(frames, module, params, covered_area_sqm=200.0, total_rows=1)
        
        assert summary.total_frames == 10
        assert summary.total_panels == 20
        assert summary.total_rows == 1
        assert summary.dc_capacity_kw == pytest.approx(10.0)
        assert summary.dc_capacity_mw == pytest.approx(0.01)
        assert summary.module_area_sqm == pytest.approx(40.0)
        assert summary.actual_gcr == pytest.approx(0.2)
    
    def test_zero_covered_area(self, module, params):
        summary = summarize_frames([], module, params, covered_area_sqm=0.0, total_rows=0)
        assert summary.actual_gcr == 0
        assert summary.total_panels == 0
    
    def test_summarize_rows(self, module, projection):
        rows = [
            PanelRow(0, 12, projection.to_global((0, 0)), projection.to_global((24, 0)), 24.0),
            PanelRow(1, 8, projection.to_global((0, 2)), projection.to_global((16, 2)), 16.0),
        ]
        summary = summarize_rows(rows, module, covered_area_sqm=100.0)
        
        assert summary.total_frames == 0
        assert summary.total_rows == 2
        assert summary.total_panels == 20
        assert summary.actual_gcr == pytest.approx(0.4)
