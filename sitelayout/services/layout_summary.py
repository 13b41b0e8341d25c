"""
Layout aggregation.

Rolls frame placements into summary statistics and synthesizes the
legacy per-row shape for consumers that still expect PanelRow records.
The legacy rows are a lossy, display-oriented projection of the frames,
not a second source of truth.
"""
import math
from collections import defaultdict
from typing import Sequence

from sitelayout.models.layout import (
    FramePlacement,
    LayoutParameters,
    LayoutSummary,
    ModuleInput,
    PanelRow,
)
from sitelayout.services.geometry import local_distance
from sitelayout.services.projection import LocalProjection


def _build_summary(
    total_panels: int,
    total_frames: int,
    total_rows: int,
    module: ModuleInput,
    covered_area_sqm: float,
) -> LayoutSummary:
    dc_capacity_kw = total_panels * module.wattage / 1000
    module_area_sqm = total_panels * module.length_m * module.width_m
    actual_gcr = module_area_sqm / covered_area_sqm if covered_area_sqm > 0 else 0.0

    return LayoutSummary(
        total_panels=total_panels,
        total_frames=total_frames,
        total_rows=total_rows,
        dc_capacity_kw=dc_capacity_kw,
        dc_capacity_mw=dc_capacity_kw / 1000,
        actual_gcr=actual_gcr,
        covered_area_sqm=covered_area_sqm,
        module_area_sqm=module_area_sqm,
    )


def summarize_frames(
    frames: Sequence[FramePlacement],
    module: ModuleInput,
    parameters: LayoutParameters,
    covered_area_sqm: float,
    total_rows: int,
) -> LayoutSummary:
    """
    Summary for a frame layout.

    Args:
        frames: Accepted frame placements
        module: Module placed in each frame
        parameters: Parameters the frames were generated with
        covered_area_sqm: Sum of post-setback boundary areas processed
        total_rows: Number of legacy rows synthesized from the frames
    """
    total_frames = len(frames)
    total_panels = total_frames * parameters.frame_rows * parameters.frame_columns
    return _build_summary(total_panels, total_frames, total_rows, module, covered_area_sqm)


def summarize_rows(
    rows: Sequence[PanelRow],
    module: ModuleInput,
    covered_area_sqm: float,
) -> LayoutSummary:
    """Summary for a legacy row layout, which has no frames."""
    total_panels = sum(row.panel_count for row in rows)
    return _build_summary(total_panels, 0, len(rows), module, covered_area_sqm)


def frames_to_legacy_rows(
    frames: Sequence[FramePlacement],
    projection: LocalProjection,
) -> list[PanelRow]:
    """
    Group frames into legacy PanelRow records.

    Frames sharing a grid row (per boundary) form one row running from the
    outer edge of its first frame to the outer edge of its last. The end
    points are the outer edges, not the end frames' centers, so `length_m`
    covers the whole run of tables. Gaps left by exclusions inside a row
    are not represented.
    """
    groups: dict[tuple[int, int], list[FramePlacement]] = defaultdict(list)
    for frame in frames:
        groups[(frame.boundary_index, frame.row_index)].append(frame)

    rows = []
    for key in sorted(groups):
        members = sorted(groups[key], key=lambda f: f.col_index)
        first = members[0]
        last = members[-1]

        rotation = math.radians(first.rotation_deg)
        dir_x, dir_y = math.cos(rotation), math.sin(rotation)

        first_center = projection.to_local(first.center_coord)
        last_center = projection.to_local(last.center_coord)
        start = (
            first_center.x - dir_x * first.width_m / 2,
            first_center.y - dir_y * first.width_m / 2,
        )
        end = (
            last_center.x + dir_x * last.width_m / 2,
            last_center.y + dir_y * last.width_m / 2,
        )

        rows.append(PanelRow(
            index=len(rows),
            panel_count=sum(f.frame_rows * f.frame_columns for f in members),
            start_coord=projection.to_global(start),
            end_coord=projection.to_global(end),
            length_m=local_distance(start, end),
        ))

    return rows
