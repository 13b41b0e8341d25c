"""
Frame layout generation service.

Packs each site boundary with rectangular panel tables ("frames"):

1. Project boundaries and exclusion zones to local meters around the
   site centroid.
2. Apply the boundary setback (approximate inward offset).
3. Lay a rotated grid of candidate frames over the boundary, inserting
   wider corridors every N frames.
4. Keep only frames fully inside the boundary and clear of every
   exclusion zone. Frames are never clipped.

Placement is greedy and deterministic; there is no yield optimization.
The older row-line algorithm is kept as LegacyRowLayoutGenerator for
layouts stored in that shape.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Optional, Sequence

from sitelayout.models.geo import LocalCoordinate
from sitelayout.models.layout import (
    CapacityEstimate,
    FramePlacement,
    GeneratedLayout,
    LayoutMode,
    LayoutParameters,
    ModuleInput,
    PanelRow,
)
from sitelayout.models.site import Site
from sitelayout.services.geometry import (
    BoundingBox,
    bounding_box,
    calculate_frame_corners,
    clip_segment_to_polygon,
    frame_fully_contained,
    is_simple_polygon,
    local_distance,
    offset_collapses,
    polygon_area,
    shrink_polygon,
    signed_polygon_area,
    subtract_polygon_from_segment,
)
from sitelayout.services.layout_summary import (
    frames_to_legacy_rows,
    summarize_frames,
    summarize_rows,
)
from sitelayout.services.projection import LocalProjection

logger = logging.getLogger(__name__)

Ring = list[LocalCoordinate]

# Share of usable land assumed packable by the quick estimate
ESTIMATE_PACKING_EFFICIENCY = 0.7


class LayoutGenerationError(Exception):
    """Raised when a site does not meet layout preconditions."""
    pass


def _boxes_overlap(a: BoundingBox, b: BoundingBox) -> bool:
    return (
        a.min_x <= b.max_x and b.min_x <= a.max_x
        and a.min_y <= b.max_y and b.min_y <= a.max_y
    )


def _axis_offsets(
    count: int,
    footprint: float,
    gap: float,
    corridor_width: float,
    corridor_every: int,
) -> list[float]:
    """
    Offsets of frame centers along one grid axis, centered on zero.

    The running offset advances by the footprint plus the regular gap, or
    plus the corridor width after every `corridor_every` frames.
    """
    offsets = [0.0]
    for i in range(1, count):
        if corridor_every > 0 and i % corridor_every == 0:
            spacing = corridor_width
        else:
            spacing = gap
        offsets.append(offsets[-1] + footprint + spacing)

    shift = offsets[-1] / 2
    return [offset - shift for offset in offsets]


def _average_spacing(gap: float, corridor_width: float, corridor_every: int) -> float:
    """Per-frame spacing with corridors amortized over their interval."""
    if corridor_every > 0:
        return ((corridor_every - 1) * gap + corridor_width) / corridor_every
    return gap


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class _SiteLayoutGenerator:
    """Shared site preparation for the frame and legacy row generators."""

    # Usable polygons smaller than this are skipped
    MIN_USABLE_AREA_M2 = 1.0

    def __init__(self, module: ModuleInput, parameters: LayoutParameters):
        self.module = module
        self.parameters = parameters

    def _prepare(self, site: Site) -> tuple[LocalProjection, list[Ring]]:
        """Validate the site and project its exclusion zones once."""
        if site.centroid is None:
            raise LayoutGenerationError("Site must have a centroid for layout generation")

        if not site.boundaries:
            raise LayoutGenerationError("Site must have at least one boundary")

        projection = LocalProjection(site.centroid)
        exclusions = [
            projection.ring_to_local(zone.coordinates)
            for zone in site.exclusion_zones
            if len(zone.coordinates) >= 3
        ]
        return projection, exclusions

    def _usable_polygon(self, boundary: Ring, name: str) -> Optional[Ring]:
        """
        Apply the boundary setback.

        Returns None when nothing usable remains: the ring is degenerate,
        too small, or the setback inverted it (setback beyond the inradius).
        A self-intersecting result is reported but kept as-is.
        """
        if len(boundary) < 3:
            return None

        setback = self.parameters.boundary_setback_m
        usable = boundary
        if setback > 0:
            usable = shrink_polygon(boundary, setback)

            inverted = signed_polygon_area(usable) * signed_polygon_area(boundary) <= 0
            if inverted or offset_collapses(boundary, setback):
                logger.info(f"Boundary '{name}' collapsed under {setback} m setback, skipping")
                return None

            if not is_simple_polygon(usable):
                logger.warning(
                    f"Setback of {setback} m produced a self-intersecting ring for "
                    f"boundary '{name}'; placement uses the approximate ring"
                )

        if polygon_area(usable) < self.MIN_USABLE_AREA_M2:
            logger.debug(f"Boundary '{name}' has no usable area after setback, skipping")
            return None

        return usable

    @staticmethod
    def _nearby(exclusions: Sequence[Ring], area: BoundingBox) -> list[Ring]:
        """Exclusions whose bounding boxes touch the given box."""
        return [ex for ex in exclusions if _boxes_overlap(bounding_box(ex), area)]


class FrameLayoutGenerator(_SiteLayoutGenerator):
    """
    Fills site boundaries with whole frames on a rotated grid.

    Frames are indexed site-wide: the running index is threaded through
    each boundary's placement and returned alongside its frames.
    """

    def generate(self, site: Site) -> GeneratedLayout:
        """
        Generate a frame layout for a site.

        Raises:
            LayoutGenerationError: If the site has no centroid or no boundaries
        """
        width, _, height = self.parameters.frame_dimensions(self.module)
        if width <= 0 or height <= 1e-6:
            raise LayoutGenerationError("Frame footprint must have a positive width and height")

        projection, exclusions = self._prepare(site)

        frames: list[FramePlacement] = []
        covered_area = 0.0
        next_index = 0

        for boundary_index, boundary in enumerate(site.boundaries):
            usable = self._usable_polygon(
                projection.ring_to_local(boundary.coordinates), boundary.name
            )
            if usable is None:
                continue

            placed, next_index = self._place_frames(
                usable, exclusions, projection, boundary_index, next_index
            )
            frames.extend(placed)
            covered_area += polygon_area(usable)

        rows = frames_to_legacy_rows(frames, projection)
        summary = summarize_frames(
            frames, self.module, self.parameters, covered_area, total_rows=len(rows)
        )

        logger.info(
            f"Placed {summary.total_frames} frames ({summary.total_panels} panels, "
            f"{summary.dc_capacity_kw:.1f} kW) on site {site.id}"
        )

        return GeneratedLayout(
            site_id=site.id,
            module=self.module,
            parameters=self.parameters,
            frames=frames,
            rows=rows,
            summary=summary,
            generated_at=_timestamp(),
            mode=LayoutMode.FRAMES,
        )

    def _place_frames(
        self,
        boundary: Ring,
        exclusions: Sequence[Ring],
        projection: LocalProjection,
        boundary_index: int,
        start_index: int,
    ) -> tuple[list[FramePlacement], int]:
        """
        Place frames within one usable boundary.

        Returns the accepted frames and the next free site-wide index.
        """
        params = self.parameters
        width, _, height = params.frame_dimensions(self.module)
        rotation = params.rotation_deg

        angle = math.radians(rotation)
        row_dir = (math.cos(angle), math.sin(angle))
        col_dir = (-math.sin(angle), math.cos(angle))

        bbox = bounding_box(boundary)
        center = bbox.center
        diagonal = bbox.diagonal

        # Sized generously so the rotated grid covers the whole boundary
        num_cols = math.ceil(diagonal / width) + 2
        num_rows = math.ceil(diagonal / height) + 2

        col_offsets = _axis_offsets(
            num_cols, width, params.frame_gap_x,
            params.corridor_width, params.corridor_every_n_frames_x,
        )
        row_offsets = _axis_offsets(
            num_rows, height, params.frame_gap_y,
            params.corridor_width, params.corridor_every_n_frames_y,
        )

        local_exclusions = self._nearby(exclusions, bbox)

        frames = []
        index = start_index
        for row_index, dy in enumerate(row_offsets):
            for col_index, dx in enumerate(col_offsets):
                frame_center = (
                    center.x + row_dir[0] * dx + col_dir[0] * dy,
                    center.y + row_dir[1] * dx + col_dir[1] * dy,
                )
                corners = calculate_frame_corners(frame_center, width, height, rotation)

                frame_box = bounding_box(corners)
                if not _boxes_overlap(frame_box, bbox):
                    continue

                if not frame_fully_contained(
                    corners, boundary, self._nearby(local_exclusions, frame_box)
                ):
                    continue

                frames.append(FramePlacement(
                    index=index,
                    row_index=row_index,
                    col_index=col_index,
                    frame_rows=params.frame_rows,
                    frame_columns=params.frame_columns,
                    center_coord=projection.to_global(frame_center),
                    width_m=width,
                    height_m=height,
                    rotation_deg=rotation,
                    boundary_index=boundary_index,
                ))
                index += 1

        logger.debug(
            f"Boundary {boundary_index}: {len(frames)} of {num_rows * num_cols} candidate frames accepted"
        )
        return frames, index


class LegacyRowLayoutGenerator(_SiteLayoutGenerator):
    """
    Row-line placement kept for layouts stored in the older row shape.

    Full-length row lines are clipped to the boundary, exclusion zones are
    subtracted as 1-D intervals, and whole modules are fitted along each
    surviving segment.
    """

    def generate(self, site: Site) -> GeneratedLayout:
        """
        Generate a legacy row layout for a site.

        Raises:
            LayoutGenerationError: If the site has no centroid or no boundaries
        """
        if self.module.length_m <= 0 or self.row_pitch() <= 0:
            raise LayoutGenerationError("Module length and row pitch must be positive")

        projection, exclusions = self._prepare(site)

        rows: list[PanelRow] = []
        covered_area = 0.0
        for boundary in site.boundaries:
            usable = self._usable_polygon(
                projection.ring_to_local(boundary.coordinates), boundary.name
            )
            if usable is None:
                continue

            rows.extend(self._place_rows(usable, exclusions, projection, start_index=len(rows)))
            covered_area += polygon_area(usable)

        summary = summarize_rows(rows, self.module, covered_area)
        logger.info(f"Placed {summary.total_rows} legacy rows ({summary.total_panels} panels) on site {site.id}")

        return GeneratedLayout(
            site_id=site.id,
            module=self.module,
            parameters=self.parameters,
            frames=[],
            rows=rows,
            summary=summary,
            generated_at=_timestamp(),
            mode=LayoutMode.LEGACY_ROWS,
        )

    def row_pitch(self) -> float:
        """
        Row pitch from the target GCR, never tighter than the minimum gap.

        GCR = module width / pitch, with the width foreshortened by tilt.
        """
        tilt = math.radians(self.parameters.tilt_angle)
        effective_width = self.module.width_m * math.cos(tilt)
        gcr_pitch = effective_width / self.parameters.gcr if self.parameters.gcr > 0 else 0.0
        return max(gcr_pitch, effective_width + self.parameters.row_gap_m)

    def _place_rows(
        self,
        boundary: Ring,
        exclusions: Sequence[Ring],
        projection: LocalProjection,
        start_index: int,
    ) -> list[PanelRow]:
        """Fit module rows along row lines across one usable boundary."""
        pitch = self.row_pitch()
        module_length = self.module.length_m

        angle = math.radians(self.parameters.rotation_deg)
        row_dir = (math.cos(angle), math.sin(angle))
        perp_dir = (-row_dir[1], row_dir[0])

        bbox = bounding_box(boundary)
        center = bbox.center
        diagonal = bbox.diagonal
        num_rows = math.ceil(diagonal / pitch) + 2
        start_offset = -((num_rows - 1) / 2) * pitch

        local_exclusions = self._nearby(exclusions, bbox)

        rows = []
        for i in range(num_rows):
            offset = start_offset + i * pitch
            row_center = (center.x + perp_dir[0] * offset, center.y + perp_dir[1] * offset)
            line_start = (row_center[0] - row_dir[0] * diagonal, row_center[1] - row_dir[1] * diagonal)
            line_end = (row_center[0] + row_dir[0] * diagonal, row_center[1] + row_dir[1] * diagonal)

            segments = clip_segment_to_polygon(line_start, line_end, boundary)
            for exclusion in local_exclusions:
                segments = [
                    piece
                    for seg_start, seg_end in segments
                    for piece in subtract_polygon_from_segment(seg_start, seg_end, exclusion)
                ]

            for seg_start, seg_end in segments:
                length = local_distance(seg_start, seg_end)
                panel_count = math.floor(length / module_length)
                if panel_count <= 0:
                    continue

                rows.append(PanelRow(
                    index=start_index + len(rows),
                    panel_count=panel_count,
                    start_coord=projection.to_global(seg_start),
                    end_coord=projection.to_global(seg_end),
                    length_m=length,
                ))

        return rows


def generate_layout(
    site: Site,
    module: ModuleInput,
    parameters: LayoutParameters,
) -> GeneratedLayout:
    """Generate a frame layout for a site."""
    return FrameLayoutGenerator(module, parameters).generate(site)


def generate_legacy_layout(
    site: Site,
    module: ModuleInput,
    parameters: LayoutParameters,
) -> GeneratedLayout:
    """Generate a layout in the older row-based shape."""
    return LegacyRowLayoutGenerator(module, parameters).generate(site)


def estimate_capacity(
    usable_area_sqm: float,
    module: ModuleInput,
    parameters: LayoutParameters,
) -> CapacityEstimate:
    """
    Quick capacity estimate without placing frames.

    Assumes 70% of the usable area packs with the average per-frame
    footprint including gaps and amortized corridors. Intended for live
    previews; generate_layout is the authoritative result.
    """
    width, _, height = parameters.frame_dimensions(module)
    pitch_x = width + _average_spacing(
        parameters.frame_gap_x, parameters.corridor_width, parameters.corridor_every_n_frames_x
    )
    pitch_y = height + _average_spacing(
        parameters.frame_gap_y, parameters.corridor_width, parameters.corridor_every_n_frames_y
    )
    footprint = pitch_x * pitch_y

    if usable_area_sqm <= 0 or footprint <= 0:
        frame_count = 0
    else:
        frame_count = math.floor(usable_area_sqm * ESTIMATE_PACKING_EFFICIENCY / footprint)

    panel_count = frame_count * parameters.modules_per_frame
    dc_capacity_kw = panel_count * module.wattage / 1000

    return CapacityEstimate(
        panel_count=panel_count,
        frame_count=frame_count,
        dc_capacity_kw=dc_capacity_kw,
        dc_capacity_mw=dc_capacity_kw / 1000,
    )
