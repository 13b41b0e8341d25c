"""
Layout models - module specs, generation parameters and generated output.

A GeneratedLayout is produced fresh on each generation call and never
mutated; regenerating with different parameters yields a new layout.
"""
import math
from dataclasses import dataclass, field
from enum import Enum

from sitelayout.models.geo import GeoCoordinate


class LayoutMode(str, Enum):
    """How a layout's placements were produced."""
    FRAMES = "frames"            # Current 2D frame packing
    LEGACY_ROWS = "legacy_rows"  # Older 1D row-line placement


@dataclass(frozen=True)
class ModuleInput:
    """The electrical/physical unit placed inside a frame."""
    length_mm: float  # e.g. 2384
    width_mm: float   # e.g. 1134
    wattage: float    # W, e.g. 665
    name: str = ""
    source: str = "manual"  # manual | library

    @property
    def length_m(self) -> float:
        return self.length_mm / 1000

    @property
    def width_m(self) -> float:
        return self.width_mm / 1000

    @property
    def area_m2(self) -> float:
        return self.length_m * self.width_m


@dataclass(frozen=True)
class LayoutParameters:
    """
    Layout generation parameters.

    Azimuth follows compass convention (0 = North, 180 = South). A
    corridor interval of 0 disables corridors on that axis. `gcr` and
    `row_gap_m` only apply to legacy row placement.
    """
    # Orientation
    tilt_angle: float = 20.0   # Degrees from horizontal (0-45)
    azimuth: float = 180.0     # Degrees (0-360)

    # Frame shape
    frame_rows: int = 2
    frame_columns: int = 14
    module_gap_m: float = 0.02

    # Spacing
    frame_gap_x: float = 0.5   # Between frames along a row
    frame_gap_y: float = 6.0   # Between frame rows
    corridor_width: float = 6.0
    corridor_every_n_frames_x: int = 0
    corridor_every_n_frames_y: int = 0

    boundary_setback_m: float = 10.0

    # Legacy row placement
    gcr: float = 0.4
    row_gap_m: float = 3.0

    @property
    def rotation_deg(self) -> float:
        """Frame yaw; a south-facing azimuth maps to zero (rows run east-west)."""
        return self.azimuth - 180.0

    @property
    def modules_per_frame(self) -> int:
        return self.frame_rows * self.frame_columns

    def frame_dimensions(self, module: ModuleInput) -> tuple[float, float, float]:
        """
        Get frame (width, physical height, ground height) in meters.

        Tilt foreshortens the ground footprint: ground height is the
        physical height times cos(tilt).
        """
        width = (
            self.frame_columns * module.length_m
            + (self.frame_columns - 1) * self.module_gap_m
        )
        height = (
            self.frame_rows * module.width_m
            + (self.frame_rows - 1) * self.module_gap_m
        )
        ground_height = height * math.cos(math.radians(self.tilt_angle))
        return width, height, ground_height


@dataclass(frozen=True)
class FramePlacement:
    """
    One physical table.

    `index` is unique per site. `(row_index, col_index)` are local to the
    grid of boundary `boundary_index`. `height_m` is the ground footprint
    height (after tilt foreshortening).
    """
    index: int
    row_index: int
    col_index: int
    frame_rows: int
    frame_columns: int
    center_coord: GeoCoordinate
    width_m: float
    height_m: float
    rotation_deg: float
    boundary_index: int = 0


@dataclass(frozen=True)
class PanelRow:
    """A single row of panels in the legacy row-based layout shape."""
    index: int
    panel_count: int
    start_coord: GeoCoordinate
    end_coord: GeoCoordinate
    length_m: float


@dataclass(frozen=True)
class LayoutSummary:
    """Summary statistics for a generated layout."""
    total_panels: int
    total_frames: int
    total_rows: int
    dc_capacity_kw: float
    dc_capacity_mw: float
    actual_gcr: float
    covered_area_sqm: float  # Usable area after setbacks
    module_area_sqm: float   # Total panel surface area


@dataclass(frozen=True)
class GeneratedLayout:
    """Complete generated layout for a site."""
    site_id: str
    module: ModuleInput
    parameters: LayoutParameters
    summary: LayoutSummary
    generated_at: str  # ISO timestamp
    frames: list[FramePlacement] = field(default_factory=list)
    rows: list[PanelRow] = field(default_factory=list)
    mode: LayoutMode = LayoutMode.FRAMES


@dataclass(frozen=True)
class CapacityEstimate:
    """Fast capacity approximation for live previews. Not authoritative."""
    panel_count: int
    frame_count: int
    dc_capacity_kw: float
    dc_capacity_mw: float

