"""
Pydantic schemas for Layout API endpoints.

Request schemas validate parameter ranges and convert to the frozen
domain dataclasses; response schemas are built from those dataclasses
with from_attributes.
"""
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from sitelayout.config import get_settings
from sitelayout.models.layout import (
    FramePlacement,
    GeneratedLayout,
    LayoutMode,
    LayoutParameters,
    LayoutSummary,
    ModuleInput,
    PanelRow,
)
from sitelayout.schemas.site import GeoCoordinateSchema, SiteSchema

# Defaults for omitted parameters come from config (environment-specific)
_settings = get_settings()


# =============================================================================
# Inputs
# =============================================================================


class ModuleInputSchema(BaseModel):
    """PV module dimensions and rating."""
    
    length_mm: float = Field(..., gt=0, le=5000, description="Module length in mm (e.g. 2384)")
    width_mm: float = Field(..., gt=0, le=3000, description="Module width in mm (e.g. 1134)")
    wattage: float = Field(..., gt=0, le=2000, description="Rated power in W (e.g. 665)")
    name: str = Field(default="", max_length=255)
    source: Literal["manual", "library"] = "manual"
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> ModuleInput:
        return ModuleInput(**self.model_dump())


class LayoutParametersSchema(BaseModel):
    """Frame shape, spacing, orientation and setback."""
    
    tilt_angle: float = Field(
        default=_settings.default_tilt_angle_deg,
        ge=0,
        le=45,
        description="Degrees from horizontal",
    )
    azimuth: float = Field(
        default=_settings.default_azimuth_deg,
        ge=0,
        le=360,
        description="Compass degrees the modules face (180 = South)",
    )
    frame_rows: int = Field(default=2, ge=1, le=10, description="Modules stacked up the slope")
    frame_columns: int = Field(default=14, ge=1, le=100, description="Modules side by side")
    module_gap_m: float = Field(default=0.02, ge=0, le=1)
    frame_gap_x: float = Field(default=0.5, ge=0, le=50, description="Gap between frames along a row")
    frame_gap_y: float = Field(default=6.0, ge=0, le=50, description="Gap between frame rows")
    corridor_width: float = Field(default=6.0, ge=0, le=100)
    corridor_every_n_frames_x: int = Field(
        default=0, ge=0, le=1000, description="Corridor interval along rows (0 = none)"
    )
    corridor_every_n_frames_y: int = Field(
        default=0, ge=0, le=1000, description="Corridor interval across rows (0 = none)"
    )
    boundary_setback_m: float = Field(
        default=_settings.default_boundary_setback_m,
        ge=0,
        le=500,
        description="Inward offset applied to every boundary",
    )
    gcr: float = Field(default=0.4, gt=0, le=1, description="Target ground coverage ratio (legacy rows)")
    row_gap_m: float = Field(default=3.0, ge=0, le=50, description="Minimum gap between legacy rows")
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> LayoutParameters:
        return LayoutParameters(**self.model_dump())


class GenerateLayoutRequest(BaseModel):
    """Request schema for layout generation."""
    
    site: SiteSchema
    module: ModuleInputSchema
    parameters: LayoutParametersSchema = Field(default_factory=LayoutParametersSchema)
    mode: LayoutMode = Field(
        default=LayoutMode.FRAMES,
        description="frames for 2D frame packing, legacy_rows for row-line placement",
    )


class EstimateCapacityRequest(BaseModel):
    """Request schema for the quick capacity estimate."""
    
    usable_area_sqm: float = Field(..., ge=0)
    module: ModuleInputSchema
    parameters: LayoutParametersSchema = Field(default_factory=LayoutParametersSchema)


# =============================================================================
# Generated layout
# =============================================================================


class FramePlacementSchema(BaseModel):
    """One placed frame."""
    
    index: int = Field(..., ge=0)
    row_index: int = Field(..., ge=0)
    col_index: int = Field(..., ge=0)
    frame_rows: int = Field(..., ge=1)
    frame_columns: int = Field(..., ge=1)
    center_coord: GeoCoordinateSchema
    width_m: float
    height_m: float = Field(..., description="Ground footprint height after tilt")
    rotation_deg: float
    boundary_index: int = Field(default=0, ge=0)
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> FramePlacement:
        return FramePlacement(
            index=self.index,
            row_index=self.row_index,
            col_index=self.col_index,
            frame_rows=self.frame_rows,
            frame_columns=self.frame_columns,
            center_coord=self.center_coord.to_domain(),
            width_m=self.width_m,
            height_m=self.height_m,
            rotation_deg=self.rotation_deg,
            boundary_index=self.boundary_index,
        )


class PanelRowSchema(BaseModel):
    """One row in the legacy row shape."""
    
    index: int = Field(..., ge=0)
    panel_count: int = Field(..., ge=0)
    start_coord: GeoCoordinateSchema
    end_coord: GeoCoordinateSchema
    length_m: float = Field(..., ge=0)
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> PanelRow:
        return PanelRow(
            index=self.index,
            panel_count=self.panel_count,
            start_coord=self.start_coord.to_domain(),
            end_coord=self.end_coord.to_domain(),
            length_m=self.length_m,
        )


class LayoutSummarySchema(BaseModel):
    """Summary statistics for a generated layout."""
    
    total_panels: int
    total_frames: int
    total_rows: int
    dc_capacity_kw: float
    dc_capacity_mw: float
    actual_gcr: float
    covered_area_sqm: float
    module_area_sqm: float
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> LayoutSummary:
        return LayoutSummary(**self.model_dump())


class GeneratedLayoutSchema(BaseModel):
    """A complete generated layout, as returned by /generate."""
    
    site_id: str
    module: ModuleInputSchema
    parameters: LayoutParametersSchema
    summary: LayoutSummarySchema
    generated_at: str
    frames: list[FramePlacementSchema] = Field(default_factory=list)
    rows: list[PanelRowSchema] = Field(default_factory=list)
    mode: LayoutMode = LayoutMode.FRAMES
    
    class Config:
        from_attributes = True
    
    def to_domain(self) -> GeneratedLayout:
        return GeneratedLayout(
            site_id=self.site_id,
            module=self.module.to_domain(),
            parameters=self.parameters.to_domain(),
            summary=self.summary.to_domain(),
            generated_at=self.generated_at,
            frames=[f.to_domain() for f in self.frames],
            rows=[r.to_domain() for r in self.rows],
            mode=self.mode,
        )


class CapacityEstimateResponse(BaseModel):
    """Response schema for the quick capacity estimate."""
    
    panel_count: int
    frame_count: int
    dc_capacity_kw: float
    dc_capacity_mw: float
    
    class Config:
        from_attributes = True


# =============================================================================
# Rendering / export
# =============================================================================


class LayoutRenderRequest(BaseModel):
    """Request schema for render data and GeoJSON conversion."""
    
    site: SiteSchema
    layout: GeneratedLayoutSchema
    mounting_height_m: Optional[float] = Field(None, ge=0, le=10)


class PanelGeometrySchema(BaseModel):
    """Renderable table in local meters."""
    
    id: str
    position: tuple[float, float, float]
    rotation: float = Field(..., description="Yaw in radians")
    table_width: float
    table_height: float
    module_rows: int
    module_columns: int
    mounting_height: float
    tilt_angle: float
    
    class Config:
        from_attributes = True


class RenderBoundsSchema(BaseModel):
    """Padded bounds of the rendered panels."""
    
    min: tuple[float, float, float]
    max: tuple[float, float, float]
    center: tuple[float, float, float]
    size: tuple[float, float, float]
    
    class Config:
        from_attributes = True


class RenderDataResponse(BaseModel):
    """Panel geometry for 2D/3D viewers."""
    
    panels: list[PanelGeometrySchema]
    bounds: RenderBoundsSchema
    latitude: float
    longitude: float
    units: str = "meters"
    layers: list[dict[str, Any]] = Field(default_factory=list)
    
    class Config:
        from_attributes = True


class GeoJSONFeatureCollection(BaseModel):
    """GeoJSON FeatureCollection of frame footprints or legacy rows."""
    
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[dict[str, Any]]
