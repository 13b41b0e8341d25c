"""
Render adapter for generated layouts.

Converts a GeneratedLayout into generic panel geometry (position,
rotation, dimensions) for 2D/3D viewers, and into a GeoJSON overlay for
map display. No placement logic lives here; it only re-projects.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Optional

from shapely.geometry import LineString, Polygon, mapping

from sitelayout.config import get_settings
from sitelayout.models.layout import GeneratedLayout
from sitelayout.models.site import Site
from sitelayout.services.geometry import calculate_frame_corners
from sitelayout.services.projection import LocalProjection


@dataclass
class PanelGeometry:
    """One renderable table (or single module for legacy rows)."""
    id: str
    position: tuple[float, float, float]
    rotation: float  # Radians around the vertical axis
    table_width: float
    table_height: float
    module_rows: int
    module_columns: int
    mounting_height: float
    tilt_angle: float


@dataclass
class RenderBounds:
    """Axis-aligned bounds of the rendered panels, padded."""
    min: tuple[float, float, float]
    max: tuple[float, float, float]

    @property
    def center(self) -> tuple[float, float, float]:
        return tuple((lo + hi) / 2 for lo, hi in zip(self.min, self.max))

    @property
    def size(self) -> tuple[float, float, float]:
        return tuple(hi - lo for lo, hi in zip(self.min, self.max))


@dataclass
class RenderData:
    """Panel geometry in local meters around the site centroid."""
    panels: list[PanelGeometry]
    bounds: RenderBounds
    latitude: float
    longitude: float
    units: str = "meters"
    layers: list[dict[str, Any]] = field(default_factory=list)


def _projection_for(site: Site) -> LocalProjection:
    if site.centroid is None:
        raise ValueError("Site must have a centroid for rendering")
    return LocalProjection(site.centroid)


def layout_to_render_data(
    layout: GeneratedLayout,
    site: Site,
    mounting_height_m: Optional[float] = None,
    padding_m: Optional[float] = None,
) -> RenderData:
    """
    Convert a generated layout into panel geometry for visualization.

    Frame layouts yield one table per frame. Legacy row layouts are
    expanded into single modules spaced evenly along each row.
    """
    settings = get_settings()
    if mounting_height_m is None:
        mounting_height_m = settings.default_mounting_height_m
    if padding_m is None:
        padding_m = settings.render_padding_m

    projection = _projection_for(site)
    params = layout.parameters
    module = layout.module
    panels: list[PanelGeometry] = []

    if layout.frames:
        _, table_height, _ = params.frame_dimensions(module)
        for frame in layout.frames:
            center = projection.to_local(frame.center_coord)
            panels.append(PanelGeometry(
                id=f"gen-frame-{frame.index}",
                position=(center.x, center.y, 0.0),
                rotation=math.radians(frame.rotation_deg),
                table_width=frame.width_m,
                table_height=table_height,
                module_rows=frame.frame_rows,
                module_columns=frame.frame_columns,
                mounting_height=mounting_height_m,
                tilt_angle=params.tilt_angle,
            ))
    else:
        for row in layout.rows:
            start = projection.to_local(row.start_coord)
            end = projection.to_local(row.end_coord)
            dx = end.x - start.x
            dy = end.y - start.y
            if dx == 0 and dy == 0:
                continue

            # Row direction already carries the azimuth yaw
            rotation = math.atan2(dy, dx)
            for i in range(row.panel_count):
                t = (i + 0.5) / row.panel_count
                panels.append(PanelGeometry(
                    id=f"gen-panel-{len(panels)}",
                    position=(start.x + dx * t, start.y + dy * t, 0.0),
                    rotation=rotation,
                    table_width=module.length_m,
                    table_height=module.width_m,
                    module_rows=1,
                    module_columns=1,
                    mounting_height=mounting_height_m,
                    tilt_angle=params.tilt_angle,
                ))

    if panels:
        xs = [p.position[0] for p in panels]
        ys = [p.position[1] for p in panels]
        min_x, max_x, min_y, max_y = min(xs), max(xs), min(ys), max(ys)
    else:
        min_x = max_x = min_y = max_y = 0.0

    bounds = RenderBounds(
        min=(min_x - padding_m, min_y - padding_m, 0.0),
        max=(max_x + padding_m, max_y + padding_m, 0.0),
    )

    return RenderData(
        panels=panels,
        bounds=bounds,
        latitude=site.centroid.latitude,
        longitude=site.centroid.longitude,
        layers=[{
            "name": "PANELS",
            "entity_count": len(panels),
            "classification": "panels",
            "visible": True,
        }],
    )


def layout_to_geojson(layout: GeneratedLayout, site: Site) -> dict[str, Any]:
    """
    Convert a layout to a GeoJSON FeatureCollection.

    Frames become Polygon features (ground footprint); legacy rows become
    LineString features.
    """
    projection = _projection_for(site)
    features = []

    for frame in layout.frames:
        center = projection.to_local(frame.center_coord)
        corners = calculate_frame_corners(center, frame.width_m, frame.height_m, frame.rotation_deg)
        ring = []
        for corner in corners:
            geo = projection.to_global(corner)
            ring.append((geo.longitude, geo.latitude))

        features.append({
            "type": "Feature",
            "geometry": mapping(Polygon(ring)),
            "properties": {
                "feature_type": "frame",
                "index": frame.index,
                "row_index": frame.row_index,
                "col_index": frame.col_index,
                "boundary_index": frame.boundary_index,
                "panels": frame.frame_rows * frame.frame_columns,
                "rotation_deg": frame.rotation_deg,
            },
        })

    if not layout.frames:
        for row in layout.rows:
            features.append({
                "type": "Feature",
                "geometry": mapping(LineString([
                    (row.start_coord.longitude, row.start_coord.latitude),
                    (row.end_coord.longitude, row.end_coord.latitude),
                ])),
                "properties": {
                    "feature_type": "row",
                    "index": row.index,
                    "panel_count": row.panel_count,
                    "length_m": row.length_m,
                },
            })

    return {
        "type": "FeatureCollection",
        "features": features,
    }
