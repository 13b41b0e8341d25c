"""
Business logic services for Solar Site Layouts.
"""
# Ingestion
from sitelayout.services.kml_parser import KMLParser, KMLParseError, KMLParseResult
from sitelayout.services.zone_classifier import classify_placemark

# Geometry
from sitelayout.services.projection import LocalProjection

# Layout generation
from sitelayout.services.layout_generator import (
    FrameLayoutGenerator,
    LayoutGenerationError,
    LegacyRowLayoutGenerator,
    estimate_capacity,
    generate_layout,
    generate_legacy_layout,
)
from sitelayout.services.render_adapter import layout_to_geojson, layout_to_render_data

__all__ = [
    # Ingestion
    "KMLParser",
    "KMLParseError",
    "KMLParseResult",
    "classify_placemark",
    # Geometry
    "LocalProjection",
    # Layout generation
    "FrameLayoutGenerator",
    "LegacyRowLayoutGenerator",
    "LayoutGenerationError",
    "generate_layout",
    "generate_legacy_layout",
    "estimate_capacity",
    # Rendering
    "layout_to_render_data",
    "layout_to_geojson",
]
