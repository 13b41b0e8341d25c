"""
KML/KMZ file parsing service.

Extracts site boundaries and exclusion zones from KML and KMZ files.
Every polygon placemark is classified from its folder context and text
(see zone_classifier), measured, and returned with the site centroid.
"""
import io
import logging
import uuid
import xml.etree.ElementTree as ET
import zipfile
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Union

from sitelayout.models.exclusion_zone import SiteExclusionZone
from sitelayout.models.geo import GeoCoordinate
from sitelayout.models.site import SiteBoundary
from sitelayout.services.geometry import polygon_area
from sitelayout.services.projection import LocalProjection, mean_coordinate
from sitelayout.services.zone_classifier import PlacemarkKind, classify_placemark

logger = logging.getLogger(__name__)

SQUARE_METERS_PER_ACRE = 4046.86


class KMLParseError(Exception):
    """Raised when KML/KMZ parsing fails."""
    pass


@dataclass
class KMLParseResult:
    """Boundaries, exclusion zones and centroid extracted from a site file."""
    boundaries: list[SiteBoundary] = field(default_factory=list)
    exclusion_zones: list[SiteExclusionZone] = field(default_factory=list)
    centroid: Optional[GeoCoordinate] = None
    total_area: float = 0.0  # Boundary area only, square meters
    placemark_count: int = 0


# Parser for site formats other than KML/KMZ: (content, filename) -> result
SiteFileDelegate = Callable[[bytes, str], KMLParseResult]


def _local_name(tag: str) -> str:
    """Strip the XML namespace from a tag."""
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    """Text of the first direct child with the given local name."""
    for child in element:
        if _local_name(child.tag) == name:
            return (child.text or "").strip()
    return None


def _descendants(element: ET.Element, name: str) -> list[ET.Element]:
    """All descendants (excluding the element itself) with the given local name."""
    return [e for e in element.iter() if e is not element and _local_name(e.tag) == name]


class KMLParser:
    """
    Parser for KML and KMZ site files.

    Uses direct XML parsing so it works across KML versions with or
    without the KML namespace.
    """

    KML_EXTENSIONS = {".kml", ".kmz"}
    MAX_FILE_SIZE = 25 * 1024 * 1024  # 25 MB

    # Rings smaller than this are treated as digitizing noise
    MIN_POLYGON_AREA_M2 = 1.0

    @classmethod
    def parse(
        cls,
        content: bytes,
        filename: str,
        delegate: Optional[SiteFileDelegate] = None,
    ) -> KMLParseResult:
        """
        Parse a site file, dispatching on its extension.

        Args:
            content: Raw file bytes
            filename: Original filename (used to determine file type)
            delegate: Parser for non-KML formats (e.g. proprietary archives)

        Returns:
            KMLParseResult with boundaries, exclusion zones and centroid

        Raises:
            KMLParseError: If the file is too large, unsupported or malformed
        """
        if len(content) > cls.MAX_FILE_SIZE:
            raise KMLParseError(f"File exceeds maximum size of {cls.MAX_FILE_SIZE // (1024*1024)}MB")

        ext = cls.get_extension(filename)
        if ext == ".kml":
            return cls.parse_kml(content)
        if ext == ".kmz":
            return cls.parse_kml(cls._extract_kmz(content))

        if delegate is None:
            raise KMLParseError(
                f"Unsupported file type. Allowed: {', '.join(sorted(cls.KML_EXTENSIONS))}"
            )

        logger.info(f"Delegating {ext or 'extensionless'} file '{filename}' to external parser")
        return delegate(content, filename)

    @classmethod
    def get_extension(cls, filename: str) -> str:
        """Get lowercase file extension."""
        return "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    @classmethod
    def _extract_kmz(cls, content: bytes) -> bytes:
        """
        Extract KML from KMZ (ZIP) archive.

        KMZ files are ZIP archives containing a doc.kml file (or similar).
        """
        try:
            with zipfile.ZipFile(io.BytesIO(content), "r") as zf:
                kml_files = [n for n in zf.namelist() if n.lower().endswith(".kml")]

                if not kml_files:
                    raise KMLParseError("No KML file found in KMZ archive")

                # Prefer doc.kml if present, otherwise use first KML file
                main_kml = next(
                    (f for f in kml_files if f.lower().rsplit("/", 1)[-1] == "doc.kml"),
                    kml_files[0]
                )

                return zf.read(main_kml)

        except zipfile.BadZipFile:
            raise KMLParseError("Invalid KMZ file: not a valid ZIP archive")

    @classmethod
    def parse_kml(cls, content: Union[bytes, str]) -> KMLParseResult:
        """
        Parse KML markup into boundaries and exclusion zones.

        Malformed XML fails the whole parse; degenerate rings are skipped.
        """
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise KMLParseError(f"Invalid KML file: {e}")

        result = KMLParseResult()
        point_fallback: Optional[GeoCoordinate] = None

        for placemark, folders in cls._iter_placemarks(root, []):
            result.placemark_count += 1
            name = _child_text(placemark, "name") or "Unnamed"
            description = _child_text(placemark, "description") or ""

            classification = classify_placemark(name, description, folders)
            if classification.kind == PlacemarkKind.SKIP:
                logger.debug(f"Skipping derived placemark '{name}' (folders: {folders})")
                continue

            rings = cls._extract_rings(placemark)
            if not rings:
                if point_fallback is None and _child_text(placemark, "name"):
                    point_fallback = cls._extract_point(placemark)
                continue

            for coordinates in rings:
                area = cls._ring_area(coordinates)
                if len(coordinates) < 3 or area < cls.MIN_POLYGON_AREA_M2:
                    logger.debug(f"Skipping degenerate ring in '{name}' ({len(coordinates)} points)")
                    continue

                if classification.kind == PlacemarkKind.EXCLUSION:
                    result.exclusion_zones.append(SiteExclusionZone(
                        id=str(uuid.uuid4()),
                        name=name,
                        type=classification.zone_type,
                        coordinates=coordinates,
                        area=area,
                        description=description or None,
                    ))
                else:
                    result.boundaries.append(SiteBoundary(
                        id=str(uuid.uuid4()),
                        name=name,
                        coordinates=coordinates,
                        area=area,
                    ))

        result.centroid = mean_coordinate(
            c for boundary in result.boundaries for c in boundary.coordinates
        ) or point_fallback
        result.total_area = sum(b.area or 0.0 for b in result.boundaries)

        logger.info(
            f"Parsed {result.placemark_count} placemarks: "
            f"{len(result.boundaries)} boundaries, "
            f"{len(result.exclusion_zones)} exclusion zones, "
            f"{square_meters_to_acres(result.total_area):.1f} acres"
        )
        return result

    @classmethod
    def _iter_placemarks(
        cls, element: ET.Element, folders: list[str]
    ) -> Iterator[tuple[ET.Element, list[str]]]:
        """Yield every placemark with its ancestor folder names (lower-cased)."""
        for child in element:
            tag = _local_name(child.tag)
            if tag == "Placemark":
                yield child, folders
            elif tag == "Folder":
                label = (_child_text(child, "name") or "").lower()
                yield from cls._iter_placemarks(child, folders + [label])
            else:
                yield from cls._iter_placemarks(child, folders)

    @classmethod
    def _extract_rings(cls, placemark: ET.Element) -> list[list[GeoCoordinate]]:
        """
        Extract outer rings from a placemark.

        Handles Polygon/outerBoundaryIs/LinearRing (including inside
        MultiGeometry) and bare LinearRing geometries. Holes are ignored.
        """
        rings = []
        polygons = _descendants(placemark, "Polygon")

        for polygon in polygons:
            coords_elem = None
            for outer in _descendants(polygon, "outerBoundaryIs"):
                found = _descendants(outer, "coordinates")
                if found:
                    coords_elem = found[0]
                    break
            if coords_elem is None:
                # Try alternative structure
                found = _descendants(polygon, "coordinates")
                coords_elem = found[0] if found else None

            if coords_elem is not None and coords_elem.text:
                rings.append(cls._parse_coordinates(coords_elem.text))

        if not polygons:
            for ring in _descendants(placemark, "LinearRing"):
                found = _descendants(ring, "coordinates")
                if found and found[0].text:
                    rings.append(cls._parse_coordinates(found[0].text))

        return rings

    @classmethod
    def _extract_point(cls, placemark: ET.Element) -> Optional[GeoCoordinate]:
        """Coordinate of a Point placemark, if it has one."""
        for point in _descendants(placemark, "Point"):
            found = _descendants(point, "coordinates")
            if found and found[0].text:
                coords = cls._parse_coordinates(found[0].text, drop_closing=False)
                if coords:
                    return coords[0]
        return None

    @classmethod
    def _parse_coordinates(cls, coord_text: str, drop_closing: bool = True) -> list[GeoCoordinate]:
        """
        Parse KML coordinate string into coordinates.

        KML format: "lon,lat[,alt] lon,lat[,alt] ..." separated by any
        whitespace. Unparsable tuples are skipped. Rings repeat their first
        vertex at the end; that closing duplicate is dropped.
        """
        coords = []
        for coord_str in coord_text.split():
            parts = coord_str.split(",")
            if len(parts) < 2:
                continue
            try:
                lon = float(parts[0])
                lat = float(parts[1])
                elevation = float(parts[2]) if len(parts) > 2 and parts[2] else None
            except ValueError:
                continue
            coords.append(GeoCoordinate(latitude=lat, longitude=lon, elevation=elevation))

        if drop_closing and len(coords) > 1 and (
            coords[0].latitude == coords[-1].latitude
            and coords[0].longitude == coords[-1].longitude
        ):
            coords.pop()
        return coords

    @staticmethod
    def _ring_area(coordinates: list[GeoCoordinate]) -> float:
        """Ring area in square meters, measured around the ring's own center."""
        origin = mean_coordinate(coordinates)
        if origin is None:
            return 0.0
        projection = LocalProjection(origin)
        return polygon_area(projection.ring_to_local(coordinates))


def square_meters_to_acres(sq_meters: float) -> float:
    """Convert area in square meters to acres."""
    return sq_meters / SQUARE_METERS_PER_ACRE


def square_meters_to_hectares(sq_meters: float) -> float:
    """Convert area in square meters to hectares."""
    return sq_meters / 10000


def format_area_acres(sq_meters: float) -> str:
    """Format area for display (acres with appropriate precision)."""
    acres = square_meters_to_acres(sq_meters)
    if acres < 1:
        return f"{acres:.2f}"
    if acres < 10:
        return f"{acres:.1f}"
    return str(round(acres))
