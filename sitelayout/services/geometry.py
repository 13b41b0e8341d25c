"""
Polygon geometry kernel for layout generation.

Pure functions over ordered point lists in local meter coordinates.
Rings are treated as closed cycles; an explicit closing duplicate vertex
is not required.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from shapely.geometry import Polygon

from sitelayout.models.geo import LocalCoordinate

Point = tuple[float, float]
Ring = Sequence[Point]

# Below this the segments are treated as parallel
PARALLEL_EPSILON = 1e-10
# Intersections this close to a segment endpoint do not count as crossings
ENDPOINT_EPSILON = 1e-10


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box of a point set."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> LocalCoordinate:
        return LocalCoordinate(
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2,
        )

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)


# =============================================================================
# Area and containment
# =============================================================================


def signed_polygon_area(polygon: Ring) -> float:
    """
    Shoelace area, positive for counter-clockwise rings.

    Returns 0 for fewer than 3 points.
    """
    n = len(polygon)
    if n < 3:
        return 0.0

    total = 0.0
    for i in range(n):
        x1, y1 = polygon[i]
        x2, y2 = polygon[(i + 1) % n]
        total += x1 * y2 - x2 * y1

    return total / 2


def polygon_area(polygon: Ring) -> float:
    """Absolute polygon area in square units."""
    return abs(signed_polygon_area(polygon))


def point_in_polygon(point: Point, polygon: Ring) -> bool:
    """Even-odd ray casting containment test."""
    px, py = point
    inside = False
    n = len(polygon)

    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > py) != (yj > py) and px < (xj - xi) * (py - yi) / (yj - yi) + xi:
            inside = not inside
        j = i

    return inside


def is_simple_polygon(polygon: Ring) -> bool:
    """True if the ring is a valid, non-self-intersecting polygon."""
    if len(polygon) < 3:
        return False
    return Polygon(polygon).is_valid


# =============================================================================
# Segment and polygon intersection
# =============================================================================


def _intersection_params(
    a1: Point, a2: Point, b1: Point, b2: Point
) -> Optional[tuple[float, float]]:
    """Solve for (t, u) along segments a and b, or None if parallel."""
    d1x = a2[0] - a1[0]
    d1y = a2[1] - a1[1]
    d2x = b2[0] - b1[0]
    d2y = b2[1] - b1[1]

    cross = d1x * d2y - d1y * d2x
    if abs(cross) < PARALLEL_EPSILON:
        return None

    dx = b1[0] - a1[0]
    dy = b1[1] - a1[1]
    t = (dx * d2y - dy * d2x) / cross
    u = (dx * d1y - dy * d1x) / cross
    return t, u


def segment_intersection(
    a1: Point, a2: Point, b1: Point, b2: Point
) -> Optional[tuple[LocalCoordinate, float]]:
    """
    Intersection of two segments, endpoints included.

    Returns the intersection point and its parameter t along segment a,
    or None when the segments are parallel or do not meet.
    """
    params = _intersection_params(a1, a2, b1, b2)
    if params is None:
        return None

    t, u = params
    if 0 <= t <= 1 and 0 <= u <= 1:
        return interpolate_local(a1, a2, t), t

    return None


def segments_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """
    True if the segments properly cross.

    Touching at an endpoint does not count, so a frame corner resting
    exactly on a boundary edge is not a crossing.
    """
    params = _intersection_params(a1, a2, b1, b2)
    if params is None:
        return False

    t, u = params
    return (
        ENDPOINT_EPSILON < t < 1 - ENDPOINT_EPSILON
        and ENDPOINT_EPSILON < u < 1 - ENDPOINT_EPSILON
    )


def polygons_intersect(poly1: Ring, poly2: Ring) -> bool:
    """True if any edge of poly1 crosses any edge of poly2."""
    n1 = len(poly1)
    n2 = len(poly2)

    for i in range(n1):
        a1 = poly1[i]
        a2 = poly1[(i + 1) % n1]
        for j in range(n2):
            if segments_intersect(a1, a2, poly2[j], poly2[(j + 1) % n2]):
                return True

    return False


def polygons_overlap(poly1: Ring, poly2: Ring) -> bool:
    """
    True if the polygons intersect or one contains the other.

    Edge crossings alone miss full containment, so vertices of each
    polygon are also tested against the other.
    """
    if polygons_intersect(poly1, poly2):
        return True

    if any(point_in_polygon(corner, poly2) for corner in poly1):
        return True

    return any(point_in_polygon(corner, poly1) for corner in poly2)


def frame_fully_contained(
    frame_corners: Ring,
    boundary: Ring,
    exclusions: Sequence[Ring],
) -> bool:
    """
    Check a frame against the usable area.

    The frame must lie completely inside the boundary (all corners inside
    and no edge crossings) and must not overlap any exclusion polygon.
    """
    if not all(point_in_polygon(corner, boundary) for corner in frame_corners):
        return False

    if polygons_intersect(frame_corners, boundary):
        return False

    return not any(polygons_overlap(frame_corners, exclusion) for exclusion in exclusions)


# =============================================================================
# Offsets, transforms and measurements
# =============================================================================


def shrink_polygon(polygon: Ring, distance: float) -> list[LocalCoordinate]:
    """
    Offset a polygon inward by a distance.

    Each vertex moves `distance` along the normalized average of its two
    adjacent inward edge normals, so corner vertices travel exactly
    `distance` and the edges between them shift by less.
    Inward is taken from the ring's orientation. Vertices on zero-length
    edges, or where the ring doubles back on itself, stay put.

    This is an approximation, not a true polygon buffer: sharp concave
    vertices or distances beyond the inradius can produce self-intersecting
    or inverted rings. Callers decide how to treat those.
    """
    points = [LocalCoordinate(x, y) for x, y in polygon]
    n = len(points)
    if n < 3 or distance <= 0:
        return points

    # Left-hand normals point inward for counter-clockwise rings
    orientation = 1.0 if signed_polygon_area(points) >= 0 else -1.0

    result = []
    for i in range(n):
        prev = points[i - 1]
        curr = points[i]
        nxt = points[(i + 1) % n]

        v1x, v1y = curr.x - prev.x, curr.y - prev.y
        v2x, v2y = nxt.x - curr.x, nxt.y - curr.y
        len1 = math.hypot(v1x, v1y)
        len2 = math.hypot(v2x, v2y)

        if len1 == 0 or len2 == 0:
            result.append(curr)
            continue

        in1x, in1y = -v1y / len1 * orientation, v1x / len1 * orientation
        in2x, in2y = -v2y / len2 * orientation, v2x / len2 * orientation

        avg_x = (in1x + in2x) / 2
        avg_y = (in1y + in2y) / 2
        avg_len = math.hypot(avg_x, avg_y)

        if avg_len == 0:
            result.append(curr)
            continue

        result.append(LocalCoordinate(
            curr.x + avg_x / avg_len * distance,
            curr.y + avg_y / avg_len * distance,
        ))

    return result


def offset_collapses(polygon: Ring, distance: float) -> bool:
    """
    True if an inward offset by `distance` leaves no area at all.

    Measured with a true negative buffer: the approximate offset of a
    symmetric ring pushed past its inradius keeps its orientation, so a
    sign check alone misses it. Invalid rings are never reported as
    collapsed.
    """
    if len(polygon) < 3:
        return True

    shape = Polygon(polygon)
    if not shape.is_valid:
        return False
    return shape.buffer(-distance).is_empty


def bounding_box(points: Ring) -> BoundingBox:
    """Bounding box of a point set; all zeros when empty."""
    if not points:
        return BoundingBox(0.0, 0.0, 0.0, 0.0)

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def local_distance(a: Point, b: Point) -> float:
    """Euclidean distance between two local points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def interpolate_local(start: Point, end: Point, t: float) -> LocalCoordinate:
    """Point at parameter t (0-1) along a segment."""
    return LocalCoordinate(
        start[0] + (end[0] - start[0]) * t,
        start[1] + (end[1] - start[1]) * t,
    )


def rotate_point(point: Point, angle_degrees: float) -> LocalCoordinate:
    """Rotate a point counter-clockwise around the origin."""
    angle = math.radians(angle_degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    x, y = point
    return LocalCoordinate(x * cos_a - y * sin_a, x * sin_a + y * cos_a)


def rotate_point_around(
    point: Point, center: Point, angle_degrees: float
) -> LocalCoordinate:
    """Rotate a point counter-clockwise around an arbitrary center."""
    rotated = rotate_point((point[0] - center[0], point[1] - center[1]), angle_degrees)
    return LocalCoordinate(center[0] + rotated.x, center[1] + rotated.y)


def calculate_frame_corners(
    center: Point,
    width: float,
    height: float,
    rotation_deg: float,
) -> list[LocalCoordinate]:
    """
    Four corners of a rectangle rotated about its center.

    Order before rotation: bottom-left, bottom-right, top-right, top-left.
    """
    hw = width / 2
    hh = height / 2
    corners = [(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)]

    result = []
    for corner in corners:
        rotated = rotate_point(corner, rotation_deg)
        result.append(LocalCoordinate(center[0] + rotated.x, center[1] + rotated.y))
    return result


# =============================================================================
# 1-D segment splitting (legacy row placement)
# =============================================================================


def _split_segment(
    start: Point, end: Point, polygon: Ring
) -> list[tuple[LocalCoordinate, LocalCoordinate, bool]]:
    """
    Split a segment at every polygon edge crossing.

    Returns (start, end, inside) pieces. Inside-ness is sampled at each
    piece's midpoint, which stays correct when the line passes exactly
    through a polygon vertex.
    """
    n = len(polygon)
    params = {0.0, 1.0}
    for i in range(n):
        hit = segment_intersection(start, end, polygon[i], polygon[(i + 1) % n])
        if hit is not None:
            params.add(hit[1])

    ordered = sorted(params)
    pieces: list[tuple[LocalCoordinate, LocalCoordinate, bool]] = []
    for t0, t1 in zip(ordered, ordered[1:]):
        if t1 - t0 < 1e-12:
            continue
        inside = point_in_polygon(interpolate_local(start, end, (t0 + t1) / 2), polygon)
        piece_start = interpolate_local(start, end, t0)
        piece_end = interpolate_local(start, end, t1)

        if pieces and pieces[-1][2] == inside:
            # Merge with the previous piece on the same side
            pieces[-1] = (pieces[-1][0], piece_end, inside)
        else:
            pieces.append((piece_start, piece_end, inside))

    return pieces


def clip_segment_to_polygon(
    start: Point, end: Point, polygon: Ring
) -> list[tuple[LocalCoordinate, LocalCoordinate]]:
    """Sub-segments of a segment lying inside the polygon."""
    if local_distance(start, end) == 0:
        return []
    return [(s, e) for s, e, inside in _split_segment(start, end, polygon) if inside]


def subtract_polygon_from_segment(
    start: Point, end: Point, polygon: Ring
) -> list[tuple[LocalCoordinate, LocalCoordinate]]:
    """Sub-segments of a segment lying outside the polygon."""
    if local_distance(start, end) == 0:
        return []
    return [(s, e) for s, e, inside in _split_segment(start, end, polygon) if not inside]
