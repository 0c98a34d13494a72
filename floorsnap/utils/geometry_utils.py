"""Pure 2D geometric utilities for the layout engine.

Points are (x, y) tuples in room-local coordinates: origin at the room's
top-left inner corner, X to the right, Y downward (screen convention).
Angles are in degrees, measured from +X toward +Y.
"""

import math

import numpy as np

from shapely.geometry import Polygon

# Squared segment length below which a segment is treated as a point.
DEGENERATE_LENGTH_SQ = 1e-12

# Slack applied to strict distance comparisons to absorb float round-off.
DISTANCE_EPSILON = 1e-6

Point = tuple[float, float]


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def segment_length(a: Point, b: Point) -> float:
    return distance(a, b)


def segment_angle_deg(a: Point, b: Point) -> float:
    """Heading of the segment a->b in degrees, in (-180, 180]."""
    return math.degrees(math.atan2(b[1] - a[1], b[0] - a[0]))


def normalize_angle(angle_deg: float) -> float:
    """Normalize an angle into [0, 360)."""
    normalized = angle_deg % 360.0
    # -0.0 % 360 yields 0.0 but tiny negatives can round up to 360.0.
    if normalized >= 360.0:
        normalized -= 360.0
    return normalized


def snap_angle(angle_deg: float, increment_deg: float) -> float:
    """Round an angle to the nearest multiple of increment, normalized to [0, 360).

    Halfway cases round up so the result does not depend on float parity.
    """
    if increment_deg <= 0:
        return normalize_angle(angle_deg)
    steps = math.floor(angle_deg / increment_deg + 0.5)
    return normalize_angle(steps * increment_deg)


def project_parameter(p: Point, a: Point, b: Point) -> float | None:
    """Parameter t of the perpendicular foot of p on the infinite line a->b.

    t=0 at a, t=1 at b. Returns None for a degenerate segment.
    """
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length_sq = dx * dx + dy * dy
    if length_sq < DEGENERATE_LENGTH_SQ:
        return None
    return ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / length_sq


def closest_point_on_segment(p: Point, a: Point, b: Point) -> tuple[Point, float]:
    """Perpendicular-foot projection of p onto segment a-b, clamped to the segment.

    Args:
        p: Query point.
        a: Segment start.
        b: Segment end.

    Returns:
        (closest_point, t) where t is the clamped parameter in [0, 1]. A
        degenerate segment returns (a, 0.0).
    """
    t = project_parameter(p, a, b)
    if t is None:
        return (a[0], a[1]), 0.0
    t = max(0.0, min(1.0, t))
    return (a[0] + t * (b[0] - a[0]), a[1] + t * (b[1] - a[1])), t


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Distance from p to the closest point of segment a-b."""
    closest, _ = closest_point_on_segment(p, a, b)
    return distance(p, closest)


def point_line_distance(p: Point, a: Point, b: Point) -> float:
    """Perpendicular distance from p to the infinite line through a and b."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length = math.hypot(dx, dy)
    if length * length < DEGENERATE_LENGTH_SQ:
        return distance(p, a)
    return abs(dy * p[0] - dx * p[1] + b[0] * a[1] - b[1] * a[0]) / length


def side_of_line(p: Point, a: Point, b: Point) -> float:
    """Signed cross product telling which side of a->b the point p lies on.

    Positive values are on the side of the left normal (-dy, dx).
    """
    return (b[0] - a[0]) * (p[1] - a[1]) - (b[1] - a[1]) * (p[0] - a[0])


def unit_normal(a: Point, b: Point) -> Point:
    """Left unit normal (-dy, dx)/|ab| of segment a->b. (0, 0) if degenerate."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length = math.hypot(dx, dy)
    if length * length < DEGENERATE_LENGTH_SQ:
        return 0.0, 0.0
    return -dy / length, dx / length


def _orientation(p: Point, q: Point, r: Point) -> int:
    value = (q[1] - p[1]) * (r[0] - q[0]) - (q[0] - p[0]) * (r[1] - q[1])
    if abs(value) < DEGENERATE_LENGTH_SQ:
        return 0
    return 1 if value > 0 else 2


def _on_segment(p: Point, q: Point, r: Point) -> bool:
    return (
        min(p[0], r[0]) - DISTANCE_EPSILON <= q[0] <= max(p[0], r[0]) + DISTANCE_EPSILON
        and min(p[1], r[1]) - DISTANCE_EPSILON
        <= q[1]
        <= max(p[1], r[1]) + DISTANCE_EPSILON
    )


def segments_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """Whether closed segments a1-a2 and b1-b2 share at least one point."""
    o1 = _orientation(a1, a2, b1)
    o2 = _orientation(a1, a2, b2)
    o3 = _orientation(b1, b2, a1)
    o4 = _orientation(b1, b2, a2)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear special cases.
    if o1 == 0 and _on_segment(a1, b1, a2):
        return True
    if o2 == 0 and _on_segment(a1, b2, a2):
        return True
    if o3 == 0 and _on_segment(b1, a1, b2):
        return True
    if o4 == 0 and _on_segment(b1, a2, b2):
        return True
    return False


def segment_intersection_point(
    a1: Point, a2: Point, b1: Point, b2: Point
) -> Point | None:
    """Single intersection point of two segments, or None.

    Parallel (including collinear overlapping) segments return None.
    """
    d1 = np.array([a2[0] - a1[0], a2[1] - a1[1]])
    d2 = np.array([b2[0] - b1[0], b2[1] - b1[1]])
    denom = d1[0] * d2[1] - d1[1] * d2[0]
    if abs(denom) < DEGENERATE_LENGTH_SQ:
        return None

    offset = np.array([b1[0] - a1[0], b1[1] - a1[1]])
    t = (offset[0] * d2[1] - offset[1] * d2[0]) / denom
    u = (offset[0] * d1[1] - offset[1] * d1[0]) / denom
    if -DISTANCE_EPSILON <= t <= 1 + DISTANCE_EPSILON and (
        -DISTANCE_EPSILON <= u <= 1 + DISTANCE_EPSILON
    ):
        point = np.array(a1) + t * d1
        return float(point[0]), float(point[1])
    return None


def rotated_rect_corners(
    center: Point, along: float, across: float, heading_deg: float
) -> np.ndarray:
    """Corners of a rectangle rotated about its center.

    Args:
        center: Rectangle center.
        along: Extent along the heading direction.
        across: Extent perpendicular to the heading direction.
        heading_deg: Direction of the `along` axis.

    Returns:
        (4, 2) array of corner coordinates, counter-clockwise in local frame.
    """
    theta = math.radians(heading_deg)
    axis_along = np.array([math.cos(theta), math.sin(theta)])
    axis_across = np.array([-math.sin(theta), math.cos(theta)])
    half_along = axis_along * (along / 2.0)
    half_across = axis_across * (across / 2.0)
    c = np.array(center, dtype=float)
    return np.array(
        [
            c - half_along - half_across,
            c + half_along - half_across,
            c + half_along + half_across,
            c - half_along + half_across,
        ]
    )


def rotated_rect_bounds(
    center: Point, along: float, across: float, heading_deg: float
) -> tuple[float, float, float, float]:
    """Axis-aligned bounding box of a rotated rectangle.

    Returns:
        (min_x, min_y, max_x, max_y).
    """
    corners = rotated_rect_corners(center, along, across, heading_deg)
    return Polygon(corners.tolist()).bounds


def aabb_intersects(
    a: tuple[float, float, float, float], b: tuple[float, float, float, float]
) -> bool:
    """Strict overlap test for two (min_x, min_y, max_x, max_y) boxes.

    Boxes that only touch along an edge do not intersect.
    """
    return a[0] < b[2] and a[2] > b[0] and a[1] < b[3] and a[3] > b[1]


def rect_to_bounds(
    x: float, y: float, width: float, height: float
) -> tuple[float, float, float, float]:
    """Convert a top-left/size rectangle to (min_x, min_y, max_x, max_y)."""
    return x, y, x + width, y + height
