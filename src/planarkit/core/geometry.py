"""Straight-edge geometric operations.

This module provides the line-segment predicates the curve and polygon
kernels fall back on:
- Turn direction of three points
- Signed area (shoelace formula)
- Segment/segment and line/line intersection
- Half-open horizontal ray casting against a segment

All functions are pure, stateless, and designed for use in parallel processing.

Ray casting convention:
    The ray leaves p towards +x. A crossing is counted when it lies strictly
    to the right of p, and an endpoint only counts when it is the lower end of
    the segment (``p0.y <= y < p1.y`` or ``p1.y <= y < p0.y``). Rising
    crossings contribute +1 and falling ones -1, so the sum over a closed ring
    is its winding number around p and the parity is the even-odd rule. The
    curve kernel applies the identical rule at curve endpoints.
"""

from planarkit.config import DEFAULT_TOLERANCE, ToleranceConfig
from planarkit.domain import CrossDirection, Edge, Point


def ccw(p0: Point, p1: Point, p2: Point) -> float:
    """Turn direction at p1 when walking p0 -> p1 -> p2.

    Positive for a left (counter-clockwise) turn, negative for a right turn
    and zero when the points are collinear.

    Examples:
        >>> ccw(Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0))
        1.0
    """
    return (p1 - p0).cross(p2 - p1)


def signed_area(points: list[Point] | tuple[Point, ...]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: Ring vertices; the closing edge is implicit

    Returns:
        Signed area in square units. Returns 0.0 for fewer than 3 points.

    Examples:
        >>> square = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]
        >>> signed_area(square)
        1.0
        >>> signed_area(square[::-1])
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def edges_intersect(e0: Edge, e1: Edge) -> bool:
    """Closed segment intersection test; touching counts as intersecting."""
    v0 = e0.vector
    v1 = e1.vector
    return (
        v0.cross(e1.p0 - e0.p0) * v0.cross(e1.p1 - e0.p0) <= 0
        and v1.cross(e0.p0 - e1.p0) * v1.cross(e0.p1 - e1.p0) <= 0
    )


def edge_intersection_parameters(e0: Edge, e1: Edge) -> tuple[Point, float, float] | None:
    """Proper crossing of two segments with the parameter on each.

    Only strict crossings are reported: segments that merely touch at an
    endpoint, overlap collinearly, or are parallel yield None.

    Args:
        e0: First segment
        e1: Second segment

    Returns:
        (point, t on e0, t on e1) or None
    """
    v0 = e0.vector
    v1 = e1.vector
    a = v1.cross(e0.p0 - e1.p0)
    b = v1.cross(e0.p1 - e1.p0)
    c = v0.cross(e1.p0 - e0.p0)
    d = v0.cross(e1.p1 - e0.p0)
    if not (a * b < 0 and c * d < 0):
        return None
    t0 = abs(a) / (abs(a) + abs(b))
    t1 = abs(c) / (abs(c) + abs(d))
    return e0.p0 + v0 * t0, t0, t1


def edge_intersection(e0: Edge, e1: Edge) -> Point | None:
    """Point where two segments properly cross, or None."""
    result = edge_intersection_parameters(e0, e1)
    return result[0] if result is not None else None


def line_intersection(
    e0: Edge, e1: Edge, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> Point | None:
    """Intersection of the infinite lines through two segments.

    Returns:
        The intersection point, or None when the lines are (nearly) parallel
    """
    v0 = e0.vector
    v1 = e1.vector
    d = v1.cross(v0)
    if abs(d) < tolerance.epsilon:
        return None
    return e0.p0 + v0 * (v1.cross(e1.p0 - e0.p0) / d)


def edge_ray_crossings(edge: Edge, p: Point) -> list[tuple[float, CrossDirection, Point]]:
    """Crossing of a rightward horizontal ray from p with a segment.

    Args:
        edge: Segment to test
        p: Ray origin

    Returns:
        Zero or one (t, direction, point) tuples; direction is POSITIVE when
        the segment rises through the ray
    """
    p0, p1 = edge.p0, edge.p1
    if not ((p0.y <= p.y < p1.y) or (p1.y <= p.y < p0.y)):
        return []
    t = (p.y - p0.y) / (p1.y - p0.y)
    x = p0.x + (p1.x - p0.x) * t
    if x <= p.x:
        return []
    direction = CrossDirection.POSITIVE if p1.y > p0.y else CrossDirection.NEGATIVE
    return [(t, direction, Point(x, p.y))]


def edge_ray_casting(edge: Edge, p: Point) -> int:
    """Signed crossing count (+1, -1 or 0) of a rightward ray from p with a segment."""
    return sum(direction.sign for _, direction, _ in edge_ray_crossings(edge, p))
