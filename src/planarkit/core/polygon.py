"""Polygon kernel.

This module provides operations on implicitly closed point rings:
- Orientation, signed area, centroid and bounds
- Convexity and y-monotonicity tests
- Convex hull (Andrew's monotone chain)
- Even-odd containment via half-open edge ray casting
- Cleaning (duplicate and collinear points) and strip ordering
- Self-touch detection and resolution of self-intersecting rings into
  simple faces

Functions never mutate their input; rings are rebuilt as new tuples.
"""

import logging
import math

from planarkit.config import DEFAULT_TOLERANCE, ToleranceConfig
from planarkit.core.geometry import (
    ccw,
    edge_intersection,
    edge_intersection_parameters,
    edge_ray_casting,
)
from planarkit.core.geometry import signed_area as _signed_area
from planarkit.domain import (
    AxisAlignedBox,
    CircularOrientation,
    Edge,
    Point,
    Polygon,
    Topolygon,
)

logger = logging.getLogger(__name__)


def signed_area(polygon: Polygon) -> float:
    """Shoelace area; positive for counter-clockwise rings."""
    return _signed_area(polygon.points)


def orientation(
    polygon: Polygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> CircularOrientation | None:
    """Winding of the ring, or None when its area is (numerically) zero.

    Examples:
        >>> square = Polygon.from_list([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> orientation(square)
        <CircularOrientation.COUNTER_CLOCKWISE: 'counter_clockwise'>
    """
    area = signed_area(polygon)
    if abs(area) < tolerance.epsilon:
        return None
    return CircularOrientation.COUNTER_CLOCKWISE if area > 0 else CircularOrientation.CLOCKWISE


def oriented(polygon: Polygon, target: CircularOrientation) -> Polygon:
    """The ring itself if it already winds ``target``, otherwise its reverse."""
    current = orientation(polygon)
    if current is None or current is target:
        return polygon
    return polygon.reversed()


def inverted(polygon: Polygon) -> Polygon:
    return polygon.reversed()


def centroid(polygon: Polygon) -> Point | None:
    """Vertex average of the ring, or None for an empty ring."""
    if polygon.is_empty:
        return None
    n = len(polygon)
    return Point(sum(p.x for p in polygon) / n, sum(p.y for p in polygon) / n)


def bounding_box(polygon: Polygon) -> AxisAlignedBox | None:
    if polygon.is_empty:
        return None
    return polygon.bounding_box()


def is_convex(polygon: Polygon) -> bool:
    """True if every vertex turns strictly the same way.

    Rings with a collinear vertex or fewer than three points are not convex.
    """
    points = polygon.points
    n = len(points)
    if n < 3:
        return False
    first = ccw(points[0], points[1], points[2])
    if first == 0:
        return False
    for i in range(1, n):
        turn = ccw(points[i], points[(i + 1) % n], points[(i + 2) % n])
        if first * turn <= 0:
            return False
    return True


def is_monotone(polygon: Polygon) -> bool:
    """True if the ring is y-monotone.

    Walking forward from the topmost vertex must descend strictly (in the
    "below" order) until the bottommost vertex, and keep ascending back to the
    top. Holds for either orientation.
    """
    points = polygon.points
    n = len(points)
    if n < 3:
        return False

    top = bottom = 0
    for i in range(1, n):
        if points[i].is_below(points[bottom]):
            bottom = i
        if points[top].is_below(points[i]):
            top = i

    index = top
    while index != bottom:
        j = (index + 1) % n
        if not points[j].is_below(points[index]):
            return False
        index = j
    index = bottom
    while index != top:
        j = (index + 1) % n
        if not points[index].is_below(points[j]):
            return False
        index = j
    return True


def convex_hull(points: list[Point] | tuple[Point, ...] | Polygon) -> Polygon:
    """Convex hull via Andrew's monotone chain, counter-clockwise.

    Collinear points on the hull boundary are dropped. Inputs of three points
    or fewer are returned as given.

    Args:
        points: Points (or a polygon) to enclose

    Returns:
        Counter-clockwise hull polygon
    """
    pts = tuple(points.points if isinstance(points, Polygon) else points)
    if len(pts) <= 3:
        return Polygon(pts)

    ordered = sorted(pts, key=lambda p: (p.x, p.y))
    hull: list[Point] = []
    for p in ordered:
        while len(hull) > 1 and ccw(hull[-2], hull[-1], p) <= 0:
            hull.pop()
        hull.append(p)
    lower_size = len(hull)
    for p in reversed(ordered[:-1]):
        while len(hull) > lower_size and ccw(hull[-2], hull[-1], p) <= 0:
            hull.pop()
        hull.append(p)
    hull.pop()
    return Polygon(tuple(hull))


def ray_casting(polygon: Polygon, p: Point) -> int:
    """Winding number of the ring around p, summed from signed edge crossings."""
    return sum(edge_ray_casting(edge, p) for edge in polygon.edges())


def contains_point(polygon: Polygon, p: Point) -> bool:
    """Even-odd containment test.

    Examples:
        >>> square = Polygon.from_list([(0, 0), (2, 0), (2, 2), (0, 2)])
        >>> contains_point(square, Point(1.0, 1.0))
        True
        >>> contains_point(square, Point(3.0, 1.0))
        False
    """
    return ray_casting(polygon, p) % 2 != 0


def topolygon_ray_casting(topolygon: Topolygon, p: Point) -> int:
    return sum(ray_casting(ring, p) for ring in topolygon.rings)


def topolygon_contains_point(topolygon: Topolygon, p: Point) -> bool:
    """Even-odd containment over the outer ring and all holes."""
    return topolygon_ray_casting(topolygon, p) % 2 != 0


def remove_duplicate_points(points: tuple[Point, ...] | list[Point]) -> tuple[Point, ...]:
    """Collapse runs of equal consecutive points, including across the closing edge."""
    result: list[Point] = []
    for p in points:
        if not result or result[-1] != p:
            result.append(p)
    while len(result) > 1 and result[0] == result[-1]:
        result.pop()
    return tuple(result)


def remove_collinear_points(
    points: tuple[Point, ...] | list[Point], tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> tuple[Point, ...]:
    """Drop vertices whose neighbours are collinear with them.

    Repeats until no vertex is dropped, so removing one point never leaves a
    newly collinear neighbour behind. Spikes (a vertex whose neighbours lie on
    the same ray) are removed as well.
    """
    pts = list(points)
    changed = True
    while changed and len(pts) >= 3:
        changed = False
        n = len(pts)
        kept: list[Point] = []
        for i, p in enumerate(pts):
            prev = pts[i - 1]
            nxt = pts[(i + 1) % n]
            if abs((p - prev).cross(p - nxt)) <= tolerance.epsilon:
                changed = True
                continue
            kept.append(p)
        pts = kept
    return tuple(pts)


def cleaned(polygon: Polygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> Polygon:
    """Polygon with duplicate and collinear points removed."""
    return Polygon(remove_collinear_points(remove_duplicate_points(polygon.points), tolerance))


def strip_order(polygon: Polygon) -> Polygon:
    """Reorder vertices zig-zag (0, 1, n-1, 2, n-2, ...) for triangle strips.

    Consecutive triples of the result are the fan-free triangulation of a
    convex polygon.
    """
    points = polygon.points
    n = len(points)
    if n == 0:
        return polygon
    order = [points[0]]
    for i in range(1, n):
        index = i // 2 + 1 if i % 2 != 0 else n - i // 2
        order.append(points[index])
    return Polygon(tuple(order))


def has_self_intersections(polygon: Polygon) -> bool:
    """True if two edges of the ring cross each other properly."""
    edges = list(polygon.edges())
    for i in range(len(edges)):
        for j in range(i + 1, len(edges)):
            if edge_intersection(edges[i], edges[j]) is not None:
                return True
    return False


def _touch_parameter(p: Point, edge: Edge, tolerance: ToleranceConfig) -> float | None:
    """Parameter of p strictly inside the edge, or None if p is off it."""
    if p == edge.p0 or p == edge.p1:
        return None
    v = edge.vector
    length_squared = v.dot(v)
    if length_squared <= tolerance.epsilon:
        return None
    offset = p - edge.p0
    if abs(v.cross(offset)) > tolerance.point_tolerance * math.sqrt(length_squared):
        return None
    t = v.dot(offset) / length_squared
    return t if 0.0 < t < 1.0 else None


def touching_points(
    points: tuple[Point, ...] | list[Point], tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> dict[int, dict[Point, float]]:
    """Vertices that lie inside a non-adjacent edge of the same ring.

    Returns:
        For each touched edge index, the touching points and their
        parameters on that edge
    """
    n = len(points)
    touches: dict[int, dict[Point, float]] = {}
    for i in range(n):
        edge = Edge(points[i], points[(i + 1) % n])
        for k in range(n):
            if k == i or k == (i + 1) % n:
                continue
            t = _touch_parameter(points[k], edge, tolerance)
            if t is not None:
                touches.setdefault(i, {})[points[k]] = t
    return touches


def _with_split_points(
    points: tuple[Point, ...], splits: dict[int, dict[Point, float]]
) -> tuple[Point, ...]:
    result: list[Point] = []
    for i, p in enumerate(points):
        result.append(p)
        for q, _ in sorted(splits.get(i, {}).items(), key=lambda item: item[1]):
            result.append(q)
    return tuple(result)


def insert_touching_points(
    points: tuple[Point, ...] | list[Point], tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> tuple[Point, ...]:
    """Insert every vertex that touches an edge into that edge.

    Afterwards each place where the ring meets itself without crossing shows
    up as a repeated vertex.
    """
    points = tuple(points)
    touches = touching_points(points, tolerance)
    return _with_split_points(points, touches) if touches else points


def is_pinched(polygon: Polygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> bool:
    """True if the ring meets itself at a repeated vertex or a vertex on an edge."""
    points = remove_duplicate_points(polygon.points)
    return len(set(points)) < len(points) or bool(touching_points(points, tolerance))


def _difference_angle(v0: Point, v1: Point) -> float:
    """Signed turn from v0 to v1 in (-pi, pi]; positive is a left turn."""
    return math.atan2(v0.cross(v1), v0.dot(v1))


def resolve_self_intersections(
    polygon: Polygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[Polygon]:
    """Split a self-crossing or self-touching ring into simple face polygons.

    Crossing points are inserted into both edges at their parametric
    positions, and vertices touching another edge into that edge. Equal
    points are one graph vertex, so a ring pinched at a repeated vertex
    separates there. Every resulting segment contributes a forward and a
    backward half-edge; faces are traced by always leaving a vertex along the
    half-edge that turns furthest left from the arrival direction, which walks
    bounded faces counter-clockwise. The unbounded face comes out as the
    clockwise loop through the lexicographically smallest vertex and is
    discarded, as are loops that collapse to zero area.

    Args:
        polygon: Ring that may cross itself
        tolerance: Tolerances

    Returns:
        Counter-clockwise simple polygons; the cleaned input alone when it
        neither crosses nor touches itself, and nothing when it has no area
    """
    ops = remove_duplicate_points(polygon.points)
    n = len(ops)
    if n < 3:
        return []

    edges = [Edge(ops[i], ops[(i + 1) % n]) for i in range(n)]
    splits: dict[int, dict[Point, float]] = {}
    for i in range(n):
        for j in range(i + 1, n):
            hit = edge_intersection_parameters(edges[i], edges[j])
            if hit is None:
                continue
            p, ti, tj = hit
            if p != edges[i].p0 and p != edges[i].p1:
                splits.setdefault(i, {})[p] = ti
            if p != edges[j].p0 and p != edges[j].p1:
                splits.setdefault(j, {})[p] = tj

    for i, touches in touching_points(ops, tolerance).items():
        splits.setdefault(i, {}).update(touches)

    if not splits and len(set(ops)) == n:
        ring = Polygon(ops)
        return [ring] if orientation(ring, tolerance) is not None else []

    nps = _with_split_points(ops, splits)
    count = len(nps)
    logger.debug("Resolving %d crossings and touches in a %d-point ring", count - n, n)

    # Half-edge (i, j) runs from nps[i] to nps[j]; j is i's ring neighbour
    outgoing: dict[Point, list[tuple[int, int]]] = {}
    for i in range(count):
        j = (i + 1) % count
        outgoing.setdefault(nps[i], []).append((i, j))
        outgoing.setdefault(nps[j], []).append((j, i))

    def vector(half_edge: tuple[int, int]) -> Point:
        return nps[half_edge[1]] - nps[half_edge[0]]

    def next_half_edge(half_edge: tuple[int, int]) -> tuple[int, int] | None:
        i, j = half_edge
        v0 = vector(half_edge)
        candidates = [h for h in outgoing[nps[j]] if h != (j, i)]
        if not candidates:
            return None
        return max(candidates, key=lambda h: _difference_angle(v0, vector(h)))

    min_point = min(nps, key=lambda p: (p.x, p.y))

    faces: list[Polygon] = []
    used: set[tuple[int, int]] = set()
    for i in range(count):
        for first in ((i, (i + 1) % count), ((i + 1) % count, i)):
            if first in used:
                continue
            loop: list[Point] = []
            half_edge = first
            closed = False
            while True:
                used.add(half_edge)
                loop.append(nps[half_edge[0]])
                following = next_half_edge(half_edge)
                if following is None:
                    break
                if following == first:
                    closed = True
                    break
                if following in used:
                    break
                half_edge = following
            if not closed:
                logger.debug("Dropping an open loop of %d points", len(loop))
                continue

            face = Polygon(tuple(loop))
            area = signed_area(face)
            if area < 0 and min_point in loop:
                continue
            if area <= tolerance.epsilon:
                continue
            faces.append(face)
    return faces
