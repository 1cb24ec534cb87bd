"""Triangulation of y-monotone polygons.

Convex polygons take a fast path that emits triangles in zig-zag strip order.
Everything else runs the classical single stack pass over the vertices
merged top to bottom from the two chains.

``triangulate_polygon`` and ``triangulate_topolygon`` run the full pipeline
(clean, resolve crossings, decompose, triangulate) for arbitrary input.
"""

import logging

from planarkit.config import DEFAULT_TOLERANCE, ToleranceConfig
from planarkit.core.monotone import decompose, is_convex_turn
from planarkit.core.polygon import (
    has_self_intersections,
    is_convex,
    resolve_self_intersections,
    signed_area,
    strip_order,
)
from planarkit.domain import Point, Polygon, Topolygon, Triangle
from planarkit.exceptions import MalformedPolygonError

logger = logging.getLogger(__name__)

RIGHT_CHAIN = 1
LEFT_CHAIN = -1


def _triangle(a: Point, b: Point, c: Point) -> Triangle:
    """Triangle with counter-clockwise vertex order."""
    if (b - a).cross(c - a) < 0:
        return Triangle(a, c, b)
    return Triangle(a, b, c)


def triangulate(polygon: Polygon) -> list[Triangle]:
    """Triangulate one y-monotone simple polygon.

    The vertices are ordered top to bottom (by the "below" order), tagging
    each with its chain. A stack seeded with the first two vertices is then
    swept: a vertex on the other chain than the stack top fans to every stack
    edge and resets the stack; a vertex on the same chain cuts off triangles
    while the diagonal to the second stack entry stays inside the polygon.

    Args:
        polygon: Y-monotone ring in either orientation

    Returns:
        Exactly ``len(polygon) - 2`` triangles, or none for fewer than three
        points
    """
    points = polygon.points
    n = len(points)
    if n < 3:
        return []
    if n == 3:
        return [_triangle(*points)]

    if is_convex(polygon):
        ps = strip_order(polygon).points
        return [_triangle(ps[i], ps[i + 1], ps[i + 2]) for i in range(n - 2)]

    # Clockwise, so walking forward from the top follows the right chain
    if signed_area(polygon) > 0:
        points = tuple(reversed(points))

    top = bottom = 0
    for i in range(1, n):
        if points[i].is_below(points[bottom]):
            bottom = i
        if points[top].is_below(points[i]):
            top = i

    chain = [0] * n
    order = [top]
    right = (top + 1) % n
    left = (top - 1) % n
    for _ in range(n - 2):
        if right == bottom or (left != bottom and points[right].is_below(points[left])):
            order.append(left)
            chain[left] = LEFT_CHAIN
            left = (left - 1) % n
        else:
            order.append(right)
            chain[right] = RIGHT_CHAIN
            right = (right + 1) % n
    order.append(bottom)

    triangles: list[Triangle] = []
    stack = [order[0], order[1]]
    for k in range(2, n - 1):
        v = order[k]
        if chain[v] != chain[stack[-1]]:
            for j in range(len(stack) - 1):
                triangles.append(_triangle(points[stack[j]], points[stack[j + 1]], points[v]))
            stack = [order[k - 1], v]
        else:
            last = stack.pop()
            while stack:
                second = stack[-1]
                if chain[v] == RIGHT_CHAIN:
                    inside = is_convex_turn(points[v], points[last], points[second])
                else:
                    inside = is_convex_turn(points[v], points[second], points[last])
                if not inside:
                    break
                triangles.append(_triangle(points[v], points[last], points[second]))
                last = stack.pop()
            stack.append(last)
            stack.append(v)

    for j in range(len(stack) - 1):
        triangles.append(_triangle(points[stack[j]], points[stack[j + 1]], points[bottom]))

    if len(triangles) != n - 2:
        logger.debug("Expected %d triangles, produced %d", n - 2, len(triangles))
    return triangles


def triangles_area(triangles: list[Triangle]) -> float:
    return sum(t.area for t in triangles)


def triangulate_topolygon(
    topolygon: Topolygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[Triangle]:
    """Triangulate an outer polygon with holes.

    Decomposes into monotone pieces and triangulates each. Faces rejected by
    the monotone check are logged by the decomposer and contribute nothing.

    Raises:
        MalformedPolygonError: If the sweep cannot decompose the rings
    """
    triangles: list[Triangle] = []
    for piece in decompose(topolygon, tolerance).polygons:
        triangles.extend(triangulate(piece))
    return triangles


def triangulate_polygon(
    polygon: Polygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[Triangle]:
    """Triangulate any polygon, splitting it first if it crosses itself.

    A face the decomposer cannot handle is logged and skipped; the other faces
    are still triangulated.
    """
    faces = (
        resolve_self_intersections(polygon, tolerance)
        if has_self_intersections(polygon)
        else [polygon]
    )
    triangles: list[Triangle] = []
    for face in faces:
        try:
            triangles.extend(triangulate_topolygon(Topolygon(face), tolerance))
        except MalformedPolygonError as e:
            logger.warning("Skipping face with %d points: %s", len(face), e)
    return triangles


def polygon_area(polygon: Polygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> float:
    """Filled area of a possibly self-crossing polygon, summed over its triangles."""
    return triangles_area(triangulate_polygon(polygon, tolerance))
