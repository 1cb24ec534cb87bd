"""Path composition layer.

Turns mixed line/quadratic contours into kernel input and answers fill and
hit-testing queries directly on the curves:
- Flattening pathlines and shapes into polygons and topolygons
- Curve-based even-odd fill test (no flattening involved)
- Nearest distance and pairwise intersections between pathlines
"""

import logging

from planarkit.config import DEFAULT_TOLERANCE, FlatteningConfig, ToleranceConfig
from planarkit.core import curves
from planarkit.core.geometry import edge_intersection_parameters, edge_ray_casting
from planarkit.core.intersections import intersections_with_curve, intersections_with_edge
from planarkit.core.numeric import ensure_finite
from planarkit.domain import (
    AxisAlignedBox,
    CrossDirection,
    CurveIntersection,
    CurveTo,
    Edge,
    LineTo,
    Pathline,
    Point,
    Polygon,
    QuadraticBezier,
    Shape,
    Topolygon,
)

logger = logging.getLogger(__name__)


def validate_pathline(pathline: Pathline) -> None:
    """Reject NaN or infinite coordinates.

    Raises:
        InvalidGeometryError: If any coordinate is not finite
    """
    ensure_finite("pathline start", pathline.start.x, pathline.start.y)
    for segment in pathline.segments:
        match segment:
            case LineTo(point=point):
                ensure_finite("line point", point.x, point.y)
            case CurveTo(point=point, control=control):
                ensure_finite("curve point", point.x, point.y)
                ensure_finite("curve control", control.x, control.y)


def flatten_pathline(
    pathline: Pathline,
    config: FlatteningConfig | None = None,
    tolerance: ToleranceConfig = DEFAULT_TOLERANCE,
) -> Polygon:
    """Flatten a closed pathline into a polygon ring.

    Straight segments contribute their end point; curves contribute their
    sampled points. The closing point is not repeated.
    """
    points: list[Point] = [pathline.start]
    for element in pathline.elements():
        match element:
            case Edge():
                points.append(element.p1)
            case QuadraticBezier():
                points.extend(curves.flatten(element, config, tolerance)[1:])
    if len(points) > 1 and points[-1] == points[0]:
        points.pop()
    return Polygon(tuple(points))


def shape_to_topolygon(
    shape: Shape,
    config: FlatteningConfig | None = None,
    tolerance: ToleranceConfig = DEFAULT_TOLERANCE,
) -> Topolygon:
    """Flatten a shape: first contour becomes the outer ring, the rest holes."""
    if not shape.contours:
        return Topolygon(Polygon())
    rings = [flatten_pathline(c, config, tolerance) for c in shape.contours]
    return Topolygon(rings[0], tuple(rings[1:]))


def pathline_ray_casting(
    pathline: Pathline, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> int:
    """Winding number of a closed pathline around p, from its curves directly."""
    total = 0
    for element in pathline.elements():
        match element:
            case Edge():
                total += edge_ray_casting(element, p)
            case QuadraticBezier():
                total += curves.ray_casting(element, p, tolerance)
    return total


def pathline_contains(
    pathline: Pathline, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> bool:
    """Even-odd fill test against the exact curves of a closed pathline."""
    return pathline_ray_casting(pathline, p, tolerance) % 2 != 0


def shape_contains(shape: Shape, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> bool:
    """Even-odd fill test over every contour of a shape."""
    return sum(pathline_ray_casting(c, p, tolerance) for c in shape.contours) % 2 != 0


def pathline_bounding_box(
    pathline: Pathline, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> AxisAlignedBox:
    box = AxisAlignedBox.from_points(pathline.start)
    for element in pathline.elements():
        match element:
            case Edge():
                box = box.union(element.bounding_box())
            case QuadraticBezier():
                box = box.union(curves.bounding_box(element, tolerance))
    return box


def nearest_distance_squared(
    pathline: Pathline, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> float:
    """Squared distance from p to the closest point of the pathline."""
    best = pathline.start.distance_squared(p)
    for element in pathline.elements():
        match element:
            case Edge():
                d = element.distance_squared(p)
            case QuadraticBezier():
                _, d = curves.nearest_point(element, p, tolerance)
        best = min(best, d)
    return best


def hit_test(
    pathline: Pathline, p: Point, radius: float, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> bool:
    """True if the stroke of the pathline passes within ``radius`` of p."""
    return nearest_distance_squared(pathline, p, tolerance) <= radius * radius


def _element_intersections(
    a: Edge | QuadraticBezier, b: Edge | QuadraticBezier, tolerance: ToleranceConfig
) -> list[CurveIntersection]:
    match a, b:
        case Edge(), Edge():
            hit = edge_intersection_parameters(a, b)
            if hit is None:
                return []
            point, t, other_t = hit
            direction = CrossDirection.from_cross(a.vector.cross(b.vector))
            return [CurveIntersection(t, other_t, direction, point)]
        case QuadraticBezier(), Edge():
            return intersections_with_edge(a, b, tolerance)
        case Edge(), QuadraticBezier():
            return [r.swapped() for r in intersections_with_edge(b, a, tolerance)]
        case QuadraticBezier(), QuadraticBezier():
            return intersections_with_curve(a, b, tolerance)
    return []


def pathline_intersections(
    a: Pathline, b: Pathline, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[tuple[int, int, CurveIntersection]]:
    """Crossings between two pathlines for hit-testing and trimming.

    Args:
        a: First pathline; ``t`` of each record refers to its segment
        b: Second pathline; ``other_t`` refers to its segment
        tolerance: Tolerances

    Returns:
        (segment index on a, segment index on b, intersection) records
    """
    elements_b = list(b.elements())
    results: list[tuple[int, int, CurveIntersection]] = []
    for i, ea in enumerate(a.elements()):
        for j, eb in enumerate(elements_b):
            for hit in _element_intersections(ea, eb, tolerance):
                results.append((i, j, hit))
    return results
