"""Curve intersection queries.

- Curve against an infinite line or a segment: the implicit line equation
  substituted into the curve gives a quadratic in t.
- Curve against curve: bounding-box bisection over an explicit worklist.
- Boolean ``intersects_*`` variants that stop at the first hit.

Every reported ``CurveIntersection`` carries the sign of (tangent of the
owning curve) x (direction of the other curve or edge) at the crossing.
"""

import logging
from collections.abc import Iterator

from planarkit.config import DEFAULT_TOLERANCE, ToleranceConfig
from planarkit.core.curves import ENDPOINT_SNAP
from planarkit.core.geometry import edge_intersection_parameters
from planarkit.core.numeric import solve_quadratic
from planarkit.domain import (
    AxisAlignedBox,
    CrossDirection,
    CurveIntersection,
    Edge,
    Point,
    QuadraticBezier,
)

logger = logging.getLogger(__name__)


def _hull_box(curve: QuadraticBezier) -> AxisAlignedBox:
    """Box around p0, p1 and the two first-level de Casteljau points.

    Tighter than the control box and still contains the whole curve.
    """
    return AxisAlignedBox.from_points(
        curve.p0, curve.p0.mid(curve.control), curve.control.mid(curve.p1), curve.p1
    )


def _snap_parameter(root: float) -> float | None:
    if abs(root) < ENDPOINT_SNAP:
        return 0.0
    if abs(root - 1) < ENDPOINT_SNAP:
        return 1.0
    if 0 < root < 1:
        return root
    return None


def _line_intersections(
    curve: QuadraticBezier,
    edge: Edge,
    clip_to_segment: bool,
    tolerance: ToleranceConfig,
) -> list[CurveIntersection]:
    q0, q1 = edge.p0, edge.p1
    if q0 == q1:
        return []

    if curve.is_linear(tolerance):
        chord = curve.chord
        if clip_to_segment:
            hit = edge_intersection_parameters(chord, edge)
            if hit is None:
                return []
            point, t, other_t = hit
        else:
            d = edge.vector.cross(chord.vector)
            if abs(d) < tolerance.epsilon:
                return []
            t = edge.vector.cross(q0 - chord.p0) / d
            if not 0 <= t <= 1:
                return []
            point = chord.position(t)
            other_t = edge.vector.dot(point - q0) / edge.vector.length_squared()
        direction = CrossDirection.from_cross(chord.vector.cross(edge.vector))
        return [CurveIntersection(t, other_t, direction, point)]

    p0, cp, p1 = curve.p0, curve.control, curve.p1
    a = q1.y - q0.y
    b = q0.x - q1.x
    c = -a * q1.x - q1.y * b
    da = a * (p0.x - 2 * cp.x + p1.x) + b * (p0.y - 2 * cp.y + p1.y)
    db = 2 * a * (cp.x - p0.x) + 2 * b * (cp.y - p0.y)
    dc = a * p0.x + b * p0.y + c

    v = edge.vector
    v_length_squared = v.length_squared()
    results: list[CurveIntersection] = []
    seen: set[float] = set()
    for root in solve_quadratic(da, db, dc, tolerance):
        t = _snap_parameter(root)
        if t is None or t in seen:
            continue
        seen.add(t)
        point = curve.position(t)
        other_t = v.dot(point - q0) / v_length_squared
        if clip_to_segment and not (0 <= other_t <= 1):
            continue
        direction = CrossDirection.from_cross(curve.tangent(t).cross(v))
        results.append(CurveIntersection(t, other_t, direction, point))
    return results


def intersections_with_line(
    curve: QuadraticBezier, edge: Edge, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[CurveIntersection]:
    """Intersections of the curve with the infinite line through ``edge``.

    ``other_t`` is the projection parameter on the line and may lie outside
    [0, 1].
    """
    return _line_intersections(curve, edge, False, tolerance)


def intersections_with_edge(
    curve: QuadraticBezier, edge: Edge, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[CurveIntersection]:
    """Intersections of the curve with a segment.

    Substitutes the curve into the implicit line a*x + b*y + c = 0 of the
    segment, solves the resulting quadratic in t and keeps roots in [0, 1]
    that also fall within the segment. A linear curve is intersected as a
    straight edge (proper crossings only).

    Args:
        curve: Owning curve
        edge: Segment to intersect with
        tolerance: Tolerances

    Returns:
        Zero to two intersections ordered as found
    """
    return _line_intersections(curve, edge, True, tolerance)


def _bisect(
    a: QuadraticBezier, b: QuadraticBezier, tolerance: ToleranceConfig
) -> Iterator[tuple[float, float, Point]]:
    """Yield (t on a, t on b, point) for every converged box pair.

    Each worklist item holds a parameter range on both curves, which curve to
    halve next and how many halvings produced it. Items are processed
    depth-first; a pair whose boxes are disjoint is dropped, and a pair whose
    to-be-halved curve fits in ``intersection_min_range`` is reported.
    """
    min_range = tolerance.intersection_min_range
    max_depth = 2 * tolerance.max_intersection_depth

    # (a_lo, a_hi, b_lo, b_hi, split_b, depth)
    stack: list[tuple[float, float, float, float, bool, int]] = [(0.0, 1.0, 0.0, 1.0, True, 0)]
    while stack:
        a_lo, a_hi, b_lo, b_hi, split_b, depth = stack.pop()
        box_a = _hull_box(a.clip(a_lo, a_hi))
        box_b = _hull_box(b.clip(b_lo, b_hi))
        if not box_a.intersects(box_b):
            continue

        other_box = box_b if split_b else box_a
        if other_box.width < min_range and other_box.height < min_range:
            yield (a_lo + a_hi) / 2, (b_lo + b_hi) / 2, other_box.center
            continue

        if depth >= max_depth:
            logger.debug(
                "Curve bisection reached depth %d at a=[%s, %s] b=[%s, %s]",
                depth, a_lo, a_hi, b_lo, b_hi,
            )
            continue

        if split_b:
            b_mid = (b_lo + b_hi) / 2
            stack.append((a_lo, a_hi, b_mid, b_hi, False, depth + 1))
            stack.append((a_lo, a_hi, b_lo, b_mid, False, depth + 1))
        else:
            a_mid = (a_lo + a_hi) / 2
            stack.append((a_mid, a_hi, b_lo, b_hi, True, depth + 1))
            stack.append((a_lo, a_mid, b_lo, b_hi, True, depth + 1))


def intersections_with_curve(
    a: QuadraticBezier, b: QuadraticBezier, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[CurveIntersection]:
    """Intersections between two quadratic curves.

    There is no useful closed form, so both curves are bisected alternately
    until their boxes shrink below ``tolerance.intersection_min_range``.
    Hits closer than ``intersection_min_distance_squared`` to an earlier hit
    are merged into it, and hits where the tangents are parallel (touching
    rather than crossing) are dropped. The search stops after
    ``max_intersection_count`` hits.

    Args:
        a: Owning curve; ``t`` refers to it
        b: Other curve; ``other_t`` refers to it
        tolerance: Tolerances

    Returns:
        Intersections in discovery order; empty when a and b are identical
    """
    if a == b:
        return []

    results: list[CurveIntersection] = []
    for t, other_t, point in _bisect(a, b, tolerance):
        if any(
            r.point.distance_squared(point) < tolerance.intersection_min_distance_squared
            for r in results
        ):
            continue
        cross = a.tangent(t).cross(b.tangent(other_t))
        if cross == 0:
            continue
        results.append(CurveIntersection(t, other_t, CrossDirection.from_cross(cross), point))
        if len(results) >= tolerance.max_intersection_count:
            break
    return results


def intersects_curve(
    a: QuadraticBezier, b: QuadraticBezier, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> bool:
    """True if the curves touch or cross; stops at the first converged box pair."""
    if a == b:
        return False
    return next(_bisect(a, b, tolerance), None) is not None


def intersects_edge(
    curve: QuadraticBezier, edge: Edge, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> bool:
    return bool(intersections_with_edge(curve, edge, tolerance))


def intersects_rect(
    curve: QuadraticBezier, box: AxisAlignedBox, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> bool:
    """True if any part of the curve lies inside or crosses the box."""
    if not curve.control_bounding_box().intersects(box):
        return False
    if box.contains(curve.p0) or box.contains(curve.p1):
        return True
    c0, c1, c2, c3 = box.corners()
    return any(
        intersects_edge(curve, side, tolerance)
        for side in (Edge(c0, c1), Edge(c1, c2), Edge(c2, c3), Edge(c3, c0))
    )
