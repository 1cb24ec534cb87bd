"""Quadratic Bezier curve kernel.

This module provides the measurement and proximity queries for
``QuadraticBezier``:
- Arc length (closed form, sampled) and point-at-length
- Tight bounding box
- Half-open horizontal ray casting for fill tests
- Nearest point and farthest distance from a point
- Sampling and flattening into polylines
- Cubic import (cubic to two quadratics, y-at-x on a cubic)

Degenerate curves (control point on the chord, zero length) fall back to the
straight-edge formula instead of producing NaN, and every division is
guarded by an epsilon check against ``ToleranceConfig``.
"""

import logging
import math

from planarkit.config import DEFAULT_TOLERANCE, FlatteningConfig, ToleranceConfig
from planarkit.core._flatten import flatten_cubic as _flatten_cubic
from planarkit.core._flatten import flatten_quadratic as _flatten_quadratic
from planarkit.core.geometry import line_intersection
from planarkit.core.numeric import clipped, solve_cubic, solve_quadratic
from planarkit.domain import (
    AxisAlignedBox,
    CrossDirection,
    CubicBezier,
    Edge,
    Point,
    QuadraticBezier,
)

logger = logging.getLogger(__name__)

# Roots this close to an endpoint parameter are treated as the endpoint itself
ENDPOINT_SNAP = 1e-12


def curve_length(curve: QuadraticBezier, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> float:
    """Exact arc length of a quadratic Bezier curve.

    Integrates |tangent(t)| over [0, 1] in closed form. Linear curves, curves
    whose quadratic coefficient vanishes, and curves whose logarithmic term
    degenerates (a cusp) use the chord length instead.

    Args:
        curve: Curve to measure
        tolerance: Tolerances; ``epsilon`` guards the degenerate branches

    Returns:
        Length of the curve

    Examples:
        >>> curve_length(QuadraticBezier(Point(0.0, 0.0), Point(1.0, 0.0), Point(2.0, 0.0)))
        2.0
    """
    if curve.is_linear(tolerance):
        return curve.p0.distance(curve.p1)

    p0, cp, p1 = curve.p0, curve.control, curve.p1
    ap = p0 - cp * 2 + p1
    bp = cp * 2 - p0 * 2
    a = 4 * ap.length_squared()
    b = 4 * ap.dot(bp)
    c = bp.length_squared()
    if a < tolerance.epsilon:
        return p0.distance(p1)

    sqrt_a = math.sqrt(a)
    c2 = 2 * math.sqrt(c)
    m = b / sqrt_a + c2
    if abs(m) < tolerance.epsilon:
        return p0.distance(p1)

    sabc = 2 * math.sqrt(max(a + b + c, 0.0))
    a32 = 2 * a * sqrt_a
    ratio = (2 * sqrt_a + b / sqrt_a + sabc) / m
    if ratio <= 0:
        return p0.distance(p1)
    return (
        a32 * sabc + sqrt_a * b * (sabc - c2) + (4 * c * a - b * b) * math.log(ratio)
    ) / (4 * a32)


def sampled_length(curve: QuadraticBezier, flatness: int) -> float:
    """Polyline approximation of the arc length using ``flatness`` chords."""
    total = 0.0
    previous = curve.p0
    step = 1 / flatness
    for i in range(1, flatness + 1):
        current = curve.position(i * step)
        total += previous.distance(current)
        previous = current
    return total


def t_at_length(curve: QuadraticBezier, length: float, flatness: int = 128) -> float:
    """Approximate parameter at which the sampled length first exceeds ``length``.

    Returns 1.0 when ``length`` is at least the sampled length of the curve.
    """
    total = 0.0
    previous = curve.p0
    step = 1 / flatness
    for i in range(1, flatness + 1):
        t = i * step
        current = curve.position(t)
        total += previous.distance(current)
        if total > length:
            return t
        previous = current
    return 1.0


def point_at_length(
    curve: QuadraticBezier, length: float, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> Point | None:
    """Point at a given arc length from p0.

    Bisects over t using the exact length of the clipped sub-curve until the
    parameter interval is narrower than ``tolerance.bisection_tolerance``.

    Args:
        curve: Curve to walk along
        length: Distance from p0 along the curve
        tolerance: Tolerances

    Returns:
        The point, p1 when ``length`` equals the curve length, or None when
        ``length`` is negative or longer than the curve
    """
    if length < 0:
        return None

    if curve.is_linear(tolerance):
        chord = curve.p0.distance(curve.p1)
        if chord == 0:
            return curve.p0 if length == 0 else None
        if length > chord:
            return None
        return Edge(curve.p0, curve.p1).position(length / chord)

    max_length = curve_length(curve, tolerance)
    if length >= max_length:
        return curve.p1 if length == max_length else None

    lo, hi = 0.0, 1.0
    while hi - lo > tolerance.bisection_tolerance:
        mid = (lo + hi) / 2
        if curve_length(curve.clip(0.0, mid), tolerance) < length:
            lo = mid
        else:
            hi = mid
    return curve.position((lo + hi) / 2)


def bounding_box(curve: QuadraticBezier, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> AxisAlignedBox:
    """Tight axis-aligned bounding box of the curve.

    Each coordinate's derivative is linear in t, so its extremum is found
    directly and clipped into [0, 1] before being evaluated.

    Examples:
        >>> box = bounding_box(QuadraticBezier(Point(0.0, 0.0), Point(1.0, 1.0), Point(2.0, 0.0)))
        >>> (box.min_x, box.max_x, box.min_y, box.max_y)
        (0.0, 2.0, 0.0, 0.5)
    """
    p0, cp, p1 = curve.p0, curve.control, curve.p1
    box = AxisAlignedBox.from_points(p0, p1)

    dx = p0.x - 2 * cp.x + p1.x
    if abs(dx) >= tolerance.epsilon:
        t = clipped((p0.x - cp.x) / dx, 0.0, 1.0)
        box = box.union_point(curve.position(t))

    dy = p0.y - 2 * cp.y + p1.y
    if abs(dy) >= tolerance.epsilon:
        t = clipped((p0.y - cp.y) / dy, 0.0, 1.0)
        box = box.union_point(curve.position(t))

    return box


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def ray_crossings(
    curve: QuadraticBezier, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[tuple[float, CrossDirection, Point]]:
    """Crossings of a rightward horizontal ray from p with the curve.

    Uses the same half-open rule as ``edge_ray_crossings``: a crossing at p0
    counts only when the curve leaves p0 upwards, and one at p1 only when the
    curve arrives at p1 from above. When the tangent at that endpoint is
    horizontal, the side the curve bends to decides. A crossing in the
    interior with a horizontal tangent only touches the ray and is ignored.

    Args:
        curve: Curve to test
        p: Ray origin
        tolerance: Tolerances

    Returns:
        (t, direction, point) per counted crossing strictly right of p;
        direction is POSITIVE when the curve rises through the ray
    """
    p0, cp, p1 = curve.p0, curve.control, curve.p1
    a = p0.y - 2 * cp.y + p1.y
    b = 2 * (cp.y - p0.y)
    c = p0.y - p.y

    crossings: list[tuple[float, CrossDirection, Point]] = []
    seen: set[float] = set()
    for root in solve_quadratic(a, b, c, tolerance):
        if abs(root) < ENDPOINT_SNAP:
            t = 0.0
        elif abs(root - 1) < ENDPOINT_SNAP:
            t = 1.0
        elif 0 < root < 1:
            t = root
        else:
            continue
        if t in seen:
            continue
        seen.add(t)

        dy = curve.tangent(t).y
        if t == 0.0:
            direction = _sign(dy) or _sign(a)
            if direction <= 0:
                continue
            point = p0
        elif t == 1.0:
            direction = _sign(dy) or -_sign(a)
            if direction >= 0:
                continue
            point = p1
        else:
            if abs(dy) < tolerance.epsilon:
                continue
            direction = _sign(dy)
            point = curve.position(t)

        if point.x > p.x:
            crossings.append((t, CrossDirection(direction), point))
    return crossings


def ray_casting(
    curve: QuadraticBezier, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> int:
    """Signed crossing count of a rightward horizontal ray from p with the curve.

    Summed over every segment of a closed contour this is the winding number
    of the contour around p; its parity is the even-odd fill test.
    """
    return sum(direction.sign for _, direction, _ in ray_crossings(curve, p, tolerance))


def nearest_point(
    curve: QuadraticBezier, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> tuple[float, float]:
    """Parameter and squared distance of the point on the curve nearest to p.

    Setting the derivative of |position(t) - p|^2 to zero gives a cubic in t;
    its roots in [0, 1] and both endpoints are the candidates. Linear curves
    use the straight-edge projection instead.

    Args:
        curve: Curve to search
        p: Query point
        tolerance: Tolerances

    Returns:
        (t, squared distance) of the minimizer
    """
    if curve.is_linear(tolerance):
        edge = Edge(curve.p0, curve.p1)
        return edge.nearest_t(p), edge.distance_squared(p)

    a = curve.p0 - curve.control * 2 + curve.p1
    b = (curve.control - curve.p0) * 2
    c = curve.p0 - p
    roots = solve_cubic(
        4 * a.length_squared(),
        6 * a.dot(b),
        2 * b.length_squared() + 4 * a.dot(c),
        2 * b.dot(c),
        tolerance,
    )

    best_t = 0.0
    best_d = curve.p0.distance_squared(p)
    end_d = curve.p1.distance_squared(p)
    if end_d < best_d:
        best_t, best_d = 1.0, end_d
    for t in roots:
        if 0 < t < 1:
            d = curve.position(t).distance_squared(p)
            if d < best_d:
                best_t, best_d = t, d
    return best_t, best_d


def nearest_position(
    curve: QuadraticBezier, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> Point:
    """Point on the curve nearest to p."""
    if curve.is_linear(tolerance):
        return Edge(curve.p0, curve.p1).nearest_point(p)
    t, _ = nearest_point(curve, p, tolerance)
    return curve.position(t)


def max_distance_squared(
    curve: QuadraticBezier, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> float:
    """Squared distance from p to the farthest point of the curve.

    The curve lies in its control hull, so when an endpoint is at least as far
    as the control point that endpoint is the answer. Otherwise the curve is
    halved until the bound closes to ``tolerance.distance_min_range``.
    """
    best = 0.0
    stack = [curve]
    while stack:
        piece = stack.pop()
        d = max(piece.p0.distance_squared(p), piece.p1.distance_squared(p))
        dcp = piece.control.distance_squared(p)
        if d >= dcp:
            best = max(best, d)
        elif dcp - d < tolerance.distance_min_range:
            best = max(best, (dcp + d) / 2)
        else:
            stack.extend(piece.split_at_midpoint())
    return best


def sample_points(curve: QuadraticBezier, count: int) -> list[Point]:
    """``count + 1`` points at evenly spaced parameters, both endpoints included."""
    step = 1 / count
    return [curve.p0] + [curve.position(i * step) for i in range(1, count)] + [curve.p1]


def sample_edges(
    curve: QuadraticBezier,
    quality: float = 1.0,
    min_count: int = 2,
    max_count: int = 20,
    length_flatness: int = 4,
    tolerance: ToleranceConfig = DEFAULT_TOLERANCE,
) -> list[Edge]:
    """Split a curve into straight edges at evenly spaced parameters.

    The edge count grows with the sampled length times ``quality`` and is
    clipped to [min_count, max_count]. A linear curve is a single edge.

    Args:
        curve: Curve to sample
        quality: Edges per unit of length
        min_count: Lower bound on the edge count
        max_count: Upper bound on the edge count
        length_flatness: Chords used to estimate the length
        tolerance: Tolerances

    Returns:
        Consecutive edges from p0 to p1
    """
    if curve.is_linear(tolerance):
        return [Edge(curve.p0, curve.p1)]
    estimate = sampled_length(curve, length_flatness)
    count = int(clipped(int(estimate * quality), min_count, max_count))
    points = sample_points(curve, count)
    return [Edge(points[i], points[i + 1]) for i in range(count)]


def flatten(
    curve: QuadraticBezier | CubicBezier,
    config: FlatteningConfig | None = None,
    tolerance: ToleranceConfig = DEFAULT_TOLERANCE,
) -> list[Point]:
    """Convert a curve to a polyline.

    Uses recursive subdivision when ``config.adaptive_tolerance`` is set and
    fixed-count sampling otherwise. Cubics are converted to two quadratics
    before sampling.

    Args:
        curve: Quadratic or cubic curve
        config: Flattening settings (defaults when None)
        tolerance: Tolerances

    Returns:
        Polyline points from p0 to p1 inclusive
    """
    config = config or FlatteningConfig()

    if config.adaptive_tolerance is not None:
        if isinstance(curve, CubicBezier):
            return _flatten_cubic(curve, config.adaptive_tolerance)
        return _flatten_quadratic(curve, config.adaptive_tolerance)

    if isinstance(curve, CubicBezier):
        first, second = cubic_to_quadratics(curve, tolerance)
        return flatten(first, config, tolerance)[:-1] + flatten(second, config, tolerance)

    edges = sample_edges(
        curve,
        quality=config.quality,
        min_count=config.min_count,
        max_count=config.max_count,
        length_flatness=config.length_flatness,
        tolerance=tolerance,
    )
    return [edges[0].p0] + [edge.p1 for edge in edges]


def _quadratic_control(half: CubicBezier, tolerance: ToleranceConfig) -> Point:
    if half.p0 == half.cp0 or half.cp1 == half.p1:
        return half.p0.mid(half.p1)
    control = line_intersection(Edge(half.p0, half.cp0), Edge(half.cp1, half.p1), tolerance)
    if control is None:
        return half.p0.mid(half.p1)
    # Nearly parallel tangents put the intersection far away
    if half.p0.distance(control) > half.p0.distance(half.cp0) * 3:
        return half.cp0.mid(half.cp1)
    return control


def cubic_to_quadratics(
    cubic: CubicBezier, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> tuple[QuadraticBezier, QuadraticBezier]:
    """Approximate a cubic by two quadratics joined at the cubic's midpoint.

    Each half's control point is where its end tangents meet, so the
    quadratics keep the cubic's tangent directions at all three joints.

    Args:
        cubic: Curve to convert
        tolerance: Tolerances

    Returns:
        Quadratics covering [0, 0.5] and [0.5, 1]
    """
    first, second = cubic.split_at_midpoint()
    return (
        QuadraticBezier(first.p0, _quadratic_control(first, tolerance), first.p1),
        QuadraticBezier(second.p0, _quadratic_control(second, tolerance), second.p1),
    )


def cubic_y_at_x(cubic: CubicBezier, x: float, y_min_range: float = 1e-6) -> float | None:
    """Y coordinate where a cubic that is monotone in x reaches x.

    Halves the curve, keeping the first piece whose control box spans x,
    until that box is flatter than ``y_min_range``.

    Returns:
        The y value, or None if the curve never reaches x
    """
    stack = list(reversed(cubic.split_at_midpoint()))
    while stack:
        piece = stack.pop()
        box = piece.control_bounding_box()
        if not (box.min_x < x <= box.max_x):
            continue
        if box.height < y_min_range:
            return (box.min_y + box.max_y) / 2
        first, second = piece.split_at_midpoint()
        stack.append(second)
        stack.append(first)
    logger.debug("x=%s is outside the x range of the cubic", x)
    return None
