"""Internal adaptive curve flattening.

This is an internal module containing helper functions for
``planarkit.core.curves.flatten``. Not intended for public use.
"""

import math

from planarkit.domain import CubicBezier, Point, QuadraticBezier

MAX_DEPTH = 16


def flatten_quadratic(curve: QuadraticBezier, tolerance: float, depth: int = 0) -> list[Point]:
    """Flatten a quadratic Bezier curve using recursive subdivision.

    Args:
        curve: Curve to flatten
        tolerance: Maximum distance between curve midpoint and chord midpoint
        depth: Current recursion depth

    Returns:
        List of points approximating the curve, including both endpoints
    """
    p0, c, p1 = curve.p0, curve.control, curve.p1

    # Curve midpoint minus chord midpoint is (2c - p0 - p1) / 4
    distance = math.hypot(2 * c.x - p0.x - p1.x, 2 * c.y - p0.y - p1.y) / 4

    if distance <= tolerance or depth >= MAX_DEPTH:
        return [p0, p1]

    left_curve, right_curve = curve.split_at_midpoint()
    left = flatten_quadratic(left_curve, tolerance, depth + 1)
    right = flatten_quadratic(right_curve, tolerance, depth + 1)

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right


def flatten_cubic(curve: CubicBezier, tolerance: float, depth: int = 0) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Uses De Casteljau's algorithm for subdivision. Flatness is the larger
    distance of the two inner control points from the chord, which bounds
    the distance of the whole curve from it.

    Args:
        curve: Curve to flatten
        tolerance: Maximum distance from true curve
        depth: Current recursion depth

    Returns:
        List of points approximating the curve, including both endpoints
    """
    p0, p3 = curve.p0, curve.p1
    dx = p3.x - p0.x
    dy = p3.y - p0.y
    chord = math.hypot(dx, dy)

    if chord == 0:
        distance = max(curve.cp0.distance(p0), curve.cp1.distance(p0))
    else:
        d1 = abs((curve.cp0.x - p0.x) * dy - (curve.cp0.y - p0.y) * dx) / chord
        d2 = abs((curve.cp1.x - p0.x) * dy - (curve.cp1.y - p0.y) * dx) / chord
        distance = max(d1, d2)

    if distance <= tolerance or depth >= MAX_DEPTH:
        return [p0, p3]

    left_curve, right_curve = curve.split_at_midpoint()
    left = flatten_cubic(left_curve, tolerance, depth + 1)
    right = flatten_cubic(right_curve, tolerance, depth + 1)

    return left[:-1] + right
