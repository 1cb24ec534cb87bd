"""Scalar numeric core.

Closed-form real-root solvers for polynomials up to degree three,
interpolation helpers and epsilon comparisons. Every other kernel module
builds on these; none of them allocate geometry.

Solvers degrade by degree: a cubic whose leading coefficient is ~0 is solved
as a quadratic, and so on down to a linear equation, which has no roots when
its own leading coefficient vanishes.
"""

import math

from planarkit.config import DEFAULT_TOLERANCE, ToleranceConfig
from planarkit.exceptions import InvalidGeometryError


def approximately_equal(a: float, b: float, tolerance: float = DEFAULT_TOLERANCE.epsilon) -> bool:
    """Return True if a and b differ by less than tolerance.

    Examples:
        >>> approximately_equal(0.1 + 0.2, 0.3)
        True
        >>> approximately_equal(1.0, 1.001)
        False
    """
    return abs(a - b) < tolerance


def clipped(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return min(max(value, lower), upper)


def ensure_finite(what: str, *values: float) -> None:
    """Reject NaN and infinite input at a kernel entry point.

    Args:
        what: Description used in the error message
        *values: Values to check

    Raises:
        InvalidGeometryError: If any value is NaN or infinite
    """
    for value in values:
        if not math.isfinite(value):
            raise InvalidGeometryError(what, value)


def solve_linear(a: float, b: float, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> list[float]:
    """Real roots of a*x + b = 0.

    Returns:
        A single root, or an empty list when a is ~0
    """
    if abs(a) < tolerance.epsilon:
        return []
    return [-b / a]


def solve_quadratic(
    a: float, b: float, c: float, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[float]:
    """Real roots of a*x^2 + b*x + c = 0.

    Uses the cancellation-free form of the quadratic formula. A ~0 leading
    coefficient degrades to ``solve_linear``; a ~0 discriminant yields the
    double root once.

    Examples:
        >>> sorted(solve_quadratic(1.0, -3.0, 2.0))
        [1.0, 2.0]
        >>> solve_quadratic(1.0, 0.0, 1.0)
        []
    """
    if abs(a) < tolerance.epsilon:
        return solve_linear(b, c, tolerance)
    d = b * b - 4 * a * c
    if abs(d) < tolerance.epsilon:
        return [-b / (2 * a)]
    if d < 0:
        return []
    sd = math.sqrt(d)
    nd = -b - sd if b >= 0 else -b + sd
    if abs(nd) < tolerance.epsilon:
        return [(-b + sd) / (2 * a), (-b - sd) / (2 * a)]
    return [2 * c / nd, nd / (2 * a)]


def _cbrt(x: float) -> float:
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def solve_cubic(
    a: float, b: float, c: float, d: float, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[float]:
    """Real roots of a*x^3 + b*x^2 + c*x + d = 0.

    Reduces to the depressed cubic t^3 + p*t + q = 0 and applies Cardano's
    formula when the discriminant is non-negative. With three distinct real
    roots the discriminant is negative and the trigonometric form is used
    instead, so no complex intermediate values appear.

    Args:
        a: Cubic coefficient (degrades to ``solve_quadratic`` when ~0)
        b: Quadratic coefficient
        c: Linear coefficient
        d: Constant term
        tolerance: Tolerances; ``epsilon`` is the near-zero threshold

    Returns:
        Zero to three real roots in no particular order

    Examples:
        >>> sorted(round(r, 9) for r in solve_cubic(1.0, -6.0, 11.0, -6.0))
        [1.0, 2.0, 3.0]
    """
    if abs(a) < tolerance.epsilon:
        return solve_quadratic(b, c, d, tolerance)

    m = b / a
    n = c / a
    l = d / a  # noqa: E741
    p = n - m * m / 3
    q = 2 * m * m * m / 27 - m * n / 3 + l
    shift = -m / 3
    dd = q * q / 4 + p * p * p / 27

    if abs(dd) < tolerance.epsilon:
        if abs(p) < tolerance.epsilon:
            return [shift]
        # One simple root and one double root.
        return [3 * q / p + shift, -3 * q / (2 * p) + shift]
    if dd > 0:
        sd = math.sqrt(dd)
        return [_cbrt(-q / 2 + sd) + _cbrt(-q / 2 - sd) + shift]

    theta = math.atan2(math.sqrt(-dd), -q / 2)
    r = 2 * math.sqrt(-p / 3)
    return [r * math.cos((theta + 2 * k * math.pi) / 3) + shift for k in range(3)]


def solve_equation(
    a: float, b: float, c: float, d: float, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[float]:
    """Solve a polynomial of degree <= 3 given by its coefficients.

    Leading coefficients that are ~0 drop the degree; an identically zero
    equation has no isolated roots and returns an empty list.
    """
    return solve_cubic(a, b, c, d, tolerance)


def linear(f0: float, f1: float, t: float) -> float:
    """Linear interpolation, exact at both ends."""
    return f0 * (1 - t) + f1 * t


def integral_linear(f0: float, f1: float, a: float, b: float) -> float:
    """Integral over [a, b] of the linear interpolant between f0 (t=0) and f1 (t=1)."""
    f01 = f1 - f0
    fa = a * (f01 * a / 2 + f0)
    fb = b * (f01 * b / 2 + f0)
    return fb - fa


def spline(f0: float, f1: float, f2: float, f3: float, t: float) -> float:
    """Catmull-Rom interpolation between f1 (t=0) and f2 (t=1)."""
    a = -f0 + 3 * f1 - 3 * f2 + f3
    b = 2 * f0 - 5 * f1 + 4 * f2 - f3
    c = -f0 + f2
    d = 2 * f1
    return (a * t * t * t + b * t * t + c * t + d) / 2


def first_spline(f1: float, f2: float, f3: float, t: float) -> float:
    """Catmull-Rom for the opening segment, where no f0 precedes f1."""
    a = f1 - 2 * f2 + f3
    b = -3 * f1 + 4 * f2 - f3
    c = 2 * f1
    return (a * t * t + b * t + c) / 2


def last_spline(f0: float, f1: float, f2: float, t: float) -> float:
    """Catmull-Rom for the closing segment, where no f3 follows f2."""
    a = f0 - 2 * f1 + f2
    b = -f0 + f2
    c = 2 * f1
    return (a * t * t + b * t + c) / 2
