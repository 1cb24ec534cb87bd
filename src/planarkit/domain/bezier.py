"""Bezier curve value types.

QuadraticBezier is the curve primitive the whole kernel works with.
CubicBezier exists only for import and splitting: cubics are converted to
quadratics (see ``planarkit.core.curves.cubic_to_quadratics``) before any
intersection or fill query touches them.

Only evaluation and subdivision live here. Length, bounds, proximity and ray
casting are in ``planarkit.core.curves``; intersection queries are in
``planarkit.core.intersections``.
"""

from dataclasses import dataclass
from typing import Any

from planarkit.config import DEFAULT_TOLERANCE, ToleranceConfig
from planarkit.domain.primitives import (
    AxisAlignedBox,
    CrossDirection,
    Edge,
    Point,
    linear_point,
)


@dataclass(frozen=True, slots=True)
class QuadraticBezier:
    """A quadratic Bezier curve parametrized over t in [0, 1].

    Attributes:
        p0: Start point
        control: Off-curve control point
        p1: End point
    """

    p0: Point
    control: Point
    p1: Point

    @classmethod
    def linear(cls, p0: Point, p1: Point) -> "QuadraticBezier":
        """A straight segment expressed as a quadratic (control at the midpoint)."""
        return cls(p0, p0.mid(p1), p1)

    @classmethod
    def from_edge(cls, edge: Edge) -> "QuadraticBezier":
        return cls.linear(edge.p0, edge.p1)

    @classmethod
    def first_b_spline(cls, p0: Point, p1: Point, p2: Point) -> "QuadraticBezier":
        """Opening segment of a quadratic B-spline through the control polygon."""
        return cls(p0, p1, p1.mid(p2))

    @classmethod
    def b_spline(cls, p0: Point, p1: Point, p2: Point) -> "QuadraticBezier":
        """Inner segment of a quadratic B-spline: endpoints at the leg midpoints."""
        return cls(p0.mid(p1), p1, p1.mid(p2))

    @classmethod
    def last_b_spline(cls, p0: Point, p1: Point, p2: Point) -> "QuadraticBezier":
        """Closing segment of a quadratic B-spline."""
        return cls(p0.mid(p1), p1, p2)

    @property
    def is_empty(self) -> bool:
        return self.p0 == self.control == self.p1

    def is_linear(self, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> bool:
        """True if the control point coincides with an endpoint or lies on p0-p1."""
        if self.control == self.p0 or self.control == self.p1:
            return True
        return Edge(self.p0, self.p1).parameter_of(self.control, tolerance) is not None

    @property
    def chord(self) -> Edge:
        return Edge(self.p0, self.p1)

    def position(self, t: float) -> Point:
        """Point on the curve at t.

        Evaluated with the same interpolation steps as ``split_at`` so the
        shared point of a split is bit-identical to this value.
        """
        return linear_point(
            linear_point(self.p0, self.control, t),
            linear_point(self.control, self.p1, t),
            t,
        )

    def tangent(self, t: float) -> Point:
        """First derivative with respect to t."""
        return (self.control - self.p0) * (2 * (1 - t)) + (self.p1 - self.control) * (2 * t)

    def split_at(self, t: float) -> tuple["QuadraticBezier", "QuadraticBezier"]:
        """De Casteljau subdivision into [0, t] and [t, 1]."""
        a = linear_point(self.p0, self.control, t)
        b = linear_point(self.control, self.p1, t)
        m = linear_point(a, b, t)
        return QuadraticBezier(self.p0, a, m), QuadraticBezier(m, b, self.p1)

    def split_at_midpoint(self) -> tuple["QuadraticBezier", "QuadraticBezier"]:
        a = self.p0.mid(self.control)
        b = self.control.mid(self.p1)
        m = a.mid(b)
        return QuadraticBezier(self.p0, a, m), QuadraticBezier(m, b, self.p1)

    def clip(self, t0: float, t1: float) -> "QuadraticBezier":
        """Sub-curve over [t0, t1].

        The new control point is the blossom of the curve at (t0, t1), i.e. one
        de Casteljau step weighted by t0 and one by t1.
        """
        if t0 == 0 and t1 == 1:
            return self
        left = linear_point(self.p0, self.control, t1)
        right = linear_point(self.control, self.p1, t1)
        control = linear_point(left, right, t0)
        return QuadraticBezier(self.position(t0), control, self.position(t1))

    def reversed(self) -> "QuadraticBezier":
        return QuadraticBezier(self.p1, self.control, self.p0)

    def control_bounding_box(self) -> AxisAlignedBox:
        """Loose box around the three control points."""
        return AxisAlignedBox.from_points(self.p0, self.control, self.p1)

    @property
    def first_angle(self) -> float:
        """Direction of travel at p0 in radians."""
        v = self.control - self.p0 if self.control != self.p0 else self.p1 - self.p0
        return v.angle()

    @property
    def last_angle(self) -> float:
        """Direction of travel at p1 in radians."""
        v = self.p1 - self.control if self.control != self.p1 else self.p1 - self.p0
        return v.angle()

    def points(self) -> tuple[Point, Point, Point]:
        return (self.p0, self.control, self.p1)

    def is_finite(self) -> bool:
        return all(p.is_finite() for p in self.points())

    def to_dict(self) -> dict[str, Any]:
        return {
            "p0": self.p0.to_dict(),
            "control": self.control.to_dict(),
            "p1": self.p1.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuadraticBezier":
        return cls(
            p0=Point.from_dict(data["p0"]),
            control=Point.from_dict(data["control"]),
            p1=Point.from_dict(data["p1"]),
        )


@dataclass(frozen=True, slots=True)
class CubicBezier:
    """A cubic Bezier curve, used only for import and degree conversion.

    Attributes:
        p0: Start point
        cp0: First control point
        cp1: Second control point
        p1: End point
    """

    p0: Point
    cp0: Point
    cp1: Point
    p1: Point

    def position(self, t: float) -> Point:
        a = linear_point(self.p0, self.cp0, t)
        b = linear_point(self.cp0, self.cp1, t)
        c = linear_point(self.cp1, self.p1, t)
        return linear_point(linear_point(a, b, t), linear_point(b, c, t), t)

    def tangent(self, t: float) -> Point:
        rt = 1 - t
        return (
            (self.cp0 - self.p0) * (3 * rt * rt)
            + (self.cp1 - self.cp0) * (6 * rt * t)
            + (self.p1 - self.cp1) * (3 * t * t)
        )

    def split_at(self, t: float) -> tuple["CubicBezier", "CubicBezier"]:
        a = linear_point(self.p0, self.cp0, t)
        b = linear_point(self.cp0, self.cp1, t)
        c = linear_point(self.cp1, self.p1, t)
        ab = linear_point(a, b, t)
        bc = linear_point(b, c, t)
        m = linear_point(ab, bc, t)
        return CubicBezier(self.p0, a, ab, m), CubicBezier(m, bc, c, self.p1)

    def split_at_midpoint(self) -> tuple["CubicBezier", "CubicBezier"]:
        return self.split_at(0.5)

    def reversed(self) -> "CubicBezier":
        return CubicBezier(self.p1, self.cp1, self.cp0, self.p0)

    def control_bounding_box(self) -> AxisAlignedBox:
        return AxisAlignedBox.from_points(self.p0, self.cp0, self.cp1, self.p1)

    def points(self) -> tuple[Point, Point, Point, Point]:
        return (self.p0, self.cp0, self.cp1, self.p1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "p0": self.p0.to_dict(),
            "cp0": self.cp0.to_dict(),
            "cp1": self.cp1.to_dict(),
            "p1": self.p1.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CubicBezier":
        return cls(
            p0=Point.from_dict(data["p0"]),
            cp0=Point.from_dict(data["cp0"]),
            cp1=Point.from_dict(data["cp1"]),
            p1=Point.from_dict(data["p1"]),
        )


@dataclass(frozen=True, slots=True)
class CurveIntersection:
    """One crossing between a curve and another curve or edge.

    Attributes:
        t: Parameter on the owning curve
        other_t: Parameter on the other curve or edge
        direction: Sign of owning tangent x other tangent at the crossing
        point: Location of the crossing
    """

    t: float
    other_t: float
    direction: CrossDirection
    point: Point

    def swapped(self) -> "CurveIntersection":
        """Same crossing seen from the other curve."""
        flipped = (
            CrossDirection.NEGATIVE
            if self.direction is CrossDirection.POSITIVE
            else CrossDirection.POSITIVE
        )
        return CurveIntersection(self.other_t, self.t, flipped, self.point)

    def to_dict(self) -> dict[str, Any]:
        return {
            "t": self.t,
            "other_t": self.other_t,
            "direction": self.direction.value,
            "point": self.point.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurveIntersection":
        return cls(
            t=data["t"],
            other_t=data["other_t"],
            direction=CrossDirection(data["direction"]),
            point=Point.from_dict(data["point"]),
        )

