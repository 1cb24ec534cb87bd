"""Primitive geometric value types.

This module defines the small immutable values every other part of the kernel
is built from:
- Point: A 2D point / vector with arithmetic
- Edge: An oriented line segment
- AxisAlignedBox: Closed x/y intervals used for fast rejection
- CrossDirection: Sign of a cross product at a crossing
- CircularOrientation: Winding of a closed ring
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from planarkit.config import DEFAULT_TOLERANCE, ToleranceConfig


class CrossDirection(Enum):
    """Sign of the cross product of two direction vectors at a crossing.

    Records the local winding of one path relative to another: a boolean layer
    uses it to tell inside-to-outside transitions from outside-to-inside ones.
    """

    POSITIVE = 1
    NEGATIVE = -1

    @classmethod
    def from_cross(cls, value: float) -> "CrossDirection":
        """Build from a cross-product (or any signed scalar) value.

        Zero maps to POSITIVE; callers that must not record tangential contacts
        filter those out before getting here.
        """
        return cls.NEGATIVE if value < 0 else cls.POSITIVE

    @property
    def sign(self) -> int:
        return self.value


class CircularOrientation(Enum):
    """Winding direction of a closed ring.

    With the usual y-up axes, a positive shoelace sum is counter-clockwise.
    """

    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter_clockwise"

    def reversed(self) -> "CircularOrientation":
        if self is CircularOrientation.CLOCKWISE:
            return CircularOrientation.COUNTER_CLOCKWISE
        return CircularOrientation.CLOCKWISE


@dataclass(frozen=True, slots=True)
class Point:
    """A point (or free vector) in the plane.

    Immutable and hashable so it can key the half-edge maps used by the
    polygon kernel. Uses slots to stay cheap when thousands of sample points
    are produced while flattening curves.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Point":
        return Point(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Point":
        return Point(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        """Z component of the 3D cross product; positive when other is to the left."""
        return self.x * other.y - self.y * other.x

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_squared(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def mid(self, other: "Point") -> "Point":
        return Point((self.x + other.x) / 2, (self.y + other.y) / 2)

    def angle(self) -> float:
        """Direction of this vector in radians, in (-pi, pi]."""
        return math.atan2(self.y, self.x)

    def is_below(self, other: "Point") -> bool:
        """Strict total order used by the sweep: smaller y, ties broken by smaller x."""
        return self.y < other.y or (self.y == other.y and self.x < other.x)

    def is_approximately_equal(
        self, other: "Point", tolerance: float = DEFAULT_TOLERANCE.epsilon
    ) -> bool:
        return abs(self.x - other.x) < tolerance and abs(self.y - other.y) < tolerance

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=float(data["x"]), y=float(data["y"]))


def linear_point(p0: Point, p1: Point, t: float) -> Point:
    """Interpolate between two points; exact at t=0 and t=1."""
    return Point(p0.x * (1 - t) + p1.x * t, p0.y * (1 - t) + p1.y * t)


@dataclass(frozen=True, slots=True)
class AxisAlignedBox:
    """Axis-aligned bounding box with closed intervals on both axes.

    Attributes:
        min_x: Lower x bound
        max_x: Upper x bound (>= min_x)
        min_y: Lower y bound
        max_y: Upper y bound (>= min_y)
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(
                f"Box bounds out of order: x=[{self.min_x}, {self.max_x}], "
                f"y=[{self.min_y}, {self.max_y}]"
            )

    @classmethod
    def from_points(cls, *points: Point) -> "AxisAlignedBox":
        """Smallest box containing all of the given points."""
        if not points:
            raise ValueError("Cannot bound an empty point set")
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), max(xs), min(ys), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def union(self, other: "AxisAlignedBox") -> "AxisAlignedBox":
        return AxisAlignedBox(
            min(self.min_x, other.min_x),
            max(self.max_x, other.max_x),
            min(self.min_y, other.min_y),
            max(self.max_y, other.max_y),
        )

    def union_point(self, p: Point) -> "AxisAlignedBox":
        return AxisAlignedBox(
            min(self.min_x, p.x), max(self.max_x, p.x), min(self.min_y, p.y), max(self.max_y, p.y)
        )

    def intersects(self, other: "AxisAlignedBox") -> bool:
        """Closed-interval overlap test; touching boxes intersect."""
        return (
            self.min_x <= other.max_x
            and other.min_x <= self.max_x
            and self.min_y <= other.max_y
            and other.min_y <= self.max_y
        )

    def contains(self, p: Point) -> bool:
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y

    def nearest_distance_squared(self, p: Point) -> float:
        """Squared distance from p to the nearest point of the box (0 inside)."""
        dx = max(self.min_x - p.x, 0.0, p.x - self.max_x)
        dy = max(self.min_y - p.y, 0.0, p.y - self.max_y)
        return dx * dx + dy * dy

    def corners(self) -> tuple[Point, Point, Point, Point]:
        return (
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_x": self.min_x,
            "max_x": self.max_x,
            "min_y": self.min_y,
            "max_y": self.max_y,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AxisAlignedBox":
        return cls(
            min_x=data["min_x"], max_x=data["max_x"], min_y=data["min_y"], max_y=data["max_y"]
        )


@dataclass(frozen=True, slots=True)
class Edge:
    """An oriented line segment from p0 to p1.

    Attributes:
        p0: Start point
        p1: End point
    """

    p0: Point
    p1: Point

    @property
    def vector(self) -> Point:
        return self.p1 - self.p0

    @property
    def midpoint(self) -> Point:
        return self.p0.mid(self.p1)

    @property
    def length(self) -> float:
        return self.p0.distance(self.p1)

    @property
    def is_empty(self) -> bool:
        return self.p0 == self.p1

    def reversed(self) -> "Edge":
        return Edge(self.p1, self.p0)

    def position(self, t: float) -> Point:
        return linear_point(self.p0, self.p1, t)

    def _projection(self, p: Point) -> float:
        v = self.vector
        return v.dot(p - self.p0) / v.dot(v)

    def nearest_t(self, p: Point) -> float:
        """Parameter of the point on the segment nearest to p, clipped to [0, 1].

        A degenerate edge has no direction; its midpoint parameter is returned.
        """
        if self.is_empty:
            return 0.5
        return min(max(self._projection(p), 0.0), 1.0)

    def parameter_of(
        self, p: Point, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
    ) -> float | None:
        """Parameter at which the segment passes through p, or None.

        Args:
            p: Query point
            tolerance: Tolerances; ``point_tolerance`` decides "lies on"

        Returns:
            t in [0, 1] if p lies on the segment, otherwise None
        """
        if self.is_empty:
            return 0.5 if p == self.p0 else None
        r = self._projection(p)
        if r < 0 or r > 1:
            return None
        foot = self.p0 + self.vector * r
        if foot.is_approximately_equal(p, tolerance.point_tolerance):
            return r
        return None

    def distance_squared(self, p: Point) -> float:
        """Squared distance from p to the nearest point of the segment."""
        if self.is_empty:
            return self.p0.distance_squared(p)
        r = self._projection(p)
        if r <= 0:
            return self.p0.distance_squared(p)
        if r > 1:
            return self.p1.distance_squared(p)
        c = self.vector.cross(p - self.p0)
        return c * c / self.p0.distance_squared(self.p1)

    def nearest_point(self, p: Point) -> Point:
        if self.is_empty:
            return self.p0
        r = self._projection(p)
        if r <= 0:
            return self.p0
        if r >= 1:
            return self.p1
        return self.p0 + self.vector * r

    def bounding_box(self) -> AxisAlignedBox:
        return AxisAlignedBox.from_points(self.p0, self.p1)

    def to_dict(self) -> dict[str, Any]:
        return {"p0": self.p0.to_dict(), "p1": self.p1.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Edge":
        return cls(p0=Point.from_dict(data["p0"]), p1=Point.from_dict(data["p1"]))
