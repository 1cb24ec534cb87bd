"""Polygon value types.

- Polygon: An implicitly closed ring of points
- Topolygon: An outer polygon with zero or more holes
- Triangle: Output record of the triangulator
- VertexType: Sweep-line vertex classification used by the monotone decomposer

Orientation, convexity and containment are derived on demand by
``planarkit.core.polygon``; nothing here caches derived values.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from planarkit.domain.primitives import AxisAlignedBox, Edge, Point


class VertexType(Enum):
    """Classification of a ring vertex relative to a downward sweep line.

    - START: both neighbours below, interior angle < pi
    - SPLIT: both neighbours below, interior angle > pi
    - END: both neighbours above, interior angle < pi
    - MERGE: both neighbours above, interior angle > pi
    - REGULAR: one neighbour above, one below
    """

    START = auto()
    END = auto()
    SPLIT = auto()
    MERGE = auto()
    REGULAR = auto()


@dataclass(frozen=True, slots=True)
class Polygon:
    """An ordered ring of points; the last point connects back to the first.

    Attributes:
        points: Ring vertices in traversal order
    """

    points: tuple[Point, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point:
        return self.points[index]

    @property
    def is_empty(self) -> bool:
        return not self.points

    def edges(self) -> Iterator[Edge]:
        """Yield every edge including the implicit closing one."""
        n = len(self.points)
        if n < 2:
            return
        for i in range(n):
            yield Edge(self.points[i], self.points[(i + 1) % n])

    def bounding_box(self) -> AxisAlignedBox:
        return AxisAlignedBox.from_points(*self.points)

    def reversed(self) -> "Polygon":
        return Polygon(tuple(reversed(self.points)))

    def to_list(self) -> list[list[float]]:
        return [[p.x, p.y] for p in self.points]

    @classmethod
    def from_list(cls, data: list[list[float]] | list[tuple[float, float]]) -> "Polygon":
        return cls(tuple(Point(float(x), float(y)) for x, y in data))

    def to_dict(self) -> dict[str, Any]:
        return {"points": self.to_list()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Polygon":
        return cls.from_list(data["points"])


@dataclass(frozen=True, slots=True)
class Topolygon:
    """An outer polygon plus holes.

    Holes may wind either way; consumers normalize orientation on working
    copies before relying on it.

    Attributes:
        outer: Outer boundary
        holes: Hole boundaries
    """

    outer: Polygon
    holes: tuple[Polygon, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.holes, tuple):
            object.__setattr__(self, "holes", tuple(self.holes))

    @property
    def rings(self) -> tuple[Polygon, ...]:
        return (self.outer, *self.holes)

    @property
    def point_count(self) -> int:
        return sum(len(ring) for ring in self.rings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outer": self.outer.to_list(),
            "holes": [hole.to_list() for hole in self.holes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Topolygon":
        return cls(
            outer=Polygon.from_list(data["outer"]),
            holes=tuple(Polygon.from_list(h) for h in data.get("holes", [])),
        )


@dataclass(frozen=True, slots=True)
class Triangle:
    """Three points; produced by the triangulator.

    Attributes:
        p0: First vertex
        p1: Second vertex
        p2: Third vertex
    """

    p0: Point
    p1: Point
    p2: Point

    @property
    def signed_area(self) -> float:
        """Positive for counter-clockwise vertex order."""
        return (self.p1 - self.p0).cross(self.p2 - self.p0) / 2

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    def contains(self, p: Point) -> bool:
        """Closed containment test (points on an edge are inside)."""
        d0 = (self.p1 - self.p0).cross(p - self.p0)
        d1 = (self.p2 - self.p1).cross(p - self.p1)
        d2 = (self.p0 - self.p2).cross(p - self.p2)
        has_negative = d0 < 0 or d1 < 0 or d2 < 0
        has_positive = d0 > 0 or d1 > 0 or d2 > 0
        return not (has_negative and has_positive)

    def points(self) -> tuple[Point, Point, Point]:
        return (self.p0, self.p1, self.p2)

    def to_list(self) -> list[list[float]]:
        return [[p.x, p.y] for p in self.points()]

    @classmethod
    def from_list(cls, data: list[list[float]]) -> "Triangle":
        a, b, c = (Point(float(x), float(y)) for x, y in data)
        return cls(a, b, c)
