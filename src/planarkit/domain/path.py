"""Mixed line/curve contours.

A Pathline is a start point followed by segments, each of which is either a
straight ``LineTo`` or a quadratic ``CurveTo``. ``Segment`` is the tagged
union of the two; consumers match on it exhaustively.

A Shape is a named list of closed pathlines: the first is the outer boundary,
the rest are holes. It is the unit of work of the batch processor.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from planarkit.domain.bezier import QuadraticBezier
from planarkit.domain.primitives import Edge, Point


@dataclass(frozen=True, slots=True)
class LineTo:
    """Straight segment ending at point."""

    point: Point


@dataclass(frozen=True, slots=True)
class CurveTo:
    """Quadratic segment ending at point, bent towards control."""

    point: Point
    control: Point


Segment: TypeAlias = LineTo | CurveTo


@dataclass(frozen=True, slots=True)
class Pathline:
    """A contour made of straight and quadratic segments.

    Attributes:
        start: First on-curve point
        segments: Segments in drawing order
        closed: If True an implicit straight segment returns to start
    """

    start: Point
    segments: tuple[Segment, ...] = field(default_factory=tuple)
    closed: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

    @classmethod
    def from_points(cls, points: list[Point] | tuple[Point, ...], closed: bool = True) -> "Pathline":
        """A polyline pathline through the given points."""
        if not points:
            raise ValueError("A pathline needs at least one point")
        return cls(points[0], tuple(LineTo(p) for p in points[1:]), closed)

    @property
    def end(self) -> Point:
        return self.segments[-1].point if self.segments else self.start

    def elements(self) -> Iterator[Edge | QuadraticBezier]:
        """Yield each segment as an Edge or QuadraticBezier, including the closing edge."""
        previous = self.start
        for segment in self.segments:
            match segment:
                case LineTo(point=point):
                    yield Edge(previous, point)
                case CurveTo(point=point, control=control):
                    yield QuadraticBezier(previous, control, point)
            previous = segment.point
        if self.closed and previous != self.start:
            yield Edge(previous, self.start)

    def to_dict(self) -> dict[str, Any]:
        segments: list[dict[str, Any]] = []
        for segment in self.segments:
            match segment:
                case LineTo(point=point):
                    segments.append({"line": [point.x, point.y]})
                case CurveTo(point=point, control=control):
                    segments.append(
                        {"curve": [point.x, point.y], "control": [control.x, control.y]}
                    )
        return {
            "start": [self.start.x, self.start.y],
            "segments": segments,
            "closed": self.closed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pathline":
        segments: list[Segment] = []
        for item in data.get("segments", []):
            if "curve" in item:
                x, y = item["curve"]
                cx, cy = item["control"]
                segments.append(CurveTo(Point(float(x), float(y)), Point(float(cx), float(cy))))
            elif "line" in item:
                x, y = item["line"]
                segments.append(LineTo(Point(float(x), float(y))))
            else:
                raise ValueError(f"Unknown segment kind: {sorted(item)}")
        sx, sy = data["start"]
        return cls(Point(float(sx), float(sy)), tuple(segments), bool(data.get("closed", True)))


@dataclass(frozen=True, slots=True)
class Shape:
    """A named fill region: an outer contour plus holes.

    Attributes:
        name: Identifier used in logs and output
        contours: Closed pathlines, outer boundary first
    """

    name: str
    contours: tuple[Pathline, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.contours, tuple):
            object.__setattr__(self, "contours", tuple(self.contours))

    @property
    def outer(self) -> Pathline | None:
        return self.contours[0] if self.contours else None

    @property
    def holes(self) -> tuple[Pathline, ...]:
        return self.contours[1:]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with name and paths fields
        """
        return {"name": self.name, "paths": [c.to_dict() for c in self.contours]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Shape":
        """Deserialize from dictionary.

        Accepts either ``paths`` (pathline dicts) or the polygon shorthand
        ``outer`` plus optional ``holes`` as point lists.

        Args:
            data: Dictionary in either layout

        Returns:
            Shape instance
        """
        name = str(data.get("name", ""))
        if "paths" in data:
            return cls(name, tuple(Pathline.from_dict(p) for p in data["paths"]))
        rings = [data["outer"], *data.get("holes", [])]
        contours = tuple(
            Pathline.from_points([Point(float(x), float(y)) for x, y in ring]) for ring in rings
        )
        return cls(name, contours)
