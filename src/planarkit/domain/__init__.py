"""Domain models for planarkit.

This module contains the value types the kernel computes with. All models
are designed to be:

- Immutable (frozen, slotted dataclasses)
- Serializable for inter-process communication (parallel processing)
- Free of cached derived state

Key classes:
- Point, Edge, AxisAlignedBox: Primitive geometry
- QuadraticBezier, CubicBezier: Curves
- CurveIntersection: A crossing between two curves or a curve and an edge
- Polygon, Topolygon, Triangle: Polygon input and triangulator output
- Pathline, LineTo, CurveTo, Shape: Mixed line/curve contours
"""

from planarkit.domain.bezier import CubicBezier, CurveIntersection, QuadraticBezier
from planarkit.domain.path import CurveTo, LineTo, Pathline, Segment, Shape
from planarkit.domain.polygon import Polygon, Topolygon, Triangle, VertexType
from planarkit.domain.primitives import (
    AxisAlignedBox,
    CircularOrientation,
    CrossDirection,
    Edge,
    Point,
)

__all__: list[str] = [
    # Enums
    "CircularOrientation",
    "CrossDirection",
    "VertexType",
    # Primitives
    "Point",
    "Edge",
    "AxisAlignedBox",
    # Curves
    "QuadraticBezier",
    "CubicBezier",
    "CurveIntersection",
    # Polygons
    "Polygon",
    "Topolygon",
    "Triangle",
    # Paths
    "Segment",
    "LineTo",
    "CurveTo",
    "Pathline",
    "Shape",
]
