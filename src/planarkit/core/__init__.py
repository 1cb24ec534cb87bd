"""Core algorithms for planarkit.

This module contains the geometry kernel:

- Numeric core (robust linear, quadratic and cubic solvers)
- Curve kernel (subdivision, arc length, bounds, nearest point, ray casting,
  curve/edge and curve/curve intersections)
- Polygon kernel (orientation, hull, containment, self-intersection resolution)
- Monotone decomposition and triangulation
- Path composition (flattening and fill tests on mixed contours)
- Batch tessellation in worker processes

All kernel functions are stateless and never mutate their inputs, so they
are safe to call from worker processes.

Key functions:
- curve_length, bounding_box, nearest_point, ray_casting: curve queries
- intersections_with_edge, intersections_with_curve: crossing records
- contains_point, convex_hull, resolve_self_intersections: polygon queries
- decompose, triangulate, triangulate_polygon: tessellation
- process_shape: picklable per-shape pipeline

Key classes:
- MonotoneDecomposition: Pieces and diagonals of one decomposition
- TessellationProcessor: Batch orchestrator for shape files
"""

from planarkit.core.curves import (
    bounding_box,
    cubic_to_quadratics,
    curve_length,
    flatten,
    nearest_point,
    point_at_length,
    ray_casting,
)
from planarkit.core.intersections import (
    intersections_with_curve,
    intersections_with_edge,
    intersections_with_line,
    intersects_curve,
    intersects_rect,
)
from planarkit.core.monotone import MonotoneDecomposition, decompose, monotone_polygons
from planarkit.core.numeric import solve_cubic, solve_equation, solve_linear, solve_quadratic
from planarkit.core.path import (
    flatten_pathline,
    hit_test,
    pathline_intersections,
    shape_contains,
    shape_to_topolygon,
)
from planarkit.core.polygon import (
    contains_point,
    convex_hull,
    is_convex,
    is_monotone,
    orientation,
    resolve_self_intersections,
    signed_area,
)
from planarkit.core.processor import TessellationProcessor, process_shape, tessellate
from planarkit.core.triangulator import (
    polygon_area,
    triangulate,
    triangulate_polygon,
    triangulate_topolygon,
)

__all__ = [
    # Decomposition classes
    "MonotoneDecomposition",
    # Processor classes
    "TessellationProcessor",
    # Curve functions
    "bounding_box",
    "contains_point",
    "convex_hull",
    "cubic_to_quadratics",
    "curve_length",
    "decompose",
    "flatten",
    "flatten_pathline",
    "hit_test",
    "intersections_with_curve",
    "intersections_with_edge",
    "intersections_with_line",
    "intersects_curve",
    "intersects_rect",
    "is_convex",
    "is_monotone",
    "monotone_polygons",
    "nearest_point",
    "orientation",
    "pathline_intersections",
    "point_at_length",
    "polygon_area",
    "process_shape",
    "ray_casting",
    "resolve_self_intersections",
    "shape_contains",
    "shape_to_topolygon",
    "signed_area",
    "solve_cubic",
    "solve_equation",
    "solve_linear",
    "solve_quadratic",
    "tessellate",
    "triangulate",
    "triangulate_polygon",
    "triangulate_topolygon",
]
