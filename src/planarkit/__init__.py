"""planarkit - Planar geometry kernel for vector drawing.

planarkit provides quadratic and cubic Bezier curve algebra (subdivision,
arc length, bounds, nearest point, intersections, ray casting) and polygon
processing (orientation, convex hull, self-intersection resolution, monotone
decomposition, triangulation), plus a CLI that triangulates shape files.

Example:
    $ planarkit triangulate shapes.json

This will create shapes-mesh.json with the triangles of every shape.
"""

__version__ = "0.1.0"
__author__ = "planarkit contributors"

__all__ = ["__author__", "__version__"]
