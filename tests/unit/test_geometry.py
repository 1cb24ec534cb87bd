"""Unit tests for straight-edge geometry."""

import pytest

from planarkit.core.geometry import (
    ccw,
    edge_intersection,
    edge_intersection_parameters,
    edge_ray_casting,
    edge_ray_crossings,
    edges_intersect,
    line_intersection,
    signed_area,
)
from planarkit.domain import CrossDirection, Edge, Point


def ring_edges(*coords: tuple[float, float]) -> list[Edge]:
    points = [Point(x, y) for x, y in coords]
    return [Edge(points[i], points[(i + 1) % len(points)]) for i in range(len(points))]


class TestTurnsAndArea:
    """Tests for ccw and signed_area."""

    def test_ccw_signs(self):
        o, x, y = Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0)
        assert ccw(o, x, y) == 1.0
        assert ccw(y, x, o) == -1.0
        assert ccw(o, x, Point(2.0, 0.0)) == 0.0

    def test_signed_area_orientation(self):
        square = [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]
        assert signed_area(square) == 1.0
        assert signed_area(square[::-1]) == -1.0

    def test_signed_area_needs_three_points(self):
        assert signed_area([Point(0.0, 0.0), Point(1.0, 1.0)]) == 0.0


class TestSegmentIntersection:
    """Tests for segment and line intersection."""

    def test_proper_crossing(self):
        e0 = Edge(Point(0.0, 0.0), Point(2.0, 2.0))
        e1 = Edge(Point(0.0, 2.0), Point(2.0, 0.0))
        point, t0, t1 = edge_intersection_parameters(e0, e1)
        assert point == Point(1.0, 1.0)
        assert t0 == 0.5
        assert t1 == 0.5
        assert edges_intersect(e0, e1)

    def test_touching_is_not_a_proper_crossing(self):
        """Test segments sharing an endpoint intersect but do not cross."""
        e0 = Edge(Point(0.0, 0.0), Point(1.0, 0.0))
        e1 = Edge(Point(1.0, 0.0), Point(1.0, 1.0))
        assert edge_intersection(e0, e1) is None
        assert edges_intersect(e0, e1)

    def test_parallel_segments(self):
        e0 = Edge(Point(0.0, 0.0), Point(1.0, 0.0))
        e1 = Edge(Point(0.0, 1.0), Point(1.0, 1.0))
        assert edge_intersection(e0, e1) is None
        assert not edges_intersect(e0, e1)
        assert line_intersection(e0, e1) is None

    def test_disjoint_segments(self):
        e0 = Edge(Point(0.0, 0.0), Point(1.0, 0.0))
        e1 = Edge(Point(3.0, 1.0), Point(3.0, 2.0))
        assert not edges_intersect(e0, e1)

    def test_line_intersection_extends_segments(self):
        e0 = Edge(Point(0.0, 0.0), Point(1.0, 0.0))
        e1 = Edge(Point(3.0, 1.0), Point(3.0, 2.0))
        assert line_intersection(e0, e1) == Point(3.0, 0.0)


class TestEdgeRayCasting:
    """Tests for the half-open ray rule on straight edges."""

    def test_rising_edge(self):
        edge = Edge(Point(2.0, 0.0), Point(2.0, 2.0))
        assert edge_ray_crossings(edge, Point(0.0, 1.0)) == [
            (0.5, CrossDirection.POSITIVE, Point(2.0, 1.0))
        ]

    def test_falling_edge(self):
        edge = Edge(Point(2.0, 2.0), Point(2.0, 0.0))
        assert edge_ray_casting(edge, Point(0.0, 1.0)) == -1

    def test_edge_left_of_origin(self):
        edge = Edge(Point(2.0, 0.0), Point(2.0, 2.0))
        assert edge_ray_crossings(edge, Point(3.0, 1.0)) == []

    def test_lower_endpoint_counts(self):
        edge = Edge(Point(2.0, 0.0), Point(2.0, 2.0))
        assert edge_ray_casting(edge, Point(0.0, 0.0)) == 1
        assert edge_ray_casting(edge.reversed(), Point(0.0, 0.0)) == -1

    def test_upper_endpoint_does_not_count(self):
        edge = Edge(Point(2.0, 0.0), Point(2.0, 2.0))
        assert edge_ray_casting(edge, Point(0.0, 2.0)) == 0
        assert edge_ray_casting(edge.reversed(), Point(0.0, 2.0)) == 0

    def test_horizontal_edge_is_ignored(self):
        edge = Edge(Point(0.0, 1.0), Point(5.0, 1.0))
        assert edge_ray_crossings(edge, Point(-1.0, 1.0)) == []

    @pytest.mark.parametrize(
        ("origin", "expected"),
        [
            (Point(1.0, 1.0), 1),
            (Point(-1.0, 1.0), 0),
            (Point(-1.0, 0.0), 0),
            (Point(-1.0, 2.0), 0),
            (Point(3.0, 1.0), 0),
        ],
    )
    def test_winding_of_square(self, origin, expected):
        """Test a ray through a vertex of the ring is counted exactly once."""
        square = ring_edges((0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0))
        assert sum(edge_ray_casting(edge, origin) for edge in square) == expected

    def test_winding_through_apex_vertex(self):
        """Test a ray grazing a diamond's side vertex does not change parity."""
        diamond = ring_edges((1.0, 0.0), (2.0, 1.0), (1.0, 2.0), (0.0, 1.0))
        assert sum(edge_ray_casting(edge, Point(-1.0, 1.0)) for edge in diamond) == 0
        assert sum(edge_ray_casting(edge, Point(1.0, 1.0)) for edge in diamond) == 1
