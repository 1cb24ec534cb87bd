"""Tests for domain models to verify they work correctly."""

import math

import pytest

from planarkit.domain import (
    AxisAlignedBox,
    CircularOrientation,
    CrossDirection,
    CubicBezier,
    CurveIntersection,
    CurveTo,
    Edge,
    LineTo,
    Pathline,
    Point,
    Polygon,
    QuadraticBezier,
    Shape,
    Topolygon,
    Triangle,
)


class TestPoint:
    """Tests for Point class."""

    def test_arithmetic(self) -> None:
        """Test vector arithmetic operators."""
        a = Point(1.0, 2.0)
        b = Point(3.0, -1.0)
        assert a + b == Point(4.0, 1.0)
        assert b - a == Point(2.0, -3.0)
        assert a * 2 == Point(2.0, 4.0)
        assert 2 * a == Point(2.0, 4.0)
        assert b / 2 == Point(1.5, -0.5)
        assert -a == Point(-1.0, -2.0)

    def test_dot_and_cross(self) -> None:
        """Test dot product and 2D cross product sign."""
        x = Point(1.0, 0.0)
        y = Point(0.0, 1.0)
        assert x.dot(y) == 0.0
        assert x.cross(y) == 1.0
        assert y.cross(x) == -1.0

    def test_distances(self) -> None:
        """Test length and distance helpers."""
        p = Point(3.0, 4.0)
        assert p.length() == 5.0
        assert p.length_squared() == 25.0
        assert Point(0.0, 0.0).distance(p) == 5.0
        assert Point(0.0, 0.0).distance_squared(p) == 25.0
        assert Point(0.0, 0.0).mid(p) == Point(1.5, 2.0)

    def test_is_below_orders_by_y_then_x(self) -> None:
        """Test the sweep order breaks y ties by x."""
        assert Point(5.0, 0.0).is_below(Point(0.0, 1.0))
        assert Point(0.0, 1.0).is_below(Point(1.0, 1.0))
        assert not Point(1.0, 1.0).is_below(Point(1.0, 1.0))

    def test_is_finite(self) -> None:
        """Test NaN and infinity detection."""
        assert Point(1.0, 2.0).is_finite()
        assert not Point(float("nan"), 0.0).is_finite()
        assert not Point(0.0, float("inf")).is_finite()

    def test_point_serialization(self) -> None:
        """Test point serialization and deserialization."""
        p1 = Point(100.0, 200.0)
        p2 = Point.from_dict(p1.to_dict())
        assert p2 == p1
        assert p1.to_tuple() == (100.0, 200.0)

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100.0, 200.0)
        with pytest.raises(AttributeError):
            p.x = 300.0  # type: ignore

    def test_point_hashable(self) -> None:
        """Test points can key dictionaries."""
        seen = {Point(1.0, 2.0): "a"}
        assert seen[Point(1.0, 2.0)] == "a"


class TestCrossDirection:
    """Tests for CrossDirection enum."""

    def test_from_cross(self) -> None:
        assert CrossDirection.from_cross(2.5) is CrossDirection.POSITIVE
        assert CrossDirection.from_cross(-0.1) is CrossDirection.NEGATIVE
        assert CrossDirection.from_cross(0.0) is CrossDirection.POSITIVE

    def test_sign(self) -> None:
        assert CrossDirection.POSITIVE.sign == 1
        assert CrossDirection.NEGATIVE.sign == -1

    def test_orientation_reversed(self) -> None:
        assert CircularOrientation.CLOCKWISE.reversed() is CircularOrientation.COUNTER_CLOCKWISE
        assert CircularOrientation.COUNTER_CLOCKWISE.reversed() is CircularOrientation.CLOCKWISE


class TestAxisAlignedBox:
    """Tests for AxisAlignedBox class."""

    def test_from_points(self) -> None:
        box = AxisAlignedBox.from_points(Point(1.0, 5.0), Point(-2.0, 3.0), Point(0.0, 7.0))
        assert (box.min_x, box.max_x, box.min_y, box.max_y) == (-2.0, 1.0, 3.0, 7.0)
        assert box.width == 3.0
        assert box.height == 4.0
        assert box.center == Point(-0.5, 5.0)

    def test_from_no_points_rejected(self) -> None:
        with pytest.raises(ValueError):
            AxisAlignedBox.from_points()

    def test_bounds_out_of_order_rejected(self) -> None:
        with pytest.raises(ValueError, match="out of order"):
            AxisAlignedBox(1.0, 0.0, 0.0, 1.0)

    def test_touching_boxes_intersect(self) -> None:
        """Test intervals are closed."""
        a = AxisAlignedBox(0.0, 1.0, 0.0, 1.0)
        b = AxisAlignedBox(1.0, 2.0, 0.0, 1.0)
        c = AxisAlignedBox(1.5, 2.0, 0.0, 1.0)
        assert a.intersects(b)
        assert not a.intersects(c)

    def test_union_and_contains(self) -> None:
        a = AxisAlignedBox(0.0, 1.0, 0.0, 1.0)
        b = a.union(AxisAlignedBox(2.0, 3.0, -1.0, 0.0))
        assert (b.min_x, b.max_x, b.min_y, b.max_y) == (0.0, 3.0, -1.0, 1.0)
        assert b.contains(Point(3.0, -1.0))
        assert not b.contains(Point(3.1, 0.0))
        assert a.union_point(Point(-1.0, 0.5)).min_x == -1.0

    def test_nearest_distance_squared(self) -> None:
        box = AxisAlignedBox(0.0, 1.0, 0.0, 1.0)
        assert box.nearest_distance_squared(Point(0.5, 0.5)) == 0.0
        assert box.nearest_distance_squared(Point(4.0, 5.0)) == 25.0


class TestEdge:
    """Tests for Edge class."""

    def test_properties(self) -> None:
        edge = Edge(Point(0.0, 0.0), Point(4.0, 0.0))
        assert edge.vector == Point(4.0, 0.0)
        assert edge.midpoint == Point(2.0, 0.0)
        assert edge.length == 4.0
        assert not edge.is_empty
        assert edge.reversed() == Edge(Point(4.0, 0.0), Point(0.0, 0.0))

    def test_nearest_t_clips(self) -> None:
        edge = Edge(Point(0.0, 0.0), Point(4.0, 0.0))
        assert edge.nearest_t(Point(1.0, 3.0)) == 0.25
        assert edge.nearest_t(Point(-5.0, 0.0)) == 0.0
        assert edge.nearest_t(Point(9.0, 1.0)) == 1.0

    def test_degenerate_edge_nearest_t(self) -> None:
        """Test a zero-length edge answers with its midpoint parameter."""
        edge = Edge(Point(1.0, 1.0), Point(1.0, 1.0))
        assert edge.is_empty
        assert edge.nearest_t(Point(5.0, 5.0)) == 0.5
        assert edge.distance_squared(Point(4.0, 5.0)) == 25.0

    def test_parameter_of(self) -> None:
        edge = Edge(Point(0.0, 0.0), Point(2.0, 2.0))
        assert edge.parameter_of(Point(1.0, 1.0)) == pytest.approx(0.5)
        assert edge.parameter_of(Point(1.0, 1.5)) is None
        assert edge.parameter_of(Point(3.0, 3.0)) is None

    def test_distance_squared(self) -> None:
        edge = Edge(Point(0.0, 0.0), Point(4.0, 0.0))
        assert edge.distance_squared(Point(2.0, 3.0)) == pytest.approx(9.0)
        assert edge.distance_squared(Point(-3.0, 4.0)) == pytest.approx(25.0)
        assert edge.nearest_point(Point(2.0, 3.0)) == Point(2.0, 0.0)


class TestQuadraticBezier:
    """Tests for QuadraticBezier class."""

    @pytest.fixture
    def arch(self) -> QuadraticBezier:
        return QuadraticBezier(Point(0.0, 0.0), Point(1.0, 2.0), Point(2.0, 0.0))

    def test_position_endpoints(self, arch: QuadraticBezier) -> None:
        assert arch.position(0.0) == arch.p0
        assert arch.position(1.0) == arch.p1
        assert arch.position(0.5) == Point(1.0, 1.0)

    def test_tangent(self, arch: QuadraticBezier) -> None:
        assert arch.tangent(0.0) == Point(2.0, 4.0)
        assert arch.tangent(0.5) == Point(2.0, 0.0)
        assert arch.tangent(1.0) == Point(2.0, -4.0)

    @pytest.mark.parametrize("t", [k / 32 for k in range(33)])
    def test_split_is_continuous(self, arch: QuadraticBezier, t: float) -> None:
        """Test both halves share the split point exactly and match the curve."""
        left, right = arch.split_at(t)
        assert left.p1 == right.p0
        assert left.p1 == arch.position(t)
        assert left.p0 == arch.p0
        assert right.p1 == arch.p1

    @pytest.mark.parametrize("t", [k / 16 for k in range(1, 16)])
    def test_split_tangents_line_up(self, arch: QuadraticBezier, t: float) -> None:
        """Test the halves meet with scaled copies of the curve tangent."""
        left, right = arch.split_at(t)
        tangent = arch.tangent(t)
        assert left.tangent(1.0).x == pytest.approx(t * tangent.x, abs=1e-12)
        assert left.tangent(1.0).y == pytest.approx(t * tangent.y, abs=1e-12)
        assert right.tangent(0.0).x == pytest.approx((1 - t) * tangent.x, abs=1e-12)
        assert right.tangent(0.0).y == pytest.approx((1 - t) * tangent.y, abs=1e-12)

    def test_split_halves_trace_the_curve(self, arch: QuadraticBezier) -> None:
        left, right = arch.split_at(0.4)
        for s in (0.25, 0.5, 0.75):
            expected = arch.position(0.4 * s)
            assert left.position(s).x == pytest.approx(expected.x)
            assert left.position(s).y == pytest.approx(expected.y)
            expected = arch.position(0.4 + 0.6 * s)
            assert right.position(s).x == pytest.approx(expected.x)
            assert right.position(s).y == pytest.approx(expected.y)

    def test_clip_matches_curve(self, arch: QuadraticBezier) -> None:
        piece = arch.clip(0.2, 0.7)
        for s in (0.0, 0.3, 0.5, 1.0):
            expected = arch.position(0.2 + 0.5 * s)
            assert piece.position(s).x == pytest.approx(expected.x)
            assert piece.position(s).y == pytest.approx(expected.y)

    def test_clip_full_range_is_identity(self, arch: QuadraticBezier) -> None:
        assert arch.clip(0.0, 1.0) is arch

    def test_is_linear(self, arch: QuadraticBezier) -> None:
        assert not arch.is_linear()
        assert QuadraticBezier.linear(Point(0.0, 0.0), Point(2.0, 2.0)).is_linear()
        assert QuadraticBezier(Point(0.0, 0.0), Point(0.0, 0.0), Point(1.0, 5.0)).is_linear()

    def test_b_spline_constructors(self) -> None:
        a, b, c = Point(0.0, 0.0), Point(2.0, 2.0), Point(4.0, 0.0)
        assert QuadraticBezier.b_spline(a, b, c) == QuadraticBezier(
            Point(1.0, 1.0), b, Point(3.0, 1.0)
        )
        assert QuadraticBezier.first_b_spline(a, b, c).p0 == a
        assert QuadraticBezier.last_b_spline(a, b, c).p1 == c

    def test_from_edge_and_angles(self) -> None:
        curve = QuadraticBezier.from_edge(Edge(Point(0.0, 0.0), Point(0.0, 2.0)))
        assert curve.is_linear()
        assert curve.first_angle == pytest.approx(math.pi / 2)
        assert curve.last_angle == pytest.approx(math.pi / 2)

    def test_angles_follow_the_control_point(self, arch: QuadraticBezier) -> None:
        assert arch.first_angle == pytest.approx(math.atan2(2.0, 1.0))
        assert arch.last_angle == pytest.approx(math.atan2(-2.0, 1.0))

    def test_reversed(self, arch: QuadraticBezier) -> None:
        r = arch.reversed()
        assert r.position(0.25).x == pytest.approx(arch.position(0.75).x)
        assert r.position(0.25).y == pytest.approx(arch.position(0.75).y)

    def test_serialization(self, arch: QuadraticBezier) -> None:
        assert QuadraticBezier.from_dict(arch.to_dict()) == arch


class TestCubicBezier:
    """Tests for CubicBezier class."""

    @pytest.mark.parametrize("t", [k / 32 for k in range(33)])
    def test_split_is_continuous(self, t: float) -> None:
        cubic = CubicBezier(Point(0.0, 0.0), Point(0.0, 2.0), Point(3.0, 2.0), Point(3.0, 0.0))
        left, right = cubic.split_at(t)
        assert left.p1 == right.p0 == cubic.position(t)
        assert left.p0 == cubic.p0
        assert right.p1 == cubic.p1

    def test_serialization(self) -> None:
        cubic = CubicBezier(Point(0.0, 0.0), Point(1.0, 2.0), Point(3.0, 2.0), Point(4.0, 0.0))
        assert CubicBezier.from_dict(cubic.to_dict()) == cubic


class TestCurveIntersection:
    """Tests for CurveIntersection class."""

    def test_swapped(self) -> None:
        hit = CurveIntersection(0.2, 0.8, CrossDirection.POSITIVE, Point(1.0, 1.0))
        other = hit.swapped()
        assert other.t == 0.8
        assert other.other_t == 0.2
        assert other.direction is CrossDirection.NEGATIVE

    def test_serialization(self) -> None:
        hit = CurveIntersection(0.5, 0.25, CrossDirection.NEGATIVE, Point(1.0, 2.0))
        assert CurveIntersection.from_dict(hit.to_dict()) == hit


class TestPolygonModels:
    """Tests for Polygon, Topolygon and Triangle."""

    def test_polygon_edges_include_closing_edge(self) -> None:
        polygon = Polygon.from_list([(0, 0), (1, 0), (0, 1)])
        edges = list(polygon.edges())
        assert len(edges) == 3
        assert edges[-1] == Edge(Point(0.0, 1.0), Point(0.0, 0.0))

    def test_polygon_coerces_list(self) -> None:
        polygon = Polygon([Point(0.0, 0.0), Point(1.0, 0.0)])  # type: ignore[arg-type]
        assert isinstance(polygon.points, tuple)
        assert len(polygon) == 2

    def test_topolygon_rings(self) -> None:
        outer = Polygon.from_list([(0, 0), (4, 0), (4, 4), (0, 4)])
        hole = Polygon.from_list([(1, 1), (1, 2), (2, 2)])
        topolygon = Topolygon(outer, [hole])  # type: ignore[arg-type]
        assert topolygon.rings == (outer, hole)
        assert topolygon.point_count == 7
        assert Topolygon.from_dict(topolygon.to_dict()) == topolygon

    def test_triangle_area_and_contains(self) -> None:
        triangle = Triangle(Point(0.0, 0.0), Point(2.0, 0.0), Point(0.0, 2.0))
        assert triangle.signed_area == 2.0
        assert Triangle(triangle.p0, triangle.p2, triangle.p1).signed_area == -2.0
        assert triangle.area == 2.0
        assert triangle.contains(Point(0.5, 0.5))
        assert triangle.contains(Point(1.0, 1.0))
        assert not triangle.contains(Point(1.5, 1.5))
        assert Triangle.from_list(triangle.to_list()) == triangle


class TestPathModels:
    """Tests for Pathline and Shape."""

    def test_elements_close_the_path(self) -> None:
        path = Pathline(
            Point(0.0, 0.0),
            (LineTo(Point(2.0, 0.0)), CurveTo(Point(0.0, 2.0), Point(2.0, 2.0))),
        )
        elements = list(path.elements())
        assert elements == [
            Edge(Point(0.0, 0.0), Point(2.0, 0.0)),
            QuadraticBezier(Point(2.0, 0.0), Point(2.0, 2.0), Point(0.0, 2.0)),
            Edge(Point(0.0, 2.0), Point(0.0, 0.0)),
        ]
        assert path.end == Point(0.0, 2.0)

    def test_open_path_has_no_closing_edge(self) -> None:
        path = Pathline.from_points([Point(0.0, 0.0), Point(1.0, 0.0)], closed=False)
        assert len(list(path.elements())) == 1

    def test_pathline_serialization(self) -> None:
        path = Pathline(
            Point(0.0, 0.0),
            (LineTo(Point(2.0, 0.0)), CurveTo(Point(0.0, 2.0), Point(2.0, 2.0))),
        )
        data = path.to_dict()
        assert data["segments"][1] == {"curve": [0.0, 2.0], "control": [2.0, 2.0]}
        assert Pathline.from_dict(data) == path

    def test_pathline_unknown_segment_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown segment"):
            Pathline.from_dict({"start": [0, 0], "segments": [{"arc": [1, 1]}]})

    def test_shape_from_polygon_shorthand(self) -> None:
        shape = Shape.from_dict(
            {
                "name": "frame",
                "outer": [[0, 0], [4, 0], [4, 4], [0, 4]],
                "holes": [[[1, 1], [1, 3], [3, 3], [3, 1]]],
            }
        )
        assert shape.name == "frame"
        assert len(shape.contours) == 2
        assert shape.outer is not None
        assert shape.outer.start == Point(0.0, 0.0)
        assert len(shape.holes) == 1

    def test_shape_serialization(self) -> None:
        ring = [Point(0.0, 0.0), Point(1.0, 0.0), Point(0.0, 1.0)]
        shape = Shape("tri", (Pathline.from_points(ring),))
        assert Shape.from_dict(shape.to_dict()) == shape
