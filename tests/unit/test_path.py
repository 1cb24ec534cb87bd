"""Unit tests for the path composition layer."""

import pytest

from planarkit.config import FlatteningConfig
from planarkit.core.path import (
    flatten_pathline,
    hit_test,
    nearest_distance_squared,
    pathline_bounding_box,
    pathline_contains,
    pathline_intersections,
    pathline_ray_casting,
    shape_contains,
    shape_to_topolygon,
    validate_pathline,
)
from planarkit.domain import CurveTo, LineTo, Pathline, Point, Shape
from planarkit.exceptions import InvalidGeometryError


def square_pathline(size: float = 2.0, origin: float = 0.0) -> Pathline:
    lo, hi = origin, origin + size
    return Pathline.from_points([Point(lo, lo), Point(hi, lo), Point(hi, hi), Point(lo, hi)])


@pytest.fixture
def circle() -> Pathline:
    """Unit circle approximated by four quadratics with controls on the square corners."""
    return Pathline(
        Point(1.0, 0.0),
        (
            CurveTo(Point(0.0, 1.0), Point(1.0, 1.0)),
            CurveTo(Point(-1.0, 0.0), Point(-1.0, 1.0)),
            CurveTo(Point(0.0, -1.0), Point(-1.0, -1.0)),
            CurveTo(Point(1.0, 0.0), Point(1.0, -1.0)),
        ),
    )


class TestFlattening:
    """Tests for turning pathlines into polygons."""

    def test_polyline_keeps_its_points(self):
        polygon = flatten_pathline(square_pathline())
        assert polygon.points == (
            Point(0.0, 0.0),
            Point(2.0, 0.0),
            Point(2.0, 2.0),
            Point(0.0, 2.0),
        )

    def test_closing_point_is_not_repeated(self, circle):
        polygon = flatten_pathline(circle)
        assert len(polygon) == 8
        assert polygon.points[0] == Point(1.0, 0.0)
        assert Point(0.75, 0.75) in polygon.points

    def test_finer_quality_gives_more_points(self, circle):
        coarse = flatten_pathline(circle)
        fine = flatten_pathline(circle, FlatteningConfig(quality=10.0))
        assert len(fine) > len(coarse)

    def test_shape_to_topolygon(self):
        shape = Shape("frame", (square_pathline(4.0), square_pathline(2.0, 1.0)))
        topolygon = shape_to_topolygon(shape)
        assert len(topolygon.outer) == 4
        assert len(topolygon.holes) == 1
        assert topolygon.holes[0].points[0] == Point(1.0, 1.0)

    def test_empty_shape(self):
        assert shape_to_topolygon(Shape("empty")).outer.is_empty


class TestFillTest:
    """Tests for the curve-based even-odd fill test."""

    @pytest.mark.parametrize(
        "p", [Point(0.0, 0.0), Point(0.3, 0.2), Point(-0.5, -0.6), Point(0.9, 0.0)]
    )
    def test_inside_circle(self, circle, p):
        assert pathline_contains(circle, p)
        assert pathline_ray_casting(circle, p) == 1

    @pytest.mark.parametrize(
        "p", [Point(1.2, 0.3), Point(0.0, -1.5), Point(0.8, 0.8), Point(1.1, 0.0)]
    )
    def test_outside_circle(self, circle, p):
        assert not pathline_contains(circle, p)

    def test_shape_with_hole(self):
        shape = Shape("frame", (square_pathline(4.0), square_pathline(2.0, 1.0)))
        assert shape_contains(shape, Point(0.5, 0.5))
        assert not shape_contains(shape, Point(2.0, 2.0))
        assert not shape_contains(shape, Point(5.0, 2.0))


class TestQueries:
    """Tests for bounds, proximity and intersection queries."""

    def test_bounding_box_uses_curve_extrema(self, circle):
        box = pathline_bounding_box(circle)
        assert (box.min_x, box.max_x, box.min_y, box.max_y) == (-1.0, 1.0, -1.0, 1.0)

    def test_nearest_distance(self):
        assert nearest_distance_squared(square_pathline(), Point(1.0, 3.0)) == pytest.approx(1.0)

    def test_nearest_distance_to_curve(self, circle):
        assert nearest_distance_squared(circle, Point(3.0, 0.0)) == pytest.approx(4.0)

    def test_hit_test(self):
        square = square_pathline()
        assert hit_test(square, Point(1.0, 3.0), 1.0)
        assert not hit_test(square, Point(1.0, 3.0), 0.5)
        assert hit_test(square, Point(1.0, 0.1), 0.2)

    def test_intersections_with_polyline(self):
        line = Pathline.from_points([Point(-1.0, 1.0), Point(3.0, 1.0)], closed=False)
        records = pathline_intersections(square_pathline(), line)
        assert sorted(i for i, _, _ in records) == [1, 3]
        assert {j for _, j, _ in records} == {0}
        points = sorted((hit.point.x, hit.point.y) for _, _, hit in records)
        assert points == [(0.0, 1.0), (2.0, 1.0)]

    def test_intersections_with_curves(self, circle):
        line = Pathline.from_points([Point(-2.0, 0.5), Point(2.0, 0.5)], closed=False)
        records = pathline_intersections(circle, line)
        assert sorted(i for i, _, _ in records) == [0, 1]
        for _, _, hit in records:
            assert hit.point.y == pytest.approx(0.5)

    def test_edge_against_curve_is_swapped(self, circle):
        line = Pathline.from_points([Point(-2.0, 0.5), Point(2.0, 0.5)], closed=False)
        forward = pathline_intersections(circle, line)
        backward = pathline_intersections(line, circle)
        assert sorted(hit.t for _, _, hit in forward) == pytest.approx(
            sorted(hit.other_t for _, _, hit in backward)
        )


class TestValidation:
    """Tests for coordinate validation."""

    def test_finite_pathline(self, circle):
        validate_pathline(circle)

    def test_nan_start(self):
        with pytest.raises(InvalidGeometryError, match="pathline start"):
            validate_pathline(Pathline(Point(float("nan"), 0.0), (LineTo(Point(1.0, 1.0)),)))

    def test_infinite_control(self):
        pathline = Pathline(
            Point(0.0, 0.0), (CurveTo(Point(1.0, 0.0), Point(0.5, float("inf"))),)
        )
        with pytest.raises(InvalidGeometryError, match="curve control"):
            validate_pathline(pathline)
