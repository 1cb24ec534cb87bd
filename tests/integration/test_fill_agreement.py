"""Integration tests checking that meshes cover exactly the filled region.

For each shape, the curve-based even-odd fill test and point location in
the output triangles must agree on sample points that lie clearly inside
or clearly outside.
"""

import math

import pytest

from planarkit.config import FlatteningConfig, ToleranceConfig
from planarkit.core import shape_contains, tessellate
from planarkit.core.path import shape_to_topolygon
from planarkit.core.polygon import signed_area
from planarkit.domain import CurveTo, Pathline, Point, Shape, Triangle


def polar(radius: float, degrees: float) -> Point:
    angle = math.radians(degrees)
    return Point(radius * math.cos(angle), radius * math.sin(angle))


def star_shape(outer: float = 2.0, inner: float = 0.8) -> Shape:
    """Five-pointed star with a spike pointing up."""
    points = [polar(outer if k % 2 == 0 else inner, 90.0 + 36.0 * k) for k in range(10)]
    return Shape("star", (Pathline.from_points(points),))


def circle_shape(radius: float = 1.0) -> Shape:
    r = radius
    return Shape(
        "circle",
        (
            Pathline(
                Point(r, 0.0),
                (
                    CurveTo(Point(0.0, r), Point(r, r)),
                    CurveTo(Point(-r, 0.0), Point(-r, r)),
                    CurveTo(Point(0.0, -r), Point(-r, -r)),
                    CurveTo(Point(r, 0.0), Point(r, -r)),
                ),
            ),
        ),
    )


def framed_shape() -> Shape:
    return Shape.from_dict(
        {
            "name": "frame",
            "outer": [[0, 0], [4, 0], [4, 4], [0, 4]],
            "holes": [[[1, 1], [3, 1], [3, 3], [1, 3]]],
        }
    )


def mesh_contains(triangles: list[Triangle], p: Point) -> bool:
    return any(t.contains(p) for t in triangles)


def mesh_for(shape: Shape) -> list[Triangle]:
    triangles, _, rejected = tessellate(shape, ToleranceConfig(), FlatteningConfig())
    assert rejected == 0
    return triangles


@pytest.fixture(scope="module")
def star() -> Shape:
    return star_shape()


@pytest.fixture(scope="module")
def star_mesh(star) -> list[Triangle]:
    return mesh_for(star)


@pytest.fixture(scope="module")
def circle() -> Shape:
    return circle_shape()


@pytest.fixture(scope="module")
def circle_mesh(circle) -> list[Triangle]:
    return mesh_for(circle)


@pytest.fixture(scope="module")
def frame_mesh() -> list[Triangle]:
    return mesh_for(framed_shape())


class TestStar:
    """A concave ring that needs several monotone pieces."""

    def test_triangle_count(self, star_mesh):
        assert len(star_mesh) == 8

    def test_area_matches_ring(self, star, star_mesh):
        ring = shape_to_topolygon(star).outer
        assert sum(t.area for t in star_mesh) == pytest.approx(abs(signed_area(ring)))

    @pytest.mark.parametrize(
        "p", [Point(0.0, 0.0)] + [polar(1.5, 90.0 + 72.0 * k) for k in range(5)]
    )
    def test_inside(self, star, star_mesh, p):
        assert shape_contains(star, p)
        assert mesh_contains(star_mesh, p)

    @pytest.mark.parametrize("p", [polar(1.5, 126.0 + 72.0 * k) for k in range(5)])
    def test_outside_between_spikes(self, star, star_mesh, p):
        assert not shape_contains(star, p)
        assert not mesh_contains(star_mesh, p)


class TestCircle:
    """A ring made of quadratic curves only."""

    @pytest.mark.parametrize("radius", [0.2, 0.5, 0.9])
    @pytest.mark.parametrize("degrees", [10.0, 100.0, 200.0, 300.0])
    def test_inside(self, circle, circle_mesh, radius, degrees):
        p = polar(radius, degrees)
        assert shape_contains(circle, p)
        assert mesh_contains(circle_mesh, p)

    @pytest.mark.parametrize("radius", [1.15, 2.0])
    @pytest.mark.parametrize("degrees", [10.0, 100.0, 200.0, 300.0])
    def test_outside(self, circle, circle_mesh, radius, degrees):
        p = polar(radius, degrees)
        assert not shape_contains(circle, p)
        assert not mesh_contains(circle_mesh, p)

    def test_area_is_below_the_curve_area(self, circle_mesh):
        """Test the inscribed mesh area is between the octagon and the curve area."""
        area = sum(t.area for t in circle_mesh)
        # Each quarter is its chord triangle plus two thirds of its control triangle
        assert 2.8 < area < 4.0 * (0.5 + 2.0 / 3.0 * 0.5)

    def test_triangles_are_counter_clockwise(self, circle_mesh):
        assert all(t.signed_area > 0 for t in circle_mesh)


class TestFrame:
    """A square ring with a square hole."""

    @pytest.mark.parametrize(
        ("x", "y", "expected"),
        [
            (0.5, 0.5, True),
            (3.5, 2.0, True),
            (2.0, 3.5, True),
            (2.0, 2.0, False),
            (1.5, 2.5, False),
            (5.0, 2.0, False),
        ],
    )
    def test_agreement(self, frame_mesh, x, y, expected):
        p = Point(x, y)
        assert shape_contains(framed_shape(), p) is expected
        assert mesh_contains(frame_mesh, p) is expected
