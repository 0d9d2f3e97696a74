"""Unit tests for the geometry module."""

import pytest

from orthopath.geometry import (
    Point,
    Position,
    Rectangle,
    as_point,
    as_rectangle,
    lines_intersect,
    make_rectilinear,
    polyline_length,
    strip_redundant_points,
)


class TestPoint:
    """Tests for Point dataclass."""

    def test_distance(self):
        """Test euclidean distance."""
        assert Point(0, 0).distance(Point(3, 4)) == 5

    def test_translated(self):
        """Test translation returns a new point."""
        p = Point(1, 2)
        assert p.translated(10, -2) == Point(11, 0)
        assert p == Point(1, 2)

    def test_unpacking(self):
        """Test points unpack like tuples."""
        x, y = Point(7, 8)
        assert (x, y) == (7, 8)

    def test_points_are_hashable(self):
        """Test points can be used in sets."""
        assert len({Point(1, 1), Point(1, 1), Point(2, 1)}) == 2


class TestRectangle:
    """Tests for Rectangle dataclass."""

    def test_edges_and_center(self):
        """Test right, bottom and center."""
        rect = Rectangle(10, 10, 50, 50)
        assert rect.right == 60
        assert rect.bottom == 60
        assert rect.center == Point(35, 35)

    def test_contains_uses_half_open_bounds(self):
        """Test contains includes the left/top edge but not right/bottom."""
        rect = Rectangle(10, 10, 50, 50)
        assert rect.contains(Point(10, 10))
        assert rect.contains(Point(59, 59))
        assert not rect.contains(Point(60, 30))

    def test_contains_proper_excludes_edge_pixels(self):
        """Test contains_proper rejects every edge pixel."""
        rect = Rectangle(10, 10, 50, 50)
        assert rect.contains_proper(Point(30, 30))
        assert not rect.contains_proper(Point(10, 30))
        assert not rect.contains_proper(Point(59, 30))
        assert not rect.contains_proper(Point(30, 59))

    def test_crosses_interior(self):
        """Test segments through the inside versus along or past the edges."""
        rect = Rectangle(10, 10, 50, 50)
        assert rect.crosses_interior(Point(0, 30), Point(100, 30))
        assert rect.crosses_interior(Point(0, 0), Point(20, 20))
        assert not rect.crosses_interior(Point(0, 10), Point(100, 10))
        assert not rect.crosses_interior(Point(59, 0), Point(59, 100))
        assert not rect.crosses_interior(Point(0, 0), Point(10, 10))
        assert not rect.crosses_interior(Point(0, 20), Point(20, 0))

    def test_crosses_interior_near_corner(self):
        """Test a shallow leg clipping a corner by less than a pixel."""
        rect = Rectangle(182, 133, 67, 57)
        assert rect.crosses_interior(Point(89, 138), Point(245, 130))
        assert not rect.crosses_interior(Point(89, 138), Point(244, 129))

    def test_intersects(self):
        """Test rectangle overlap."""
        rect = Rectangle(0, 0, 10, 10)
        assert rect.intersects(Rectangle(5, 5, 10, 10))
        assert not rect.intersects(Rectangle(10, 0, 10, 10))

    @pytest.mark.parametrize(
        "point,expected",
        [
            (Point(0, 0), Position.NORTH_WEST),
            (Point(30, 0), Position.NORTH),
            (Point(70, 0), Position.NORTH_EAST),
            (Point(70, 30), Position.EAST),
            (Point(70, 70), Position.SOUTH_EAST),
            (Point(30, 60), Position.SOUTH),
            (Point(0, 70), Position.SOUTH_WEST),
            (Point(0, 30), Position.WEST),
            (Point(30, 59), Position.NONE),
        ],
    )
    def test_position(self, point, expected):
        """Test compass classification of points around a rectangle."""
        assert Rectangle(10, 10, 50, 50).position(point) == expected

    def test_compass_flag_values(self):
        """Test compass flags keep their bit values."""
        assert Position.NORTH == 1
        assert Position.SOUTH == 4
        assert Position.WEST == 8
        assert Position.EAST == 16
        assert Position.NORTH_EAST == 17


class TestCoercion:
    """Tests for as_point and as_rectangle."""

    def test_as_point_from_tuple(self):
        """Test tuple coercion."""
        assert as_point((3, 4)) == Point(3, 4)

    def test_as_point_passthrough(self):
        """Test Point instances are returned unchanged."""
        p = Point(3, 4)
        assert as_point(p) is p

    def test_as_rectangle_from_tuple(self):
        """Test tuple coercion."""
        assert as_rectangle((1, 2, 3, 4)) == Rectangle(1, 2, 3, 4)


class TestLinesIntersect:
    """Tests for segment intersection."""

    def test_crossing(self):
        """Test an X crossing."""
        assert lines_intersect(0, 0, 10, 10, 0, 10, 10, 0)

    def test_disjoint(self):
        """Test parallel segments apart."""
        assert not lines_intersect(0, 0, 10, 0, 0, 5, 10, 5)

    def test_touching_endpoint(self):
        """Test segments sharing an endpoint count as intersecting."""
        assert lines_intersect(0, 0, 10, 0, 10, 0, 10, 10)

    def test_collinear_overlap(self):
        """Test overlapping collinear segments."""
        assert lines_intersect(0, 0, 10, 0, 5, 0, 20, 0)

    def test_collinear_apart(self):
        """Test collinear segments with a gap."""
        assert not lines_intersect(0, 0, 10, 0, 11, 0, 20, 0)


class TestPolylineHelpers:
    """Tests for polyline helpers."""

    def test_polyline_length(self):
        """Test total length."""
        points = [Point(0, 0), Point(3, 4), Point(3, 10)]
        assert polyline_length(points) == 11

    def test_strip_duplicates_and_collinear(self):
        """Test duplicate and collinear interior points are removed."""
        points = [
            Point(0, 0),
            Point(0, 0),
            Point(0, 5),
            Point(0, 10),
            Point(10, 10),
        ]
        assert strip_redundant_points(points) == [
            Point(0, 0),
            Point(0, 10),
            Point(10, 10),
        ]

    def test_strip_keeps_short_lists(self):
        """Test two points are kept as is."""
        assert strip_redundant_points([Point(0, 0), Point(5, 5)]) == [
            Point(0, 0),
            Point(5, 5),
        ]

    def test_make_rectilinear_inserts_elbow(self):
        """Test a diagonal step gets a vertical-first elbow."""
        assert make_rectilinear([Point(0, 0), Point(10, 20)]) == [
            Point(0, 0),
            Point(0, 20),
            Point(10, 20),
        ]

    def test_make_rectilinear_output_is_orthogonal(self):
        """Test every step of the output is axis aligned."""
        points = make_rectilinear(
            [Point(0, 0), Point(13, 7), Point(40, 2), Point(41, 50)]
        )
        for a, b in zip(points, points[1:]):
            assert a.x == b.x or a.y == b.y

    def test_make_rectilinear_empty(self):
        """Test empty input."""
        assert make_rectilinear([]) == []
