"""Unit tests for the segment module."""

from orthopath.geometry import Point
from orthopath.segment import Segment


def seg(x1, y1, x2, y2):
    return Segment(Point(x1, y1), Point(x2, y2))


class TestSegment:
    """Tests for Segment queries."""

    def test_length(self):
        """Test euclidean length."""
        assert seg(0, 0, 3, 4).length() == 5

    def test_cosine_straight(self):
        """Test a straight continuation measures zero."""
        assert seg(0, 0, 10, 0).cosine(seg(10, 0, 20, 0)) == 0

    def test_cosine_turns_have_opposite_signs(self):
        """Test right and left quarter turns give opposite measures."""
        incoming = seg(0, 0, 10, 0)
        assert incoming.cosine(seg(10, 0, 10, 10)) == 1
        assert incoming.cosine(seg(10, 0, 10, -10)) == -1

    def test_cosine_zero_length(self):
        """Test a degenerate segment does not divide by zero."""
        assert seg(0, 0, 0, 0).cosine(seg(0, 0, 10, 0)) in (1, -1)

    def test_cross_product_sign(self):
        """Test the cross product sign tells which side the other end lies on."""
        incoming = seg(0, 30, 10, 10)
        assert incoming.cross_product(seg(10, 10, 35, 35)) < 0
        assert incoming.cross_product(seg(10, 10, 0, 0)) > 0
        assert incoming.cross_product(seg(10, 10, 20, -10)) == 0

    def test_slope_sign(self):
        """Test slope sign for rising and falling segments."""
        assert seg(0, 0, 10, 10).slope_sign() > 0
        assert seg(0, 10, 10, 0).slope_sign() < 0
        assert seg(10, 10, 0, 0).slope_sign() > 0

    def test_intersects(self):
        """Test intersection with raw coordinates and points."""
        diagonal = seg(0, 0, 10, 10)
        assert diagonal.intersects(0, 10, 10, 0)
        assert diagonal.intersects_points(Point(0, 10), Point(10, 0))
        assert not diagonal.intersects(20, 0, 30, 0)

    def test_reads_current_endpoint_positions(self):
        """Test queries follow endpoints that are mutated in place."""

        class Movable:
            def __init__(self, x, y):
                self.x, self.y = x, y

            def distance(self, other):
                return ((other.x - self.x) ** 2 + (other.y - self.y) ** 2) ** 0.5

        end = Movable(10, 0)
        segment = Segment(Movable(0, 0), end)
        assert segment.length() == 10
        end.x = 20
        assert segment.length() == 20
