"""Unit tests for the vertex module."""

from orthopath.geometry import Point, Position, Rectangle
from orthopath.segment import Segment
from orthopath.vertex import Vertex, VertexType


def corner(x=100, y=100, position=Position.NORTH_WEST):
    return Vertex(x, y, obstacle_id=0, position=position)


class TestVertexReset:
    """Tests for Vertex.full_reset."""

    def test_obstacle_vertex_gets_spacing_offset(self):
        """Test obstacle vertices take the router spacing as offset."""
        vertex = corner()
        vertex.full_reset(10)
        assert vertex.offset == 10
        assert vertex.type == VertexType.NOT_SET

    def test_bare_vertex_has_no_offset(self):
        """Test path endpoints never bend."""
        vertex = Vertex.at(Point(5, 5))
        vertex.full_reset(10)
        assert vertex.offset == 0
        assert vertex.bend(3) == Point(5, 5)

    def test_reset_clears_visitors(self):
        """Test counts, visitors and cached cosines are cleared."""
        vertex = corner()
        vertex.total_count = 3
        vertex.count = 2
        vertex.nearest_obstacle = 40
        vertex.nearest_obstacle_checked = True
        vertex.add_path(object(), Segment(Point(0, 0), vertex), Segment(vertex, Point(200, 0)))
        vertex.full_reset(10)
        assert vertex.total_count == 0
        assert vertex.count == 0
        assert vertex.nearest_obstacle == 0
        assert not vertex.nearest_obstacle_checked
        assert vertex.paths == []
        assert vertex.cached_cosines == {}


class TestVertexBend:
    """Tests for Vertex.bend."""

    def test_bend_moves_away_from_obstacle(self):
        """Test each corner bends outward along its compass position."""
        cases = {
            Position.NORTH_WEST: Point(80, 80),
            Position.NORTH_EAST: Point(120, 80),
            Position.SOUTH_WEST: Point(80, 120),
            Position.SOUTH_EAST: Point(120, 120),
        }
        for position, expected in cases.items():
            vertex = corner(position=position)
            vertex.full_reset(10)
            assert vertex.bend(2) == expected

    def test_bend_zero_modifier(self):
        """Test a zero modifier leaves the point in place."""
        vertex = corner()
        vertex.full_reset(10)
        assert vertex.bend(0) == Point(100, 100)


class TestVertexGrowth:
    """Tests for grow, shrink and offset clamping."""

    def test_grow_by_usage(self):
        """Test growth is total_count * spacing."""
        vertex = corner()
        vertex.full_reset(10)
        vertex.total_count = 2
        vertex.grow()
        assert (vertex.x, vertex.y) == (80, 80)
        vertex.shrink()
        assert (vertex.x, vertex.y) == (100, 100)

    def test_grow_clamped_by_nearest_obstacle(self):
        """Test growth stops halfway to the nearest obstacle."""
        vertex = corner(position=Position.SOUTH_EAST)
        vertex.full_reset(10)
        vertex.total_count = 5
        vertex.nearest_obstacle = 30
        vertex.grow()
        assert (vertex.x, vertex.y) == (114, 114)

    def test_update_offset_divides_room(self):
        """Test the available room is shared between visiting paths."""
        vertex = corner()
        vertex.full_reset(10)
        vertex.total_count = 2
        vertex.nearest_obstacle = 30
        vertex.update_offset()
        assert vertex.offset == 7

    def test_update_offset_never_negative(self):
        """Test a very close obstacle clamps the offset at zero."""
        vertex = corner()
        vertex.full_reset(10)
        vertex.total_count = 1
        vertex.nearest_obstacle = 1
        vertex.update_offset()
        assert vertex.offset == 0

    def test_deformed_rectangle(self):
        """Test the region swept between original and grown position."""
        vertex = corner()
        vertex.full_reset(10)
        vertex.total_count = 2
        vertex.grow()
        assert vertex.deformed_rectangle(5) == Rectangle(75, 75, 25, 25)


class TestVertexPaths:
    """Tests for visitor bookkeeping."""

    def test_add_path_caches_cosine(self):
        """Test the turn measure is cached per path."""
        vertex = corner(10, 0)
        path = object()
        vertex.add_path(
            path, Segment(Point(0, 0), vertex), Segment(vertex, Point(10, 10))
        )
        assert vertex.paths == [path]
        assert vertex.cached_cosines[path] == 1

    def test_add_path_once(self):
        """Test a path is only listed once."""
        vertex = corner(10, 0)
        path = object()
        incoming = Segment(Point(0, 0), vertex)
        outgoing = Segment(vertex, Point(10, 10))
        vertex.add_path(path, incoming, outgoing)
        vertex.add_path(path, incoming, outgoing)
        assert vertex.paths == [path]

    def test_repr_uses_original_position(self):
        """Test repr stays stable while the vertex is grown."""
        vertex = corner()
        vertex.full_reset(10)
        vertex.total_count = 1
        vertex.grow()
        assert repr(vertex) == "V(100, 100)"
