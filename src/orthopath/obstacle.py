"""Rectangular obstacles and the vertices they own."""

from .geometry import Point, Position, Rectangle
from .vertex import Vertex


class Obstacle:
    """
    A rectangle paths must route around.

    Owns four corner vertices and the two mid-side vertices on its west and
    east edges, plus a centre vertex used for innie/outie classification.
    Only the corners take part in routing; connection anchors use the
    mid-sides.

    Attributes:
        id: Router-assigned integer id.
        bounds: The rectangle.
        excluded: When True the obstacle is ignored by collision tests. Set
            while solving a path whose endpoint lies inside it.
    """

    def __init__(self, obstacle_id: int, bounds: Rectangle):
        self.id = obstacle_id
        self.bounds = bounds
        self.excluded = False

        x, y = bounds.x, bounds.y
        right = bounds.right - 1
        bottom = bounds.bottom - 1
        mid_y = bounds.y + bounds.height // 2 - 1

        self.top_left = Vertex(x, y, obstacle_id, Position.NORTH_WEST)
        self.top_right = Vertex(right, y, obstacle_id, Position.NORTH_EAST)
        self.bottom_left = Vertex(x, bottom, obstacle_id, Position.SOUTH_WEST)
        self.bottom_right = Vertex(right, bottom, obstacle_id, Position.SOUTH_EAST)
        self.mid_left = Vertex(x, mid_y, obstacle_id, Position.WEST)
        self.mid_right = Vertex(right, mid_y, obstacle_id, Position.EAST)

        center = bounds.center
        self.center = Vertex(center.x, center.y, obstacle_id)

    @property
    def x(self) -> int:
        return self.bounds.x

    @property
    def y(self) -> int:
        return self.bounds.y

    @property
    def right(self) -> int:
        return self.bounds.right

    @property
    def bottom(self) -> int:
        return self.bounds.bottom

    @property
    def corners(self):
        return (self.top_left, self.top_right, self.bottom_left, self.bottom_right)

    @property
    def vertices(self):
        return self.corners + (self.mid_left, self.mid_right)

    def contains(self, point) -> bool:
        return self.bounds.contains(point)

    def contains_proper(self, point) -> bool:
        return self.bounds.contains_proper(point)

    def intersects(self, other) -> bool:
        bounds = other.bounds if isinstance(other, Obstacle) else other
        return self.bounds.intersects(bounds)

    def position(self, point) -> Position:
        return self.bounds.position(point)

    def blocks(self, segment) -> bool:
        """True if the segment crosses either diagonal or starts/ends inside."""
        right = self.right - 1
        bottom = self.bottom - 1
        return (
            segment.intersects(self.x, self.y, right, bottom)
            or segment.intersects(self.x, bottom, right, self.y)
            or self.contains_proper(segment.start)
            or self.contains_proper(segment.end)
        )

    def grow_vertices(self) -> None:
        """Grow every corner that some path turns around."""
        for vertex in self.corners:
            if vertex.total_count > 0:
                vertex.grow()

    def shrink_vertices(self) -> None:
        for vertex in self.corners:
            if vertex.total_count > 0:
                vertex.shrink()

    def reset(self, spacing: int) -> None:
        for vertex in self.vertices:
            vertex.full_reset(spacing)

    def anchor(self, east: bool) -> Point:
        """Mid-side point on the east or west edge."""
        vertex = self.mid_right if east else self.mid_left
        return vertex.original_point

    def __repr__(self) -> str:
        b = self.bounds
        return f"Obstacle({b.x}, {b.y}, {b.width}, {b.height})"
