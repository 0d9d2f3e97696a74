"""
Visibility-graph vertices.

A vertex is either a corner / mid-side of an obstacle or a bare path
endpoint. Besides its position it carries the routing state that several
paths share during one solve: how many paths turn around it, how far it may
be pushed away from its obstacle, and whether paths wrap it on the inside
("innie") or the outside ("outie").

Shortest-path labels are not stored here; every Path keeps its own cost and
predecessor maps so paths sharing a vertex never see each other's labels.
"""

from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from .geometry import Point, Position, Rectangle

if TYPE_CHECKING:
    from .path import Path
    from .segment import Segment


class VertexType(Enum):
    """Topological classification of a vertex within one solve."""

    NOT_SET = 0
    INNIE = 1
    OUTIE = 2


class Vertex:
    """A routing vertex."""

    def __init__(
        self,
        x: int,
        y: int,
        obstacle_id: Optional[int] = None,
        position: Position = Position.NONE,
    ):
        """
        Args:
            x: X coordinate.
            y: Y coordinate.
            obstacle_id: Id of the owning obstacle, None for path endpoints.
            position: Where on its obstacle this vertex sits (e.g. NORTH_WEST
                for a top-left corner). Bends push the vertex that way.
        """
        self.x = x
        self.y = y
        self.orig_x = x
        self.orig_y = y
        self.obstacle_id = obstacle_id
        self.position = position

        # spacing state
        self.spacing = 0
        self.offset = 0
        self.nearest_obstacle = 0
        self.nearest_obstacle_checked = False
        self.count = 0
        self.total_count = 0

        # labelling state
        self.type = VertexType.NOT_SET
        self.paths: List["Path"] = []
        self.cached_cosines: Dict["Path", float] = {}

    @classmethod
    def at(cls, point) -> "Vertex":
        """Create a bare endpoint vertex at the given point."""
        return cls(point.x, point.y)

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

    @property
    def original_point(self) -> Point:
        return Point(self.orig_x, self.orig_y)

    def distance(self, other) -> float:
        return ((other.x - self.x) ** 2 + (other.y - self.y) ** 2) ** 0.5

    def add_path(self, path: "Path", incoming: "Segment", outgoing: "Segment") -> None:
        """Record a path turning here and cache its turn measure."""
        if path not in self.paths:
            self.paths.append(path)
        self.cached_cosines[path] = incoming.cosine(outgoing)

    def bend(self, modifier: int) -> Point:
        """Return this vertex pushed ``modifier * offset`` away from its obstacle."""
        shift = modifier * self.offset
        x, y = self.x, self.y
        if self.position & Position.NORTH:
            y -= shift
        else:
            y += shift
        if self.position & Position.EAST:
            x += shift
        else:
            x -= shift
        return Point(x, y)

    def full_reset(self, spacing: int) -> None:
        """Reset all routing state before a new global pass."""
        self.spacing = spacing if self.obstacle_id is not None else 0
        self.offset = self.spacing
        self.total_count = 0
        self.count = 0
        self.type = VertexType.NOT_SET
        self.nearest_obstacle = 0
        self.nearest_obstacle_checked = False
        self.paths.clear()
        self.cached_cosines.clear()

    def deformed_rectangle(self, extra_offset: int) -> Rectangle:
        """
        Return the region between the original and the grown position.

        Paths routed around this vertex travel inside this region.
        """
        if self.position & Position.NORTH:
            y = self.y - extra_offset
            height = self.orig_y - self.y + extra_offset
        else:
            y = self.orig_y
            height = self.y - self.orig_y + extra_offset
        if self.position & Position.EAST:
            x = self.orig_x
            width = self.x - self.orig_x + extra_offset
        else:
            x = self.x - extra_offset
            width = self.orig_x - self.x + extra_offset
        return Rectangle(x, y, width, height)

    def grow(self) -> None:
        """Move the vertex outward by the room its paths need."""
        if self.nearest_obstacle == 0:
            modifier = self.total_count * self.spacing
        else:
            modifier = max(0, self.nearest_obstacle // 2 - 1)

        if self.position & Position.NORTH:
            self.y -= modifier
        else:
            self.y += modifier
        if self.position & Position.EAST:
            self.x += modifier
        else:
            self.x -= modifier

    def shrink(self) -> None:
        self.x = self.orig_x
        self.y = self.orig_y

    def update_offset(self) -> None:
        """Squeeze the per-path offset so all paths fit before the nearest obstacle."""
        if self.nearest_obstacle != 0 and self.total_count > 0:
            self.offset = max(0, (self.nearest_obstacle // 2 - 1) // self.total_count)

    def __repr__(self) -> str:
        return f"V({self.orig_x}, {self.orig_y})"
