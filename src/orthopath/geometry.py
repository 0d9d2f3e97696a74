"""
Geometry primitives for connector routing.

This module contains the value types shared by every other part of the
router:

- Point: an integer (or float) coordinate pair
- Rectangle: axis-aligned bounds using the inclusive pixel convention
- Position: compass flags describing where a point lies relative to a box
- Segment intersection and rectilinear clean-up helpers

Rectangles follow the pixel convention used throughout the router: a box at
``x`` with ``width`` 50 covers the pixels ``x .. x + 49``, so its corner
vertices sit on ``right - 1`` and ``bottom - 1``.
"""

import math
from dataclasses import dataclass
from enum import IntFlag
from typing import Iterable, List, Sequence, Tuple, Union


class Position(IntFlag):
    """Compass position of a point relative to a rectangle."""

    NONE = 0
    NORTH = 1
    SOUTH = 4
    WEST = 8
    EAST = 16
    NORTH_WEST = NORTH | WEST
    NORTH_EAST = NORTH | EAST
    SOUTH_WEST = SOUTH | WEST
    SOUTH_EAST = SOUTH | EAST


@dataclass(frozen=True)
class Point:
    """A 2D coordinate."""

    x: int
    y: int

    def distance(self, other) -> float:
        """Euclidean distance to anything with ``x`` and ``y``."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def translated(self, dx: int, dy: int) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, point) -> bool:
        """True if the point lies inside or on the edge of this rectangle."""
        return self.x <= point.x < self.right and self.y <= point.y < self.bottom

    def contains_proper(self, point) -> bool:
        """True if the point lies strictly inside, away from every edge pixel."""
        return (
            self.x < point.x < self.right - 1
            and self.y < point.y < self.bottom - 1
        )

    def crosses_interior(self, a, b) -> bool:
        """True if the segment a-b passes strictly inside, away from every edge pixel."""
        t0, t1 = 0.0, 1.0
        for start, delta, lo, hi in (
            (a.x, b.x - a.x, self.x, self.right - 1),
            (a.y, b.y - a.y, self.y, self.bottom - 1),
        ):
            if delta == 0:
                if not lo < start < hi:
                    return False
                continue
            enter = (lo - start) / delta
            leave = (hi - start) / delta
            if enter > leave:
                enter, leave = leave, enter
            t0 = max(t0, enter)
            t1 = min(t1, leave)
        return t0 < t1

    def intersects(self, other: "Rectangle") -> bool:
        """True if the two rectangles share any area."""
        return max(self.x, other.x) < min(self.right, other.right) and max(
            self.y, other.y
        ) < min(self.bottom, other.bottom)

    def position(self, point) -> Position:
        """
        Classify a point by the compass direction it lies in.

        Points inside the rectangle (including its edges) are ``NONE``.
        """
        if self.contains(point):
            return Position.NONE
        result = Position.NONE
        if point.x < self.x:
            result = Position.WEST
        elif point.x >= self.right:
            result = Position.EAST
        if point.y < self.y:
            result |= Position.NORTH
        elif point.y >= self.bottom:
            result |= Position.SOUTH
        return result


PointLike = Union[Point, Tuple[int, int], Sequence[int]]
RectangleLike = Union[Rectangle, Tuple[int, int, int, int], Sequence[int]]


def as_point(value: PointLike) -> Point:
    """Coerce a point or an ``(x, y)`` pair to a Point."""
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(x, y)


def as_rectangle(value: RectangleLike) -> Rectangle:
    """Coerce a rectangle or an ``(x, y, width, height)`` tuple to a Rectangle."""
    if isinstance(value, Rectangle):
        return value
    x, y, width, height = value
    return Rectangle(x, y, width, height)


def _orientation(ax, ay, bx, by, cx, cy) -> int:
    cross = (bx - ax) * (cy - ay) - (by - ay) * (cx - ax)
    return (cross > 0) - (cross < 0)


def _within(ax, ay, bx, by, cx, cy) -> bool:
    # c is known to be collinear with a-b
    return min(ax, bx) <= cx <= max(ax, bx) and min(ay, by) <= cy <= max(ay, by)


def lines_intersect(ux, uy, vx, vy, sx, sy, tx, ty) -> bool:
    """
    Test whether the closed segments u-v and s-t intersect.

    Touching endpoints and collinear overlaps count as intersections.
    """
    o1 = _orientation(ux, uy, vx, vy, sx, sy)
    o2 = _orientation(ux, uy, vx, vy, tx, ty)
    o3 = _orientation(sx, sy, tx, ty, ux, uy)
    o4 = _orientation(sx, sy, tx, ty, vx, vy)

    if o1 != o2 and o3 != o4:
        return True

    if o1 == 0 and _within(ux, uy, vx, vy, sx, sy):
        return True
    if o2 == 0 and _within(ux, uy, vx, vy, tx, ty):
        return True
    if o3 == 0 and _within(sx, sy, tx, ty, ux, uy):
        return True
    if o4 == 0 and _within(sx, sy, tx, ty, vx, vy):
        return True
    return False


def polyline_length(points: Sequence[Point]) -> float:
    """Total euclidean length of a polyline."""
    return sum(a.distance(b) for a, b in zip(points, points[1:]))


def strip_redundant_points(points: Iterable[Point]) -> List[Point]:
    """
    Remove duplicate and collinear interior points from an axis-aligned polyline.

    The first and last points are always kept.
    """
    deduped: List[Point] = []
    for point in points:
        if not deduped or deduped[-1] != point:
            deduped.append(point)

    if len(deduped) < 3:
        return deduped

    kept = [deduped[0]]
    for i in range(1, len(deduped) - 1):
        prev_point = kept[-1]
        current = deduped[i]
        following = deduped[i + 1]
        same_x = prev_point.x == current.x == following.x
        same_y = prev_point.y == current.y == following.y
        if not (same_x or same_y):
            kept.append(current)
    kept.append(deduped[-1])
    return kept


def make_rectilinear(points: Sequence[Point]) -> List[Point]:
    """
    Turn a polyline into an orthogonal one.

    Every diagonal step from ``a`` to ``b`` gets an elbow at ``(a.x, b.y)``,
    i.e. the vertical leg is drawn first. Redundant points are stripped.
    """
    if not points:
        return []

    result = [points[0]]
    for current, following in zip(points, points[1:]):
        if current.x != following.x and current.y != following.y:
            result.append(Point(current.x, following.y))
        result.append(following)
    return strip_redundant_points(result)
