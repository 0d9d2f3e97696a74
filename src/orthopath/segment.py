"""Directed segments between two vertices."""

from .geometry import lines_intersect


class Segment:
    """
    A directed segment from ``start`` to ``end``.

    Both ends are anything with ``x``/``y`` attributes, normally Vertex
    objects. Segments carry no state of their own; the endpoints may move
    while obstacles are grown, and every query reads their current position.
    """

    def __init__(self, start, end):
        self.start = start
        self.end = end

    def length(self) -> float:
        return self.start.distance(self.end)

    def cosine(self, other: "Segment") -> float:
        """
        Return a signed turn measure between this segment and the next one.

        The value is ``1 + cos`` of the angle between the reversed incoming
        segment and the outgoing one, negated for left turns, so it orders
        turns at a shared vertex from sharpest one way to sharpest the other.
        """
        dx1 = self.start.x - self.end.x
        dy1 = self.start.y - self.end.y
        dx2 = other.end.x - other.start.x
        dy2 = other.end.y - other.start.y

        lengths = self.length() * other.length()
        cos = (dx1 * dx2 + dy1 * dy2) / lengths if lengths else 0.0
        sin = dx1 * dy2 - dy1 * dx2
        if sin < 0:
            return 1 + cos
        return -(1 + cos)

    def cross_product(self, other: "Segment") -> int:
        """Cross product of this segment with the vector from its end to ``other.end``."""
        return (self.start.x - self.end.x) * (other.end.y - self.end.y) - (
            self.start.y - self.end.y
        ) * (other.end.x - self.end.x)

    def slope_sign(self) -> int:
        """A number whose sign matches the slope of this segment."""
        if self.end.x - self.start.x >= 0:
            return self.end.y - self.start.y
        return -(self.end.y - self.start.y)

    def intersects(self, sx, sy, tx, ty) -> bool:
        """True if this segment touches the segment (sx, sy)-(tx, ty)."""
        return lines_intersect(
            self.start.x, self.start.y, self.end.x, self.end.y, sx, sy, tx, ty
        )

    def intersects_points(self, s, t) -> bool:
        return self.intersects(s.x, s.y, t.x, t.y)

    def __repr__(self) -> str:
        return f"{self.start!r}---{self.end!r}"
