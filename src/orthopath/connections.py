"""
Figure/connection layer on top of ShortestPathRouter.

Diagram code thinks in figures (boxes) and connections between figures,
not in obstacles and paths. ConnectionRouter keeps that mapping:

- every figure is an obstacle, kept in sync when the figure moves
- every connection is a path between the centres of its two figures
- connections are queued as stale and only pushed to the engine on ``route()``

After solving, each updated route is materialised for drawing: its ends are
moved onto the figures' mid-side anchors, short horizontal stubs leave and
enter the anchors, and every diagonal step is replaced by an elbow.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional

from .errors import UnknownFigureError
from .geometry import (
    Point,
    PointLike,
    Rectangle,
    RectangleLike,
    as_point,
    as_rectangle,
    make_rectilinear,
)
from .router import DEFAULT_SPACING, ShortestPathRouter

logger = logging.getLogger(__name__)

# Length of the horizontal stubs leaving and entering figure anchors
DEFAULT_INDENTATION = 30


@dataclass
class Connection:
    """
    A connection between two figures.

    Attributes:
        key: Caller's identifier for the connection.
        source: Key of the source figure.
        target: Key of the target figure.
        constraint: Optional bend points the route must pass through.
        handle: Engine path handle, None until first routed.
        points: Materialised polyline from the last route().
    """

    key: Hashable
    source: Hashable
    target: Hashable
    constraint: Optional[List[Point]] = None
    handle: Optional[int] = None
    points: List[Point] = field(default_factory=list)


class ConnectionRouter:
    """
    Routes connections between figures.

    Args:
        spacing: Distance kept between routes sharing a corner.
        indentation: Length of the anchor stubs. 0 disables stubs.
        **router_options: Passed through to ShortestPathRouter.
    """

    def __init__(
        self,
        spacing: int = DEFAULT_SPACING,
        indentation: int = DEFAULT_INDENTATION,
        **router_options: Any,
    ):
        self.algorithm = ShortestPathRouter(spacing=spacing, **router_options)
        self.indentation = indentation
        self.ignore_invalidate = False

        self._figures: Dict[Hashable, Rectangle] = {}
        self._connections: Dict[Hashable, Connection] = {}
        self._stale: Dict[Hashable, None] = {}
        self._dirty = False
        self._restyle = False

    # -------------------------------------------------------------------------
    # Figures
    # -------------------------------------------------------------------------

    def add_figure(self, key: Hashable, rect: RectangleLike) -> None:
        if key in self._figures:
            return
        bounds = as_rectangle(rect)
        self.algorithm.add_obstacle(bounds)
        self._figures[key] = bounds
        self._dirty = True

    def move_figure(self, key: Hashable, rect: RectangleLike) -> None:
        """Move a figure and invalidate every connection attached to it."""
        old_bounds = self._get_figure(key)
        new_bounds = as_rectangle(rect)
        if self.algorithm.update_obstacle(old_bounds, new_bounds):
            self._dirty = True
        self._figures[key] = new_bounds
        if old_bounds != new_bounds:
            for conn in self._attached(key):
                self.invalidate(conn.key)

    def remove_figure(self, key: Hashable) -> None:
        """Remove a figure together with the connections attached to it."""
        bounds = self._get_figure(key)
        for conn in self._attached(key):
            self.disconnect(conn.key)
        if self.algorithm.remove_obstacle(bounds):
            self._dirty = True
        del self._figures[key]

    def get_figure(self, key: Hashable) -> Rectangle:
        return self._get_figure(key)

    def _get_figure(self, key: Hashable) -> Rectangle:
        try:
            return self._figures[key]
        except KeyError:
            raise UnknownFigureError(f"Unknown figure {key!r}") from None

    def _attached(self, figure: Hashable) -> List[Connection]:
        return [
            conn
            for conn in self._connections.values()
            if figure in (conn.source, conn.target)
        ]

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    def connect(self, key: Hashable, source: Hashable, target: Hashable) -> None:
        self._get_figure(source)
        self._get_figure(target)
        self._connections[key] = Connection(key, source, target)
        self._stale[key] = None
        self._dirty = True

    def disconnect(self, key: Hashable) -> None:
        conn = self._connections.pop(key)
        self._stale.pop(key, None)
        if conn.handle is not None:
            self.algorithm.remove_path(conn.handle)
        self._dirty = True

    def set_constraint(
        self, key: Hashable, bend_points: Optional[List[PointLike]]
    ) -> None:
        conn = self._connections[key]
        if bend_points:
            conn.constraint = [as_point(p) for p in bend_points]
        else:
            conn.constraint = None
        self.invalidate(key)

    def get_constraint(self, key: Hashable) -> Optional[List[Point]]:
        return self._connections[key].constraint

    def invalidate(self, key: Hashable) -> None:
        """Queue a connection for re-routing, unless a route() is materialising."""
        if self.ignore_invalidate:
            return
        self._stale[key] = None
        self._dirty = True

    def has_connections(self) -> bool:
        return bool(self._connections)

    def connection_keys(self) -> List[Hashable]:
        return list(self._connections)

    def contains_connection(self, key: Hashable) -> bool:
        return key in self._connections

    def get_points(self, key: Hashable) -> List[Point]:
        return list(self._connections[key].points)

    def is_dirty(self) -> bool:
        return self._dirty

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_spacing(self, spacing: int) -> None:
        self.algorithm.set_spacing(spacing)
        self._dirty = True

    def get_spacing(self) -> int:
        return self.algorithm.get_spacing()

    def set_indentation(self, indentation: int) -> None:
        self.indentation = indentation
        self._restyle = True
        self._dirty = True

    def get_indentation(self) -> int:
        return self.indentation

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def route(self) -> Dict[Hashable, List[Point]]:
        """
        Route every stale connection.

        Returns:
            Mapping of connection key to materialised points, for the
            connections whose route changed.
        """
        if not self._dirty:
            return {}

        self.ignore_invalidate = True
        try:
            self._process_stale_connections()
            self._dirty = False
            updated = set(self.algorithm.solve())

            result: Dict[Hashable, List[Point]] = {}
            for conn in self._connections.values():
                if conn.handle is None:
                    continue
                if conn.handle not in updated and not self._restyle:
                    continue
                conn.points = self._materialise(
                    conn, self.algorithm.get_points(conn.handle)
                )
                result[conn.key] = list(conn.points)
            self._restyle = False

            if self.algorithm.unresolved_paths():
                # unresolved routes are retried on the next call
                self._dirty = True
            logger.debug("Routed %d connection(s)", len(result))
            return result
        finally:
            self.ignore_invalidate = False

    def _process_stale_connections(self) -> None:
        for key in self._stale:
            conn = self._connections[key]
            start = self._figures[conn.source].center
            end = self._figures[conn.target].center

            if conn.handle is None:
                conn.handle = self.algorithm.add_path(start, end, data=key)
            else:
                self.algorithm.set_start_point(conn.handle, start)
                self.algorithm.set_end_point(conn.handle, end)
            self.algorithm.set_bend_points(conn.handle, conn.constraint)
        self._stale.clear()

    def _materialise(self, conn: Connection, points: List[Point]) -> List[Point]:
        """Move a solved route onto the figures' anchors and make it orthogonal."""
        source = self.algorithm.get_obstacle(self._figures[conn.source])
        target = self.algorithm.get_obstacle(self._figures[conn.target])

        if target.x >= source.right:
            start, end = source.anchor(east=True), target.anchor(east=False)
            out_dx, in_dx = 1, -1
        elif target.right <= source.x:
            start, end = source.anchor(east=False), target.anchor(east=True)
            out_dx, in_dx = -1, 1
        else:
            # same column
            start, end = source.anchor(east=True), target.anchor(east=True)
            out_dx, in_dx = 1, 1

        interior = list(points[1:-1])
        if self.indentation:
            interior = (
                [start.translated(out_dx * self.indentation, 0)]
                + interior
                + [end.translated(in_dx * self.indentation, 0)]
            )
        return make_rectilinear([start] + interior + [end])
