"""
Exceptions raised by the router.

Unreachable paths and inconsistent innie/outie labels are not errors: the
former are reported through ``ShortestPathRouter.unresolved_paths()`` and the
latter are repaired by splitting the path. Everything here signals either a
caller mistake or a geometry bug.
"""


class RoutingError(Exception):
    """Base class for router errors."""

    pass


class GeometryFault(RoutingError):
    """
    Raised when visibility-graph expansion meets a vertex/obstacle layout it
    does not know how to connect.

    Attributes:
        vertex: The vertex being connected.
        obstacle: The obstacle being expanded.
    """

    def __init__(self, message: str, vertex=None, obstacle=None):
        super().__init__(message)
        self.vertex = vertex
        self.obstacle = obstacle


class ObstacleNotFoundError(RoutingError, KeyError):
    """Raised when removing or updating bounds that were never added."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class UnknownPathError(RoutingError, KeyError):
    """Raised when a path handle does not belong to the router."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class ReentrantSolveError(RoutingError):
    """Raised when solve() is called while a solve is already running."""

    pass


class UnknownFigureError(RoutingError, KeyError):
    """Raised when a connection refers to a figure that was never added."""

    def __str__(self) -> str:
        return Exception.__str__(self)
