"""
orthopath - Orthogonal connector routing

Routes point-to-point connectors around rectangular obstacles, keeps routes
that share an obstacle corner apart, and re-routes only what changed.

Example:
    >>> from orthopath import ShortestPathRouter
    >>> router = ShortestPathRouter(spacing=10)
    >>> router.add_obstacle((10, 10, 50, 50))
    False
    >>> handle = router.add_path((0, 30), (100, 30))
    >>> router.solve()
    [0]
    >>> router.get_points(handle)
    [Point(x=0, y=30), Point(x=0, y=0), Point(x=69, y=0), Point(x=100, y=30)]

Connection Layer Example:
    >>> from orthopath import ConnectionRouter
    >>> connections = ConnectionRouter()
    >>> connections.add_figure("a", (0, 0, 80, 40))
    >>> connections.add_figure("b", (200, 100, 80, 40))
    >>> connections.connect("a->b", "a", "b")
    >>> routes = connections.route()
"""

from .connections import DEFAULT_INDENTATION, Connection, ConnectionRouter
from .errors import (
    GeometryFault,
    ObstacleNotFoundError,
    ReentrantSolveError,
    RoutingError,
    UnknownFigureError,
    UnknownPathError,
)
from .geometry import Point, Position, Rectangle, make_rectilinear
from .path import ThresholdPolicy
from .png_renderer import RoutePNGRenderer, render_to_png
from .router import DEFAULT_SPACING, NUM_GROW_PASSES, PathHandle, ShortestPathRouter
from .tracer import BendPlacement, PipelineStage, SolveTrace

__version__ = "0.1.0"

__all__ = [
    # Engine
    "ShortestPathRouter",
    "ThresholdPolicy",
    "PathHandle",
    "DEFAULT_SPACING",
    "NUM_GROW_PASSES",
    # Connection layer
    "ConnectionRouter",
    "Connection",
    "DEFAULT_INDENTATION",
    # Geometry
    "Point",
    "Rectangle",
    "Position",
    "make_rectilinear",
    # Errors
    "RoutingError",
    "GeometryFault",
    "ObstacleNotFoundError",
    "UnknownPathError",
    "UnknownFigureError",
    "ReentrantSolveError",
    # Debug/Tracing (for development and debugging)
    "SolveTrace",
    "PipelineStage",
    "BendPlacement",
    "RoutePNGRenderer",
    "render_to_png",
]
