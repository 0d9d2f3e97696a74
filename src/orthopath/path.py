"""
Per-path visibility graph and shortest-path search.

A Path owns its endpoints, optional bend-point constraints, its local
visibility graph (a networkx Graph whose nodes are Vertex objects and whose
edges carry the euclidean ``weight``), and the results of the last solve:

- segments: the taut shortest route
- grown_segments: the route after growth re-intersection
- points: the final polyline, inclusive of both endpoints

The graph is built lazily: starting from the direct start->end segment, any
blocking obstacle is made "visible" and the candidate segments around it are
queued, until every queued candidate has been linked or discarded.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, NamedTuple, Optional

import networkx as nx

from .errors import GeometryFault
from .geometry import Point, Position
from .segment import Segment
from .vertex import Vertex, VertexType

if TYPE_CHECKING:
    from .obstacle import Obstacle

logger = logging.getLogger(__name__)

# =============================================================================
# SEARCH THRESHOLD CONFIGURATION
# =============================================================================

# Oval factor for a bounded first search: candidates whose round trip through
# start and end exceeds |start, end| * OVAL_CONSTANT are skipped
OVAL_CONSTANT = 1.13

# Slack applied to the previous cost ratio on later solves
EPSILON = 1.04

# =============================================================================


@dataclass
class ThresholdPolicy:
    """
    How large a search oval each path gets.

    Attributes:
        initial_oval: Oval factor for a path's first solve. None means the
            first solve is unbounded.
        epsilon: Slack multiplied into the previous cost ratio on later solves.
        bounded: When False every solve is unbounded.
    """

    initial_oval: Optional[float] = None
    epsilon: float = EPSILON
    bounded: bool = True

    def initial(self, distance: float) -> float:
        if not self.bounded or self.initial_oval is None:
            return 0.0
        return distance * self.initial_oval

    def refined(self, cost_ratio: float, distance: float) -> float:
        if not self.bounded:
            return 0.0
        return cost_ratio * self.epsilon * distance


class Candidate(NamedTuple):
    """A queued segment plus up to two obstacle ids it may ignore."""

    segment: Segment
    exclude_a: Optional[int] = None
    exclude_b: Optional[int] = None


class Path:
    """A single routed connection."""

    def __init__(self, start: Vertex, end: Vertex, data=None):
        self.start = start
        self.end = end
        self.data = data
        self.handle: Optional[int] = None
        self.bend_points: Optional[List[Point]] = None

        self.segments: List[Segment] = []
        self.grown_segments: List[Segment] = []
        self.points: List[Point] = []

        self.excluded_obstacles: List["Obstacle"] = []
        self.visible_obstacles: Dict[int, "Obstacle"] = {}
        self.graph = nx.Graph()

        self.threshold = 0.0
        self.prev_cost_ratio = 0.0
        self.cost = 0.0

        self.is_dirty = True
        self.is_inverted = False
        self.is_marked = False
        self.unresolved = False
        self.stale_points: List[Point] = []
        self.sub_path: Optional["Path"] = None

        self._stack: List[Candidate] = []
        self._cost: Dict[Vertex, float] = {}
        self._label: Dict[Vertex, Vertex] = {}
        self._permanent: set = set()

    @classmethod
    def between(cls, start, end, data=None) -> "Path":
        """Create a path between two plain points."""
        return cls(Vertex.at(start), Vertex.at(end), data)

    @property
    def start_point(self) -> Point:
        return self.start.original_point

    @property
    def end_point(self) -> Point:
        return self.end.original_point

    # -------------------------------------------------------------------------
    # Visibility graph
    # -------------------------------------------------------------------------

    def _outside_threshold(self, segment: Segment) -> bool:
        if self.threshold == 0:
            return False
        start, end = self.start, self.end
        return (
            segment.end.distance(end) + segment.end.distance(start) > self.threshold
            or segment.start.distance(end) + segment.start.distance(start)
            > self.threshold
        )

    def _push(self, segment: Segment, exclude_a=None, exclude_b=None) -> None:
        self._stack.append(Candidate(segment, exclude_a, exclude_b))

    def _create_visibility_graph(self, obstacles: List["Obstacle"], strict: bool):
        self._push(Segment(self.start, self.end))
        while self._stack:
            candidate = self._stack.pop()
            self._add_segment(candidate, obstacles, strict)

    def _add_segment(self, candidate: Candidate, obstacles, strict: bool) -> None:
        segment = candidate.segment
        if self._outside_threshold(segment):
            return

        for obs in obstacles:
            if obs.id in (candidate.exclude_a, candidate.exclude_b) or obs.excluded:
                continue
            if obs.blocks(segment):
                if obs.id not in self.visible_obstacles:
                    self._add_obstacle(obs, strict)
                return

        self.graph.add_edge(segment.start, segment.end, weight=segment.length())

    def _add_obstacle(self, obs: "Obstacle", strict: bool) -> None:
        """Make an obstacle visible and queue every segment around it."""
        self.visible_obstacles[obs.id] = obs
        try:
            for other in list(self.visible_obstacles.values()):
                if other is not obs:
                    self._add_segments_between(obs, other)
            self._add_perimeter_segments(obs)
            self._add_segments_for_vertex(self.start, obs)
            self._add_segments_for_vertex(self.end, obs)
        except GeometryFault as exc:
            if strict:
                raise
            logger.error("Skipping expansion of %r: %s", obs, exc)

    def _add_perimeter_segments(self, obs: "Obstacle") -> None:
        self._push(Segment(obs.top_left, obs.top_right), obs.id)
        self._push(Segment(obs.top_right, obs.bottom_right), obs.id)
        self._push(Segment(obs.bottom_right, obs.bottom_left), obs.id)
        self._push(Segment(obs.bottom_left, obs.top_left), obs.id)

    def _add_segments_for_vertex(self, vertex: Vertex, obs: "Obstacle") -> None:
        """Queue the two corner segments visible from a path endpoint."""
        position = obs.position(vertex)
        if position in (Position.SOUTH_WEST, Position.NORTH_EAST):
            corners = (obs.top_left, obs.bottom_right)
        elif position in (Position.SOUTH_EAST, Position.NORTH_WEST):
            corners = (obs.top_right, obs.bottom_left)
        elif position == Position.NORTH:
            corners = (obs.top_left, obs.top_right)
        elif position == Position.EAST:
            corners = (obs.bottom_right, obs.top_right)
        elif position == Position.SOUTH:
            corners = (obs.bottom_right, obs.bottom_left)
        elif position == Position.WEST:
            corners = (obs.top_left, obs.bottom_left)
        elif vertex.x == obs.x:
            corners = (obs.top_left, obs.bottom_left)
        elif vertex.y == obs.y:
            corners = (obs.top_left, obs.top_right)
        elif vertex.y == obs.bottom - 1:
            corners = (obs.bottom_left, obs.bottom_right)
        elif vertex.x == obs.right - 1:
            corners = (obs.top_right, obs.bottom_right)
        else:
            raise GeometryFault(
                f"{vertex!r} lies inside {obs!r} away from every edge",
                vertex=vertex,
                obstacle=obs,
            )

        for corner in corners:
            self._push(Segment(vertex, corner), obs.id)

    def _add_segments_between(self, source: "Obstacle", target: "Obstacle") -> None:
        if source.intersects(target):
            self._add_all_segments_between(source, target)
        elif target.bottom - 1 < source.y:
            self._segments_target_above_source(source, target)
        elif source.bottom - 1 < target.y:
            self._segments_target_above_source(target, source)
        elif target.right - 1 < source.x:
            self._segments_target_beside_source(source, target)
        else:
            self._segments_target_beside_source(target, source)

    def _segments_target_above_source(self, source, target) -> None:
        if target.x > source.x:
            seg = Segment(source.top_left, target.top_left)
            if target.x < source.right - 1:
                seg2 = Segment(source.top_right, target.bottom_left)
            else:
                seg2 = Segment(source.bottom_right, target.top_left)
        elif source.x == target.x:
            seg = Segment(source.top_left, target.bottom_left)
            seg2 = Segment(source.top_right, target.bottom_left)
        else:
            seg = Segment(source.bottom_left, target.bottom_left)
            seg2 = Segment(source.top_right, target.bottom_left)
        self._push(seg, source.id, target.id)
        self._push(seg2, source.id, target.id)

        if target.right < source.right:
            seg = Segment(source.top_right, target.top_right)
            if target.right - 1 > source.x:
                seg2 = Segment(source.top_left, target.bottom_right)
            else:
                seg2 = Segment(source.bottom_left, target.top_right)
        elif source.right == target.right:
            seg = Segment(source.top_right, target.bottom_right)
            seg2 = Segment(source.top_left, target.bottom_right)
        else:
            seg = Segment(source.bottom_right, target.bottom_right)
            seg2 = Segment(source.top_left, target.bottom_right)
        self._push(seg, source.id, target.id)
        self._push(seg2, source.id, target.id)

    def _segments_target_beside_source(self, source, target) -> None:
        if target.y > source.y:
            seg = Segment(source.top_left, target.top_left)
            if target.y < source.bottom - 1:
                seg2 = Segment(source.bottom_left, target.top_right)
            else:
                seg2 = Segment(source.bottom_right, target.top_left)
        elif source.y == target.y:
            seg = Segment(source.top_left, target.top_right)
            seg2 = Segment(source.bottom_left, target.top_right)
        else:
            seg = Segment(source.top_right, target.top_right)
            seg2 = Segment(source.bottom_left, target.top_right)
        self._push(seg, source.id, target.id)
        self._push(seg2, source.id, target.id)

        if target.bottom < source.bottom:
            seg = Segment(source.bottom_left, target.bottom_left)
            if target.bottom - 1 > source.y:
                seg2 = Segment(source.top_left, target.bottom_right)
            else:
                seg2 = Segment(source.top_right, target.bottom_left)
        elif source.bottom == target.bottom:
            seg = Segment(source.bottom_left, target.bottom_right)
            seg2 = Segment(source.top_left, target.bottom_right)
        else:
            seg = Segment(source.bottom_right, target.bottom_right)
            seg2 = Segment(source.top_left, target.bottom_right)
        self._push(seg, source.id, target.id)
        self._push(seg2, source.id, target.id)

    def _add_all_segments_between(self, source, target) -> None:
        """Corner pairings between two overlapping obstacles."""
        self._add_connecting_segment(
            Segment(source.bottom_left, target.bottom_left), source, target, False, False
        )
        self._add_connecting_segment(
            Segment(source.bottom_right, target.bottom_right), source, target, True, True
        )
        self._add_connecting_segment(
            Segment(source.top_left, target.top_left), source, target, True, True
        )
        self._add_connecting_segment(
            Segment(source.top_right, target.top_right), source, target, False, False
        )

        if source.bottom == target.bottom:
            self._add_connecting_segment(
                Segment(source.bottom_left, target.bottom_right), source, target, False, True
            )
            self._add_connecting_segment(
                Segment(source.bottom_right, target.bottom_left), source, target, True, False
            )
        if source.y == target.y:
            self._add_connecting_segment(
                Segment(source.top_left, target.top_right), source, target, True, False
            )
            self._add_connecting_segment(
                Segment(source.top_right, target.top_left), source, target, False, True
            )
        if source.x == target.x:
            self._add_connecting_segment(
                Segment(source.bottom_left, target.top_left), source, target, False, True
            )
            self._add_connecting_segment(
                Segment(source.top_left, target.bottom_left), source, target, True, False
            )
        if source.right == target.right:
            self._add_connecting_segment(
                Segment(source.bottom_right, target.top_right), source, target, True, False
            )
            self._add_connecting_segment(
                Segment(source.top_right, target.bottom_right), source, target, False, True
            )

    def _add_connecting_segment(self, segment, o1, o2, check_tr1, check_tr2) -> None:
        """
        Queue a segment between two overlapping obstacles.

        The flags pick which diagonal of each obstacle the segment is tested
        against: the one through the top-right corner, or the other one.
        """
        if self._outside_threshold(segment):
            return
        if o2.contains_proper(segment.start) or o1.contains_proper(segment.end):
            return

        for obs, check_top_right in ((o1, check_tr1), (o2, check_tr2)):
            right = obs.right - 1
            bottom = obs.bottom - 1
            if check_top_right:
                blocked = segment.intersects(obs.x, bottom, right, obs.y)
            else:
                blocked = segment.intersects(obs.x, obs.y, right, bottom)
            if blocked:
                return

        self._push(segment, o1.id, o2.id)

    # -------------------------------------------------------------------------
    # Shortest path
    # -------------------------------------------------------------------------

    def _label_graph(self) -> bool:
        """
        Label the visibility graph from ``start`` outwards.

        Returns False if the graph is disconnected between start and end.
        """
        graph = self.graph
        if self.start not in graph or self.end not in graph:
            return False

        vertex = self.start
        self._cost[vertex] = 0.0
        self._permanent.add(vertex)
        total = graph.number_of_nodes()

        while len(self._permanent) != total:
            neighbors = graph.adj[vertex]
            if not neighbors:
                return False
            for neighbor, attrs in neighbors.items():
                if neighbor in self._permanent:
                    continue
                new_cost = self._cost[vertex] + attrs["weight"]
                if neighbor not in self._label or self._cost[neighbor] > new_cost:
                    self._label[neighbor] = vertex
                    self._cost[neighbor] = new_cost

            smallest = None
            for candidate in graph.nodes:
                if candidate in self._permanent or candidate not in self._label:
                    continue
                if smallest is None or self._cost[candidate] < self._cost[smallest]:
                    smallest = candidate
            if smallest is None:
                break
            vertex = smallest
            self._permanent.add(vertex)

        return self.end in self._label

    def _determine_shortest_path(self) -> bool:
        if not self._label_graph():
            return False

        self.cost = self._cost[self.end]
        distance = self.start.distance(self.end)
        self.prev_cost_ratio = self.cost / distance if distance else 0.0

        segments = []
        vertex = self.end
        while vertex is not self.start:
            previous = self._label.get(vertex)
            if previous is None:
                return False
            segments.append(Segment(previous, vertex))
            vertex = previous
        segments.reverse()
        self.segments = segments
        return True

    def generate_shortest_path(self, obstacles: List["Obstacle"], strict=False) -> bool:
        """
        Build the visibility graph and search it.

        Returns True if a route from start to end was found.
        """
        self._create_visibility_graph(obstacles, strict)
        if self.graph.number_of_nodes() == 0:
            return False
        return self._determine_shortest_path()

    # -------------------------------------------------------------------------
    # Solve bookkeeping
    # -------------------------------------------------------------------------

    def full_reset(self, policy: ThresholdPolicy) -> None:
        """Forget the previous graph and pick the threshold for the next search."""
        self.graph.clear()
        self.segments = []
        self.visible_obstacles.clear()
        self._stack.clear()
        self.cleanup()
        self.cost = 0.0

        distance = self.start.distance(self.end)
        if self.prev_cost_ratio == 0:
            self.threshold = policy.initial(distance)
        else:
            self.threshold = policy.refined(self.prev_cost_ratio, distance)
        self.reset_partial()

    def reset_partial(self) -> None:
        self.is_marked = False
        self.is_inverted = False
        self.sub_path = None
        self.is_dirty = False
        self.grown_segments = []
        self.points = []

    def cleanup(self) -> None:
        self._cost.clear()
        self._label.clear()
        self._permanent.clear()

    def refresh_excluded_obstacles(self, obstacles: List["Obstacle"]) -> None:
        """Exclude every obstacle that strictly contains an endpoint."""
        self.excluded_obstacles = []
        for obs in obstacles:
            obs.excluded = False
            if obs.contains_proper(self.start) or obs.contains_proper(self.end):
                obs.excluded = True
                self.excluded_obstacles.append(obs)

    # -------------------------------------------------------------------------
    # Splitting
    # -------------------------------------------------------------------------

    def get_sub_path(self, segment: Segment) -> "Path":
        """Split this path at ``segment`` and return the tail as a new path."""
        index = self.grown_segments.index(segment)
        sub = Path(segment.start, self.end)
        sub.grown_segments = self.grown_segments[index:]

        self.grown_segments = self.grown_segments[: index + 1]
        self.end = segment.end
        self.sub_path = sub
        return sub

    def invert_prior_vertices(self, segment: Segment) -> None:
        """Flip the classification of every vertex visited before ``segment``."""
        stop = self.grown_segments.index(segment)
        for grown in self.grown_segments[:stop]:
            vertex = grown.end
            if vertex.type == VertexType.INNIE:
                vertex.type = VertexType.OUTIE
            else:
                vertex.type = VertexType.INNIE

    def reconnect_sub_paths(self) -> None:
        """Splice split sub-paths back onto this path, depth first."""
        sub = self.sub_path
        if sub is None:
            return
        sub.reconnect_sub_paths()

        changed = sub.grown_segments.pop(0)
        self.grown_segments[-1].end = changed.end
        self.grown_segments.extend(sub.grown_segments)

        sub.points.pop(0)
        self.points.pop()
        self.points.extend(sub.points)

        self.visible_obstacles.update(sub.visible_obstacles)
        self.end = sub.end
        self.sub_path = None

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_start_point(self, point: Point) -> None:
        if (point.x, point.y) == (self.start.x, self.start.y):
            return
        self.start = Vertex.at(point)
        self.is_dirty = True

    def set_end_point(self, point: Point) -> None:
        if (point.x, point.y) == (self.end.x, self.end.y):
            return
        self.end = Vertex.at(point)
        self.is_dirty = True

    def set_bend_points(self, bend_points: Optional[List[Point]]) -> None:
        self.bend_points = list(bend_points) if bend_points is not None else None
        self.is_dirty = True

    def is_obstacle_visible(self, obs: "Obstacle") -> bool:
        return obs.id in self.visible_obstacles

    def test_and_set(self, obs: "Obstacle") -> bool:
        """
        Dirty this path if its current polyline touches the obstacle.

        Returns True if the path was clean and has now been dirtied.
        """
        if self.is_dirty or obs in self.excluded_obstacles:
            return False

        diagonal = Segment(obs.top_left, obs.bottom_right)
        anti_diagonal = Segment(obs.top_right, obs.bottom_left)
        for current, following in zip(self.points, self.points[1:]):
            if (
                diagonal.intersects_points(current, following)
                or anti_diagonal.intersects_points(current, following)
                or obs.contains(current)
                or obs.contains(following)
            ):
                self.is_dirty = True
                return True
        return False

    def __repr__(self) -> str:
        return f"Path({self.start!r} -> {self.end!r})"
