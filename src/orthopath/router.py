"""
Incremental shortest-path connector router.

ShortestPathRouter keeps a set of rectangular obstacles and a set of paths.
Mutations only mark the affected paths dirty; ``solve()`` re-routes the
dirty ones and then runs the global spacing passes over every path:

1. reconcile bend-point constraints into child paths
2. solve dirty paths (visibility graph + shortest path)
3. count how many paths turn around each vertex
4. clamp vertex offsets against nearby obstacles
5. grow obstacles and re-test routes against them
6. label vertices innie/outie, splitting inconsistent paths
7. order paths for drawing
8. materialise bend points
9. splice split sub-paths back together
10. concatenate child paths into their compound parent
11. clean up per-solve scratch
"""

import logging
from typing import Dict, List, Optional

from .errors import ObstacleNotFoundError, ReentrantSolveError, UnknownPathError
from .geometry import (
    Point,
    PointLike,
    Position,
    Rectangle,
    RectangleLike,
    as_point,
    as_rectangle,
)
from .obstacle import Obstacle
from .path import Path, ThresholdPolicy
from .segment import Segment
from .tracer import SolveTrace
from .vertex import Vertex, VertexType

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER CONFIGURATION
# =============================================================================

# Distance kept between parallel routes turning around the same corner
DEFAULT_SPACING = 10

# Upper bound on obstacle growth passes per solve
NUM_GROW_PASSES = 4

# =============================================================================

PathHandle = int


class ShortestPathRouter:
    """
    Routes paths around obstacles using shortest paths.

    Obstacles are identified by their bounds, paths by the integer handle
    returned from ``add_path``.

    Args:
        spacing: Minimum distance between routes sharing a corner.
        threshold_policy: Search oval policy, see ThresholdPolicy.
        reroute_after_growth: Insert extra bends when a route clips a grown
            obstacle. Off by default; a bend is only inserted when its two
            new legs clear every unrelated obstacle.
        strict: Propagate GeometryFault out of ``solve()`` instead of logging it.
        trace: Record a SolveTrace for every solve.
    """

    def __init__(
        self,
        spacing: int = DEFAULT_SPACING,
        threshold_policy: Optional[ThresholdPolicy] = None,
        reroute_after_growth: bool = False,
        strict: bool = False,
        trace: bool = False,
    ):
        self.spacing = spacing
        self.threshold_policy = threshold_policy or ThresholdPolicy()
        self.reroute_after_growth = reroute_after_growth
        self.strict = strict
        self.trace_enabled = trace

        self._obstacles: Dict[int, Obstacle] = {}
        self._next_obstacle_id = 0
        self._paths: Dict[PathHandle, Path] = {}
        self._next_handle = 0
        self._working_paths: List[Path] = []
        self._children: Dict[Path, List[Path]] = {}

        self._ordered_paths: List[Path] = []
        self._sub_paths: List[Path] = []
        self._stack: List[Path] = []
        self._grow_pass_changed = False
        self._solving = False
        self._trace: Optional[SolveTrace] = None

    # -------------------------------------------------------------------------
    # Obstacles
    # -------------------------------------------------------------------------

    def add_obstacle(self, rect: RectangleLike) -> bool:
        """
        Add an obstacle.

        Returns:
            True if a previously solved path now needs re-routing.
        """
        obs = Obstacle(self._next_obstacle_id, as_rectangle(rect))
        self._next_obstacle_id += 1
        self._obstacles[obs.id] = obs
        return self._test_and_dirty_paths(obs)

    def remove_obstacle(self, rect: RectangleLike) -> bool:
        """
        Remove the obstacle with the given bounds.

        Raises:
            ObstacleNotFoundError: If no obstacle has these bounds.
        """
        obs = self.get_obstacle(rect)
        del self._obstacles[obs.id]
        return self._dirty_paths_using(obs)

    def update_obstacle(self, old_rect: RectangleLike, new_rect: RectangleLike) -> bool:
        """
        Move an obstacle. Returns True if any solved path was invalidated.

        The obstacle keeps its identity and its place in the growth order.
        """
        old_bounds = as_rectangle(old_rect)
        new_bounds = as_rectangle(new_rect)
        obs = self.get_obstacle(old_bounds)
        if old_bounds == new_bounds:
            return False
        result = self._dirty_paths_using(obs)
        moved = Obstacle(obs.id, new_bounds)
        self._obstacles[obs.id] = moved
        result |= self._test_and_dirty_paths(moved)
        return result

    def get_obstacle(self, rect: RectangleLike) -> Obstacle:
        bounds = as_rectangle(rect)
        for obs in self._obstacles.values():
            if obs.bounds == bounds:
                return obs
        raise ObstacleNotFoundError(f"No obstacle with bounds {bounds}")

    def get_obstacles(self) -> List[Rectangle]:
        return [obs.bounds for obs in self._obstacles.values()]

    def _test_and_dirty_paths(self, obs: Obstacle) -> bool:
        result = False
        for path in self._working_paths:
            result |= path.test_and_set(obs)
        return result

    def _dirty_paths_using(self, obs: Obstacle) -> bool:
        result = False
        for vertex in obs.corners:
            result |= self._dirty_paths_on(vertex)

        for path in self._working_paths:
            if path.is_dirty:
                continue
            if path.is_obstacle_visible(obs):
                path.is_dirty = result = True
        return result

    def _dirty_paths_on(self, vertex: Vertex) -> bool:
        # vertex.paths lags behind remove_path and holds split sub-paths
        visitors = [p for p in vertex.paths if p in self._working_paths]
        for path in visitors:
            path.is_dirty = True
        return bool(visitors)

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def add_path(self, start: PointLike, end: PointLike, data=None) -> PathHandle:
        """Add a path and return its handle. The path is routed on the next solve."""
        path = Path.between(as_point(start), as_point(end), data)
        handle = self._next_handle
        self._next_handle += 1
        path.handle = handle
        self._paths[handle] = path
        self._working_paths.append(path)
        return handle

    def remove_path(self, handle: PathHandle) -> None:
        path = self._get_path(handle)
        del self._paths[handle]
        children = self._children.pop(path, None)
        if children is None:
            self._working_paths.remove(path)
        else:
            self._remove_working(children)

    def set_bend_points(
        self, handle: PathHandle, bend_points: Optional[List[PointLike]]
    ) -> None:
        """Constrain a path to pass through the given points in order."""
        points = None
        if bend_points is not None:
            points = [as_point(p) for p in bend_points]
        self._get_path(handle).set_bend_points(points)

    def get_bend_points(self, handle: PathHandle) -> Optional[List[Point]]:
        bend_points = self._get_path(handle).bend_points
        return list(bend_points) if bend_points is not None else None

    def set_start_point(self, handle: PathHandle, point: PointLike) -> None:
        self._get_path(handle).set_start_point(as_point(point))

    def set_end_point(self, handle: PathHandle, point: PointLike) -> None:
        self._get_path(handle).set_end_point(as_point(point))

    def get_points(self, handle: PathHandle) -> List[Point]:
        """The solved polyline, inclusive of start and end."""
        return list(self._get_path(handle).points)

    def get_data(self, handle: PathHandle):
        return self._get_path(handle).data

    def is_resolved(self, handle: PathHandle) -> bool:
        return not self._get_path(handle).unresolved

    def is_dirty(self, handle: PathHandle) -> bool:
        return self._get_path(handle).is_dirty

    def unresolved_paths(self) -> List[PathHandle]:
        return [h for h, path in self._paths.items() if path.unresolved]

    def handles(self) -> List[PathHandle]:
        return list(self._paths)

    def _get_path(self, handle: PathHandle) -> Path:
        try:
            return self._paths[handle]
        except KeyError:
            raise UnknownPathError(f"Unknown path handle {handle!r}") from None

    def _remove_working(self, paths: List[Path]) -> None:
        self._working_paths = [p for p in self._working_paths if p not in paths]

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_spacing(self, spacing: int) -> None:
        self.spacing = spacing

    def get_spacing(self) -> int:
        return self.spacing

    def set_threshold_policy(self, policy: ThresholdPolicy) -> None:
        self.threshold_policy = policy

    def get_threshold_policy(self) -> ThresholdPolicy:
        return self.threshold_policy

    def get_trace(self) -> Optional[SolveTrace]:
        """The trace of the last solve, or None when tracing is disabled."""
        return self._trace

    # -------------------------------------------------------------------------
    # Solve
    # -------------------------------------------------------------------------

    def solve(self) -> List[PathHandle]:
        """
        Re-route dirty paths and re-space every path.

        Returns:
            Handles of the paths whose points changed, in handle order.

        Raises:
            ReentrantSolveError: If called while a solve is running.
            GeometryFault: In strict mode, when a path endpoint cannot be
                connected to an obstacle.
        """
        if self._solving:
            raise ReentrantSolveError("solve() is not reentrant")
        self._solving = True
        try:
            return self._solve()
        finally:
            self._solving = False
            self._stack = []
            self._ordered_paths = []
            self._sub_paths = []

    def _solve(self) -> List[PathHandle]:
        self._trace = None
        if self.trace_enabled:
            self._trace = SolveTrace(
                obstacle_count=len(self._obstacles), path_count=len(self._paths)
            )
        previous = {h: list(path.points) for h, path in self._paths.items()}

        self._reconcile_bend_constraints()
        self._stage("bend_constraints", {"compound_paths": len(self._children)})

        solved = self._solve_dirty_paths()
        self._reset_vertices()
        self._stage(
            "solve_dirty_paths",
            {"solved": solved, "unresolved": self.unresolved_paths()},
        )

        visits = self._count_vertices()
        self._stage("count_vertices", {"vertex_visits": visits})

        clamped = self._check_vertex_intersections()
        self._stage("check_vertex_spacing", {"clamped_vertices": clamped})

        passes = self._grow_obstacles()
        self._stage("grow_obstacles", {"passes": passes})

        self._sub_paths = []
        self._stack = []
        self._label_paths()
        self._stage(
            "label_paths",
            {
                "splits": len(self._sub_paths),
                "inverted": [
                    self._path_label(p) for p in self._working_paths if p.is_inverted
                ],
            },
        )

        self._ordered_paths = []
        self._order_paths()
        self._stage(
            "order_paths", {"order": [self._path_label(p) for p in self._ordered_paths]}
        )

        self._bend_paths()
        self._stage(
            "bend_paths",
            {"paths": len(self._ordered_paths)},
            {self._path_label(p): p.points for p in self._ordered_paths},
        )

        split_count = len(self._sub_paths)
        self._recombine_subpaths()
        self._stage("recombine_subpaths", {"subpaths": split_count})

        self._recombine_children_paths()
        self._stage(
            "recombine_children",
            {"compound_paths": len(self._children)},
            {h: path.points for h, path in self._paths.items()},
        )

        self._cleanup()
        changed = [
            h for h, path in self._paths.items() if previous.get(h) != path.points
        ]
        self._stage("cleanup", {"changed": changed})

        logger.debug(
            "Solved %d dirty path(s), %d grow pass(es), %d split(s), %d changed",
            solved,
            passes,
            split_count,
            len(changed),
        )
        return changed

    def _stage(self, name: str, data: dict, routes=None) -> None:
        if self._trace is not None:
            self._trace.add_stage(name, data, routes)

    def _path_label(self, path: Path) -> str:
        if path.handle is not None:
            return str(path.handle)
        for parent, children in self._children.items():
            if path in children:
                return f"{parent.handle}.{children.index(path)}"
        return "sub"

    # --- 1. bend constraints -------------------------------------------------

    def _reconcile_bend_constraints(self) -> None:
        for path in self._paths.values():
            if not path.is_dirty:
                continue
            children = self._children.get(path, [])
            prev_count = len(children) if path in self._children else 1
            new_count = 1
            if path.bend_points is not None:
                new_count = len(path.bend_points) + 1

            if prev_count != new_count:
                children = self._regenerate_child_paths(
                    path, children, prev_count, new_count
                )
            self._refresh_children_endpoints(path, children)

    def _regenerate_child_paths(
        self, path: Path, children: List[Path], current: int, new: int
    ) -> List[Path]:
        if current == 1:
            # simple path becoming compound
            self._remove_working([path])
            current = 0
            children = []
            self._children[path] = children
        elif new == 1:
            # compound path becoming simple
            self._remove_working(children)
            self._working_paths.append(path)
            del self._children[path]
            path.is_dirty = True
            return []

        while current < new:
            child = Path.between(path.start_point, path.end_point, path.data)
            self._working_paths.append(child)
            children.append(child)
            current += 1

        while current > new:
            child = children.pop()
            self._remove_working([child])
            current -= 1

        return children

    @staticmethod
    def _refresh_children_endpoints(path: Path, children: List[Path]) -> None:
        previous = path.start_point
        bend_points = path.bend_points or []
        for i, child in enumerate(children):
            following = bend_points[i] if i < len(bend_points) else path.end_point
            child.set_start_point(previous)
            child.set_end_point(following)
            previous = following

    # --- 2. dirty paths ------------------------------------------------------

    def _solve_dirty_paths(self) -> int:
        obstacles = list(self._obstacles.values())
        policy = self.threshold_policy
        solved = 0
        try:
            for path in self._working_paths:
                path.refresh_excluded_obstacles(obstacles)
                if not path.is_dirty:
                    path.reset_partial()
                    continue

                solved += 1
                path.stale_points = list(path.points) or [
                    path.start_point,
                    path.end_point,
                ]
                path.unresolved = False
                path.full_reset(policy)

                found = path.generate_shortest_path(obstacles, self.strict)
                if not found or (path.threshold > 0 and path.cost > path.threshold):
                    # not found, or the route found is too long
                    path.full_reset(policy)
                    path.threshold = 0
                    found = path.generate_shortest_path(obstacles, self.strict)

                if not found:
                    path.unresolved = True
                    path.is_dirty = True
                    path.segments = []
                    logger.warning(
                        "No route from %s to %s; keeping previous points",
                        path.start_point,
                        path.end_point,
                    )
        finally:
            for obs in obstacles:
                obs.excluded = False
        return solved

    def _reset_vertices(self) -> None:
        for obs in self._obstacles.values():
            obs.reset(self.spacing)
        for path in self._working_paths:
            path.start.full_reset(self.spacing)
            path.end.full_reset(self.spacing)

    # --- 3./4. counting and spacing ------------------------------------------

    def _count_vertices(self) -> int:
        visits = 0
        for path in self._working_paths:
            for segment in path.segments[:-1]:
                segment.end.total_count += 1
                visits += 1
        return visits

    def _check_vertex_intersections(self) -> int:
        clamped = 0
        for path in self._working_paths:
            for segment in path.segments[:-1]:
                vertex = segment.end
                if vertex.nearest_obstacle_checked:
                    continue
                self._check_vertex_for_intersections(vertex)
                if vertex.nearest_obstacle != 0:
                    clamped += 1
        return clamped

    def _check_vertex_for_intersections(self, vertex: Vertex) -> None:
        """Record the distance to the closest obstacle in the vertex's growth area."""
        if vertex.nearest_obstacle != 0 or vertex.nearest_obstacle_checked:
            return

        side = 2 * (vertex.total_count * self.spacing) + 1
        y = vertex.y - side if vertex.position & Position.NORTH else vertex.y
        x = vertex.x if vertex.position & Position.EAST else vertex.x - side
        region = Rectangle(x, y, side, side)

        for obs in self._obstacles.values():
            if obs.id == vertex.obstacle_id or not region.intersects(obs.bounds):
                continue
            position = obs.position(vertex)
            if position == Position.NONE:
                continue

            if position & Position.NORTH:
                y_dist = obs.y - vertex.y
            else:
                y_dist = vertex.y - obs.bottom + 1
            if position & Position.EAST:
                x_dist = vertex.x - obs.right + 1
            else:
                x_dist = obs.x - vertex.x

            distance = max(x_dist, y_dist)
            if distance < vertex.nearest_obstacle or vertex.nearest_obstacle == 0:
                vertex.nearest_obstacle = distance
                vertex.update_offset()

        vertex.nearest_obstacle_checked = True

    # --- 5. growth -----------------------------------------------------------

    def _grow_obstacles(self) -> int:
        passes = 0
        for _ in range(NUM_GROW_PASSES):
            self._grow_pass_changed = False
            self._grow_obstacles_pass()
            passes += 1
            if not self._grow_pass_changed:
                break
        return passes

    def _grow_obstacles_pass(self) -> None:
        for obs in self._obstacles.values():
            obs.grow_vertices()

        for path in self._working_paths:
            for obs in path.excluded_obstacles:
                obs.excluded = True

            if not path.grown_segments:
                for segment in path.segments:
                    self._test_offset_segment(segment, -1, path)
            else:
                counter = 0
                for s, segment in enumerate(list(path.grown_segments)):
                    counter += self._test_offset_segment(segment, s + counter, path)

            for obs in path.excluded_obstacles:
                obs.excluded = False

        for obs in self._obstacles.values():
            obs.shrink_vertices()

    def _test_offset_segment(self, segment: Segment, index: int, path: Path) -> int:
        """
        Test a route segment against the grown obstacles.

        When the segment clips a grown obstacle it is split around the
        obstacle's nearest corner. ``index`` is the segment's position in
        ``path.grown_segments``, or -1 while the grown chain is being built.

        Returns:
            1 if the segment was split, else 0.
        """
        if self.reroute_after_growth:
            offset = self.spacing
            for obs in self._obstacles.values():
                if obs.id in (segment.start.obstacle_id, segment.end.obstacle_id):
                    continue
                if obs.excluded:
                    continue

                vertex = self._clipped_corner(segment, obs, offset)
                if vertex is None:
                    continue

                corner_rect = vertex.deformed_rectangle(offset)
                if segment.end.obstacle_id is not None:
                    if corner_rect.intersects(segment.end.deformed_rectangle(offset)):
                        continue
                if segment.start.obstacle_id is not None:
                    if corner_rect.intersects(segment.start.deformed_rectangle(offset)):
                        continue

                new_start = Segment(segment.start, vertex)
                new_end = Segment(vertex, segment.end)
                if self._leg_blocked(new_start) or self._leg_blocked(new_end):
                    continue

                vertex.total_count += 1
                vertex.nearest_obstacle_checked = False
                vertex.shrink()
                self._check_vertex_for_intersections(vertex)
                vertex.grow()
                if vertex.nearest_obstacle != 0:
                    vertex.update_offset()

                self._grow_pass_changed = True

                if index != -1:
                    path.grown_segments.remove(segment)
                    path.grown_segments.insert(index, new_start)
                    path.grown_segments.insert(index + 1, new_end)
                else:
                    path.grown_segments.append(new_start)
                    path.grown_segments.append(new_end)
                return 1

        if index == -1:
            path.grown_segments.append(segment)
        return 0

    def _leg_blocked(self, leg: Segment) -> bool:
        owners = (leg.start.obstacle_id, leg.end.obstacle_id)
        for obs in self._obstacles.values():
            if obs.excluded or obs.id in owners:
                continue
            if obs.blocks(leg):
                return True
        return False

    @staticmethod
    def _clipped_corner(segment: Segment, obs: Obstacle, offset: int) -> Optional[Vertex]:
        tl, tr, bl, br = obs.top_left, obs.top_right, obs.bottom_left, obs.bottom_right

        def crosses_main():
            return segment.intersects(
                tl.x - offset, tl.y - offset, br.x + offset, br.y + offset
            )

        def crosses_anti():
            return segment.intersects(
                bl.x - offset, bl.y + offset, tr.x + offset, tr.y - offset
            )

        if segment.slope_sign() < 0:
            if crosses_main():
                return _nearest_vertex(tl, br, segment)
            if crosses_anti():
                return _nearest_vertex(bl, tr, segment)
        else:
            if crosses_anti():
                return _nearest_vertex(bl, tr, segment)
            if crosses_main():
                return _nearest_vertex(tl, br, segment)
        return None

    # --- 6. labelling --------------------------------------------------------

    def _label_paths(self) -> None:
        self._stack.extend(self._working_paths)
        while self._stack:
            path = self._stack.pop()
            if not path.is_marked:
                path.is_marked = True
                self._label_path(path)

        for path in self._working_paths:
            path.is_marked = False

    def _label_path(self, path: Path) -> None:
        agree = False
        grown = path.grown_segments
        for v in range(len(grown) - 1):
            segment = grown[v]
            next_segment = grown[v + 1]
            vertex = segment.end
            cross = segment.cross_product(Segment(vertex, self._center_of(vertex)))

            if vertex.type == VertexType.NOT_SET:
                self._label_vertex(segment, cross, path)
            elif not path.is_inverted and (
                (cross > 0 and vertex.type == VertexType.OUTIE)
                or (cross < 0 and vertex.type == VertexType.INNIE)
            ):
                if agree:
                    self._stack.append(self._split_path(path, segment))
                    return
                path.is_inverted = True
                path.invert_prior_vertices(segment)
            elif path.is_inverted and (
                (cross < 0 and vertex.type == VertexType.OUTIE)
                or (cross > 0 and vertex.type == VertexType.INNIE)
            ):
                self._stack.append(self._split_path(path, segment))
                return
            else:
                agree = True

            for next_path in vertex.paths:
                if not next_path.is_marked:
                    next_path.is_marked = True
                    self._stack.append(next_path)

            vertex.add_path(path, segment, next_segment)

    @staticmethod
    def _label_vertex(segment: Segment, cross: int, path: Path) -> None:
        vertex = segment.end
        if cross > 0:
            vertex.type = VertexType.OUTIE if path.is_inverted else VertexType.INNIE
        elif cross < 0:
            vertex.type = VertexType.INNIE if path.is_inverted else VertexType.OUTIE
        elif segment.start.type != VertexType.NOT_SET:
            vertex.type = segment.start.type
        else:
            vertex.type = VertexType.INNIE

    def _center_of(self, vertex: Vertex) -> Vertex:
        obs = self._obstacles.get(vertex.obstacle_id)
        return obs.center if obs is not None else vertex

    def _split_path(self, path: Path, segment: Segment) -> Path:
        sub = path.get_sub_path(segment)
        self._working_paths.append(sub)
        self._sub_paths.append(sub)
        return sub

    # --- 7. ordering ---------------------------------------------------------

    def _order_paths(self) -> None:
        for path in self._working_paths:
            self._order_path(path)

    def _order_path(self, path: Path) -> None:
        """Append ``path`` once every path turning tighter at a shared vertex is in."""
        if path.is_marked:
            return
        path.is_marked = True

        grown = path.grown_segments
        for segment in grown[:-1]:
            vertex = segment.end
            this_angle = vertex.cached_cosines[path]
            if path.is_inverted:
                this_angle = -this_angle

            for other in vertex.paths:
                if other.is_marked:
                    continue
                other_angle = vertex.cached_cosines[other]
                if other.is_inverted:
                    other_angle = -other_angle
                if other_angle < this_angle:
                    self._order_path(other)

        self._ordered_paths.append(path)

    # --- 8. bends ------------------------------------------------------------

    def _bend_paths(self) -> None:
        for path in self._ordered_paths:
            if path.unresolved:
                path.points = list(path.stale_points)
                continue

            points = [path.start_point]
            placements = []
            for segment in path.grown_segments[:-1]:
                vertex = segment.end
                if vertex.type == VertexType.INNIE:
                    vertex.count += 1
                    modifier = vertex.count
                    kind = "innie"
                else:
                    modifier = vertex.total_count
                    vertex.total_count -= 1
                    kind = "outie"
                points.append(vertex.bend(modifier))
                placements.append((vertex, kind, modifier))
            points.append(path.end_point)
            self._pull_back_blocked_bends(points, [v for v, _, _ in placements])

            if self._trace is not None:
                label = self._path_label(path)
                for point, (vertex, kind, modifier) in zip(points[1:-1], placements):
                    self._trace.add_bend(label, vertex, point, kind, modifier)
            path.points = points

    def _pull_back_blocked_bends(
        self, points: List[Point], vertices: List[Vertex]
    ) -> None:
        """Put a bend back on its corner when a leg next to it cuts through a box."""
        start, end = points[0], points[-1]
        boxes = [
            obs.bounds
            for obs in self._obstacles.values()
            if not (obs.contains_proper(start) or obs.contains_proper(end))
        ]
        for i, vertex in enumerate(vertices, start=1):
            corner = vertex.original_point
            if points[i] == corner:
                continue
            for a, b in ((points[i - 1], points[i]), (points[i], points[i + 1])):
                if any(box.crosses_interior(a, b) for box in boxes):
                    logger.debug("Bend at %s cuts through an obstacle", corner)
                    points[i] = corner
                    break

    # --- 9./10. recombination ------------------------------------------------

    def _recombine_subpaths(self) -> None:
        for path in self._ordered_paths:
            path.reconnect_sub_paths()

        subs = self._sub_paths
        self._ordered_paths = [p for p in self._ordered_paths if p not in subs]
        self._remove_working(subs)
        self._sub_paths = []

    def _recombine_children_paths(self) -> None:
        for parent, children in self._children.items():
            parent.full_reset(self.threshold_policy)

            points: List[Point] = []
            for child in children:
                points.extend(child.points)
                # consecutive children share their joint point
                points.pop()
                parent.segments.extend(child.segments)
                parent.visible_obstacles.update(child.visible_obstacles)
            points.append(children[-1].points[-1])

            parent.points = points
            parent.unresolved = any(child.unresolved for child in children)
            parent.is_dirty = parent.unresolved

    # --- 11. cleanup ---------------------------------------------------------

    def _cleanup(self) -> None:
        for path in self._working_paths:
            path.cleanup()


def _nearest_vertex(v1: Vertex, v2: Vertex, segment: Segment) -> Vertex:
    """Whichever of two vertices makes the shorter detour from the segment."""
    d1 = segment.start.distance(v1) + segment.end.distance(v1)
    d2 = segment.start.distance(v2) + segment.end.distance(v2)
    return v2 if d1 > d2 else v1
