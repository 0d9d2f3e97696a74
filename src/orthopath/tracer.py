"""
Debug tracing for the solve pipeline.

When a router is created with ``trace=True`` every call to ``solve()``
records a SolveTrace: one PipelineStage per pipeline step plus a record of
every bend point materialised around an obstacle corner.

This is primarily useful for:
1. Debugging spacing issues (why did two routes end up this close?)
2. Understanding the pipeline flow (which paths were split, how many grow
   passes ran)
3. Writing targeted tests

Usage:
    >>> router = ShortestPathRouter(trace=True)
    >>> router.add_obstacle((10, 10, 50, 50))
    >>> handle = router.add_path((0, 30), (100, 30))
    >>> router.solve()
    >>> print(router.get_trace().summary())
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .geometry import Point


@dataclass
class BendPlacement:
    """
    Record of a single bend point placed around a vertex.

    Attributes:
        path: Label of the path (handle for user paths, "sub"/"child" otherwise)
        vertex: The vertex the path bends around, as ``(x, y)``
        point: Where the bend point ended up
        kind: "innie" or "outie"
        modifier: Multiple of the vertex offset that was applied
    """

    path: str
    vertex: tuple
    point: Point
    kind: str
    modifier: int

    def __str__(self) -> str:
        return (
            f"{self.path}: ({self.vertex[0]},{self.vertex[1]}) -> "
            f"({self.point.x},{self.point.y}) [{self.kind} x{self.modifier}]"
        )


@dataclass
class PipelineStage:
    """
    Snapshot of state after a pipeline stage.

    Attributes:
        name: Name of the stage (e.g. "grow_obstacles")
        data: Dictionary of relevant data at this stage
        routes: Optional copy of every path's points at this point
    """

    name: str
    data: Dict[str, Any]
    routes: Optional[Dict[Any, List[Point]]] = None

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        if self.routes:
            lines.append("  Routes:")
            for key, points in self.routes.items():
                coords = " ".join(f"({p.x},{p.y})" for p in points)
                lines.append(f"    {key}: {coords}")
        return "\n".join(lines)


@dataclass
class SolveTrace:
    """
    Complete trace of one solve.

    Attributes:
        stages: Pipeline stages in the order they ran
        bends: Every bend point materialised during the solve
        obstacle_count: Number of obstacles when the solve started
        path_count: Number of user paths when the solve started
    """

    stages: List[PipelineStage] = field(default_factory=list)
    bends: List[BendPlacement] = field(default_factory=list)
    obstacle_count: int = 0
    path_count: int = 0

    def add_stage(
        self,
        name: str,
        data: Dict[str, Any],
        routes: Optional[Dict[Any, List[Point]]] = None,
    ) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage
            data: Dictionary of relevant data at this stage
            routes: Optional mapping of path label to points
        """
        snapshot = None
        if routes is not None:
            snapshot = {key: list(points) for key, points in routes.items()}
        self.stages.append(PipelineStage(name, data.copy(), snapshot))

    def add_bend(self, path: str, vertex, point: Point, kind: str, modifier: int):
        self.bends.append(
            BendPlacement(path, (vertex.x, vertex.y), point, kind, modifier)
        )

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def stage_names(self) -> List[str]:
        return [stage.name for stage in self.stages]

    def get_routes_at_stage(self, name: str) -> Optional[Dict[Any, List[Point]]]:
        stage = self.get_stage(name)
        if stage and stage.routes:
            return stage.routes
        return None

    def get_bends_for(self, path: str) -> List[BendPlacement]:
        return [b for b in self.bends if b.path == path]

    def get_bends_at(self, x: int, y: int) -> List[BendPlacement]:
        """Get all bends placed around the vertex at ``(x, y)``."""
        return [b for b in self.bends if b.vertex == (x, y)]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with:
        - Obstacle and path counts
        - Pipeline stages overview
        - Bend statistics
        """
        lines = [
            "=" * 60,
            "SOLVE TRACE SUMMARY",
            "=" * 60,
            "",
            f"Obstacles: {self.obstacle_count}",
            f"Paths: {self.path_count}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]

        for stage in self.stages:
            has_routes = "+" if stage.routes else "-"
            lines.append(f"  [{has_routes}] {stage.name}")

        lines.extend(["", f"Total bends: {len(self.bends)}", ""])

        kind_counts: Dict[str, int] = {}
        for bend in self.bends:
            kind_counts[bend.kind] = kind_counts.get(bend.kind, 0) + 1

        lines.append("Bends by kind:")
        for kind, count in sorted(kind_counts.items(), key=lambda x: -x[1]):
            lines.append(f"  {kind}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """Full dump of every stage and every bend."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("BENDS:")
        lines.append("-" * 40)
        for bend in self.bends:
            lines.append(str(bend))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
