# mazerace/core/traversal.py
#!/usr/bin/env python3
"""
Breadth-/depth-first search, one frontier pop per step() for animation.

Implements the same Algorithm API the viewer drives:
- init(grid) - reset() - step() -> StepResult

The only difference between BFS and DFS is the frontier discipline
(FIFO vs LIFO); everything else is shared.

Per step:
  - Pop one cell, count it.
  - If it is the end cell, reconstruct the path and finish.
  - Else push the unvisited, non-wall neighbors (up, down, left, right),
    marking them visited and recording the popped cell as their parent.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from mazerace.core.frontier import Frontier, frontier_for
from mazerace.core.path import reconstruct_path
from mazerace.core.types import Algorithm, Grid, Pos, StepResult

TERMINAL = ("done", "no_path")


@dataclass
class TraversalAlgo:
    algorithm: Algorithm = Algorithm.BFS

    # Internal state
    grid: Optional[Grid] = None
    frontier: Frontier = field(init=False)
    visited_count: int = 0
    done: bool = False
    no_path: bool = False
    path: List[Pos] = field(default_factory=list)

    def __post_init__(self):
        self.frontier = frontier_for(self.algorithm)

    @property
    def name(self) -> str:
        return self.algorithm.label

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid) -> None:
        """Attach to a grid and seed the frontier with its start."""
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        """Clear run state (ours and the grid's) and seed with the start node."""
        if self.grid is None:
            return
        self.grid.reset()
        self.frontier.clear()
        self.visited_count = 0
        self.done = False
        self.no_path = False
        self.path = []

        s = self.grid.start
        self.grid.cell(s).visited = True
        self.frontier.push(s)

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", current=self.grid.end, path=list(self.path),
                              metrics=self._metrics())

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.frontier:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        u = self.frontier.pop()
        self.visited_count += 1

        if u == self.grid.end:
            self.done = True
            self.path = reconstruct_path(self.grid, u)
            return StepResult(status="done", current=u, path=list(self.path),
                              metrics=self._metrics())

        opened_now: List[Pos] = []
        for v in self.grid.neighbors4(u):
            cs = self.grid.cell(v)
            if cs.visited:
                continue
            cs.visited = True
            cs.parent = u
            self.frontier.push(v)
            opened_now.append(v)

        return StepResult(status="running", current=u, opened=opened_now,
                          metrics=self._metrics())

    def events(self) -> Iterator[StepResult]:
        """Lazy, finite sequence of steps ending with the terminal one."""
        while True:
            res = self.step()
            yield res
            if res.status in TERMINAL or res.status == "idle":
                return

    def run_to_end(self) -> StepResult:
        res = StepResult(status="idle")
        for res in self.events():
            pass
        return res

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "visited": self.visited_count,
            "peak_frontier": self.frontier.peak,
            "path_len": len(self.path),
        }
