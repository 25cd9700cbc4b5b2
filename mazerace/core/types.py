# mazerace/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any, Iterator

Pos = Tuple[int, int]  # (row, col)

# up, down, left, right -- neighbor enumeration order is part of the contract
DIRECTIONS: Tuple[Pos, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class InvalidConfiguration(ValueError):
    """Grid or settings that cannot produce a valid maze."""


class Algorithm(str, Enum):
    BFS = "bfs"
    DFS = "dfs"

    @property
    def label(self) -> str:
        return "BFS" if self is Algorithm.BFS else "DFS"


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class CellState:
    is_wall: bool = False
    is_start: bool = False
    is_end: bool = False
    visited: bool = False
    parent: Optional[Pos] = None  # key into the grid, never a node reference


@dataclass
class Grid:
    rows: int
    cols: int
    cells: List[CellState]  # flat, row-major
    start: Pos
    end: Pos

    @classmethod
    def from_walls(cls, walls: List[List[int]], start: Pos, end: Pos) -> "Grid":
        """Build a grid from a 0/1 wall matrix ([row][col]); start/end are cleared."""
        rows = len(walls)
        cols = len(walls[0]) if rows else 0
        if rows == 0 or any(len(r) != cols for r in walls):
            raise InvalidConfiguration("wall matrix must be a non-empty rectangle")
        cells = [CellState(is_wall=bool(v)) for r in walls for v in r]
        grid = cls(rows, cols, cells, start, end)
        grid.place_endpoints(start, end)
        return grid

    def in_bounds(self, p: Pos) -> bool:
        r, c = p
        return 0 <= r < self.rows and 0 <= c < self.cols

    def index(self, p: Pos) -> int:
        r, c = p
        return r * self.cols + c

    def cell(self, p: Pos) -> CellState:
        return self.cells[self.index(p)]

    def is_wall(self, p: Pos) -> bool:
        return self.cell(p).is_wall

    def positions(self) -> Iterator[Pos]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def neighbors4(self, p: Pos) -> List[Pos]:
        """In-bounds, non-wall neighbors in up/down/left/right order."""
        r, c = p
        out: List[Pos] = []
        for dr, dc in DIRECTIONS:
            n = (r + dr, c + dc)
            if self.in_bounds(n) and not self.is_wall(n):
                out.append(n)
        return out

    def place_endpoints(self, start: Pos, end: Pos) -> None:
        if not (self.in_bounds(start) and self.in_bounds(end)):
            raise InvalidConfiguration("start/end out of bounds")
        if start == end:
            raise InvalidConfiguration("start and end must differ")
        for cs in self.cells:
            cs.is_start = cs.is_end = False
        s, e = self.cell(start), self.cell(end)
        s.is_wall = e.is_wall = False
        s.is_start = True
        e.is_end = True
        self.start, self.end = start, end

    def reset(self) -> None:
        """Clear the per-run fields; layout is untouched."""
        for cs in self.cells:
            cs.visited = False
            cs.parent = None

    def wall_count(self) -> int:
        return sum(1 for cs in self.cells if cs.is_wall)


def manhattan(a: Pos, b: Pos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def min_separation(rows: int, cols: int) -> int:
    return (rows + cols) // 3


@dataclass
class RunStats:
    elapsed_time_ms: int = 0
    visited_count: int = 0
    path_length: int = 0
    peak_frontier_size: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "time": self.elapsed_time_ms,
            "visited": self.visited_count,
            "path_len": self.path_length,
            "memory": self.peak_frontier_size,
        }


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    current: Optional[Pos] = None
    opened: List[Pos] = field(default_factory=list)
    path: Optional[List[Pos]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
