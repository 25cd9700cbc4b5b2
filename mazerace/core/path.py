# mazerace/core/path.py
#!/usr/bin/env python3
from typing import List, Sequence

from mazerace.core.types import Grid, Pos, manhattan


def reconstruct_path(grid: Grid, end: Pos) -> List[Pos]:
    """
    Follow parent keys back from `end` and return the path start -> end.

    Returns [] when the chain does not reach the grid's start (the cell was
    never reached, or the grid was reset in between).
    """
    path: List[Pos] = []
    cur = end
    # a parent chain can never be longer than the grid
    for _ in range(grid.rows * grid.cols):
        path.append(cur)
        if cur == grid.start:
            path.reverse()
            return path
        parent = grid.cell(cur).parent
        if parent is None:
            break
        cur = parent
    return []


def is_valid_path(grid: Grid, path: Sequence[Pos]) -> bool:
    """start..end, 4-adjacent steps, no walls, no repeats."""
    if not path or path[0] != grid.start or path[-1] != grid.end:
        return False
    if len(set(path)) != len(path):
        return False
    for a, b in zip(path, path[1:]):
        if manhattan(a, b) != 1:
            return False
    return all(grid.in_bounds(p) and not grid.is_wall(p) for p in path)
