# mazerace/core/generator.py
#!/usr/bin/env python3
"""
Random maze generator.

- Every cell is a wall with probability density/100 (independent draws).
- Start is uniform over all cells.
- End is uniform too, resampled until manhattan(start, end) >= (rows+cols)//3.
- Start and end are forced open after the draw.

Resampling is bounded: a grid that cannot host a far-enough pair raises
InvalidConfiguration instead of spinning forever.
"""

import logging
import random
from typing import Optional

from mazerace.core.types import (
    Grid, CellState, Pos, InvalidConfiguration, manhattan, min_separation,
)

logger = logging.getLogger(__name__)

MAX_END_ATTEMPTS = 10_000


def _farthest_corner(p: Pos, rows: int, cols: int) -> int:
    r, c = p
    return max(r, rows - 1 - r) + max(c, cols - 1 - c)


def generate_grid(rows: int, cols: int, density: int,
                  rng: Optional[random.Random] = None) -> Grid:
    if rows < 1 or cols < 1:
        logger.warning("rejected grid size %dx%d", rows, cols)
        raise InvalidConfiguration(f"grid must be at least 1x1, got {rows}x{cols}")
    if not 0 <= density <= 100:
        logger.warning("rejected wall density %r", density)
        raise InvalidConfiguration(f"wall density must be 0-100, got {density}")

    rng = rng or random.Random()
    # start != end is part of the contract even when the bound rounds to 0
    need = max(1, min_separation(rows, cols))
    if rows + cols - 2 < need:
        logger.warning("no start/end pair can be %d apart on %dx%d", need, rows, cols)
        raise InvalidConfiguration(
            f"{rows}x{cols} grid cannot separate start and end by {need} steps")

    cells = [CellState(is_wall=rng.random() * 100 < density) for _ in range(rows * cols)]

    start: Pos = (rng.randrange(rows), rng.randrange(cols))
    end: Optional[Pos] = None
    for _ in range(MAX_END_ATTEMPTS):
        if _farthest_corner(start, rows, cols) < need:
            # nothing on the board is far enough from this start
            start = (rng.randrange(rows), rng.randrange(cols))
            continue
        cand = (rng.randrange(rows), rng.randrange(cols))
        if manhattan(start, cand) >= need:
            end = cand
            break
    if end is None:
        logger.warning("gave up placing end after %d draws on %dx%d", MAX_END_ATTEMPTS, rows, cols)
        raise InvalidConfiguration(
            f"could not place end {need} steps from start after {MAX_END_ATTEMPTS} draws")

    grid = Grid(rows, cols, cells, start, end)
    grid.place_endpoints(start, end)
    logger.info("generated %dx%d maze, density=%d%%, walls=%d, start=%s, end=%s",
                rows, cols, density, grid.wall_count(), start, end)
    return grid
