import logging
import random

import pytest

from mazerace.core import generator
from mazerace.core.generator import generate_grid
from mazerace.core.types import InvalidConfiguration, manhattan, min_separation

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("size", [5, 8, 15, 30, 50])
def test_endpoint_invariants_hold(size):
    for seed in range(40):
        grid = generate_grid(size, size, 40, rng=random.Random(seed))
        assert grid.start != grid.end
        assert not grid.is_wall(grid.start)
        assert not grid.is_wall(grid.end)
        assert manhattan(grid.start, grid.end) >= min_separation(size, size)


def test_exactly_one_start_and_end(rng):
    grid = generate_grid(12, 9, 30, rng=rng)
    starts = [p for p in grid.positions() if grid.cell(p).is_start]
    ends = [p for p in grid.positions() if grid.cell(p).is_end]
    assert starts == [grid.start]
    assert ends == [grid.end]
    assert (grid.rows, grid.cols) == (12, 9)


def test_fresh_grid_has_clean_run_state(rng):
    grid = generate_grid(10, 10, 50, rng=rng)
    assert all(not c.visited and c.parent is None for c in grid.cells)


def test_zero_density_has_no_walls(rng):
    grid = generate_grid(10, 10, 0, rng=rng)
    assert grid.wall_count() == 0


def test_full_density_leaves_only_endpoints_open(rng):
    grid = generate_grid(10, 10, 100, rng=rng)
    assert grid.wall_count() == 100 - 2


def test_same_seed_same_maze():
    a = generate_grid(15, 15, 30, rng=random.Random(7))
    b = generate_grid(15, 15, 30, rng=random.Random(7))
    assert a.cells == b.cells
    assert (a.start, a.end) == (b.start, b.end)


@pytest.mark.parametrize("rows,cols,density", [(0, 5, 10), (5, -1, 10), (5, 5, -1), (5, 5, 101)])
def test_rejects_bad_arguments(rows, cols, density):
    with pytest.raises(InvalidConfiguration):
        generate_grid(rows, cols, density)


def test_single_cell_grid_is_invalid():
    with pytest.raises(InvalidConfiguration):
        generate_grid(1, 1, 0)


def test_tiny_but_feasible_grid_terminates(rng):
    grid = generate_grid(1, 2, 0, rng=rng)
    assert {grid.start, grid.end} == {(0, 0), (0, 1)}


class _StuckRandom:
    """Always draws the same cell, so no end candidate is ever far enough."""

    def random(self):
        return 0.99

    def randrange(self, n):
        return 0


def test_end_sampling_is_bounded(monkeypatch):
    monkeypatch.setattr(generator, "MAX_END_ATTEMPTS", 50)
    with pytest.raises(InvalidConfiguration):
        generate_grid(5, 5, 0, rng=_StuckRandom())


def test_rejected_density_is_logged(rng, caplog):
    with caplog.at_level(logging.WARNING, logger="mazerace.core.generator"):
        with pytest.raises(InvalidConfiguration):
            generate_grid(5, 5, 101, rng=rng)
    assert "rejected wall density" in caplog.text
