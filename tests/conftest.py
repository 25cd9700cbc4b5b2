"""
Shared fixtures for the maze race tests.

Grids here are handcrafted so expectations can be worked out by hand;
random grids always come from a seeded random.Random.
"""

import random

import pytest

from mazerace.config import Settings
from mazerace.core.session import Session
from mazerace.core.types import Grid


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, isolated core tests")
    config.addinivalue_line("markers", "integration: session-level runs across components")


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def open_grid():
    """3x3, no walls, start top-left, end bottom-right."""
    return Grid.from_walls([[0, 0, 0]] * 3, start=(0, 0), end=(2, 2))


@pytest.fixture
def split_grid():
    """5x5 with row 2 fully walled: start's side holds 10 cells, end is cut off."""
    walls = [
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
        [1, 1, 1, 1, 1],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
    ]
    return Grid.from_walls(walls, start=(0, 0), end=(4, 4))


@pytest.fixture
def session(rng):
    return Session(Settings(grid_size=15, obstacle_density_percent=25, animation_speed_ms=0), rng=rng)


def flood_size(grid, origin):
    """Cells reachable from origin through open 4-neighbors."""
    seen = {origin}
    todo = [origin]
    while todo:
        p = todo.pop()
        for n in grid.neighbors4(p):
            if n not in seen:
                seen.add(n)
                todo.append(n)
    return len(seen)


@pytest.fixture
def flood():
    return flood_size
