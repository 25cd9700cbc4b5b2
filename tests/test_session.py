import copy
import gc
import logging

import pytest

from mazerace.config import Settings
from mazerace.core.scheduler import COMPLETE, CLEAR, PAUSE, VISIT
from mazerace.core.session import Session
from mazerace.core.stats import STATUS_NO_PATH, STATUS_READY
from mazerace.core.types import Algorithm, InvalidConfiguration, RunState, RunStats, min_separation, manhattan

pytestmark = pytest.mark.integration


@pytest.fixture
def open_session(session, open_grid):
    session.use_grid(open_grid)
    return session


def test_generate_uses_settings(session):
    grid = session.generate()
    assert (grid.rows, grid.cols) == (15, 15)
    assert manhattan(grid.start, grid.end) >= min_separation(15, 15)
    assert session.grid is grid


def test_generate_with_explicit_dimensions(session):
    grid = session.generate(6, 9, 0)
    assert (grid.rows, grid.cols) == (6, 9)
    assert grid.wall_count() == 0


def test_run_requires_a_grid(session):
    with pytest.raises(InvalidConfiguration):
        session.start_run(Algorithm.BFS)
    assert not session.is_running


def test_scenario_open_grid_bfs(open_session):
    visits, steps, done = [], [], []
    stats = open_session.run(Algorithm.BFS, visits.append, steps.append, done.append, sleep=None)
    assert stats.path_length == 5
    assert stats.visited_count <= 9
    assert len(visits) == 7
    assert steps == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
    assert done == [stats]
    assert open_session.last_outcome is RunState.SUCCEEDED
    assert open_session.state is RunState.IDLE


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_scenario_walled_off_end(session, split_grid, algorithm):
    session.use_grid(split_grid)
    stats = session.run(algorithm, sleep=None)
    assert stats.path_length == 0
    assert stats.visited_count == 10
    assert session.stats.status(algorithm) == STATUS_NO_PATH
    assert session.last_outcome is RunState.FAILED


def test_scenario_request_during_active_run_is_ignored(open_session):
    events = open_session.start_run(Algorithm.BFS)
    first = next(events)
    assert first.kind == VISIT
    assert open_session.is_running
    assert open_session.state is RunState.RUNNING

    grid_before = open_session.grid
    assert open_session.start_run(Algorithm.DFS) is None
    assert open_session.start_run_both() is None
    assert open_session.run(Algorithm.DFS, sleep=None) is None
    assert open_session.reset() is False
    assert open_session.generate() is None
    assert open_session.grid is grid_before
    assert open_session.stats.get(Algorithm.DFS) == RunStats()

    rest = list(events)
    assert rest[-1].kind == COMPLETE
    assert open_session.stats.get(Algorithm.BFS).visited_count == 9
    assert open_session.stats.get(Algorithm.DFS) == RunStats()
    assert not open_session.is_running


def test_scenario_run_both_keeps_bfs_stats(open_session):
    completed, cleared = [], []
    bfs, dfs = open_session.run_both(on_complete=completed.append,
                                     on_clear=lambda: cleared.append(True), sleep=None)
    assert [s.path_length for s in completed] == [5, 5]
    assert bfs == completed[0]
    assert dfs == completed[1]
    assert open_session.stats.get(Algorithm.BFS) == completed[0]
    assert bfs.visited_count == 9 and dfs.visited_count == 5
    assert cleared == [True]


def test_run_both_stream_order(open_session):
    kinds = [e.kind for e in open_session.start_run_both(step_delay_ms=0)]
    first_complete = kinds.index(COMPLETE)
    assert kinds[first_complete + 1:first_complete + 3] == [PAUSE, CLEAR]
    assert kinds.count(COMPLETE) == 2
    assert not open_session.is_running


def test_run_both_pause_uses_settings(open_grid, rng):
    s = Session(Settings(animation_speed_ms=0, run_both_pause_ms=750), rng=rng)
    s.use_grid(open_grid)
    pauses = [e.delay_ms for e in s.start_run_both() if e.kind == PAUSE]
    assert pauses == [750]


def test_run_paces_with_sleep(open_session):
    slept = []
    open_session.run(Algorithm.BFS, step_delay_ms=10, sleep=slept.append)
    assert slept == [pytest.approx(0.01)] * 7 + [pytest.approx(0.015)] * 5


def test_running_other_algorithm_keeps_first_stats(open_session):
    bfs = open_session.run(Algorithm.BFS, sleep=None)
    open_session.run(Algorithm.DFS, sleep=None)
    assert open_session.stats.get(Algorithm.BFS) == bfs


def test_reset_is_idempotent(open_session):
    open_session.run(Algorithm.DFS, sleep=None)
    assert open_session.reset()
    once = copy.deepcopy(open_session.grid)
    assert open_session.reset()
    assert open_session.grid == once
    assert all(not c.visited and c.parent is None for c in open_session.grid.cells)
    assert open_session.stats.get(Algorithm.DFS) == RunStats()
    assert open_session.stats.status(Algorithm.DFS) == STATUS_READY


def test_reset_keeps_layout(open_session):
    layout = [(c.is_wall, c.is_start, c.is_end) for c in open_session.grid.cells]
    open_session.run(Algorithm.BFS, sleep=None)
    open_session.reset()
    assert [(c.is_wall, c.is_start, c.is_end) for c in open_session.grid.cells] == layout


def test_generate_clears_stats(open_session):
    open_session.run(Algorithm.BFS, sleep=None)
    open_session.generate()
    assert open_session.stats.get(Algorithm.BFS) == RunStats()
    assert open_session.last_outcome is None


def test_invalid_settings_rejected():
    with pytest.raises(InvalidConfiguration):
        Session(Settings(grid_size=3))


def test_dropping_unstarted_stream_frees_session(open_session):
    events = open_session.start_run(Algorithm.BFS)
    assert open_session.is_running
    del events
    gc.collect()
    assert not open_session.is_running
    assert open_session.state is RunState.IDLE
    assert open_session.reset()


def test_closing_stream_midway_frees_session(open_session):
    events = open_session.start_run_both()
    next(events)
    events.close()
    assert not open_session.is_running
    assert list(events) == []
    assert open_session.run(Algorithm.DFS, sleep=None).path_length == 5


def test_failing_sink_frees_session(open_session):
    def boom(_cell):
        raise RuntimeError("renderer died")

    with pytest.raises(RuntimeError):
        open_session.run(Algorithm.BFS, on_visit=boom, sleep=None)
    assert not open_session.is_running
    assert open_session.reset()


def test_run_without_grid_is_logged(session, caplog):
    with caplog.at_level(logging.WARNING, logger="mazerace.core.session"):
        with pytest.raises(InvalidConfiguration):
            session.start_run_both()
    assert "before any maze was generated" in caplog.text
