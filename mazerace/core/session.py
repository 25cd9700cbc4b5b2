# mazerace/core/session.py
#!/usr/bin/env python3
"""
One maze + both algorithms' stats + the run-active guard.

Everything the UI does goes through a Session:
    generate()         new grid, stats cleared
    reset()            grid run-state and stats cleared
    start_run(algo)    RunEvent stream for one algorithm
    start_run_both()   BFS, pause, clear, DFS as a single stream
    run()/run_both()   blocking versions with callbacks

While a run stream is open every entry point above is rejected: it returns
None/False and changes nothing. A stream closes when it runs out, on close(),
or when it is dropped unread.
"""

import logging
import random
import time
from typing import Callable, Iterator, Optional, Tuple

from mazerace.config import Settings
from mazerace.core.generator import generate_grid
from mazerace.core.scheduler import (
    RunEvent, run_events, drive, VISIT, PATH_STEP, COMPLETE, PAUSE, CLEAR,
)
from mazerace.core.stats import RunTimer, StatsCollector
from mazerace.core.types import Algorithm, Grid, InvalidConfiguration, RunState, RunStats, Pos

logger = logging.getLogger(__name__)

Sink = Optional[Callable[[Pos], None]]


class ActiveRun:
    """
    Event stream holding the session's run guard.

    The guard is released once: when the stream runs out, when a consumer
    error escapes next(), on close(), or when the stream is dropped unread.
    """

    def __init__(self, session: "Session", events: Iterator[RunEvent]):
        self._session = session
        self._events = events
        self._open = True

    def __iter__(self) -> "ActiveRun":
        return self

    def __next__(self) -> RunEvent:
        if not self._open:
            raise StopIteration
        try:
            return next(self._events)
        except Exception:
            # StopIteration included
            self.close()
            raise

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        self._events.close()
        self._session._release()

    def __del__(self):
        self.close()


class Session:
    def __init__(self, settings: Optional[Settings] = None, *,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self.settings = (settings or Settings()).validate()
        self.rng = rng or random.Random()
        self.clock = clock
        self.grid: Optional[Grid] = None
        self.stats = StatsCollector()
        self.state = RunState.IDLE
        self.last_outcome: Optional[RunState] = None
        self._active = False

    @property
    def is_running(self) -> bool:
        return self._active

    def _reject(self, what: str) -> None:
        logger.debug("%s ignored: a run is active", what)

    # -------------------- grid lifecycle --------------------

    def generate(self, rows: Optional[int] = None, cols: Optional[int] = None,
                 density: Optional[int] = None) -> Optional[Grid]:
        if self._active:
            self._reject("generate")
            return None
        rows = self.settings.rows if rows is None else rows
        cols = self.settings.cols if cols is None else cols
        density = self.settings.obstacle_density_percent if density is None else density
        self.grid = generate_grid(rows, cols, density, rng=self.rng)
        self.stats.reset()
        self.state = RunState.IDLE
        self.last_outcome = None
        return self.grid

    def use_grid(self, grid: Grid) -> bool:
        """Adopt a prebuilt grid (fixed layouts, tests)."""
        if self._active:
            self._reject("use_grid")
            return False
        grid.reset()
        self.grid = grid
        self.stats.reset()
        self.last_outcome = None
        return True

    def reset(self) -> bool:
        if self._active:
            self._reject("reset")
            return False
        if self.grid is not None:
            self.grid.reset()
        self.stats.reset()
        self.state = RunState.IDLE
        self.last_outcome = None
        return True

    # -------------------- runs --------------------

    def start_run(self, algorithm: Algorithm,
                  step_delay_ms: Optional[float] = None) -> Optional[ActiveRun]:
        """Claim the session and return the run's event stream."""
        if not self._claim("run"):
            return None
        delay = self._delay(step_delay_ms)
        return ActiveRun(self, self._single(algorithm, delay))

    def start_run_both(self, step_delay_ms: Optional[float] = None) -> Optional[ActiveRun]:
        if not self._claim("run_both"):
            return None
        delay = self._delay(step_delay_ms)
        return ActiveRun(self, self._both(delay))

    def run(self, algorithm: Algorithm, on_visit: Sink = None, on_path_step: Sink = None,
            on_complete: Optional[Callable[[RunStats], None]] = None,
            step_delay_ms: Optional[float] = None,
            sleep: Optional[Callable[[float], None]] = time.sleep) -> Optional[RunStats]:
        events = self.start_run(algorithm, step_delay_ms)
        if events is None:
            return None
        try:
            drive(events, self._dispatcher(on_visit, on_path_step, on_complete), sleep)
        finally:
            events.close()
        return self.stats.get(algorithm)

    def run_both(self, on_visit: Sink = None, on_path_step: Sink = None,
                 on_complete: Optional[Callable[[RunStats], None]] = None,
                 on_clear: Optional[Callable[[], None]] = None,
                 step_delay_ms: Optional[float] = None,
                 sleep: Optional[Callable[[float], None]] = time.sleep
                 ) -> Optional[Tuple[RunStats, RunStats]]:
        events = self.start_run_both(step_delay_ms)
        if events is None:
            return None
        try:
            drive(events, self._dispatcher(on_visit, on_path_step, on_complete, on_clear), sleep)
        finally:
            events.close()
        return self.stats.get(Algorithm.BFS), self.stats.get(Algorithm.DFS)

    # -------------------- internals --------------------

    def _claim(self, what: str) -> bool:
        if self._active:
            self._reject(what)
            return False
        if self.grid is None:
            logger.warning("%s requested before any maze was generated", what)
            raise InvalidConfiguration("generate a maze before running")
        self._active = True
        self.state = RunState.RUNNING
        return True

    def _delay(self, step_delay_ms: Optional[float]) -> float:
        return self.settings.animation_speed_ms if step_delay_ms is None else step_delay_ms

    def _release(self) -> None:
        self._active = False
        self.state = RunState.IDLE

    def _single(self, algorithm: Algorithm, delay: float) -> Iterator[RunEvent]:
        logger.info("%s run started on %dx%d", algorithm.label, self.grid.rows, self.grid.cols)
        for ev in run_events(self.grid, algorithm, self.stats, delay,
                             path_delay_factor=self.settings.path_delay_factor,
                             timer=RunTimer(self.clock)):
            if ev.kind == COMPLETE:
                found = ev.stats is not None and ev.stats.path_length > 0
                self.state = RunState.SUCCEEDED if found else RunState.FAILED
                self.last_outcome = self.state
            yield ev

    def _both(self, delay: float) -> Iterator[RunEvent]:
        yield from self._single(Algorithm.BFS, delay)
        yield RunEvent(PAUSE, delay_ms=self.settings.run_both_pause_ms)
        # visual + grid run-state only; BFS stats stay
        self.grid.reset()
        self.state = RunState.RUNNING
        yield RunEvent(CLEAR)
        yield from self._single(Algorithm.DFS, delay)

    @staticmethod
    def _dispatcher(on_visit: Sink, on_path_step: Sink,
                    on_complete: Optional[Callable[[RunStats], None]],
                    on_clear: Optional[Callable[[], None]] = None) -> Callable[[RunEvent], None]:
        def dispatch(ev: RunEvent) -> None:
            if ev.kind == VISIT and on_visit:
                on_visit(ev.cell)
            elif ev.kind == PATH_STEP and on_path_step:
                on_path_step(ev.cell)
            elif ev.kind == COMPLETE and on_complete:
                on_complete(ev.stats)
            elif ev.kind == CLEAR and on_clear:
                on_clear()
        return dispatch
