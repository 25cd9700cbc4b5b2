# mazerace/core/scheduler.py
#!/usr/bin/env python3
"""
Animation scheduling for one traversal run.

run_events() turns a TraversalAlgo into a stream of RunEvents. Each event
carries the delay the consumer should wait *after* handling it:

    VISIT       one per popped cell that is neither start nor end   (speed)
    PATH_FOUND  carries the reconstructed path                      (0)
    PATH_STEP   one per path cell, start..end                       (speed * 1.5)
    NO_PATH     frontier exhausted                                  (0)
    COMPLETE    carries the recorded RunStats                       (0)

The stream is timing-free; the consumer decides how to wait:
- AnimationScheduler.tick(now) for a frame loop (the pygame viewer)
- drive(events, ..., sleep=time.sleep) for a blocking run
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

from mazerace.core.stats import RunTimer, StatsCollector
from mazerace.core.traversal import TraversalAlgo
from mazerace.core.types import Algorithm, Grid, Pos, RunStats

VISIT = "visit"
PATH_FOUND = "path_found"
PATH_STEP = "path_step"
NO_PATH = "no_path"
COMPLETE = "complete"
PAUSE = "pause"
CLEAR = "clear"

PATH_DELAY_FACTOR = 1.5


@dataclass
class RunEvent:
    kind: str
    algorithm: Optional[Algorithm] = None
    cell: Optional[Pos] = None
    path: List[Pos] = field(default_factory=list)
    stats: Optional[RunStats] = None
    delay_ms: float = 0.0


def run_events(grid: Grid, algorithm: Algorithm, collector: StatsCollector,
               step_delay_ms: float = 0, *,
               path_delay_factor: float = PATH_DELAY_FACTOR,
               timer: Optional[RunTimer] = None) -> Iterator[RunEvent]:
    timer = timer or RunTimer()
    algo = TraversalAlgo(algorithm)
    collector.mark_running(algorithm)
    timer.start()
    algo.init(grid)

    for res in algo.events():
        if res.status == "running":
            cs = grid.cell(res.current)
            if not (cs.is_start or cs.is_end):
                yield RunEvent(VISIT, algorithm, cell=res.current, delay_ms=step_delay_ms)
            continue

        m = res.metrics
        path = res.path or []
        stats = collector.record(
            algorithm,
            elapsed_ms=timer.stop(),
            visited=m.get("visited", 0),
            path_length=len(path),
            peak_frontier=m.get("peak_frontier", 0),
        )
        if res.status == "done" and path:
            yield RunEvent(PATH_FOUND, algorithm, path=list(path), stats=stats)
            step_ms = step_delay_ms * path_delay_factor
            for p in path:
                yield RunEvent(PATH_STEP, algorithm, cell=p, delay_ms=step_ms)
        else:
            yield RunEvent(NO_PATH, algorithm, stats=stats)
        yield RunEvent(COMPLETE, algorithm, path=list(path), stats=stats)


class AnimationScheduler:
    """Time-sliced pump for a RunEvent stream, driven by a frame loop."""

    def __init__(self, events: Iterator[RunEvent], clock: Callable[[], float] = time.monotonic):
        self._events = events
        self._clock = clock
        self._due = 0.0  # seconds, on self._clock
        self.finished = False

    def tick(self, now: Optional[float] = None) -> List[RunEvent]:
        """Pull every event that is due; zero-delay events go out together."""
        if now is None:
            now = self._clock()
        out: List[RunEvent] = []
        while not self.finished and now >= self._due:
            ev = next(self._events, None)
            if ev is None:
                self.finished = True
                break
            out.append(ev)
            self._due = now + ev.delay_ms / 1000.0
        return out


def drive(events: Iterator[RunEvent], on_event: Callable[[RunEvent], None],
          sleep: Optional[Callable[[float], None]] = time.sleep) -> None:
    """Blocking consumer. sleep=None replays without waiting."""
    for ev in events:
        on_event(ev)
        if sleep is not None and ev.delay_ms > 0:
            sleep(ev.delay_ms / 1000.0)
