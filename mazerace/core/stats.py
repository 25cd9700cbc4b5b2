# mazerace/core/stats.py
#!/usr/bin/env python3
"""
Per-algorithm run statistics.

One RunStats slot per algorithm. Recording a BFS run never touches the DFS
slot (and vice versa); only reset() clears them, so "run both" leaves both
result sets side by side.
"""

import logging
import time
from typing import Callable, Dict, List, Optional

from mazerace.core.types import Algorithm, RunStats

logger = logging.getLogger(__name__)

STATUS_READY = "Ready"
STATUS_RUNNING = "Running..."
STATUS_FOUND = "Path Found!"
STATUS_NO_PATH = "No Path"

CHART_SERIES = (
    ("time", "Execution Time (ms)"),
    ("memory", "Memory Usage (nodes)"),
    ("path_len", "Path Length"),
    ("visited", "Nodes Visited"),
)


class RunTimer:
    """Wall-clock stopwatch in milliseconds (clock is injectable for tests)."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self._t0: Optional[float] = None
        self._t1: Optional[float] = None

    def start(self) -> None:
        self._t0 = self._clock()
        self._t1 = None

    def stop(self) -> int:
        self._t1 = self._clock()
        return self.elapsed_ms()

    def elapsed_ms(self) -> int:
        if self._t0 is None:
            return 0
        t1 = self._t1 if self._t1 is not None else self._clock()
        return int(round((t1 - self._t0) * 1000))


class StatsCollector:
    def __init__(self):
        self._slots: Dict[Algorithm, RunStats] = {}
        self._status: Dict[Algorithm, str] = {}
        self.reset()

    def reset(self) -> None:
        for algo in Algorithm:
            self._slots[algo] = RunStats()
            self._status[algo] = STATUS_READY

    def get(self, algo: Algorithm) -> RunStats:
        return self._slots[algo]

    def status(self, algo: Algorithm) -> str:
        return self._status[algo]

    def mark_running(self, algo: Algorithm) -> None:
        self._status[algo] = STATUS_RUNNING

    def record(self, algo: Algorithm, *, elapsed_ms: int, visited: int,
               path_length: int, peak_frontier: int) -> RunStats:
        stats = RunStats(
            elapsed_time_ms=elapsed_ms,
            visited_count=visited,
            path_length=path_length,
            peak_frontier_size=peak_frontier,
        )
        self._slots[algo] = stats
        self._status[algo] = STATUS_FOUND if path_length > 0 else STATUS_NO_PATH
        logger.info("%s: %s (%s)", algo.label, self._status[algo], stats.as_dict())
        return stats

    def chart_series(self) -> List[Dict[str, object]]:
        """[{key, label, values: [bfs, dfs]}] for the bar-chart renderer."""
        out = []
        for key, label in CHART_SERIES:
            values = [self._slots[a].as_dict()[key] for a in (Algorithm.BFS, Algorithm.DFS)]
            out.append({"key": key, "label": label, "values": values})
        return out

    def display_rows(self, algo: Algorithm) -> List[str]:
        s = self._slots[algo]
        return [
            f"Time: {s.elapsed_time_ms}ms" if s.elapsed_time_ms else "Time: -",
            f"Visited: {s.visited_count or '-'}",
            f"Path Len: {s.path_length or '-'}",
            f"Memory: {s.peak_frontier_size} nodes" if s.peak_frontier_size else "Memory: -",
            f"Status: {self._status[algo]}",
        ]
