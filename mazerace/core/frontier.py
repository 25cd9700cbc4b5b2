# mazerace/core/frontier.py
#!/usr/bin/env python3
"""
Frontier = discovered-but-unprocessed cells.

One container, two disciplines:
- FIFO (queue) -> breadth-first
- LIFO (stack) -> depth-first

Both track the largest size they ever reached (peak), which the stats
report as the memory-usage proxy.
"""

from collections import deque
from typing import Deque

from mazerace.core.types import Pos, Algorithm

FIFO = "fifo"
LIFO = "lifo"


class Frontier:
    def __init__(self, discipline: str = FIFO):
        if discipline not in (FIFO, LIFO):
            raise ValueError(f"unknown frontier discipline: {discipline!r}")
        self.discipline = discipline
        self._items: Deque[Pos] = deque()
        self.peak = 0

    def push(self, p: Pos) -> None:
        self._items.append(p)

    def pop(self) -> Pos:
        # peak is sampled right before each pop
        self.peak = max(self.peak, len(self._items))
        if self.discipline == FIFO:
            return self._items.popleft()
        return self._items.pop()

    def clear(self) -> None:
        self._items.clear()
        self.peak = 0

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


def frontier_for(algorithm: Algorithm) -> Frontier:
    return Frontier(FIFO if algorithm is Algorithm.BFS else LIFO)
