"""
Host-side cooperative timer.

The physics core never owns a clock. Delayed work (swing latency,
deformation snap-back, target highlight reset) is handed to whatever
scheduler the host runs; ``FrameScheduler`` is the frame-stepped one used
for headless runs and tests.
"""

import heapq
import itertools
from typing import Callable, List, Protocol, Tuple


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> float:
        ...


class FrameScheduler:
    """Runs callbacks in due order when the host advances time"""

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> float:
        due = self.now + max(0.0, delay)
        heapq.heappush(self._queue, (due, next(self._counter), callback))
        return due

    def advance(self, dt: float) -> int:
        """Move the clock forward and fire everything that became due. Returns the number fired."""
        target = self.now + max(0.0, dt)
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
            fired += 1
        self.now = target
        return fired

    def pending(self) -> int:
        return len(self._queue)
