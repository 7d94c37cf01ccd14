"""Virtual-time scheduler with cancellable timer handles.

Nothing here reads a wall clock. The owner feeds elapsed milliseconds into
``Scheduler.advance`` (the pygame loop passes ``clock.tick`` deltas, tests pass
whatever they like) and every timer whose deadline falls inside that window
fires in deadline order, ties broken by scheduling order.
"""
from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """Returned by ``call_later``/``call_every``; ``cancel()`` guarantees no further calls."""

    def __init__(self, when: float, callback: Callable[[], None], interval: Optional[float] = None):
        self.when = when
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled

    def __repr__(self):
        state = "cancelled" if self.cancelled else f"at {self.when:.1f}ms"
        return f"<TimerHandle {state} every={self.interval}>"


class Scheduler:
    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def _push(self, handle: TimerHandle) -> TimerHandle:
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        return self._push(TimerHandle(self.now + max(delay_ms, 0.0), callback))

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Fire ``callback`` every ``interval_ms``, first call one interval from now."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        return self._push(TimerHandle(self.now + interval_ms, callback, interval_ms))

    def advance(self, dt_ms: float):
        target = self.now + dt_ms
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            if handle.interval is not None:
                handle.when = when + handle.interval
                self._push(handle)
            else:
                handle.cancelled = True
            handle.callback()
        self.now = target

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)
