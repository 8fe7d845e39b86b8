"""Cooperative timers for the race.

Everything time-driven in a race (countdown stages, computer ticks) goes
through ``after``/``cancel`` on one of these objects. ``TkScheduler`` hands
callbacks to the tkinter event loop; ``VirtualClock`` keeps them in a queue
that is stepped explicitly, which is how the tests and headless runs drive a
race without sleeping.
"""
import heapq
from typing import Any, Callable, Dict, List, Tuple


class VirtualClock:
    """Scheduler with a manually advanced clock, in milliseconds."""

    def __init__(self) -> None:
        self.now = 0
        self._seq = 0
        self._queue: List[Tuple[int, int]] = []
        self._callbacks: Dict[int, Callable[[], Any]] = {}

    def after(self, delay_ms: int, callback: Callable[[], Any]) -> int:
        if delay_ms < 0:
            raise ValueError(f"delay must be non-negative, got {delay_ms}")
        self._seq += 1
        handle = self._seq
        self._callbacks[handle] = callback
        heapq.heappush(self._queue, (self.now + delay_ms, handle))
        return handle

    def cancel(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def advance(self, ms: int) -> int:
        """Move time forward by ``ms``, firing due callbacks in order.

        Callbacks scheduled while advancing fire in the same call when they
        fall due before the target time. Returns how many callbacks ran.
        """
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, handle = heapq.heappop(self._queue)
            callback = self._callbacks.pop(handle, None)
            if callback is None:
                continue  # cancelled
            self.now = due
            callback()
            fired += 1
        self.now = target
        return fired

    def run_until_idle(self, limit_ms: int = 3_600_000) -> int:
        """Advance until nothing is pending, bounded by ``limit_ms``."""
        fired = 0
        start = self.now
        while self._callbacks and self.now - start < limit_ms:
            next_due = min(due for due, handle in self._queue if handle in self._callbacks)
            fired += self.advance(next_due - self.now)
        return fired


class TkScheduler:
    """Scheduler backed by a tkinter widget's ``after`` queue."""

    def __init__(self, root) -> None:
        self.root = root

    def after(self, delay_ms: int, callback: Callable[[], Any]) -> str:
        return self.root.after(delay_ms, callback)

    def cancel(self, handle: str) -> None:
        if not handle:
            return
        try:
            self.root.after_cancel(handle)
        except ValueError:
            pass
