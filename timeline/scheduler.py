# timeline/scheduler.py
import heapq
import itertools
import logging
from typing import Callable, List, Tuple


class Timer:
    """Handle returned by Scheduler.call_later; cancel() drops the callback."""
    __slots__ = ("due", "fn", "cancelled")

    def __init__(self, due: float, fn: Callable[[], None]):
        self.due = due
        self.fn = fn
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class Scheduler:
    """Deferred callbacks driven by the main loop clock.
    App calls step(dt) once per frame; nothing runs on another thread.
    """
    def __init__(self):
        self.time = 0.0
        self._seq = itertools.count()
        self._heap: List[Tuple[float, int, Timer]] = []  # (due, seq, timer)

    def call_later(self, delay: float, fn: Callable[[], None]) -> Timer:
        t = Timer(self.time + max(0.0, delay), fn)
        heapq.heappush(self._heap, (t.due, next(self._seq), t))
        return t

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def step(self, dt: float) -> int:
        self.time += dt
        fired = 0
        # 只處理本次 step 前已排入的到期項目；回呼內新排的留待下一次
        due_now = []
        while self._heap and self._heap[0][0] <= self.time:
            due_now.append(heapq.heappop(self._heap)[2])
        for t in due_now:
            if t.cancelled:
                continue
            try:
                t.fn()
                fired += 1
            except Exception:
                logging.exception("Scheduled callback failed: %r", t.fn)
        return fired

    def clear(self):
        for _, _, t in self._heap:
            t.cancel()
        self._heap.clear()
