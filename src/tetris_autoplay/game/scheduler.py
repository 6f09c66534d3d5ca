"""Virtual-clock task scheduler.

Gravity, the line-clear animation, autoplay and key repeat each run as a
``ScheduledTask``. Whoever owns the scheduler (the pygame loop, the env or a
test) moves time forward with ``advance``; due tasks fire in due-time order,
ties in creation order.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Tuple


class ScheduledTask:
    def __init__(self, scheduler: "Scheduler", callback: Callable[[], None], due: float,
                 interval: Optional[float], name: str = "") -> None:
        self._scheduler = scheduler
        self.callback = callback
        self.due = due
        self.interval = interval
        self.name = name
        self.cancelled = False

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        kind = f"every {self.interval}ms" if self.interval is not None else "once"
        state = "cancelled" if self.cancelled else f"due {self.due}"
        return f"<ScheduledTask {self.name or self.callback!r} {kind} {state}>"


class Scheduler:
    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._counter = itertools.count()

    def _push(self, task: ScheduledTask) -> None:
        heapq.heappush(self._queue, (task.due, next(self._counter), task))

    def call_later(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        task = ScheduledTask(self, callback, self.now + delay_ms, None, name)
        self._push(task)
        return task

    def call_every(self, interval_ms: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        if interval_ms <= 0:
            raise ValueError(f"interval must be positive, got {interval_ms}")
        task = ScheduledTask(self, callback, self.now + interval_ms, interval_ms, name)
        self._push(task)
        return task

    def pending(self) -> List[ScheduledTask]:
        return [task for _, _, task in sorted(self._queue) if not task.cancelled]

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms`` and run every task that comes due.

        Returns the number of callbacks run.
        """
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self.now = due
            if task.interval is not None:
                task.due = due + task.interval
                self._push(task)
            else:
                task.cancelled = True
            task.callback()
            fired += 1
        self.now = target
        return fired

    def cancel_all(self) -> None:
        for _, _, task in self._queue:
            task.cancel()
        self._queue.clear()
