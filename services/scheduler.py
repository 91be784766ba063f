# services/scheduler.py
"""
Timer service used by the simulation.

The engine never touches wall-clock time directly: it asks a Scheduler for
``now()`` and registers callbacks through ``schedule_once`` and
``schedule_interval``. Two implementations exist:

- VirtualScheduler (here): a deterministic clock advanced explicitly, used by
  tests and the headless runner.
- KivyScheduler (services/kivy_clock.py): backed by Kivy's main-loop Clock.

Callbacks receive no arguments.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class ScheduledTask:
    """Handle to a pending callback. cancel() is idempotent."""

    def cancel(self) -> None:
        raise NotImplementedError

    @property
    def active(self) -> bool:
        raise NotImplementedError


class Scheduler:
    """Interface shared by the virtual and Kivy-backed clocks."""

    def now(self) -> float:
        raise NotImplementedError

    def schedule_once(self, callback: Callback, delay: float) -> ScheduledTask:
        raise NotImplementedError

    def schedule_interval(self, callback: Callback, interval: float) -> ScheduledTask:
        raise NotImplementedError


class _VirtualTask(ScheduledTask):
    def __init__(self, callback: Callback, due: float, interval: Optional[float]) -> None:
        self.callback = callback
        self.due = due
        self.interval = interval
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        if self.cancelled:
            return False
        return self.interval is not None or not self.fired


class VirtualScheduler(Scheduler):
    """
    Deterministic scheduler driven by advance().

    Due tasks fire in due-time order; ties fire in the order they were
    scheduled. The clock reads each task's due time while its callback runs,
    so callbacks that schedule follow-ups see the right ``now()``.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, _VirtualTask]] = []

    def now(self) -> float:
        return self._now

    def _push(self, task: _VirtualTask) -> None:
        heapq.heappush(self._queue, (task.due, next(self._seq), task))

    def schedule_once(self, callback: Callback, delay: float) -> ScheduledTask:
        if delay < 0:
            raise ValueError("delay must be >= 0.")
        task = _VirtualTask(callback, self._now + delay, None)
        self._push(task)
        return task

    def schedule_interval(self, callback: Callback, interval: float) -> ScheduledTask:
        if interval <= 0:
            raise ValueError("interval must be > 0.")
        task = _VirtualTask(callback, self._now + interval, interval)
        self._push(task)
        return task

    def pending(self) -> int:
        """Number of tasks that can still fire."""
        return sum(1 for _, _, t in self._queue if t.active)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every task that falls due."""
        if seconds < 0:
            raise ValueError("seconds must be >= 0.")
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._now = due
            if task.interval is not None:
                task.due = due + task.interval
                self._push(task)
            else:
                task.fired = True
            task.callback()
        self._now = target

    def advance_to(self, timestamp: float) -> None:
        self.advance(max(0.0, timestamp - self._now))
