# services/kivy_clock.py
"""Scheduler backed by Kivy's main-loop Clock (callbacks run on the UI thread)."""

from __future__ import annotations

from kivy.clock import Clock

from services.scheduler import Callback, ScheduledTask, Scheduler


class _KivyTask(ScheduledTask):
    def __init__(self, event) -> None:
        self._event = event

    def cancel(self) -> None:
        self._event.cancel()

    @property
    def active(self) -> bool:
        return bool(self._event.is_triggered)


class KivyScheduler(Scheduler):
    """
    Adapter from the Scheduler interface to kivy.clock.Clock.

    time_scale > 1 makes simulated time run faster than real time: delays are
    divided by it and now() is multiplied by it.
    """

    def __init__(self, time_scale: float = 1.0) -> None:
        if time_scale <= 0:
            raise ValueError("time_scale must be > 0.")
        self.time_scale = float(time_scale)

    def now(self) -> float:
        return Clock.get_boottime() * self.time_scale

    def schedule_once(self, callback: Callback, delay: float) -> ScheduledTask:
        if delay < 0:
            raise ValueError("delay must be >= 0.")
        event = Clock.schedule_once(lambda _dt: callback(), delay / self.time_scale)
        return _KivyTask(event)

    def schedule_interval(self, callback: Callback, interval: float) -> ScheduledTask:
        if interval <= 0:
            raise ValueError("interval must be > 0.")
        event = Clock.schedule_interval(lambda _dt: callback(), interval / self.time_scale)
        return _KivyTask(event)
