# services/notifications.py
"""
One-shot events handed to the presentation layer.

Transient cues (toast, animation, confetti) also live in a "current" slot that
the snapshot exposes until a scheduled clear task empties it. Showing a new cue
in a slot cancels the old clear task, so a stale timer never hides a newer cue.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional

from services.rules import Rules
from services.scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

KINDS = ("toast", "animation", "confetti", "evolved", "secret_found")


@dataclass(frozen=True)
class Notification:
    """
    A one-shot event for the front-end.

    Fields:
        kind: One of KINDS.
        message: Toast text or animation name; empty for the other kinds.
        created_at: Scheduler time the event was raised.
        expires_at: When the matching cue is cleared; None if it stays until
            the user dismisses it.
    """
    kind: str
    message: str = ""
    created_at: float = 0.0
    expires_at: Optional[float] = None


class NotificationCenter:
    """Fan-out for notifications plus the current transient cues."""

    _DURATIONS: Dict[str, float] = {
        "toast": Rules.TOAST_S,
        "animation": Rules.ANIMATION_S,
        "confetti": Rules.CONFETTI_S,
    }

    def __init__(self, scheduler: Scheduler, on_change: Optional[Callable[[], None]] = None) -> None:
        self._scheduler = scheduler
        self._on_change = on_change
        self._listeners: List[Callable[[Notification], None]] = []
        self._current: Dict[str, Notification] = {}
        self._clear_tasks: Dict[str, ScheduledTask] = {}
        self.history: Deque[Notification] = deque(maxlen=100)

    def add_listener(self, cb: Callable[[Notification], None]) -> None:
        if cb not in self._listeners:
            self._listeners.append(cb)

    def current(self, kind: str) -> Optional[Notification]:
        """Return the live cue of a transient kind, if any."""
        return self._current.get(kind)

    # --- Emitters ---
    def toast(self, message: str) -> Notification:
        return self._emit("toast", message)

    def animation(self, name: str) -> Notification:
        return self._emit("animation", name)

    def confetti(self) -> Notification:
        return self._emit("confetti")

    def evolved(self) -> Notification:
        return self._emit("evolved")

    def secret_found(self) -> Notification:
        return self._emit("secret_found")

    def clear_all(self) -> None:
        """Drop every live cue and cancel their clear timers."""
        for task in self._clear_tasks.values():
            task.cancel()
        self._clear_tasks.clear()
        self._current.clear()

    # --- Internals ---
    def _emit(self, kind: str, message: str = "") -> Notification:
        now = self._scheduler.now()
        duration = self._DURATIONS.get(kind)
        note = Notification(
            kind=kind,
            message=message,
            created_at=now,
            expires_at=None if duration is None else now + duration,
        )
        if duration is not None:
            old = self._clear_tasks.pop(kind, None)
            if old is not None:
                old.cancel()
            self._current[kind] = note
            self._clear_tasks[kind] = self._scheduler.schedule_once(
                lambda: self._expire(kind), duration
            )
        self.history.append(note)
        logger.debug("notification %s %r", kind, message)
        for cb in list(self._listeners):
            try:
                cb(note)
            except Exception:
                logger.exception("notification listener failed")
        self._changed()
        return note

    def _expire(self, kind: str) -> None:
        self._clear_tasks.pop(kind, None)
        if self._current.pop(kind, None) is not None:
            self._changed()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
