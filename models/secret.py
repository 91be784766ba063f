# models/secret.py
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional, Tuple

from services.rules import Rules
from services.scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionEvent:
    kind: str
    timestamp: float


class SecretSequenceDetector:
    """
    Watches user actions for a hidden ordered pattern.

    The first action after an idle period opens a window of ``window_s``
    seconds; when it closes the log is wiped whether or not anything matched.
    Each recorded action is appended and the tail of the log is compared with
    the pattern, so extra leading actions do not prevent a match. A match
    clears the log and closes the window, so it can fire only once per window.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_match: Callable[[], None],
        pattern: Tuple[str, ...] = Rules.SECRET_PATTERN,
        window_s: float = Rules.SECRET_WINDOW_S,
        capacity: int = 32,
    ) -> None:
        if not pattern:
            raise ValueError("pattern must not be empty.")
        self._scheduler = scheduler
        self._on_match = on_match
        self.pattern = tuple(pattern)
        self.window_s = window_s
        self.log: Deque[ActionEvent] = deque(maxlen=max(capacity, len(self.pattern)))
        self._window: Optional[ScheduledTask] = None
        self._window_opened_at: Optional[float] = None

    @property
    def window_open(self) -> bool:
        return self._window is not None

    def record(self, kind: str) -> bool:
        """Append an action; return True if it completed the pattern."""
        now = self._scheduler.now()
        if self._window is None:
            self.log.clear()
            self._window_opened_at = now
            self._window = self._scheduler.schedule_once(self._expire, self.window_s)
        # Second guard in case the clock jumped past a missed expiry.
        while self.log and now - self.log[0].timestamp > self.window_s:
            self.log.popleft()
        self.log.append(ActionEvent(kind, now))

        n = len(self.pattern)
        if len(self.log) < n:
            return False
        tail = tuple(e.kind for e in list(self.log)[-n:])
        if tail != self.pattern:
            return False

        logger.info("secret sequence matched %.1fs into window", now - (self._window_opened_at or now))
        self.reset()
        self._on_match()
        return True

    def reset(self) -> None:
        """Clear the log and close the window."""
        self.log.clear()
        if self._window is not None:
            self._window.cancel()
            self._window = None
        self._window_opened_at = None

    def _expire(self) -> None:
        self._window = None
        self._window_opened_at = None
        self.log.clear()
        logger.debug("secret window expired")
