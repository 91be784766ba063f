# models/evolution.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from models.pet import PetStats
from services.rules import Rules
from services.scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

INELIGIBLE = "ineligible"
ELIGIBLE = "eligible"
EVOLVED = "evolved"


class EvolutionTracker:
    """
    Promotes the pet once all needs stay high for a continuous stretch.

    States:
        ineligible: some stat is at or below the threshold.
        eligible: all stats above the threshold since ``eligible_since``;
            a one-shot timer is armed for EVOLUTION_TIME_S from that moment.
        evolved: terminal; no further evaluation.

    Dropping below the threshold cancels the timer and loses all progress.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_evolve: Callable[[], None],
        evolved: bool = False,
        threshold: int = Rules.EVOLUTION_THRESHOLD,
        duration_s: float = Rules.EVOLUTION_TIME_S,
    ) -> None:
        self._scheduler = scheduler
        self._on_evolve = on_evolve
        self.threshold = threshold
        self.duration_s = duration_s
        self.state = EVOLVED if evolved else INELIGIBLE
        self.eligible_since: Optional[float] = None
        self._timer: Optional[ScheduledTask] = None

    @property
    def is_evolved(self) -> bool:
        return self.state == EVOLVED

    def evaluate(self, stats: PetStats) -> None:
        """Re-check eligibility after a stat change."""
        if self.state == EVOLVED:
            return
        if stats.evolved:
            self._disarm()
            self.state = EVOLVED
            return
        qualifies = stats.all_above(self.threshold)
        if qualifies and self.state == INELIGIBLE:
            self.state = ELIGIBLE
            self.eligible_since = self._scheduler.now()
            self._timer = self._scheduler.schedule_once(self._fire, self.duration_s)
            logger.info("evolution countdown started at t=%.1f", self.eligible_since)
        elif not qualifies and self.state == ELIGIBLE:
            logger.info("evolution countdown lost after %.1fs", self._scheduler.now() - self.eligible_since)
            self.reset()

    def reset(self) -> None:
        """Drop any countdown and return to ineligible (unless evolved)."""
        self._disarm()
        if self.state != EVOLVED:
            self.state = INELIGIBLE

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.eligible_since = None

    def _fire(self) -> None:
        self._timer = None
        if self.state != ELIGIBLE:
            return
        self.state = EVOLVED
        self.eligible_since = None
        logger.info("pet evolved")
        self._on_evolve()
