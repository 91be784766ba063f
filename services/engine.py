# services/engine.py
"""
The pet simulation: timers, interactions, onboarding and the read-only
snapshot the front-end renders.

All mutation is serialized: it happens either in a user call or inside a
scheduler callback, and the scheduler runs callbacks one at a time on the
thread that drives it (Kivy's main loop, or the caller of
VirtualScheduler.advance). Nothing here is safe to call from other threads.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from models.evolution import EvolutionTracker
from models.pet import ACTIONS, PetProfile, PetStats, avatar_emoji, normalize_avatar, normalize_name
from models.secret import SecretSequenceDetector
from services.notifications import Notification, NotificationCenter
from services.persistence import Persistence
from services.rules import Rules
from services.scheduler import ScheduledTask, Scheduler
from services.store import StatStore

logger = logging.getLogger(__name__)

# action -> (stat it restores, animation cue, toast text)
INTERACTIONS: Dict[str, Tuple[str, str, str]] = {
    "feed": ("hunger", "bounce", "Your pet loved the food!"),
    "sleep": ("energy", "sleep", "Your pet had a nice nap!"),
    "play": ("happiness", "wiggle", "Your pet had fun playing!"),
}


@dataclass(frozen=True)
class PetSnapshot:
    """Everything the front-end needs to draw one frame."""
    stats: PetStats
    name: Optional[str]
    avatar: str
    emoji: str
    mood: str
    onboarding_required: bool
    evolution_state: str
    eligible_since: Optional[float]
    toast: Optional[str]
    animation: Optional[str]
    confetti: bool

    def can(self, action: str) -> bool:
        """True if the action would have an effect right now."""
        stat = INTERACTIONS[action][0]
        return not self.onboarding_required and getattr(self.stats, stat) < Rules.STAT_MAX


class PetEngine:
    """
    Drives decay, random rewards, evolution and the secret ritual on top of a
    StatStore, using an injected Scheduler for every timer.
    """

    def __init__(self, store: StatStore, scheduler: Scheduler, rng: Optional[random.Random] = None) -> None:
        self.store = store
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.notifications = NotificationCenter(scheduler, on_change=store.notify)
        self.evolution = EvolutionTracker(scheduler, on_evolve=self._evolve, evolved=store.get().evolved)
        self.secret = SecretSequenceDetector(scheduler, on_match=self._secret_bonus)
        self._decay_task: Optional[ScheduledTask] = None
        self._reward_task: Optional[ScheduledTask] = None
        self.onboarding_required = store.profile is None
        store.add_hook(self._after_update)
        if self.onboarding_required:
            logger.info("no saved pet; waiting for onboarding")
        else:
            self._start()

    @classmethod
    def from_persistence(
        cls, persistence: Persistence, scheduler: Scheduler, rng: Optional[random.Random] = None
    ) -> "PetEngine":
        """Load the saved pet (or defaults) and build an engine around it."""
        return cls(StatStore.load(persistence), scheduler, rng=rng)

    # --- Presentation boundary ---
    def snapshot(self) -> PetSnapshot:
        stats = self.store.get()
        profile = self.store.profile
        avatar = self.store.selected_avatar
        toast = self.notifications.current("toast")
        anim = self.notifications.current("animation")
        return PetSnapshot(
            stats=stats,
            name=profile.name if profile else None,
            avatar=avatar,
            emoji=avatar_emoji(avatar, stats.evolved),
            mood=stats.mood,
            onboarding_required=self.onboarding_required,
            evolution_state=self.evolution.state,
            eligible_since=self.evolution.eligible_since,
            toast=toast.message if toast else None,
            animation=anim.message if anim else None,
            confetti=self.notifications.current("confetti") is not None,
        )

    def subscribe(self, cb: Callable[[], None]) -> Callable[[], None]:
        """Call cb after every state change; returns an unsubscribe function."""
        self.store.add_observer(cb)
        return lambda: self.store.remove_observer(cb)

    def on_notification(self, cb: Callable[[Notification], None]) -> None:
        self.notifications.add_listener(cb)

    @property
    def running(self) -> bool:
        return self._decay_task is not None

    # --- User actions ---
    def feed(self) -> bool:
        return self._interact("feed")

    def sleep(self) -> bool:
        return self._interact("sleep")

    def play(self) -> bool:
        return self._interact("play")

    def act(self, action: str) -> bool:
        """Dispatch one of ACTIONS by name."""
        if action not in ACTIONS:
            raise ValueError(f"unknown action: {action!r}")
        return self._interact(action)

    def select_avatar(self, avatar: object) -> str:
        return self.store.select_avatar(avatar)

    def complete_onboarding(self, name: object, avatar: object = None) -> bool:
        """
        Name the pet and start the simulation.

        The name is trimmed and cut to 16 characters; a blank name is refused
        (returns False, nothing changes), as is a call outside onboarding.
        Unknown avatars become the default.
        """
        if not self.onboarding_required:
            return False
        clean = normalize_name(name)
        if clean is None:
            return False
        chosen = normalize_avatar(self.store.selected_avatar if avatar is None else avatar)
        self.store.set_profile(PetProfile(name=clean, avatar=chosen))
        self.onboarding_required = False
        logger.info("onboarding complete: %s the %s", clean, chosen)
        # Writing the avatar into the stats also re-runs the evolution check.
        self.store.update(lambda s: replace(s, avatar=chosen))
        self._start()
        return True

    def begin_onboarding(self) -> None:
        """Re-open onboarding (Settings); suspends every simulation timer."""
        if self.onboarding_required:
            return
        self.onboarding_required = True
        self._stop()
        self.evolution.reset()
        self.secret.reset()
        logger.info("onboarding reopened; simulation paused")
        self.store.notify()

    def shutdown(self) -> None:
        """Cancel all timers and flush the stats once more."""
        self._stop()
        self.evolution.reset()
        self.secret.reset()
        self.notifications.clear_all()
        if self.store.persistence is not None:
            self.store.persistence.save_stats(self.store.get())

    # --- Internals ---
    def _interact(self, action: str) -> bool:
        stat, anim, message = INTERACTIONS[action]
        if self.onboarding_required:
            return False
        if getattr(self.store.get(), stat) >= Rules.STAT_MAX:
            return False
        self.store.update(lambda s: s.with_delta(stat, Rules.ACTION_BOOST))
        self.notifications.animation(anim)
        self.notifications.toast(message)
        self.secret.record(action)
        return True

    def _start(self) -> None:
        if self._decay_task is None:
            self._decay_task = self.scheduler.schedule_interval(self._decay_tick, Rules.DECAY_INTERVAL_S)
        if self._reward_task is None:
            self._reward_task = self.scheduler.schedule_interval(self._reward_tick, Rules.REWARD_INTERVAL_S)
        logger.info("simulation timers started")
        self.evolution.evaluate(self.store.get())

    def _stop(self) -> None:
        for task in (self._decay_task, self._reward_task):
            if task is not None:
                task.cancel()
        self._decay_task = None
        self._reward_task = None
        logger.info("simulation timers stopped")

    def _decay_tick(self) -> None:
        stats = self.store.update(lambda s: s.with_all(-Rules.DECAY_AMOUNT))
        logger.debug("decay -> %s", stats.to_dict())

    def _reward_tick(self) -> None:
        event = self.rng.choice(Rules.REWARD_EVENTS)
        self.store.update(lambda s: s.with_delta(event.stat, event.delta))
        logger.debug("reward %s +%d", event.stat, event.delta)
        self.notifications.toast(event.message)

    def _after_update(self, stats: PetStats) -> None:
        if not self.onboarding_required:
            self.evolution.evaluate(stats)

    def _evolve(self) -> None:
        self.store.update(lambda s: replace(s, evolved=True))
        self.notifications.evolved()

    def _secret_bonus(self) -> None:
        self.store.update(lambda s: s.with_all(Rules.SECRET_BONUS))
        self.notifications.secret_found()
        self.notifications.confetti()
        logger.info("secret ritual discovered")
