# services/store.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

from models.pet import DEFAULT_AVATAR, PetProfile, PetStats, normalize_avatar
from services.persistence import Persistence

logger = logging.getLogger(__name__)

Transform = Callable[[PetStats], PetStats]


@dataclass
class StatStore:
    """
    Sole owner of the pet's stats and profile.

    Every stat change goes through update(), which clamps the result, keeps
    the evolved flag one-way, writes it through to persistence, then runs the
    post-update hooks (evolution re-evaluation) and the observers (the UI).
    """
    persistence: Optional[Persistence] = None
    _stats: PetStats = field(default_factory=PetStats)
    _profile: Optional[PetProfile] = None
    _pending_avatar: str = DEFAULT_AVATAR
    _observers: List[Callable[[], None]] = field(default_factory=list, repr=False)
    _hooks: List[Callable[[PetStats], None]] = field(default_factory=list, repr=False)

    @classmethod
    def load(cls, persistence: Persistence) -> "StatStore":
        """Build a store from the three persisted values, defaulting each one."""
        store = cls(persistence=persistence)
        store._stats = persistence.load_stats()
        store._pending_avatar = persistence.load_avatar()
        name = persistence.load_name()
        if name is not None:
            store._profile = PetProfile(name=name, avatar=store._pending_avatar)
        logger.info(
            "loaded pet name=%r avatar=%s stats=%s",
            name, store._pending_avatar, store._stats.to_dict(),
        )
        return store

    # --- Observers ---
    def add_observer(self, cb: Callable[[], None]) -> None:
        """Register a no-arg callback invoked after successful mutations."""
        if cb not in self._observers:
            self._observers.append(cb)

    def remove_observer(self, cb: Callable[[], None]) -> None:
        if cb in self._observers:
            self._observers.remove(cb)

    def add_hook(self, cb: Callable[[PetStats], None]) -> None:
        """Register a callback that sees the new stats after every update."""
        if cb not in self._hooks:
            self._hooks.append(cb)

    def notify(self) -> None:
        """Invoke all registered observers; a failing one is logged and skipped."""
        for cb in list(self._observers):
            try:
                cb()
            except Exception:
                logger.exception("store observer failed")

    # --- Queries ---
    def get(self) -> PetStats:
        return self._stats

    @property
    def profile(self) -> Optional[PetProfile]:
        return self._profile

    @property
    def selected_avatar(self) -> str:
        """Avatar currently picked in onboarding (or the profile's)."""
        return self._pending_avatar

    # --- Mutations ---
    def update(self, fn: Transform) -> PetStats:
        """
        Apply a pure transform to the stats.

        Out-of-range numbers are clamped rather than rejected, and a transform
        can set evolved but never clear it.
        """
        before = self._stats
        after = fn(before).clamped()
        if before.evolved and not after.evolved:
            after = replace(after, evolved=True)
        self._stats = after
        if self.persistence is not None:
            self.persistence.save_stats(after)
        for hook in list(self._hooks):
            hook(after)
        self.notify()
        return after

    def select_avatar(self, avatar: object) -> str:
        """Record the avatar choice; the profile follows immediately if it exists."""
        self._pending_avatar = normalize_avatar(avatar)
        if self._profile is not None:
            self._profile = replace(self._profile, avatar=self._pending_avatar)
        if self.persistence is not None:
            self.persistence.save_avatar(self._pending_avatar)
        self.notify()
        return self._pending_avatar

    def set_profile(self, profile: PetProfile) -> None:
        """Store a new onboarding profile and persist name and avatar."""
        self._profile = profile
        self._pending_avatar = profile.avatar
        if self.persistence is not None:
            self.persistence.save_name(profile.name)
            self.persistence.save_avatar(profile.avatar)
        self.notify()
