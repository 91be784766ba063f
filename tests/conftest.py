"""Pytest configuration and fixtures for pet simulation tests."""

import os
import random

import pytest

# Keep Kivy (only imported by the clock adapter test) away from argv and the console.
os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")
os.environ.setdefault("KIVY_NO_FILELOG", "1")


@pytest.fixture
def scheduler():
    from services.scheduler import VirtualScheduler

    return VirtualScheduler()


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def persistence(tmp_path):
    from services.persistence import Persistence

    return Persistence(str(tmp_path / "save"))


@pytest.fixture
def make_engine(scheduler, seeded_rng):
    """Factory for engines; pass stats/name to start from a given state."""
    from services.engine import PetEngine
    from services.store import StatStore
    from models.pet import PetProfile, PetStats

    def _make(stats=None, name="Rex", avatar="dog", persistence=None):
        store = StatStore(persistence=persistence)
        if stats is not None:
            store._stats = stats if isinstance(stats, PetStats) else PetStats(**stats)
        if name is not None:
            store._profile = PetProfile(name=name, avatar=avatar)
            store._pending_avatar = avatar
        return PetEngine(store, scheduler, rng=seeded_rng)

    return _make


@pytest.fixture
def notes():
    """Collects notifications; attach with engine.on_notification(notes.append)."""
    return []
