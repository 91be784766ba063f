"""
Unit tests for StatStore: clamping, the one-way evolved flag, observers,
hooks and write-through persistence.
"""

from dataclasses import replace

from models.pet import PetProfile, PetStats
from services.store import StatStore


def test_update_clamps_every_stat():
    store = StatStore()
    out = store.update(lambda s: replace(s, hunger=500, energy=-20, happiness=77))
    assert (out.hunger, out.energy, out.happiness) == (100, 0, 77)
    assert store.get() == out


def test_evolved_cannot_be_cleared():
    store = StatStore()
    store.update(lambda s: replace(s, evolved=True))
    store.update(lambda s: replace(s, evolved=False, hunger=10))
    assert store.get().evolved is True
    assert store.get().hunger == 10


def test_observers_run_after_update_and_failures_are_isolated():
    store = StatStore()
    calls = []

    def broken():
        raise RuntimeError("boom")

    store.add_observer(broken)
    store.add_observer(lambda: calls.append(store.get().hunger))
    store.update(lambda s: s.with_delta("hunger", -30))
    assert calls == [70]


def test_observer_registered_once_and_removable():
    store = StatStore()
    calls = []
    cb = lambda: calls.append(1)  # noqa: E731
    store.add_observer(cb)
    store.add_observer(cb)
    store.notify()
    store.remove_observer(cb)
    store.notify()
    assert calls == [1]


def test_hooks_see_new_stats_before_observers():
    store = StatStore()
    order = []
    store.add_hook(lambda stats: order.append(("hook", stats.energy)))
    store.add_observer(lambda: order.append(("observer", store.get().energy)))
    store.update(lambda s: s.with_delta("energy", -4))
    assert order == [("hook", 96), ("observer", 96)]


def test_update_writes_stats_through(persistence):
    store = StatStore(persistence=persistence)
    store.update(lambda s: s.with_all(-40))
    assert persistence.load_stats() == PetStats(hunger=60, energy=60, happiness=60)


def test_select_avatar_normalizes_and_persists(persistence):
    store = StatStore(persistence=persistence)
    assert store.select_avatar("turtle") == "turtle"
    assert persistence.read("petAvatar") == "turtle"
    assert store.select_avatar("dragon") == "dog"
    assert persistence.read("petAvatar") == "dog"


def test_select_avatar_updates_existing_profile():
    store = StatStore()
    store.set_profile(PetProfile("Rex", "dog"))
    store.select_avatar("bird")
    assert store.profile == PetProfile("Rex", "bird")


def test_set_profile_persists_name_and_avatar(persistence):
    store = StatStore(persistence=persistence)
    store.set_profile(PetProfile("Rex", "cat"))
    assert persistence.read("petName") == "Rex"
    assert persistence.read("petAvatar") == "cat"


def test_load_defaults_when_nothing_saved(persistence):
    store = StatStore.load(persistence)
    assert store.profile is None
    assert store.get() == PetStats()
    assert store.selected_avatar == "dog"


def test_load_each_value_independently(persistence):
    persistence.save_name("Mochi")
    persistence.write("petAvatar", "bird")
    with open(persistence.path_for("petStats"), "w", encoding="utf-8") as f:
        f.write("{not json")
    store = StatStore.load(persistence)
    assert store.profile == PetProfile("Mochi", "bird")
    assert store.get() == PetStats()
