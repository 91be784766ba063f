"""
Unit tests for the notification center.
"""

import pytest

from services.notifications import NotificationCenter


@pytest.fixture
def center(scheduler):
    return NotificationCenter(scheduler)


def test_transient_cue_has_expiry_and_clears(scheduler, center):
    note = center.toast("hello")
    assert note.kind == "toast"
    assert note.expires_at == pytest.approx(1.8)
    assert center.current("toast") == note
    scheduler.advance(1.8)
    assert center.current("toast") is None


def test_modal_events_have_no_expiry(center):
    assert center.evolved().expires_at is None
    assert center.secret_found().expires_at is None
    assert center.current("evolved") is None


def test_listener_failure_does_not_stop_others(center):
    seen = []

    def broken(_note):
        raise RuntimeError("boom")

    center.add_listener(broken)
    center.add_listener(seen.append)
    center.animation("wiggle")
    assert [n.message for n in seen] == ["wiggle"]


def test_on_change_fires_on_emit_and_expiry(scheduler):
    changes = []
    center = NotificationCenter(scheduler, on_change=lambda: changes.append(scheduler.now()))
    center.confetti()
    scheduler.advance(5)
    assert changes == [0.0, 3.5]


def test_clear_all(scheduler, center):
    center.toast("a")
    center.animation("bounce")
    center.clear_all()
    assert center.current("toast") is None
    assert center.current("animation") is None
    assert scheduler.pending() == 0


def test_history_is_bounded(center):
    for i in range(150):
        center.toast(str(i))
    assert len(center.history) == 100
    assert center.history[-1].message == "149"
