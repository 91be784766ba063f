"""
Smoke tests for the Kivy Clock adapter (no window or main loop needed).
"""

import pytest

pytest.importorskip("kivy.clock")

from services.kivy_clock import KivyScheduler  # noqa: E402


def test_once_task_is_pending_until_cancelled():
    sched = KivyScheduler()
    task = sched.schedule_once(lambda: None, 5)
    assert task.active is True
    task.cancel()
    assert task.active is False


def test_interval_task_cancel():
    sched = KivyScheduler(time_scale=10)
    task = sched.schedule_interval(lambda: None, 10)
    assert task.active is True
    task.cancel()
    assert task.active is False


def test_now_is_scaled_float():
    assert isinstance(KivyScheduler(time_scale=2).now(), float)


def test_rejects_bad_arguments():
    with pytest.raises(ValueError):
        KivyScheduler(time_scale=0)
    with pytest.raises(ValueError):
        KivyScheduler().schedule_once(lambda: None, -1)
    with pytest.raises(ValueError):
        KivyScheduler().schedule_interval(lambda: None, 0)
