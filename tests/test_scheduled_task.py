"""Tests for the deferred snapshot timer"""

from PyQt6.QtTest import QTest

from quality_master.markup.scheduled_task import ScheduledTask


def test_arm_runs_once_after_interval():
    calls = []
    task = ScheduledTask(20, lambda: calls.append(1))
    task.arm()
    assert task.is_pending
    QTest.qWait(100)
    assert calls == [1]
    assert not task.is_pending


def test_repeated_arm_does_not_queue_extra_runs():
    calls = []
    task = ScheduledTask(30, lambda: calls.append(1))
    for _ in range(5):
        task.arm()
    QTest.qWait(120)
    assert calls == [1]


def test_cancel_drops_pending_run():
    calls = []
    task = ScheduledTask(20, lambda: calls.append(1))
    task.arm()
    task.cancel()
    QTest.qWait(80)
    assert calls == []


def test_flush_runs_now_and_clears_pending():
    calls = []
    task = ScheduledTask(10_000, lambda: calls.append(1))
    task.arm()
    task.flush()
    assert calls == [1]
    assert not task.is_pending
    QTest.qWait(30)
    assert calls == [1]
