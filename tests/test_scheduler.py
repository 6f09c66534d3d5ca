import pytest

from tetris_autoplay.game import Scheduler


def test_repeating_task_fires_on_each_interval():
    scheduler = Scheduler()
    calls = []
    scheduler.call_every(100, lambda: calls.append(scheduler.now))
    scheduler.advance(350)
    assert calls == [100, 200, 300]
    assert scheduler.now == 350


def test_one_shot_task_fires_once():
    scheduler = Scheduler()
    calls = []
    task = scheduler.call_later(50, lambda: calls.append("x"))
    scheduler.advance(500)
    assert calls == ["x"]
    assert not task.active


def test_cancelled_task_never_fires():
    scheduler = Scheduler()
    calls = []
    task = scheduler.call_every(10, lambda: calls.append(1))
    task.cancel()
    scheduler.advance(100)
    assert calls == []


def test_task_can_cancel_itself():
    scheduler = Scheduler()
    calls = []

    def tick():
        calls.append(scheduler.now)
        if len(calls) == 2:
            task.cancel()

    task = scheduler.call_every(10, tick)
    scheduler.advance(100)
    assert calls == [10, 20]


def test_due_order_then_creation_order():
    scheduler = Scheduler()
    order = []
    scheduler.call_later(20, lambda: order.append("b"))
    scheduler.call_later(10, lambda: order.append("a"))
    scheduler.call_later(20, lambda: order.append("c"))
    scheduler.advance(20)
    assert order == ["a", "b", "c"]


def test_task_scheduled_during_advance_runs_if_due():
    scheduler = Scheduler()
    calls = []
    scheduler.call_later(10, lambda: scheduler.call_later(5, lambda: calls.append(scheduler.now)))
    scheduler.advance(20)
    assert calls == [15]


def test_cancel_all_and_pending():
    scheduler = Scheduler()
    scheduler.call_every(10, lambda: None)
    scheduler.call_later(10, lambda: None)
    assert len(scheduler.pending()) == 2
    scheduler.cancel_all()
    assert scheduler.pending() == []
    assert scheduler.advance(100) == 0


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        Scheduler().call_every(0, lambda: None)
