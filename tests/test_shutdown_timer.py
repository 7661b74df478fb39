import threading

from src.reset_core import OneShotTimer, ThreadScheduler


def test_arm_schedules_once(scheduler, log):
    timer = OneShotTimer(scheduler, log)
    fired = []

    assert timer.arm(3, lambda: fired.append("first")) is True
    assert timer.arm(0, lambda: fired.append("second")) is False
    assert timer.armed and not timer.fired
    assert [delay for delay, _ in scheduler.calls] == [3.0]

    scheduler.run_all()
    assert fired == ["first"]
    assert timer.fired
    assert timer.delay == 3.0
    assert log.has("already armed")


def test_no_cancel_api(scheduler, log):
    timer = OneShotTimer(scheduler, log)
    assert not hasattr(timer, "cancel")


def test_thread_scheduler_fires():
    done = threading.Event()
    ThreadScheduler().call_later(0.05, done.set)
    assert done.wait(timeout=5)
