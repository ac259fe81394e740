import re
import threading
import time

import pytest

from drivelog.services.timer import RepeatingTask, Timer, format_elapsed, parse_elapsed


@pytest.mark.parametrize("ms, expected", [
    (0, "00:00:00"),
    (999, "00:00:00"),
    (1000, "00:00:01"),
    (61_500, "00:01:01"),
    (5_430_000, "01:30:30"),
    (100 * 3_600_000, "100:00:00"),
    (-5000, "00:00:00"),
])
def test_format_elapsed(ms, expected):
    assert format_elapsed(ms) == expected


@pytest.mark.parametrize("seconds", [0, 59, 60, 3599, 3600, 86_399, 360_000, 1_234_567])
def test_format_elapsed_parses_back_to_same_seconds(seconds):
    text = format_elapsed(seconds * 1000 + 250)
    assert re.fullmatch(r"\d{2,}:\d{2}:\d{2}", text)
    assert parse_elapsed(text) == seconds


def test_parse_elapsed_rejects_garbage():
    with pytest.raises(ValueError):
        parse_elapsed("1:2")
    with pytest.raises(ValueError):
        parse_elapsed("00:61:00")


def test_start_ticks_from_absolute_epoch(timer, scheduler, clock, display):
    timer.start()
    assert timer.running
    clock.advance(1500)
    scheduler.fire()
    clock.advance(1500)
    scheduler.fire()
    assert timer.elapsed_ms == 3000
    assert display.elapsed == ["00:00:01", "00:00:03"]


def test_start_twice_is_noop(timer, scheduler, clock):
    timer.start()
    epoch = timer.start_epoch
    clock.advance(500)
    timer.start()
    assert timer.start_epoch == epoch
    assert len(scheduler.tasks) == 1


def test_stop_cancels_ticks_and_keeps_elapsed(timer, scheduler, clock, display):
    timer.start()
    clock.advance(5_430_000)
    timer.stop()
    assert not timer.running
    assert scheduler.active == []
    assert timer.elapsed_ms == 5_430_000

    clock.advance(10_000)
    scheduler.fire()
    assert timer.elapsed_ms == 5_430_000
    assert display.elapsed[-1] == "01:30:30"


def test_stop_when_idle_is_noop(timer, display):
    timer.stop()
    assert timer.elapsed_ms == 0
    assert display.elapsed == []


def test_restart_resumes_accumulated_time(timer, clock):
    timer.start()
    clock.advance(2000)
    timer.stop()
    clock.advance(60_000)
    timer.start()
    clock.advance(1000)
    timer.stop()
    assert timer.elapsed_ms == 3000


def test_reset_zeroes_and_notifies(timer, clock, display):
    timer.start()
    clock.advance(4000)
    timer.stop()
    timer.reset()
    assert timer.elapsed_ms == 0
    assert display.elapsed[-1] == "00:00:00"


def test_repeating_task_stops_after_cancel():
    calls = []
    task = RepeatingTask(5, lambda: calls.append(1)).start()
    time.sleep(0.05)
    task.cancel()
    seen = len(calls)
    time.sleep(0.05)
    assert seen > 0
    assert len(calls) == seen


def test_real_scheduler_never_ticks_after_stop():
    ticks = []
    lock = threading.Lock()

    class Sink:
        def show_elapsed(self, text):
            with lock:
                ticks.append(text)

    timer = Timer(display=Sink(), tick_ms=1)
    timer.start()
    time.sleep(0.03)
    timer.stop()
    with lock:
        count = len(ticks)
    time.sleep(0.03)
    assert len(ticks) == count
