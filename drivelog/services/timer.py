"""Elapsed-time tracking for a trip in progress."""
import logging
import threading
import time
from typing import Callable, Optional, Protocol

from drivelog.ports import DisplaySink

logger = logging.getLogger(__name__)


def format_elapsed(ms: float) -> str:
    """Render milliseconds as HH:MM:SS. Hours are not wrapped at 24 or 99."""
    total_seconds = max(int(ms // 1000), 0)
    hours, rem = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def parse_elapsed(value: str) -> int:
    """Parse HH:MM:SS back into seconds."""
    parts = value.strip().split(":")
    if len(parts) != 3:
        raise ValueError(f"Expected HH:MM:SS, got {value!r}")
    hours, minutes, seconds = (int(p) for p in parts)
    if hours < 0 or not (0 <= minutes < 60 and 0 <= seconds < 60):
        raise ValueError(f"Expected HH:MM:SS, got {value!r}")
    return hours * 3600 + minutes * 60 + seconds


def monotonic_ms() -> float:
    return time.monotonic() * 1000


class ScheduledTask(Protocol):
    def cancel(self) -> None:
        ...


class RepeatingTask:
    """Calls ``callback`` every ``period_ms`` on a daemon thread until cancelled."""

    def __init__(self, period_ms: int, callback: Callable[[], None]):
        self.period_ms = period_ms
        self.callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name="drivelog-timer", daemon=True)

    def start(self) -> "RepeatingTask":
        self._thread.start()
        return self

    def _run(self):
        interval = self.period_ms / 1000
        while not self._stopped.wait(interval):
            try:
                self.callback()
            except Exception:
                logger.exception("Timer tick failed")

    def cancel(self) -> None:
        """Stop ticking. Returns only once the worker thread has exited."""
        self._stopped.set()
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join()


class ThreadScheduler:
    def every(self, period_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        return RepeatingTask(period_ms, callback).start()


class Timer:
    """Start/stop stopwatch that pushes HH:MM:SS strings to a display sink.

    Elapsed time is always recomputed from the absolute start epoch, so a
    late or skipped tick never makes the timer drift. Starting again after a
    stop resumes from the accumulated elapsed time.
    """

    def __init__(
        self,
        display: Optional[DisplaySink] = None,
        scheduler=None,
        clock: Callable[[], float] = monotonic_ms,
        tick_ms: int = 100,
    ):
        self.display = display
        self.scheduler = scheduler or ThreadScheduler()
        self.clock = clock
        self.tick_ms = tick_ms

        self._lock = threading.Lock()
        self._running = False
        self._start_epoch: Optional[float] = None
        self._elapsed_ms = 0.0
        self._task: Optional[ScheduledTask] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def start_epoch(self) -> Optional[float]:
        return self._start_epoch

    @property
    def elapsed_ms(self) -> float:
        return self._elapsed_ms

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._start_epoch = self.clock() - self._elapsed_ms
            self._task = self.scheduler.every(self.tick_ms, self._tick)

    def _tick(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._elapsed_ms = self.clock() - self._start_epoch
            self._show()

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._elapsed_ms = self.clock() - self._start_epoch
            task, self._task = self._task, None
            self._show()
        # Cancel outside the lock: a tick blocked on it must be able to finish
        task.cancel()

    def reset(self) -> None:
        with self._lock:
            self._elapsed_ms = 0.0
            self._start_epoch = self.clock() if self._running else None
            self._show()

    def _show(self) -> None:
        if self.display is not None:
            self.display.show_elapsed(format_elapsed(self._elapsed_ms))
