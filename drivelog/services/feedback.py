"""Display, notification and confirmation adapters."""
import logging
import threading
from collections import deque
from dataclasses import dataclass

logger = logging.getLogger(__name__)

STATUS_READY = "Ready to start"
STATUS_RUNNING = "Trip in progress..."
STATUS_FINISHED = "Trip finished - Add details below"

NOTIFICATION_KINDS = ("success", "error", "info", "warning")
_LOG_LEVELS = {"error": logging.ERROR, "warning": logging.WARNING}


class StatusBoard:
    """Latest timer text and status label, polled by the UI."""

    def __init__(self):
        self.elapsed = "00:00:00"
        self.status = STATUS_READY

    def show_elapsed(self, text: str) -> None:
        self.elapsed = text

    def show_status(self, label: str) -> None:
        self.status = label


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    kind: str


class NotificationFeed:
    """Logs each notification and keeps the most recent ones until the UI drains them."""

    def __init__(self, maxlen: int = 20):
        self._items: deque[Notification] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._next_id = 1

    def notify(self, message: str, kind: str = "info") -> None:
        if kind not in NOTIFICATION_KINDS:
            raise ValueError(f"Unknown notification kind: {kind}")
        logger.log(_LOG_LEVELS.get(kind, logging.INFO), "[%s] %s", kind, message)
        with self._lock:
            self._items.append(Notification(self._next_id, message, kind))
            self._next_id += 1

    def drain(self) -> list[Notification]:
        with self._lock:
            items = list(self._items)
            self._items.clear()
        return items


class AlwaysConfirm:
    """Confirmation gate with a fixed answer, for callers that already asked."""

    def __init__(self, answer: bool = True):
        self.answer = answer

    def confirm(self, message: str) -> bool:
        return self.answer
