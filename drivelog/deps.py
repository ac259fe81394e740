"""Wires the trip session used by the web UI."""
import tempfile
import threading
from pathlib import Path
from typing import Optional

from drivelog.config import Settings, settings
from drivelog.services.delivery import DirectoryDelivery, FallbackDelivery
from drivelog.services.feedback import NotificationFeed, StatusBoard
from drivelog.services.log_store import LogStore
from drivelog.services.mail import BrowserMailComposer
from drivelog.services.session import TripSession
from drivelog.services.storage import build_blob_store
from drivelog.services.timer import Timer

_session: Optional[TripSession] = None
_session_lock = threading.Lock()


def create_session(config: Settings) -> TripSession:
    board = StatusBoard()
    feed = NotificationFeed()
    store = LogStore(build_blob_store(config), notifier=feed)
    store.load()
    return TripSession(
        store,
        timer=Timer(display=board, tick_ms=config.timer_tick_ms),
        display=board,
        notifier=feed,
        delivery=FallbackDelivery(
            DirectoryDelivery(Path(config.export_dir)),
            DirectoryDelivery(Path(tempfile.gettempdir()) / "drivelog-exports"),
        ),
        composer=BrowserMailComposer(),
    )


def get_session() -> TripSession:
    global _session
    with _session_lock:
        if _session is None:
            _session = create_session(settings)
    return _session
