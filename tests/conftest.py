import datetime as dt

import pytest

from drivelog.schemas.trip import DayNight, RoadType, TripRecord
from drivelog.services.feedback import AlwaysConfirm
from drivelog.services.log_store import LogStore
from drivelog.services.session import TripSession
from drivelog.services.storage import MemoryBlobStore
from drivelog.services.timer import Timer


class ManualClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


class ManualTask:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    def __init__(self):
        self.tasks = []

    def every(self, period_ms, callback):
        task = ManualTask(callback)
        self.tasks.append(task)
        return task

    def fire(self):
        for task in self.tasks:
            if not task.cancelled:
                task.callback()

    @property
    def active(self):
        return [t for t in self.tasks if not t.cancelled]


class RecordingDisplay:
    def __init__(self):
        self.elapsed = []
        self.statuses = []

    def show_elapsed(self, text):
        self.elapsed.append(text)

    def show_status(self, label):
        self.statuses.append(label)


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, message, kind="info"):
        self.messages.append((message, kind))

    @property
    def kinds(self):
        return [kind for _, kind in self.messages]


class RecordingGate:
    def __init__(self, answer=True):
        self.answer = answer
        self.prompts = []

    def confirm(self, message):
        self.prompts.append(message)
        return self.answer


class CapturingDelivery:
    def __init__(self):
        self.files = []

    def deliver(self, content, filename, mime_type):
        self.files.append((content, filename, mime_type))
        return filename


class CapturingComposer:
    def __init__(self):
        self.emails = []

    def compose(self, recipient, subject, body):
        self.emails.append((recipient, subject, body))


def make_record(**overrides):
    values = dict(
        date=dt.date(2025, 3, 5),
        road_type=RoadType.HIGHWAY,
        day_night=DayNight.DAY,
        driver_name="Alex Rivera",
        total_distance=10.0,
        total_duration=1.0,
        avg_speed=10.0,
    )
    values.update(overrides)
    return TripRecord(**values)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def blob_store():
    return MemoryBlobStore()


@pytest.fixture
def store(blob_store, notifier):
    store = LogStore(blob_store, gate=AlwaysConfirm(), notifier=notifier)
    store.load()
    return store


@pytest.fixture
def timer(display, scheduler, clock):
    return Timer(display=display, scheduler=scheduler, clock=clock)


@pytest.fixture
def delivery():
    return CapturingDelivery()


@pytest.fixture
def composer():
    return CapturingComposer()


@pytest.fixture
def session(store, timer, display, notifier, delivery, composer):
    return TripSession(
        store,
        timer=timer,
        display=display,
        notifier=notifier,
        delivery=delivery,
        composer=composer,
        today=lambda: dt.date(2025, 3, 5),
    )
