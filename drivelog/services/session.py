"""Trip capture: timer, details form and commit into the log."""
import datetime as dt
import enum
import logging
import math
from dataclasses import dataclass, field, fields
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from drivelog.errors import DeliveryError, EmptyCollectionError, SessionStateError, ValidationError
from drivelog.ports import ConfirmationGate, DisplaySink, FileDelivery, MailComposer, Notifier
from drivelog.schemas.trip import AggregateStats, DayNight, RoadType, TripRecord
from drivelog.services import export
from drivelog.services.feedback import STATUS_FINISHED, STATUS_READY, STATUS_RUNNING
from drivelog.services.log_store import LogStore
from drivelog.services.timer import Timer

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000

# TripRecord field (or alias) -> form field
_RECORD_TO_FORM = {
    "date": "date",
    "road_type": "road_type",
    "roadType": "road_type",
    "day_night": "day_night",
    "dayNight": "day_night",
    "driver_name": "driver_name",
    "driverName": "driver_name",
    "total_distance": "distance",
    "totalDistance": "distance",
    "total_duration": "duration",
    "totalDuration": "duration",
    "avg_speed": "avg_speed",
    "avgSpeed": "avg_speed",
}


class Phase(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PENDING_DETAILS = "pending_details"


@dataclass
class TripForm:
    """Details form, holding the text exactly as typed."""

    date: str = ""
    road_type: str = ""
    day_night: str = ""
    vin: str = ""
    driver_name: str = ""
    driver_license: str = ""
    country: str = ""
    city: str = ""
    distance: str = ""
    duration: str = ""
    avg_speed: str = ""


FORM_FIELDS = tuple(f.name for f in fields(TripForm))


@dataclass
class AppState:
    phase: Phase = Phase.IDLE
    form: TripForm = field(default_factory=TripForm)
    form_visible: bool = False
    errors: dict[str, str] = field(default_factory=dict)
    stats: AggregateStats = field(default_factory=AggregateStats)


def parse_number(text: str) -> Optional[float]:
    """Parse user input as a finite float, None if it is not a number."""
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


class TripSession:
    """Drives a trip from the first tap on Start to the committed log entry.

    Phases go IDLE -> RUNNING -> PENDING_DETAILS -> IDLE. Starting again from
    PENDING_DETAILS resumes the timer where it stopped.
    """

    def __init__(
        self,
        store: LogStore,
        timer: Optional[Timer] = None,
        display: Optional[DisplaySink] = None,
        notifier: Optional[Notifier] = None,
        delivery: Optional[FileDelivery] = None,
        composer: Optional[MailComposer] = None,
        today: Callable[[], dt.date] = dt.date.today,
    ):
        self.store = store
        self.display = display
        self.timer = timer or Timer(display=display)
        self.notifier = notifier
        self.delivery = delivery
        self.composer = composer
        self.today = today

        self.state = AppState(form=self._blank_form(), stats=store.stats)
        store.subscribe(self._on_stats)
        self._show_status(STATUS_READY)

    @property
    def phase(self) -> Phase:
        return self.state.phase

    # --- timer ---
    def toggle(self) -> None:
        if self.state.phase is Phase.RUNNING:
            self.stop()
        else:
            self.start()

    def start(self) -> None:
        if self.state.phase is Phase.RUNNING:
            return
        self.timer.start()
        self.state.phase = Phase.RUNNING
        self.state.form_visible = False
        self._show_status(STATUS_RUNNING)

    def stop(self) -> None:
        if self.state.phase is not Phase.RUNNING:
            return
        self.timer.stop()
        hours = self.timer.elapsed_ms / MS_PER_HOUR
        self.state.form.duration = f"{hours:.2f}"
        self._update_avg_speed()
        self.state.phase = Phase.PENDING_DETAILS
        self.state.form_visible = True
        self._show_status(STATUS_FINISHED)

    # --- form ---
    def set_field(self, name: str, value: str) -> None:
        if name not in FORM_FIELDS:
            raise KeyError(name)
        setattr(self.state.form, name, "" if value is None else str(value))
        self.state.errors.pop(name, None)
        if name in ("distance", "duration") and self.state.phase is Phase.PENDING_DETAILS:
            self._update_avg_speed()

    def _update_avg_speed(self) -> None:
        distance = parse_number(self.state.form.distance) or 0.0
        duration = parse_number(self.state.form.duration) or 0.0
        if duration > 0:
            self.state.form.avg_speed = f"{distance / duration:.1f}"

    def submit(self) -> TripRecord:
        """Validate the form and commit it as a new log entry.

        Raises ValidationError with per-field messages when the form is
        incomplete; nothing is stored in that case.
        """
        if self.state.phase is not Phase.PENDING_DETAILS:
            raise SessionStateError("Finish a trip before submitting its details")

        record = self._build_record(self.state.form)
        self.store.add(record)

        self.timer.reset()
        self.state = AppState(form=self._blank_form(), stats=self.store.stats)
        self._show_status(STATUS_READY)
        self._notify("Log entry added successfully!", "success")
        return record

    def discard(self) -> None:
        if self.state.phase is not Phase.PENDING_DETAILS:
            return
        self.timer.reset()
        self.state = AppState(form=self._blank_form(), stats=self.store.stats)
        self._show_status(STATUS_READY)

    def _build_record(self, form: TripForm) -> TripRecord:
        errors: dict[str, str] = {}

        trip_date = None
        if not form.date.strip():
            errors["date"] = "Date is required"
        else:
            try:
                trip_date = dt.date.fromisoformat(form.date.strip())
            except ValueError:
                errors["date"] = "Enter a date as YYYY-MM-DD"

        if not form.driver_name.strip():
            errors["driver_name"] = "Driver name is required"

        road_type = day_night = None
        try:
            road_type = RoadType(form.road_type.strip().lower())
        except ValueError:
            errors["road_type"] = "Choose a road type"
        try:
            day_night = DayNight(form.day_night.strip().lower())
        except ValueError:
            errors["day_night"] = "Choose day or night"

        distance = parse_number(form.distance)
        if distance is None:
            errors["distance"] = "Distance must be a number"
        elif distance < 0:
            errors["distance"] = "Distance cannot be negative"

        duration = parse_number(form.duration)
        if duration is None:
            errors["duration"] = "Duration must be a number"
        elif duration < 0:
            errors["duration"] = "Duration cannot be negative"

        avg_speed = None
        if form.avg_speed.strip():
            avg_speed = parse_number(form.avg_speed)
            if avg_speed is None:
                errors["avg_speed"] = "Average speed must be a number"
            elif avg_speed < 0:
                errors["avg_speed"] = "Average speed cannot be negative"
        elif distance is not None and duration is not None and duration > 0:
            avg_speed = distance / duration
        else:
            avg_speed = 0.0

        if errors:
            self.state.errors = errors
            raise ValidationError(errors)

        try:
            return TripRecord(
                date=trip_date,
                road_type=road_type,
                day_night=day_night,
                vin=form.vin,
                driver_name=form.driver_name,
                driver_license=form.driver_license,
                country=form.country,
                city=form.city,
                total_distance=distance,
                total_duration=duration,
                avg_speed=avg_speed,
            )
        except PydanticValidationError as e:
            for error in e.errors():
                loc = str(error["loc"][0]) if error["loc"] else "form"
                errors[_RECORD_TO_FORM.get(loc, loc)] = error["msg"]
            self.state.errors = errors
            raise ValidationError(errors) from e

    def _blank_form(self) -> TripForm:
        return TripForm(date=self.today().isoformat())

    # --- log operations ---
    def delete_trip(self, record_id: str, gate: Optional[ConfirmationGate] = None) -> bool:
        if not self.store.delete(record_id, gate=gate):
            return False
        self._notify("Log entry deleted", "success")
        return True

    def export_csv(self, delivery: Optional[FileDelivery] = None) -> bool:
        return self._export(export.to_csv, export.CSV_FILENAME, export.CSV_MIME_TYPE, delivery)

    def export_json(self, delivery: Optional[FileDelivery] = None) -> bool:
        return self._export(export.to_json, export.JSON_FILENAME, export.JSON_MIME_TYPE, delivery)

    def _export(self, encode, filename: str, mime_type: str, delivery: Optional[FileDelivery]) -> bool:
        delivery = delivery or self.delivery
        if delivery is None:
            raise ValueError("No file delivery configured")
        try:
            content = encode(self.store.all())
        except EmptyCollectionError as e:
            self._notify(str(e), "error")
            return False

        try:
            where = delivery.deliver(content, filename, mime_type)
        except DeliveryError as e:
            logger.warning("Export of %s failed: %s", filename, e)
            self._notify(f"Could not save {filename}", "error")
            return False

        logger.info("Exported %d trip(s) to %s", len(self.store), where)
        self._notify(f"Saved {filename}", "success")
        return True

    def email_logs(
        self,
        recipient: str,
        subject: str,
        message: str = "",
        composer: Optional[MailComposer] = None,
    ) -> bool:
        composer = composer or self.composer
        if composer is None:
            raise ValueError("No mail composer configured")
        if not recipient or not recipient.strip():
            self._notify("Please enter recipient email", "error")
            return False
        try:
            body = export.to_email_summary(self.store.all(), self.store.stats, message)
        except EmptyCollectionError as e:
            self._notify(str(e), "error")
            return False

        composer.compose(recipient, subject, body)
        self._notify("Opening email client...", "success")
        return True

    # --- sinks ---
    def _on_stats(self, stats: AggregateStats) -> None:
        self.state.stats = stats

    def _show_status(self, label: str) -> None:
        if self.display is not None:
            self.display.show_status(label)

    def _notify(self, message: str, kind: str) -> None:
        if self.notifier is not None:
            self.notifier.notify(message, kind)
