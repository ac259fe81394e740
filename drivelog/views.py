"""Pure projection of the trip log into what the UI displays."""
import datetime as dt
from dataclasses import asdict, dataclass, field
from typing import Sequence

from drivelog.schemas.trip import AggregateStats, TripRecord

EMPTY_MESSAGE = "No drive logs yet. Add your first entry above."
EXPORT_NOTE = "Add a trip to enable export and email."


def format_date(value: dt.date) -> str:
    return f"{value:%b} {value.day}, {value.year}"


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


@dataclass(frozen=True)
class LogCard:
    id: str
    title: str
    date_label: str
    details: list[tuple[str, str]]


@dataclass(frozen=True)
class StatsView:
    total_distance: str
    total_duration: str
    avg_speed: str
    trip_count: str


@dataclass(frozen=True)
class LogView:
    stats: StatsView
    cards: list[LogCard] = field(default_factory=list)
    empty_message: str = ""
    exports_enabled: bool = False
    export_note: str = ""


def render_stats(stats: AggregateStats) -> StatsView:
    return StatsView(
        total_distance=f"{stats.total_distance:.1f} mi",
        total_duration=f"{stats.total_duration:.1f} hrs",
        avg_speed=f"{stats.avg_speed:.1f} mph",
        trip_count=str(stats.trip_count),
    )


def render_card(record: TripRecord) -> LogCard:
    details = [
        ("Distance", f"{record.total_distance:.1f} mi"),
        ("Duration", f"{record.total_duration:.2f} hrs"),
        ("Avg Speed", f"{record.avg_speed:.1f} mph"),
        ("Road Type", capitalize_first(record.road_type.value)),
        ("Time", capitalize_first(record.day_night.value)),
        ("Location", f"{record.city or 'N/A'}, {record.country or 'N/A'}"),
    ]
    if record.vin:
        details.append(("VIN", record.vin))
    if record.driver_license:
        details.append(("License", record.driver_license))
    return LogCard(
        id=record.id,
        title=record.driver_name,
        date_label=format_date(record.date),
        details=details,
    )


def render(records: Sequence[TripRecord], stats: AggregateStats) -> LogView:
    has_logs = len(records) > 0
    return LogView(
        stats=render_stats(stats),
        cards=[render_card(r) for r in records],
        empty_message="" if has_logs else EMPTY_MESSAGE,
        exports_enabled=has_logs,
        export_note="" if has_logs else EXPORT_NOTE,
    )


def form_values(form) -> dict:
    """Form text keyed by field name, blanks as None so inputs render empty."""
    return {name: value or None for name, value in asdict(form).items()}
