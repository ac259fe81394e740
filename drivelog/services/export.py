"""CSV, JSON and email renderings of the trip log."""
import csv
import io
import json
from typing import Sequence

from drivelog.errors import EmptyCollectionError
from drivelog.schemas.trip import AggregateStats, TripRecord

CSV_FILENAME = "vehicle-logs.csv"
CSV_MIME_TYPE = "text/csv"
JSON_FILENAME = "vehicle-logs.json"
JSON_MIME_TYPE = "application/json"

CSV_HEADERS = [
    "Date",
    "Driver Name",
    "Driver License",
    "Distance (mi)",
    "Duration (hrs)",
    "Avg Speed (mph)",
    "Road Type",
    "Day/Night",
    "City",
    "Country",
    "VIN",
]

SUMMARY_DIVIDER = "-------------------"


def _require_records(records: Sequence[TripRecord], what: str = "export"):
    if not records:
        raise EmptyCollectionError(f"No logs to {what}")


def csv_row(record: TripRecord) -> list[str]:
    return [
        record.date.isoformat(),
        record.driver_name,
        record.driver_license,
        f"{record.total_distance:.1f}",
        f"{record.total_duration:.2f}",
        f"{record.avg_speed:.1f}",
        record.road_type.value,
        record.day_night.value,
        record.city,
        record.country,
        record.vin,
    ]


def to_csv(records: Sequence[TripRecord]) -> str:
    """Header row plus one fully quoted row per record, newest first."""
    _require_records(records)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerow(csv_row(record))
    return buffer.getvalue().rstrip("\n")


def from_csv(csv_text: str) -> list[dict[str, str]]:
    reader = csv.DictReader(io.StringIO(csv_text))
    return list(reader)


def to_json(records: Sequence[TripRecord]) -> str:
    _require_records(records)
    return dump_records(records)


def dump_records(records: Sequence[TripRecord]) -> str:
    """Serialize without the empty check; used for storage as well."""
    return json.dumps([r.to_dict() for r in records], indent=2)


def from_json(json_text: str) -> list[TripRecord]:
    """Parse a JSON array of records. Raises ValueError on malformed input."""
    data = json.loads(json_text)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of trip records")
    return [TripRecord.model_validate(item) for item in data]


def _record_block(index: int, record: TripRecord) -> str:
    lines = [
        f"Log {index}:",
        f"Date: {record.date.isoformat()}",
        f"Driver: {record.driver_name}",
    ]
    if record.driver_license:
        lines.append(f"License: {record.driver_license}")
    lines += [
        f"Distance: {record.total_distance:.1f} mi",
        f"Duration: {record.total_duration:.2f} hrs",
        f"Avg Speed: {record.avg_speed:.1f} mph",
        f"Road Type: {record.road_type.value}",
        f"Time: {record.day_night.value}",
        f"Location: {record.city or 'N/A'}, {record.country or 'N/A'}",
    ]
    if record.vin:
        lines.append(f"VIN: {record.vin}")
    lines.append(SUMMARY_DIVIDER)
    return "\n".join(lines)


def to_email_summary(records: Sequence[TripRecord], stats: AggregateStats, message: str = "") -> str:
    _require_records(records, "email")

    parts = []
    if message.strip():
        parts.append(message.strip())
    parts.append(
        "Vehicle Drive Logs Summary:\n\n"
        f"Total Trips: {stats.trip_count}\n"
        f"Total Distance: {stats.total_distance:.1f} mi\n"
        f"Total Duration: {stats.total_duration:.1f} hrs\n"
        f"Average Speed: {stats.avg_speed:.1f} mph"
    )
    parts.append("\n\n".join(_record_block(i, r) for i, r in enumerate(records, start=1)))
    return "\n\n".join(parts)
