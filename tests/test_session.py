import datetime as dt

import pytest

from drivelog.errors import SessionStateError, ValidationError
from drivelog.schemas.trip import DayNight, RoadType
from drivelog.services.feedback import STATUS_FINISHED, STATUS_READY, STATUS_RUNNING
from drivelog.services.session import Phase, parse_number
from drivelog.views import form_values
from tests.conftest import RecordingGate, make_record


def fill_details(session, **overrides):
    values = dict(
        driver_name="Alex Rivera",
        road_type="highway",
        day_night="day",
        distance="100",
    )
    values.update(overrides)
    for name, value in values.items():
        session.set_field(name, value)


def finish_trip(session, clock, ms):
    session.start()
    clock.advance(ms)
    session.stop()


def test_new_session_is_idle_with_today_in_form(session, display):
    assert session.phase is Phase.IDLE
    assert session.state.form.date == "2025-03-05"
    assert not session.state.form_visible
    assert display.statuses == [STATUS_READY]


def test_start_enters_running(session, timer, display):
    session.start()
    assert session.phase is Phase.RUNNING
    assert timer.running
    assert not session.state.form_visible
    assert display.statuses[-1] == STATUS_RUNNING


def test_stop_prefills_duration_and_shows_form(session, clock, display):
    finish_trip(session, clock, 5_430_000)
    assert session.phase is Phase.PENDING_DETAILS
    assert session.state.form.duration == "1.51"
    assert session.state.form_visible
    assert display.statuses[-1] == STATUS_FINISHED


def test_stop_while_idle_is_noop(session):
    session.stop()
    assert session.phase is Phase.IDLE


def test_toggle_alternates(session, clock):
    session.toggle()
    assert session.phase is Phase.RUNNING
    clock.advance(1000)
    session.toggle()
    assert session.phase is Phase.PENDING_DETAILS


def test_live_avg_speed_from_distance(session, clock):
    finish_trip(session, clock, 5_430_000)
    session.set_field("distance", "100")
    assert session.state.form.avg_speed == "66.2"


def test_live_avg_speed_left_alone_without_duration(session, clock):
    finish_trip(session, clock, 0)
    session.set_field("avg_speed", "42")
    session.set_field("distance", "100")
    assert session.state.form.avg_speed == "42"


def test_live_avg_speed_not_computed_while_idle(session):
    session.set_field("duration", "2")
    session.set_field("distance", "100")
    assert session.state.form.avg_speed == ""


def test_submit_scenario(session, store, clock, timer, display, notifier):
    finish_trip(session, clock, 5_430_000)
    fill_details(session, city="Austin")

    record = session.submit()

    assert record.total_duration == 1.51
    assert record.total_distance == 100
    assert record.avg_speed == 66.2
    assert record.date == dt.date(2025, 3, 5)
    assert record.road_type is RoadType.HIGHWAY
    assert record.day_night is DayNight.DAY
    assert record.city == "Austin"
    assert store.all() == (record,)

    assert session.phase is Phase.IDLE
    assert not session.state.form_visible
    assert session.state.form.distance == ""
    assert session.state.stats.trip_count == 1
    assert timer.elapsed_ms == 0
    assert display.elapsed[-1] == "00:00:00"
    assert display.statuses[-1] == STATUS_READY
    assert notifier.messages[-1] == ("Log entry added successfully!", "success")


def test_submitted_avg_speed_override_is_kept(session, clock):
    finish_trip(session, clock, 3_600_000)
    fill_details(session)
    session.set_field("avg_speed", "80")
    assert session.submit().avg_speed == 80


def test_blank_avg_speed_is_derived_with_zero_guard(session, clock):
    finish_trip(session, clock, 0)
    fill_details(session, avg_speed="")
    assert session.submit().avg_speed == 0


def test_submit_reports_every_bad_field(session, store, clock):
    finish_trip(session, clock, 60_000)
    fill_details(session, driver_name="  ", road_type="", distance="ten")
    session.set_field("date", "05/03/2025")

    with pytest.raises(ValidationError) as excinfo:
        session.submit()

    assert set(excinfo.value.errors) == {"driver_name", "road_type", "distance", "date"}
    assert session.state.errors == excinfo.value.errors
    assert session.phase is Phase.PENDING_DETAILS
    assert len(store) == 0


def test_negative_distance_is_rejected(session, clock):
    finish_trip(session, clock, 60_000)
    fill_details(session, distance="-5")
    with pytest.raises(ValidationError) as excinfo:
        session.submit()
    assert "distance" in excinfo.value.errors


def test_editing_a_field_clears_its_error(session, clock):
    finish_trip(session, clock, 60_000)
    fill_details(session, driver_name="")
    with pytest.raises(ValidationError):
        session.submit()
    session.set_field("driver_name", "Kim")
    assert "driver_name" not in session.state.errors


def test_submit_outside_pending_details_is_refused(session):
    with pytest.raises(SessionStateError):
        session.submit()


def test_unknown_field_is_refused(session):
    with pytest.raises(KeyError):
        session.set_field("speed", "1")


def test_start_after_stop_resumes_timer(session, clock, timer):
    finish_trip(session, clock, 60_000)
    session.start()
    clock.advance(60_000)
    session.stop()
    assert timer.elapsed_ms == 120_000
    assert session.state.form.duration == "0.03"


def test_discard_returns_to_idle(session, store, clock, timer):
    finish_trip(session, clock, 60_000)
    fill_details(session)
    session.discard()
    assert session.phase is Phase.IDLE
    assert session.state.form.driver_name == ""
    assert timer.elapsed_ms == 0
    assert len(store) == 0


def test_ids_are_unique_across_quick_submits(session, clock):
    ids = set()
    for _ in range(5):
        finish_trip(session, clock, 1000)
        fill_details(session)
        ids.add(session.submit().id)
    assert len(ids) == 5


def test_delete_trip_notifies(session, store, notifier):
    record = make_record()
    store.add(record)
    assert session.delete_trip(record.id)
    assert len(store) == 0
    assert notifier.messages[-1] == ("Log entry deleted", "success")


def test_declined_delete_trip(session, store, notifier):
    record = make_record()
    store.add(record)
    assert not session.delete_trip(record.id, gate=RecordingGate(answer=False))
    assert len(store) == 1
    assert notifier.messages == []


def test_export_csv_delivers_file(session, store, delivery, notifier):
    store.add(make_record())
    assert session.export_csv()
    [(content, filename, mime_type)] = delivery.files
    assert filename == "vehicle-logs.csv"
    assert mime_type == "text/csv"
    assert content.startswith('"Date","Driver Name"')
    assert notifier.kinds[-1] == "success"


def test_export_json_delivers_file(session, store, delivery):
    store.add(make_record())
    assert session.export_json()
    assert delivery.files[0][1:] == ("vehicle-logs.json", "application/json")


def test_export_of_empty_log_produces_no_file(session, delivery, notifier):
    assert not session.export_csv()
    assert not session.export_json()
    assert delivery.files == []
    assert notifier.messages == [("No logs to export", "error")] * 2


def test_failed_delivery_is_reported(session, store, notifier):
    from tests.test_storage import FailingDelivery

    store.add(make_record())
    assert not session.export_csv(delivery=FailingDelivery())
    assert notifier.kinds[-1] == "error"


def test_email_logs(session, store, composer, notifier):
    store.add(make_record())
    assert session.email_logs("fleet@example.com", "Weekly", "See below")
    [(recipient, subject, body)] = composer.emails
    assert recipient == "fleet@example.com"
    assert subject == "Weekly"
    assert body.startswith("See below\n\nVehicle Drive Logs Summary:")
    assert notifier.messages[-1] == ("Opening email client...", "success")


def test_email_requires_recipient_and_logs(session, store, composer, notifier):
    assert not session.email_logs("fleet@example.com", "Weekly")
    store.add(make_record())
    assert not session.email_logs("  ", "Weekly")
    assert composer.emails == []
    assert notifier.messages == [
        ("No logs to email", "error"),
        ("Please enter recipient email", "error"),
    ]


@pytest.mark.parametrize("text, expected", [
    ("12.5", 12.5),
    (" 3 ", 3.0),
    ("", None),
    ("abc", None),
    ("nan", None),
    ("inf", None),
])
def test_parse_number(text, expected):
    assert parse_number(text) == expected


def test_reloaded_form_values_keep_pending_details(session, store, clock):
    finish_trip(session, clock, 5_430_000)
    fill_details(session)

    # a page visit rebuilds the inputs from the form, then submits them back
    values = form_values(session.state.form)
    assert values["duration"] == "1.51"
    assert values["vin"] is None
    for name, value in values.items():
        session.set_field(name, value)

    record = session.submit()
    assert record.total_duration == 1.51
    assert record.avg_speed == 66.2
    assert store.all() == (record,)
