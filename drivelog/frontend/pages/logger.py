import dash
import dash_bootstrap_components as dbc
from dash import html, dcc, callback, Input, Output, State, ctx

from drivelog.config import settings
from drivelog.deps import get_session
from drivelog.errors import ValidationError
from drivelog.frontend.components.stat_card import stats_row, stats_values, STAT_LABELS
from drivelog.schemas.trip import DayNight, RoadType
from drivelog.services.session import FORM_FIELDS, Phase
from drivelog.views import capitalize_first, form_values, render_stats

dash.register_page(__name__, path="/", title="New Trip - Drive Logger")

# form field -> (label, input type)
FIELD_SPECS = {
    "date": ("Date", "date"),
    "road_type": ("Road Type", "select"),
    "day_night": ("Day/Night", "select"),
    "driver_name": ("Driver Name", "text"),
    "driver_license": ("Driver License (optional)", "text"),
    "vin": ("VIN (optional)", "text"),
    "city": ("City (optional)", "text"),
    "country": ("Country (optional)", "text"),
    "distance": ("Total Distance (mi)", "number"),
    "duration": ("Total Duration (hrs)", "number"),
    "avg_speed": ("Avg Speed (mph)", "number"),
}

SELECT_OPTIONS = {
    "road_type": [{"label": capitalize_first(r.value), "value": r.value} for r in RoadType],
    "day_night": [{"label": capitalize_first(d.value), "value": d.value} for d in DayNight],
}


def field_id(name):
    return "form-" + name.replace("_", "-")


def make_field(name, value=None):
    label, kind = FIELD_SPECS[name]
    if kind == "select":
        control = dbc.Select(id=field_id(name), options=SELECT_OPTIONS[name], value=value, placeholder="Select...")
    elif kind == "number":
        control = dbc.Input(id=field_id(name), type="number", min=0, step="any", value=value)
    else:
        control = dbc.Input(id=field_id(name), type=kind, value=value)
    return dbc.Col([
        dbc.Label(label, html_for=field_id(name)),
        control,
        dbc.FormFeedback(id=field_id(name) + "-feedback", type="invalid"),
    ], md=4, className="mb-3")


def layout(**kwargs):
    # Rebuilt on every visit so a trip awaiting details keeps its form
    session = get_session()
    values = form_values(session.state.form)
    running = session.phase is Phase.RUNNING
    return dbc.Container([
        html.H1("Vehicle Drive Logger", className="mb-3"),

        dbc.Card(
            dbc.CardBody([
                html.H2(session.display.elapsed, id="timer-display", className="display-4 font-monospace"),
                html.P(session.display.status, id="timer-status", className="text-muted"),
                dbc.Button(
                    "Finish Trip" if running else "Start Trip",
                    id="trip-toggle",
                    color="danger" if running else "success",
                    size="lg",
                ),
            ], className="text-center py-4"),
            className="mb-4",
        ),
        dcc.Interval(id="timer-interval", interval=settings.timer_tick_ms),

        html.Div(
            dbc.Card(
                dbc.CardBody([
                    html.H4("Trip Details", className="mb-3"),
                    dbc.Row([make_field(name, values[name]) for name in FIELD_SPECS]),
                    dbc.Button("Save Log Entry", id="form-submit", color="primary", className="me-2"),
                    dbc.Button("Discard", id="form-discard", color="secondary", outline=True),
                ]),
                className="mb-4",
            ),
            id="form-section",
            style={"display": "block" if session.state.form_visible else "none"},
        ),

        html.H4("Totals", className="mb-2"),
        stats_row("logger-stats"),
    ], fluid=True)


@callback(
    Output("timer-display", "children"),
    Output("timer-status", "children"),
    Output("trip-toggle", "children"),
    Output("trip-toggle", "color"),
    Output("form-section", "style"),
    *[Output(f"logger-stats-{key}", "children") for key, _ in STAT_LABELS],
    Input("timer-interval", "n_intervals"),
)
def refresh_timer(_):
    session = get_session()
    running = session.phase is Phase.RUNNING
    return (
        session.display.elapsed,
        session.display.status,
        "Finish Trip" if running else "Start Trip",
        "danger" if running else "success",
        {"display": "block" if session.state.form_visible else "none"},
        *stats_values(render_stats(session.state.stats)),
    )


@callback(
    Output("form-date", "value", allow_duplicate=True),
    Output("form-duration", "value", allow_duplicate=True),
    Output("form-avg-speed", "value", allow_duplicate=True),
    Input("trip-toggle", "n_clicks"),
    prevent_initial_call=True,
)
def toggle_trip(_):
    session = get_session()
    session.toggle()
    if session.phase is not Phase.PENDING_DETAILS:
        return dash.no_update, dash.no_update, dash.no_update
    form = session.state.form
    return form.date, form.duration, form.avg_speed


@callback(
    Output("form-avg-speed", "value", allow_duplicate=True),
    Input("form-distance", "value"),
    Input("form-duration", "value"),
    prevent_initial_call=True,
)
def update_avg_speed(distance, duration):
    session = get_session()
    before = session.state.form.avg_speed
    session.set_field("distance", distance)
    session.set_field("duration", duration)
    if session.state.form.avg_speed == before:
        return dash.no_update
    return session.state.form.avg_speed


@callback(
    *[Output(field_id(name), "value", allow_duplicate=True) for name in FORM_FIELDS],
    *[Output(field_id(name), "invalid") for name in FORM_FIELDS],
    *[Output(field_id(name) + "-feedback", "children") for name in FORM_FIELDS],
    Input("form-submit", "n_clicks"),
    Input("form-discard", "n_clicks"),
    *[State(field_id(name), "value") for name in FORM_FIELDS],
    prevent_initial_call=True,
)
def finish_details(submit_clicks, discard_clicks, *values):
    session = get_session()
    errors = {}

    if ctx.triggered_id == "form-discard":
        session.discard()
    else:
        for name, value in zip(FORM_FIELDS, values):
            session.set_field(name, value)
        try:
            session.submit()
        except ValidationError as e:
            errors = e.errors

    shown = form_values(session.state.form)
    new_values = [shown[name] for name in FORM_FIELDS]
    if errors:
        new_values = [dash.no_update] * len(FORM_FIELDS)
    return (
        *new_values,
        *[name in errors for name in FORM_FIELDS],
        *[errors.get(name, "") for name in FORM_FIELDS],
    )
