import time

import dash
import dash_bootstrap_components as dbc
from dash import html, dcc, callback, Input, Output, State, ALL, ctx
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from drivelog.deps import get_session
from drivelog.frontend.components.stat_card import stats_row, stats_values, STAT_LABELS
from drivelog.services.delivery import BrowserDownload
from drivelog.services.feedback import AlwaysConfirm
from drivelog.services.log_store import DELETE_PROMPT
from drivelog.services.mail import MailtoLink
from drivelog.views import LogCard, render

dash.register_page(__name__, path="/logs", title="Logs - Drive Logger")

CHART_TEMPLATE = "plotly_dark"


def make_log_card(card: LogCard):
    details = [
        dbc.Col([
            html.P(label, className="text-muted mb-0", style={"fontSize": "0.8rem"}),
            html.Strong(value),
        ], md=2, xs=6, className="mb-2")
        for label, value in card.details
    ]
    return dbc.Card(
        dbc.CardBody([
            dbc.Row([
                dbc.Col(html.H5(card.title, className="mb-0")),
                dbc.Col(html.Small(card.date_label, className="text-muted"), className="text-end"),
            ], className="mb-2"),
            dbc.Row(details),
            dbc.Button("Delete", id={"type": "delete-log", "index": card.id},
                       color="danger", size="sm", outline=True),
        ]),
        className="mb-2",
    )


def make_chart(records):
    if not records:
        return go.Figure(layout={"template": CHART_TEMPLATE})
    df = pd.DataFrame([
        {
            "date": r.date,
            "driver": r.driver_name,
            "distance": r.total_distance,
            "road_type": r.road_type.value,
        }
        for r in records
    ])
    df = df.sort_values("date")
    fig = px.bar(
        df,
        x="date",
        y="distance",
        color="road_type",
        hover_data=["driver"],
        labels={"date": "Date", "distance": "Distance (mi)", "road_type": "Road Type"},
        template=CHART_TEMPLATE,
    )
    fig.update_layout(height=300, margin=dict(l=40, r=20, t=20, b=40))
    return fig


email_modal = dbc.Modal([
    dbc.ModalHeader(dbc.ModalTitle("Email Logs")),
    dbc.ModalBody([
        dbc.Label("Recipient Email", html_for="email-recipient"),
        dbc.Input(id="email-recipient", type="email", className="mb-2"),
        dbc.Label("Subject", html_for="email-subject"),
        dbc.Input(id="email-subject", value="Vehicle Drive Logs", className="mb-2"),
        dbc.Label("Message (optional)", html_for="email-message"),
        dbc.Textarea(id="email-message"),
    ]),
    dbc.ModalFooter([
        dbc.Button("Cancel", id="email-cancel", color="secondary", outline=True),
        dbc.Button("Send", id="email-send", color="primary"),
    ]),
], id="email-modal", is_open=False)


layout = dbc.Container([
    html.H1("Drive Logs", className="mb-3"),
    stats_row("logs-stats"),

    dbc.Row([
        dbc.Col([
            dbc.Button("Export CSV", id="export-csv", color="primary", className="me-2"),
            dbc.Button("Export JSON", id="export-json", color="primary", className="me-2"),
            dbc.Button("Email Logs", id="email-open", color="info"),
        ]),
    ], className="mb-2"),
    html.Small(id="export-note", className="text-muted"),
    html.Div(id="email-link", className="mt-2"),
    dcc.Download(id="logs-download"),

    dcc.Graph(id="logs-chart", className="my-3"),

    dcc.Loading(
        html.Div(id="logs-list"),
        type="default",
    ),

    email_modal,
    dcc.ConfirmDialog(id="delete-confirm", message=DELETE_PROMPT),
    dcc.Store(id="delete-target"),
    dcc.Store(id="logs-refresh-trigger", data=0),
], fluid=True)


@callback(
    Output("logs-list", "children"),
    Output("logs-chart", "figure"),
    Output("export-csv", "disabled"),
    Output("export-json", "disabled"),
    Output("email-open", "disabled"),
    Output("export-note", "children"),
    *[Output(f"logs-stats-{key}", "children") for key, _ in STAT_LABELS],
    Input("logs-refresh-trigger", "data"),
)
def load_logs(_):
    store = get_session().store
    records = store.all()
    view = render(records, store.stats)

    if view.cards:
        cards = html.Div([make_log_card(card) for card in view.cards])
    else:
        cards = dbc.Alert(view.empty_message, color="info")

    disabled = not view.exports_enabled
    return (
        cards,
        make_chart(records),
        disabled,
        disabled,
        disabled,
        view.export_note,
        *stats_values(view.stats),
    )


@callback(
    Output("delete-target", "data"),
    Output("delete-confirm", "displayed"),
    Input({"type": "delete-log", "index": ALL}, "n_clicks"),
    prevent_initial_call=True,
)
def ask_delete(n_clicks_list):
    if not any(n_clicks_list):
        return dash.no_update, False

    triggered = ctx.triggered_id
    if triggered and isinstance(triggered, dict):
        return triggered["index"], True
    return dash.no_update, False


@callback(
    Output("logs-refresh-trigger", "data"),
    Input("delete-confirm", "submit_n_clicks"),
    State("delete-target", "data"),
    prevent_initial_call=True,
)
def delete_log(submit_n_clicks, record_id):
    if not submit_n_clicks or not record_id:
        return dash.no_update
    # The confirm dialog has already asked the operator
    get_session().delete_trip(record_id, gate=AlwaysConfirm())
    return int(time.time() * 1000)


@callback(
    Output("logs-download", "data"),
    Input("export-csv", "n_clicks"),
    Input("export-json", "n_clicks"),
    prevent_initial_call=True,
)
def export_logs(csv_clicks, json_clicks):
    session = get_session()
    download = BrowserDownload()
    if ctx.triggered_id == "export-json":
        ok = session.export_json(delivery=download)
    else:
        ok = session.export_csv(delivery=download)
    if not ok:
        return dash.no_update
    return dcc.send_string(download.content, download.filename, type=download.mime_type)


@callback(
    Output("email-modal", "is_open"),
    Output("email-link", "children"),
    Output("email-recipient", "value"),
    Output("email-message", "value"),
    Input("email-open", "n_clicks"),
    Input("email-cancel", "n_clicks"),
    Input("email-send", "n_clicks"),
    State("email-recipient", "value"),
    State("email-subject", "value"),
    State("email-message", "value"),
    prevent_initial_call=True,
)
def handle_email(open_clicks, cancel_clicks, send_clicks, recipient, subject, message):
    trigger = ctx.triggered_id
    if trigger == "email-open":
        return True, dash.no_update, dash.no_update, dash.no_update
    if trigger == "email-cancel":
        return False, dash.no_update, dash.no_update, dash.no_update

    link = MailtoLink()
    if not get_session().email_logs(recipient or "", subject or "", message or "", composer=link):
        return True, dash.no_update, dash.no_update, dash.no_update

    button = dbc.Button("Open email client", href=link.url, external_link=True, color="info", outline=True)
    return False, button, "", ""
