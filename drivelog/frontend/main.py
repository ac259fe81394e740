import logging
import os

import dash
import dash_bootstrap_components as dbc
from dash import dcc, html, Input, Output

from drivelog.config import settings
from drivelog.deps import get_session
from drivelog.frontend.components.navbar import create_navbar, trip_badge

_here = os.path.dirname(os.path.abspath(__file__))

ALERT_COLORS = {"success": "success", "error": "danger", "warning": "warning", "info": "info"}

app = dash.Dash(
    __name__,
    use_pages=True,
    external_stylesheets=[dbc.themes.DARKLY],
    suppress_callback_exceptions=True,
    pages_folder=os.path.join(_here, "pages"),
    title="Vehicle Drive Logger",
)

app.layout = html.Div([
    create_navbar(),
    html.Div(
        id="notifications",
        className="position-fixed top-0 end-0 p-3",
        style={"zIndex": 10000, "width": "22rem"},
    ),
    dcc.Interval(id="notifications-interval", interval=1000),
    dbc.Container(
        dash.page_container,
        fluid=True,
        className="px-4",
    ),
])


# Navbar toggler callback for mobile
@app.callback(
    Output("navbar-collapse", "is_open"),
    Input("navbar-toggler", "n_clicks"),
    dash.State("navbar-collapse", "is_open"),
)
def toggle_navbar(n_clicks, is_open):
    if n_clicks:
        return not is_open
    return is_open


@app.callback(
    Output("navbar-trip-badge", "children"),
    Output("navbar-trip-badge", "color"),
    Output("navbar-trip-badge", "style"),
    Input("notifications-interval", "n_intervals"),
)
def show_trip_badge(_):
    return trip_badge(get_session().phase)


@app.callback(
    Output("notifications", "children"),
    Input("notifications-interval", "n_intervals"),
)
def show_notifications(_):
    items = get_session().notifier.drain()
    if not items:
        return dash.no_update
    return [
        dbc.Alert(
            item.message,
            id=f"notification-{item.id}",
            color=ALERT_COLORS.get(item.kind, "info"),
            dismissable=True,
            duration=3000,
            className="fw-semibold shadow",
        )
        for item in items
    ]


server = app.server


def main():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    get_session()
    app.run(host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == "__main__":
    main()
