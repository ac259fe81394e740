import dash_bootstrap_components as dbc
from dash import html

from drivelog.services.session import Phase

# phase -> (badge text, badge color)
TRIP_BADGES = {
    Phase.IDLE: ("", "secondary"),
    Phase.RUNNING: ("Trip running", "danger"),
    Phase.PENDING_DETAILS: ("Details pending", "warning"),
}


def trip_badge(phase):
    text, color = TRIP_BADGES[phase]
    return text, color, {"display": "inline-block" if text else "none"}


def create_navbar():
    return dbc.Navbar(
        dbc.Container(
            [
                dbc.NavbarBrand(
                    [
                        html.Span("Vehicle Drive Logger"),
                        dbc.Badge(id="navbar-trip-badge", pill=True, className="ms-2",
                                  style={"display": "none"}),
                    ],
                    href="/",
                    className="fw-bold",
                ),
                dbc.NavbarToggler(id="navbar-toggler"),
                dbc.Collapse(
                    dbc.Nav(
                        [
                            dbc.NavItem(dbc.NavLink("New Trip", href="/", active="exact")),
                            dbc.NavItem(dbc.NavLink("Logs", href="/logs", active="exact")),
                        ],
                        navbar=True,
                    ),
                    id="navbar-collapse",
                    navbar=True,
                ),
            ],
            fluid=True,
        ),
        color="dark",
        dark=True,
        className="mb-4",
    )
