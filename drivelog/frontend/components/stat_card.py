import dash_bootstrap_components as dbc
from dash import html

from drivelog.views import StatsView

STAT_LABELS = [
    ("total_distance", "Total Distance"),
    ("total_duration", "Total Duration"),
    ("avg_speed", "Avg Speed"),
    ("trip_count", "Total Trips"),
]


def stat_card(label, value_id, value=""):
    """Small card with a muted label over a bold value.

    ``value_id`` is the id of the value paragraph so callbacks can refresh it.
    """
    return dbc.Card(
        dbc.CardBody([
            html.P(label, className="mb-0 text-muted", style={"fontSize": "0.85rem"}),
            html.P(value, id=value_id, className="mb-0 fw-bold", style={"fontSize": "1.5rem"}),
        ], className="text-center py-2"),
        className="h-100",
    )


def stats_row(prefix):
    return dbc.Row(
        [dbc.Col(stat_card(label, f"{prefix}-{key}"), md=3, xs=6) for key, label in STAT_LABELS],
        className="mb-4 g-2",
    )


def stats_values(view: StatsView):
    return [getattr(view, key) for key, _ in STAT_LABELS]
