import math
from typing import Iterable

from drivelog.schemas.trip import AggregateStats, TripRecord


def compute_stats(records: Iterable[TripRecord]) -> AggregateStats:
    """Totals and overall average speed across the whole log.

    The average is distance over duration for the whole log, not a mean of
    the per-trip speeds, and is 0 when no time has been logged. Sums use
    ``math.fsum`` so the result does not depend on record order.
    """
    records = list(records)
    total_distance = math.fsum(r.total_distance for r in records)
    total_duration = math.fsum(r.total_duration for r in records)

    return AggregateStats(
        total_distance=total_distance,
        total_duration=total_duration,
        avg_speed=total_distance / total_duration if total_duration > 0 else 0.0,
        trip_count=len(records),
    )
