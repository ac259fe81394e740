from drivelog.schemas.trip import AggregateStats, DayNight, RoadType, TripRecord, new_trip_id

__all__ = ["AggregateStats", "DayNight", "RoadType", "TripRecord", "new_trip_id"]
