import datetime as dt
import enum
import math
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RoadType(str, enum.Enum):
    HIGHWAY = "highway"
    CITY = "city"
    RURAL = "rural"
    MIXED = "mixed"


class DayNight(str, enum.Enum):
    DAY = "day"
    NIGHT = "night"


def new_trip_id() -> str:
    return uuid.uuid4().hex


class TripRecord(BaseModel):
    """One committed drive. Serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, allow_inf_nan=False
    )

    id: str = Field(default_factory=new_trip_id)
    date: dt.date
    road_type: RoadType
    day_night: DayNight
    vin: str = ""
    driver_name: str
    driver_license: str = ""
    country: str = ""
    city: str = ""
    total_distance: float = Field(ge=0)
    total_duration: float = Field(ge=0)
    avg_speed: float = Field(ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def _legacy_numeric_id(cls, value):
        # Older logs used the creation timestamp in milliseconds
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if not math.isfinite(value):
                raise ValueError("Record id must be a finite number")
            return str(int(value))
        return value

    @field_validator("vin", "driver_license", "country", "city", mode="before")
    @classmethod
    def _blank_optional(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("driver_name")
    @classmethod
    def _driver_name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Driver name is required")
        return value

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class AggregateStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_distance: float = 0.0
    total_duration: float = 0.0
    avg_speed: float = 0.0
    trip_count: int = 0
