"""Inputs and results for ride lifecycle operations."""

from datetime import datetime
from typing import Any, Literal
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ridebook.core.exceptions import ValidationError
from ridebook.pricing import RoundTripFare
from ridebook.ride import Ride

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def parse_local_datetime(date: str, time: str, timezone: ZoneInfo) -> datetime:
    """Combine `YYYY-MM-DD` and `HH:MM` strings into an aware datetime."""
    try:
        naive = datetime.strptime(f"{date} {time}", f"{DATE_FORMAT} {TIME_FORMAT}")
    except ValueError as e:
        raise ValidationError(
            "Invalid date or time. Use YYYY-MM-DD and HH:MM.",
            details={"date": date, "time": time},
        ) from e
    return naive.replace(tzinfo=timezone)


class TripDetails(BaseModel):
    pickup: str
    dropoff: str
    date: str
    time: str
    is_round_trip: bool = False
    return_date: str | None = None
    return_time: str | None = None
    stops: list[str] = Field(default_factory=list)

    @property
    def has_return_time(self) -> bool:
        return bool(self.return_date and self.return_time)


class FareRequest(TripDetails):
    pass


class RideRequest(TripDetails):
    transport_type: Literal["flight", "train", "bus"] | None = None
    transport_number: str | None = None
    direction: Literal["arrival", "departure"] | None = None


class FarePreview(BaseModel):
    """Either a single `total` or a two-leg `breakdown` for hub round trips."""

    total: float | None = None
    breakdown: RoundTripFare | None = None


class RideEdit(BaseModel):
    """Fields a general edit may touch. Anything else is rejected."""

    model_config = ConfigDict(extra="forbid")

    pickup: str | None = None
    dropoff: str | None = None
    stops: list[str] | None = None
    transport_type: Literal["flight", "train", "bus"] | None = None
    transport_number: str | None = None
    direction: Literal["arrival", "departure"] | None = None
    fees: dict[str, Any] | None = None

    @field_validator("stops", mode="before")
    @classmethod
    def null_stops_clear_the_list(cls, v: Any) -> Any:
        return [] if v is None else v


class CompletionResult(BaseModel):
    removed: bool = False
    ride: Ride | None = None
