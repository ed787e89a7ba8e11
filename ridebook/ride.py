"""Ride document and status state machine."""

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from ridebook.core.exceptions import StateError
from ridebook.ledger import FeeMap

DEFAULT_DURATION_MINUTES = 60


class RideStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DENIED = "denied"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


VALID_TRANSITIONS: dict[RideStatus, set[RideStatus]] = {
    RideStatus.PENDING: {RideStatus.ACCEPTED, RideStatus.DENIED, RideStatus.CANCELLED},
    RideStatus.ACCEPTED: {RideStatus.PENDING, RideStatus.CANCELLED, RideStatus.COMPLETED},
    RideStatus.DENIED: {RideStatus.PENDING, RideStatus.CANCELLED},
    RideStatus.CANCELLED: set(),
    RideStatus.COMPLETED: set(),
}

TERMINAL_STATUSES = {RideStatus.CANCELLED, RideStatus.COMPLETED}


def utc_now() -> datetime:
    return datetime.now(UTC)


class Ride(BaseModel):
    """A booked ride with its fee ledger.

    `fare` is derived from `fees` and is rewritten whenever the fees change.
    """

    ride_id: str
    user_id: str
    driver_id: str | None = None
    pickup: str
    dropoff: str
    stops: list[str] = Field(default_factory=list)
    date_time: datetime
    return_date_time: datetime | None = None
    is_round_trip: bool = False
    transport_type: Literal["flight", "train", "bus"] | None = None
    transport_number: str | None = None
    direction: Literal["arrival", "departure"] | None = None
    status: RideStatus = RideStatus.PENDING
    fees: FeeMap = Field(default_factory=FeeMap)
    fare: float = 0.0
    duration: int = DEFAULT_DURATION_MINUTES
    is_revised: bool = False
    is_paid: bool = False
    cancelled_at: datetime | None = None
    cancellation_fee_applied: bool = False
    created_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _sync_fare(self) -> "Ride":
        self.fare = self.fees.total()
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition_to(self, new_status: RideStatus) -> None:
        if self.is_terminal:
            raise StateError(
                f"Cannot change a {self.status.value} ride",
                details={"ride_id": self.ride_id, "status": self.status.value},
            )
        if new_status not in VALID_TRANSITIONS[self.status]:
            raise StateError(
                f"Invalid transition from {self.status.value} to {new_status.value}",
                details={"ride_id": self.ride_id},
            )
        self.status = new_status

    def replace_fees(self, fees: FeeMap) -> None:
        """Install a new fee map and re-derive the fare."""
        if self.status == RideStatus.COMPLETED:
            raise StateError(
                "Fees cannot change after a ride is completed",
                details={"ride_id": self.ride_id},
            )
        self.fees = fees
        self.fare = fees.total()
