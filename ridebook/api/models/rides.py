from datetime import datetime

from pydantic import BaseModel, Field

from ridebook.ride import Ride


class RideResponse(BaseModel):
    ride_id: str
    user_id: str
    driver_id: str | None
    pickup: str
    dropoff: str
    stops: list[str]
    date_time: datetime
    return_date_time: datetime | None
    is_round_trip: bool
    transport_type: str | None
    transport_number: str | None
    direction: str | None
    status: str
    fees: dict[str, float]
    fare: float
    duration: int
    is_revised: bool
    is_paid: bool
    cancelled_at: datetime | None
    cancellation_fee_applied: bool
    created_at: datetime

    @classmethod
    def from_ride(cls, ride: Ride) -> "RideResponse":
        return cls(
            **ride.model_dump(exclude={"fees", "fare", "status"}),
            status=ride.status.value,
            fees=ride.fees.to_document(),
            fare=ride.fees.total(),
        )


class RidesCreatedResponse(BaseModel):
    rides: list[RideResponse]


class RideListResponse(BaseModel):
    rides: list[RideResponse]
    count: int


class FareUpdateRequest(BaseModel):
    fare: float = Field(gt=0, allow_inf_nan=False, description="New total requested by the driver")


class RescheduleRequest(BaseModel):
    date: str
    time: str


class CompletionResponse(BaseModel):
    removed: bool
    ride: RideResponse | None = None
