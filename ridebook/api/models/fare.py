from pydantic import BaseModel, model_validator


class RescheduleQuoteRequest(BaseModel):
    """Quote for an existing ride (`ride_id`) or for a pickup/dropoff pair."""

    date: str
    time: str
    ride_id: str | None = None
    pickup: str | None = None
    dropoff: str | None = None

    @model_validator(mode="after")
    def require_ride_or_locations(self) -> "RescheduleQuoteRequest":
        if self.ride_id is None and not (self.pickup and self.dropoff):
            raise ValueError("Provide ride_id or both pickup and dropoff")
        return self


class RescheduleQuoteResponse(BaseModel):
    fee: float
