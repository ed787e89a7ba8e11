"""Trip fare rules.

Round trips booked through `calculate_trip_fare` always use the flat
round-trip multiplier. One-way fares are chosen by trip class:

    airport        rate.base + rate.mileage_multiplier * miles(home base -> non-airport endpoint)
    train station  miles * train_station_multiplier
    generic < 40   (miles + miles(dropoff -> home base)) * short_trip_multiplier
    generic >= 40  miles * long_trip_multiplier

where `miles` is always the direct pickup -> dropoff distance. Fares are
returned unrounded; rounding to cents happens in the fee ledger.
"""

import logging
from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from ridebook.core.exceptions import ValidationError
from ridebook.geo.directions_client import HOME_BASE_SENTINEL, DistanceQuote

from .config import PricingConfig
from .locations import LocationClass, LocationClassifier

logger = logging.getLogger(__name__)


class DirectionsProvider(Protocol):
    async def get_route(
        self,
        origin: str,
        destination: str,
        departure_time: datetime | None = None,
        stops: list[str] | None = None,
    ) -> DistanceQuote: ...


class FareQuote(BaseModel):
    fare: float = Field(ge=0)
    distance_miles: float = Field(ge=0)
    duration_minutes: int = Field(ge=0)
    trip_class: LocationClass
    is_round_trip: bool = False


class RoundTripFare(BaseModel):
    """Outbound and return legs priced as two one-way trips."""

    model_config = ConfigDict(populate_by_name=True)

    total: float
    outbound: float
    return_fare: float = Field(alias="return")
    # Route detail for booking; not part of the serialized breakdown.
    outbound_quote: FareQuote | None = Field(default=None, exclude=True)
    return_quote: FareQuote | None = Field(default=None, exclude=True)


class FareCalculator:
    def __init__(
        self,
        directions: DirectionsProvider,
        classifier: LocationClassifier,
        config: PricingConfig,
    ):
        self.directions = directions
        self.classifier = classifier
        self.config = config

    async def calculate_trip_fare(
        self,
        pickup: str,
        dropoff: str,
        requested_at: datetime,
        is_round_trip: bool,
        stops: list[str] | None = None,
    ) -> float:
        quote = await self.quote_trip(pickup, dropoff, requested_at, is_round_trip, stops)
        return quote.fare

    async def quote_trip(
        self,
        pickup: str,
        dropoff: str,
        requested_at: datetime,
        is_round_trip: bool,
        stops: list[str] | None = None,
    ) -> FareQuote:
        """Fare plus the route figures it was derived from."""
        if not pickup or not dropoff:
            raise ValidationError("Pickup and dropoff locations are required.")

        route = await self.directions.get_route(pickup, dropoff, requested_at, stops)
        miles = route.distance_miles
        trip_class = self.classifier.classify_trip(pickup, dropoff)

        if is_round_trip:
            fare = miles * 2 * self.config.round_trip_multiplier
        elif trip_class.is_airport and trip_class.name is not None:
            fare = await self._airport_fare(
                trip_class.name, trip_class, pickup, dropoff, requested_at
            )
        elif trip_class.is_train_station:
            fare = miles * self.config.train_station_multiplier
        elif miles < self.config.long_trip_threshold_miles:
            back_to_base = await self.directions.get_route(
                dropoff, HOME_BASE_SENTINEL, requested_at
            )
            fare = (miles + back_to_base.distance_miles) * self.config.short_trip_multiplier
        else:
            fare = miles * self.config.long_trip_multiplier

        logger.debug(
            f"Fare {fare:.2f} for {trip_class.kind.value} trip "
            f"({miles:.1f} mi, round_trip={is_round_trip})"
        )
        return FareQuote(
            fare=fare,
            distance_miles=miles,
            duration_minutes=route.duration_minutes,
            trip_class=trip_class,
            is_round_trip=is_round_trip,
        )

    async def calculate_transport_round_trip_fare(
        self,
        pickup: str,
        dropoff: str,
        outbound_time: datetime,
        return_time: datetime,
        stops: list[str] | None = None,
    ) -> RoundTripFare:
        """Price a hub round trip as two independent one-way legs.

        The legs must be booked as two separate rides.
        """
        outbound = await self.quote_trip(pickup, dropoff, outbound_time, False, stops)
        # The return leg drives the outbound path backwards, so it meets the stops in reverse.
        return_stops = list(reversed(stops)) if stops else None
        inbound = await self.quote_trip(dropoff, pickup, return_time, False, return_stops)
        return RoundTripFare(
            total=outbound.fare + inbound.fare,
            outbound=outbound.fare,
            return_fare=inbound.fare,
            outbound_quote=outbound,
            return_quote=inbound,
        )

    async def _airport_fare(
        self,
        airport: str,
        trip_class: LocationClass,
        pickup: str,
        dropoff: str,
        requested_at: datetime,
    ) -> float:
        rate = self.config.airport_rates[airport]
        endpoint = self.classifier.non_hub_endpoint(trip_class, pickup, dropoff)
        from_base = await self.directions.get_route(HOME_BASE_SENTINEL, endpoint, requested_at)
        return rate.base + rate.mileage_multiplier * from_base.distance_miles
