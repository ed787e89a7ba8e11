"""Ride lifecycle operations that read or change a ride's fee ledger."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

import pydantic
from sqlalchemy.orm import Session, sessionmaker

from ridebook.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    StateError,
    ValidationError,
)
from ridebook.db import RideRepository, session_scope
from ridebook.ledger import FeeLedger
from ridebook.pricing import FareCalculator, FareQuote, LocationClassifier
from ridebook.ride import DEFAULT_DURATION_MINUTES, Ride, RideStatus, utc_now
from ridebook.ride_logging import log_ride_context
from ridebook.user import Principal

from .models import (
    CompletionResult,
    FarePreview,
    FareRequest,
    RideEdit,
    RideRequest,
    TripDetails,
    parse_local_datetime,
)

logger = logging.getLogger(__name__)

LATE_CANCELLATION_WINDOW = timedelta(hours=24)
REPRICE_FIELDS = frozenset({"pickup", "dropoff", "stops"})
FLIPPED_DIRECTION = {"arrival": "departure", "departure": "arrival"}


class RideService:
    """Books, prices and moves rides through their lifecycle.

    Each operation runs in its own transaction. Concurrent edits to the same
    ride are last-writer-wins.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        fare_calculator: FareCalculator,
        classifier: LocationClassifier,
        timezone: ZoneInfo,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session_factory = session_factory
        self.fare_calculator = fare_calculator
        self.classifier = classifier
        self.timezone = timezone
        self.ledger = FeeLedger(timezone)
        self.clock = clock

    async def preview_fare(self, principal: Principal, request: FareRequest) -> FarePreview:
        now = self.clock()
        departure = self._future_time(request.date, request.time, now)

        if self._is_hub_round_trip(request):
            return_time = self._return_time(request, departure)
            breakdown = await self.fare_calculator.calculate_transport_round_trip_fare(
                request.pickup, request.dropoff, departure, return_time, request.stops
            )
            logger.info(
                f"Hub round trip preview for {principal.user_id}: total {breakdown.total:.2f}"
            )
            return FarePreview(breakdown=breakdown)

        total = await self.fare_calculator.calculate_trip_fare(
            request.pickup,
            request.dropoff,
            departure,
            request.is_round_trip,
            request.stops,
        )
        logger.info(f"Fare preview for {principal.user_id}: {total:.2f}")
        return FarePreview(total=total)

    async def create_ride(self, principal: Principal, request: RideRequest) -> list[Ride]:
        """Book a ride. A hub round trip with a return time books two rides."""
        if principal.is_driver:
            raise AuthorizationError("Only riders can book rides.")

        now = self.clock()
        departure = self._future_time(request.date, request.time, now)

        if self._is_hub_round_trip(request):
            return_time = self._return_time(request, departure)
            fares = await self.fare_calculator.calculate_transport_round_trip_fare(
                request.pickup, request.dropoff, departure, return_time, request.stops
            )
            assert fares.outbound_quote is not None and fares.return_quote is not None
            outbound = self._new_ride(principal, request, fares.outbound_quote, departure, now)
            inbound = self._new_ride(principal, request, fares.return_quote, return_time, now)
            inbound.pickup, inbound.dropoff = request.dropoff, request.pickup
            # Same order the return-leg fare was quoted with.
            inbound.stops = list(reversed(request.stops))
            if request.direction is not None:
                inbound.direction = FLIPPED_DIRECTION[request.direction]
            rides = [outbound, inbound]
        else:
            quote = await self.fare_calculator.quote_trip(
                request.pickup,
                request.dropoff,
                departure,
                request.is_round_trip,
                request.stops,
            )
            ride = self._new_ride(principal, request, quote, departure, now)
            ride.is_round_trip = request.is_round_trip
            if request.is_round_trip and request.has_return_time:
                ride.return_date_time = self._return_time(request, departure)
            rides = [ride]

        with session_scope(self.session_factory) as session:
            repo = RideRepository(session)
            for ride in rides:
                repo.create(ride)

        for ride in rides:
            with log_ride_context(ride.ride_id, rider_id=principal.user_id):
                logger.info(f"Ride booked for {ride.date_time.isoformat()} at {ride.fare:.2f}")
        return rides

    def get_ride(self, principal: Principal, ride_id: str) -> Ride:
        with self.session_factory() as session:
            ride = self._load(RideRepository(session), ride_id)
        self._require_participant(principal, ride)
        return ride

    def list_rides(self, principal: Principal) -> list[Ride]:
        """A rider's own rides, or a driver's assigned rides plus the pending pool."""
        with self.session_factory() as session:
            repo = RideRepository(session)
            if not principal.is_driver:
                return repo.list_by_user(principal.user_id)
            rides = {r.ride_id: r for r in repo.list_by_status(RideStatus.PENDING)}
            rides.update((r.ride_id, r) for r in repo.list_by_driver(principal.user_id))
        return sorted(rides.values(), key=lambda r: r.date_time)

    def accept_ride(self, principal: Principal, ride_id: str) -> Ride:
        def accept(ride: Ride) -> None:
            self._require_driver(principal)
            ride.transition_to(RideStatus.ACCEPTED)
            ride.driver_id = principal.user_id
            ride.is_revised = False

        return self._mutate(ride_id, accept, "accepted", driver_id=principal.user_id)

    def reject_ride(self, principal: Principal, ride_id: str) -> Ride:
        def reject(ride: Ride) -> None:
            self._require_driver(principal)
            ride.transition_to(RideStatus.DENIED)
            ride.driver_id = None

        return self._mutate(ride_id, reject, "denied", driver_id=principal.user_id)

    def cancel_ride(self, principal: Principal, ride_id: str) -> Ride:
        """Rider cancellation; flags a late-cancellation fee inside 24 hours."""

        def cancel(ride: Ride) -> None:
            self._require_owner(principal, ride)
            now = self.clock()
            ride.transition_to(RideStatus.CANCELLED)
            ride.cancelled_at = now
            lead_time = ride.date_time - now
            ride.cancellation_fee_applied = (
                timedelta(0) < lead_time <= LATE_CANCELLATION_WINDOW
            )

        return self._mutate(ride_id, cancel, "cancelled", rider_id=principal.user_id)

    def cancel_ride_by_driver(self, principal: Principal, ride_id: str) -> Ride:
        """Assigned driver backs out; the ride goes back to the pending pool."""

        def release(ride: Ride) -> None:
            self._require_assigned_driver(principal, ride)
            ride.transition_to(RideStatus.PENDING)
            ride.driver_id = None

        return self._mutate(ride_id, release, "released by driver", driver_id=principal.user_id)

    def complete_ride(self, principal: Principal, ride_id: str) -> CompletionResult:
        """Assigned driver closes the ride; a late-cancelled ride is settled and removed."""
        self._require_driver(principal)
        with session_scope(self.session_factory) as session:
            repo = RideRepository(session)
            ride = self._load(repo, ride_id)
            self._require_assigned_driver(principal, ride)

            with log_ride_context(ride_id, driver_id=principal.user_id):
                if ride.status == RideStatus.CANCELLED and ride.cancellation_fee_applied:
                    repo.delete(ride_id)
                    logger.info("Late-cancelled ride settled and removed")
                    return CompletionResult(removed=True)

                ride.transition_to(RideStatus.COMPLETED)
                repo.save(ride)
                logger.info(f"Ride completed at {ride.fare:.2f}")
        return CompletionResult(ride=ride)

    def mark_as_paid(self, principal: Principal, ride_id: str) -> Ride:
        def pay(ride: Ride) -> None:
            self._require_assigned_driver(principal, ride)
            ride.is_paid = True

        return self._mutate(ride_id, pay, "marked paid", driver_id=principal.user_id)

    def update_ride_fare(self, principal: Principal, ride_id: str, new_fare: float) -> Ride:
        """Driver sets a new total; the difference lands in `driver_addon`."""

        def adjust(ride: Ride) -> None:
            self._require_driver(principal)
            if ride.driver_id is not None and ride.driver_id != principal.user_id:
                raise AuthorizationError("Only the assigned driver can change this fare.")
            ride.replace_fees(self.ledger.apply_driver_addon(ride.fees, new_fare))

        return self._mutate(ride_id, adjust, "fare adjusted", driver_id=principal.user_id)

    async def edit_ride(
        self, principal: Principal, ride_id: str, updates: dict[str, Any]
    ) -> Ride:
        """Patch editable fields. The whole patch is checked before anything is written."""
        try:
            edit = RideEdit.model_validate(updates)
        except pydantic.ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise ValidationError(
                f"Invalid ride update: {', '.join(fields)}", details={"fields": fields}
            ) from e

        changed = edit.model_fields_set
        if not changed:
            raise ValidationError("No fields to update.")

        ride = self.get_ride(principal, ride_id)
        if "fees" in changed:
            self.ledger.apply_edit(ride.fees, edit.fees or {}, principal.is_driver)

        quote: FareQuote | None = None
        if changed & REPRICE_FIELDS:
            pickup = edit.pickup if "pickup" in changed else ride.pickup
            dropoff = edit.dropoff if "dropoff" in changed else ride.dropoff
            stops = edit.stops if "stops" in changed else ride.stops
            if not pickup or not dropoff:
                raise ValidationError("Pickup and dropoff locations are required.")
            quote = await self.fare_calculator.quote_trip(
                pickup, dropoff, ride.date_time, ride.is_round_trip, stops
            )

        def apply(current: Ride) -> None:
            fees = current.fees
            if "fees" in changed:
                fees = self.ledger.apply_edit(fees, edit.fees or {}, principal.is_driver)
            if quote is not None:
                fees = self.ledger.rebase(fees, quote.fare)
                current.duration = quote.duration_minutes or DEFAULT_DURATION_MINUTES
            if fees is not current.fees:
                current.replace_fees(fees)
            for field in changed - {"fees"}:
                value = getattr(edit, field)
                setattr(current, field, list(value) if field == "stops" else value)

        return self._mutate(ride_id, apply, f"edited ({', '.join(sorted(changed))})")

    async def quote_reschedule_fee(
        self,
        principal: Principal,
        date: str,
        time: str,
        ride_id: str | None = None,
        pickup: str | None = None,
        dropoff: str | None = None,
    ) -> float:
        now = self.clock()
        new_time = self._future_time(date, time, now)

        if ride_id is not None:
            ride = self.get_ride(principal, ride_id)
            pickup, dropoff = ride.pickup, ride.dropoff
        if not pickup or not dropoff:
            raise ValidationError("Pickup and dropoff locations are required.")

        return await self._reschedule_fee(pickup, dropoff, now, new_time)

    async def reschedule_ride(
        self, principal: Principal, ride_id: str, date: str, time: str
    ) -> Ride:
        """Move a ride to a new time; the latest reschedule fee replaces any earlier one."""
        now = self.clock()
        new_time = self._future_time(date, time, now)

        ride = self.get_ride(principal, ride_id)
        self._require_owner(principal, ride)
        if ride.is_terminal:
            raise StateError(f"Cannot reschedule a {ride.status.value} ride")

        fee = await self._reschedule_fee(ride.pickup, ride.dropoff, now, new_time)

        def reschedule(current: Ride) -> None:
            current.replace_fees(self.ledger.apply_reschedule(current.fees, fee))
            current.date_time = new_time
            if current.status != RideStatus.PENDING:
                current.transition_to(RideStatus.PENDING)
            current.is_revised = True

        return self._mutate(
            ride_id, reschedule, f"rescheduled to {new_time.isoformat()} (fee {fee:.2f})"
        )

    async def _reschedule_fee(
        self, pickup: str, dropoff: str, now: datetime, new_time: datetime
    ) -> float:
        is_airport = self.classifier.is_airport_ride(pickup, dropoff)
        is_local = False
        if not is_airport:
            route = await self.fare_calculator.directions.get_route(pickup, dropoff, new_time)
            is_local = (
                route.distance_miles < self.fare_calculator.config.long_trip_threshold_miles
            )
        return self.ledger.compute_reschedule_fee(is_airport, is_local, now, new_time)

    def _mutate(
        self,
        ride_id: str,
        change: Callable[[Ride], None],
        description: str,
        **log_fields: Any,
    ) -> Ride:
        with session_scope(self.session_factory) as session:
            repo = RideRepository(session)
            ride = self._load(repo, ride_id)
            with log_ride_context(ride_id, **log_fields):
                change(ride)
                repo.save(ride)
                logger.info(f"Ride {description}; status={ride.status.value} fare={ride.fare:.2f}")
        return ride

    def _new_ride(
        self,
        principal: Principal,
        request: RideRequest,
        quote: FareQuote,
        ride_time: datetime,
        now: datetime,
    ) -> Ride:
        return Ride(
            ride_id=str(uuid.uuid4()),
            user_id=principal.user_id,
            pickup=request.pickup,
            dropoff=request.dropoff,
            stops=list(request.stops),
            date_time=ride_time,
            transport_type=request.transport_type,
            transport_number=request.transport_number,
            direction=request.direction,
            fees=self.ledger.initialize(quote.fare, ride_time, now),
            duration=quote.duration_minutes or DEFAULT_DURATION_MINUTES,
            created_at=now,
        )

    def _is_hub_round_trip(self, request: TripDetails) -> bool:
        if not request.is_round_trip or not request.has_return_time:
            return False
        is_hub = self.classifier.is_transport_location
        return is_hub(request.pickup) or is_hub(request.dropoff)

    def _future_time(self, date: str, time: str, now: datetime) -> datetime:
        moment = parse_local_datetime(date, time, self.timezone)
        if moment <= now:
            raise ValidationError("Ride time must be in the future.")
        return moment

    def _return_time(self, request: TripDetails, departure: datetime) -> datetime:
        assert request.return_date is not None and request.return_time is not None
        return_time = parse_local_datetime(request.return_date, request.return_time, self.timezone)
        if return_time <= departure:
            raise ValidationError("Return time must be after the departure time.")
        return return_time

    @staticmethod
    def _load(repo: RideRepository, ride_id: str) -> Ride:
        ride = repo.get(ride_id)
        if ride is None:
            raise NotFoundError(f"Ride not found: {ride_id}", details={"ride_id": ride_id})
        return ride

    @staticmethod
    def _require_driver(principal: Principal) -> None:
        if not principal.is_driver:
            raise AuthorizationError("Only drivers can perform this action.")

    @staticmethod
    def _require_owner(principal: Principal, ride: Ride) -> None:
        if ride.user_id != principal.user_id:
            raise AuthorizationError("You can only change your own rides.")

    @staticmethod
    def _require_assigned_driver(principal: Principal, ride: Ride) -> None:
        if not principal.is_driver or ride.driver_id != principal.user_id:
            raise AuthorizationError("Only the assigned driver can perform this action.")

    @staticmethod
    def _require_participant(principal: Principal, ride: Ride) -> None:
        if not principal.is_driver and ride.user_id != principal.user_id:
            raise AuthorizationError("You do not have access to this ride.")
