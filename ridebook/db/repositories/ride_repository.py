"""Ride repository mapping ride documents to the rides table."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ridebook.ledger import FeeMap
from ridebook.ride import Ride as RideDomain
from ridebook.ride import RideStatus

from ..schema import Ride
from ..utils import from_storage, to_storage, utc_now


class RideRepository:
    """Repository for ride CRUD operations.

    Writes are last-writer-wins; callers own the transaction boundary.
    """

    def __init__(self, session: Session):
        self.session = session

    def create(self, ride: RideDomain) -> None:
        row = Ride(ride_id=ride.ride_id)
        self._apply(row, ride)
        row.created_at = to_storage(ride.created_at)
        self.session.add(row)

    def get(self, ride_id: str) -> RideDomain | None:
        row = self.session.get(Ride, ride_id)
        if row is None:
            return None
        return self._to_domain(row)

    def save(self, ride: RideDomain) -> None:
        """Overwrite the stored document with `ride`, creating it if missing."""
        row = self.session.get(Ride, ride.ride_id)
        if row is None:
            self.create(ride)
            return
        self._apply(row, ride)
        row.updated_at = utc_now()

    def delete(self, ride_id: str) -> bool:
        row = self.session.get(Ride, ride_id)
        if row is None:
            return False
        self.session.delete(row)
        return True

    def list_by_user(self, user_id: str) -> list[RideDomain]:
        stmt = select(Ride).where(Ride.user_id == user_id).order_by(Ride.date_time)
        result = self.session.execute(stmt)
        return [self._to_domain(r) for r in result.scalars().all()]

    def list_by_status(self, status: RideStatus) -> list[RideDomain]:
        stmt = select(Ride).where(Ride.status == status.value).order_by(Ride.date_time)
        result = self.session.execute(stmt)
        return [self._to_domain(r) for r in result.scalars().all()]

    def list_by_driver(self, driver_id: str) -> list[RideDomain]:
        stmt = select(Ride).where(Ride.driver_id == driver_id).order_by(Ride.date_time)
        result = self.session.execute(stmt)
        return [self._to_domain(r) for r in result.scalars().all()]

    def _apply(self, row: Ride, ride: RideDomain) -> None:
        row.user_id = ride.user_id
        row.driver_id = ride.driver_id
        row.pickup = ride.pickup
        row.dropoff = ride.dropoff
        row.stops = list(ride.stops)
        row.date_time = to_storage(ride.date_time)
        row.return_date_time = to_storage(ride.return_date_time)
        row.is_round_trip = ride.is_round_trip
        row.transport_type = ride.transport_type
        row.transport_number = ride.transport_number
        row.direction = ride.direction
        row.status = ride.status.value
        row.fees = ride.fees.to_document()
        row.fare = ride.fees.total()
        row.duration = ride.duration
        row.is_revised = ride.is_revised
        row.is_paid = ride.is_paid
        row.cancelled_at = to_storage(ride.cancelled_at)
        row.cancellation_fee_applied = ride.cancellation_fee_applied

    def _to_domain(self, row: Ride) -> RideDomain:
        return RideDomain(
            ride_id=row.ride_id,
            user_id=row.user_id,
            driver_id=row.driver_id,
            pickup=row.pickup,
            dropoff=row.dropoff,
            stops=list(row.stops or []),
            date_time=from_storage(row.date_time),
            return_date_time=from_storage(row.return_date_time),
            is_round_trip=row.is_round_trip,
            transport_type=row.transport_type,
            transport_number=row.transport_number,
            direction=row.direction,
            status=RideStatus(row.status),
            fees=FeeMap.from_document(row.fees, legacy_fare=row.fare),
            duration=row.duration,
            is_revised=row.is_revised,
            is_paid=row.is_paid,
            cancelled_at=from_storage(row.cancelled_at),
            cancellation_fee_applied=row.cancellation_fee_applied,
            created_at=from_storage(row.created_at),
        )
