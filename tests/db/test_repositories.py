from datetime import timedelta

import pytest

from ridebook.db import RideRepository, UserRepository, init_database, session_scope
from ridebook.ledger import FeeMap
from ridebook.ride import Ride, RideStatus
from ridebook.user import UserProfile
from tests.fakes import HOME, JFK


@pytest.fixture
def session_factory(tmp_path):
    return init_database(str(tmp_path / "rides.db"))


def make_ride(now, ride_id="ride-1", user_id="rider-1", **overrides) -> Ride:
    fields = dict(
        ride_id=ride_id,
        user_id=user_id,
        pickup=HOME,
        dropoff=JFK,
        stops=["Stop A"],
        date_time=now + timedelta(days=1),
        fees=FeeMap(base=200.0, day_of=20.0, extra={"tolls": 6.5}),
        duration=45,
        created_at=now,
    )
    fields.update(overrides)
    return Ride(**fields)


@pytest.mark.unit
class TestRideRepository:
    def test_create_and_get_round_trips_document(self, session_factory, now):
        ride = make_ride(now)
        with session_scope(session_factory) as session:
            RideRepository(session).create(ride)

        with session_factory() as session:
            stored = RideRepository(session).get("ride-1")

        assert stored is not None
        assert stored.fees == ride.fees
        assert stored.fare == 226.5
        assert stored.stops == ["Stop A"]
        assert stored.date_time == ride.date_time
        assert stored.status == RideStatus.PENDING

    def test_get_missing(self, session_factory):
        with session_factory() as session:
            assert RideRepository(session).get("nope") is None

    def test_save_overwrites(self, session_factory, now):
        ride = make_ride(now)
        with session_scope(session_factory) as session:
            RideRepository(session).create(ride)

        ride.status = RideStatus.ACCEPTED
        ride.driver_id = "driver-1"
        ride.replace_fees(ride.fees.model_copy(update={"driver_addon": 10.0}))
        with session_scope(session_factory) as session:
            RideRepository(session).save(ride)

        with session_factory() as session:
            stored = RideRepository(session).get("ride-1")
        assert stored.status == RideStatus.ACCEPTED
        assert stored.driver_id == "driver-1"
        assert stored.fare == 236.5

    def test_stored_fare_matches_fee_sum(self, session_factory, now):
        from ridebook.db.schema import Ride as RideRow

        with session_scope(session_factory) as session:
            RideRepository(session).create(make_ride(now))

        with session_factory() as session:
            row = session.get(RideRow, "ride-1")
            assert row.fare == sum(row.fees.values())

    def test_delete(self, session_factory, now):
        with session_scope(session_factory) as session:
            RideRepository(session).create(make_ride(now))

        with session_scope(session_factory) as session:
            assert RideRepository(session).delete("ride-1")
            assert not RideRepository(session).delete("ride-1")

    def test_list_by_user_and_status(self, session_factory, now):
        with session_scope(session_factory) as session:
            repo = RideRepository(session)
            repo.create(make_ride(now, "r1", "rider-1"))
            repo.create(make_ride(now, "r2", "rider-2"))
            repo.create(make_ride(now, "r3", "rider-1", status=RideStatus.CANCELLED))

        with session_factory() as session:
            repo = RideRepository(session)
            assert {r.ride_id for r in repo.list_by_user("rider-1")} == {"r1", "r3"}
            assert [r.ride_id for r in repo.list_by_status(RideStatus.CANCELLED)] == ["r3"]

    def test_list_by_driver_orders_by_pickup_time(self, session_factory, now):
        with session_scope(session_factory) as session:
            repo = RideRepository(session)
            repo.create(
                make_ride(now, "late", driver_id="driver-1", date_time=now + timedelta(days=3))
            )
            repo.create(make_ride(now, "soon", driver_id="driver-1"))
            repo.create(make_ride(now, "other", driver_id="driver-2"))

        with session_factory() as session:
            rides = RideRepository(session).list_by_driver("driver-1")
        assert [r.ride_id for r in rides] == ["soon", "late"]

    def test_transaction_rolls_back(self, session_factory, now):
        with pytest.raises(RuntimeError):
            with session_scope(session_factory) as session:
                RideRepository(session).create(make_ride(now))
                raise RuntimeError("boom")

        with session_factory() as session:
            assert RideRepository(session).get("ride-1") is None


@pytest.mark.unit
class TestUserRepository:
    def test_upsert_and_get(self, session_factory):
        profile = UserProfile(id="d1", name="Dana", role="driver", phone_number="845-555-0100")
        with session_scope(session_factory) as session:
            UserRepository(session).upsert(profile)

        with session_scope(session_factory) as session:
            UserRepository(session).upsert(profile.model_copy(update={"name": "Dana R."}))

        with session_factory() as session:
            stored = UserRepository(session).get("d1")
        assert stored.name == "Dana R."
        assert stored.role == "driver"

    def test_in_memory_database(self):
        factory = init_database(":memory:")
        with session_scope(factory) as session:
            UserRepository(session).upsert(UserProfile(id="u1"))
        with factory() as session:
            assert UserRepository(session).get("u1") is not None
