from datetime import UTC, datetime, timedelta

import pytest

from ridebook.core.exceptions import AuthorizationError, StateError, ValidationError
from ridebook.ledger import FeeLedger, FeeMap, round2
from tests.fakes import NEW_YORK


@pytest.fixture
def ledger() -> FeeLedger:
    return FeeLedger(NEW_YORK)


def at(hour: int, minute: int = 0, day: int = 10) -> datetime:
    return datetime(2026, 3, day, hour, minute, tzinfo=NEW_YORK)


@pytest.mark.unit
class TestRound2:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [(2.675, 2.68), (1.005, 1.01), (72.0000000001, 72.0), (-1.555, -1.56)],
    )
    def test_half_away_from_zero(self, amount, expected):
        assert round2(amount) == expected


@pytest.mark.unit
class TestFeeMap:
    def test_total_sums_present_components(self):
        fees = FeeMap(base=100.0, day_of=20.0, extra={"tolls": 4.5})
        assert fees.total() == 124.5
        assert fees.components() == {"base": 100.0, "day_of": 20.0, "tolls": 4.5}

    def test_from_document_keeps_unknown_numeric_keys(self):
        fees = FeeMap.from_document({"base": 80, "driver_addon": 5, "tolls": 3, "note": "x"})
        assert fees.base == 80
        assert fees.driver_addon == 5
        assert fees.extra == {"tolls": 3}
        assert fees.total() == 88

    def test_from_document_falls_back_to_legacy_fare(self):
        assert FeeMap.from_document(None, legacy_fare=95.5).components() == {"base": 95.5}


@pytest.mark.unit
class TestDayOfSurcharge:
    def test_daytime_same_day(self, ledger):
        assert ledger.day_of_surcharge(at(10), now=at(8)) == 20

    def test_evening_same_day(self, ledger):
        assert ledger.day_of_surcharge(at(20), now=at(8)) == 30

    def test_just_after_midnight(self, ledger):
        assert ledger.day_of_surcharge(at(0, 30), now=at(0, 5)) == 30

    def test_early_morning_has_no_surcharge(self, ledger):
        assert ledger.day_of_surcharge(at(1, 30), now=at(0, 5)) is None
        assert ledger.day_of_surcharge(at(6, 59), now=at(0, 5)) is None

    @pytest.mark.parametrize("hour", [0, 10, 20])
    def test_three_days_out(self, ledger, hour):
        assert ledger.day_of_surcharge(at(hour, day=13), now=at(8)) is None

    def test_calendar_day_uses_scheduling_timezone(self, ledger):
        # 22:00 in New York is already the next day in UTC.
        ride_time = at(22).astimezone(UTC)
        assert ride_time.day == 11
        assert ledger.day_of_surcharge(ride_time, now=at(9)) == 30

    def test_initialize_rounds_base(self, ledger):
        fees = ledger.initialize(100.456, at(10), now=at(8))
        assert fees.base == 100.46
        assert fees.day_of == 20
        assert fees.total() == 120.46

    def test_initialize_without_surcharge(self, ledger):
        fees = ledger.initialize(55.0, at(10, day=20), now=at(8))
        assert fees.components() == {"base": 55.0}


@pytest.mark.unit
class TestDriverAddon:
    def test_addon_is_delta_to_requested_total(self, ledger):
        fees = ledger.apply_driver_addon(FeeMap(base=100.0, day_of=20.0), 150)
        assert fees.driver_addon == 30
        assert fees.total() == 150

    def test_previous_addon_is_replaced_not_added(self, ledger):
        fees = ledger.apply_driver_addon(FeeMap(base=100.0, driver_addon=30.0), 110)
        assert fees.driver_addon == 10
        assert fees.total() == 110

    def test_requested_total_below_fixed_fees_is_rejected(self, ledger):
        with pytest.raises(ValidationError, match="negative"):
            ledger.apply_driver_addon(FeeMap(base=100.0, day_of=20.0), 110)

    @pytest.mark.parametrize("fare", [0, -5, float("nan"), float("inf"), float("-inf")])
    def test_non_positive_or_non_finite_total_rejected(self, ledger, fare):
        with pytest.raises(ValidationError):
            ledger.apply_driver_addon(FeeMap(base=100.0), fare)

    def test_missing_base_is_a_state_error(self, ledger):
        with pytest.raises(StateError):
            ledger.apply_driver_addon(FeeMap(day_of=20.0), 50)

    def test_other_components_untouched(self, ledger):
        original = FeeMap(base=100.0, reschedule=15.0, extra={"tolls": 5.0})
        fees = ledger.apply_driver_addon(original, 130)
        assert (fees.base, fees.reschedule, fees.extra) == (100.0, 15.0, {"tolls": 5.0})
        assert original.driver_addon is None


@pytest.mark.unit
class TestReschedule:
    def test_apply_replaces_previous_fee(self, ledger):
        fees = ledger.apply_reschedule(FeeMap(base=100.0, reschedule=20.0), 15)
        assert fees.reschedule == 15
        assert fees.total() == 115

    def test_airport_within_window(self, ledger):
        requested = at(9)
        new_time = requested + timedelta(hours=12)
        assert ledger.compute_reschedule_fee(True, False, requested, new_time) == 20

    def test_local_within_window(self, ledger):
        requested = at(9)
        new_time = requested + timedelta(hours=12)
        assert ledger.compute_reschedule_fee(False, True, requested, new_time) == 15

    def test_exactly_twenty_four_hours_is_inside(self, ledger):
        requested = at(9)
        new_time = requested + timedelta(hours=24)
        assert ledger.compute_reschedule_fee(True, False, requested, new_time) == 20

    def test_local_two_days_out_is_free(self, ledger):
        requested = at(9)
        new_time = requested + timedelta(days=2)
        assert ledger.compute_reschedule_fee(False, True, requested, new_time) == 0

    def test_long_trip_is_free(self, ledger):
        requested = at(9)
        new_time = requested + timedelta(hours=2)
        assert ledger.compute_reschedule_fee(False, False, requested, new_time) == 0

    def test_past_time_is_free(self, ledger):
        requested = at(9)
        new_time = requested - timedelta(hours=1)
        assert ledger.compute_reschedule_fee(True, False, requested, new_time) == 0


@pytest.mark.unit
class TestEditGating:
    def test_rider_cannot_touch_fees(self, ledger):
        with pytest.raises(AuthorizationError):
            ledger.apply_edit(FeeMap(base=100.0), {"driver_addon": 10}, requester_is_driver=False)

    def test_driver_may_set_addon(self, ledger):
        fees = ledger.apply_edit(
            FeeMap(base=100.0), {"driver_addon": 12.345}, requester_is_driver=True
        )
        assert fees.driver_addon == 12.35
        assert fees.total() == 112.35

    def test_any_other_key_fails_whole_patch(self, ledger):
        original = FeeMap(base=100.0)
        with pytest.raises(ValidationError, match="driver_addon"):
            ledger.apply_edit(original, {"driver_addon": 5, "base": 1}, requester_is_driver=True)
        assert original.driver_addon is None

    def test_negative_addon_rejected(self, ledger):
        with pytest.raises(ValidationError):
            ledger.apply_edit(FeeMap(base=100.0), {"driver_addon": -1}, requester_is_driver=True)

    @pytest.mark.parametrize("amount", [float("nan"), float("inf")])
    def test_non_finite_addon_rejected(self, ledger, amount):
        with pytest.raises(ValidationError, match="finite"):
            ledger.apply_edit(
                FeeMap(base=100.0), {"driver_addon": amount}, requester_is_driver=True
            )
