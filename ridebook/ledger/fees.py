"""Named fee components and the operations allowed to change them.

The total fare is always the rounded sum of the components present in a
`FeeMap`; nothing else is authoritative.
"""

import logging
import math
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from ridebook.core.exceptions import AuthorizationError, StateError, ValidationError

logger = logging.getLogger(__name__)

KNOWN_COMPONENTS = ("base", "reschedule", "day_of", "driver_addon")
DRIVER_EDITABLE_COMPONENTS = frozenset({"driver_addon"})


def round2(amount: float) -> float:
    """Round to cents, half away from zero."""
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class FeeMap(BaseModel):
    """Known fee components plus an open set of extra named amounts."""

    base: float | None = None
    reschedule: float | None = None
    day_of: float | None = None
    driver_addon: float | None = None
    extra: dict[str, float] = Field(default_factory=dict)

    @classmethod
    def from_document(
        cls, fees: dict[str, Any] | None, legacy_fare: float | None = None
    ) -> "FeeMap":
        """Build from a stored `fees` mapping; non-numeric values are ignored.

        Rides written before fees existed only carry a `fare`, which becomes `base`.
        """
        if not fees:
            return cls(base=legacy_fare or 0.0)

        known: dict[str, float] = {}
        extra: dict[str, float] = {}
        for key, value in fees.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            if key in KNOWN_COMPONENTS:
                known[key] = float(value)
            else:
                extra[key] = float(value)
        return cls(**known, extra=extra)

    def components(self) -> dict[str, float]:
        present = {
            name: getattr(self, name)
            for name in KNOWN_COMPONENTS
            if getattr(self, name) is not None
        }
        present.update(self.extra)
        return present

    def to_document(self) -> dict[str, float]:
        return self.components()

    def subtotal(self) -> float:
        return sum(self.components().values())

    def total(self) -> float:
        return round2(self.subtotal())


class FeeLedger:
    """Fee composition rules for ride creation, driver add-ons and reschedules."""

    DAYTIME_SURCHARGE = 20.0
    EVENING_SURCHARGE = 30.0
    DAYTIME_START_HOUR = 7
    EVENING_START_HOUR = 19
    # Evening window wraps past midnight and ends at 01:00.
    EVENING_END_HOUR = 1

    AIRPORT_RESCHEDULE_FEE = 20.0
    LOCAL_RESCHEDULE_FEE = 15.0
    RESCHEDULE_WINDOW = timedelta(hours=24)

    def __init__(self, timezone: ZoneInfo):
        self.timezone = timezone

    def initialize(self, base_fare: float, requested_at: datetime, now: datetime) -> FeeMap:
        if base_fare < 0:
            raise ValidationError("Base fare cannot be negative.")

        fees = FeeMap(base=round2(base_fare))
        surcharge = self.day_of_surcharge(requested_at, now)
        if surcharge:
            fees.day_of = surcharge
        return fees

    def day_of_surcharge(self, requested_at: datetime, now: datetime) -> float | None:
        """Short-notice surcharge for rides scheduled on the booking day."""
        ride_time = self._localize(requested_at)
        booked_at = self._localize(now)
        if ride_time.date() != booked_at.date():
            return None

        hour = ride_time.hour
        if self.DAYTIME_START_HOUR <= hour < self.EVENING_START_HOUR:
            return self.DAYTIME_SURCHARGE
        if hour >= self.EVENING_START_HOUR or hour < self.EVENING_END_HOUR:
            return self.EVENING_SURCHARGE
        return None

    def apply_driver_addon(self, fees: FeeMap, requested_total: float) -> FeeMap:
        """Set `driver_addon` so the total becomes `requested_total`.

        All other components are held fixed; the add-on may not be negative.
        """
        if (
            isinstance(requested_total, bool)
            or not math.isfinite(requested_total)
            or requested_total <= 0
        ):
            raise ValidationError("Fare must be a positive number.")
        if fees.base is None:
            raise StateError("Ride fees are not set up correctly.")

        others = fees.subtotal() - (fees.driver_addon or 0.0)
        addon = round2(requested_total - others)
        if addon < 0:
            raise ValidationError(
                "Driver add-on cannot be negative.",
                details={"requested_total": requested_total, "minimum_total": round2(others)},
            )
        return fees.model_copy(update={"driver_addon": addon})

    def rebase(self, fees: FeeMap, base_fare: float) -> FeeMap:
        """Replace `base` after the trip itself was re-priced."""
        if base_fare < 0:
            raise ValidationError("Base fare cannot be negative.")
        return fees.model_copy(update={"base": round2(base_fare)})

    def apply_reschedule(self, fees: FeeMap, reschedule_fee: float) -> FeeMap:
        """Replace the reschedule component; only the latest reschedule is charged."""
        if reschedule_fee < 0:
            raise ValidationError("Reschedule fee cannot be negative.")
        return fees.model_copy(update={"reschedule": round2(reschedule_fee)})

    def compute_reschedule_fee(
        self,
        is_airport: bool,
        is_local: bool,
        reschedule_requested_at: datetime,
        new_ride_time: datetime,
    ) -> float:
        lead_time = self._localize(new_ride_time) - self._localize(reschedule_requested_at)
        if timedelta(0) < lead_time <= self.RESCHEDULE_WINDOW:
            if is_airport:
                return self.AIRPORT_RESCHEDULE_FEE
            if is_local:
                return self.LOCAL_RESCHEDULE_FEE
        return 0.0

    def apply_edit(self, fees: FeeMap, patch: dict[str, Any], requester_is_driver: bool) -> FeeMap:
        """Validate a general-edit `fees` patch and return the merged fees.

        Nothing is applied unless every key in the patch is allowed.
        """
        if not requester_is_driver:
            raise AuthorizationError("Only drivers can change fees.")
        if not isinstance(patch, dict):
            raise ValidationError("Fees update must be an object.")

        disallowed = sorted(set(patch) - DRIVER_EDITABLE_COMPONENTS)
        if disallowed:
            raise ValidationError(
                f"Drivers can only update: {', '.join(sorted(DRIVER_EDITABLE_COMPONENTS))}",
                details={"disallowed": disallowed},
            )

        updates: dict[str, float] = {}
        for key, value in patch.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"Fee '{key}' must be a number.")
            if not math.isfinite(value):
                raise ValidationError(f"Fee '{key}' must be a finite number.")
            if value < 0:
                raise ValidationError(f"Fee '{key}' cannot be negative.")
            updates[key] = round2(value)
        return fees.model_copy(update=updates)

    def _localize(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.timezone)
        return moment.astimezone(self.timezone)
