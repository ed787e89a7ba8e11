"""Test doubles and shared addresses."""

from datetime import datetime
from zoneinfo import ZoneInfo

from ridebook.geo import HOME_BASE_SENTINEL, DistanceQuote

NEW_YORK = ZoneInfo("America/New_York")

JFK = "John F. Kennedy International Airport"
WESTCHESTER = "Westchester County Airport"
POUGHKEEPSIE_STATION = "Poughkeepsie Train Station, Poughkeepsie, NY, USA"
HOME = "42 Pine St, Anytown"
KINGSTON = "10 Elm St, Kingston, NY 12401"


class FakeDirections:
    """In-memory directions provider keyed by (origin, destination)."""

    def __init__(self, default_miles: float = 10.0, duration_minutes: int = 30):
        self.default_miles = default_miles
        self.duration_minutes = duration_minutes
        self.routes: dict[tuple[str, str], float] = {}
        self.calls: list[tuple[str, str, datetime | None, list[str] | None]] = []
        self.error: Exception | None = None

    def set_miles(self, origin: str, destination: str, miles: float) -> None:
        self.routes[(origin, destination)] = miles

    def set_from_home_base(self, destination: str, miles: float) -> None:
        self.set_miles(HOME_BASE_SENTINEL, destination, miles)

    def set_to_home_base(self, origin: str, miles: float) -> None:
        self.set_miles(origin, HOME_BASE_SENTINEL, miles)

    async def get_route(
        self,
        origin: str,
        destination: str,
        departure_time: datetime | None = None,
        stops: list[str] | None = None,
    ) -> DistanceQuote:
        self.calls.append((origin, destination, departure_time, stops))
        if self.error is not None:
            raise self.error
        miles = self.routes.get((origin, destination), self.default_miles)
        return DistanceQuote(distance_miles=miles, duration_minutes=self.duration_minutes)
