"""Classification of addresses into airports, train stations and everything else."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .config import PricingConfig


class LocationKind(str, Enum):
    AIRPORT = "airport"
    TRAIN_STATION = "train_station"
    GENERIC = "generic"


class LocationClass(BaseModel):
    """Pricing class of a location or trip. `name` is set for hubs only."""

    model_config = ConfigDict(frozen=True)

    kind: LocationKind
    name: str | None = None

    @classmethod
    def airport(cls, name: str) -> "LocationClass":
        return cls(kind=LocationKind.AIRPORT, name=name)

    @classmethod
    def train_station(cls, name: str) -> "LocationClass":
        return cls(kind=LocationKind.TRAIN_STATION, name=name)

    @classmethod
    def generic(cls) -> "LocationClass":
        return cls(kind=LocationKind.GENERIC)

    @property
    def is_airport(self) -> bool:
        return self.kind == LocationKind.AIRPORT

    @property
    def is_train_station(self) -> bool:
        return self.kind == LocationKind.TRAIN_STATION


class LocationClassifier:
    """Matches addresses against the configured hub tables.

    Fare rules use exact membership only. `is_transport_location` is a looser
    predicate for booking-flow branching: it also accepts substrings and
    keywords, so generic strings such as "Portland Ave" count as hubs.
    """

    def __init__(self, config: PricingConfig):
        self.config = config

    def classify(self, address: str) -> LocationClass:
        for name, addresses in self.config.airport_addresses.items():
            if address in addresses:
                return LocationClass.airport(name)
        for name, addresses in self.config.train_station_addresses.items():
            if address in addresses:
                return LocationClass.train_station(name)
        return LocationClass.generic()

    def classify_trip(self, pickup: str, dropoff: str) -> LocationClass:
        """Pricing class of a pickup/dropoff pair.

        Airports are checked before train stations; within each table the
        first entry (in declaration order) listing either endpoint wins.
        """
        for name, addresses in self.config.airport_addresses.items():
            if pickup in addresses or dropoff in addresses:
                return LocationClass.airport(name)
        for name, addresses in self.config.train_station_addresses.items():
            if pickup in addresses or dropoff in addresses:
                return LocationClass.train_station(name)
        return LocationClass.generic()

    def non_hub_endpoint(self, trip_class: LocationClass, pickup: str, dropoff: str) -> str:
        """The endpoint that is not the matched hub (pickup unless pickup is the hub)."""
        hub_addresses = self._addresses_for(trip_class)
        if pickup in hub_addresses:
            return dropoff
        return pickup

    def is_airport_ride(self, pickup: str, dropoff: str) -> bool:
        return self.classify_trip(pickup, dropoff).is_airport

    def is_transport_location(self, location: str) -> bool:
        if not location:
            return False

        location_lower = location.lower()
        tables = (self.config.airport_addresses, self.config.train_station_addresses)
        for table in tables:
            for addresses in table.values():
                for address in addresses:
                    address_lower = address.lower()
                    if address_lower in location_lower or location_lower in address_lower:
                        return True

        return any(keyword in location_lower for keyword in self.config.transport_keywords)

    def _addresses_for(self, location_class: LocationClass) -> tuple[str, ...]:
        if location_class.is_airport and location_class.name is not None:
            return self.config.airport_addresses[location_class.name]
        if location_class.is_train_station and location_class.name is not None:
            return self.config.train_station_addresses[location_class.name]
        return ()
