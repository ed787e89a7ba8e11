"""Pricing tables: known hub addresses, airport rates and mileage multipliers.

A `PricingConfig` is built once at startup and handed to the classifier and
the fare calculator. Table order matters: lookups scan airports and stations
in declaration order and the first match wins.
"""

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AirportRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    base: float = Field(ge=0)
    mileage_multiplier: float = Field(ge=0)


class PricingConfig(BaseModel):
    """Immutable pricing configuration."""

    model_config = ConfigDict(frozen=True)

    airport_addresses: Mapping[str, tuple[str, ...]]
    train_station_addresses: Mapping[str, tuple[str, ...]]
    airport_rates: Mapping[str, AirportRate]
    round_trip_multiplier: float = 2.3
    train_station_multiplier: float = 1.75
    short_trip_multiplier: float = 1.8
    long_trip_multiplier: float = 2.3
    long_trip_threshold_miles: float = 40.0
    transport_keywords: tuple[str, ...] = ()

    @field_validator("airport_addresses", "train_station_addresses", "airport_rates")
    @classmethod
    def freeze_mapping(cls, v: Mapping) -> Mapping:
        return MappingProxyType(dict(v))

    @model_validator(mode="after")
    def every_airport_has_a_rate(self) -> "PricingConfig":
        missing = [name for name in self.airport_addresses if name not in self.airport_rates]
        if missing:
            raise ValueError(f"No airport rate configured for: {', '.join(missing)}")
        return self


AIRPORT_ADDRESSES: dict[str, tuple[str, ...]] = {
    "JFK": (
        "John F. Kennedy International Airport, Jamaica, NY 11430",
        "John F. Kennedy International Airport (JFK), Queens, NY, USA",
        "John F. Kennedy International Airport",
        "JFK Terminal 1, Jamaica, NY 11430, USA",
        "JFK Terminal 2, Jamaica, NY 11430, USA",
        "JFK Terminal 3, Jamaica, NY 11430, USA",
        "JFK Terminal 4, Jamaica, NY 11430, USA",
        "JFK Terminal 5, Jamaica, NY 11430, USA",
        "JFK Terminal 6, Jamaica, NY 11430, USA",
        "JFK Terminal 7, Jamaica, NY 11430, USA",
        "JFK Terminal 8, Jamaica, NY 11430, USA",
        "318 Federal Cir, Queens, NY 11430, USA",
        "JFK Terminal 1, 500 Terminal Dr, Jamaica, NY 11430, USA",
        "JFK International Air Terminal LLC, Terminal 4, Room 161.022, Jamaica, NY 11430",
        "JetBlue Airways, Terminal 5, JFK International Airport, Jamaica, NY 11430",
        "JFK Expressway & South Cargo Road, Jamaica, NY 11430",
        "Building 14, Jamaica, NY 11430",
        "Building 77, JFK International Airport, Jamaica, NY 11430",
        "Cargo Area D, Old Rockaway Blvd, Jamaica, NY 11430",
        "Building 71, Cargo Area D, Old Rockaway Blvd, Jamaica, NY 11430",
        "Cargo Building 23, JFK International Airport, Jamaica, NY 11430",
        "Cargo Building 151, JFK International Airport, Jamaica, NY 11430",
        "Cargo Building 86, JFK International Airport, Jamaica, NY 11430",
    ),
    "Newark": (
        "Newark Liberty International Airport",
        "Newark Liberty International Airport (EWR), Newark, NJ, USA",
        "Newark Liberty International Airport, 3 Brewster Rd, Newark, NJ 07114",
        "6 Earhart Dr, Newark, NJ 07114",
        "Building 344, Brewster Road, Newark, NJ 07114",
        "339-3 Brewster Rd, Newark, NJ 07114",
        "Located at Newark Liberty International Airport, Newark, NJ 07114",
    ),
    "Albany": (
        "Albany International Airport",
        "Albany International Airport (ALB), Albany Shaker Road, Albany, NY, USA",
        "Albany International Airport, 737 Albany Shaker Rd, Albany, NY 12211",
        "737 Albany-Shaker Rd, Administration Bldg, Room 200, Albany, NY 12211",
        "16 Jetway Dr, Albany, NY 12211",
    ),
    "Stewart": (
        "New York Stewart International Airport",
        "Stewart International Airport (SWF), 1st Street, New Windsor, NY, USA",
        "New York Stewart International Airport, 1180 1st St, New Windsor, NY 12553",
        "1188 1st St, New Windsor, NY 12553",
        "1032 1st St, Building 112, New Windsor, NY 12553",
        "3 Express Dr, Newburgh, NY 12550",
    ),
    "Westchester": (
        "Westchester County Airport (HPN), Airport Road, West Harrison, NY, USA",
        "Westchester County Airport",
        "Westchester County Airport, 240 Airport Rd, Suite 202, White Plains, NY 10604",
        "County of Westchester, County Office Bldg, White Plains, NY 10604",
        "1 Loop Rd, White Plains, NY 10604",
    ),
    "Laguardia": (
        "LaGuardia Airport (LGA), East Elmhurst, NY, USA",
        "LaGuardia Airport",
        "LaGuardia Airport, Queens, NY 11371",
        "Ditmars Blvd, East Elmhurst, NY 11369",
        "Hangar #7, Third Floor, Flushing, NY 11371",
        "Hangar 7, LaGuardia Airport, Flushing, NY 11371",
        "LaGuardia Airport, Central Terminal B, Suite CB1L-008B, Flushing, NY 11371",
    ),
}

TRAIN_STATION_ADDRESSES: dict[str, tuple[str, ...]] = {
    "Rhinecliff": (
        "455 Rhinecliff Road, Rhinecliff, NY 12574",
        "Hutton & Charles St, Rhinecliff, NY 12574",
    ),
    "Poughkeepsie": (
        "Poughkeepsie Train Station, Poughkeepsie, NY, USA",
        "Train station, Poughkeepsie, NY 12601, USA",
        "41 Main Street, Poughkeepsie, NY 12601",
        "32 N Water St, Poughkeepsie, NY 12601",
    ),
}

AIRPORT_RATES: dict[str, AirportRate] = {
    "Newark": AirportRate(base=165, mileage_multiplier=1.5),
    "Laguardia": AirportRate(base=165, mileage_multiplier=1.5),
    "JFK": AirportRate(base=185, mileage_multiplier=1.5),
    "Albany": AirportRate(base=100, mileage_multiplier=1.5),
    "Stewart": AirportRate(base=100, mileage_multiplier=1.5),
    "Westchester": AirportRate(base=140, mileage_multiplier=1.5),
}

# Loose hub detection only; these never select a pricing rule.
TRANSPORT_KEYWORDS: tuple[str, ...] = (
    "airport",
    "train station",
    "bus station",
    "railway",
    "depot",
    "terminal",
    "port",
    "transit",
    "metro",
    "subway",
    "station",
    "bus terminal",
    "transportation hub",
    "transit center",
)


def default_pricing_config() -> PricingConfig:
    """Build the production pricing configuration."""
    return PricingConfig(
        airport_addresses=AIRPORT_ADDRESSES,
        train_station_addresses=TRAIN_STATION_ADDRESSES,
        airport_rates=AIRPORT_RATES,
        transport_keywords=TRANSPORT_KEYWORDS,
    )
