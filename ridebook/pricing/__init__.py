from .config import AirportRate, PricingConfig, default_pricing_config
from .fare import DirectionsProvider, FareCalculator, FareQuote, RoundTripFare
from .locations import LocationClass, LocationClassifier, LocationKind

__all__ = [
    "AirportRate",
    "PricingConfig",
    "default_pricing_config",
    "DirectionsProvider",
    "FareCalculator",
    "FareQuote",
    "RoundTripFare",
    "LocationClass",
    "LocationClassifier",
    "LocationKind",
]
