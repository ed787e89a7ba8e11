from .directions_client import (
    HOME_BASE_SENTINEL,
    DirectionsClient,
    DirectionsRequestError,
    DirectionsServiceError,
    DirectionsTimeoutError,
    DistanceQuote,
)

__all__ = [
    "HOME_BASE_SENTINEL",
    "DirectionsClient",
    "DirectionsRequestError",
    "DirectionsServiceError",
    "DirectionsTimeoutError",
    "DistanceQuote",
]
