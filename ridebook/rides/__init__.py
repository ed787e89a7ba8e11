from .models import (
    CompletionResult,
    FarePreview,
    FareRequest,
    RideEdit,
    RideRequest,
    parse_local_datetime,
)
from .service import RideService

__all__ = [
    "CompletionResult",
    "FarePreview",
    "FareRequest",
    "RideEdit",
    "RideRequest",
    "RideService",
    "parse_local_datetime",
]
