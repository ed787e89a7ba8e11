"""FastAPI application factory for the ride booking API."""

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from slowapi.errors import RateLimitExceeded

from ridebook.api.errors import register_exception_handlers
from ridebook.api.middleware.correlation import CorrelationIdMiddleware
from ridebook.api.rate_limit import limiter, rate_limit_exceeded_handler
from ridebook.api.routes import fare, rides, users
from ridebook.rides import RideService
from ridebook.settings import get_settings

logger = logging.getLogger(__name__)


def create_app(ride_service: RideService, session_factory: Any) -> FastAPI:
    """Create FastAPI application with injected dependencies.

    Args:
        ride_service: RideService handling fares and the ride lifecycle
        session_factory: SQLAlchemy sessionmaker for profile lookups
    """
    app = FastAPI(
        title="Ride Booking API",
        version="0.1.0",
        description="Fare quotes, ride booking and fee ledger management",
    )

    # Traces for inbound requests and outbound routing-provider calls
    FastAPIInstrumentor.instrument_app(app)
    HTTPXClientInstrumentor().instrument()

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
    register_exception_handlers(app)

    app.state.ride_service = ride_service
    app.state.session_factory = session_factory

    settings = get_settings()
    origins = [origin.strip() for origin in settings.cors.origins.split(",") if origin.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(fare.router, prefix="/fare", tags=["fare"])
    app.include_router(rides.router, prefix="/rides", tags=["rides"])
    app.include_router(users.router, prefix="/users", tags=["users"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint for monitoring (unauthenticated for infrastructure)."""
        return {"status": "healthy"}

    return app
