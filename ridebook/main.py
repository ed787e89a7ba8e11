"""Process entry point: wire settings, storage and the routing client into the API."""

import logging
from zoneinfo import ZoneInfo

import uvicorn

from ridebook.api import create_app
from ridebook.db import init_database
from ridebook.geo import DirectionsClient
from ridebook.pricing import FareCalculator, LocationClassifier, default_pricing_config
from ridebook.ride_logging import setup_logging
from ridebook.rides import RideService
from ridebook.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    setup_logging(settings.log)
    logger.info("Starting ride booking service...")

    if settings.directions.api_key is None:
        logger.warning("DIRECTIONS_API_KEY is not set; fare requests will fail")
    if settings.home_base.address is None:
        logger.warning("HOME_BASE_ADDRESS is not set; airport and local fares will fail")

    session_factory = init_database(settings.database.path)

    pricing = default_pricing_config()
    classifier = LocationClassifier(pricing)
    directions = DirectionsClient.from_settings(settings)
    calculator = FareCalculator(directions, classifier, pricing)
    ride_service = RideService(
        session_factory,
        calculator,
        classifier,
        ZoneInfo(settings.scheduling.timezone),
    )

    app = create_app(ride_service, session_factory)

    logger.info("Serving ride booking API on port 8000")
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )


if __name__ == "__main__":
    main()
