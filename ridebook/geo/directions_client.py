import logging
import math
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, Field, SecretStr

from ridebook.core.exceptions import (
    ConfigurationError,
    NetworkError,
    PermanentError,
    RouteNotFoundError,
    ServiceUnavailableError,
)
from ridebook.core.retry import RetryPolicy, with_retry

if TYPE_CHECKING:
    from ridebook.settings import Settings

logger = logging.getLogger(__name__)

METERS_PER_MILE = 1609.34
COMPUTE_ROUTES_PATH = "/directions/v2:computeRoutes"
FIELD_MASK = "routes.duration,routes.distanceMeters"

# Stands in for the home-base address, which never appears in source.
HOME_BASE_SENTINEL = "__WOODSTOCK__"


class DistanceQuote(BaseModel):
    distance_miles: float = Field(ge=0)
    duration_minutes: int = Field(ge=0)


class DirectionsServiceError(ServiceUnavailableError):
    """Routing provider error (5xx or network). Retryable."""


class DirectionsTimeoutError(NetworkError):
    """Routing provider request timed out. Retryable."""


class DirectionsRequestError(PermanentError):
    """Routing provider rejected the request (4xx). Not retryable."""


def parse_duration_seconds(duration: Any) -> int:
    """Accept "1234s" strings as well as {"seconds": ...} objects."""
    if duration is None:
        return 0
    if isinstance(duration, str):
        return int(float(duration.rstrip("s") or 0))
    if isinstance(duration, dict):
        return int(duration.get("seconds") or 0)
    return int(duration)


def seconds_to_minutes(seconds: int) -> int:
    return math.floor(seconds / 60 + 0.5)


class DirectionsClient:
    """Google Routes API adapter returning miles and whole minutes."""

    def __init__(
        self,
        api_key: SecretStr | None,
        home_base_address: SecretStr | None,
        base_url: str = "https://routes.googleapis.com",
        timeout: float = 10.0,
        retry_policy: RetryPolicy | None = None,
    ):
        self.api_key = api_key
        self.home_base_address = home_base_address
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DirectionsClient":
        return cls(
            api_key=settings.directions.api_key,
            home_base_address=settings.home_base.address,
            base_url=settings.directions.base_url,
            timeout=settings.directions.timeout_seconds,
            retry_policy=RetryPolicy.from_settings(settings.directions),
        )

    async def get_route(
        self,
        origin: str,
        destination: str,
        departure_time: datetime | None = None,
        stops: list[str] | None = None,
    ) -> DistanceQuote:
        """Distance and duration between two addresses, optionally via stops.

        Raises RouteNotFoundError when the provider has no route (or keeps
        timing out), ConfigurationError when credentials are missing.
        """
        api_key = self._require_api_key()
        body = self._build_request_body(
            self._resolve_address(origin),
            self._resolve_address(destination),
            departure_time,
            stops,
        )

        try:
            return await with_retry(
                lambda: self._compute_route(api_key, body),
                policy=self.retry_policy,
                operation_name="directions.compute_route",
            )
        except DirectionsTimeoutError as e:
            raise RouteNotFoundError(
                "No routes found: directions request timed out",
                details={"timeout_seconds": self.timeout},
            ) from e

    async def _compute_route(self, api_key: str, body: dict[str, Any]) -> DistanceQuote:
        url = f"{self.base_url}{COMPUTE_ROUTES_PATH}"
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": api_key,
            "X-Goog-FieldMask": FIELD_MASK,
        }

        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=body, headers=headers)
        except httpx.TimeoutException as e:
            raise DirectionsTimeoutError(f"Request timed out after {self.timeout}s") from e
        except httpx.NetworkError as e:
            raise DirectionsServiceError(f"Network error: {e}") from e

        if response.status_code >= 500:
            raise DirectionsServiceError(f"Directions server error: {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            message = (data.get("error") or {}).get("message") or f"HTTP {response.status_code}"
            logger.warning(f"Directions request rejected: {message}")
            raise DirectionsRequestError(
                f"Failed to fetch directions: {message}",
                details={"status_code": response.status_code},
            )

        routes = data.get("routes") or []
        if not routes:
            raise RouteNotFoundError("Failed to fetch directions: No routes found.")

        route = routes[0]
        distance_meters = float(route.get("distanceMeters") or 0)
        duration_seconds = parse_duration_seconds(route.get("duration"))

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Directions route computed in {latency_ms:.0f}ms")

        return DistanceQuote(
            distance_miles=distance_meters / METERS_PER_MILE,
            duration_minutes=seconds_to_minutes(duration_seconds),
        )

    def _require_api_key(self) -> str:
        if self.api_key is None or not self.api_key.get_secret_value():
            raise ConfigurationError("Routes API key not set.")
        return self.api_key.get_secret_value()

    def _resolve_address(self, address: str) -> str:
        if address != HOME_BASE_SENTINEL:
            return address
        if self.home_base_address is None or not self.home_base_address.get_secret_value():
            raise ConfigurationError("Home base address not configured.")
        return self.home_base_address.get_secret_value()

    @staticmethod
    def _build_request_body(
        origin: str,
        destination: str,
        departure_time: datetime | None,
        stops: list[str] | None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "origin": {"address": origin},
            "destination": {"address": destination},
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE_OPTIMAL",
        }
        if departure_time is not None:
            if departure_time.tzinfo is None:
                departure_time = departure_time.replace(tzinfo=UTC)
            body["departureTime"] = (
                departure_time.astimezone(UTC).isoformat().replace("+00:00", "Z")
            )
        if stops:
            body["intermediates"] = [{"address": stop} for stop in stops]
        return body
