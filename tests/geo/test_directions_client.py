import json
from datetime import UTC, datetime

import httpx
import pytest
import respx
from httpx import Response
from pydantic import SecretStr

from ridebook.core.exceptions import ConfigurationError, RouteNotFoundError
from ridebook.core.retry import RetryPolicy
from ridebook.geo import (
    HOME_BASE_SENTINEL,
    DirectionsClient,
    DirectionsRequestError,
    DirectionsServiceError,
)
from ridebook.geo.directions_client import parse_duration_seconds, seconds_to_minutes

BASE_URL = "https://routes.test"
ROUTES_URL = f"{BASE_URL}/directions/v2:computeRoutes"


@pytest.fixture
def client() -> DirectionsClient:
    return DirectionsClient(
        api_key=SecretStr("test-key"),
        home_base_address=SecretStr("1 Home Base Rd, Woodstock, NY"),
        base_url=BASE_URL,
        retry_policy=RetryPolicy(max_attempts=3, base_delay=0.0),
    )


def route_response(meters: float = 16093.4, duration: object = "1800s") -> Response:
    return Response(200, json={"routes": [{"distanceMeters": meters, "duration": duration}]})


@pytest.mark.unit
class TestDurationParsing:
    @pytest.mark.parametrize(
        ("duration", "seconds"),
        [
            ("1800s", 1800),
            ("90.5s", 90),
            ({"seconds": 120}, 120),
            ({"seconds": "75"}, 75),
            (None, 0),
        ],
    )
    def test_both_provider_forms(self, duration, seconds):
        assert parse_duration_seconds(duration) == seconds

    @pytest.mark.parametrize(("seconds", "minutes"), [(89, 1), (90, 2), (0, 0), (3600, 60)])
    def test_minutes_round_half_up(self, seconds, minutes):
        assert seconds_to_minutes(seconds) == minutes


@pytest.mark.unit
class TestGetRoute:
    async def test_converts_meters_and_seconds(self, client):
        async with respx.mock:
            respx.post(ROUTES_URL).mock(return_value=route_response())

            quote = await client.get_route("A", "B")

        assert quote.distance_miles == pytest.approx(10.0)
        assert quote.duration_minutes == 30

    async def test_structured_duration(self, client):
        async with respx.mock:
            respx.post(ROUTES_URL).mock(return_value=route_response(duration={"seconds": 600}))

            quote = await client.get_route("A", "B")

        assert quote.duration_minutes == 10

    async def test_request_shape(self, client):
        departure = datetime(2026, 3, 10, 14, 30, tzinfo=UTC)
        async with respx.mock:
            route = respx.post(ROUTES_URL).mock(return_value=route_response())

            await client.get_route("A", "B", departure, stops=["C", "D"])

        request = route.calls.last.request
        body = json.loads(request.content)
        assert request.headers["X-Goog-Api-Key"] == "test-key"
        assert request.headers["X-Goog-FieldMask"] == "routes.duration,routes.distanceMeters"
        assert body["origin"] == {"address": "A"}
        assert body["destination"] == {"address": "B"}
        assert body["travelMode"] == "DRIVE"
        assert body["routingPreference"] == "TRAFFIC_AWARE_OPTIMAL"
        assert body["departureTime"] == "2026-03-10T14:30:00Z"
        assert body["intermediates"] == [{"address": "C"}, {"address": "D"}]

    async def test_home_base_sentinel_is_resolved(self, client):
        async with respx.mock:
            route = respx.post(ROUTES_URL).mock(return_value=route_response())

            await client.get_route(HOME_BASE_SENTINEL, "B")

        body = json.loads(route.calls.last.request.content)
        assert body["origin"] == {"address": "1 Home Base Rd, Woodstock, NY"}
        assert "intermediates" not in body
        assert "departureTime" not in body


@pytest.mark.unit
class TestGetRouteErrors:
    async def test_no_routes(self, client):
        async with respx.mock:
            route = respx.post(ROUTES_URL).mock(return_value=Response(200, json={}))

            with pytest.raises(RouteNotFoundError):
                await client.get_route("A", "B")

        assert route.call_count == 1

    async def test_server_errors_are_retried(self, client):
        async with respx.mock:
            route = respx.post(ROUTES_URL).mock(
                side_effect=[Response(503), Response(502), route_response()]
            )

            quote = await client.get_route("A", "B")

        assert route.call_count == 3
        assert quote.duration_minutes == 30

    async def test_server_errors_exhaust_retries(self, client):
        async with respx.mock:
            route = respx.post(ROUTES_URL).mock(return_value=Response(500))

            with pytest.raises(DirectionsServiceError):
                await client.get_route("A", "B")

        assert route.call_count == 3

    async def test_timeout_surfaces_as_route_not_found(self, client):
        async with respx.mock:
            route = respx.post(ROUTES_URL).mock(side_effect=httpx.ReadTimeout("slow"))

            with pytest.raises(RouteNotFoundError):
                await client.get_route("A", "B")

        assert route.call_count == 3

    async def test_client_error_is_not_retried(self, client):
        async with respx.mock:
            route = respx.post(ROUTES_URL).mock(
                return_value=Response(403, json={"error": {"message": "API key invalid"}})
            )

            with pytest.raises(DirectionsRequestError, match="API key invalid"):
                await client.get_route("A", "B")

        assert route.call_count == 1

    async def test_missing_api_key(self):
        client = DirectionsClient(api_key=None, home_base_address=SecretStr("x"), base_url=BASE_URL)
        async with respx.mock(assert_all_called=False):
            route = respx.post(ROUTES_URL).mock(return_value=route_response())

            with pytest.raises(ConfigurationError):
                await client.get_route("A", "B")

        assert not route.called

    async def test_missing_home_base(self):
        client = DirectionsClient(
            api_key=SecretStr("test-key"), home_base_address=None, base_url=BASE_URL
        )
        async with respx.mock(assert_all_called=False):
            route = respx.post(ROUTES_URL).mock(return_value=route_response())

            with pytest.raises(ConfigurationError):
                await client.get_route("A", HOME_BASE_SENTINEL)

        assert not route.called
