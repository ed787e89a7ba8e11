"""Per-request correlation ID for log records."""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ridebook.ride_logging import current_correlation_id

HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Take X-Correlation-ID from the request or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(HEADER) or uuid.uuid4().hex
        token = current_correlation_id.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            current_correlation_id.reset(token)
        response.headers[HEADER] = correlation_id
        return response
