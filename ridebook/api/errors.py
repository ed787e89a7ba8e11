"""Map domain exceptions to HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ridebook.core.exceptions import ConfigurationError, RideBookError, RouteNotFoundError

logger = logging.getLogger(__name__)

NO_ROUTE_MESSAGE = (
    "No route could be found for the selected date and time. Please check your input"
)
NOT_CONFIGURED_MESSAGE = "Service is not configured"
GENERIC_FAILURE_MESSAGE = "Failed to calculate fare. Please try again."


def _detail_for(exc: RideBookError) -> str:
    if isinstance(exc, RouteNotFoundError):
        return NO_ROUTE_MESSAGE
    if isinstance(exc, ConfigurationError):
        return NOT_CONFIGURED_MESSAGE
    if exc.is_client_error:
        return exc.message
    return GENERIC_FAILURE_MESSAGE


async def ridebook_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, RideBookError):
        raise exc

    where = f"{request.method} {request.url.path}"
    if isinstance(exc, ConfigurationError):
        logger.error(f"{where} needs configuration: {exc.message}")
    elif exc.is_client_error:
        logger.info(f"{where} rejected ({exc.status_code}): {exc.message}")
    else:
        logger.error(f"{where} failed: {type(exc).__name__}: {exc.message}", exc_info=exc)

    return JSONResponse(status_code=exc.status_code, content={"detail": _detail_for(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RideBookError, ridebook_error_handler)
