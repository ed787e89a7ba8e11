"""Error taxonomy shared by pricing, the ride lifecycle and the HTTP layer.

Transient errors may succeed when retried; permanent ones never will.
`status_code` is the HTTP status a caller sees. Errors left at 500 are
reported without their message so provider and storage internals stay
private.
"""

from typing import Any


class RideBookError(Exception):
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def is_client_error(self) -> bool:
        return self.status_code < 500


class TransientError(RideBookError):
    """Safe to retry."""


class NetworkError(TransientError):
    """Timeout or refused connection."""


class ServiceUnavailableError(TransientError):
    """A 5xx from an upstream provider."""


class PermanentError(RideBookError):
    """Retrying will not help."""


class ValidationError(PermanentError):
    status_code = 400


class RouteNotFoundError(PermanentError):
    """No route exists for the requested endpoints and departure time."""

    status_code = 400


class AuthorizationError(PermanentError):
    status_code = 403


class NotFoundError(PermanentError):
    status_code = 404


class StateError(PermanentError):
    """The ride's status forbids the change, e.g. new fees on a completed ride."""

    status_code = 409


class ConfigurationError(PermanentError):
    """A provider credential or the home-base address is missing."""
