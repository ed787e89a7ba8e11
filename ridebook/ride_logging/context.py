"""Ride-scoped fields attached to every log record emitted inside a block.

Fields live in a ContextVar, so concurrent requests handled on the same
event loop never see each other's ride.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

from .filters import current_correlation_id

_ride_fields: ContextVar[MappingProxyType[str, Any]] = ContextVar(
    "ride_fields", default=MappingProxyType({})
)


def current_log_fields() -> dict[str, Any]:
    return dict(_ride_fields.get())


class RideContextFilter(logging.Filter):
    """Copies the active ride fields onto the record without overriding explicit extras."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _ride_fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Layer `fields` over the current ones until the block exits."""
    token = _ride_fields.set(MappingProxyType({**_ride_fields.get(), **fields}))
    try:
        yield
    finally:
        _ride_fields.reset(token)


@contextmanager
def log_ride_context(ride_id: str, **fields: Any) -> Iterator[None]:
    """Tag records with `ride_id` plus any rider or driver ids.

    Outside a request the ride id doubles as the correlation id.
    """
    correlation_id = fields.pop("correlation_id", None) or current_correlation_id.get() or ride_id
    with log_context(ride_id=ride_id, correlation_id=correlation_id, **fields):
        yield
