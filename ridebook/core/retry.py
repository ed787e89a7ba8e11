"""Exponential backoff for calls to external providers."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from .exceptions import TransientError

if TYPE_CHECKING:
    from ridebook.settings import DirectionsSettings

T = TypeVar("T")
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 10.0
    retryable_exceptions: tuple[type[Exception], ...] = field(
        default_factory=lambda: (TransientError,)
    )

    @classmethod
    def from_settings(cls, settings: "DirectionsSettings") -> "RetryPolicy":
        return cls(
            max_attempts=settings.max_retries + 1,
            base_delay=settings.retry_base_delay,
        )

    def delay_for(self, attempt: int) -> float:
        """Backoff before the attempt following `attempt` (0-based)."""
        return min(self.base_delay * (self.multiplier**attempt), self.max_delay)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    operation_name: str = "operation",
) -> T:
    """Run `operation`, retrying transient failures with exponential backoff.

    Non-retryable exceptions propagate immediately. The last transient
    exception propagates once attempts are exhausted.
    """
    policy = policy or RetryPolicy()
    attempts = max(policy.max_attempts, 1)

    for attempt in range(attempts):
        try:
            return await operation()
        except policy.retryable_exceptions as e:
            if attempt == attempts - 1:
                logger.error(f"{operation_name} failed after {attempts} attempts: {e}")
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                f"{operation_name} failed (attempt {attempt + 1}/{attempts}), "
                f"retrying in {delay:.1f}s: {e}"
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")
