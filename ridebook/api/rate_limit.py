"""Per-client request limits for the booking API."""

import hashlib
import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


def rate_limit_key(request: Request) -> str:
    """Bucket by API key and acting user; anonymous callers share their IP's bucket.

    The key is hashed so the limiter storage never holds the secret itself.
    """
    api_key = request.headers.get("X-API-Key")
    if not api_key:
        return f"ip:{get_remote_address(request)}"

    digest = hashlib.sha256(api_key.encode()).hexdigest()[:16]
    user_id = request.headers.get("X-User-Id")
    return f"key:{digest}:user:{user_id}" if user_id else f"key:{digest}"


limiter = Limiter(key_func=rate_limit_key)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    retry_after = exc.limit.limit.get_expiry()
    logger.warning(
        f"Rate limit {exc.detail} hit on {request.method} {request.url.path}; "
        f"retry in {retry_after}s"
    )
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
        headers={"Retry-After": str(retry_after)},
    )
