"""Request authentication: shared API key plus the acting user."""

import logging

from fastapi import Header, HTTPException, Request

from ridebook.db import UserRepository
from ridebook.settings import get_settings
from ridebook.user import Principal

logger = logging.getLogger(__name__)


def verify_api_key(x_api_key: str = Header(...)) -> str:
    """Validates API key from X-API-Key header."""
    api_key = get_settings().api.key

    if not api_key:
        raise HTTPException(status_code=500, detail="API_KEY not configured")

    if x_api_key != api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key


def get_principal(request: Request, x_user_id: str = Header(...)) -> Principal:
    """Resolve the acting user from X-User-Id against stored profiles."""
    with request.app.state.session_factory() as session:
        profile = UserRepository(session).get(x_user_id)

    if profile is None:
        logger.warning(f"Rejected request for unknown user {x_user_id}")
        raise HTTPException(status_code=401, detail="Unknown user")

    return Principal.from_profile(profile)
