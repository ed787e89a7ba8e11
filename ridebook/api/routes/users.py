import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from ridebook.api.auth import verify_api_key
from ridebook.api.dependencies import SessionFactoryDep
from ridebook.api.models.users import UserProfileResponse, UserProfileUpdate
from ridebook.api.rate_limit import limiter
from ridebook.db import UserRepository, session_scope
from ridebook.user import UserProfile

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.put("/{user_id}", response_model=UserProfileResponse)
@limiter.limit("30/minute")
def upsert_user(
    request: Request,
    user_id: str,
    body: UserProfileUpdate,
    session_factory: SessionFactoryDep,
    x_user_id: str = Header(...),
) -> UserProfileResponse:
    """Create or replace the caller's own profile.

    The caller may not have a stored profile yet, so identity is the
    X-User-Id header itself rather than a resolved principal.
    """
    if x_user_id != user_id:
        logger.warning(f"User {x_user_id} tried to write the profile of {user_id}")
        raise HTTPException(status_code=403, detail="You can only update your own profile.")

    profile = UserProfile(id=user_id, **body.model_dump())
    with session_scope(session_factory) as session:
        UserRepository(session).upsert(profile)
    logger.info(f"Saved {profile.role} profile {user_id}")
    return UserProfileResponse(**profile.model_dump())
