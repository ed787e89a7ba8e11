"""FastAPI dependency injection providers."""

from typing import Annotated, Any

from fastapi import Depends, Request

from ridebook.rides import RideService
from ridebook.user import Principal

from .auth import get_principal


def get_ride_service(request: Request) -> RideService:
    """Retrieve RideService from app state."""
    service: RideService = request.app.state.ride_service
    return service


def get_session_factory(request: Request) -> Any:
    """Retrieve the SQLAlchemy session factory from app state."""
    return request.app.state.session_factory


RideServiceDep = Annotated[RideService, Depends(get_ride_service)]
SessionFactoryDep = Annotated[Any, Depends(get_session_factory)]
PrincipalDep = Annotated[Principal, Depends(get_principal)]
