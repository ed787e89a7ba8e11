from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from ridebook.api.auth import verify_api_key
from ridebook.api.dependencies import PrincipalDep, RideServiceDep
from ridebook.api.models.rides import (
    CompletionResponse,
    FareUpdateRequest,
    RescheduleRequest,
    RideListResponse,
    RideResponse,
    RidesCreatedResponse,
)
from ridebook.api.rate_limit import limiter
from ridebook.rides import RideRequest

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("", response_model=RidesCreatedResponse, status_code=201)
@limiter.limit("30/minute")
async def create_ride(
    request: Request,
    body: RideRequest,
    principal: PrincipalDep,
    service: RideServiceDep,
) -> RidesCreatedResponse:
    """Book a ride; hub round trips with a return time come back as two rides."""
    rides = await service.create_ride(principal, body)
    return RidesCreatedResponse(rides=[RideResponse.from_ride(r) for r in rides])


@router.get("", response_model=RideListResponse)
@limiter.limit("100/minute")
def list_rides(
    request: Request, principal: PrincipalDep, service: RideServiceDep
) -> RideListResponse:
    rides = [RideResponse.from_ride(r) for r in service.list_rides(principal)]
    return RideListResponse(rides=rides, count=len(rides))


@router.get("/{ride_id}", response_model=RideResponse)
@limiter.limit("100/minute")
def get_ride(
    request: Request, ride_id: str, principal: PrincipalDep, service: RideServiceDep
) -> RideResponse:
    return RideResponse.from_ride(service.get_ride(principal, ride_id))


@router.patch("/{ride_id}", response_model=RideResponse)
@limiter.limit("30/minute")
async def edit_ride(
    request: Request,
    ride_id: str,
    principal: PrincipalDep,
    service: RideServiceDep,
    updates: dict[str, Any] = Body(...),
) -> RideResponse:
    ride = await service.edit_ride(principal, ride_id, updates)
    return RideResponse.from_ride(ride)


@router.post("/{ride_id}/accept", response_model=RideResponse)
@limiter.limit("60/minute")
def accept_ride(
    request: Request, ride_id: str, principal: PrincipalDep, service: RideServiceDep
) -> RideResponse:
    return RideResponse.from_ride(service.accept_ride(principal, ride_id))


@router.post("/{ride_id}/reject", response_model=RideResponse)
@limiter.limit("60/minute")
def reject_ride(
    request: Request, ride_id: str, principal: PrincipalDep, service: RideServiceDep
) -> RideResponse:
    return RideResponse.from_ride(service.reject_ride(principal, ride_id))


@router.post("/{ride_id}/cancel", response_model=RideResponse)
@limiter.limit("60/minute")
def cancel_ride(
    request: Request, ride_id: str, principal: PrincipalDep, service: RideServiceDep
) -> RideResponse:
    return RideResponse.from_ride(service.cancel_ride(principal, ride_id))


@router.post("/{ride_id}/driver-cancel", response_model=RideResponse)
@limiter.limit("60/minute")
def cancel_ride_by_driver(
    request: Request, ride_id: str, principal: PrincipalDep, service: RideServiceDep
) -> RideResponse:
    return RideResponse.from_ride(service.cancel_ride_by_driver(principal, ride_id))


@router.post("/{ride_id}/complete", response_model=CompletionResponse)
@limiter.limit("60/minute")
def complete_ride(
    request: Request, ride_id: str, principal: PrincipalDep, service: RideServiceDep
) -> CompletionResponse:
    result = service.complete_ride(principal, ride_id)
    ride = RideResponse.from_ride(result.ride) if result.ride is not None else None
    return CompletionResponse(removed=result.removed, ride=ride)


@router.post("/{ride_id}/paid", response_model=RideResponse)
@limiter.limit("60/minute")
def mark_as_paid(
    request: Request, ride_id: str, principal: PrincipalDep, service: RideServiceDep
) -> RideResponse:
    return RideResponse.from_ride(service.mark_as_paid(principal, ride_id))


@router.put("/{ride_id}/fare", response_model=RideResponse)
@limiter.limit("30/minute")
def update_ride_fare(
    request: Request,
    ride_id: str,
    body: FareUpdateRequest,
    principal: PrincipalDep,
    service: RideServiceDep,
) -> RideResponse:
    """Driver sets a new total; the difference is recorded as the driver add-on."""
    return RideResponse.from_ride(service.update_ride_fare(principal, ride_id, body.fare))


@router.post("/{ride_id}/reschedule", response_model=RideResponse)
@limiter.limit("30/minute")
async def reschedule_ride(
    request: Request,
    ride_id: str,
    body: RescheduleRequest,
    principal: PrincipalDep,
    service: RideServiceDep,
) -> RideResponse:
    ride = await service.reschedule_ride(principal, ride_id, body.date, body.time)
    return RideResponse.from_ride(ride)
