from fastapi import APIRouter, Depends, Request

from ridebook.api.auth import verify_api_key
from ridebook.api.dependencies import PrincipalDep, RideServiceDep
from ridebook.api.models.fare import RescheduleQuoteRequest, RescheduleQuoteResponse
from ridebook.api.rate_limit import limiter
from ridebook.rides import FarePreview, FareRequest

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("", response_model=FarePreview, response_model_exclude_none=True)
@limiter.limit("60/minute")
async def preview_fare(
    request: Request,
    body: FareRequest,
    principal: PrincipalDep,
    service: RideServiceDep,
) -> FarePreview:
    """Fare for a prospective trip, or a two-leg breakdown for hub round trips."""
    return await service.preview_fare(principal, body)


@router.post("/reschedule-quote", response_model=RescheduleQuoteResponse)
@limiter.limit("60/minute")
async def quote_reschedule_fee(
    request: Request,
    body: RescheduleQuoteRequest,
    principal: PrincipalDep,
    service: RideServiceDep,
) -> RescheduleQuoteResponse:
    fee = await service.quote_reschedule_fee(
        principal,
        body.date,
        body.time,
        ride_id=body.ride_id,
        pickup=body.pickup,
        dropoff=body.dropoff,
    )
    return RescheduleQuoteResponse(fee=fee)
