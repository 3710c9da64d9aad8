import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from restodesk.api.deps import get_request_context, require_staff
from restodesk.core.security import RequestContext
from restodesk.models.user import User
from restodesk.schemas.booking import (
    SLOT_TIME_PATTERN,
    AvailabilityResponse,
    BookingRequest,
    BookingResponse,
    BookingStatusUpdate,
)
from restodesk.schemas.response import SuccessResponse
from restodesk.services.booking_service import (
    capacity_left,
    create_booking,
    delete_booking,
    list_my_bookings,
    list_restaurant_bookings,
    update_booking_status,
)

router = APIRouter()


def _booking_data(booking) -> dict:
    data = BookingResponse.model_validate(booking).model_dump()
    user = booking.user  # A User only when prefetched, otherwise a pending query
    if isinstance(user, User):
        data["username"] = user.username
        data["email"] = user.email
    return data


@router.get("/availability", response_model=SuccessResponse)
async def availability_endpoint(
    restaurant_id: int = Query(..., alias="restaurantId"),
    date: datetime.date = Query(...),
    time: str = Query(..., pattern=SLOT_TIME_PATTERN),
):
    """Seats still free in one slot."""
    left = await capacity_left(restaurant_id, date, time)
    data = AvailabilityResponse(restaurant_id=restaurant_id, date=date, time=time, capacity_left=left)
    return SuccessResponse(data=data.model_dump())


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_booking_endpoint(payload: BookingRequest, ctx: RequestContext = Depends(get_request_context)):
    booking = await create_booking(
        ctx,
        restaurant_id=payload.restaurant_id,
        party_size=payload.party_size,
        date=payload.date,
        time=payload.time,
        notes=payload.notes,
    )
    return SuccessResponse(data=_booking_data(booking))


@router.get("/mine", response_model=SuccessResponse)
async def my_bookings_endpoint(ctx: RequestContext = Depends(get_request_context)):
    bookings = await list_my_bookings(ctx)
    return SuccessResponse(data=[_booking_data(b) for b in bookings])


@router.get("/", response_model=SuccessResponse)
async def restaurant_bookings_endpoint(
    date: Optional[datetime.date] = None,
    ctx: RequestContext = Depends(require_staff),
):
    """Bookings of the caller's restaurant, earliest slot first."""
    bookings = await list_restaurant_bookings(ctx, date)
    return SuccessResponse(data=[_booking_data(b) for b in bookings])


@router.patch("/{booking_id}/status", response_model=SuccessResponse)
async def update_booking_status_endpoint(
    booking_id: int,
    payload: BookingStatusUpdate,
    ctx: RequestContext = Depends(require_staff),
):
    booking = await update_booking_status(ctx, booking_id, payload.status)
    return SuccessResponse(data=_booking_data(booking))


@router.delete("/{booking_id}", response_model=SuccessResponse)
async def delete_booking_endpoint(booking_id: int, ctx: RequestContext = Depends(require_staff)):
    await delete_booking(ctx, booking_id)
    return SuccessResponse()
