import datetime
import logging
from typing import List, Optional

from restodesk.core.exceptions import BadRequestError, NotFoundError
from restodesk.core.security import RequestContext
from restodesk.models.booking import ACTIVE_BOOKING_STATUSES, BookingStatus, Reservation
from restodesk.models.restaurant import Restaurant

log = logging.getLogger(__name__)


async def _active_restaurant(restaurant_id: int) -> Restaurant:
    restaurant = await Restaurant.get_or_none(id=restaurant_id, active=True)
    if not restaurant:
        raise NotFoundError("Restaurant not found or inactive.")
    return restaurant


async def seats_taken(restaurant_id: int, date: datetime.date, time: str) -> int:
    """Sum of party sizes of the active reservations in one slot."""
    sizes = await Reservation.filter(
        restaurant_id=restaurant_id,
        date=date,
        time=time,
        status__in=list(ACTIVE_BOOKING_STATUSES),
    ).values_list("party_size", flat=True)
    return sum(sizes)


async def capacity_left(restaurant_id: int, date: datetime.date, time: str) -> int:
    restaurant = await _active_restaurant(restaurant_id)
    used = await seats_taken(restaurant_id, date, time)
    return max(0, restaurant.slot_capacity - used)


async def create_booking(
    ctx: RequestContext,
    restaurant_id: int,
    party_size: int,
    date: datetime.date,
    time: str,
    notes: Optional[str] = None,
) -> Reservation:
    """
    Books a slot if enough seats are left.

    The capacity read and the insert are not serialized, so two simultaneous
    bookings can overfill a slot.
    """
    if party_size <= 0:
        raise BadRequestError("partySize must be positive")
    left = await capacity_left(restaurant_id, date, time)
    if party_size > left:
        raise BadRequestError("Not enough capacity left for that slot", details={"capacity_left": left})

    booking = await Reservation.create(
        restaurant_id=restaurant_id,
        user_id=ctx.user_id,
        party_size=party_size,
        date=date,
        time=time,
        notes=notes or None,
    )
    log.info(f"Booking {booking.id} for {party_size} at restaurant {restaurant_id} on {date} {time}.")
    return booking


async def list_my_bookings(ctx: RequestContext) -> List[Reservation]:
    return await Reservation.filter(user_id=ctx.user_id).order_by("-date", "-time", "-id")


async def list_restaurant_bookings(ctx: RequestContext, date: Optional[datetime.date] = None) -> List[Reservation]:
    query = Reservation.filter(restaurant_id=ctx.require_restaurant())
    if date:
        query = query.filter(date=date)
    return await query.order_by("date", "time", "id").prefetch_related("user")


async def _restaurant_booking(ctx: RequestContext, booking_id: int) -> Reservation:
    booking = await Reservation.get_or_none(id=booking_id, restaurant_id=ctx.require_restaurant())
    if not booking:
        raise NotFoundError("Booking not found in your restaurant")
    return booking


async def update_booking_status(ctx: RequestContext, booking_id: int, status: BookingStatus) -> Reservation:
    booking = await _restaurant_booking(ctx, booking_id)
    booking.status = BookingStatus(status)
    await booking.save(update_fields=["status"])
    log.info(f"Booking {booking_id} set to {booking.status.value}.")
    return booking


async def delete_booking(ctx: RequestContext, booking_id: int) -> None:
    booking = await _restaurant_booking(ctx, booking_id)
    await booking.delete()
    log.info(f"Booking {booking_id} deleted by user {ctx.user_id}.")
