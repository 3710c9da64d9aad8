import datetime

import pytest

from conftest import context_for, make_user
from restodesk.core.exceptions import BadRequestError, NotFoundError
from restodesk.models import BookingStatus, Reservation, UserRole
from restodesk.services.booking_service import (
    capacity_left,
    create_booking,
    delete_booking,
    list_my_bookings,
    list_restaurant_bookings,
    update_booking_status,
)

FRIDAY = datetime.date(2026, 10, 23)


@pytest.mark.asyncio
async def test_bookings_fill_a_slot_up_to_its_capacity(restaurant, customer_ctx):
    assert await capacity_left(restaurant.id, FRIDAY, "21:00") == 10

    await create_booking(customer_ctx, restaurant.id, 6, FRIDAY, "21:00")
    assert await capacity_left(restaurant.id, FRIDAY, "21:00") == 4

    with pytest.raises(BadRequestError) as excinfo:
        await create_booking(customer_ctx, restaurant.id, 5, FRIDAY, "21:00")
    assert excinfo.value.details == {"capacity_left": 4}

    # Other slots are independent
    await create_booking(customer_ctx, restaurant.id, 5, FRIDAY, "21:30")
    assert await Reservation.all().count() == 2


@pytest.mark.asyncio
async def test_finished_bookings_release_their_seats(restaurant, customer_ctx, employee_ctx):
    booking = await create_booking(customer_ctx, restaurant.id, 10, FRIDAY, "20:00")
    assert await capacity_left(restaurant.id, FRIDAY, "20:00") == 0

    await update_booking_status(employee_ctx, booking.id, BookingStatus.CANCELLED)

    assert await capacity_left(restaurant.id, FRIDAY, "20:00") == 10


@pytest.mark.asyncio
async def test_inactive_restaurant_cannot_be_booked(restaurant, customer_ctx):
    restaurant.active = False
    await restaurant.save()

    with pytest.raises(NotFoundError):
        await capacity_left(restaurant.id, FRIDAY, "20:00")
    with pytest.raises(NotFoundError):
        await create_booking(customer_ctx, restaurant.id, 2, FRIDAY, "20:00")


@pytest.mark.asyncio
async def test_booking_listings(restaurant, other_restaurant, customer_ctx, employee_ctx):
    late = await create_booking(customer_ctx, restaurant.id, 2, FRIDAY, "22:00", notes="window seat")
    early = await create_booking(customer_ctx, restaurant.id, 2, FRIDAY, "20:00")
    elsewhere = await create_booking(customer_ctx, other_restaurant.id, 2, FRIDAY, "20:00")

    assert [b.id for b in await list_my_bookings(customer_ctx)] == [late.id, elsewhere.id, early.id]

    board = await list_restaurant_bookings(employee_ctx)
    assert [b.id for b in board] == [early.id, late.id]
    assert board[0].user.username == customer_ctx.username

    assert await list_restaurant_bookings(employee_ctx, FRIDAY + datetime.timedelta(days=1)) == []


@pytest.mark.asyncio
async def test_staff_manage_only_their_restaurant_bookings(restaurant, other_restaurant, customer_ctx, employee_ctx):
    ours = await create_booking(customer_ctx, restaurant.id, 2, FRIDAY, "20:00")
    theirs = await create_booking(customer_ctx, other_restaurant.id, 2, FRIDAY, "20:00")

    with pytest.raises(NotFoundError):
        await update_booking_status(employee_ctx, theirs.id, BookingStatus.CONFIRMED)
    with pytest.raises(NotFoundError):
        await delete_booking(employee_ctx, theirs.id)

    confirmed = await update_booking_status(employee_ctx, ours.id, BookingStatus.CONFIRMED)
    assert confirmed.status == BookingStatus.CONFIRMED

    await delete_booking(employee_ctx, ours.id)
    assert await Reservation.filter(id=ours.id).exists() is False


@pytest.mark.asyncio
async def test_staff_without_restaurant_cannot_list(db):
    drifter = context_for(await make_user("drifter", UserRole.EMPLOYEE))

    with pytest.raises(BadRequestError):
        await list_restaurant_bookings(drifter)
