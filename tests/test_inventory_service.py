from decimal import Decimal

import pytest

from conftest import make_item, stock_of
from restodesk.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from restodesk.models import InventoryItem, OrderInventoryLine
from restodesk.services.inventory_service import (
    create_item,
    delete_item,
    list_items,
    list_restaurant_items,
    update_item,
)
from restodesk.services.order_service import place_inventory_order


@pytest.mark.asyncio
async def test_employee_creates_items_in_their_restaurant(restaurant, other_restaurant, employee_ctx):
    item = await create_item(
        employee_ctx,
        name="  Onions ",
        unit="kg",
        quantity=Decimal("3.5"),
        reorder_level=Decimal("1"),
        restaurant_id=other_restaurant.id,  # ignored for employees
    )

    assert item.restaurant_id == restaurant.id
    assert item.name == "Onions"
    assert await stock_of(item) == Decimal("3.5")


@pytest.mark.asyncio
async def test_admin_must_pick_an_existing_restaurant(restaurant, admin_ctx):
    with pytest.raises(BadRequestError):
        await create_item(admin_ctx, name="Garlic")
    with pytest.raises(NotFoundError):
        await create_item(admin_ctx, name="Garlic", restaurant_id=9999)

    item = await create_item(admin_ctx, name="Garlic", restaurant_id=restaurant.id)
    assert item.restaurant_id == restaurant.id


@pytest.mark.asyncio
async def test_negative_stock_cannot_be_entered(restaurant, employee_ctx):
    with pytest.raises(BadRequestError):
        await create_item(employee_ctx, name="Salt", quantity=Decimal("-1"))

    item = await make_item(restaurant, "Salt", 5)
    with pytest.raises(BadRequestError):
        await update_item(employee_ctx, item.id, quantity=Decimal("-0.5"))
    assert await stock_of(item) == Decimal("5")


@pytest.mark.asyncio
async def test_partial_update_keeps_untouched_fields(restaurant, employee_ctx):
    item = await make_item(restaurant, "Pepper", 5, reorder_level=1, unit="jar")

    await update_item(employee_ctx, item.id, quantity=Decimal("9"), sku=None, name=None)

    fresh = await InventoryItem.get(id=item.id)
    assert (fresh.name, fresh.unit, fresh.quantity, fresh.reorder_level) == ("Pepper", "jar", Decimal("9"), Decimal("1"))


@pytest.mark.asyncio
async def test_items_of_another_restaurant_are_off_limits(other_restaurant, employee_ctx, admin_ctx):
    theirs = await make_item(other_restaurant, "Saffron", 1)

    with pytest.raises(ForbiddenError):
        await update_item(employee_ctx, theirs.id, quantity=Decimal("0"))
    with pytest.raises(ForbiddenError):
        await delete_item(employee_ctx, theirs.id)
    with pytest.raises(NotFoundError):
        await delete_item(employee_ctx, 9999)

    await update_item(admin_ctx, theirs.id, quantity=Decimal("2"))
    assert await stock_of(theirs) == Decimal("2")


@pytest.mark.asyncio
async def test_listing_scopes(restaurant, other_restaurant, employee_ctx, admin_ctx):
    zucchini = await make_item(restaurant, "Zucchini", 1)
    apples = await make_item(restaurant, "Apples", 1)
    leeks = await make_item(other_restaurant, "Leeks", 1)

    assert [i.id for i in await list_items(employee_ctx)] == [apples.id, zucchini.id]
    assert [i.id for i in await list_items(employee_ctx, other_restaurant.id)] == [apples.id, zucchini.id]
    assert [i.id for i in await list_items(admin_ctx)] == [apples.id, leeks.id, zucchini.id]
    assert [i.id for i in await list_items(admin_ctx, other_restaurant.id)] == [leeks.id]
    assert [i.id for i in await list_restaurant_items(other_restaurant.id)] == [leeks.id]


@pytest.mark.asyncio
async def test_deleting_an_item_keeps_past_order_lines(restaurant, customer_ctx, employee_ctx):
    item = await make_item(restaurant, "Anchovies", 5, unit="tin")
    order = await place_inventory_order(customer_ctx, restaurant.id, [{"inventory_item_id": item.id, "qty": 2}])

    await delete_item(employee_ctx, item.id)

    assert await InventoryItem.filter(id=item.id).exists() is False
    line = await OrderInventoryLine.get(order_id=order.id)
    assert (line.item_name, line.unit, line.qty) == ("Anchovies", "tin", Decimal("2"))


@pytest.mark.asyncio
async def test_sku_can_be_cleared_but_required_fields_cannot(restaurant, employee_ctx):
    item = await create_item(employee_ctx, name="Capers", sku="CAP-01", unit="jar", quantity=Decimal("2"))

    await update_item(employee_ctx, item.id, sku=None, unit=None, quantity=None)

    fresh = await InventoryItem.get(id=item.id)
    assert fresh.sku is None
    assert (fresh.unit, fresh.quantity) == ("jar", Decimal("2"))


@pytest.mark.asyncio
async def test_stock_finer_than_the_column_is_rejected(restaurant, employee_ctx):
    with pytest.raises(BadRequestError):
        await create_item(employee_ctx, name="Vanilla", quantity=Decimal("0.0001"))

    item = await make_item(restaurant, "Vanilla", 1)
    with pytest.raises(BadRequestError):
        await update_item(employee_ctx, item.id, reorder_level=Decimal("0.2501"))
    assert await InventoryItem.all().count() == 1
