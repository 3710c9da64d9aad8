import logging
from decimal import Decimal
from typing import List, Optional

from restodesk.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from restodesk.core.security import RequestContext
from restodesk.models.inventory import QUANTITY_DECIMAL_PLACES, InventoryItem, quantity_fits
from restodesk.models.restaurant import Restaurant

log = logging.getLogger(__name__)

# Columns that cannot hold NULL; a None for these means "leave unchanged"
REQUIRED_FIELDS = ("name", "unit", "quantity", "reorder_level")


def _check_quantity(field: str, value: Decimal) -> None:
    if not value.is_finite() or value < 0:
        raise BadRequestError(f"{field} must be a finite, non-negative number")
    if not quantity_fits(value):
        raise BadRequestError(f"{field} is out of range or has more than {QUANTITY_DECIMAL_PLACES} decimal places")


async def list_items(ctx: RequestContext, restaurant_id: Optional[int] = None) -> List[InventoryItem]:
    """Staff see their own restaurant; admins see everything unless they pick one."""
    if ctx.is_admin:
        query = InventoryItem.filter(restaurant_id=restaurant_id) if restaurant_id else InventoryItem.all()
    else:
        query = InventoryItem.filter(restaurant_id=ctx.require_restaurant())
    return await query.order_by("name", "id")


async def list_restaurant_items(restaurant_id: int) -> List[InventoryItem]:
    return await InventoryItem.filter(restaurant_id=restaurant_id).order_by("name", "id")


async def create_item(
    ctx: RequestContext,
    name: str,
    sku: Optional[str] = None,
    unit: str = "unit",
    quantity: Decimal = Decimal("0"),
    reorder_level: Decimal = Decimal("0"),
    restaurant_id: Optional[int] = None,
) -> InventoryItem:
    if not name or not name.strip():
        raise BadRequestError("name is required")
    _check_quantity("quantity", quantity)
    _check_quantity("reorder_level", reorder_level)

    target = restaurant_id if ctx.is_admin else ctx.restaurant_id
    if not target:
        raise BadRequestError("restaurantId is required (or you have no associated restaurant)")
    if not await Restaurant.filter(id=target).exists():
        raise NotFoundError(f"Restaurant with ID {target} not found.")

    item = await InventoryItem.create(
        restaurant_id=target,
        name=name.strip(),
        sku=sku or None,
        unit=unit or "unit",
        quantity=quantity,
        reorder_level=reorder_level,
    )
    log.info(f"Inventory item {item.id} ({item.name}) created at restaurant {target}.")
    return item


async def _owned_item(ctx: RequestContext, item_id: int, action: str) -> InventoryItem:
    item = await InventoryItem.get_or_none(id=item_id)
    if not item:
        raise NotFoundError("Inventory item not found")
    if not ctx.is_admin and item.restaurant_id != ctx.restaurant_id:
        raise ForbiddenError(f"You cannot {action} items of another restaurant")
    return item


async def update_item(ctx: RequestContext, item_id: int, **changes) -> InventoryItem:
    """Applies only the fields that were given; only ``sku`` can be cleared with None."""
    item = await _owned_item(ctx, item_id, "edit")
    changes = {
        field: value for field, value in changes.items()
        if value is not None or field not in REQUIRED_FIELDS
    }
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        if not changes["name"]:
            raise BadRequestError("name must not be empty")
    for field in ("quantity", "reorder_level"):
        if field in changes:
            _check_quantity(field, changes[field])

    if changes:
        item.update_from_dict(changes)
        await item.save(update_fields=list(changes) + ["updated_at"])
        log.info(f"Inventory item {item_id} updated: {sorted(changes)}.")
    return item


async def delete_item(ctx: RequestContext, item_id: int) -> None:
    item = await _owned_item(ctx, item_id, "delete")
    await item.delete()
    log.info(f"Inventory item {item_id} deleted by user {ctx.user_id}.")
