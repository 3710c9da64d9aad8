import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from tortoise.transactions import in_transaction

from restodesk.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from restodesk.core.security import RequestContext
from restodesk.models.order import (
    FulfillmentMethod,
    MenuItem,
    Order,
    OrderInventoryLine,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from restodesk.models.inventory import QUANTITY_DECIMAL_PLACES, quantity_fits
from restodesk.models.restaurant import Restaurant
from restodesk.services.stock_ledger import ReservedStock, StockLine, merge_lines, reserve_stock

log = logging.getLogger(__name__)

# Forward moves of the kitchen board; cancelling is allowed from any of these states.
ORDER_TRANSITIONS = {
    OrderStatus.NEW: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.SERVED, OrderStatus.CANCELLED},
    OrderStatus.SERVED: set(),
    OrderStatus.CANCELLED: set(),
}


class OrderLinePolicy:
    """
    The part of order placement that differs between order kinds.

    ``validate`` runs before the transaction, ``reserve`` and ``record`` inside it.
    """
    payment_status = PaymentStatus.UNPAID

    async def validate(self, restaurant_id: int) -> None:
        raise NotImplementedError

    async def reserve(self, restaurant_id: int, conn: Any) -> Decimal:
        """Claims whatever the lines need and returns the order total."""
        raise NotImplementedError

    async def record(self, order: Order, conn: Any) -> None:
        raise NotImplementedError


class MenuPricing(OrderLinePolicy):
    """Menu-priced lines: unlimited stock, price taken from the current catalog."""
    payment_status = PaymentStatus.AUTHORIZED

    def __init__(self, lines: Sequence[Dict[str, Any]]):
        self.lines = list(lines)
        self.menu: Dict[int, MenuItem] = {}

    async def validate(self, restaurant_id: int) -> None:
        if not self.lines:
            raise BadRequestError("Order must contain items.")
        for line in self.lines:
            if int(line["qty"]) <= 0:
                raise BadRequestError(f"Invalid quantity for id={line['menu_item_id']}")

        menu_ids = {int(line["menu_item_id"]) for line in self.lines}
        menu_items = await MenuItem.filter(id__in=menu_ids, restaurant_id=restaurant_id, active=True)
        self.menu = {m.id: m for m in menu_items}
        for line in self.lines:
            if int(line["menu_item_id"]) not in self.menu:
                raise BadRequestError(f"Menu item not found (id={line['menu_item_id']})")

    async def reserve(self, restaurant_id: int, conn: Any) -> Decimal:
        return sum(
            (self.menu[int(line["menu_item_id"])].price * int(line["qty"]) for line in self.lines),
            Decimal("0"),
        )

    async def record(self, order: Order, conn: Any) -> None:
        for line in self.lines:
            menu = self.menu[int(line["menu_item_id"])]
            qty = int(line["qty"])
            await OrderItem.create(
                order=order,
                menu_item=menu,
                qty=qty,
                unit_price=menu.price,
                line_total=menu.price * qty,
                using_db=conn,
            )


class InventoryStock(OrderLinePolicy):
    """Lines drawn from restaurant inventory through the stock ledger."""
    payment_status = PaymentStatus.UNPAID

    def __init__(self, lines: Sequence[Dict[str, Any]]):
        self.requested = [StockLine(int(line["inventory_item_id"]), Decimal(str(line["qty"]))) for line in lines]
        self.reserved: List[ReservedStock] = []

    async def validate(self, restaurant_id: int) -> None:
        if not self.requested:
            raise BadRequestError("Add at least one inventory product.")
        for line in self.requested:
            if not line.qty.is_finite() or line.qty <= 0:
                raise BadRequestError(f"Invalid quantity for id={line.inventory_item_id}")
            if not quantity_fits(line.qty):
                raise BadRequestError(
                    f"Quantity for id={line.inventory_item_id} is out of range or has more than {QUANTITY_DECIMAL_PLACES} decimal places"
                )
        step = Decimal(1).scaleb(-QUANTITY_DECIMAL_PLACES)
        self.requested = [line._replace(qty=line.qty.quantize(step)) for line in self.requested]

    async def reserve(self, restaurant_id: int, conn: Any) -> Decimal:
        self.reserved = await reserve_stock(restaurant_id, merge_lines(self.requested), conn)
        return Decimal("0")

    async def record(self, order: Order, conn: Any) -> None:
        for entry in self.reserved:
            await OrderInventoryLine.create(
                order=order,
                inventory_item_id=entry.item.id,
                item_name=entry.item.name,
                unit=entry.item.unit,
                qty=entry.qty,
                using_db=conn,
            )


async def place_order(
    ctx: RequestContext,
    restaurant_id: int,
    policy: OrderLinePolicy,
    method: FulfillmentMethod = FulfillmentMethod.DINE_IN,
    table_number: Optional[str] = None,
    notes: Optional[str] = None,
) -> Order:
    """
    Validates, then claims the lines and writes the order in one transaction.
    Either everything commits or nothing is visible.
    """
    restaurant = await Restaurant.get_or_none(id=restaurant_id, active=True)
    if not restaurant:
        raise NotFoundError("Restaurant not found or inactive.")

    await policy.validate(restaurant_id)

    async with in_transaction() as conn:
        total = await policy.reserve(restaurant_id, conn)
        order = await Order.create(
            restaurant_id=restaurant_id,
            user_id=ctx.user_id,
            status=OrderStatus.NEW,
            method=FulfillmentMethod(method),
            table_number=table_number or None,
            notes=notes or None,
            payment_status=policy.payment_status,
            total_amount=total,
            using_db=conn,
        )
        await policy.record(order, conn)

    log.info(f"Order {order.id} placed at restaurant {restaurant_id} by user {ctx.user_id}.")
    return order


async def place_menu_order(ctx: RequestContext, restaurant_id: int, items: Sequence[Dict[str, Any]], **options) -> Order:
    return await place_order(ctx, restaurant_id, MenuPricing(items), **options)


async def place_inventory_order(ctx: RequestContext, restaurant_id: int, lines: Sequence[Dict[str, Any]], **options) -> Order:
    return await place_order(ctx, restaurant_id, InventoryStock(lines), **options)


async def list_menu(restaurant_id: Optional[int] = None) -> List[MenuItem]:
    query = MenuItem.filter(active=True)
    if restaurant_id:
        query = query.filter(restaurant_id=restaurant_id)
    return await query.order_by("id")


async def get_order_by_id(ctx: RequestContext, order_id: int) -> Order:
    """Fetches an order with both kinds of lines; visible to its placer and its restaurant's staff."""
    # Pre-fetch related entities to minimize DB queries (N+1 avoidance)
    order = await Order.get_or_none(id=order_id).prefetch_related("items", "items__menu_item", "inventory_lines")
    if not order:
        raise NotFoundError("Order not found")
    if order.user_id != ctx.user_id and not (ctx.is_staff and order.restaurant_id == ctx.restaurant_id):
        raise ForbiddenError("You cannot view this order")
    return order


async def list_my_orders(ctx: RequestContext) -> List[Order]:
    return await (
        Order.filter(user_id=ctx.user_id)
        .order_by("-id")
        .prefetch_related("items", "items__menu_item", "inventory_lines")
    )


async def list_restaurant_orders(ctx: RequestContext, status: Optional[OrderStatus] = None) -> List[Order]:
    query = Order.filter(restaurant_id=ctx.require_restaurant())
    if status:
        query = query.filter(status=status)
    return await query.order_by("-created_at", "-id").prefetch_related(
        "user", "items", "items__menu_item", "inventory_lines"
    )


async def update_order_status(ctx: RequestContext, order_id: int, new_status: OrderStatus) -> Order:
    """
    Moves an order of the caller's restaurant along the kitchen board.
    Served and cancelled orders are final.
    """
    restaurant_id = ctx.require_restaurant()
    new_status = OrderStatus(new_status)
    async with in_transaction() as conn:
        order = await (
            Order.filter(id=order_id, restaurant_id=restaurant_id)
            .select_for_update()
            .using_db(conn)
            .first()
        )
        if not order:
            raise NotFoundError("Order not found in your restaurant")

        old_status = OrderStatus(order.status)
        if new_status not in ORDER_TRANSITIONS[old_status]:
            raise BadRequestError(f"Cannot move order from {old_status.value} to {new_status.value}")

        order.status = new_status
        await order.save(update_fields=["status", "updated_at"], using_db=conn)

    log.info(f"Order {order_id} moved from {old_status.value} to {new_status.value}.")
    return order
