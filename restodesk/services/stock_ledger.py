"""
Stock ledger: lock, verify and decrement a batch of inventory lines.

Runs inside the caller's transaction so the decrements become visible together
with the order that consumes them. Any exception raised here is expected to
roll that transaction back.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Sequence

from restodesk.core.exceptions import (
    InsufficientStockError,
    StockConflictError,
    UnknownInventoryItemError,
)
from restodesk.models.inventory import InventoryItem

log = logging.getLogger(__name__)


class StockLine(NamedTuple):
    inventory_item_id: int
    qty: Decimal


class ReservedStock(NamedTuple):
    item: InventoryItem
    qty: Decimal
    remaining: Decimal


def merge_lines(lines: Sequence[StockLine]) -> List[StockLine]:
    """Sums repeated item ids; each id keeps the position of its first occurrence."""
    totals: Dict[int, Decimal] = {}
    for line in lines:
        totals[line.inventory_item_id] = totals.get(line.inventory_item_id, Decimal("0")) + line.qty
    return [StockLine(item_id, qty) for item_id, qty in totals.items()]


async def reserve_stock(restaurant_id: int, lines: Sequence[StockLine], conn: Any) -> List[ReservedStock]:
    """
    Decrements stock for every line or raises without touching anything.

    Lines must already be merged (one line per item id).
    """
    item_ids = [line.inventory_item_id for line in lines]

    # Lock the whole batch before looking at any line, always in ascending id order
    locked = await (
        InventoryItem.filter(restaurant_id=restaurant_id, id__in=item_ids)
        .order_by("id")
        .select_for_update()
        .using_db(conn)
    )
    stock = {item.id: item for item in locked}

    missing = [item_id for item_id in item_ids if item_id not in stock]
    if missing:
        raise UnknownInventoryItemError(missing)

    deficiencies: List[Dict[str, Any]] = [
        {
            "inventory_item_id": line.inventory_item_id,
            "requested": line.qty,
            "available": stock[line.inventory_item_id].quantity,
        }
        for line in lines
        if line.qty > stock[line.inventory_item_id].quantity
    ]
    if deficiencies:
        raise InsufficientStockError(deficiencies)

    reserved = []
    for line in lines:
        item = stock[line.inventory_item_id]
        remaining = item.quantity - line.qty
        # Applies only while stock still holds the locked value and covers the line
        updated = await (
            InventoryItem.filter(
                id=line.inventory_item_id,
                restaurant_id=restaurant_id,
                quantity=item.quantity,
                quantity__gte=line.qty,
            )
            .using_db(conn)
            .update(quantity=remaining)
        )
        if updated != 1:
            log.warning(
                f"Conditional decrement missed item {line.inventory_item_id} "
                f"(restaurant {restaurant_id}, qty {line.qty})"
            )
            raise StockConflictError(line.inventory_item_id)

        if remaining <= item.reorder_level:
            log.warning(
                f"Low stock for item {item.id} ({item.name}): {remaining} {item.unit} left, "
                f"reorder level {item.reorder_level}"
            )
        reserved.append(ReservedStock(item=item, qty=line.qty, remaining=remaining))

    return reserved
