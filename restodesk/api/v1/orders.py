from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from restodesk.api.deps import get_request_context, require_staff
from restodesk.core.security import RequestContext
from restodesk.models.order import OrderStatus
from restodesk.models.user import User
from restodesk.schemas.order import (
    InventoryOrderRequest,
    MenuItemResponse,
    MenuOrderRequest,
    OrderDetailResponse,
    OrderInventoryLineResponse,
    OrderItemResponse,
    OrderPlacementResponse,
    OrderStatusUpdate,
)
from restodesk.schemas.response import SuccessResponse
from restodesk.services.order_service import (
    get_order_by_id,
    list_menu,
    list_my_orders,
    list_restaurant_orders,
    place_inventory_order,
    place_menu_order,
    update_order_status,
)

router = APIRouter()


def _order_detail(order) -> dict:
    """Flattens an order with prefetched lines into the response schema."""
    items = [
        OrderItemResponse(
            menu_item_id=i.menu_item_id,
            name=i.menu_item.name,
            qty=i.qty,
            unit_price=i.unit_price,
            line_total=i.line_total,
        )
        for i in order.items
    ]
    inventory_lines = [
        OrderInventoryLineResponse(
            inventory_item_id=line.inventory_item_id,
            name=line.item_name,
            unit=line.unit,
            qty=line.qty,
        )
        for line in order.inventory_lines
    ]
    user = order.user  # A User only when prefetched, otherwise a pending query
    return OrderDetailResponse(
        id=order.id,
        restaurant_id=order.restaurant_id,
        user_id=order.user_id,
        status=order.status,
        method=order.method,
        table_number=order.table_number,
        notes=order.notes,
        payment_status=order.payment_status,
        total_amount=order.total_amount,
        created_at=str(order.created_at),
        items=items,
        inventory_lines=inventory_lines,
        username=user.username if isinstance(user, User) else None,
        email=user.email if isinstance(user, User) else None,
    ).model_dump()


@router.get("/menu", response_model=SuccessResponse)
async def menu_endpoint(restaurant_id: Optional[int] = Query(None, alias="restaurantId")):
    """Active menu items, optionally for one restaurant."""
    menu = await list_menu(restaurant_id)
    return SuccessResponse(data=[MenuItemResponse.model_validate(m).model_dump() for m in menu])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(request_data: MenuOrderRequest, ctx: RequestContext = Depends(get_request_context)):
    """Places a menu-priced order. Payment is recorded as authorized."""
    order = await place_menu_order(
        ctx,
        request_data.restaurant_id,
        [item.model_dump() for item in request_data.items],
        method=request_data.method,
        table_number=request_data.table_number,
        notes=request_data.notes,
    )
    return SuccessResponse(data=OrderPlacementResponse(order_id=order.id).model_dump())


@router.post("/from-inventory", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_inventory_order_endpoint(
    request_data: InventoryOrderRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Places an order drawn from the restaurant's stock.

    Short lines come back as a 400 listing every deficiency; a 409 means stock
    changed concurrently and the same request can be retried.
    """
    order = await place_inventory_order(
        ctx,
        request_data.restaurant_id,
        [line.model_dump() for line in request_data.lines],
        method=request_data.method,
        table_number=request_data.table_number,
        notes=request_data.notes,
    )
    return SuccessResponse(data=OrderPlacementResponse(order_id=order.id).model_dump())


@router.get("/mine", response_model=SuccessResponse)
async def my_orders_endpoint(ctx: RequestContext = Depends(get_request_context)):
    orders = await list_my_orders(ctx)
    return SuccessResponse(data=[_order_detail(o) for o in orders])


@router.get("/", response_model=SuccessResponse)
async def restaurant_orders_endpoint(
    status: Optional[OrderStatus] = None,
    ctx: RequestContext = Depends(require_staff),
):
    """Orders of the caller's restaurant, newest first."""
    orders = await list_restaurant_orders(ctx, status)
    return SuccessResponse(data=[_order_detail(o) for o in orders])


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: int, ctx: RequestContext = Depends(get_request_context)):
    """Fetches details for a specific order."""
    order = await get_order_by_id(ctx, order_id)
    return SuccessResponse(data=_order_detail(order))


@router.patch("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(
    order_id: int,
    payload: OrderStatusUpdate,
    ctx: RequestContext = Depends(require_staff),
):
    """Updates status (e.g. 'preparing', 'ready', 'served', 'cancelled')."""
    order = await update_order_status(ctx, order_id, payload.status)
    return SuccessResponse(data={"order_id": order.id, "status": order.status})
