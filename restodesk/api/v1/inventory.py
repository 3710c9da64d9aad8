from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from restodesk.api.deps import get_request_context, require_staff
from restodesk.core.security import RequestContext
from restodesk.schemas.inventory import InventoryItemRequest, InventoryItemResponse, InventoryItemUpdate
from restodesk.schemas.response import SuccessResponse
from restodesk.services.inventory_service import (
    create_item,
    delete_item,
    list_items,
    list_restaurant_items,
    update_item,
)

router = APIRouter()


def _item_data(item) -> dict:
    return InventoryItemResponse.model_validate(item).model_dump()


@router.get("/", response_model=SuccessResponse)
async def list_inventory_endpoint(
    restaurant_id: Optional[int] = Query(None, alias="restaurantId"),
    ctx: RequestContext = Depends(require_staff),
):
    """Stock of the caller's restaurant; admins may pick any restaurant or see all."""
    items = await list_items(ctx, restaurant_id)
    return SuccessResponse(data=[_item_data(i) for i in items])


@router.get("/by-restaurant", response_model=SuccessResponse)
async def restaurant_inventory_endpoint(
    restaurant_id: int = Query(..., alias="restaurantId"),
    ctx: RequestContext = Depends(get_request_context),
):
    """Stock a customer can order from."""
    items = await list_restaurant_items(restaurant_id)
    return SuccessResponse(data=[_item_data(i) for i in items])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_inventory_item(item_data: InventoryItemRequest, ctx: RequestContext = Depends(require_staff)):
    item = await create_item(
        ctx,
        name=item_data.name,
        sku=item_data.sku,
        unit=item_data.unit,
        quantity=item_data.quantity,
        reorder_level=item_data.reorder_level,
        restaurant_id=item_data.restaurant_id,
    )
    return SuccessResponse(data=_item_data(item))


@router.put("/{item_id}", response_model=SuccessResponse)
async def update_inventory_item(
    item_id: int,
    changes: InventoryItemUpdate,
    ctx: RequestContext = Depends(require_staff),
):
    item = await update_item(ctx, item_id, **changes.model_dump(exclude_unset=True))
    return SuccessResponse(data=_item_data(item))


@router.delete("/{item_id}", response_model=SuccessResponse)
async def delete_inventory_item(item_id: int, ctx: RequestContext = Depends(require_staff)):
    await delete_item(ctx, item_id)
    return SuccessResponse()
