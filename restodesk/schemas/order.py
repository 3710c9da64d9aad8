from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from restodesk.models.inventory import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS
from restodesk.models.order import FulfillmentMethod, OrderStatus, PaymentStatus
from restodesk.schemas.response import CamelRequest


class MenuLineRequest(CamelRequest):
    """Schema for a single menu item in the order request."""
    menu_item_id: int
    qty: int = Field(..., gt=0)


class InventoryLineRequest(CamelRequest):
    """Schema for a single stock line in the order request."""
    inventory_item_id: int
    qty: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
    )


class OrderRequest(CamelRequest):
    restaurant_id: int
    method: FulfillmentMethod = FulfillmentMethod.DINE_IN
    table_number: Optional[str] = Field(None, max_length=16)
    notes: Optional[str] = None


class MenuOrderRequest(OrderRequest):
    """Schema for the full menu order placement request body."""
    items: List[MenuLineRequest]


class InventoryOrderRequest(OrderRequest):
    """Schema for an order drawn directly from restaurant stock."""
    lines: List[InventoryLineRequest]


class OrderPlacementResponse(BaseModel):
    """Response schema for a newly placed order (201 Created)."""
    order_id: int


class OrderStatusUpdate(BaseModel):
    """Schema for updating an order status."""
    status: OrderStatus


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    name: str
    description: Optional[str] = None
    price: Decimal


class OrderItemResponse(BaseModel):
    """Schema for a menu line inside the detailed order response."""
    menu_item_id: int
    name: str
    qty: int
    unit_price: Decimal
    line_total: Decimal


class OrderInventoryLineResponse(BaseModel):
    """Schema for a stock line inside the detailed order response."""
    inventory_item_id: Optional[int] = None
    name: str
    unit: str
    qty: Decimal


class OrderDetailResponse(BaseModel):
    """Schema for fetching detailed order information."""
    id: int
    restaurant_id: int
    user_id: int
    status: OrderStatus
    method: FulfillmentMethod
    table_number: Optional[str] = None
    notes: Optional[str] = None
    payment_status: PaymentStatus
    total_amount: Decimal
    created_at: str
    items: List[OrderItemResponse] = []
    inventory_lines: List[OrderInventoryLineResponse] = []
    username: Optional[str] = None
    email: Optional[str] = None
