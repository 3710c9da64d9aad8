from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from restodesk.models.inventory import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS
from restodesk.schemas.response import CamelRequest

QUANTITY_LIMITS = {"max_digits": QUANTITY_MAX_DIGITS, "decimal_places": QUANTITY_DECIMAL_PLACES}


class InventoryItemRequest(CamelRequest):
    name: str = Field(..., min_length=1, description="Name of the stock item (e.g., Tomatoes).")
    sku: Optional[str] = None
    unit: str = Field("unit", description="Unit label the quantity is counted in.")
    quantity: Decimal = Field(Decimal("0"), ge=0, **QUANTITY_LIMITS, description="Initial stock.")
    reorder_level: Decimal = Field(Decimal("0"), ge=0, **QUANTITY_LIMITS, description="Stock level at or below which a low stock warning is logged.")
    restaurant_id: Optional[int] = Field(None, description="Target restaurant; only used by admins.")


class InventoryItemUpdate(CamelRequest):
    """Partial update: fields left out keep their current value."""
    name: Optional[str] = Field(None, min_length=1)
    sku: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[Decimal] = Field(None, ge=0, **QUANTITY_LIMITS)
    reorder_level: Optional[Decimal] = Field(None, ge=0, **QUANTITY_LIMITS)


class InventoryItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    sku: Optional[str] = None
    unit: str
    quantity: Decimal
    reorder_level: Decimal
    restaurant_id: int
