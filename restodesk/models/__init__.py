# restodesk/models/__init__.py
from .restaurant import Restaurant
from .user import User, UserRole
from .inventory import InventoryItem
from .order import (
    FulfillmentMethod,
    MenuItem,
    Order,
    OrderInventoryLine,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from .booking import BookingStatus, Reservation

# Export all models
__all__ = [
    "BookingStatus",
    "FulfillmentMethod",
    "InventoryItem",
    "MenuItem",
    "Order",
    "OrderInventoryLine",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Reservation",
    "Restaurant",
    "User",
    "UserRole",
]
