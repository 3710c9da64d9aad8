from enum import Enum
from tortoise import fields, models

from restodesk.models.inventory import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS, QuantityField


class OrderStatus(str, Enum):
    NEW = "new"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"


class FulfillmentMethod(str, Enum):
    DINE_IN = "dine-in"
    PICKUP = "pickup"


class PaymentStatus(str, Enum):
    AUTHORIZED = "authorized"
    UNPAID = "unpaid"


class MenuItem(models.Model):
    id = fields.IntField(primary_key=True)
    restaurant = fields.ForeignKeyField("models.Restaurant", related_name="menu_items")
    name = fields.CharField(max_length=255)
    description = fields.TextField(null=True)
    price = fields.DecimalField(max_digits=12, decimal_places=2)
    active = fields.BooleanField(default=True)

    class Meta:
        table = "menu_items"
        indexes = [
            ("restaurant_id", "active"),  # Composite: restaurant's active items
        ]


class Order(models.Model):
    id = fields.IntField(primary_key=True)
    restaurant = fields.ForeignKeyField("models.Restaurant", related_name="orders")
    user = fields.ForeignKeyField("models.User", related_name="orders")
    status = fields.CharEnumField(OrderStatus, default=OrderStatus.NEW)
    method = fields.CharEnumField(FulfillmentMethod, max_length=16, default=FulfillmentMethod.DINE_IN)
    table_number = fields.CharField(max_length=16, null=True)
    notes = fields.TextField(null=True)
    payment_status = fields.CharEnumField(PaymentStatus, default=PaymentStatus.UNPAID)
    total_amount = fields.DecimalField(max_digits=14, decimal_places=2, default=0)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("restaurant_id", "status"),  # Staff order board
            ("user_id",),                 # User order history
            ("created_at",),              # Time-based queries
        ]


class OrderItem(models.Model):
    """Menu-priced order line."""
    id = fields.IntField(primary_key=True)
    order = fields.ForeignKeyField("models.Order", related_name="items")
    menu_item = fields.ForeignKeyField("models.MenuItem", related_name="order_items")
    qty = fields.IntField()
    unit_price = fields.DecimalField(max_digits=12, decimal_places=2)
    line_total = fields.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        table = "order_items"


class OrderInventoryLine(models.Model):
    """Stock drawn by an order; name and unit are copied at order time."""
    id = fields.IntField(primary_key=True)
    order = fields.ForeignKeyField("models.Order", related_name="inventory_lines")
    inventory_item = fields.ForeignKeyField(
        "models.InventoryItem", related_name="order_lines", null=True, on_delete=fields.SET_NULL
    )
    item_name = fields.CharField(max_length=255)
    unit = fields.CharField(max_length=32)
    qty = QuantityField(max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES)

    class Meta:
        table = "order_inventory_items"
