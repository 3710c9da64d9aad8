from decimal import Decimal

from tortoise import fields, models

QUANTITY_MAX_DIGITS = 12
QUANTITY_DECIMAL_PLACES = 3


def quantity_fits(value: Decimal) -> bool:
    """True when a finite ``value`` is stored in a quantity column without rounding."""
    _, digits, exponent = value.normalize().as_tuple()
    places = max(0, -exponent)
    whole_digits = max(0, len(digits) + exponent)
    return (
        places <= QUANTITY_DECIMAL_PLACES
        and whole_digits <= QUANTITY_MAX_DIGITS - QUANTITY_DECIMAL_PLACES
    )


class QuantityField(fields.DecimalField):
    """
    DecimalField that keeps numeric affinity on SQLite.

    The stock decrement filters on ``quantity >= qty``; SQLite stores a plain
    DecimalField as VARCHAR, which would compare stock as text. Numeric values
    there are binary floats, so writes always store a decimal computed in
    Python rather than SQL arithmetic on the column.
    """

    class _db_sqlite:
        SQL_TYPE = "NUMERIC"


class InventoryItem(models.Model):
    id = fields.IntField(primary_key=True)
    restaurant = fields.ForeignKeyField("models.Restaurant", related_name="inventory_items")
    name = fields.CharField(max_length=255)
    sku = fields.CharField(max_length=64, null=True)
    unit = fields.CharField(max_length=32, default="unit")
    quantity = QuantityField(max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES, default=0)
    reorder_level = QuantityField(max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES, default=0) # For low stock alert
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "inventory_items"
        indexes = [
            ("restaurant_id", "name"),  # Restaurant stock listing, ordered by name
        ]
