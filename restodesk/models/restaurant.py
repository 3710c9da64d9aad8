from tortoise import fields, models

from restodesk.core.config import DEFAULT_SLOT_CAPACITY


class Restaurant(models.Model):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=255)
    cif = fields.CharField(max_length=32, unique=True) # Tax id, used to match employees to their restaurant
    active = fields.BooleanField(default=True)
    slot_minutes = fields.IntField(default=30)
    slot_capacity = fields.IntField(default=DEFAULT_SLOT_CAPACITY)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "restaurants"
        indexes = [
            ("active",),  # For filtering active restaurants
        ]
