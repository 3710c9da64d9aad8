from enum import Enum
from tortoise import fields, models


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Reservations that still take up seats in their slot
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.SEATED)


class Reservation(models.Model):
    id = fields.IntField(primary_key=True)
    restaurant = fields.ForeignKeyField("models.Restaurant", related_name="reservations")
    user = fields.ForeignKeyField("models.User", related_name="reservations")
    party_size = fields.IntField()
    date = fields.DateField()
    time = fields.CharField(max_length=5) # HH:MM slot start
    notes = fields.TextField(null=True)
    status = fields.CharEnumField(BookingStatus, default=BookingStatus.PENDING)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "reservations"
        indexes = [
            ("restaurant_id", "date", "time"),  # Capacity lookups per slot
            ("user_id",),                       # User booking history
        ]
