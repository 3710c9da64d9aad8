from enum import Enum
from tortoise import fields, models


class UserRole(str, Enum):
    CUSTOMER = "customer"
    EMPLOYEE = "employee"
    ADMIN = "admin"


class User(models.Model):
    id = fields.IntField(primary_key=True)
    username = fields.CharField(max_length=64, unique=True)
    email = fields.CharField(max_length=255, unique=True)
    password_hash = fields.CharField(max_length=128)
    role = fields.CharEnumField(UserRole, default=UserRole.CUSTOMER)
    restaurant = fields.ForeignKeyField(
        "models.Restaurant", related_name="staff", null=True, on_delete=fields.SET_NULL
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "users"
