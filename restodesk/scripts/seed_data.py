# restodesk/scripts/seed_data.py
import asyncio
import logging
from decimal import Decimal
from restodesk.core.db import close_db, init_db
from restodesk.core.security import hash_password
from restodesk.models import InventoryItem, MenuItem, Restaurant, User, UserRole

log = logging.getLogger(__name__)

DEMO_PASSWORD = "demo1234"

async def seed():
    # Create one restaurant
    rest, _ = await Restaurant.get_or_create(cif="B00000001", defaults={"name": "Demo Restaurant"})
    log.info(f"Restaurant: {rest.id}")

    # Staff and a customer, all with the demo password
    for username, role, restaurant in (
        ("admin", UserRole.ADMIN, rest),
        ("chef", UserRole.EMPLOYEE, rest),
        ("guest", UserRole.CUSTOMER, None),
    ):
        await User.get_or_create(
            username=username,
            defaults={
                "email": f"{username}@example.com",
                "password_hash": hash_password(DEMO_PASSWORD),
                "role": role,
                "restaurant": restaurant,
            },
        )

    # Create menu items
    for name, price in (("Paella", "14.50"), ("Patatas Bravas", "6.00"), ("Sangria", "4.25")):
        await MenuItem.get_or_create(restaurant=rest, name=name, defaults={"price": Decimal(price), "active": True})

    # Create or reset stock (idempotent)
    for name, unit, qty, reorder in (
        ("Bread roll", "unit", 50, 10),
        ("Olives", "kg", Decimal("5.5"), 1),
        ("Lemonade bottle", "unit", 24, 6),
    ):
        item, _ = await InventoryItem.get_or_create(
            restaurant=rest, name=name, defaults={"unit": unit, "quantity": qty, "reorder_level": reorder}
        )
        item.quantity = qty
        await item.save(update_fields=["quantity", "updated_at"])

    log.info("Demo data seeded.")

async def main():
    logging.basicConfig(level=logging.INFO)
    await init_db()
    try:
        await seed()
    finally:
        await close_db()

if __name__ == "__main__":
    asyncio.run(main())
