from decimal import Decimal
from types import SimpleNamespace

import pytest
import pytest_asyncio

from restodesk.core.db import close_db, init_db
from restodesk.core.security import RequestContext, issue_token
from restodesk.models import InventoryItem, Restaurant, User, UserRole


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test."""
    await init_db(db_url="sqlite://:memory:", generate_schemas=True)
    yield
    await close_db()


async def make_user(username: str, role: UserRole = UserRole.CUSTOMER, restaurant=None) -> User:
    # Password hashing is covered by the auth tests; skip bcrypt here
    return await User.create(
        username=username,
        email=f"{username}@example.com",
        password_hash="not-a-real-hash",
        role=role,
        restaurant=restaurant,
    )


def context_for(user: User) -> RequestContext:
    return RequestContext(
        user_id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        restaurant_id=user.restaurant_id,
    )


async def make_item(restaurant: Restaurant, name: str, quantity, reorder_level=0, unit: str = "unit") -> InventoryItem:
    return await InventoryItem.create(
        restaurant=restaurant,
        name=name,
        unit=unit,
        quantity=Decimal(str(quantity)),
        reorder_level=Decimal(str(reorder_level)),
    )


async def stock_of(item: InventoryItem) -> Decimal:
    fresh = await InventoryItem.get(id=item.id)
    return fresh.quantity


@pytest_asyncio.fixture
async def restaurant(db):
    return await Restaurant.create(name="Casa Lola", cif="B12345678", slot_capacity=10)


@pytest_asyncio.fixture
async def other_restaurant(db):
    return await Restaurant.create(name="El Puerto", cif="B87654321")


@pytest_asyncio.fixture
async def customer(db):
    return await make_user("ana")


@pytest_asyncio.fixture
async def customer_ctx(customer):
    return context_for(customer)


@pytest_asyncio.fixture
async def employee_ctx(restaurant):
    return context_for(await make_user("chef", UserRole.EMPLOYEE, restaurant))


@pytest_asyncio.fixture
async def admin_ctx(db):
    return context_for(await make_user("boss", UserRole.ADMIN))


def bearer(role: str = "customer", restaurant_id=None, user_id: int = 1) -> dict:
    """Authorization header for route tests that never touch the database."""
    user = SimpleNamespace(
        id=user_id,
        username=f"user{user_id}",
        email=f"user{user_id}@example.com",
        role=role,
        restaurant_id=restaurant_id,
    )
    return {"Authorization": f"Bearer {issue_token(user)}"}
