from types import SimpleNamespace

import jwt
import pytest

from restodesk.core.config import JWT_ALGORITHM, JWT_SECRET
from restodesk.core.exceptions import BadRequestError, UnauthorizedError
from restodesk.core.security import decode_token, hash_password, issue_token, verify_password
from restodesk.models import Restaurant, User, UserRole
from restodesk.services.auth_service import login, register, sanitize_role


def test_password_hash_verifies_only_the_original():
    hashed = hash_password("s3cret!")

    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("s3cret?", hashed)


@pytest.mark.parametrize("role,expected", [
    ("employee", UserRole.EMPLOYEE),
    ("admin", UserRole.ADMIN),
    ("superuser", UserRole.CUSTOMER),
    (None, UserRole.CUSTOMER),
])
def test_unknown_roles_fall_back_to_customer(role, expected):
    assert sanitize_role(role) == expected


@pytest.mark.asyncio
async def test_register_customer_returns_a_working_token(db):
    user, token = await register("marta", " Marta@Example.com ", "secret1")

    assert user.role == UserRole.CUSTOMER
    assert user.email == "marta@example.com"
    assert user.restaurant_id is None

    ctx = decode_token(token)
    assert (ctx.user_id, ctx.username, ctx.role) == (user.id, "marta", UserRole.CUSTOMER)


@pytest.mark.asyncio
async def test_employees_share_a_restaurant_by_cif(db):
    first, _ = await register("cook", "cook@example.com", "secret1", "employee", "b11111111", "Casa Pepe")
    second, token = await register("waiter", "waiter@example.com", "secret1", "employee", "B11111111", "Casa Pepe Bar")

    assert first.restaurant_id == second.restaurant_id
    restaurant = await Restaurant.get(id=first.restaurant_id)
    assert restaurant.cif == "B11111111"
    assert restaurant.name == "Casa Pepe Bar"
    assert decode_token(token).restaurant_id == restaurant.id


@pytest.mark.asyncio
async def test_employee_needs_cif_and_restaurant_name(db):
    with pytest.raises(BadRequestError):
        await register("cook", "cook@example.com", "secret1", "employee", cif="B11111111")

    assert await User.all().count() == 0


@pytest.mark.asyncio
async def test_register_rejects_bad_input(db):
    await register("marta", "marta@example.com", "secret1")

    with pytest.raises(BadRequestError):
        await register("short", "short@example.com", "12345")
    with pytest.raises(BadRequestError):
        await register("", "nobody@example.com", "secret1")
    with pytest.raises(BadRequestError):
        await register("marta", "other@example.com", "secret1")
    with pytest.raises(BadRequestError):
        await register("other", "MARTA@example.com", "secret1")

    assert await User.all().count() == 1


@pytest.mark.asyncio
async def test_login_by_username_or_email(db):
    user, _ = await register("marta", "marta@example.com", "secret1")

    by_name, _ = await login("marta", "secret1")
    by_email, token = await login("Marta@Example.com", "secret1")

    assert by_name.id == by_email.id == user.id
    assert decode_token(token).email == "marta@example.com"


@pytest.mark.asyncio
async def test_login_failures_do_not_say_which_part_was_wrong(db):
    await register("marta", "marta@example.com", "secret1")

    for identifier, password in (("marta", "wrong-pass"), ("nobody", "secret1")):
        with pytest.raises(BadRequestError) as excinfo:
            await login(identifier, password)
        assert excinfo.value.message == "Invalid credentials"


def test_tampered_or_expired_tokens_are_rejected():
    token = issue_token(SimpleNamespace(id=1, username="x", email="x@example.com", role="customer", restaurant_id=None))
    header, payload, signature = token.split(".")
    forged = ".".join([header, payload, signature[::-1]])

    with pytest.raises(UnauthorizedError):
        decode_token(forged)

    expired = jwt.encode(
        {"id": 1, "username": "x", "email": "x@example.com", "role": "customer", "exp": 0},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )
    with pytest.raises(UnauthorizedError):
        decode_token(expired)

    with pytest.raises(UnauthorizedError):
        decode_token(jwt.encode({"id": 1}, JWT_SECRET, algorithm=JWT_ALGORITHM))
