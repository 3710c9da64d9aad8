import logging
from typing import Optional, Tuple

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q
from tortoise.transactions import in_transaction

from restodesk.core.config import MIN_PASSWORD_LENGTH
from restodesk.core.exceptions import BadRequestError
from restodesk.core.security import hash_password, issue_token, verify_password
from restodesk.models.restaurant import Restaurant
from restodesk.models.user import User, UserRole

log = logging.getLogger(__name__)


def sanitize_role(role: Optional[str]) -> UserRole:
    try:
        return UserRole(str(role or UserRole.CUSTOMER.value))
    except ValueError:
        return UserRole.CUSTOMER


async def upsert_restaurant(cif: str, name: str, conn) -> Restaurant:
    """Finds the restaurant by CIF (refreshing its name) or creates it."""
    restaurant = await Restaurant.get_or_none(cif=cif).using_db(conn)
    if restaurant:
        if restaurant.name != name:
            restaurant.name = name
            await restaurant.save(update_fields=["name"], using_db=conn)
        return restaurant
    return await Restaurant.create(name=name, cif=cif, using_db=conn)


async def register(
    username: str,
    email: str,
    password: str,
    role: Optional[str] = None,
    cif: Optional[str] = None,
    restaurant_name: Optional[str] = None,
) -> Tuple[User, str]:
    """
    Creates a user and returns it with a fresh credential.
    Employees must name their restaurant by CIF; it is created on first sight.
    """
    username = (username or "").strip()
    email = (email or "").strip().lower()
    if not username or not email or not password:
        raise BadRequestError("username, email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequestError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    user_role = sanitize_role(role)
    cif = (cif or "").strip().upper()
    restaurant_name = (restaurant_name or "").strip()
    if user_role == UserRole.EMPLOYEE and (not cif or not restaurant_name):
        raise BadRequestError("CIF and restaurant name are required for employees")

    if await User.filter(email=email).exists():
        raise BadRequestError("That email is already registered")
    if await User.filter(username=username).exists():
        raise BadRequestError("That username already exists")

    try:
        async with in_transaction() as conn:
            restaurant = None
            if user_role == UserRole.EMPLOYEE:
                restaurant = await upsert_restaurant(cif, restaurant_name, conn)
            user = await User.create(
                username=username,
                email=email,
                password_hash=hash_password(password),
                role=user_role,
                restaurant=restaurant,
                using_db=conn,
            )
    except IntegrityError:
        # Lost a race against a concurrent registration with the same name or email
        raise BadRequestError("That username or email is already registered")

    log.info(f"User {user.id} ({user.username}) registered as {user_role.value}.")
    return user, issue_token(user)


async def login(identifier: str, password: str) -> Tuple[User, str]:
    """``identifier`` may be a username or an email."""
    identifier = (identifier or "").strip()
    if not identifier or not password:
        raise BadRequestError("User and password are required")

    user = await User.filter(Q(username=identifier) | Q(email=identifier.lower())).first()
    if not user or not verify_password(password, user.password_hash):
        raise BadRequestError("Invalid credentials")

    log.info(f"User {user.id} logged in.")
    return user, issue_token(user)
