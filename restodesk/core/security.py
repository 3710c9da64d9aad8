"""Password hashing and the signed credential carried by every request."""
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from pydantic import BaseModel, ConfigDict

from restodesk.core.config import JWT_ALGORITHM, JWT_SECRET, TOKEN_TTL_DAYS
from restodesk.core.exceptions import BadRequestError, UnauthorizedError
from restodesk.models.user import UserRole


class RequestContext(BaseModel):
    """Identity decoded from the credential, passed explicitly into services."""
    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    email: str
    role: UserRole
    restaurant_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.EMPLOYEE, UserRole.ADMIN)

    def require_restaurant(self) -> int:
        if not self.restaurant_id:
            raise BadRequestError("Employee has no associated restaurant")
        return self.restaurant_id


def hash_password(plain_password: str) -> str:
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def issue_token(user) -> str:
    """Signs a credential for a User row (or anything shaped like one)."""
    payload = {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": UserRole(user.role).value,
        "restaurant_id": user.restaurant_id,
        "exp": datetime.now(timezone.utc) + timedelta(days=TOKEN_TTL_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> RequestContext:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return RequestContext(
            user_id=payload["id"],
            username=payload["username"],
            email=payload["email"],
            role=payload["role"],
            restaurant_id=payload.get("restaurant_id"),
        )
    except (jwt.PyJWTError, KeyError, ValueError):
        raise UnauthorizedError("Invalid token")
