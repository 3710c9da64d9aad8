from typing import Optional

from fastapi import Depends, Header, Request

from restodesk.core.config import TOKEN_COOKIE_NAME
from restodesk.core.exceptions import ForbiddenError, UnauthorizedError
from restodesk.core.security import RequestContext, decode_token
from restodesk.models.user import UserRole


def get_request_context(request: Request, authorization: Optional[str] = Header(None)) -> RequestContext:
    """Reads the credential from the cookie or a Bearer header."""
    token = request.cookies.get(TOKEN_COOKIE_NAME)
    if not token and authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):]
    if not token:
        raise UnauthorizedError("Not authenticated")
    return decode_token(token)


def require_roles(*roles: UserRole):
    def dependency(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if ctx.role not in roles:
            raise ForbiddenError("Not authorized")
        return ctx
    return dependency


require_staff = require_roles(UserRole.EMPLOYEE, UserRole.ADMIN)
