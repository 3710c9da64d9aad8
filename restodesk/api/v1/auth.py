import logging
from fastapi import APIRouter, Response, status

from restodesk.core.config import TOKEN_COOKIE_NAME, TOKEN_TTL_DAYS
from restodesk.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from restodesk.schemas.response import SuccessResponse
from restodesk.services.auth_service import login, register

log = logging.getLogger(__name__)

router = APIRouter()


def _with_cookie(response: Response, user, token: str) -> SuccessResponse:
    response.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        max_age=TOKEN_TTL_DAYS * 24 * 3600,
    )
    data = AuthResponse(user=UserResponse.model_validate(user), token=token).model_dump()
    return SuccessResponse(data=data)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def register_endpoint(payload: RegisterRequest, response: Response):
    """Creates an account and logs it in. Employees also name their restaurant."""
    extra = payload.extra
    user, token = await register(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        cif=(extra.cif if extra and extra.cif else payload.cif),
        restaurant_name=(extra.restaurant_name if extra and extra.restaurant_name else payload.restaurant_name),
    )
    return _with_cookie(response, user, token)


@router.post("/login", response_model=SuccessResponse)
async def login_endpoint(payload: LoginRequest, response: Response):
    user, token = await login(payload.user, payload.password)
    return _with_cookie(response, user, token)


@router.post("/logout", response_model=SuccessResponse)
async def logout_endpoint(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME)
    return SuccessResponse()
