from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from restodesk.models.user import UserRole
from restodesk.schemas.response import CamelRequest


class EmployeeExtra(CamelRequest):
    cif: Optional[str] = None
    restaurant_name: Optional[str] = None


class RegisterRequest(CamelRequest):
    username: str = ""
    email: str = ""
    password: str = ""
    role: Optional[str] = Field("customer", description="customer, employee or admin; anything else becomes customer.")
    extra: Optional[EmployeeExtra] = None
    # Flat variants of the employee fields
    cif: Optional[str] = None
    restaurant_name: Optional[str] = None


class LoginRequest(BaseModel):
    user: str = Field("", description="Username or email.")
    password: str = ""


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: UserRole
    restaurant_id: Optional[int] = None


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
