from typing import Optional
from pydantic import EmailStr, Field

from .common import CamelModel
from .user import UserMe


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72, description="Password, 8 to 72 characters")
    name: Optional[str] = Field(None, min_length=2, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResult(CamelModel):
    user: UserMe
    token: str
