from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID
from pydantic import EmailStr, Field

from .common import CamelModel


class UserStatus(str, Enum):
    """User status enumeration for API"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class UserCreate(CamelModel):
    """Schema for creating a user"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72, description="Password, 8 to 72 characters")
    name: Optional[str] = Field(None, min_length=2, max_length=100)


class UserUpdate(CamelModel):
    """Schema for an administrative partial update"""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    status: Optional[UserStatus] = None


class ProfileUpdate(CamelModel):
    """Self-service update; only the display name can change"""
    name: str = Field(..., min_length=2, max_length=100)


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)


class UserBrief(CamelModel):
    id: UUID
    email: EmailStr
    name: Optional[str] = None


class UserMe(UserBrief):
    """Self view: no password, no soft-delete marker"""
    status: UserStatus
    created_at: datetime
    updated_at: datetime


class UserOut(UserMe):
    deleted_at: Optional[datetime] = None
