"""Schemas for registration, login, token refresh and profiles."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from core.enums import Role
from .base import CamelModel


class RegisterRequest(CamelModel):
    """Registration payload. Password strength is checked by the auth service."""

    name: str = Field(..., min_length=2, max_length=100, examples=["Jane Doe"])
    email: EmailStr = Field(..., examples=["jane@example.com"])
    password: str = Field(..., max_length=128, examples=["S3cure!pass"])
    confirm_password: str = Field(..., max_length=128, examples=["S3cure!pass"])


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., max_length=128)


class UserOut(CamelModel):
    """Public view of a user; never includes the password hash."""

    id: int = Field(..., serialization_alias="userId")
    name: str
    email: str
    role: Role
    created_at: Optional[datetime] = None


class RegisterResponse(CamelModel):
    message: str
    access_token: str
    user: UserOut


class LoginResponse(CamelModel):
    message: str
    access_token: str
    user: UserOut


class RefreshResponse(CamelModel):
    access_token: str


class ProfileUpdateRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
