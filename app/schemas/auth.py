"""Authentication schemas."""

from __future__ import annotations  # Enable forward references

from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import CamelModel
from app.utils.constants import Role
from app.utils.validators import validate_password_strength


def _check_password(value: str) -> str:
    is_valid, errors = validate_password_strength(value)
    if not is_valid:
        raise ValueError("; ".join(errors))
    return value


class RegisterRequest(CamelModel):
    """Register request schema."""

    email: EmailStr
    password: str
    name: Optional[str] = Field(None, max_length=100)
    role: Role = Role.STUDENT

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _check_password(v)


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class EmailRequest(CamelModel):
    email: EmailStr


class VerifyEmailData(CamelModel):
    email: EmailStr
    code: str = Field(..., min_length=1)

    @field_validator("code", mode="before")
    @classmethod
    def coerce_code(cls, v: Union[str, int]) -> str:
        # Some clients send the code as a number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class VerifyEmailRequest(CamelModel):
    data: VerifyEmailData


class PasswordResetConfirm(CamelModel):
    email: EmailStr
    code: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _check_password(v)


class UserResponse(CamelModel):
    """User response schema. Never carries the password hash."""

    id: UUID
    name: Optional[str] = None
    email: str
    role: Role
    login_method: Optional[str] = None
    email_verified: Optional[datetime] = None
    profile_image: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    """Register/login response schema."""

    message: str
    user: UserResponse
    access_token: str
    refresh_token: str


class TokenRefreshResponse(CamelModel):
    message: str
    access_token: str
    refresh_token: str


class ProfileEnvelope(CamelModel):
    user: UserResponse


class EmailExistsResponse(CamelModel):
    exists: bool


class EmailVerifiedResponse(CamelModel):
    verified: bool


class VerifyEmailResponse(CamelModel):
    message: str
    success: bool


# Rebuild models to resolve forward references
AuthResponse.model_rebuild()
ProfileEnvelope.model_rebuild()
