"""
Pydantic schemas for authentication endpoints.

These models define the request/response contracts for /auth.
"""

from pydantic import EmailStr, Field, field_validator

from backend.config import settings
from backend.schemas.common import CamelModel
from backend.schemas.users import UserResponse


class AuthResponse(CamelModel):
    """Response for register and login."""
    token: str = Field(..., description="Signed JWT (7-day expiry)")
    user: UserResponse


class RegisterRequest(CamelModel):
    """
    Self-service sign-up.

    Any role sent by the client is ignored; new accounts are MEMBER.
    """
    name: str = Field(..., min_length=1, description="Full name")
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(
        ...,
        min_length=settings.MIN_PASSWORD_LENGTH,
        description="Plain password (at least 6 characters)"
    )

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1, description="Login email")
    password: str = Field(..., min_length=1, description="Plain password")


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., description="New password (at least 6 characters)")

    @field_validator("new_password")
    @classmethod
    def _new_password_length(cls, value: str) -> str:
        if len(value) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"New password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            )
        return value
