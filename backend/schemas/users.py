"""
Pydantic schemas for user management endpoints.

The password hash column is never part of any response model.
"""

from typing import List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from backend.config import settings
from backend.schemas.common import CamelModel, PartialUpdateModel

Role = Literal["ADMIN", "MEMBER"]


# --- Response models ---

class UserResponse(CamelModel):
    """Public representation of a user (no password)."""
    id: str = Field(..., description="User UUID")
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Login email")
    role: Role = Field(..., description="Authorization role")
    birth_date: Optional[str] = Field(None, description="ISO-8601 birth date")
    photo_url: Optional[str] = Field(None, description="Public URL of the user's photo")
    phone: Optional[str] = Field(None, description="Contact phone")
    ministry_entry_date: Optional[str] = Field(None, description="When the user joined the ministry")
    created_at: Optional[str] = Field(None, description="ISO-8601 creation timestamp")
    updated_at: Optional[str] = Field(None, description="ISO-8601 last update timestamp")


class UserDetailResponse(CamelModel):
    user: UserResponse


class UserListResponse(CamelModel):
    users: List[UserResponse]


class UserMutationResponse(CamelModel):
    message: str = Field(..., examples=["User created successfully"])
    user: UserResponse


# --- Admin user management ---

class UserCreateRequest(CamelModel):
    name: str = Field(..., min_length=2, description="Full name")
    email: EmailStr = Field(..., description="Login email")
    role: Role = Field("MEMBER", description="Authorization role")
    birth_date: Optional[str] = Field(None, description="ISO-8601 birth date")
    photo_url: Optional[str] = Field(None, description="Public URL of the user's photo")
    phone: Optional[str] = Field(None, description="Contact phone")
    password: Optional[str] = Field(
        None,
        min_length=settings.MIN_PASSWORD_LENGTH,
        description="Initial password; the user cannot log in until one is set"
    )


class UserUpdateRequest(PartialUpdateModel):
    """Partial update. Only provided fields are written."""
    non_nullable = ("name", "email", "role")

    name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    birth_date: Optional[str] = None
    photo_url: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = Field(
        None,
        description="New password; an empty string leaves the current password untouched"
    )

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if len(value) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            )
        return value
