"""Pydantic schemas for the Users API.

Request fields are all optional strings: presence, length and format are
checked by the form validators so clients get per-field messages.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class RegisterRequest(BaseModel):
    """Schema for registering a user."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    password2: str | None = None


class LoginRequest(BaseModel):
    """Schema for logging in."""

    email: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    """Schema for a registered user (never includes the password hash)."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Jane Doe",
                "email": "jane@example.com",
                "avatar": "https://www.gravatar.com/avatar/abc?s=200&r=pg&d=mm",
                "date": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    email: str
    avatar: str
    date: datetime


class TokenResponse(BaseModel):
    """Schema for a successful login."""

    success: bool = True
    token: str
