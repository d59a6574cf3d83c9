# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for account operations:
# - RegisterRequest: Input for creating an account
# - LoginRequest: Input for logging in
# - UserResponse: Output when returning a user to clients
#
# Stored rows also carry password_hash, which never leaves the service layer.
# =============================================================================

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

# One "@", non-empty local part, dotted domain
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PASSWORD_MIN_LENGTH = 6


def normalize_email(value: str) -> str:
    """Strip and lowercase an email address, rejecting obvious garbage."""
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("must be a valid email address")
    return email


class RegisterRequest(BaseModel):
    """
    Schema for creating a new account.

    Example:
        {
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "password": "analytical"
        }
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )

    email: str = Field(
        ...,
        max_length=254,
        description="Email address (stored lowercase)"
    )

    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=128,
        description=f"Password, at least {PASSWORD_MIN_LENGTH} characters"
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("must not be blank")
        return name

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return normalize_email(value)


class LoginRequest(BaseModel):
    """Schema for logging in with email and password."""

    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return normalize_email(value)


class UserResponse(BaseModel):
    """
    Schema for returning a user to clients.

    Returned by:
    - POST /api/auth/register
    - POST /api/auth/login
    - GET /api/auth/me

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "created_at": "2024-01-15T10:30:00Z"
        }
    """

    id: UUID
    name: str
    email: str
    created_at: datetime | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str
