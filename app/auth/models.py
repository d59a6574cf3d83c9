# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for token data.
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated identity extracted from an auth token.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class TokenPayload(BaseModel):
    """
    Decoded JWT token payload.

    Standard JWT claims plus the user's email.
    """
    sub: str  # User ID
    email: Optional[str] = None
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
