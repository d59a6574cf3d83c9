# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: Account request/response schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .user import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserResponse,
    normalize_email,
)

__all__ = [
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "UserResponse",
    "normalize_email",
]
