# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .user_service import UserService, public_user

__all__ = [
    "UserService",
    "public_user",
]
