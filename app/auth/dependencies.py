# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# The token is read from the auth cookie (parsed by the cookie stage of the
# request pipeline) and falls back to an "Authorization: Bearer" header.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.models import AuthUser
from app.auth.security import decode_access_token
from app.config import Settings
from app.dependencies import get_app_settings
from app.exceptions import NotAuthenticatedError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor (cookie is preferred, so never auto-error)
security_optional = HTTPBearer(auto_error=False)


def get_token(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
) -> Optional[str]:
    """
    Extract the raw auth token from the request.

    Returns:
        The cookie token if present, else the Bearer token, else None
    """
    token = request.state.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


async def get_current_user(
    token: Optional[str] = Depends(get_token),
    settings: Settings = Depends(get_app_settings),
) -> AuthUser:
    """
    Validate the auth token and return the identity it carries.

    Args:
        token: Raw token from cookie or Authorization header

    Returns:
        AuthUser: The authenticated user

    Raises:
        NotAuthenticatedError: 401 if no token was sent
        InvalidTokenError: 401 if the token is malformed or badly signed
        TokenExpiredError: 401 if the token has expired
    """
    if not token:
        raise NotAuthenticatedError()

    user = decode_access_token(token, settings)
    logger.debug(f"Authenticated user: {user.id}")
    return user
