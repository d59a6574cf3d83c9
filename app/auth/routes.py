# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for account registration and cookie-based sessions.
#
# The auth token is an httpOnly cookie, so browser clients on the allowed
# CORS origins send it automatically with credentialed requests.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Response, status

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from app.auth.security import create_access_token
from app.config import Settings
from app.dependencies import SettingsDep, UserServiceDep
from app.exceptions import InvalidTokenError
from core.models.user import LoginRequest, MessageResponse, RegisterRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _cookie_samesite(settings: Settings) -> str:
    # Cross-site cookies must be SameSite=None, which browsers only accept with Secure
    return "none" if settings.is_production else "lax"


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the auth token to the response as an httpOnly cookie."""
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRES_MINUTES * 60,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite=_cookie_samesite(settings),
    )


def clear_auth_cookie(response: Response, settings: Settings) -> None:
    """Expire the auth cookie."""
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite=_cookie_samesite(settings),
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    response: Response,
    settings: SettingsDep,
    users: UserServiceDep,
) -> UserResponse:
    """
    Create an account and log it in.

    Returns:
        UserResponse: The new user

    Raises:
        409: If the email is already registered
        422: If the payload is invalid
    """
    user = await users.register(payload.name, payload.email, payload.password)
    set_auth_cookie(response, create_access_token(user["id"], user["email"], settings), settings)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    settings: SettingsDep,
    users: UserServiceDep,
) -> UserResponse:
    """
    Log in with email and password.

    Raises:
        401: If the credentials are wrong
    """
    user = await users.authenticate(payload.email, payload.password)
    set_auth_cookie(response, create_access_token(user["id"], user["email"], settings), settings)
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, settings: SettingsDep) -> MessageResponse:
    """Clear the auth cookie. Safe to call when not logged in."""
    clear_auth_cookie(response, settings)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    users: UserServiceDep,
    user: AuthUser = Depends(get_current_user),
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated, or the account no longer exists
    """
    row = await users.get_by_id(user.id)
    if not row:
        logger.warning(f"Token for missing user: {user.id}")
        raise InvalidTokenError("user no longer exists")
    return UserResponse.model_validate(row)
