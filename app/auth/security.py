# =============================================================================
# app/auth/security.py - Auth Tokens
# =============================================================================
# JWT issuing/verification with python-jose. Tokens carry the user's ID in
# "sub" and their email, and expire after JWT_EXPIRES_MINUTES.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from app.auth.models import AuthUser, TokenPayload
from app.config import Settings
from app.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)


def create_access_token(
    user_id: UUID | str,
    email: str | None,
    settings: Settings,
    now: datetime | None = None,
) -> str:
    """
    Issue a signed auth token for a user.

    Args:
        user_id: The user's UUID (becomes the "sub" claim)
        email: The user's email
        settings: Supplies secret, algorithm and lifetime
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT string
    """
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> AuthUser:
    """
    Verify a token's signature and expiry and return its identity.

    Raises:
        TokenExpiredError: If the token has expired
        InvalidTokenError: If the signature, claims or user ID are invalid
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        logger.info("Auth token has expired")
        raise TokenExpiredError()
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise InvalidTokenError(str(e))

    try:
        payload = TokenPayload(**claims)
        user_id = UUID(payload.sub)
    except (ValidationError, ValueError):
        logger.warning(f"Token carries malformed claims: sub={claims.get('sub')!r}")
        raise InvalidTokenError("malformed user ID")

    return AuthUser(id=user_id, email=payload.email)
