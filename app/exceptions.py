# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AuthApiException(Exception):
    """
    Base exception for the Auth API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "AUTH_API_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Request Pipeline Exceptions
# =============================================================================

class MalformedJSONError(AuthApiException):
    """Raised when a JSON request body cannot be parsed."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Malformed JSON body: {error}",
            code="MALFORMED_JSON",
            status_code=400,
            suggestion="Send a valid JSON document with Content-Type: application/json",
        )


class PayloadTooLargeError(AuthApiException):
    """Raised when a JSON request body exceeds the configured limit."""

    def __init__(self, limit_bytes: int):
        super().__init__(
            message=f"Request body too large (max: {limit_bytes} bytes)",
            code="PAYLOAD_TOO_LARGE",
            status_code=413,
            suggestion=f"Send a body smaller than {limit_bytes} bytes",
            details={"limit_bytes": limit_bytes},
        )


# =============================================================================
# Database Exceptions
# =============================================================================

class DatabaseConnectionError(AuthApiException):
    """Raised when the database cannot be reached at startup."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to connect to database: {error}",
            code="DATABASE_UNAVAILABLE",
            status_code=503,
            suggestion="Check DATABASE_URL and DATABASE_KEY in your .env file",
            details={"error": error},
        )


class DatabaseNotReadyError(AuthApiException):
    """Raised when a client is requested before the pool is connected."""

    def __init__(self):
        super().__init__(
            message="Database pool is not connected",
            code="DATABASE_NOT_READY",
            status_code=503,
            suggestion="Call Database.connect() during application startup",
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

_BEARER = {"WWW-Authenticate": "Bearer"}


class EmailTakenError(AuthApiException):
    """Raised when registering with an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            message=f"An account already exists for {email}",
            code="EMAIL_TAKEN",
            status_code=409,
            suggestion="Log in instead, or register with a different email",
            details={"email": email},
        )


class InvalidCredentialsError(AuthApiException):
    """Raised when login email or password is wrong."""

    def __init__(self):
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
            suggestion="Check the email and password and try again",
        )


class NotAuthenticatedError(AuthApiException):
    """Raised when a protected endpoint is called without a token."""

    def __init__(self):
        super().__init__(
            message="Not authenticated",
            code="NOT_AUTHENTICATED",
            status_code=401,
            suggestion="Log in via POST /api/auth/login first",
            headers=_BEARER,
        )


class InvalidTokenError(AuthApiException):
    """Raised when an auth token fails verification."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Invalid token: {reason}",
            code="INVALID_TOKEN",
            status_code=401,
            suggestion="Log in again to get a fresh token",
            headers=_BEARER,
        )


class TokenExpiredError(AuthApiException):
    """Raised when an auth token has expired."""

    def __init__(self):
        super().__init__(
            message="Token has expired",
            code="TOKEN_EXPIRED",
            status_code=401,
            suggestion="Log in again to get a fresh token",
            headers=_BEARER,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def error_response(exc: AuthApiException) -> JSONResponse:
    """Render an AuthApiException as a JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def auth_api_exception_handler(
    request: Request,
    exc: AuthApiException
) -> JSONResponse:
    """
    Convert AuthApiException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return error_response(exc)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )


_HTTP_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Handle framework HTTP errors (unknown routes, wrong methods).

    Keeps the {"detail", "code"} shape used by every other error.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "code": _HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
        },
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )
