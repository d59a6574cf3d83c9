# =============================================================================
# core/services/user_service.py - User Account Business Logic
# =============================================================================
# Handles account creation, credential checks and user lookups.
# Separates HTTP concerns from database/business logic.
#
# Rows live in the "users" table:
#   id (uuid), name, email (unique, lowercase), password_hash, created_at
# =============================================================================

import logging
from typing import Any
from uuid import UUID, uuid4

from postgrest.exceptions import APIError
from starlette.concurrency import run_in_threadpool

from app.exceptions import EmailTakenError, InvalidCredentialsError
from lib.database import Database
from lib.passwords import dummy_hash, hash_password, verify_password

logger = logging.getLogger(__name__)

USERS_TABLE = "users"

# Postgres error code for unique constraint violations
UNIQUE_VIOLATION = "23505"


def public_user(row: dict[str, Any]) -> dict[str, Any]:
    """Strip server-only columns from a user row."""
    return {key: value for key, value in row.items() if key != "password_hash"}


def _check_password(password: str, stored_hash: str | None) -> bool:
    """Verify a password; an unknown user is checked against a dummy hash and fails."""
    if stored_hash is None:
        verify_password(password, dummy_hash())
        return False
    return verify_password(password, stored_hash)


class UserService:
    """
    Service for user account operations.

    Provides a clean interface between API routes and database.
    """

    def __init__(self, database: Database):
        self.database = database

    async def get_by_email(self, email: str) -> dict[str, Any] | None:
        """
        Fetch a user row by (already normalized) email.

        Returns:
            User dict including password_hash, or None
        """
        response = await self.database.run(
            lambda client: (
                client.table(USERS_TABLE)
                .select("*")
                .eq("email", email)
                .limit(1)
                .execute()
            )
        )
        return response.data[0] if response.data else None

    async def get_by_id(self, user_id: UUID | str) -> dict[str, Any] | None:
        """
        Fetch a user row by ID.

        Returns:
            User dict including password_hash, or None
        """
        response = await self.database.run(
            lambda client: (
                client.table(USERS_TABLE)
                .select("*")
                .eq("id", str(user_id))
                .limit(1)
                .execute()
            )
        )
        return response.data[0] if response.data else None

    async def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        """
        Create a new account.

        Args:
            name: Display name
            email: Normalized email address
            password: Plain-text password (hashed before storage)

        Returns:
            Public user dict (no password_hash)

        Raises:
            EmailTakenError: If the email already has an account
        """
        if await self.get_by_email(email):
            logger.info(f"Registration rejected, email already in use: {email}")
            raise EmailTakenError(email)

        # scrypt is CPU-bound; keep it off the event loop
        password_hash = await run_in_threadpool(hash_password, password)

        data = {
            "id": str(uuid4()),
            "name": name,
            "email": email,
            "password_hash": password_hash,
        }

        try:
            response = await self.database.run(
                lambda client: client.table(USERS_TABLE).insert(data).execute()
            )
        except APIError as e:
            # Lost a race with a concurrent registration
            if e.code == UNIQUE_VIOLATION:
                raise EmailTakenError(email)
            logger.error(f"Failed to create user: {e}")
            raise

        if not response.data:
            raise RuntimeError("Insert returned no data")

        user = response.data[0]
        logger.info(f"Registered user: {user['id']}")
        return public_user(user)

    async def authenticate(self, email: str, password: str) -> dict[str, Any]:
        """
        Check login credentials.

        Returns:
            Public user dict (no password_hash)

        Raises:
            InvalidCredentialsError: If the email is unknown or the password
                is wrong (same error for both)
        """
        user = await self.get_by_email(email)
        stored_hash = user.get("password_hash", "") if user else None

        if not await run_in_threadpool(_check_password, password, stored_hash):
            logger.info(f"Failed login for: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User logged in: {user['id']}")
        return public_user(user)
