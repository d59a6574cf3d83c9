# =============================================================================
# lib/database.py - Pooled Supabase Database Connector
# =============================================================================
# This module owns the connection to the persistent store. It keeps a small
# pool of Supabase clients and hands them out through scoped acquisition:
#
#   async with database.acquire() as client:
#       client.table("users").select("*").execute()
#
# The client is always returned to the pool when the block exits, even if
# the block raises.
#
# connect() runs once during application startup. If the store cannot be
# reached it raises DatabaseConnectionError and startup is aborted - there
# is no retry.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterator, Callable, TypeVar

from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client

from app.exceptions import DatabaseConnectionError, DatabaseNotReadyError

if TYPE_CHECKING:
    from app.config import Settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# Table touched by the readiness ping
PING_TABLE = "users"

T = TypeVar("T")


class Database:
    """
    Bounded pool of Supabase clients with scoped checkout/return.

    Example:
        database = Database.from_settings(settings)
        await database.connect()

        async with database.acquire() as client:
            rows = client.table("users").select("id").limit(1).execute()
    """

    def __init__(
        self,
        url: str,
        key: str,
        pool_size: int = 4,
        client_factory: Callable[[str, str], Any] = create_client,
    ):
        if pool_size < 1:
            raise ValueError(f"pool_size must be at least 1, got {pool_size}")
        self.url = url
        self.key = key
        self.pool_size = pool_size
        self._client_factory = client_factory
        self._pool: asyncio.Queue[Client] | None = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> Database:
        """Build a Database from application settings."""
        return cls(
            settings.DATABASE_URL,
            settings.DATABASE_KEY,
            pool_size=settings.DATABASE_POOL_SIZE,
            **kwargs,
        )

    @property
    def is_ready(self) -> bool:
        """True once connect() has succeeded and until close()."""
        return self._pool is not None

    async def connect(self) -> None:
        """
        Create the pool and verify the store is reachable.

        Raises:
            DatabaseConnectionError: If a client can't be created or the
                readiness query fails
        """
        if self._pool is not None:
            return

        try:
            clients = [
                self._client_factory(self.url, self.key)
                for _ in range(self.pool_size)
            ]
            await run_in_threadpool(self._ping_client, clients[0])
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            raise DatabaseConnectionError(str(e)) from e

        pool: asyncio.Queue[Client] = asyncio.Queue(maxsize=self.pool_size)
        for client in clients:
            pool.put_nowait(client)
        self._pool = pool
        logger.info(f"Database connected ({self.pool_size} pooled clients)")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[Client]:
        """
        Check a client out of the pool for the duration of the block.

        Waits if every client is in use.

        Raises:
            DatabaseNotReadyError: If connect() hasn't been called
        """
        pool = self._pool
        if pool is None:
            raise DatabaseNotReadyError()

        client = await pool.get()
        try:
            yield client
        finally:
            pool.put_nowait(client)

    async def run(self, query: Callable[[Client], T]) -> T:
        """
        Run a synchronous query against a pooled client.

        The query executes in the threadpool so the event loop isn't
        blocked by the Supabase HTTP round-trip.

        Example:
            rows = await database.run(
                lambda client: client.table("users").select("*").execute()
            )
        """
        async with self.acquire() as client:
            return await run_in_threadpool(query, client)

    async def ping(self) -> bool:
        """Run the readiness query; False if it fails or the pool isn't up."""
        try:
            async with self.acquire() as client:
                await run_in_threadpool(self._ping_client, client)
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    async def close(self) -> None:
        """Drop all pooled clients."""
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        while not pool.empty():
            pool.get_nowait()
        logger.info("Database pool closed")

    @staticmethod
    def _ping_client(client: Client) -> None:
        client.table(PING_TABLE).select("id").limit(1).execute()
