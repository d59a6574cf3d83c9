# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-in for the Supabase client (table/select/eq/insert chain)
# - App and TestClient fixtures wired to the in-memory store
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Any, Optional

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================

os.environ.setdefault("PORT", "5000")
os.environ.setdefault("DATABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("DATABASE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.main import create_app
from lib.database import Database

ALLOWED_ORIGIN = "http://localhost:4200"
OTHER_ALLOWED_ORIGIN = "https://your-frontend.vercel.app"
DISALLOWED_ORIGIN = "https://evil.example.com"


# =============================================================================
# In-memory Supabase client
# =============================================================================

@dataclass
class FakeResponse:
    """Mimics the postgrest APIResponse (only .data is used)."""
    data: list[dict[str, Any]]


@dataclass
class FakeStore:
    """Tables shared by every fake client; set `error` to make queries fail."""
    tables: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    error: Optional[Exception] = None
    queries: int = 0


class FakeQuery:
    """Chainable query builder over a FakeStore table."""

    def __init__(self, store: FakeStore, table: str):
        self._store = store
        self._table = table
        self._filters: list[tuple[str, Any]] = []
        self._limit: Optional[int] = None
        self._insert: Optional[dict[str, Any]] = None

    def select(self, columns: str = "*") -> "FakeQuery":
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def insert(self, data: dict[str, Any]) -> "FakeQuery":
        self._insert = data
        return self

    def execute(self) -> FakeResponse:
        self._store.queries += 1
        if self._store.error is not None:
            raise self._store.error

        rows = self._store.tables.setdefault(self._table, [])

        if self._insert is not None:
            row = dict(self._insert)
            row.setdefault("created_at", "2024-01-15T10:30:00+00:00")
            rows.append(row)
            return FakeResponse([dict(row)])

        matched = [
            dict(row) for row in rows
            if all(str(row.get(column)) == str(value) for column, value in self._filters)
        ]
        if self._limit is not None:
            matched = matched[:self._limit]
        return FakeResponse(matched)


class FakeSupabaseClient:
    """Stand-in for supabase.Client."""

    def __init__(self, store: FakeStore):
        self.store = store

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.store, name)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """get_settings() is cached; start every test from a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings for a development-mode app."""
    return Settings(
        PORT=5000,
        DATABASE_URL="https://test-project.supabase.co",
        DATABASE_KEY="test-service-key",
        JWT_SECRET="test-secret-key-0123456789",
        JSON_BODY_LIMIT_BYTES=1024,
        DATABASE_POOL_SIZE=2,
    )


@pytest.fixture
def fake_store() -> FakeStore:
    """Empty in-memory store."""
    return FakeStore()


@pytest.fixture
def database(settings, fake_store) -> Database:
    """Database pool whose clients talk to the in-memory store."""
    return Database.from_settings(
        settings,
        client_factory=lambda url, key: FakeSupabaseClient(fake_store),
    )


@pytest.fixture
def app(settings, database):
    """Application wired to the in-memory store."""
    return create_app(settings, database=database)


@pytest.fixture
def client(app):
    """TestClient with lifespan (database connect) already run."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registered_user(client) -> dict[str, Any]:
    """Register an account and return its credentials and response body."""
    credentials = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "password": "analytical",
    }
    response = client.post("/api/auth/register", json=credentials)
    assert response.status_code == 201
    client.cookies.clear()
    return {**credentials, "user": response.json()}
