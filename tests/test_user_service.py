# =============================================================================
# tests/test_user_service.py - User Service Tests
# =============================================================================
# Tests for UserService:
# - scrypt hashing runs in the threadpool, never on the event loop thread
# - unknown emails cost a password check, same as wrong passwords
# =============================================================================

import threading

import pytest
import pytest_asyncio

from app.exceptions import EmailTakenError, InvalidCredentialsError
from core.services import user_service
from core.services.user_service import UserService
from lib.database import Database
from lib.passwords import dummy_hash, hash_password, verify_password
from tests.conftest import FakeStore, FakeSupabaseClient


@pytest_asyncio.fixture
async def service():
    """UserService over a connected in-memory database."""
    store = FakeStore()
    database = Database(
        "https://test.supabase.co",
        "key",
        pool_size=1,
        client_factory=lambda url, key: FakeSupabaseClient(store),
    )
    await database.connect()
    return UserService(database)


@pytest.fixture
def hash_calls(monkeypatch):
    """Record the thread every hash/verify call runs on."""
    calls = []

    def recording_hash(password):
        calls.append(("hash", threading.get_ident(), None))
        return hash_password(password)

    def recording_verify(password, stored_hash):
        calls.append(("verify", threading.get_ident(), stored_hash))
        return verify_password(password, stored_hash)

    monkeypatch.setattr(user_service, "hash_password", recording_hash)
    monkeypatch.setattr(user_service, "verify_password", recording_verify)
    return calls


class TestHashingOffLoop:
    """Password hashing must not block the event loop."""

    @pytest.mark.asyncio
    async def test_register_hashes_in_threadpool(self, service, hash_calls):
        loop_thread = threading.get_ident()

        user = await service.register("Ada", "ada@example.com", "analytical")

        assert user["email"] == "ada@example.com"
        assert "password_hash" not in user
        assert [kind for kind, _, _ in hash_calls] == ["hash"]
        assert hash_calls[0][1] != loop_thread

    @pytest.mark.asyncio
    async def test_login_verifies_in_threadpool(self, service, hash_calls):
        await service.register("Ada", "ada@example.com", "analytical")
        hash_calls.clear()
        loop_thread = threading.get_ident()

        user = await service.authenticate("ada@example.com", "analytical")

        assert user["email"] == "ada@example.com"
        assert [kind for kind, _, _ in hash_calls] == ["verify"]
        assert hash_calls[0][1] != loop_thread


class TestAuthenticate:
    """Credential checks."""

    @pytest.mark.asyncio
    async def test_unknown_email_still_checks_a_hash(self, service, hash_calls):
        loop_thread = threading.get_ident()

        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("nobody@example.com", "whatever")

        assert len(hash_calls) == 1
        kind, thread, stored_hash = hash_calls[0]
        assert kind == "verify"
        assert thread != loop_thread
        assert stored_hash == dummy_hash()

    @pytest.mark.asyncio
    async def test_dummy_hash_never_authenticates(self, service):
        # Even a password matching nothing real must not log in an unknown email
        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("nobody@example.com", "")

    @pytest.mark.asyncio
    async def test_wrong_password(self, service):
        await service.register("Ada", "ada@example.com", "analytical")

        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("ada@example.com", "wrong-password")

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service):
        await service.register("Ada", "ada@example.com", "analytical")

        with pytest.raises(EmailTakenError):
            await service.register("Other", "ada@example.com", "different")


class TestDummyHash:
    """The placeholder hash used for unknown emails."""

    def test_dummy_hash_is_stable_and_well_formed(self):
        assert dummy_hash() == dummy_hash()
        assert dummy_hash().startswith("scrypt$")
        assert not verify_password("", dummy_hash())
