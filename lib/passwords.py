# =============================================================================
# lib/passwords.py - Password Hashing
# =============================================================================
# Salted scrypt hashes, stored as "scrypt$<salt hex>$<hash hex>".
#
# Usage:
#   stored = hash_password("hunter22")
#   verify_password("hunter22", stored)  # True
# =============================================================================

import hashlib
import hmac
import logging
import secrets
from functools import lru_cache

logger = logging.getLogger(__name__)

# scrypt cost parameters (n=2**14, r=8, p=1 uses ~16MB per hash)
SCRYPT_N = 2 ** 14
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_DKLEN = 64
SALT_BYTES = 16

HASH_SCHEME = "scrypt"


def _scrypt(password: str, salt: bytes) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=SCRYPT_DKLEN,
    )


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    salt = secrets.token_bytes(SALT_BYTES)
    return f"{HASH_SCHEME}${salt.hex()}${_scrypt(password, salt).hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """
    Check a password against a stored hash in constant time.

    Returns False for malformed or foreign-scheme hashes instead of raising.
    """
    try:
        scheme, salt_hex, digest_hex = stored_hash.split("$")
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
    except (AttributeError, ValueError):
        logger.warning("Stored password hash is malformed")
        return False

    if scheme != HASH_SCHEME:
        logger.warning(f"Unsupported password hash scheme: {scheme}")
        return False

    return hmac.compare_digest(_scrypt(password, salt), expected)


@lru_cache(maxsize=1)
def dummy_hash() -> str:
    """
    A valid hash that no real password was used to create.

    Checked against when a login names an unknown email, so both failure
    paths pay the same scrypt cost.
    """
    return hash_password(secrets.token_urlsafe(32))
