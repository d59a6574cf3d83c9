# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - database.py: Pooled Supabase connector with scoped client checkout
# - passwords.py: Salted scrypt password hashing
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.database import Database
from lib.passwords import hash_password, verify_password

__all__ = [
    "Database",
    "hash_password",
    "verify_password",
]
