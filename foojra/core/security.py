"""Security helpers (hashing and verification)."""

from __future__ import annotations

from functools import lru_cache

from argon2 import PasswordHasher, exceptions as argon_exc

from foojra.core.config import get_settings


@lru_cache
def _hasher(time_cost: int) -> PasswordHasher:
    return PasswordHasher(time_cost=time_cost)


def hash_password(password: str) -> str:
    """Create an Argon2 hash; the salt is random for every call."""
    settings = get_settings()
    return _hasher(settings.password_hash_time_cost).hash(password)


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored or password is None:
        return False
    try:
        # verification reads the cost from the hash itself
        return _hasher(1).verify(stored, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False
