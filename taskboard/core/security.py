"""Password helpers (hashing and verification)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def is_hashed(stored: str | None) -> bool:
    return (stored or "").startswith(_PREFIX)


def verify_password(password: str, stored: str | None) -> bool:
    """
    Check a login password against the stored value.

    Hashed values carry the ``argon2$`` prefix. Anything else is a legacy
    plaintext record from users.json and is compared verbatim; those records
    must be migrated with scripts/hash_passwords.py before a real deployment.
    """
    stored_value = stored or ""
    if stored_value.startswith(_PREFIX):
        hashed = stored_value[len(_PREFIX) :]
        try:
            return _ph.verify(hashed, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    return secrets.compare_digest(stored_value.encode("utf-8"), (password or "").encode("utf-8"))
