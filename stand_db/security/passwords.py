"""
Password hashing with bcrypt.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 12

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


def verify_password(password: str, hashed: str) -> bool:
    """
    Check `password` against a bcrypt hash. A malformed hash simply fails
    verification.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii"))
    except ValueError:
        return False


def password_needs_rehash(hashed: str, rounds: int = DEFAULT_ROUNDS) -> bool:
    """True if `hashed` is not a bcrypt hash at cost `rounds`."""
    if not hashed.startswith(_BCRYPT_PREFIXES) or len(hashed) < 7:
        return True
    try:
        cost = int(hashed[4:6])
    except ValueError:
        return True
    return cost != rounds


__all__ = [
    "DEFAULT_ROUNDS",
    "hash_password",
    "verify_password",
    "password_needs_rehash",
]
