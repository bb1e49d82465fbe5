"""
Random identifiers: UUID v4 strings and opaque access tokens.
"""

from __future__ import annotations

import secrets
import uuid

from ..errors import ValidationError


def generate_uuid() -> str:
    """Return a random (version 4) UUID in canonical 8-4-4-4-12 form."""
    return str(uuid.uuid4())


def generate_access_token(length: int = 32) -> str:
    """Return `length` hex characters drawn from the OS CSPRNG."""
    if length < 1:
        raise ValidationError(f"Token length must be positive, got {length}")
    return secrets.token_hex((length + 1) // 2)[:length]


__all__ = ["generate_uuid", "generate_access_token"]
