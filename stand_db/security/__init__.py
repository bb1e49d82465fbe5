"""
stand_db.security

Request-facing security helpers:

      * sanitize                       – trim + HTML-escape, recursively
      * CsrfManager                    – per-form CSRF tokens in the session
      * hash_password / verify_password / password_needs_rehash (bcrypt)
      * generate_uuid / generate_access_token
"""

from .sanitize import sanitize
from .csrf import CsrfManager
from .passwords import hash_password, verify_password, password_needs_rehash
from .tokens import generate_uuid, generate_access_token

__all__ = [
    "sanitize",
    "CsrfManager",
    "hash_password",
    "verify_password",
    "password_needs_rehash",
    "generate_uuid",
    "generate_access_token",
]
