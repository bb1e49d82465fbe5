"""
CSRF tokens stored server-side in the session.

Each form (or action) name gets its own token, stored with the time it
was issued:

    session["csrf_tokens"] = {
        "default": {"token": "<64 hex chars>", "timestamp": 1700000000},
        ...
    }
"""

from __future__ import annotations

import hmac
import secrets
import time
from typing import Any, Callable, Dict, Optional

TOKENS_KEY = "csrf_tokens"
DEFAULT_EXPIRATION = 3600


class CsrfManager:
    """
    Issue and validate CSRF tokens for one session.

    Parameters
    ----------
    session:
        Any object with get(key, default) / set(key, value), normally a
        stand_db.session.Session.
    expiration:
        Default validity window in seconds.
    clock:
        Time source (epoch seconds); injectable for tests.
    """

    def __init__(
        self,
        session: Any,
        expiration: int = DEFAULT_EXPIRATION,
        clock: Callable[[], float] = time.time,
    ):
        self.session = session
        self.expiration = expiration
        self._clock = clock

    def _tokens(self) -> Dict[str, Dict[str, Any]]:
        tokens = self.session.get(TOKENS_KEY)
        if not isinstance(tokens, dict):
            tokens = {}
            self.session.set(TOKENS_KEY, tokens)
        return tokens

    def generate(self, form_name: str = "default") -> str:
        """Issue a fresh token for `form_name`, replacing any previous one."""
        token = secrets.token_hex(32)
        self._tokens()[form_name] = {
            "token": token,
            "timestamp": int(self._clock()),
        }
        return token

    def validate(
        self,
        token: str,
        form_name: str = "default",
        expiration: Optional[int] = None,
    ) -> bool:
        """
        True if `token` matches the stored token for `form_name` and has
        not expired. An expired token is removed.
        """
        window = self.expiration if expiration is None else expiration
        tokens = self._tokens()
        stored = tokens.get(form_name)
        if not stored or not isinstance(token, str):
            return False

        if self._clock() - stored["timestamp"] > window:
            del tokens[form_name]
            return False

        return hmac.compare_digest(
            str(stored["token"]).encode("utf-8"),
            token.encode("utf-8"),
        )

    def clean_expired(self, expiration: Optional[int] = None) -> int:
        """Remove every expired token; return how many were dropped."""
        window = self.expiration if expiration is None else expiration
        now = self._clock()
        tokens = self._tokens()
        expired = [
            name for name, entry in tokens.items()
            if now - entry["timestamp"] > window
        ]
        for name in expired:
            del tokens[name]
        return len(expired)


__all__ = ["CsrfManager", "TOKENS_KEY", "DEFAULT_EXPIRATION"]
