"""
Request-scoped sessions.

Lifecycle:

    manager = SessionManager(store, SessionConfig.for_request(is_tls=True))
    session = manager.open(request_cookie_sid)     # request start
    session.set("user_id", 42)
    session.flash("success", "Saved")
    manager.persist(session)                        # request end
    response.set_cookie(**manager.cookie_params(session))

The hardening defaults mirror a conservative server-side session setup:
HTTP-only cookies, secure cookies on TLS, strict mode (never adopt an
unknown session id), one hour lifetime, 48-character ids at 6 bits per
character.
"""

from __future__ import annotations

import dataclasses
import logging
import secrets
import string
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..errors import ConfigurationError
from .store import MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Alphabets by bits-per-character
SID_ALPHABETS = {
    4: "0123456789abcdef",
    5: "0123456789abcdefghijklmnopqrstuv",
    6: string.digits + string.ascii_lowercase + string.ascii_uppercase + "-,",
}

FLASH_KEY = "flash_messages"


# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class SessionConfig:
    """
    Session hardening options.

    Attributes
    ----------
    cookie_httponly:
        Hide the session cookie from client-side scripts.
    cookie_secure:
        Only send the cookie over HTTPS.
    use_strict_mode:
        Refuse to adopt session ids the store does not know.
    gc_maxlifetime:
        Session lifetime in seconds.
    sid_length, sid_bits_per_character:
        Session id size and entropy per character (4, 5 or 6).
    """

    cookie_httponly: bool = True
    cookie_secure: bool = False
    use_strict_mode: bool = True
    gc_maxlifetime: int = 3600
    sid_length: int = 48
    sid_bits_per_character: int = 6

    cookie_name: str = "STANDSESSID"
    cookie_path: str = "/"
    cookie_domain: Optional[str] = None
    cookie_samesite: str = "Lax"

    def __post_init__(self):
        if self.sid_bits_per_character not in SID_ALPHABETS:
            raise ConfigurationError(
                f"sid_bits_per_character must be 4, 5 or 6, got {self.sid_bits_per_character}"
            )
        if not 22 <= self.sid_length <= 256:
            raise ConfigurationError(
                f"sid_length must be between 22 and 256, got {self.sid_length}"
            )
        if self.gc_maxlifetime < 1:
            raise ConfigurationError("gc_maxlifetime must be positive")

    def merged(self, **overrides: Any) -> "SessionConfig":
        """Return a copy with caller options merged over these values."""
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown session options: {unknown}")
        return dataclasses.replace(self, **overrides)

    @classmethod
    def for_request(cls, is_tls: bool, **overrides: Any) -> "SessionConfig":
        """Defaults with `cookie_secure` following the request's TLS state."""
        return cls(cookie_secure=bool(is_tls)).merged(**overrides)


def generate_session_id(length: int = 48, bits_per_character: int = 6) -> str:
    alphabet = SID_ALPHABETS[bits_per_character]
    return "".join(secrets.choice(alphabet) for _ in range(length))


# ----------------------------------------------------------------------
# Session
# ----------------------------------------------------------------------

class Session:
    """
    Key-value state for one client session.

    Values must be JSON-serializable when a DBSessionStore is used.
    """

    def __init__(
        self,
        sid: str,
        data: Optional[Dict[str, Any]] = None,
        *,
        is_new: bool = False,
        clock: Clock = time.time,
    ):
        self.id = sid
        self.data: Dict[str, Any] = dict(data or {})
        self.is_new = is_new
        self.destroyed = False
        self.previous_id: Optional[str] = None
        self._clock = clock

    # ------------------------------------------------------------------
    # Key-value API
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def has(self, key: str) -> bool:
        """True if `key` is present and not None."""
        return self.data.get(key) is not None

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def clear(self) -> None:
        self.data.clear()

    def destroy(self) -> bool:
        """
        Drop all data and mark the session for deletion; the manager
        removes it from the store and expires the cookie on persist.
        """
        self.data.clear()
        self.destroyed = True
        return True

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    # ------------------------------------------------------------------
    # Flash messages
    # ------------------------------------------------------------------

    def flash(self, type: str, message: str) -> None:
        """Queue a one-shot message ('success', 'error', 'info', 'warning')."""
        messages = self.data.setdefault(FLASH_KEY, [])
        messages.append({
            "type": type,
            "message": message,
            "timestamp": int(self._clock()),
        })

    def get_flashes(self) -> List[Dict[str, Any]]:
        """Return every queued flash message and clear the queue."""
        messages = self.data.get(FLASH_KEY) or []
        self.data[FLASH_KEY] = []
        return messages

    def has_flash(self) -> bool:
        return bool(self.data.get(FLASH_KEY))

    def __repr__(self) -> str:
        return f"Session({self.id[:8]}..., keys={sorted(self.data)})"


# ----------------------------------------------------------------------
# Manager
# ----------------------------------------------------------------------

class SessionManager:
    """
    Opens sessions at request start and persists them at request end.

    Parameters
    ----------
    store:
        SessionStore implementation.
    config:
        SessionConfig; defaults apply when omitted.
    clock:
        Time source (epoch seconds); injectable for tests.
    """

    def __init__(
        self,
        store: SessionStore,
        config: Optional[SessionConfig] = None,
        clock: Clock = time.time,
    ):
        self.store = store
        self.config = config or SessionConfig()
        self._clock = clock

    def _new_id(self) -> str:
        return generate_session_id(
            self.config.sid_length, self.config.sid_bits_per_character
        )

    def open(self, sid: Optional[str] = None) -> Session:
        """
        Load the session for `sid`, or start a new one.

        In strict mode an unknown or expired id is never adopted; a fresh
        id is issued instead.
        """
        if sid:
            data = self.store.load(sid)
            if data is not None:
                return Session(sid, data, clock=self._clock)
            if not self.config.use_strict_mode:
                return Session(sid, is_new=True, clock=self._clock)
            logger.info("Rejected unknown session id (strict mode)")

        return Session(self._new_id(), is_new=True, clock=self._clock)

    def persist(self, session: Session) -> None:
        """Write the session back to the store (or delete it if destroyed)."""
        if session.destroyed:
            self.store.delete(session.id)
            return
        expires_at = self._clock() + self.config.gc_maxlifetime
        self.store.save(session.id, session.data, expires_at)

    def regenerate_id(self, session: Session, delete_old: bool = True) -> Session:
        """
        Give `session` a fresh id, keeping its data. With `delete_old` the
        stored copy under the previous id is removed.
        """
        old_id = session.id
        session.previous_id = old_id
        session.id = self._new_id()
        if delete_old:
            self.store.delete(old_id)
        return session

    def cookie_params(self, session: Session) -> Dict[str, Any]:
        """
        Cookie attributes for the response. A destroyed session yields an
        immediately expiring, empty cookie.
        """
        cfg = self.config
        params: Dict[str, Any] = {
            "key": cfg.cookie_name,
            "value": session.id,
            "path": cfg.cookie_path,
            "domain": cfg.cookie_domain,
            "secure": cfg.cookie_secure,
            "httponly": cfg.cookie_httponly,
            "samesite": cfg.cookie_samesite,
            "max_age": None,
        }
        if session.destroyed:
            params["value"] = ""
            params["max_age"] = 0
        return params

    def gc(self) -> int:
        return self.store.gc(self._clock())


def init_session(
    store: Optional[SessionStore] = None,
    *,
    is_tls: bool = False,
    clock: Clock = time.time,
    **options: Any,
) -> SessionManager:
    """
    Build a SessionManager with the hardening defaults, `options` merged
    over them. An in-memory store is used when none is given.
    """
    config = SessionConfig.for_request(is_tls, **options)
    return SessionManager(store or MemorySessionStore(clock=clock), config, clock=clock)


__all__ = [
    "SessionConfig",
    "Session",
    "SessionManager",
    "generate_session_id",
    "init_session",
    "SID_ALPHABETS",
    "FLASH_KEY",
]
