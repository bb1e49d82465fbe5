"""
Session storage backends.

A SessionStore persists session payloads keyed by session id. The
SessionManager loads from it at request start and saves to it at request
end; nothing else touches the store.

Implementations:
    MemorySessionStore  – process-local dict (tests, single-process apps)
    DBSessionStore      – JSON payloads in a table, written through
                          stand_db.crud on any Connection
"""

from __future__ import annotations

import copy
import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, runtime_checkable

from .. import crud
from ..db.connection import Connection
from ..query.executor import StatementKind, execute

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


# ----------------------------------------------------------------------
# Protocol (interface)
# ----------------------------------------------------------------------

@runtime_checkable
class SessionStore(Protocol):
    """
    Interface for session persistence.
    """

    def load(self, sid: str) -> Optional[Dict[str, Any]]:
        """Return the payload for `sid`, or None if missing or expired."""
        ...

    def save(self, sid: str, data: Dict[str, Any], expires_at: float) -> None:
        """Persist the payload for `sid` until `expires_at` (epoch seconds)."""
        ...

    def delete(self, sid: str) -> None:
        ...

    def gc(self, now: float) -> int:
        """Drop every session that expired before `now`; return how many."""
        ...


# ----------------------------------------------------------------------
# In-memory store
# ----------------------------------------------------------------------

class MemorySessionStore:
    """Process-local store. Payloads are deep-copied in and out."""

    def __init__(self, clock: Clock = time.time):
        self._clock = clock
        self._items: Dict[str, Tuple[Dict[str, Any], float]] = {}

    def load(self, sid: str) -> Optional[Dict[str, Any]]:
        item = self._items.get(sid)
        if item is None:
            return None
        data, expires_at = item
        if expires_at <= self._clock():
            del self._items[sid]
            return None
        return copy.deepcopy(data)

    def save(self, sid: str, data: Dict[str, Any], expires_at: float) -> None:
        self._items[sid] = (copy.deepcopy(data), expires_at)

    def delete(self, sid: str) -> None:
        self._items.pop(sid, None)

    def gc(self, now: float) -> int:
        expired = [sid for sid, (_, exp) in self._items.items() if exp <= now]
        for sid in expired:
            del self._items[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._items)


# ----------------------------------------------------------------------
# Database store
# ----------------------------------------------------------------------

class DBSessionStore:
    """
    Store sessions as JSON rows:

        CREATE TABLE sessions (
            id          VARCHAR(256) PRIMARY KEY,
            payload     TEXT NOT NULL,
            expires_at  DOUBLE PRECISION NOT NULL
        );

    Works with either driver and either binding convention.
    """

    def __init__(
        self,
        conn: Connection,
        table: str = "sessions",
        clock: Clock = time.time,
    ):
        self.conn = conn
        self.table = table
        self._clock = clock

    def create_table(self) -> None:
        """Create the sessions table if it does not exist. Idempotent."""
        execute(
            self.conn,
            f"CREATE TABLE IF NOT EXISTS {self.table} ("
            "id VARCHAR(256) PRIMARY KEY, "
            "payload TEXT NOT NULL, "
            "expires_at DOUBLE PRECISION NOT NULL)",
            kind=StatementKind.OTHER,
        )

    def load(self, sid: str) -> Optional[Dict[str, Any]]:
        row = crud.select_one(self.conn, self.table, {"id": sid})
        if row is None:
            return None
        if float(row["expires_at"]) <= self._clock():
            crud.delete(self.conn, self.table, {"id": sid})
            return None
        try:
            return json.loads(row["payload"])
        except ValueError:
            logger.warning("Discarding unreadable session payload for %s", sid)
            crud.delete(self.conn, self.table, {"id": sid})
            return None

    def save(self, sid: str, data: Dict[str, Any], expires_at: float) -> None:
        crud.insert_or_update(
            self.conn,
            self.table,
            {
                "id": sid,
                "payload": json.dumps(data, ensure_ascii=False),
                "expires_at": float(expires_at),
            },
            ["id"],
        )

    def delete(self, sid: str) -> None:
        crud.delete(self.conn, self.table, {"id": sid})

    def gc(self, now: float) -> int:
        params = self.conn.binding.collector()
        sql = f"DELETE FROM {self.table} WHERE expires_at <= {params.add('now', float(now))}"
        return execute(self.conn, sql, params.values, StatementKind.DELETE).rowcount


__all__ = [
    "SessionStore",
    "MemorySessionStore",
    "DBSessionStore",
]
