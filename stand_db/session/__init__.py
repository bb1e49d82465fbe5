"""
stand_db.session

Session handling with an injectable store:

      * SessionConfig / SessionManager / Session
      * flash messages
      * MemorySessionStore, DBSessionStore
"""

from .store import SessionStore, MemorySessionStore, DBSessionStore
from .session import (
    SessionConfig,
    Session,
    SessionManager,
    generate_session_id,
    init_session,
)

__all__ = [
    "SessionStore",
    "MemorySessionStore",
    "DBSessionStore",
    "SessionConfig",
    "Session",
    "SessionManager",
    "generate_session_id",
    "init_session",
]
