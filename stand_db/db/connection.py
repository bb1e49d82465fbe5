"""
Connection handle and factory for stand_db.

This file defines:
- Connection: the handle every CRUD / query function takes first
- connect(): build a Connection from coordinates + backend-kind tag
- connect_from_config(): build a Connection from StandDBConfig
- ConnectionFactory: hands out Connections, with a context manager

The binding strategy (positional vs named) is resolved once, here, and
carried by the handle; nothing downstream re-checks the kind.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from .backend_base import DBBackend, ensure_backend
from .postgres_backend import PostgresBackend
from .sqlite_backend import SQLiteBackend
from ..config import StandDBConfig, load_config
from ..errors import ConfigurationError, DBConnectionError, ExecutionError, StandDBError
from ..query.binding import Binding, ParamStyle
from ..query.builder import QueryBuilder

logger = logging.getLogger(__name__)


DRIVERS = {
    "sqlite": "sqlite",
    "sqlite3": "sqlite",
    "postgres": "postgres",
    "postgresql": "postgres",
    "psycopg2": "postgres",
}


class Connection:
    """
    Thin wrapper around a raw DB-API 2.0 connection.

    Responsibilities:
        - Carry the backend and its binding strategy
        - Provide a stable API for SQL execution (execute, fetch, etc.)
        - Normalize rows across backends (return Python dicts)
        - Remember the id produced by the most recent INSERT

    Notes:
        - Library functions never close the handle; the caller owns it
        - Not safe for concurrent use unless the driver guarantees it
    """

    def __init__(
        self,
        raw_conn: Any,
        backend: DBBackend,
        style: Union[str, ParamStyle] = ParamStyle.POSITIONAL,
        *,
        id_column: Optional[str] = "id",
    ):
        self.raw = raw_conn
        self.backend = ensure_backend(backend)
        self.style = ParamStyle.parse(style)
        self.binding: Binding = backend.binding(self.style)
        self.builder = QueryBuilder(self.binding)
        self.id_column = id_column
        self.last_insert_id: Any = None
        self.closed = False

    @property
    def helpers(self):
        return self.backend.helpers

    # ------------------------------------------------------------------
    # SQL execution wrappers
    # ------------------------------------------------------------------

    def execute(self, query: str, params: Any = None):
        """
        Execute a single SQL statement.
        Returns the underlying cursor.
        """
        return self.helpers.safe_execute(
            self.raw, query, params, self.backend.classify_error
        )

    def fetch_all(self, query: str, params: Any = None):
        """
        Execute a SELECT statement and return a list of dict rows.
        """
        rows = self.helpers.safe_fetch_all(
            self.raw, query, params, self.backend.classify_error
        )
        return [self.helpers.row_to_dict(r) for r in rows]

    def fetch_one(self, query: str, params: Any = None):
        """
        Execute a SELECT statement and return a single dict row or None.
        """
        row = self.helpers.safe_fetch_one(
            self.raw, query, params, self.backend.classify_error
        )
        return self.helpers.row_to_dict(row) if row else None

    # ------------------------------------------------------------------
    # Transaction and connection lifecycle
    # ------------------------------------------------------------------

    def _wrap(self, action: str, fn, *args) -> None:
        try:
            fn(*args)
        except StandDBError:
            raise
        except Exception as e:
            raise ExecutionError(f"{action} failed: {e}") from e

    def begin(self) -> None:
        """Start an explicit transaction. Nesting is not supported."""
        self._wrap("Begin transaction", self.backend.begin, self.raw)

    def commit(self) -> None:
        """Commit the current transaction."""
        self._wrap("Commit", self.backend.commit, self.raw)

    def rollback(self) -> None:
        """Roll back the current transaction."""
        self._wrap("Rollback", self.backend.rollback, self.raw)

    def close(self) -> None:
        """
        Close the underlying connection. Safe to call more than once.
        """
        if self.closed:
            return
        self.closed = True
        try:
            self.raw.close()
        except Exception:
            logger.exception("Error closing %s connection", self.backend.name)

    def __repr__(self) -> str:
        return f"Connection({self.backend!r}, style={self.style.value!r})"


# ----------------------------------------------------------------------
# Factory functions
# ----------------------------------------------------------------------

def create_backend(
    driver: str,
    host: str = "",
    user: str = "",
    password: str = "",
    database: str = "",
    *,
    port: Optional[int] = None,
    options: Optional[Dict[str, Any]] = None,
) -> DBBackend:
    """
    Select and construct the driver backend.

    Raises
    ------
    ConfigurationError
        If `driver` is not a known driver name.
    """
    name = DRIVERS.get(str(driver).strip().lower())
    if name is None:
        raise ConfigurationError(
            f"Invalid driver: {driver!r} (expected 'sqlite' or 'postgres')"
        )
    if name == "sqlite":
        return SQLiteBackend(database or ":memory:", options=options)
    return PostgresBackend(
        host, user, password, database, port=port, options=options
    )


def connect(
    host: str = "",
    user: str = "",
    password: str = "",
    database: str = "",
    kind: Union[str, ParamStyle] = ParamStyle.POSITIONAL,
    driver: str = "sqlite",
    options: Optional[Dict[str, Any]] = None,
    *,
    port: Optional[int] = None,
    id_column: Optional[str] = "id",
) -> Connection:
    """
    Open a database connection.

    Parameters
    ----------
    host, user, password:
        Network coordinates (ignored by SQLite).
    database:
        SQLite file path (":memory:" allowed) or Postgres database name.
    kind:
        Backend-kind tag: "positional" or "named".
    driver:
        "sqlite" or "postgres".
    options:
        Extra keyword arguments for the driver's connect call.
    id_column:
        Column read back as the generated identifier.

    Raises
    ------
    ConfigurationError
        Invalid `kind` or `driver`.
    DBConnectionError
        Network, authentication or file failure.
    """
    style = ParamStyle.parse(kind)
    backend = create_backend(
        driver, host, user, password, database, port=port, options=options
    )

    try:
        raw = backend.connect()
    except StandDBError:
        raise
    except Exception as e:
        raise DBConnectionError(
            f"{backend.name} connection error: {e}"
        ) from e

    logger.info("Opened %s connection (%s binding)", backend.name, style.value)
    return Connection(raw, backend, style, id_column=id_column)


def connect_from_config(config: Optional[StandDBConfig] = None) -> Connection:
    """Open a connection described by a StandDBConfig (or the environment)."""
    cfg = config or load_config()

    if cfg.enable_logging:
        logging.basicConfig(level=logging.INFO)
        logger.info("Connecting with driver=%s kind=%s", cfg.driver, cfg.kind)

    return connect(
        cfg.host,
        cfg.user,
        cfg.password,
        cfg.database,
        kind=cfg.kind,
        driver=cfg.driver,
        options=cfg.options,
        port=cfg.port,
        id_column=cfg.id_column,
    )


# ----------------------------------------------------------------------
# Factory
# ----------------------------------------------------------------------

class ConnectionFactory:
    """
    Connection factory bound to one configuration.

    There is no pooling: every get() opens a fresh connection.
    """

    def __init__(self, config: Optional[StandDBConfig] = None):
        self.config = config or load_config()

    def get(self) -> Connection:
        """
        Open a new Connection.
        """
        return connect_from_config(self.config)

    # ------------------------------------------------------------------
    # Context manager syntax:
    #     with factory.connection() as conn:
    #         ...
    # ------------------------------------------------------------------

    def connection(self):
        return _ConnectionContext(self)


class _ConnectionContext:
    """
    Internal context manager for Connection.

    The connection is always closed on exit. Open transactions are not
    rolled back explicitly; closing discards them.
    """

    def __init__(self, factory: ConnectionFactory):
        self.factory = factory
        self.conn: Optional[Connection] = None

    def __enter__(self) -> Connection:
        self.conn = self.factory.get()
        return self.conn

    def __exit__(self, exc_type, exc, tb):
        if self.conn is not None:
            self.conn.close()

        # Propagate exceptions
        return False


__all__ = [
    "DRIVERS",
    "Connection",
    "create_backend",
    "connect",
    "connect_from_config",
    "ConnectionFactory",
]
