"""
SQLite backend for stand_db.

Used for:
    - local development
    - tests
    - embedded / single-file deployments

sqlite3 natively understands both binding conventions:

    positional  ->  col = ?
    named       ->  col = :col

Connections are opened in autocommit mode (isolation_level=None) so that
statements outside an explicit begin/commit pair persist immediately, and
BEGIN is issued explicitly by `begin()`.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

from . import helpers
from .backend_base import DBBackend
from ..errors import ExecutionError, PreparationError, StandDBError
from ..query.binding import Binding, NamedBinding, ParamStyle, PositionalBinding


# Message prefixes sqlite3 uses for statements rejected at prepare time
_PREPARE_MESSAGES = (
    "near ",
    "no such table",
    "no such column",
    "syntax error",
    "incomplete input",
    "unrecognized token",
    "wrong number of arguments",
)


class SQLiteBackend(DBBackend):
    """
    Minimal SQLite backend.

    Parameters
    ----------
    db_path : str
        Path to the SQLite database file, or ":memory:".
    options : dict, optional
        Extra keyword arguments for sqlite3.connect (e.g. timeout).
    """

    name = "sqlite"

    def __init__(self, db_path: str, options: Optional[Dict[str, Any]] = None):
        self.path = db_path if db_path == ":memory:" else str(Path(db_path))
        self.options = dict(options or {})
        self._helpers = helpers

    @property
    def helpers(self):
        return self._helpers

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """
        Open a SQLite3 connection with row_factory=dict-like access.

        Also ensures foreign keys are enforced.
        """
        opts = {"isolation_level": None, **self.options}
        conn = sqlite3.connect(self.path, **opts)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def binding(self, style: ParamStyle) -> Binding:
        if style is ParamStyle.NAMED:
            return NamedBinding(":{name}")
        return PositionalBinding("?")

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def classify_error(self, exc: BaseException) -> Type[StandDBError]:
        """
        sqlite3 raises ProgrammingError for binding mismatches and
        OperationalError for both prepare failures and runtime failures;
        the message tells them apart.
        """
        if isinstance(exc, sqlite3.ProgrammingError):
            return PreparationError
        if isinstance(exc, sqlite3.OperationalError):
            msg = str(exc).lower()
            if msg.startswith(_PREPARE_MESSAGES):
                return PreparationError
        return ExecutionError

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin(self, raw: sqlite3.Connection) -> None:
        raw.execute("BEGIN")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def columns_statement(self, table: str, binding: Binding) -> Tuple[str, Any]:
        params = binding.collector()
        sql = (
            "SELECT name, type, \"notnull\", dflt_value, pk "
            f"FROM pragma_table_info({params.add('table_name', table)})"
        )
        return sql, params.values

    def __repr__(self) -> str:
        return f"SQLiteBackend({self.path!r})"


__all__ = ["SQLiteBackend"]
