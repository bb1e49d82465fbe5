"""
Backend base interfaces for stand_db.

This module defines the contract that both database drivers (SQLite,
Postgres) must satisfy. Everything driver-specific lives behind it, so the
query builder, executor and CRUD layer never branch on the driver name.

Backends must expose:

    backend.name                 -> "sqlite" | "postgres"
    backend.helpers              -> module with safe_execute / row_to_dict etc.
    backend.connect()            -> raw DB-API connection
    backend.binding(style)       -> Binding strategy with driver markers
    backend.classify_error(exc)  -> PreparationError | ExecutionError
    backend.last_insert_id(raw, cur) -> generated id after an INSERT
    backend.begin/commit/rollback(raw)

This file provides:
- DBBackend: abstract base class
- BackendLike: structural protocol
- ensure_backend: runtime validator
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, Tuple, Type, runtime_checkable

from ..errors import ExecutionError, StandDBError
from ..query.binding import Binding, ParamStyle


# ---------------------------------------------------------------------------
# Abstract Base Backend
# ---------------------------------------------------------------------------

class DBBackend(ABC):
    """
    Abstract base class for a stand_db driver backend.

    Concrete subclasses own their connection coordinates
    (e.g. SQLiteBackend(path), PostgresBackend(host=..., ...)).
    """

    name: str = "abstract"

    @property
    @abstractmethod
    def helpers(self) -> Any:
        """
        Return the helper module associated with this backend.

        Normally this is stand_db.db.helpers, but test backends may
        provide compatible modules.
        """
        raise NotImplementedError

    @abstractmethod
    def connect(self) -> Any:
        """
        Acquire and return a new raw DB-API 2.0 connection.
        """
        raise NotImplementedError

    @abstractmethod
    def binding(self, style: ParamStyle) -> Binding:
        """
        Return the Binding strategy for `style`, using this driver's
        placeholder markers.
        """
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    def classify_error(self, exc: BaseException) -> Type[StandDBError]:
        """
        Map a driver exception onto the stand_db taxonomy.

        Default: everything is an execution error.
        """
        return ExecutionError

    # ------------------------------------------------------------------
    # Result helpers
    # ------------------------------------------------------------------

    def insert_returning(self, id_column: Optional[str]) -> Optional[str]:
        """
        Column list for a RETURNING clause on generated INSERTs, or None
        if the driver exposes generated ids through the cursor.
        """
        return None

    def last_insert_id(self, raw: Any, cursor: Any) -> Any:
        """Generated id after an INSERT executed on `cursor`."""
        return getattr(cursor, "lastrowid", None)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @abstractmethod
    def begin(self, raw: Any) -> None:
        raise NotImplementedError

    def commit(self, raw: Any) -> None:
        raw.commit()

    def rollback(self, raw: Any) -> None:
        raw.rollback()

    # ------------------------------------------------------------------
    # Introspection / quoting
    # ------------------------------------------------------------------

    @abstractmethod
    def columns_statement(self, table: str, binding: Binding) -> Tuple[str, Any]:
        """Return (sql, params) listing the columns of `table`."""
        raise NotImplementedError

    def escape(self, raw: Any, value: str) -> str:
        """
        Escape a string literal for the non-parameterizable parts of a
        query, without the surrounding quotes.
        """
        return value.replace("'", "''")


# ---------------------------------------------------------------------------
# Structural Protocol
# ---------------------------------------------------------------------------

@runtime_checkable
class BackendLike(Protocol):
    """
    Structural protocol for objects usable as a stand_db backend.

    This lets Connection operate on mocks and test doubles without
    requiring them to subclass DBBackend.
    """

    name: str
    helpers: Any

    def connect(self) -> Any:
        ...

    def binding(self, style: ParamStyle) -> Binding:
        ...

    def classify_error(self, exc: BaseException) -> Type[StandDBError]:
        ...


# ---------------------------------------------------------------------------
# Runtime Guard
# ---------------------------------------------------------------------------

def ensure_backend(backend: Any) -> BackendLike:
    """
    Validate that an object behaves like a stand_db backend.

    Raises:
        TypeError if required attributes are missing.
    """
    if not isinstance(backend, BackendLike):
        required = ("name", "helpers", "connect", "binding", "classify_error")
        missing = [attr for attr in required if not hasattr(backend, attr)]
        if missing:
            raise TypeError(
                f"Invalid stand_db backend {backend!r}: missing attributes {missing}"
            )

    return backend  # type: ignore[return-value]


__all__ = [
    "DBBackend",
    "BackendLike",
    "ensure_backend",
]
