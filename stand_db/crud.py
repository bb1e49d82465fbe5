"""
CRUD helpers.

Every function takes the Connection handle first; the handle carries the
backend and binding convention, so the same call works against SQLite or
Postgres with positional or named parameters.

Mass mutation is guarded: `update()` / `delete()` refuse an empty
condition map, and the explicit `update_all()` / `delete_all()` entry
points exist for the whole-table case (`delete_all` additionally requires
``confirm=True``).

Table names, column names and ORDER BY text are interpolated verbatim and
must come from trusted code. Values are always bound.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .db.connection import Connection
from .errors import ConfigurationError
from .pagination import Page, page_offset, paginate_window
from .query.builder import Columns
from .query.executor import StatementKind, run

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Insert / select
# ----------------------------------------------------------------------

def insert(conn: Connection, table: str, data: Mapping[str, Any]) -> Any:
    """
    Insert one row and return its generated identifier.

    Raises ConfigurationError if `data` is empty.
    """
    returning = conn.backend.insert_returning(conn.id_column)
    stmt = conn.builder.insert(table, data, returning=returning)
    return run(conn, stmt, StatementKind.INSERT).lastrowid


def select(
    conn: Connection,
    table: str,
    where: Optional[Mapping[str, Any]] = None,
    columns: Columns = None,
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Select rows matching the equality conditions in `where` (AND-combined).

    `order_by` is raw SQL (e.g. "id DESC"); `offset` only applies when
    `limit` is given.
    """
    stmt = conn.builder.select(table, where, columns, order_by, limit, offset)
    return run(conn, stmt, StatementKind.SELECT).rows


def select_one(
    conn: Connection,
    table: str,
    where: Optional[Mapping[str, Any]] = None,
    columns: Columns = None,
) -> Optional[Dict[str, Any]]:
    """Return the first matching row, or None."""
    stmt = conn.builder.select(table, where, columns, limit=1)
    return run(conn, stmt, StatementKind.SELECT).first()


# ----------------------------------------------------------------------
# Update / delete
# ----------------------------------------------------------------------

def update(
    conn: Connection,
    table: str,
    data: Mapping[str, Any],
    where: Mapping[str, Any],
) -> int:
    """
    Update rows matching `where` and return the affected-row count.

    Both `data` and `where` must be non-empty; use update_all() to update
    every row.
    """
    if not data:
        raise ConfigurationError("No data provided for update")
    if not where:
        raise ConfigurationError(
            "No WHERE condition provided for update. Use update_all() to update every row."
        )
    stmt = conn.builder.update(table, data, where)
    return run(conn, stmt, StatementKind.UPDATE).rowcount


def update_all(conn: Connection, table: str, data: Mapping[str, Any]) -> int:
    """Update every row of `table`. Returns the affected-row count."""
    stmt = conn.builder.update(table, data)
    count = run(conn, stmt, StatementKind.UPDATE).rowcount
    logger.info("update_all on %s affected %d rows", table, count)
    return count


def delete(conn: Connection, table: str, where: Mapping[str, Any]) -> int:
    """
    Delete rows matching `where` and return the deleted-row count.

    Use delete_all() to empty a table.
    """
    if not where:
        raise ConfigurationError(
            "No WHERE condition provided for delete. Use delete_all() to delete every row."
        )
    stmt = conn.builder.delete(table, where)
    return run(conn, stmt, StatementKind.DELETE).rowcount


def delete_all(conn: Connection, table: str, confirm: bool = False) -> int:
    """
    Delete every row of `table`.

    Requires ``confirm=True``. Returns the number of rows removed.
    """
    if confirm is not True:
        raise ConfigurationError(
            "Confirmation required to delete every row: pass confirm=True"
        )
    stmt = conn.builder.delete(table)
    count = run(conn, stmt, StatementKind.DELETE).rowcount
    logger.info("delete_all on %s removed %d rows", table, count)
    return count


# ----------------------------------------------------------------------
# Existence / counting / search
# ----------------------------------------------------------------------

def exists(conn: Connection, table: str, where: Mapping[str, Any]) -> bool:
    """True if at least one row matches `where` (which must be non-empty)."""
    stmt = conn.builder.exists(table, where)
    return bool(run(conn, stmt, StatementKind.SELECT).rows)


def count_records(
    conn: Connection,
    table: str,
    where: Optional[Mapping[str, Any]] = None,
) -> int:
    stmt = conn.builder.count(table, where)
    row = run(conn, stmt, StatementKind.SELECT).first()
    return int(row["count"]) if row else 0


def search_like(
    conn: Connection,
    table: str,
    like: Mapping[str, Any],
    columns: Columns = None,
    operator: str = "OR",
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Substring search: each ``column: value`` pair becomes
    ``column LIKE '%value%'``, combined with `operator` ("AND" / "OR").

    `%` and `_` inside values are not escaped and act as wildcards.
    """
    stmt = conn.builder.search_like(
        table, like, columns, operator, order_by, limit, offset
    )
    return run(conn, stmt, StatementKind.SELECT).rows


def paginate(
    conn: Connection,
    table: str,
    page: int = 1,
    per_page: int = 10,
    where: Optional[Mapping[str, Any]] = None,
    columns: Columns = None,
    order_by: Optional[str] = None,
) -> Page:
    """
    Fetch one page of rows plus the pagination summary.

    `page` is clamped to at least 1.
    """
    total = count_records(conn, table, where)
    info = paginate_window(page, per_page, total)
    data = select(
        conn,
        table,
        where,
        columns,
        order_by,
        limit=per_page,
        offset=page_offset(page, per_page),
    )
    return Page(data=data, pagination=info)


# ----------------------------------------------------------------------
# Upserts
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class UpsertOutcome:
    """
    Result of insert_or_update().

    created=True  -> a new row was inserted; `id` holds its identifier
    created=False -> an existing row was updated; `count` holds the
                     affected-row count
    """

    created: bool
    id: Any = None
    count: int = 0

    @classmethod
    def inserted(cls, row_id: Any) -> "UpsertOutcome":
        return cls(created=True, id=row_id, count=1)

    @classmethod
    def updated(cls, count: int) -> "UpsertOutcome":
        return cls(created=False, count=count)


def upsert(
    conn: Connection,
    table: str,
    data: Mapping[str, Any],
    unique_keys: Iterable[str],
) -> Any:
    """
    Insert `data`, or update the existing row identified by `unique_keys`.

    The condition map is `data` restricted to `unique_keys`. After an
    update the row is re-queried for ``conn.id_column``; 0 is returned when
    no id can be read back.
    """
    where = {k: data[k] for k in unique_keys if k in data}
    if not where:
        raise ConfigurationError(
            "None of the unique keys are present in the data"
        )

    if exists(conn, table, where):
        update(conn, table, data, where)
        if not conn.id_column:
            return 0
        row = select_one(conn, table, where, conn.id_column)
        return row[conn.id_column] if row else 0

    return insert(conn, table, data)


def insert_or_update(
    conn: Connection,
    table: str,
    data: Mapping[str, Any],
    conflict_columns: Iterable[str],
    update_data: Optional[Mapping[str, Any]] = None,
) -> UpsertOutcome:
    """
    Backend-native upsert: ``INSERT ... ON CONFLICT (...) DO UPDATE``.

    Only the keys of `update_data` matter (default: `data`); updated
    columns take the values from the attempted insert. On the update
    path `last_insert_id(conn)` is reset to None.
    """
    if not data:
        raise ConfigurationError("No data provided for insert or update")
    conflict = list(conflict_columns)
    if not conflict:
        raise ConfigurationError("No conflict columns provided for upsert")
    missing = [c for c in conflict if c not in data]
    if missing:
        raise ConfigurationError(f"Conflict columns missing from data: {missing}")

    update_cols = list((update_data if update_data is not None else data).keys())
    existed = exists(conn, table, {c: data[c] for c in conflict})

    stmt = conn.builder.insert_on_conflict(
        table,
        data,
        conflict,
        update_cols,
        returning=conn.backend.insert_returning(conn.id_column),
    )
    result = run(conn, stmt, StatementKind.INSERT)

    if existed:
        # no row was created, so there is no generated id to report
        conn.last_insert_id = None
        return UpsertOutcome.updated(result.rowcount)
    return UpsertOutcome.inserted(result.lastrowid)


# ----------------------------------------------------------------------
# Transactions
# ----------------------------------------------------------------------

def begin_transaction(conn: Connection) -> bool:
    """
    Start a transaction. There is no nesting and no automatic rollback:
    callers catch failures and call rollback_transaction() themselves.
    """
    conn.begin()
    return True


def commit_transaction(conn: Connection) -> bool:
    conn.commit()
    return True


def rollback_transaction(conn: Connection) -> bool:
    conn.rollback()
    return True


# ----------------------------------------------------------------------
# Misc
# ----------------------------------------------------------------------

def last_insert_id(conn: Connection) -> Any:
    """Identifier produced by the most recent INSERT on this handle."""
    return conn.last_insert_id


def escape_string(conn: Connection, value: str) -> str:
    """
    Escape a literal for the parts of a query that cannot be bound.

    Always prefer bound parameters for values.
    """
    return conn.backend.escape(conn.raw, value)


def get_columns(conn: Connection, table: str) -> List[Dict[str, Any]]:
    """Column metadata for `table`, one dict per column, in table order."""
    sql, params = conn.backend.columns_statement(table, conn.binding)
    return conn.fetch_all(sql, params)


__all__ = [
    "insert",
    "select",
    "select_one",
    "update",
    "update_all",
    "delete",
    "delete_all",
    "exists",
    "count_records",
    "search_like",
    "paginate",
    "UpsertOutcome",
    "upsert",
    "insert_or_update",
    "begin_transaction",
    "commit_transaction",
    "rollback_transaction",
    "last_insert_id",
    "escape_string",
    "get_columns",
]
