"""
Statement executor.

Prepares, binds and executes SQL on a Connection, and normalizes the
outcome into a single QueryResult envelope (rows, rowcount, lastrowid)
whatever the statement text.

`query()` keeps the classic return shapes on top of that envelope:

    SELECT  -> list of dict rows (or one dict / None)
    INSERT  -> generated identifier
    other   -> affected-row count

When no explicit StatementKind is given the kind is inferred from the
leading SQL keyword. CTE-prefixed (``WITH ...``) or multi-statement SQL is
misclassified by that heuristic; pass `kind=` for those.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .builder import Statement

logger = logging.getLogger(__name__)

_LEADING_KEYWORD = re.compile(r"^\s*([A-Za-z]+)")


class StatementKind(str, Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    OTHER = "other"


def classify(sql: str) -> StatementKind:
    """Infer the statement kind from the leading keyword (case-insensitive)."""
    match = _LEADING_KEYWORD.match(sql)
    if not match:
        return StatementKind.OTHER
    try:
        return StatementKind(match.group(1).lower())
    except ValueError:
        return StatementKind.OTHER


@dataclass
class QueryResult:
    """
    Uniform result envelope.

    rows is populated whenever the statement produced a result set
    (and for SELECT always, possibly empty). lastrowid is only set for
    INSERT statements.
    """

    kind: StatementKind
    rows: List[Dict[str, Any]] = field(default_factory=list)
    rowcount: int = -1
    lastrowid: Any = None

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


def execute(
    conn,
    sql: str,
    params: Any = None,
    kind: Optional[StatementKind] = None,
    *,
    types: str = "",
) -> QueryResult:
    """
    Execute one statement and return a QueryResult.

    Raises
    ------
    PreparationError / ExecutionError
        Backend failure, with the driver exception chained.
    """
    kind = kind or classify(sql)
    if types:
        logger.debug("%s [%s] %s", kind.value, types, sql)
    else:
        logger.debug("%s %s", kind.value, sql)

    cur = conn.execute(sql, params)
    try:
        result = QueryResult(kind=kind)
        if kind is StatementKind.INSERT:
            result.lastrowid = conn.backend.last_insert_id(conn.raw, cur)
            conn.last_insert_id = result.lastrowid
            result.rowcount = cur.rowcount
        elif kind is StatementKind.SELECT or cur.description is not None:
            result.rows = [conn.helpers.row_to_dict(r) for r in cur.fetchall()]
            result.rowcount = len(result.rows)
        else:
            result.rowcount = cur.rowcount
    except Exception as e:
        error_cls = conn.backend.classify_error(e)
        raise error_cls(f"DB fetch failed: {e} | Query: {sql!r}") from e
    finally:
        cur.close()

    return result


def run(conn, stmt: Statement, kind: Optional[StatementKind] = None) -> QueryResult:
    """Execute a built Statement."""
    return execute(conn, stmt.sql, stmt.params, kind, types=stmt.types)


def query(
    conn,
    sql: str,
    params: Any = None,
    fetch_all: bool = True,
    kind: Optional[StatementKind] = None,
) -> Any:
    """
    Raw pass-through SQL with the connection's binding convention.

    Parameters
    ----------
    conn:
        Connection handle.
    sql:
        SQL text using the connection's placeholder style.
    params:
        List (positional) or mapping (named).
    fetch_all:
        For SELECT: all rows if True, else the first row or None.
    kind:
        Explicit statement kind; inferred from the SQL text if omitted.
    """
    result = execute(conn, sql, params, kind)

    if result.kind is StatementKind.SELECT:
        return result.rows if fetch_all else result.first()
    if result.kind is StatementKind.INSERT:
        return result.lastrowid
    return result.rowcount


__all__ = [
    "StatementKind",
    "classify",
    "QueryResult",
    "execute",
    "run",
    "query",
]
