"""
Shared DB helper utilities.

These wrappers ensure:
    - consistent interfaces across backends
    - predictable row→dict mapping
    - structured error handling (driver errors re-raised as
      PreparationError / ExecutionError with the query attached)

Backends expose this module as `.helpers`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Type

from ..errors import ExecutionError, StandDBError

logger = logging.getLogger(__name__)

Classifier = Callable[[BaseException], Type[StandDBError]]


# ----------------------------------------------------------------------
# Execution helpers
# ----------------------------------------------------------------------

def safe_execute(
    conn: Any,
    query: str,
    params: Any = None,
    classify: Optional[Classifier] = None,
):
    """
    Execute a single SQL statement safely.
    Returns the raw cursor.

    Parameters
    ----------
    conn:
        DB-API compatible connection object (sqlite3, psycopg2, etc.).
    query:
        SQL string with placeholders.
    params:
        Optional parameter list/tuple or mapping.
    classify:
        Maps the driver exception to a stand_db error class.
        Defaults to ExecutionError for everything.

    Raises
    ------
    PreparationError / ExecutionError
        Wrapped driver error with context.
    """
    cur = conn.cursor()
    try:
        if params is None:
            # no args: the driver must not apply paramstyle formatting
            cur.execute(query)
        else:
            cur.execute(query, params)
    except Exception as e:
        error_cls = classify(e) if classify is not None else ExecutionError
        logger.debug("Statement failed (%s): %s", error_cls.__name__, query)
        raise error_cls(
            f"DB execute failed: {e} | Query: {query!r} | Params: {params!r}"
        ) from e
    return cur


def safe_fetch_all(
    conn: Any,
    query: str,
    params: Any = None,
    classify: Optional[Classifier] = None,
):
    """
    Execute a SELECT query and fetch all rows.

    Returns
    -------
    list
        List of backend-specific row records (e.g., sqlite3.Row).
    """
    cur = safe_execute(conn, query, params, classify)
    return cur.fetchall()


def safe_fetch_one(
    conn: Any,
    query: str,
    params: Any = None,
    classify: Optional[Classifier] = None,
):
    """
    Execute a SELECT query and fetch one row.

    Returns
    -------
    Any
        Backend-specific row object or None.
    """
    cur = safe_execute(conn, query, params, classify)
    return cur.fetchone()


# ----------------------------------------------------------------------
# Row mapping
# ----------------------------------------------------------------------

def row_to_dict(row: Any) -> dict:
    """
    Convert sqlite3.Row or psycopg2 RealDictRow to a plain Python dict.

    This normalizes row outputs across backends.
    """
    if row is None:
        return {}

    # sqlite3.Row, psycopg2.extras.RealDictRow, etc.
    if hasattr(row, "keys"):
        return {k: row[k] for k in row.keys()}

    # Fallback: treat as a tuple-like sequence
    return dict(enumerate(row))


def first_value(row: Any) -> Any:
    """Return the first column of a row regardless of its shape."""
    if row is None:
        return None
    if hasattr(row, "keys"):
        keys = list(row.keys())
        return row[keys[0]] if keys else None
    return row[0]


__all__ = [
    "safe_execute",
    "safe_fetch_all",
    "safe_fetch_one",
    "row_to_dict",
    "first_value",
]
