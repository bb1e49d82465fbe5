"""
Clause builder.

Turns table names, column maps and condition maps into parameterized SQL
text plus a parameter set, using whichever Binding strategy the caller's
connection was constructed with.

Identifiers (table names, column names, ORDER BY text) are interpolated
verbatim: they are trusted, caller-controlled input. Only values are
bound as parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..errors import ConfigurationError, ValidationError
from .binding import Binding, ParamCollector, Params


Columns = Union[None, str, Sequence[str]]

VALID_OPERATORS = ("AND", "OR")


@dataclass
class Statement:
    """
    A built statement ready for execution.

    Attributes
    ----------
    sql:
        SQL text with backend-specific placeholders.
    params:
        Ordered list (positional) or mapping (named).
    types:
        Bind-code string, one character per positional parameter.
        Empty for named statements.
    """

    sql: str
    params: Params
    types: str = ""


# ----------------------------------------------------------------------
# Validation helpers
# ----------------------------------------------------------------------

def columns_clause(columns: Columns) -> str:
    """
    Render a column projection.

    None -> "*", str -> passed through, list/tuple -> comma-joined.
    """
    if columns is None:
        return "*"
    if isinstance(columns, str):
        return columns
    if isinstance(columns, (list, tuple)):
        if not columns or not all(isinstance(c, str) for c in columns):
            raise ValidationError(f"Invalid column projection: {columns!r}")
        return ", ".join(columns)
    raise ValidationError(f"Invalid column projection: {columns!r}")


def normalize_operator(operator: str) -> str:
    """Upper-case and validate a boolean combinator."""
    op = str(operator).strip().upper()
    if op not in VALID_OPERATORS:
        raise ValidationError(
            f"Invalid operator {operator!r}. Use 'AND' or 'OR'."
        )
    return op


# ----------------------------------------------------------------------
# Builder
# ----------------------------------------------------------------------

class QueryBuilder:
    """
    Builds Statements for one binding convention.

    Parameters
    ----------
    binding:
        The connection's Binding strategy.
    """

    def __init__(self, binding: Binding):
        self.binding = binding

    # ------------------------------------------------------------------
    # Fragments
    # ------------------------------------------------------------------

    def conditions(
        self,
        params: ParamCollector,
        where: Mapping[str, Any],
        *,
        operator: str = "AND",
        prefix: str = "",
    ) -> str:
        """Render ``col = <ph>`` pairs joined by `operator`."""
        op = normalize_operator(operator)
        parts = [
            f"{col} = {params.add(prefix + col, value)}"
            for col, value in where.items()
        ]
        return f" {op} ".join(parts)

    def like_conditions(
        self,
        params: ParamCollector,
        like: Mapping[str, Any],
        *,
        operator: str = "OR",
    ) -> str:
        """Render ``col LIKE <ph>`` pairs; each value is wrapped in ``%...%``."""
        op = normalize_operator(operator)
        parts = [
            f"{col} LIKE {params.add(col + '_like', f'%{value}%')}"
            for col, value in like.items()
        ]
        return f" {op} ".join(parts)

    def _limit(
        self,
        params: ParamCollector,
        limit: Optional[int],
        offset: Optional[int],
    ) -> str:
        if limit is None:
            return ""
        sql = f" LIMIT {params.add('limit', int(limit))}"
        if offset is not None:
            sql += f" OFFSET {params.add('offset', int(offset))}"
        return sql

    def _finish(self, sql: str, params: ParamCollector) -> Statement:
        return Statement(sql=sql, params=params.values, types=params.types)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        where: Optional[Mapping[str, Any]] = None,
        columns: Columns = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Statement:
        params = self.binding.collector()
        sql = f"SELECT {columns_clause(columns)} FROM {table}"
        if where:
            sql += " WHERE " + self.conditions(params, where)
        if order_by:
            sql += f" ORDER BY {order_by}"
        sql += self._limit(params, limit, offset)
        return self._finish(sql, params)

    def search_like(
        self,
        table: str,
        like: Mapping[str, Any],
        columns: Columns = None,
        operator: str = "OR",
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Statement:
        # Validate before touching anything else
        op = normalize_operator(operator)
        projection = columns_clause(columns)

        params = self.binding.collector()
        sql = f"SELECT {projection} FROM {table}"
        if like:
            sql += " WHERE " + self.like_conditions(params, like, operator=op)
        if order_by:
            sql += f" ORDER BY {order_by}"
        sql += self._limit(params, limit, offset)
        return self._finish(sql, params)

    def insert(
        self,
        table: str,
        data: Mapping[str, Any],
        returning: Optional[str] = None,
    ) -> Statement:
        if not data:
            raise ConfigurationError("No data provided for insert")
        params = self.binding.collector()
        cols = ", ".join(data.keys())
        placeholders = ", ".join(params.add(col, value) for col, value in data.items())
        sql = f"INSERT INTO {table} ({cols}) VALUES ({placeholders})"
        if returning:
            sql += f" RETURNING {returning}"
        return self._finish(sql, params)

    def update(
        self,
        table: str,
        data: Mapping[str, Any],
        where: Optional[Mapping[str, Any]] = None,
    ) -> Statement:
        """
        Build an UPDATE. With `where` omitted every row is targeted; the
        caller-facing guard for that lives in ``crud.update``.
        """
        if not data:
            raise ConfigurationError("No data provided for update")
        params = self.binding.collector()
        set_prefix = "set_" if where else ""
        assignments = ", ".join(
            f"{col} = {params.add(set_prefix + col, value)}"
            for col, value in data.items()
        )
        sql = f"UPDATE {table} SET {assignments}"
        if where:
            sql += " WHERE " + self.conditions(params, where, prefix="where_")
        return self._finish(sql, params)

    def delete(
        self,
        table: str,
        where: Optional[Mapping[str, Any]] = None,
    ) -> Statement:
        params = self.binding.collector()
        sql = f"DELETE FROM {table}"
        if where:
            sql += " WHERE " + self.conditions(params, where)
        return self._finish(sql, params)

    def count(
        self,
        table: str,
        where: Optional[Mapping[str, Any]] = None,
    ) -> Statement:
        params = self.binding.collector()
        sql = f"SELECT COUNT(*) AS count FROM {table}"
        if where:
            sql += " WHERE " + self.conditions(params, where)
        return self._finish(sql, params)

    def exists(self, table: str, where: Mapping[str, Any]) -> Statement:
        if not where:
            raise ConfigurationError("No WHERE condition provided for existence check")
        params = self.binding.collector()
        sql = f"SELECT 1 FROM {table} WHERE {self.conditions(params, where)} LIMIT 1"
        return self._finish(sql, params)

    def insert_on_conflict(
        self,
        table: str,
        data: Mapping[str, Any],
        conflict_columns: Iterable[str],
        update_columns: Iterable[str],
        returning: Optional[str] = None,
    ) -> Statement:
        """
        Build ``INSERT ... ON CONFLICT (...) DO UPDATE SET c = excluded.c``.

        The syntax is shared by SQLite (3.24+) and Postgres.
        """
        target = ", ".join(conflict_columns)
        if not target:
            raise ConfigurationError("No conflict columns provided for upsert")
        updates = ", ".join(f"{col} = excluded.{col}" for col in update_columns)

        stmt = self.insert(table, data)
        if updates:
            stmt.sql += f" ON CONFLICT ({target}) DO UPDATE SET {updates}"
        else:
            stmt.sql += f" ON CONFLICT ({target}) DO NOTHING"
        if returning:
            stmt.sql += f" RETURNING {returning}"
        return stmt


__all__ = [
    "Columns",
    "Statement",
    "VALID_OPERATORS",
    "columns_clause",
    "normalize_operator",
    "QueryBuilder",
]
