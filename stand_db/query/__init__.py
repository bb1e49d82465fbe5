"""
stand_db.query

Query building and execution:

      * ParamStyle / Binding strategies (positional, named)
      * QueryBuilder and Statement
      * execute / query and the QueryResult envelope
"""

from .binding import (
    ParamStyle,
    Binding,
    PositionalBinding,
    NamedBinding,
    bind_code,
)
from .builder import QueryBuilder, Statement, columns_clause, normalize_operator
from .executor import StatementKind, QueryResult, classify, execute, run, query

__all__ = [
    # Binding
    "ParamStyle",
    "Binding",
    "PositionalBinding",
    "NamedBinding",
    "bind_code",

    # Builder
    "QueryBuilder",
    "Statement",
    "columns_clause",
    "normalize_operator",

    # Executor
    "StatementKind",
    "QueryResult",
    "classify",
    "execute",
    "run",
    "query",
]
