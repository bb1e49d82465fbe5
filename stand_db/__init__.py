"""
stand_db

CRUD, transaction, pagination, session and security helpers over two
interchangeable parameter-binding conventions (positional / named) and
two drivers (SQLite / Postgres).

Submodules include:
    - db/         connection handle, driver backends, execution helpers
    - query/      binding strategies, clause builder, executor
    - crud        insert / select / update / delete / upsert / paginate ...
    - pagination  page window arithmetic
    - session/    sessions, flash messages, session stores
    - security/   sanitization, CSRF, passwords, tokens

The root package re-exports the everyday entry points.
"""

from .config import StandDBConfig, load_config
from .errors import (
    StandDBError,
    ConfigurationError,
    ValidationError,
    DBConnectionError,
    PreparationError,
    ExecutionError,
)
from .db import Connection, ConnectionFactory, connect, connect_from_config
from .query import ParamStyle, StatementKind, QueryResult, execute, query
from .pagination import Page, PaginationInfo
from .crud import (
    insert,
    select,
    select_one,
    update,
    update_all,
    delete,
    delete_all,
    exists,
    count_records,
    search_like,
    paginate,
    UpsertOutcome,
    upsert,
    insert_or_update,
    begin_transaction,
    commit_transaction,
    rollback_transaction,
    last_insert_id,
    escape_string,
    get_columns,
)

__all__ = [
    # Config
    "StandDBConfig",
    "load_config",

    # Errors
    "StandDBError",
    "ConfigurationError",
    "ValidationError",
    "DBConnectionError",
    "PreparationError",
    "ExecutionError",

    # Connections
    "Connection",
    "ConnectionFactory",
    "connect",
    "connect_from_config",

    # Query
    "ParamStyle",
    "StatementKind",
    "QueryResult",
    "execute",
    "query",

    # Pagination
    "Page",
    "PaginationInfo",

    # CRUD
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
