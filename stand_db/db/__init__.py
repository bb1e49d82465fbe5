"""
stand_db.db

Database backend abstraction layer for stand_db.

This package provides:

- The connection handle and factory:
      * Connection
      * connect / connect_from_config
      * ConnectionFactory

- Helper functions for safe SQL execution and row mapping:
      * safe_execute
      * safe_fetch_all
      * safe_fetch_one
      * row_to_dict

- Concrete driver backends:
      * SQLiteBackend   (positional "?" / named ":name")
      * PostgresBackend (positional "%s" / named "%(name)s")

- Backend contracts:
      * DBBackend
      * BackendLike
      * ensure_backend
"""

from .connection import (
    Connection,
    ConnectionFactory,
    connect,
    connect_from_config,
    create_backend,
)
from .sqlite_backend import SQLiteBackend
from .postgres_backend import PostgresBackend
from .backend_base import DBBackend, BackendLike, ensure_backend
from .helpers import (
    safe_execute,
    safe_fetch_all,
    safe_fetch_one,
    row_to_dict,
)

__all__ = [
    # Connection / factory
    "Connection",
    "ConnectionFactory",
    "connect",
    "connect_from_config",
    "create_backend",

    # Backends
    "SQLiteBackend",
    "PostgresBackend",
    "DBBackend",
    "BackendLike",
    "ensure_backend",

    # Helpers
    "safe_execute",
    "safe_fetch_all",
    "safe_fetch_one",
    "row_to_dict",
]
