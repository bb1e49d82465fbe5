"""
Exception taxonomy for stand_db.

Every failure raised by the library derives from StandDBError, so callers
can catch at the transaction or request boundary with a single clause:

    StandDBError
    ├── ConfigurationError   bad driver / kind, empty data or condition map
    ├── ValidationError      bad operator token, bad projection shape
    ├── DBConnectionError    connect failure (network, auth, file)
    ├── PreparationError     statement rejected before it could run
    └── ExecutionError       backend failure while running a statement

Driver exceptions are always chained (``raise ... from exc``).
"""

from __future__ import annotations


class StandDBError(RuntimeError):
    """Base class for all stand_db errors."""


class ConfigurationError(StandDBError, ValueError):
    """Invalid backend selection or missing required input."""


class ValidationError(StandDBError, ValueError):
    """Caller-supplied token or shape failed validation."""


class DBConnectionError(StandDBError):
    """The driver could not open a connection."""


class PreparationError(StandDBError):
    """The backend rejected the statement (syntax, unknown objects, bind mismatch)."""


class ExecutionError(StandDBError):
    """The backend failed while executing a prepared statement."""


__all__ = [
    "StandDBError",
    "ConfigurationError",
    "ValidationError",
    "DBConnectionError",
    "PreparationError",
    "ExecutionError",
]
