"""
Global configuration settings for stand_db.

This module centralizes configuration for:

    - driver selection (sqlite / postgres)
    - parameter binding convention (positional / named)
    - connection coordinates (host, port, user, password, database)
    - feature flags (logging, etc.)

It provides:
    StandDBConfig  – structured config object
    load_config()  – load from environment variables or defaults
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class StandDBConfig:
    """
    Canonical configuration for a stand_db connection.

    Attributes
    ----------
    driver:
        Name of the database driver: "sqlite" or "postgres".

    kind:
        Parameter binding convention: "positional" or "named".

    host, port, user, password:
        Network coordinates. Ignored by the SQLite driver.

    database:
        - For SQLite: path to the .db file (or ":memory:").
        - For Postgres: the database name.

    id_column:
        Column read back as the generated identifier after inserts
        and generic upserts.

    options:
        Extra keyword arguments handed to the driver's connect call.

    enable_logging:
        Whether to enable internal INFO logging.
    """

    driver: str = "sqlite"
    kind: str = "positional"

    host: str = ""
    port: Optional[int] = None
    user: str = ""
    password: str = ""
    database: str = "stand.db"

    id_column: Optional[str] = "id"
    options: Dict[str, Any] = field(default_factory=dict)

    enable_logging: bool = False


def load_config() -> StandDBConfig:
    """
    Load StandDBConfig from environment variables, falling back to defaults.

    Recognized variables:
        STAND_DB_DRIVER          (sqlite|postgres)
        STAND_DB_KIND            (positional|named)
        STAND_DB_HOST
        STAND_DB_PORT            (integer)
        STAND_DB_USER
        STAND_DB_PASSWORD
        STAND_DB_NAME            (file path or database name)
        STAND_DB_ID_COLUMN       (empty string disables id read-back)
        STAND_DB_ENABLE_LOGGING  ("true" / "false" / "1" / "0")

    Returns
    -------
    StandDBConfig
    """

    def _env_flag(name: str, default: bool) -> bool:
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in ("1", "true", "yes", "on")

    def _env_int(name: str, default: Optional[int]) -> Optional[int]:
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid integer for %s=%r; using %r", name, raw, default)
            return default

    id_column = os.getenv("STAND_DB_ID_COLUMN", "id")

    return StandDBConfig(
        driver=os.getenv("STAND_DB_DRIVER", "sqlite"),
        kind=os.getenv("STAND_DB_KIND", "positional"),
        host=os.getenv("STAND_DB_HOST", ""),
        port=_env_int("STAND_DB_PORT", None),
        user=os.getenv("STAND_DB_USER", ""),
        password=os.getenv("STAND_DB_PASSWORD", ""),
        database=os.getenv("STAND_DB_NAME", "stand.db"),
        id_column=id_column or None,
        enable_logging=_env_flag(
            "STAND_DB_ENABLE_LOGGING",
            default=False
        ),
    )


__all__ = [
    "StandDBConfig",
    "load_config",
]
