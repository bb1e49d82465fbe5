import pytest

from stand_db import (
    ConfigurationError,
    Connection,
    ConnectionFactory,
    DBConnectionError,
    ParamStyle,
    StandDBConfig,
    connect,
    connect_from_config,
    load_config,
)
from stand_db.db import SQLiteBackend, ensure_backend
from stand_db.query.binding import NamedBinding, PositionalBinding


def test_invalid_kind_is_configuration_error():
    with pytest.raises(ConfigurationError):
        connect(database=":memory:", kind="mysqli")


def test_invalid_driver_is_configuration_error():
    with pytest.raises(ConfigurationError):
        connect(database=":memory:", driver="oracle")


def test_unopenable_sqlite_path_is_connection_error(tmp_path):
    with pytest.raises(DBConnectionError):
        connect(database=str(tmp_path / "missing-dir" / "x.db"))


def test_strategy_selected_once():
    pos = connect(database=":memory:")
    named = connect(database=":memory:", kind="NAMED")
    try:
        assert pos.style is ParamStyle.POSITIONAL
        assert isinstance(pos.binding, PositionalBinding)
        assert named.style is ParamStyle.NAMED
        assert isinstance(named.binding, NamedBinding)
    finally:
        pos.close()
        named.close()


def test_close_is_idempotent():
    conn = connect(database=":memory:")
    conn.close()
    conn.close()
    assert conn.closed


def test_ensure_backend_rejects_incomplete_objects():
    with pytest.raises(TypeError):
        ensure_backend(object())
    backend = SQLiteBackend(":memory:")
    assert ensure_backend(backend) is backend


def test_connection_without_id_column():
    backend = SQLiteBackend(":memory:")
    conn = Connection(backend.connect(), backend, "named", id_column=None)
    try:
        assert conn.fetch_one("SELECT 1 AS one") == {"one": 1}
        assert conn.id_column is None
    finally:
        conn.close()


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("STAND_DB_DRIVER", "postgres")
    monkeypatch.setenv("STAND_DB_KIND", "named")
    monkeypatch.setenv("STAND_DB_HOST", "db.internal")
    monkeypatch.setenv("STAND_DB_PORT", "6543")
    monkeypatch.setenv("STAND_DB_NAME", "app")
    monkeypatch.setenv("STAND_DB_ID_COLUMN", "")
    monkeypatch.setenv("STAND_DB_ENABLE_LOGGING", "yes")

    cfg = load_config()
    assert cfg.driver == "postgres"
    assert cfg.kind == "named"
    assert cfg.host == "db.internal"
    assert cfg.port == 6543
    assert cfg.database == "app"
    assert cfg.id_column is None
    assert cfg.enable_logging is True


def test_load_config_bad_port_falls_back(monkeypatch):
    monkeypatch.setenv("STAND_DB_PORT", "not-a-port")
    assert load_config().port is None


def test_connect_from_config(tmp_path):
    cfg = StandDBConfig(database=str(tmp_path / "c.db"), kind="named")
    conn = connect_from_config(cfg)
    try:
        assert conn.style is ParamStyle.NAMED
        assert conn.backend.name == "sqlite"
    finally:
        conn.close()


def test_factory_context_manager_closes(tmp_path):
    factory = ConnectionFactory(StandDBConfig(database=str(tmp_path / "f.db")))
    with factory.connection() as conn:
        assert conn.fetch_one("SELECT 2 AS two") == {"two": 2}
    assert conn.closed


def test_factory_context_manager_propagates_errors(tmp_path):
    factory = ConnectionFactory(StandDBConfig(database=str(tmp_path / "f.db")))
    with pytest.raises(RuntimeError):
        with factory.connection() as conn:
            raise RuntimeError("boom")
    assert conn.closed
