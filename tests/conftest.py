import pytest

from stand_db import connect

USERS_SCHEMA = """
CREATE TABLE users (
    id      INTEGER PRIMARY KEY AUTOINCREMENT,
    email   TEXT UNIQUE NOT NULL,
    name    TEXT,
    age     INTEGER,
    score   REAL,
    active  INTEGER DEFAULT 1
)
"""


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def _open(path, kind):
    conn = connect(database=str(path), kind=kind)
    conn.execute(USERS_SCHEMA)
    return conn


@pytest.fixture(params=["positional", "named"])
def conn(request, tmp_path):
    """SQLite connection with a users table, once per binding convention."""
    c = _open(tmp_path / "test.db", request.param)
    yield c
    c.close()


@pytest.fixture()
def positional_conn(tmp_path):
    c = _open(tmp_path / "pos.db", "positional")
    yield c
    c.close()


@pytest.fixture()
def named_conn(tmp_path):
    c = _open(tmp_path / "named.db", "named")
    yield c
    c.close()


@pytest.fixture()
def clock():
    return FakeClock()
