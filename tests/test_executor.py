import sqlite3

import pytest

from stand_db import ExecutionError, PreparationError, insert
from stand_db.query.executor import StatementKind, classify, execute, query


@pytest.mark.parametrize("sql,kind", [
    ("SELECT 1", StatementKind.SELECT),
    ("  select * from t", StatementKind.SELECT),
    ("\ninsert into t values (1)", StatementKind.INSERT),
    ("UPDATE t SET a = 1", StatementKind.UPDATE),
    ("delete from t", StatementKind.DELETE),
    ("WITH x AS (SELECT 1) SELECT * FROM x", StatementKind.OTHER),
    ("", StatementKind.OTHER),
])
def test_classify_by_leading_keyword(sql, kind):
    assert classify(sql) is kind


def test_query_return_shapes(positional_conn):
    new_id = query(
        positional_conn,
        "INSERT INTO users (email, name) VALUES (?, ?)",
        ["a@x", "Ann"],
    )
    assert new_id == 1
    assert positional_conn.last_insert_id == 1

    rows = query(positional_conn, "SELECT email FROM users WHERE id = ?", [new_id])
    assert rows == [{"email": "a@x"}]

    row = query(positional_conn, "SELECT name FROM users", fetch_all=False)
    assert row == {"name": "Ann"}

    assert query(positional_conn, "SELECT * FROM users WHERE id = ?", [99], fetch_all=False) is None

    changed = query(positional_conn, "UPDATE users SET age = ? WHERE id = ?", [5, new_id])
    assert changed == 1


def test_query_with_named_placeholders(named_conn):
    insert(named_conn, "users", {"email": "b@x", "name": "Bob"})
    rows = query(named_conn, "SELECT name FROM users WHERE email = :email", {"email": "b@x"})
    assert rows == [{"name": "Bob"}]


def test_explicit_kind_overrides_heuristic(positional_conn):
    insert(positional_conn, "users", {"email": "c@x"})
    sql = "WITH u AS (SELECT email FROM users) SELECT * FROM u"
    # heuristic: not a SELECT, rows still land in the envelope
    assert execute(positional_conn, sql).rows == [{"email": "c@x"}]
    assert query(positional_conn, sql, kind=StatementKind.SELECT) == [{"email": "c@x"}]


def test_syntax_error_is_preparation_error(positional_conn):
    with pytest.raises(PreparationError) as exc:
        query(positional_conn, "SELEC * FROM users")
    assert isinstance(exc.value.__cause__, sqlite3.OperationalError)


def test_unknown_table_is_preparation_error(positional_conn):
    with pytest.raises(PreparationError):
        query(positional_conn, "SELECT * FROM missing")


def test_bind_count_mismatch_is_preparation_error(positional_conn):
    with pytest.raises(PreparationError):
        query(positional_conn, "SELECT * FROM users WHERE id = ?", [])


def test_constraint_violation_is_execution_error(conn):
    insert(conn, "users", {"email": "dup@x"})
    with pytest.raises(ExecutionError) as exc:
        insert(conn, "users", {"email": "dup@x"})
    assert isinstance(exc.value.__cause__, sqlite3.IntegrityError)
    assert "UNIQUE" in str(exc.value)


def test_literal_percent_without_params(positional_conn):
    insert(positional_conn, "users", {"email": "a@x", "name": "Ann"})
    insert(positional_conn, "users", {"email": "b@x", "name": "Bob"})
    rows = query(positional_conn, "SELECT email FROM users WHERE name LIKE 'A%'")
    assert rows == [{"email": "a@x"}]
