import pytest

from stand_db.errors import ConfigurationError, ValidationError
from stand_db.query.binding import NamedBinding, PositionalBinding
from stand_db.query.builder import QueryBuilder, columns_clause, normalize_operator


@pytest.fixture()
def pos():
    return QueryBuilder(PositionalBinding())


@pytest.fixture()
def named():
    return QueryBuilder(NamedBinding())


def test_columns_clause_shapes():
    assert columns_clause(None) == "*"
    assert columns_clause("id, name") == "id, name"
    assert columns_clause(["id", "name"]) == "id, name"
    with pytest.raises(ValidationError):
        columns_clause(42)
    with pytest.raises(ValidationError):
        columns_clause([])


def test_operator_is_case_insensitive_and_validated():
    assert normalize_operator("or") == "OR"
    with pytest.raises(ValidationError):
        normalize_operator("XOR")


def test_positional_select(pos):
    stmt = pos.select(
        "users", {"name": "ann", "age": 30}, ["id"], "id DESC", limit=5, offset=10
    )
    assert stmt.sql == (
        "SELECT id FROM users WHERE name = ? AND age = ? "
        "ORDER BY id DESC LIMIT ? OFFSET ?"
    )
    assert stmt.params == ["ann", 30, 5, 10]
    assert stmt.types == "siii"


def test_offset_without_limit_is_ignored(pos):
    stmt = pos.select("users", offset=10)
    assert stmt.sql == "SELECT * FROM users"
    assert stmt.params == []


def test_named_select(named):
    stmt = named.select("users", {"name": "ann"}, limit=1)
    assert stmt.sql == "SELECT * FROM users WHERE name = :name LIMIT :limit"
    assert stmt.params == {"name": "ann", "limit": 1}


def test_named_update_prefixes_set_and_where(named):
    stmt = named.update("users", {"email": "new@x"}, {"email": "old@x"})
    assert stmt.sql == "UPDATE users SET email = :set_email WHERE email = :where_email"
    assert stmt.params == {"set_email": "new@x", "where_email": "old@x"}


def test_positional_update_orders_set_before_where(pos):
    stmt = pos.update("users", {"name": "b", "age": 2}, {"id": 9})
    assert stmt.sql == "UPDATE users SET name = ?, age = ? WHERE id = ?"
    assert stmt.params == ["b", 2, 9]


def test_update_without_where_targets_all_rows(named):
    stmt = named.update("users", {"active": 0})
    assert stmt.sql == "UPDATE users SET active = :active"


def test_insert_requires_data(pos):
    with pytest.raises(ConfigurationError):
        pos.insert("users", {})


def test_insert_with_returning(named):
    stmt = named.insert("users", {"email": "a", "name": "b"}, returning="id")
    assert stmt.sql == "INSERT INTO users (email, name) VALUES (:email, :name) RETURNING id"


def test_like_wraps_values_and_combines(named, pos):
    stmt = named.search_like("users", {"u.name": "an", "email": "x"}, operator="and")
    assert stmt.sql == (
        "SELECT * FROM users WHERE u.name LIKE :u_name_like AND email LIKE :email_like"
    )
    assert stmt.params == {"u_name_like": "%an%", "email_like": "%x%"}

    stmt = pos.search_like("users", {"name": "5%"})
    assert stmt.params == ["%5%%"]


def test_like_rejects_bad_operator_before_building(pos):
    with pytest.raises(ValidationError):
        pos.search_like("users", {"name": "a"}, operator="NOT")


def test_exists_requires_conditions(pos):
    with pytest.raises(ConfigurationError):
        pos.exists("users", {})
    stmt = pos.exists("users", {"id": 1})
    assert stmt.sql == "SELECT 1 FROM users WHERE id = ? LIMIT 1"


def test_count(pos):
    assert pos.count("users").sql == "SELECT COUNT(*) AS count FROM users"


def test_insert_on_conflict(pos):
    stmt = pos.insert_on_conflict(
        "users", {"email": "a", "name": "b"}, ["email"], ["name"]
    )
    assert stmt.sql == (
        "INSERT INTO users (email, name) VALUES (?, ?) "
        "ON CONFLICT (email) DO UPDATE SET name = excluded.name"
    )
    assert stmt.params == ["a", "b"]


def test_insert_on_conflict_without_updates_does_nothing(pos):
    stmt = pos.insert_on_conflict("users", {"email": "a"}, ["email"], [])
    assert stmt.sql.endswith("ON CONFLICT (email) DO NOTHING")
