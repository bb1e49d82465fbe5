import pytest

from stand_db import (
    ConfigurationError,
    ExecutionError,
    ValidationError,
    begin_transaction,
    commit_transaction,
    connect,
    count_records,
    delete,
    delete_all,
    escape_string,
    exists,
    get_columns,
    insert,
    insert_or_update,
    last_insert_id,
    paginate,
    rollback_transaction,
    search_like,
    select,
    select_one,
    update,
    update_all,
    upsert,
)


def _seed(conn):
    insert(conn, "users", {"email": "ann@x", "name": "Ann", "age": 31, "score": 1.5})
    insert(conn, "users", {"email": "bob@x", "name": "Bob", "age": 25, "score": 2.0})
    insert(conn, "users", {"email": "cyd@y", "name": "Cyd", "age": 31, "score": 3.25})


def test_insert_then_select_one_round_trip(conn):
    data = {"email": "ann@x", "name": "Ann", "age": 31, "score": 1.5, "active": 0}
    new_id = insert(conn, "users", data)
    assert new_id == 1
    assert last_insert_id(conn) == 1

    row = select_one(conn, "users", {"email": "ann@x"})
    assert row == {"id": 1, **data}


def test_boolean_values_persist(conn):
    insert(conn, "users", {"email": "t@x", "active": True})
    insert(conn, "users", {"email": "f@x", "active": False})
    assert select_one(conn, "users", {"email": "t@x"}, "active") == {"active": 1}
    assert select_one(conn, "users", {"email": "f@x"}, "active") == {"active": 0}


def test_insert_requires_data(conn):
    with pytest.raises(ConfigurationError):
        insert(conn, "users", {})


def test_select_filters_orders_and_limits(conn):
    _seed(conn)
    rows = select(conn, "users", {"age": 31}, ["name"], order_by="name DESC")
    assert rows == [{"name": "Cyd"}, {"name": "Ann"}]

    rows = select(conn, "users", columns="email", order_by="id", limit=1, offset=1)
    assert rows == [{"email": "bob@x"}]

    assert select(conn, "users", {"age": 99}) == []


def test_select_rejects_bad_projection(conn):
    with pytest.raises(ValidationError):
        select(conn, "users", columns={"id": 1})


def test_select_one_missing_returns_none(conn):
    assert select_one(conn, "users", {"email": "nobody"}) is None


def test_update_requires_conditions(conn):
    _seed(conn)
    with pytest.raises(ConfigurationError):
        update(conn, "users", {"name": "X"}, {})
    with pytest.raises(ConfigurationError):
        update(conn, "users", {}, {"id": 1})


def test_update_same_column_in_set_and_where(conn):
    _seed(conn)
    assert update(conn, "users", {"email": "ann@new"}, {"email": "ann@x"}) == 1
    assert exists(conn, "users", {"email": "ann@new"})
    assert not exists(conn, "users", {"email": "ann@x"})


def test_update_all_needs_no_conditions(conn):
    _seed(conn)
    assert update_all(conn, "users", {"active": 0}) == 3
    assert count_records(conn, "users", {"active": 0}) == 3


def test_delete_requires_conditions(conn):
    _seed(conn)
    with pytest.raises(ConfigurationError):
        delete(conn, "users", {})
    assert delete(conn, "users", {"email": "bob@x"}) == 1
    assert count_records(conn, "users") == 2


def test_delete_all_requires_confirmation(conn):
    _seed(conn)
    with pytest.raises(ConfigurationError):
        delete_all(conn, "users")
    with pytest.raises(ConfigurationError):
        delete_all(conn, "users", confirm="yes")

    before = count_records(conn, "users")
    assert delete_all(conn, "users", confirm=True) == before
    assert count_records(conn, "users") == 0


def test_exists_requires_conditions(conn):
    with pytest.raises(ConfigurationError):
        exists(conn, "users", {})


@pytest.mark.parametrize("where", [
    {"age": 31},
    {"age": 31, "name": "Bob"},
    {"email": "bob@x"},
    {"name": "Nobody"},
])
def test_exists_agrees_with_count(conn, where):
    _seed(conn)
    assert exists(conn, "users", where) == (count_records(conn, "users", where) > 0)


def test_search_like_or_and(conn):
    _seed(conn)
    rows = search_like(
        conn, "users", {"name": "An", "email": "@y"}, ["email"], operator="OR", order_by="id"
    )
    assert [r["email"] for r in rows] == ["ann@x", "cyd@y"]

    rows = search_like(conn, "users", {"name": "y", "email": "@y"}, operator="and")
    assert [r["email"] for r in rows] == ["cyd@y"]

    rows = search_like(conn, "users", {"email": "@"}, order_by="id", limit=1, offset=2)
    assert [r["email"] for r in rows] == ["cyd@y"]


def test_search_like_rejects_operator(conn):
    with pytest.raises(ValidationError):
        search_like(conn, "users", {"name": "a"}, operator="XOR")


def test_paginate(conn):
    for i in range(25):
        insert(conn, "users", {"email": f"u{i:02d}@x", "age": i})

    page = paginate(conn, "users", page=2, per_page=10, order_by="id")
    info = page.pagination
    assert info.offset == 10
    assert info.last_page == 3
    assert info.has_more_pages is True
    assert info.from_ == 11 and info.to == 20
    assert [r["email"] for r in page.data][:2] == ["u10@x", "u11@x"]

    page = paginate(conn, "users", page=3, per_page=10, order_by="id")
    assert page.pagination.has_more_pages is False
    assert page.pagination.to == 25
    assert len(page.data) == 5

    body = page.to_dict()
    assert body["pagination"]["from"] == 21
    assert body["pagination"]["current_page"] == 3


def test_paginate_clamps_page_and_filters(conn):
    _seed(conn)
    page = paginate(conn, "users", page=0, per_page=1, where={"age": 31}, order_by="id")
    assert page.pagination.current_page == 1
    assert page.pagination.total == 2
    assert page.data[0]["email"] == "ann@x"


def test_upsert_inserts_then_updates(conn):
    new_id = upsert(conn, "users", {"email": "ann@x", "name": "Ann"}, ["email"])
    assert new_id == 1

    same_id = upsert(conn, "users", {"email": "ann@x", "name": "Annie"}, ["email"])
    assert same_id == 1
    assert select_one(conn, "users", {"id": 1}, "name") == {"name": "Annie"}
    assert count_records(conn, "users") == 1


def test_upsert_requires_unique_key_in_data(conn):
    with pytest.raises(ConfigurationError):
        upsert(conn, "users", {"name": "Ann"}, ["email"])


def test_insert_or_update_reports_outcome(conn):
    created = insert_or_update(conn, "users", {"email": "ann@x", "name": "Ann"}, ["email"])
    assert created.created is True
    assert created.id == 1

    updated = insert_or_update(
        conn, "users", {"email": "ann@x", "name": "Annie", "age": 40}, ["email"],
        update_data={"name": None},
    )
    assert updated.created is False
    assert updated.count == 1

    row = select_one(conn, "users", {"email": "ann@x"})
    assert row["name"] == "Annie"
    assert row["age"] is None  # age was not in the update column list


def test_insert_or_update_validates_input(conn):
    with pytest.raises(ConfigurationError):
        insert_or_update(conn, "users", {}, ["email"])
    with pytest.raises(ConfigurationError):
        insert_or_update(conn, "users", {"name": "x"}, [])
    with pytest.raises(ConfigurationError):
        insert_or_update(conn, "users", {"name": "x"}, ["email"])


def test_transaction_rollback_discards(conn):
    assert begin_transaction(conn) is True
    insert(conn, "users", {"email": "tx@x"})
    assert rollback_transaction(conn) is True
    assert count_records(conn, "users") == 0


def test_transaction_commit_persists(tmp_path):
    path = str(tmp_path / "tx.db")
    writer = connect(database=path)
    writer.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)")
    begin_transaction(writer)
    insert(writer, "t", {"v": "a"})
    commit_transaction(writer)

    reader = connect(database=path, kind="named")
    try:
        assert select(reader, "t", columns="v") == [{"v": "a"}]
    finally:
        reader.close()
        writer.close()


def test_nested_begin_fails(conn):
    begin_transaction(conn)
    with pytest.raises(ExecutionError):
        begin_transaction(conn)
    rollback_transaction(conn)


def test_statements_outside_transaction_autocommit(tmp_path):
    path = str(tmp_path / "auto.db")
    writer = connect(database=path)
    writer.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)")
    insert(writer, "t", {"v": "a"})

    reader = connect(database=path)
    try:
        assert count_records(reader, "t") == 1
    finally:
        reader.close()
        writer.close()


def test_get_columns(conn):
    cols = get_columns(conn, "users")
    assert [c["name"] for c in cols] == ["id", "email", "name", "age", "score", "active"]
    assert cols[0]["pk"] == 1


def test_escape_string(conn):
    assert escape_string(conn, "O'Brien") == "O''Brien"


def test_insert_or_update_only_reports_created_ids(conn):
    insert(conn, "users", {"email": "ann@x"})
    insert(conn, "users", {"email": "bob@x"})

    updated = insert_or_update(conn, "users", {"email": "ann@x", "name": "Ann"}, ["email"])
    assert updated.created is False
    assert last_insert_id(conn) is None

    created = insert_or_update(conn, "users", {"email": "cyd@x", "name": "Cyd"}, ["email"])
    assert created.created is True
    assert last_insert_id(conn) == created.id == 3
