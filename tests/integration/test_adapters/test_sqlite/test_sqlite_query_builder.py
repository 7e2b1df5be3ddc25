"""Integration tests running built statements against SQLite."""

import sqlite3
from pathlib import Path

import pytest

from sqlchain.adapters.sqlite import SqliteConfig, SqliteDriver
from sqlchain.builder import QueryBuilder
from sqlchain.exceptions import ExecutionError, IntegrityError


@pytest.fixture
def db(sqlite_session: SqliteDriver) -> QueryBuilder:
    return sqlite_session.query()


def test_insert_and_last_insert(db: QueryBuilder) -> None:
    assert db.insert("users", {"name": "dave", "status": "active", "age": 19}).execute() is True
    assert db.last_insert() == 4

    assert db.select("users", ["name", "age"]).where({"id": 4}).fetch() == ("dave", 19)


def test_select_where_order(db: QueryBuilder) -> None:
    rows = db.select("users", ["name"]).where({"status": "active"}).order_by("age", "ASC").all()

    assert rows == [("alice",), ("carol",)]


def test_order_by_defaults_to_descending(db: QueryBuilder) -> None:
    rows = db.select("users", ["name"]).order_by("age").all()

    assert rows == [("carol",), ("alice",), ("bob",)]


def test_fetch_as_dict(db: QueryBuilder) -> None:
    row = db.select("users", ["name", "status"]).where({"name": "bob"}).fetch(as_dict=True)

    assert row == {"name": "bob", "status": "inactive"}


def test_fetch_without_rows(db: QueryBuilder) -> None:
    assert db.select("users").where({"name": "nobody"}).fetch() is None


def test_count(db: QueryBuilder) -> None:
    assert db.count("users").fetch_column() == 3
    assert db.count("users", "id").where({"age": (">", 30)}).fetch_column() == 2


@pytest.mark.parametrize(
    "predicates,expected",
    [
        ({"id": ("IN", [1, 3])}, ["alice", "carol"]),
        ({"name": ("LIKE", "%o%")}, ["bob", "carol"]),
        ({"age": ("<", 32)}, ["alice", "bob"]),
        ({"status": "inactive"}, ["bob"]),
    ],
    ids=["in", "like", "less", "implicit_equal"],
)
def test_where_operators(db: QueryBuilder, predicates: "dict[str, object]", expected: "list[str]") -> None:
    rows = db.select("users", ["name"]).where(predicates).order_by("name", "ASC").all()

    assert [name for (name,) in rows] == expected


def test_or_where_groups(db: QueryBuilder) -> None:
    rows = (
        db.select("users", ["name"])
        .where({"status": "active"})
        .or_where({"name": "bob", "age": 25})
        .order_by("name", "ASC")
        .all()
    )

    assert [name for (name,) in rows] == ["alice", "bob", "carol"]


def test_update_row_count(db: QueryBuilder) -> None:
    assert db.update("users", {"status": "archived"}).where({"status": "active"}).row_count() == 2
    assert db.count("users").where({"status": "archived"}).fetch_column() == 2


def test_delete_row_count(db: QueryBuilder) -> None:
    assert db.delete("posts").where({"state": "draft"}).row_count() == 1
    assert db.count("posts").fetch_column() == 2


def test_join_with_inline_condition(db: QueryBuilder) -> None:
    rows = (
        db.select("users", ["users.name", "posts.title"])
        .join("posts", "id", "user_id", {"state": "published"})
        .order_by("posts.id", "ASC")
        .all()
    )

    assert rows == [("alice", "hello"), ("carol", "news")]


def test_join_with_alias(db: QueryBuilder) -> None:
    rows = (
        db.select(("users", "u"), ["u.name", "p.title"])
        .join(("posts", "p"), "id", "user_id", {"title": ("LIKE", "draft%")})
        .all()
    )

    assert rows == [("alice", "draft one")]


def test_left_join_group_by_having(db: QueryBuilder) -> None:
    rows = (
        db.select("users", ["users.name", "COUNT(posts.id) AS total"])
        .left_join("posts", "id", "user_id")
        .group_by("users.name")
        .having("COUNT(posts.id)", 0, ">")
        .order_by("total")
        .all(as_dict=True)
    )

    assert rows == [{"name": "alice", "total": 2}, {"name": "carol", "total": 1}]


def test_cross_join_where_column(db: QueryBuilder) -> None:
    rows = (
        db.select("users", ["users.name", "posts.title"])
        .cross_join("posts")
        .where_column("users.id", "posts.user_id")
        .where({"posts.state": "published"})
        .order_by("posts.id", "ASC")
        .all()
    )

    assert rows == [("alice", "hello"), ("carol", "news")]


def test_limit_with_offset(db: QueryBuilder) -> None:
    rows = db.select("users", ["name"]).order_by("id", "ASC").limit(1, 1).all()

    assert rows == [("bob",)]


def test_integrity_error_resets_builder(db: QueryBuilder) -> None:
    with pytest.raises(IntegrityError):
        db.insert("users", {"name": "alice", "status": "active", "age": 1}).execute()

    assert db.get_query() == ""
    assert db.parameters == []
    assert db.count("users").fetch_column() == 3


def test_execution_error_for_missing_table(db: QueryBuilder) -> None:
    with pytest.raises(ExecutionError, match="no such table"):
        db.select("missing").all()

    assert db.get_query() == ""


def test_sql_passthrough(db: QueryBuilder) -> None:
    db.select("users").where({"id": 1})

    result = db.sql("SELECT name FROM users WHERE age > ? ORDER BY age", [30])

    assert result.all() == [("alice",), ("carol",)]
    assert db.get_query() == "SELECT * FROM users WHERE id = ?"


def test_builder_is_reusable(db: QueryBuilder) -> None:
    assert db.select("users", ["name"]).where({"id": 1}).fetch_column() == "alice"
    assert db.select("users", ["name"]).where({"id": 2}).fetch_column() == "bob"
    assert db.get_query() == ""


def test_join_condition_with_boolean(db: QueryBuilder) -> None:
    """Test a boolean join condition matches the same rows as its bound form."""
    db.sql("CREATE TABLE flags (user_id INTEGER NOT NULL, active INTEGER NOT NULL)")
    db.sql("INSERT INTO flags (user_id, active) VALUES (1, 1), (2, 0)")

    joined = db.select("users", ["users.name"]).join("flags", "id", "user_id", {"active": True}).all()
    bound = db.select("flags", ["user_id"]).where({"active": True}).all()

    assert joined == [("alice",)]
    assert bound == [(1,)]


@pytest.fixture
def database_file(tmp_path: Path) -> str:
    path = str(tmp_path / "app.db")
    connection = sqlite3.connect(path)
    try:
        connection.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    finally:
        connection.close()
    return path


def _count_users(path: str) -> int:
    connection = sqlite3.connect(path)
    try:
        return int(connection.execute("SELECT COUNT(*) FROM users").fetchone()[0])
    finally:
        connection.close()


def test_session_commits_on_clean_exit(database_file: str) -> None:
    with SqliteConfig(connection_config={"database": database_file}).provide_builder() as db:
        assert db.insert("users", {"name": "alice"}).execute() is True
        assert db.last_insert() == 1

    assert _count_users(database_file) == 1


def test_session_rolls_back_on_error(database_file: str) -> None:
    with pytest.raises(RuntimeError):
        with SqliteConfig(connection_config={"database": database_file}).provide_builder() as db:
            db.insert("users", {"name": "alice"}).execute()
            raise RuntimeError("abort")

    assert _count_users(database_file) == 0


def test_manual_commit_mode_leaves_transaction_to_caller(database_file: str) -> None:
    config = SqliteConfig(connection_config={"database": database_file}, commit_mode="manual")

    with config.provide_session() as driver:
        driver.query().insert("users", {"name": "alice"}).execute()
    assert _count_users(database_file) == 0

    with config.provide_session() as driver:
        driver.query().insert("users", {"name": "bob"}).execute()
        driver.commit()
    assert _count_users(database_file) == 1
