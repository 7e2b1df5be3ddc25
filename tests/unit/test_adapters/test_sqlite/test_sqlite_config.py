"""Unit tests for SQLite configuration."""

import sqlite3
from typing import Any

import pytest

from sqlchain.adapters.sqlite import SqliteConfig, SqliteConnectionParams, SqliteDriver, sqlite_statement_config
from sqlchain.builder import QueryBuilder
from sqlchain.config import StatementConfig
from sqlchain.exceptions import ConnectionError


def test_sqlite_connection_params_typeddict() -> None:
    """Test SqliteConnectionParams accepts all expected fields."""
    connection_params: SqliteConnectionParams = {
        "database": ":memory:",
        "timeout": 30.0,
        "detect_types": 0,
        "isolation_level": "DEFERRED",
        "check_same_thread": False,
        "cached_statements": 100,
        "uri": False,
    }

    config = SqliteConfig(connection_config=connection_params)

    assert config.connection_config == dict(connection_params)


@pytest.mark.parametrize(
    "connection_config,expected_config",
    [
        (None, {"database": ":memory:"}),
        ({"timeout": 5.0}, {"database": ":memory:", "timeout": 5.0}),
        ({"database": "/tmp/app.db"}, {"database": "/tmp/app.db"}),
    ],
    ids=["default", "partial", "file"],
)
def test_config_initialization(connection_config: "dict[str, Any] | None", expected_config: "dict[str, Any]") -> None:
    config = SqliteConfig(connection_config=connection_config)

    assert config.connection_config == expected_config
    assert config.statement_config is sqlite_statement_config
    assert config.init_statements == ()


def test_custom_statement_config() -> None:
    statement_config = StatementConfig(dialect="sqlite", validate_parameters=False)

    config = SqliteConfig(statement_config=statement_config)

    assert config.statement_config is statement_config


def test_provide_session_yields_driver() -> None:
    config = SqliteConfig()

    with config.provide_session() as driver:
        assert isinstance(driver, SqliteDriver)
        assert driver.statement_config is sqlite_statement_config
        connection = driver.connection
        assert connection.execute("SELECT 1").fetchone() == (1,)

    with pytest.raises(sqlite3.ProgrammingError):
        connection.execute("SELECT 1")


def test_provide_builder() -> None:
    with SqliteConfig().provide_builder() as db:
        assert isinstance(db, QueryBuilder)
        assert db.dialect == "sqlite"
        assert db.sql("SELECT 1 + ?", [1]).scalar() == 2


def test_init_statements_run_on_connect() -> None:
    config = SqliteConfig(init_statements=("PRAGMA foreign_keys = ON",))

    with config.provide_connection() as connection:
        assert connection.execute("PRAGMA foreign_keys").fetchone() == (1,)


def test_connection_failure_raises_connection_error(tmp_path: Any) -> None:
    config = SqliteConfig(connection_config={"database": str(tmp_path / "missing" / "app.db")})

    with pytest.raises(ConnectionError) as exc_info:
        config.create_connection()

    assert isinstance(exc_info.value.__cause__, sqlite3.Error)


def test_failing_init_statement_raises_connection_error() -> None:
    config = SqliteConfig(init_statements=("NOT VALID SQL",))

    with pytest.raises(ConnectionError, match="could not be initialized"):
        config.create_connection()
