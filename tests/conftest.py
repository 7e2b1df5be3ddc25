from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from sqlchain.adapters.sqlite import SqliteConfig, SqliteDriver
from sqlchain.builder import QueryBuilder

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def builder() -> QueryBuilder:
    """A builder with no driver bound, for statement-text assertions."""
    return QueryBuilder()


@pytest.fixture
def sqlite_config() -> SqliteConfig:
    return SqliteConfig(connection_config={"database": ":memory:"})


@pytest.fixture
def sqlite_session(sqlite_config: SqliteConfig) -> Generator[SqliteDriver, None, None]:
    """An in-memory SQLite driver with a small users/posts schema."""
    with sqlite_config.provide_session() as driver:
        driver.connection.executescript(
            """
            CREATE TABLE users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                status TEXT NOT NULL,
                age INTEGER NOT NULL
            );
            CREATE TABLE posts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                title TEXT NOT NULL,
                state TEXT NOT NULL
            );
            INSERT INTO users (name, status, age) VALUES
                ('alice', 'active', 31),
                ('bob', 'inactive', 25),
                ('carol', 'active', 42);
            INSERT INTO posts (user_id, title, state) VALUES
                (1, 'hello', 'published'),
                (1, 'draft one', 'draft'),
                (3, 'news', 'published');
            """
        )
        yield driver
