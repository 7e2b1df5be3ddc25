import contextlib
import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlchain.config import StatementConfig
from sqlchain.driver import SyncDriverAdapterBase
from sqlchain.exceptions import ExecutionError, IntegrityError
from sqlchain.parameters import ParameterStyle
from sqlchain.utils.logging import get_logger, statement_extra

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("SqliteConnection", "SqliteCursor", "SqliteDriver", "sqlite_statement_config")

logger = get_logger("adapters.sqlite")

SqliteConnection = sqlite3.Connection

sqlite_statement_config = StatementConfig(dialect="sqlite", parameter_style=ParameterStyle.QMARK)


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(sqlite3.Error):
                self.cursor.close()


class SqliteDriver(SyncDriverAdapterBase):
    """Synchronous SQLite driver.

    SQLite accepts the builder's ``?`` placeholders and ``LIMIT offset, count``
    form unchanged.
    """

    __slots__ = ()
    dialect = "sqlite"

    def __init__(self, connection: "SqliteConnection", statement_config: "Optional[StatementConfig]" = None) -> None:
        super().__init__(connection=connection, statement_config=statement_config or sqlite_statement_config)

    def with_cursor(self, connection: "SqliteConnection") -> "SqliteCursor":
        return SqliteCursor(connection)

    @contextmanager
    def handle_database_exceptions(self, sql: "Optional[str]" = None) -> "Generator[None, None, None]":
        """Handle SQLite-specific exceptions and wrap them appropriately."""
        try:
            yield
        except sqlite3.IntegrityError as e:
            logger.warning("SQLite integrity error: %s", e, extra=statement_extra(sql))
            msg = f"SQLite integrity error: {e}"
            raise IntegrityError(msg, sql) from e
        except sqlite3.Error as e:
            logger.warning("SQLite database error: %s", e, extra=statement_extra(sql))
            msg = f"SQLite database error: {e}"
            raise ExecutionError(msg, sql) from e

    def last_insert_id(self) -> int:
        """Return ``last_insert_rowid()`` of this connection."""
        with self.handle_database_exceptions("SELECT last_insert_rowid()"), self.with_cursor(
            self.connection
        ) as cursor:
            cursor.execute("SELECT last_insert_rowid()")
            return int(cursor.fetchone()[0])
