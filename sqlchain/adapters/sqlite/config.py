"""SQLite database configuration."""

import sqlite3
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union

from typing_extensions import NotRequired

from sqlchain.adapters.sqlite.driver import SqliteConnection, SqliteDriver, sqlite_statement_config
from sqlchain.config import NoPoolSyncConfig
from sqlchain.exceptions import ConnectionError
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlchain.config import CommitMode, StatementConfig

__all__ = ("SqliteConfig", "SqliteConnectionParams")

logger = get_logger("adapters.sqlite")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteConfig(NoPoolSyncConfig[SqliteConnection, SqliteDriver]):
    """SQLite configuration opening one connection per session."""

    __slots__ = ()
    driver_type: "ClassVar[type[SqliteDriver]]" = SqliteDriver

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[SqliteConnectionParams, dict[str, Any]]]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        init_statements: "Sequence[str]" = (),
        commit_mode: "CommitMode" = "autocommit",
    ) -> None:
        """Initialize SQLite configuration.

        Args:
            connection_config: Keyword arguments for :func:`sqlite3.connect`.
                ``database`` defaults to ``:memory:``.
            statement_config: Statement preparation settings.
            init_statements: Statements run on every new connection.
            commit_mode: ``"autocommit"`` commits each session on a clean exit,
                ``"manual"`` leaves commits to the caller.
        """
        connection_config = dict(connection_config or {})
        connection_config.setdefault("database", ":memory:")
        super().__init__(
            connection_config=connection_config,
            statement_config=statement_config or sqlite_statement_config,
            init_statements=init_statements,
            commit_mode=commit_mode,
        )

    def create_connection(self) -> SqliteConnection:
        """Open a SQLite connection.

        Raises:
            ConnectionError: If the database cannot be opened or an init statement fails.

        Returns:
            SqliteConnection: The new connection.
        """
        database = self.connection_config["database"]
        try:
            connection = sqlite3.connect(**self.connection_config)
        except sqlite3.Error as e:
            logger.error("Could not open SQLite database %s: %s", database, e)
            msg = f"Database connection could not be established: {e}"
            raise ConnectionError(msg) from e

        try:
            self._run_init_statements(connection)
        except sqlite3.Error as e:
            connection.close()
            logger.error("SQLite connection init failed for %s: %s", database, e)
            msg = f"Database connection could not be initialized: {e}"
            raise ConnectionError(msg) from e

        logger.debug("Opened SQLite connection to %s", database)
        return connection

    def close_connection(self, connection: SqliteConnection) -> None:
        connection.close()
