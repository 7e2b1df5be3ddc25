from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Literal, Optional, TypeVar

from sqlglot.dialects.dialect import DialectType

from sqlchain.exceptions import ImproperConfigurationError
from sqlchain.parameters import ParameterStyle
from sqlchain.utils.logging import get_logger, statement_extra

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlchain.builder import QueryBuilder

__all__ = ("DEFAULT_COMMIT_MODE", "CommitMode", "ConnectionT", "DriverT", "NoPoolSyncConfig", "StatementConfig")

ConnectionT = TypeVar("ConnectionT")
DriverT = TypeVar("DriverT")

CommitMode = Literal["manual", "autocommit"]
DEFAULT_COMMIT_MODE: CommitMode = "autocommit"

logger = get_logger("config")


@dataclass(frozen=True)
class StatementConfig:
    """How a driver prepares built statements.

    Attributes:
        dialect: Dialect used by builders bound to the driver to quote inline literals,
            and to decide whether backslashes escape quotes inside string literals.
        parameter_style: Placeholder style expected by the DB-API module.
        validate_parameters: Check placeholder and value counts before executing.
    """

    dialect: DialectType = "mysql"
    parameter_style: ParameterStyle = ParameterStyle.QMARK
    validate_parameters: bool = True


class NoPoolSyncConfig(ABC, Generic[ConnectionT, DriverT]):
    """Base class for sync database configurations that open one connection per session."""

    __slots__ = ("commit_mode", "connection_config", "init_statements", "statement_config")
    driver_type: "ClassVar[type[Any]]"
    is_async: "ClassVar[bool]" = False

    def __init__(
        self,
        *,
        connection_config: "Optional[dict[str, Any]]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        init_statements: "Sequence[str]" = (),
        commit_mode: "CommitMode" = DEFAULT_COMMIT_MODE,
    ) -> None:
        """Initialize the configuration.

        Args:
            connection_config: Keyword arguments for the DB-API ``connect`` call.
            statement_config: Statement preparation settings for drivers.
            init_statements: Statements run on every new connection, e.g.
                ``("SET NAMES utf8",)``.
            commit_mode: ``"autocommit"`` commits when a session exits cleanly and
                rolls back when it exits with an exception. ``"manual"`` leaves
                transaction control to the caller.

        Raises:
            ImproperConfigurationError: If ``commit_mode`` is not recognized.
        """
        if commit_mode not in {"manual", "autocommit"}:
            msg = f"Invalid commit mode: {commit_mode!r}"
            raise ImproperConfigurationError(msg)
        self.connection_config = dict(connection_config or {})
        self.statement_config = statement_config or StatementConfig()
        self.init_statements = tuple(init_statements)
        self.commit_mode = commit_mode

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(connection_config={self.connection_config!r}, "
            f"statement_config={self.statement_config!r}, init_statements={self.init_statements!r}, "
            f"commit_mode={self.commit_mode!r})"
        )

    @abstractmethod
    def create_connection(self) -> ConnectionT:
        """Create and return a new database connection.

        Raises:
            ConnectionError: If the connection cannot be established.
        """
        raise NotImplementedError

    def _run_init_statements(self, connection: Any) -> None:
        for statement in self.init_statements:
            logger.debug("Running connection init statement: %s", statement, extra=statement_extra(statement))
            cursor = connection.cursor()
            try:
                cursor.execute(statement)
            finally:
                cursor.close()

    @abstractmethod
    def close_connection(self, connection: ConnectionT) -> None:
        """Close a connection created by this configuration."""
        raise NotImplementedError

    def create_driver(self, connection: ConnectionT, statement_config: "Optional[StatementConfig]" = None) -> DriverT:
        """Wrap a connection in this configuration's driver."""
        return self.driver_type(connection=connection, statement_config=statement_config or self.statement_config)  # type: ignore[no-any-return]

    @contextmanager
    def provide_connection(self) -> "Generator[ConnectionT, None, None]":
        """Provide a connection that is closed on exit."""
        connection = self.create_connection()
        try:
            yield connection
        finally:
            self.close_connection(connection)

    @contextmanager
    def provide_session(
        self, statement_config: "Optional[StatementConfig]" = None
    ) -> "Generator[DriverT, None, None]":
        """Provide a driver bound to a fresh connection.

        In ``autocommit`` mode the session's work is committed on a clean exit
        and rolled back when the block raises.
        """
        with self.provide_connection() as connection:
            driver: Any = self.create_driver(connection, statement_config)
            if self.commit_mode == "manual":
                yield driver
                return
            try:
                yield driver
            except Exception:
                logger.debug("Rolling back session after error")
                driver.rollback()
                raise
            driver.commit()

    @contextmanager
    def provide_builder(self) -> "Generator[QueryBuilder, None, None]":
        """Provide a query builder bound to a driver session."""
        with self.provide_session() as driver:
            yield driver.query()
