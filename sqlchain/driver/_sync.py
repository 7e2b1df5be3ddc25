"""Synchronous driver base: the executor behind builder terminal calls."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlchain.builder import QueryBuilder
from sqlchain.config import StatementConfig
from sqlchain.driver._result import ExecutionResult
from sqlchain.parameters import convert_placeholders, validate_parameter_count
from sqlchain.utils.logging import get_logger, statement_extra
from sqlchain.utils.type_guards import is_dict_row

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

__all__ = ("PreparedStatement", "SyncDriverAdapterBase")

logger = get_logger("driver")


class PreparedStatement:
    """A statement bound to a driver, executable with positional parameters."""

    __slots__ = ("driver", "sql")

    def __init__(self, driver: "SyncDriverAdapterBase", sql: str) -> None:
        self.driver = driver
        self.sql = sql

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r})"

    def execute(self, parameters: "Sequence[Any]" = ()) -> ExecutionResult:
        """Execute the statement and materialize its result.

        Args:
            parameters: Values in placeholder order.

        Raises:
            ParameterError: If placeholder validation is enabled and the counts differ.
            ExecutionError: If the database rejects the statement.

        Returns:
            ExecutionResult: Rows, column names and counters of the execution.
        """
        config = self.driver.statement_config
        if config.validate_parameters:
            validate_parameter_count(self.sql, parameters, config.dialect)
        sql = convert_placeholders(self.sql, config.parameter_style, config.dialect)
        logger.debug("Executing statement", extra=statement_extra(sql, parameters, dialect=config.dialect))

        with self.driver.handle_database_exceptions(self.sql), self.driver.with_cursor(
            self.driver.connection
        ) as cursor:
            cursor.execute(sql, tuple(parameters))
            column_names = [column[0] for column in cursor.description or []]
            rows = [_normalize_row(row) for row in cursor.fetchall()] if column_names else []
            return ExecutionResult(
                sql=self.sql,
                rows=rows,
                column_names=column_names,
                rowcount=cursor.rowcount if cursor.rowcount is not None else -1,
                last_row_id=getattr(cursor, "lastrowid", None),
            )


def _normalize_row(row: Any) -> "tuple[Any, ...]":
    if isinstance(row, tuple):
        return row
    if is_dict_row(row):
        return tuple(row.values())
    return tuple(row)


class SyncDriverAdapterBase(ABC):
    """Base class for synchronous drivers wrapping one DB-API connection.

    Concrete adapters supply cursor management, error mapping and
    last-insert-id retrieval; statement preparation and result
    materialization are shared.
    """

    __slots__ = ("connection", "statement_config")
    dialect: "ClassVar[str]" = "mysql"

    def __init__(self, connection: Any, statement_config: "Optional[StatementConfig]" = None) -> None:
        self.connection = connection
        self.statement_config = statement_config or StatementConfig(dialect=self.dialect)

    @abstractmethod
    def with_cursor(self, connection: Any) -> "AbstractContextManager[Any]":
        """Create and return a context manager for cursor acquisition and cleanup."""

    @abstractmethod
    def handle_database_exceptions(self, sql: "Optional[str]" = None) -> "AbstractContextManager[None]":
        """Return a context manager mapping driver errors to sqlchain exceptions."""

    @abstractmethod
    def last_insert_id(self) -> Any:
        """Return the identifier generated by the most recent insert on this connection."""

    def prepare(self, sql: str) -> PreparedStatement:
        """Prepare a statement for execution."""
        return PreparedStatement(self, sql)

    def execute(self, sql: str, parameters: "Sequence[Any]" = ()) -> ExecutionResult:
        """Prepare and execute a statement in one step."""
        return self.prepare(sql).execute(parameters)

    def query(self) -> QueryBuilder:
        """Return a fresh builder whose terminal calls run on this driver."""
        return QueryBuilder(driver=self)

    def begin(self) -> None:
        """Begin a database transaction."""
        with self.handle_database_exceptions("BEGIN"), self.with_cursor(self.connection) as cursor:
            cursor.execute("BEGIN")

    def commit(self) -> None:
        """Commit the current transaction."""
        with self.handle_database_exceptions():
            self.connection.commit()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        with self.handle_database_exceptions():
            self.connection.rollback()
