from collections.abc import Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlchain.config import StatementConfig
from sqlchain.driver import ExecutionResult, SyncDriverAdapterBase
from sqlchain.exceptions import ExecutionError, IntegrityError
from sqlchain.parameters import ParameterStyle
from sqlchain.utils.logging import get_logger, statement_extra

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("DBAPIDriver", "dbapi_statement_config")

logger = get_logger("adapters.dbapi")

dbapi_statement_config = StatementConfig(dialect="mysql", parameter_style=ParameterStyle.POSITIONAL_PYFORMAT)


class DBAPIDriver(SyncDriverAdapterBase):
    """Driver for any DB-API 2 connection.

    Error classes are looked up on ``driver_features["error_module"]`` when
    given, otherwise on the connection (the PEP 249 ``Connection.Error``
    extension). Without either, every exception raised by the cursor is
    reported as an ``ExecutionError``.
    """

    __slots__ = ("_last_row_id", "driver_features")
    dialect = "mysql"

    def __init__(
        self,
        connection: Any,
        statement_config: "Optional[StatementConfig]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        super().__init__(connection=connection, statement_config=statement_config or dbapi_statement_config)
        self.driver_features = driver_features or {}
        self._last_row_id: Any = None

    def _error_class(self, name: str) -> "Optional[type[BaseException]]":
        source = self.driver_features.get("error_module", self.connection)
        error_class = getattr(source, name, None)
        if isinstance(error_class, type) and issubclass(error_class, BaseException):
            return error_class
        return None

    @contextmanager
    def with_cursor(self, connection: Any) -> "Generator[Any, None, None]":
        cursor = connection.cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    @contextmanager
    def handle_database_exceptions(self, sql: "Optional[str]" = None) -> "Generator[None, None, None]":
        integrity_error = self._error_class("IntegrityError")
        database_error = self._error_class("Error") or Exception
        try:
            yield
        except database_error as e:
            if integrity_error is not None and isinstance(e, integrity_error):
                logger.warning("Database integrity error: %s", e, extra=statement_extra(sql))
                msg = f"Database integrity error: {e}"
                raise IntegrityError(msg, sql) from e
            logger.warning("Database error: %s", e, extra=statement_extra(sql))
            msg = f"Database error: {e}"
            raise ExecutionError(msg, sql) from e

    def execute(self, sql: str, parameters: "Sequence[Any]" = ()) -> ExecutionResult:
        result = super().execute(sql, parameters)
        if result.last_row_id:
            self._last_row_id = result.last_row_id
        return result

    def last_insert_id(self) -> Any:
        """Return ``cursor.lastrowid`` of the most recent insert run through this driver."""
        return self._last_row_id
