"""Configuration for arbitrary DB-API 2 modules."""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlchain.adapters.dbapi.driver import DBAPIDriver, dbapi_statement_config
from sqlchain.config import NoPoolSyncConfig
from sqlchain.exceptions import ConnectionError
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlchain.config import CommitMode, StatementConfig

__all__ = ("DBAPIConfig",)

logger = get_logger("adapters.dbapi")


class DBAPIConfig(NoPoolSyncConfig[Any, DBAPIDriver]):
    """Configuration around a DB-API ``connect`` callable.

    Example, for a MySQL server::

        import pymysql

        config = DBAPIConfig(
            pymysql.connect,
            connection_config={"host": "localhost", "database": "app", "user": "app", "password": "secret"},
            init_statements=("SET NAMES utf8",),
            driver_features={"error_module": pymysql},
        )
        with config.provide_builder() as db:
            db.select("users").where({"id": 5}).fetch(as_dict=True)
    """

    __slots__ = ("connect", "driver_features")
    driver_type: "ClassVar[type[DBAPIDriver]]" = DBAPIDriver

    def __init__(
        self,
        connect: "Callable[..., Any]",
        *,
        connection_config: "Optional[dict[str, Any]]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        init_statements: "Sequence[str]" = (),
        commit_mode: "CommitMode" = "autocommit",
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        """Initialize the configuration.

        Args:
            connect: The DB-API module's ``connect`` function.
            connection_config: Keyword arguments for ``connect``.
            statement_config: Statement preparation settings. Defaults to MySQL
                with ``%s`` placeholders.
            init_statements: Statements run on every new connection.
            commit_mode: ``"autocommit"`` commits each session on a clean exit,
                ``"manual"`` leaves commits to the caller.
            driver_features: Options for :class:`DBAPIDriver`, e.g.
                ``{"error_module": pymysql}`` to map the module's exception classes.
        """
        self.connect = connect
        self.driver_features = dict(driver_features or {})
        super().__init__(
            connection_config=connection_config,
            statement_config=statement_config or dbapi_statement_config,
            init_statements=init_statements,
            commit_mode=commit_mode,
        )

    def create_connection(self) -> Any:
        """Open a connection and run the init statements.

        Raises:
            ConnectionError: If ``connect`` or an init statement fails.

        Returns:
            The new DB-API connection.
        """
        try:
            connection = self.connect(**self.connection_config)
        except Exception as e:
            logger.error("Could not connect to database: %s", e)
            msg = f"Database connection could not be established: {e}"
            raise ConnectionError(msg) from e

        try:
            self._run_init_statements(connection)
        except Exception as e:
            connection.close()
            logger.error("Connection init failed: %s", e)
            msg = f"Database connection could not be initialized: {e}"
            raise ConnectionError(msg) from e

        return connection

    def close_connection(self, connection: Any) -> None:
        connection.close()

    def create_driver(self, connection: Any, statement_config: "Optional[StatementConfig]" = None) -> DBAPIDriver:
        """Wrap a connection in a :class:`DBAPIDriver` carrying this configuration's driver features."""
        return DBAPIDriver(
            connection=connection,
            statement_config=statement_config or self.statement_config,
            driver_features=self.driver_features,
        )
