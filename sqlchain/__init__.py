"""sqlchain: a fluent, parameterized SQL statement builder."""

from sqlchain import adapters, builder, driver, exceptions, utils
from sqlchain.__metadata__ import __version__
from sqlchain.adapters.dbapi import DBAPIConfig, DBAPIDriver
from sqlchain.adapters.sqlite import SqliteConfig, SqliteDriver
from sqlchain.builder import (
    AliasedTable,
    BuiltStatement,
    Combinator,
    ExplicitPredicate,
    ImplicitPredicate,
    Operator,
    OrderDirection,
    QueryBuilder,
    Table,
)
from sqlchain.config import NoPoolSyncConfig, StatementConfig
from sqlchain.driver import ExecutionResult, PreparedStatement, SyncDriverAdapterBase
from sqlchain.exceptions import (
    ConnectionError,
    ExecutionError,
    ImproperConfigurationError,
    IntegrityError,
    ParameterError,
    SQLBuilderError,
    SQLChainError,
)
from sqlchain.parameters import ParameterStyle

__all__ = (
    "AliasedTable",
    "BuiltStatement",
    "Combinator",
    "ConnectionError",
    "DBAPIConfig",
    "DBAPIDriver",
    "ExecutionError",
    "ExecutionResult",
    "ExplicitPredicate",
    "ImplicitPredicate",
    "ImproperConfigurationError",
    "IntegrityError",
    "NoPoolSyncConfig",
    "Operator",
    "OrderDirection",
    "ParameterError",
    "ParameterStyle",
    "PreparedStatement",
    "QueryBuilder",
    "SQLBuilderError",
    "SQLChainError",
    "SqliteConfig",
    "SqliteDriver",
    "StatementConfig",
    "SyncDriverAdapterBase",
    "Table",
    "__version__",
    "adapters",
    "builder",
    "driver",
    "exceptions",
    "utils",
)
