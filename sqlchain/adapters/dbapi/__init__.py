"""Generic DB-API 2 adapter for sqlchain."""

from sqlchain.adapters.dbapi.config import DBAPIConfig
from sqlchain.adapters.dbapi.driver import DBAPIDriver, dbapi_statement_config

__all__ = ("DBAPIConfig", "DBAPIDriver", "dbapi_statement_config")
