"""Driver protocol and result types."""

from sqlchain.driver._result import ExecutionResult
from sqlchain.driver._sync import PreparedStatement, SyncDriverAdapterBase

__all__ = ("ExecutionResult", "PreparedStatement", "SyncDriverAdapterBase")
