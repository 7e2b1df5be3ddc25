"""Materialized results of executed statements."""

from collections.abc import Iterator
from typing import Any, Optional

__all__ = ("ExecutionResult",)


class ExecutionResult:
    """Rows and counters produced by one statement execution.

    Rows are fetched eagerly so the cursor can be closed before the result is
    handed back to the caller. They are kept as tuples and converted to
    dictionaries on request.
    """

    __slots__ = ("column_names", "last_row_id", "rowcount", "rows", "sql")

    def __init__(
        self,
        sql: str,
        rows: "Optional[list[tuple[Any, ...]]]" = None,
        column_names: "Optional[list[str]]" = None,
        rowcount: int = -1,
        last_row_id: Any = None,
    ) -> None:
        self.sql = sql
        self.rows = rows if rows is not None else []
        self.column_names = column_names if column_names is not None else []
        self.rowcount = rowcount
        self.last_row_id = last_row_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, rows={len(self.rows)}, rowcount={self.rowcount})"

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> "Iterator[tuple[Any, ...]]":
        return iter(self.rows)

    @property
    def returns_rows(self) -> bool:
        """Whether the statement produced a result set."""
        return bool(self.column_names)

    @property
    def rows_affected(self) -> int:
        """Rows matched by a query, or rows changed by a data modification."""
        if self.returns_rows:
            return len(self.rows)
        return max(self.rowcount, 0)

    def is_success(self) -> bool:
        """Whether the statement completed.

        Failed statements raise instead of producing a result, so this is
        always True for results returned by a driver.
        """
        return True

    def _as_dict(self, row: "tuple[Any, ...]") -> "dict[str, Any]":
        return dict(zip(self.column_names, row))

    def one_or_none(self, as_dict: bool = False) -> Any:
        """Return the first row, or None when there are no rows."""
        if not self.rows:
            return None
        row = self.rows[0]
        return self._as_dict(row) if as_dict else row

    def scalar(self, index: int = 0) -> Any:
        """Return a value of the first row by zero-based position, or None when there are no rows."""
        row = self.one_or_none()
        if row is None:
            return None
        return row[index]

    def all(self, as_dict: bool = False) -> "list[Any]":
        """Return every row, as tuples or as column name to value mappings."""
        if as_dict:
            return [self._as_dict(row) for row in self.rows]
        return list(self.rows)
