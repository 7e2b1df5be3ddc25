from typing import Any, Optional

__all__ = (
    "ConnectionError",
    "ExecutionError",
    "ExtraParameterError",
    "ImproperConfigurationError",
    "IntegrityError",
    "MissingParameterError",
    "ParameterError",
    "SQLBuilderError",
    "SQLChainError",
)


class SQLChainError(Exception):
    """Base exception class from which all sqlchain exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLChainError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class SQLBuilderError(SQLChainError):
    """Issues building SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class ImproperConfigurationError(SQLChainError):
    """Improper configuration error.

    Raised when a builder or adapter is used without the collaborators it needs,
    e.g. a terminal call on a builder that has no driver bound to it.
    """


# -- SQL Parameter Errors --
class ParameterError(SQLChainError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when the statement has more placeholders than bound values."""


class ExtraParameterError(ParameterError):
    """Raised when more values are bound than the statement has placeholders."""


# -- Executor Errors --
class ConnectionError(SQLChainError):  # noqa: A001
    """A database connection could not be established.

    Connection failures are fatal unless the caller intercepts this exception.
    """


class ExecutionError(SQLChainError):
    """The database rejected a statement (syntax error, type mismatch, ...)."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class IntegrityError(ExecutionError):
    """Data integrity error (unique, foreign key, not null, check constraints)."""
