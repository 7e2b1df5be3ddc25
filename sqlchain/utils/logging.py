"""Logging for sqlchain.

Every logger handed out by :func:`get_logger` lives under the ``sqlchain``
namespace. Statement events (a builder finishing an episode, a driver running
a statement, a database error being mapped) attach the statement text, its
parameter count and the builder episode as record attributes via
:func:`statement_extra`; :class:`StructuredFormatter` writes them out as JSON
fields next to the current correlation ID.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqlchain._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord
    from typing import TextIO

__all__ = (
    "STATEMENT_FIELDS",
    "StatementContextFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "get_logger",
    "statement_extra",
)

ROOT_LOGGER_NAME = "sqlchain"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(correlation_id)s] %(message)s"
STATEMENT_FIELDS = ("sql", "parameter_count", "episode", "dialect")

_correlation_id: ContextVar[str | None] = ContextVar("sqlchain_correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current context, if any."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Tag every sqlchain log record emitted inside the block with ``correlation_id``.

    Scopes nest; leaving a scope restores the enclosing ID.

    Example:
        >>> with correlation_scope("req-42"):
        ...     db.select("users").where({"id": 5}).fetch()
    """
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


def statement_extra(sql: str | None, parameters: Sequence[Any] | None = None, **fields: Any) -> dict[str, Any]:
    """Build the ``extra`` mapping for a statement log call.

    Args:
        sql: Statement text.
        parameters: Bound values. Only their count is logged, never the values.
        **fields: Further statement fields such as ``episode`` or ``dialect``.

    Returns:
        Record attributes for ``logger.log(..., extra=...)``.
    """
    extra: dict[str, Any] = {"sql": sql}
    if parameters is not None:
        extra["parameter_count"] = len(parameters)
    extra.update(fields)
    return extra


class StatementContextFilter(logging.Filter):
    """Stamp records with the correlation ID so text formats can reference it."""

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with statement fields at the top level."""

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            entry["correlation_id"] = correlation_id
        for field in STATEMENT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``sqlchain`` namespace.

    Args:
        name: Dotted suffix such as ``"builder"``. The root sqlchain logger when omitted.

    Returns:
        The logger, with a :class:`StatementContextFilter` attached.
    """
    if name is None:
        name = ROOT_LOGGER_NAME
    elif not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, StatementContextFilter) for f in logger.filters):
        logger.addFilter(StatementContextFilter())
    return logger


def configure_logging(
    level: int | str = logging.INFO,
    *,
    structured: bool = True,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Send sqlchain's records to ``stream`` instead of the application's root logger.

    Args:
        level: Threshold for the ``sqlchain`` logger. ``DEBUG`` logs every built
            and executed statement.
        structured: JSON lines via :class:`StructuredFormatter`, or plain text.
        stream: Destination, ``sys.stderr`` by default.

    Returns:
        The installed handler, replacing any handler a previous call installed.
    """
    root_logger = get_logger()
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(StatementContextFilter())
    handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(TEXT_FORMAT))
    root_logger.addHandler(handler)
    root_logger.propagate = False
    return handler
