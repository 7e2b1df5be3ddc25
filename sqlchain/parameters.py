"""Positional parameter handling for built statements.

The builder always emits ``?`` placeholders. Drivers whose DB-API module uses
the ``format`` paramstyle (most MySQL drivers) need ``%s`` instead, which is
what :func:`convert_placeholders` produces.

Placeholders inside string literals and comments are ignored. Whether a
backslash escapes a quote inside a literal depends on the dialect: MySQL
reads ``'it\\'s'`` as one literal, SQLite reads ``'C:\\'`` as a complete one.
"""

import re
from collections.abc import Sequence
from enum import Enum
from functools import lru_cache
from typing import Any, Final

from sqlglot.dialects.dialect import Dialect, DialectType

from sqlchain.exceptions import ExtraParameterError, MissingParameterError

__all__ = (
    "DEFAULT_DIALECT",
    "ParameterStyle",
    "convert_placeholders",
    "count_placeholders",
    "validate_parameter_count",
)

DEFAULT_DIALECT: Final = "mysql"


class ParameterStyle(str, Enum):
    """Parameter style enumeration with string values."""

    QMARK = "qmark"
    POSITIONAL_PYFORMAT = "pyformat_positional"

    def __str__(self) -> str:
        return self.value


_COMMENTS_AND_QMARK: Final = r"""
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    (?P<qmark>\?)
"""

# Literals and comments are matched first and skipped
_BACKSLASH_ESCAPE_REGEX: Final = re.compile(
    r"""
    (?P<dquote>"(?:[^"\\]|\\.|"")*") |
    (?P<squote>'(?:[^'\\]|\\.|'')*') |
    """
    + _COMMENTS_AND_QMARK,
    re.VERBOSE | re.MULTILINE | re.DOTALL,
)
_STANDARD_ESCAPE_REGEX: Final = re.compile(
    r"""
    (?P<dquote>"(?:[^"]|"")*") |
    (?P<squote>'(?:[^']|'')*') |
    """
    + _COMMENTS_AND_QMARK,
    re.VERBOSE | re.MULTILINE | re.DOTALL,
)


@lru_cache(maxsize=32)
def _uses_backslash_escapes(dialect: Any) -> bool:
    return "\\" in Dialect.get_or_raise(dialect).tokenizer_class.STRING_ESCAPES


def _placeholder_regex(dialect: "DialectType") -> "re.Pattern[str]":
    if isinstance(dialect, Dialect):
        dialect = type(dialect)
    return _BACKSLASH_ESCAPE_REGEX if _uses_backslash_escapes(dialect) else _STANDARD_ESCAPE_REGEX


def count_placeholders(sql: str, dialect: "DialectType" = DEFAULT_DIALECT) -> int:
    """Count ``?`` placeholders outside quoted literals and comments.

    Args:
        sql: SQL text.
        dialect: Dialect whose string literal rules apply.

    Returns:
        Number of positional placeholders.
    """
    return sum(1 for match in _placeholder_regex(dialect).finditer(sql) if match.group("qmark"))


def convert_placeholders(sql: str, style: ParameterStyle, dialect: "DialectType" = DEFAULT_DIALECT) -> str:
    """Rewrite ``?`` placeholders into the target parameter style.

    For ``POSITIONAL_PYFORMAT`` every literal ``%`` is doubled as well, since
    pyformat drivers interpolate the whole statement text.

    Args:
        sql: SQL text using ``?`` placeholders.
        style: Target parameter style.
        dialect: Dialect whose string literal rules apply.

    Returns:
        SQL text in the requested style.
    """
    if style is ParameterStyle.QMARK:
        return sql

    pieces: list[str] = []
    position = 0
    for match in _placeholder_regex(dialect).finditer(sql):
        pieces.append(sql[position : match.start()].replace("%", "%%"))
        pieces.append("%s" if match.group("qmark") else match.group(0).replace("%", "%%"))
        position = match.end()
    pieces.append(sql[position:].replace("%", "%%"))
    return "".join(pieces)


def validate_parameter_count(
    sql: str, parameters: Sequence[Any], dialect: "DialectType" = DEFAULT_DIALECT
) -> None:
    """Check that every placeholder has exactly one bound value.

    Args:
        sql: SQL text using ``?`` placeholders.
        parameters: Bound values in placeholder order.
        dialect: Dialect whose string literal rules apply.

    Raises:
        MissingParameterError: If there are fewer values than placeholders.
        ExtraParameterError: If there are more values than placeholders.
    """
    expected = count_placeholders(sql, dialect)
    actual = len(parameters)
    if actual < expected:
        msg = f"Statement expects {expected} parameters but {actual} were bound"
        raise MissingParameterError(msg, sql)
    if actual > expected:
        msg = f"Statement expects {expected} parameters but {actual} were bound"
        raise ExtraParameterError(msg, sql)
