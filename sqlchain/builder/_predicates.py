"""Translation of predicates into SQL clauses.

``bind_predicate`` produces placeholder clauses for WHERE and HAVING.
``inline_predicate`` embeds the values as quoted literals and is only used
for conditions attached to a JOIN's ON clause.
"""

from typing import Any, Optional

from sqlglot import exp
from sqlglot.dialects.dialect import DialectType

from sqlchain.builder._clauses import Operator, Predicate
from sqlchain.exceptions import SQLBuilderError

__all__ = ("bind_predicate", "compare_columns", "group_clauses", "inline_predicate", "render_literal")


def bind_predicate(column: str, predicate: Predicate) -> "tuple[str, list[Any]]":
    """Translate a predicate into a placeholder clause.

    Args:
        column: Column expression on the left-hand side.
        predicate: Operator and value(s).

    Returns:
        The clause text and the values to bind, in placeholder order.
    """
    if predicate.operator is Operator.IN:
        values = list(predicate.value)
        placeholders = ",".join("?" for _ in values)
        return f"{column} IN ({placeholders})", values
    return f"{column} {predicate.operator.value} ?", [predicate.value]


def render_literal(value: Any, dialect: Optional[DialectType] = None) -> str:
    """Render a value as a quoted string literal for ``dialect``.

    Booleans become ``'1'``/``'0'`` and None becomes an empty string.
    """
    if isinstance(value, bool):
        text = "1" if value else "0"
    elif value is None:
        text = ""
    else:
        text = str(value)
    return exp.Literal.string(text).sql(dialect=dialect)


def inline_predicate(column: str, predicate: Predicate, dialect: Optional[DialectType] = None) -> str:
    """Translate a predicate into a clause with literal values.

    Args:
        column: Column expression on the left-hand side.
        predicate: Operator and value(s).
        dialect: Dialect used to quote the literals.

    Returns:
        The clause text.
    """
    if predicate.operator is Operator.IN:
        literals = ",".join(render_literal(value, dialect) for value in predicate.value)
        return f"{column} IN ({literals})"
    return f"{column} {predicate.operator.value} {render_literal(predicate.value, dialect)}"


def compare_columns(left: str, right: str, operator: Operator) -> str:
    """Compare two column expressions directly.

    Raises:
        SQLBuilderError: For ``IN``, which needs a value list.
    """
    if operator is Operator.IN:
        msg = "IN cannot compare two columns"
        raise SQLBuilderError(msg)
    return f"{left} {operator.value} {right}"


def group_clauses(clauses: "list[str]", combinator: str) -> str:
    """Join clauses with a combinator, parenthesised when there is more than one."""
    if len(clauses) == 1:
        return clauses[0]
    return "(" + f" {combinator} ".join(clauses) + ")"
