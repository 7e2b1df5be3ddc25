"""Clause vocabulary shared by the query builder.

Table references and predicate values arrive from callers in loose shapes
(plain names, ``(name, alias)`` pairs, bare values, ``(operator, value)``
pairs). They are normalized here into explicit variants so the builder never
has to sniff argument shapes itself.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from sqlchain.exceptions import SQLBuilderError
from sqlchain.utils.type_guards import is_pair, is_value_sequence

__all__ = (
    "AliasedTable",
    "Combinator",
    "ExplicitPredicate",
    "ImplicitPredicate",
    "JoinKind",
    "Operator",
    "OrderDirection",
    "Predicate",
    "Table",
    "TableRef",
    "to_predicate",
    "to_table_ref",
)


class _KeywordEnum(str, Enum):
    """String enum parsed from SQL keywords, case-insensitively."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> Any:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip().upper()
            for member in cls:
                if member.value == token:
                    return member
        msg = f"Unsupported {cls.__name__.lower()}: {value!r}"
        raise SQLBuilderError(msg)


class Operator(_KeywordEnum):
    """Comparison operators supported in predicates."""

    EQUAL = "="
    GREATER = ">"
    LESS = "<"
    IN = "IN"
    LIKE = "LIKE"


class Combinator(_KeywordEnum):
    """Boolean connective joining predicate clauses."""

    AND = "AND"
    OR = "OR"


class OrderDirection(_KeywordEnum):
    ASC = "ASC"
    DESC = "DESC"


class JoinKind(_KeywordEnum):
    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    CROSS = "CROSS"


@dataclass(frozen=True)
class Table:
    """A table referenced by its own name."""

    name: str

    @property
    def sql(self) -> str:
        return self.name

    @property
    def qualifier(self) -> str:
        """Prefix other clauses use to qualify this table's columns."""
        return self.name


@dataclass(frozen=True)
class AliasedTable:
    """A table referenced through an alias.

    The alias, not the real name, qualifies columns elsewhere in the statement.
    """

    name: str
    alias: str

    @property
    def sql(self) -> str:
        return f"{self.name} {self.alias}"

    @property
    def qualifier(self) -> str:
        return self.alias


TableRef = Union[Table, AliasedTable]


def to_table_ref(value: "Union[TableRef, str, Sequence[str]]") -> TableRef:
    """Normalize a table argument.

    Args:
        value: A ``TableRef``, a table name, or a ``(name, alias)`` pair.

    Raises:
        SQLBuilderError: If the value has none of those shapes.

    Returns:
        The explicit table reference.
    """
    if isinstance(value, (Table, AliasedTable)):
        return value
    if isinstance(value, str):
        return Table(value)
    if is_pair(value) and all(isinstance(part, str) for part in value):
        return AliasedTable(value[0], value[1])
    msg = f"Expected a table name or a (name, alias) pair, got {value!r}"
    raise SQLBuilderError(msg)


@dataclass(frozen=True)
class ImplicitPredicate:
    """A bare value compared with ``=``."""

    value: Any

    @property
    def operator(self) -> Operator:
        return Operator.EQUAL


@dataclass(frozen=True)
class ExplicitPredicate:
    """A value compared with an explicit operator."""

    operator: Operator
    value: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", Operator.parse(self.operator))
        if self.operator is Operator.IN:
            if not is_value_sequence(self.value):
                msg = f"IN requires a sequence of values, got {self.value!r}"
                raise SQLBuilderError(msg)
            if not self.value:
                msg = "IN requires at least one value"
                raise SQLBuilderError(msg)
            object.__setattr__(self, "value", tuple(self.value))


Predicate = Union[ImplicitPredicate, ExplicitPredicate]


def to_predicate(value: Any) -> Predicate:
    """Normalize a predicate value.

    Two-item lists and tuples are read as ``(operator, value)``; every other
    value is compared with ``=``.

    Raises:
        SQLBuilderError: If an ``(operator, value)`` pair names an unknown operator.

    Returns:
        The explicit predicate.
    """
    if isinstance(value, (ImplicitPredicate, ExplicitPredicate)):
        return value
    if is_pair(value):
        return ExplicitPredicate(Operator.parse(value[0]), value[1])
    return ImplicitPredicate(value)
