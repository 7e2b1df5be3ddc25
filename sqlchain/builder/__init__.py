"""Fluent statement builder.

Provides :class:`QueryBuilder` and the clause vocabulary it accepts.
"""

from sqlchain.builder._base import DEFAULT_DIALECT, BuiltStatement, QueryBuilder
from sqlchain.builder._clauses import (
    AliasedTable,
    Combinator,
    ExplicitPredicate,
    ImplicitPredicate,
    JoinKind,
    Operator,
    OrderDirection,
    Predicate,
    Table,
    TableRef,
    to_predicate,
    to_table_ref,
)

__all__ = (
    "DEFAULT_DIALECT",
    "AliasedTable",
    "BuiltStatement",
    "Combinator",
    "ExplicitPredicate",
    "ImplicitPredicate",
    "JoinKind",
    "Operator",
    "OrderDirection",
    "Predicate",
    "QueryBuilder",
    "Table",
    "TableRef",
    "to_predicate",
    "to_table_ref",
)
