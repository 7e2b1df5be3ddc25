"""Unit tests for the clause vocabulary and predicate translators."""

from typing import Any

import pytest

from sqlchain.builder import (
    AliasedTable,
    Combinator,
    ExplicitPredicate,
    ImplicitPredicate,
    Operator,
    OrderDirection,
    Table,
    to_predicate,
    to_table_ref,
)
from sqlchain.builder._predicates import bind_predicate, compare_columns, inline_predicate, render_literal
from sqlchain.exceptions import SQLBuilderError


@pytest.mark.parametrize(
    "token,expected",
    [
        ("=", Operator.EQUAL),
        (">", Operator.GREATER),
        ("<", Operator.LESS),
        ("in", Operator.IN),
        (" LIKE ", Operator.LIKE),
        (Operator.LIKE, Operator.LIKE),
    ],
    ids=["equal", "greater", "less", "in-lower", "like-padded", "member"],
)
def test_operator_parse(token: Any, expected: Operator) -> None:
    assert Operator.parse(token) is expected


@pytest.mark.parametrize("token", ["!=", ">=", "BETWEEN", "", None, 1], ids=["ne", "ge", "between", "empty", "none", "int"])
def test_operator_parse_rejects_unknown(token: Any) -> None:
    with pytest.raises(SQLBuilderError, match="Unsupported operator"):
        Operator.parse(token)


def test_keyword_enums_parse() -> None:
    assert Combinator.parse("or") is Combinator.OR
    assert OrderDirection.parse("asc") is OrderDirection.ASC
    assert str(Combinator.AND) == "AND"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("users", Table("users")),
        (("users", "u"), AliasedTable("users", "u")),
        (["users", "u"], AliasedTable("users", "u")),
        (Table("t"), Table("t")),
        (AliasedTable("t", "x"), AliasedTable("t", "x")),
    ],
    ids=["name", "tuple", "list", "table", "aliased"],
)
def test_to_table_ref(value: Any, expected: Any) -> None:
    assert to_table_ref(value) == expected


@pytest.mark.parametrize("value", [None, 3, ("a",), ("a", "b", "c"), ("a", 1)], ids=["none", "int", "one", "three", "non-str"])
def test_to_table_ref_rejects(value: Any) -> None:
    with pytest.raises(SQLBuilderError):
        to_table_ref(value)


def test_table_rendering() -> None:
    assert Table("users").sql == "users"
    assert Table("users").qualifier == "users"
    assert AliasedTable("users", "u").sql == "users u"
    assert AliasedTable("users", "u").qualifier == "u"


def test_to_predicate_shapes() -> None:
    assert to_predicate(5) == ImplicitPredicate(5)
    assert to_predicate("abc") == ImplicitPredicate("abc")
    assert to_predicate((">", 5)) == ExplicitPredicate(Operator.GREATER, 5)
    assert to_predicate(["IN", [1, 2]]) == ExplicitPredicate(Operator.IN, (1, 2))
    predicate = ExplicitPredicate(Operator.LIKE, "a%")
    assert to_predicate(predicate) is predicate


def test_implicit_predicate_operator() -> None:
    assert ImplicitPredicate(1).operator is Operator.EQUAL


def test_explicit_predicate_parses_operator_token() -> None:
    assert ExplicitPredicate("like", "a%").operator is Operator.LIKE  # type: ignore[arg-type]


def test_bind_predicate() -> None:
    assert bind_predicate("id", ImplicitPredicate(1)) == ("id = ?", [1])
    assert bind_predicate("id", ExplicitPredicate(Operator.IN, [4, 5, 6])) == ("id IN (?,?,?)", [4, 5, 6])


def test_inline_predicate() -> None:
    assert inline_predicate("p.state", ImplicitPredicate("draft")) == "p.state = 'draft'"
    assert inline_predicate("p.id", ExplicitPredicate(Operator.IN, [1, 2]), "mysql") == "p.id IN ('1','2')"


def test_render_literal_quotes_values() -> None:
    assert render_literal("abc", "mysql") == "'abc'"
    assert render_literal(12, "sqlite") == "'12'"
    assert render_literal(True, "mysql") == "'1'"
    assert render_literal(False, "sqlite") == "'0'"
    assert render_literal(None) == "''"


def test_compare_columns() -> None:
    assert compare_columns("a.id", "b.a_id", Operator.EQUAL) == "a.id = b.a_id"
    with pytest.raises(SQLBuilderError):
        compare_columns("a.id", "b.a_id", Operator.IN)
