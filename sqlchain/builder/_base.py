# ruff: noqa: PLR0904
"""Fluent SQL statement builder with positional parameter binding.

A :class:`QueryBuilder` accumulates one statement at a time. Each chained call
appends to the statement text and to the ordered list of bound values; a
terminal call (or :meth:`QueryBuilder.build`) consumes the statement and
leaves the builder empty for the next one.

A builder instance is owned by one caller at a time. It holds unguarded
mutable state and must not be shared between threads while a statement is
being built.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlglot.dialects.dialect import DialectType

from sqlchain.builder._clauses import (
    Combinator,
    ExplicitPredicate,
    JoinKind,
    Operator,
    OrderDirection,
    TableRef,
    to_predicate,
    to_table_ref,
)
from sqlchain.builder._predicates import (
    bind_predicate,
    compare_columns,
    group_clauses,
    inline_predicate,
)
from sqlchain.exceptions import ImproperConfigurationError, SQLBuilderError
from sqlchain.parameters import DEFAULT_DIALECT, validate_parameter_count
from sqlchain.utils.logging import get_logger, statement_extra

if TYPE_CHECKING:
    from sqlchain.driver import ExecutionResult, SyncDriverAdapterBase

__all__ = ("DEFAULT_DIALECT", "BuiltStatement", "QueryBuilder")

logger = get_logger("builder")

TableArg = Union[TableRef, str, Sequence[str]]


@dataclass(frozen=True)
class BuiltStatement:
    """A finished statement ready to hand to a driver."""

    sql: str
    parameters: "tuple[Any, ...]" = ()


@dataclass
class _BuildState:
    table: Optional[TableRef] = None
    statement: str = ""
    parameters: "list[Any]" = field(default_factory=list)
    where_opened: bool = False
    order_opened: bool = False


class QueryBuilder:
    """Stateful builder for one parameterized statement at a time.

    Example:
        >>> builder = QueryBuilder()
        >>> builder.select("users").where({"id": 5}).order_by("created_at", "ASC").limit(0, 10).get_query()
        'SELECT * FROM users WHERE id = ? ORDER BY created_at ASC LIMIT 0, 10'
    """

    __slots__ = ("_episode", "_state", "dialect", "driver")

    def __init__(
        self, driver: "Optional[SyncDriverAdapterBase]" = None, dialect: "Optional[DialectType]" = None
    ) -> None:
        """Initialize the builder.

        Args:
            driver: Driver that runs finished statements for the terminal methods.
            dialect: Dialect used to quote inline literals. Defaults to the driver's
                dialect, or MySQL without a driver.
        """
        self.driver = driver
        if dialect is None:
            dialect = driver.statement_config.dialect if driver is not None else DEFAULT_DIALECT
        self.dialect = dialect
        self._state = _BuildState()
        self._episode = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(statement={self._state.statement!r}, parameters={self._state.parameters!r})"

    def __str__(self) -> str:
        return self._state.statement

    # -- introspection --
    @property
    def table(self) -> "Optional[TableRef]":
        """Table targeted by the statement under construction."""
        return self._state.table

    @property
    def parameters(self) -> "list[Any]":
        """Copy of the values bound so far, in placeholder order."""
        return list(self._state.parameters)

    @property
    def episode(self) -> int:
        """Number of statements this builder has finished with :meth:`build`."""
        return self._episode

    def get_query(self) -> str:
        """Return the statement text built so far without changing it."""
        return self._state.statement

    # -- statement initiators --
    def _start(self, table: TableArg) -> TableRef:
        ref = to_table_ref(table)
        self._state = _BuildState(table=ref)
        return ref

    def insert(self, table: TableArg, data: "Mapping[str, Any]") -> "QueryBuilder":
        """Start an ``INSERT`` statement.

        Values are bound in the iteration order of ``data``, which is also the
        order of the generated column list.

        Args:
            table: Target table.
            data: Column to value mapping.

        Returns:
            QueryBuilder: The current builder instance for method chaining.
        """
        ref = self._start(table)
        columns = ",".join(data)
        placeholders = ",".join("?" for _ in data)
        self._state.statement = f"INSERT INTO {ref.sql} ({columns}) VALUES ({placeholders})"
        self._state.parameters.extend(data.values())
        return self

    def select(self, table: TableArg, columns: "Optional[Sequence[str]]" = None) -> "QueryBuilder":
        """Start a ``SELECT`` statement.

        Args:
            table: Source table, or a ``(name, alias)`` pair. The alias qualifies
                columns in later join clauses.
            columns: Columns to select. All columns when empty.

        Returns:
            QueryBuilder: The current builder instance for method chaining.
        """
        ref = self._start(table)
        selected = ", ".join(columns) if columns else "*"
        self._state.statement = f"SELECT {selected} FROM {ref.sql}"
        return self

    def count(self, table: TableArg, column: "Optional[str]" = None) -> "QueryBuilder":
        """Start a ``SELECT COUNT(...)`` statement."""
        ref = self._start(table)
        self._state.statement = f"SELECT COUNT({column or '*'}) FROM {ref.sql}"
        return self

    def update(self, table: TableArg, data: "Mapping[str, Any]") -> "QueryBuilder":
        """Start an ``UPDATE`` statement.

        Args:
            table: Target table.
            data: Column to value mapping, bound in iteration order.

        Returns:
            QueryBuilder: The current builder instance for method chaining.
        """
        ref = self._start(table)
        assignments = ", ".join(f"{column} = ?" for column in data)
        self._state.statement = f"UPDATE {ref.sql} SET {assignments}"
        self._state.parameters.extend(data.values())
        return self

    def delete(self, table: TableArg) -> "QueryBuilder":
        """Start a ``DELETE`` statement."""
        ref = self._start(table)
        self._state.statement = f"DELETE FROM {ref.sql}"
        return self

    # -- joins --
    def _require_table(self, kind: JoinKind) -> TableRef:
        if self._state.table is None:
            msg = f"Cannot add {kind.value} JOIN before a statement has been started."
            raise SQLBuilderError(msg)
        return self._state.table

    def _join(
        self,
        kind: JoinKind,
        target: TableArg,
        source_column: str,
        target_column: str,
        where: "Optional[Mapping[str, Any]]",
        combinator: "Union[Combinator, str]",
    ) -> "QueryBuilder":
        source_table = self._require_table(kind)
        ref = to_table_ref(target)
        joiner = Combinator.parse(combinator)
        source = f"{source_table.qualifier}.{source_column}"
        target_qualified = f"{ref.qualifier}.{target_column}"
        clause = f" {kind.value} JOIN {ref.sql} ON {source} = {target_qualified}"

        if where:
            conditions = [
                inline_predicate(
                    column if "." in column else f"{ref.qualifier}.{column}", to_predicate(value), self.dialect
                )
                for column, value in where.items()
            ]
            clause += f" AND {group_clauses(conditions, joiner.value)}"

        self._state.statement += clause
        return self

    def join(
        self,
        target: TableArg,
        source_column: str,
        target_column: str,
        where: "Optional[Mapping[str, Any]]" = None,
        combinator: "Union[Combinator, str]" = Combinator.AND,
    ) -> "QueryBuilder":
        """Add an ``INNER JOIN`` on ``current_table.source_column = target.target_column``.

        Args:
            target: Joined table, or a ``(name, alias)`` pair.
            source_column: Column of the statement's table.
            target_column: Column of the joined table.
            where: Extra conditions on the joined table, embedded as literals in
                the ON clause. Unqualified columns are qualified with the joined table.
            combinator: How the extra conditions are combined with each other.
                The group is always ANDed onto the ON condition.

        Raises:
            SQLBuilderError: If no statement has been started.

        Returns:
            QueryBuilder: The current builder instance for method chaining.
        """
        return self._join(JoinKind.INNER, target, source_column, target_column, where, combinator)

    def left_join(
        self,
        target: TableArg,
        source_column: str,
        target_column: str,
        where: "Optional[Mapping[str, Any]]" = None,
        combinator: "Union[Combinator, str]" = Combinator.AND,
    ) -> "QueryBuilder":
        """Add a ``LEFT JOIN``. See :meth:`join`."""
        return self._join(JoinKind.LEFT, target, source_column, target_column, where, combinator)

    def right_join(
        self,
        target: TableArg,
        source_column: str,
        target_column: str,
        where: "Optional[Mapping[str, Any]]" = None,
        combinator: "Union[Combinator, str]" = Combinator.AND,
    ) -> "QueryBuilder":
        """Add a ``RIGHT JOIN``. See :meth:`join`."""
        return self._join(JoinKind.RIGHT, target, source_column, target_column, where, combinator)

    def cross_join(self, target: TableArg) -> "QueryBuilder":
        """Add a ``CROSS JOIN`` (no ON clause).

        Raises:
            SQLBuilderError: If no statement has been started.
        """
        self._require_table(JoinKind.CROSS)
        self._state.statement += f" {JoinKind.CROSS.value} JOIN {to_table_ref(target).sql}"
        return self

    # -- conditions --
    def _append_condition(self, clause: str, combinator: Combinator) -> None:
        if not self._state.where_opened:
            self._state.where_opened = True
            self._state.statement += " WHERE "
        else:
            self._state.statement += f" {combinator.value} "
        self._state.statement += clause

    def _bind_predicates(self, predicates: "Mapping[str, Any]", combinator: Combinator) -> "QueryBuilder":
        if not predicates:
            msg = "At least one predicate is required."
            raise SQLBuilderError(msg)

        clauses: list[str] = []
        values: list[Any] = []
        for column, value in predicates.items():
            clause, bound = bind_predicate(column, to_predicate(value))
            clauses.append(clause)
            values.extend(bound)

        self._append_condition(group_clauses(clauses, combinator.value), combinator)
        self._state.parameters.extend(values)
        return self

    def where(
        self, predicates: "Mapping[str, Any]", combinator: "Union[Combinator, str]" = Combinator.AND
    ) -> "QueryBuilder":
        """Add conditions to the ``WHERE`` clause.

        The first condition of a statement opens ``WHERE``; later calls are
        joined with ``combinator``. Values are ``value`` (compared with ``=``)
        or ``(operator, value)`` pairs, where ``IN`` takes a sequence::

            builder.select("users").where({"status": "active", "id": ("IN", [1, 2, 3])})

        Several predicates in one call are joined with ``combinator`` and
        parenthesised as a group.

        Args:
            predicates: Column to predicate mapping.
            combinator: ``AND`` or ``OR``.

        Raises:
            SQLBuilderError: If the mapping is empty or names an unknown operator.

        Returns:
            QueryBuilder: The current builder instance for method chaining.
        """
        return self._bind_predicates(predicates, Combinator.parse(combinator))

    def or_where(self, predicates: "Mapping[str, Any]") -> "QueryBuilder":
        """Add conditions joined to the ``WHERE`` clause with ``OR``."""
        return self._bind_predicates(predicates, Combinator.OR)

    def where_column(
        self,
        left: str,
        right: str,
        operator: "Union[Operator, str]" = Operator.EQUAL,
        combinator: "Union[Combinator, str]" = Combinator.AND,
    ) -> "QueryBuilder":
        """Compare two column expressions in the ``WHERE`` clause.

        Nothing is bound or quoted, e.g. ``where_column("a.id", "b.parent_id")``.
        """
        joiner = Combinator.parse(combinator)
        self._append_condition(compare_columns(left, right, Operator.parse(operator)), joiner)
        return self

    # -- modifiers --
    def group_by(self, column: str) -> "QueryBuilder":
        """Add a ``GROUP BY`` clause.

        Each call emits its own ``GROUP BY``; group by several columns by
        passing them as one comma separated expression.
        """
        self._state.statement += f" GROUP BY {column}"
        return self

    def having(self, column: str, value: Any, operator: "Union[Operator, str]" = Operator.EQUAL) -> "QueryBuilder":
        """Add a ``HAVING`` clause with one bound predicate."""
        clause, values = bind_predicate(column, ExplicitPredicate(Operator.parse(operator), value))
        self._state.statement += f" HAVING {clause}"
        self._state.parameters.extend(values)
        return self

    def order_by(
        self, column: str, direction: "Union[OrderDirection, str]" = OrderDirection.DESC
    ) -> "QueryBuilder":
        """Add a column to the ``ORDER BY`` clause.

        Args:
            column: Column or expression to sort by.
            direction: ``ASC`` or ``DESC``.

        Returns:
            QueryBuilder: The current builder instance for method chaining.
        """
        sort = f"{column} {OrderDirection.parse(direction).value}"
        if not self._state.order_opened:
            self._state.order_opened = True
            self._state.statement += f" ORDER BY {sort}"
        else:
            self._state.statement += f", {sort}"
        return self

    def limit(self, offset: int, count: int) -> "QueryBuilder":
        """Skip ``offset`` rows and return at most ``count`` rows."""
        self._state.statement += f" LIMIT {int(offset)}, {int(count)}"
        return self

    # -- lifecycle --
    def reset(self) -> None:
        """Discard the statement under construction."""
        self._state = _BuildState()

    def build(self) -> BuiltStatement:
        """Finish the statement and leave the builder empty.

        Raises:
            SQLBuilderError: If no statement has been started.
            ParameterError: If placeholders and bound values do not line up.

        Returns:
            BuiltStatement: The statement text and its bound values.
        """
        state, self._state = self._state, _BuildState()
        if not state.statement:
            msg = "No statement to build"
            raise SQLBuilderError(msg)
        validate_parameter_count(state.statement, state.parameters, self.dialect)
        self._episode += 1
        logger.debug(
            "Built statement",
            extra=statement_extra(state.statement, state.parameters, episode=self._episode, dialect=self.dialect),
        )
        return BuiltStatement(sql=state.statement, parameters=tuple(state.parameters))

    # -- terminals --
    def _require_driver(self) -> "SyncDriverAdapterBase":
        if self.driver is None:
            msg = "No driver is bound to this builder; create it with driver.query() or QueryBuilder(driver=...)"
            raise ImproperConfigurationError(msg)
        return self.driver

    def _run(self) -> "ExecutionResult":
        statement = self.build()
        return self._require_driver().execute(statement.sql, statement.parameters)

    def execute(self) -> bool:
        """Run the statement, typically an INSERT, UPDATE or DELETE.

        Returns:
            True when the driver reports success.
        """
        return self._run().is_success()

    def row_count(self) -> int:
        """Run the statement and return the number of affected or matched rows."""
        return self._run().rows_affected

    def fetch(self, as_dict: bool = False) -> Any:
        """Run the statement and return its first row.

        Args:
            as_dict: Return the row as a column name to value mapping instead of a tuple.

        Returns:
            The first row, or None when there are no rows.
        """
        return self._run().one_or_none(as_dict=as_dict)

    def fetch_column(self, column: int = 0) -> Any:
        """Run the statement and return one value of the first row by position."""
        return self._run().scalar(column)

    def all(self, as_dict: bool = False) -> "list[Any]":
        """Run the statement and return every row."""
        return self._run().all(as_dict=as_dict)

    def last_insert(self) -> Any:
        """Return the identifier generated by the last insert on the driver's connection.

        The statement under construction is left untouched.
        """
        return self._require_driver().last_insert_id()

    def sql(self, statement: str, parameters: "Optional[Sequence[Any]]" = None) -> "ExecutionResult":
        """Run arbitrary SQL through the driver, bypassing the builder state."""
        return self._require_driver().execute(statement, parameters or ())
