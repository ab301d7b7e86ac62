"""
StatementBuilder -- chainable, per-table SELECT/INSERT/UPDATE/DELETE builder.

Responsibility:
    Accumulates select/join/filter/order/group/limit clauses for one table,
    compiles them into a single parameterized statement and executes it
    through a ``StatementExecutor``.

Architecture position:
    Kernel > Query -- imperative shell over ``query/statement.py``.
    Used by ``Repository`` and by the audit recorder.

Invariants enforced:
    - Every terminal call (``get``, ``insert``, ``update``, ``delete``)
      resets the builder to ``QueryState(table)`` on return, whether the
      statement succeeded or raised.  A stale filter can never leak into the
      next logical operation.
    - ``where`` replaces the previous filter; ``join`` accumulates.

Failure modes:
    - Store errors from the executor propagate unchanged (after reset).
    - InvalidConditionError from ``where`` for malformed conditions.

Concurrency:
    A builder is NOT safe to share between concurrent call sites: two chains
    interleaving ``where``/``select`` calls on one instance corrupt each
    other before either reaches its terminal call.  Use one builder per
    logical operation (``Repository.query()``) or serialize access.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from inventory_kernel.db.executor import ExecutionResult, Params, StatementExecutor
from inventory_kernel.exceptions import MissingTableNameError
from inventory_kernel.query.statement import (
    JoinClause,
    QueryState,
    Statement,
    compile_conditions,
    compile_delete,
    compile_insert,
    compile_select,
    compile_update,
    render_group,
    render_order,
)


class StatementBuilder:
    """
    Per-table statement builder.

    Contract:
        Configuring methods return ``self`` so calls chain.  Terminal methods
        execute and reset.

    Guarantees:
        - ``state`` is the default ``QueryState`` after any terminal call.
        - Condition and data values are always bound, never interpolated.

    Non-goals:
        - OR / nested filters, subqueries, aggregates beyond GROUP BY.  Use
          ``execute`` with hand-written parameterized SQL for those.
    """

    def __init__(self, table: str, executor: StatementExecutor | None = None):
        if not table:
            raise MissingTableNameError(type(self).__name__)
        self._table = table
        self._executor = executor or StatementExecutor()
        self._state = QueryState(table)

    @property
    def table(self) -> str:
        return self._table

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def executor(self) -> StatementExecutor:
        return self._executor

    # -- configuration -------------------------------------------------------

    def select(self, fields: str | Iterable[str] = ("*",)) -> "StatementBuilder":
        if isinstance(fields, str):
            fields = (fields,)
        self._state = replace(self._state, fields=tuple(fields) or ("*",))
        return self

    def join(self, table: str, predicate: str, kind: str = "INNER") -> "StatementBuilder":
        self._state = replace(
            self._state,
            joins=self._state.joins + (JoinClause(table, predicate, kind),),
        )
        return self

    def where(self, conditions: Iterable[Sequence[Any]] = ()) -> "StatementBuilder":
        self._state = replace(self._state, filter=compile_conditions(conditions))
        return self

    def order_by(self, fields: str | Iterable[str | Sequence[str]]) -> "StatementBuilder":
        if isinstance(fields, str):
            fields = (fields,)
        self._state = replace(self._state, order=render_order(fields))
        return self

    def group_by(self, fields: str | Iterable[str]) -> "StatementBuilder":
        if isinstance(fields, str):
            fields = (fields,)
        self._state = replace(self._state, group=render_group(fields))
        return self

    def limit(self, n: int) -> "StatementBuilder":
        self._state = replace(self._state, limit_clause=f"LIMIT {int(n)}")
        return self

    def reset(self) -> "StatementBuilder":
        self._state = QueryState(self._table)
        return self

    def to_statement(self) -> Statement:
        """Compile the current SELECT without executing or resetting."""
        return compile_select(self._state)

    # -- terminal operations -------------------------------------------------

    def get(self) -> list[dict[str, Any]]:
        """Run the SELECT and return its rows."""
        try:
            statement = compile_select(self._state)
            return list(self._executor.execute(statement.sql, statement.params).rows)
        finally:
            self.reset()

    def first(self) -> dict[str, Any] | None:
        """Run the SELECT and return the first row, or None."""
        rows = self.get()
        return rows[0] if rows else None

    def insert(self, data: Mapping[str, Any]) -> int | None:
        """Insert one row and return its generated id."""
        try:
            statement = compile_insert(self._table, data)
            return self._executor.insert(statement.sql, statement.params)
        finally:
            self.reset()

    def update(self, data: Mapping[str, Any]) -> int:
        """Update rows matching the current filter; return affected count."""
        try:
            statement = compile_update(self._state, data)
            return self._executor.execute(statement.sql, statement.params).rowcount
        finally:
            self.reset()

    def delete(self) -> int:
        """Delete rows matching the current filter; return affected count."""
        try:
            statement = compile_delete(self._state)
            return self._executor.execute(statement.sql, statement.params).rowcount
        finally:
            self.reset()

    # -- escape hatch --------------------------------------------------------

    def execute(self, sql: str, params: Params = ()) -> ExecutionResult:
        """Run caller-supplied parameterized SQL verbatim; builder state is untouched."""
        return self._executor.execute(sql, params)

    def __repr__(self) -> str:
        return f"<StatementBuilder {self._table}>"
