"""
Statement compilation -- pure functions from query state to SQL text.

Responsibility:
    Turns a ``QueryState`` (or insert/update data) into one parameterized
    ``Statement`` with positional ``?`` placeholders and an ordered tuple of
    bound values.

Architecture position:
    Kernel > Query -- pure functional core, zero I/O.  The builder in
    ``query/builder.py`` owns state and execution; this module owns syntax.

Invariants enforced:
    - Values are only ever emitted as ``?`` placeholders.  The number of
      placeholders always equals ``len(Statement.params)``.
    - ``IS NULL`` / ``IS NOT NULL`` conditions bind nothing.
    - Filters combine with ``AND`` only.  There is no ``OR`` and no nesting;
      anything richer goes through ``StatementBuilder.execute``.

Security contract:
    Table names, field lists, join predicates, operators, ORDER BY, GROUP BY
    and LIMIT fragments are trusted literals and are rendered verbatim.
    Callers MUST NOT place user input into any of them; only condition
    values and insert/update values are bound.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from inventory_kernel.exceptions import InvalidConditionError

# Marker value: ("col", NOT_NULL, "IS") compiles to "col IS NOT NULL"
NOT_NULL = "NOT NULL"

DEFAULT_FIELDS: tuple[str, ...] = ("*",)


@dataclass(frozen=True)
class Statement:
    """One compiled statement ready for the executor."""

    sql: str
    params: tuple[Any, ...] = ()


@dataclass(frozen=True)
class JoinClause:
    table: str
    predicate: str
    kind: str = "INNER"

    def render(self) -> str:
        return f"{self.kind} JOIN {self.table} ON {self.predicate}"


@dataclass(frozen=True)
class FilterClause:
    clause_text: str = "1=1"
    bound_values: tuple[Any, ...] = ()


DEFAULT_FILTER = FilterClause()


@dataclass(frozen=True)
class QueryState:
    """
    Everything a SELECT/UPDATE/DELETE needs, as one immutable value.

    Each configuring call on the builder produces a new QueryState; a
    terminal call drops it and starts again from ``QueryState(table)``.
    """

    table: str
    fields: tuple[str, ...] = DEFAULT_FIELDS
    joins: tuple[JoinClause, ...] = ()
    filter: FilterClause = field(default=DEFAULT_FILTER)
    order: str | None = None
    group: str | None = None
    limit_clause: str | None = None

    @property
    def is_default(self) -> bool:
        return self == QueryState(self.table)


def _unpack_condition(condition: Any) -> tuple[str, Any, str]:
    if isinstance(condition, (str, bytes)) or not isinstance(condition, Sequence):
        raise InvalidConditionError(condition)
    if len(condition) == 2:
        field_name, value = condition
        operator = "="
    elif len(condition) == 3:
        field_name, value, operator = condition
    else:
        raise InvalidConditionError(condition)
    if not isinstance(field_name, str) or not field_name:
        raise InvalidConditionError(condition)
    if not isinstance(operator, str) or not operator:
        raise InvalidConditionError(condition)
    return field_name, value, operator


def compile_conditions(conditions: Iterable[Any]) -> FilterClause:
    """
    Compile ``(field, value[, operator])`` conditions into a filter.

    An empty iterable yields the default ``1=1`` filter.

    Raises:
        InvalidConditionError: If a condition is not a 2- or 3-item sequence.
    """
    clauses: list[str] = []
    values: list[Any] = []
    for condition in conditions:
        field_name, value, operator = _unpack_condition(condition)
        if operator.upper() == "IS" and value is None:
            clauses.append(f"{field_name} IS NULL")
        elif operator.upper() == "IS" and value == NOT_NULL:
            clauses.append(f"{field_name} IS NOT NULL")
        else:
            clauses.append(f"{field_name} {operator} ?")
            values.append(value)

    if not clauses:
        return DEFAULT_FILTER
    return FilterClause(" AND ".join(clauses), tuple(values))


def render_order(fields: Iterable[str | Sequence[str]]) -> str | None:
    """``["a", ("b", "DESC")]`` -> ``ORDER BY a, b DESC``."""
    items = []
    for item in fields:
        if isinstance(item, str):
            items.append(item)
        else:
            items.append(" ".join(str(part) for part in item))
    return f"ORDER BY {', '.join(items)}" if items else None


def render_group(fields: Iterable[str]) -> str | None:
    items = list(fields)
    return f"GROUP BY {', '.join(items)}" if items else None


def _join_fragments(*fragments: str | None) -> str:
    return " ".join(f for f in fragments if f)


def compile_select(state: QueryState) -> Statement:
    """``SELECT <fields> FROM <table> <joins> WHERE <filter> <group> <order> <limit>``."""
    sql = _join_fragments(
        f"SELECT {', '.join(state.fields)} FROM {state.table}",
        *(join.render() for join in state.joins),
        f"WHERE {state.filter.clause_text}",
        state.group,
        state.order,
        state.limit_clause,
    )
    return Statement(sql, state.filter.bound_values)


def compile_insert(table: str, data: Mapping[str, Any]) -> Statement:
    columns = list(data)
    placeholders = ", ".join("?" for _ in columns)
    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
    return Statement(sql, tuple(data[c] for c in columns))


def compile_update(state: QueryState, data: Mapping[str, Any]) -> Statement:
    """Assignment values are bound first, then the filter values."""
    columns = list(data)
    assignments = ", ".join(f"{c} = ?" for c in columns)
    sql = f"UPDATE {state.table} SET {assignments} WHERE {state.filter.clause_text}"
    return Statement(sql, tuple(data[c] for c in columns) + state.filter.bound_values)


def compile_delete(state: QueryState) -> Statement:
    sql = f"DELETE FROM {state.table} WHERE {state.filter.clause_text}"
    return Statement(sql, state.filter.bound_values)
