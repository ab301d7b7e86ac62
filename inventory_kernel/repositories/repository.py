"""
Repository -- generic per-table facade over the statement builder.

Responsibility:
    One Repository per entity table, parameterized by table name.  Exposes
    the CRUD surface every entity shares (find by id, list, insert, update,
    delete, soft delete) plus pass-through access to a builder.  Entity
    specific queries live as free functions in the sibling modules
    (``users``, ``products``, ``catalog``) and take a Repository argument.

Architecture position:
    Kernel > Repositories.  May import from query/, db/, domain/.
    MUST NOT import from services/ or selectors/.

Invariants enforced:
    - Construction without a table name fails immediately
      (MissingTableNameError).
    - CRUD methods build a fresh StatementBuilder per call, so they can be
      called concurrently on one Repository.
    - Exactly one shared builder per Repository, created lazily, behind the
      ``select``/``join``/``where``/``order_by``/``group_by``/``limit``
      pass-throughs.

Concurrency:
    The shared builder is NOT safe for concurrent chains.  Code that may run
    on several threads at once should start its chain from ``query()``.
"""

import threading
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from inventory_kernel.db.base import STATUS_ACTIVE, STATUS_INACTIVE
from inventory_kernel.db.executor import ExecutionResult, Params, StatementExecutor
from inventory_kernel.exceptions import MissingTableNameError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.query.builder import StatementBuilder

logger = get_logger("repositories")

Row = dict[str, Any]


class Repository:
    """
    CRUD access to one table.

    Contract:
        Rows are plain dicts keyed by column name.  Store errors propagate
        unchanged.

    Non-goals:
        - No identity map, no change tracking, no relationships.
    """

    def __init__(self, table: str, executor: StatementExecutor | None = None):
        if not table:
            raise MissingTableNameError(type(self).__name__)
        self._table = table
        self._executor = executor or StatementExecutor()
        self._builder: StatementBuilder | None = None
        self._builder_lock = threading.Lock()

    @property
    def table(self) -> str:
        return self._table

    @property
    def executor(self) -> StatementExecutor:
        return self._executor

    def query(self) -> StatementBuilder:
        """A new builder scoped to one logical operation."""
        return StatementBuilder(self._table, self._executor)

    @property
    def builder(self) -> StatementBuilder:
        """The repository's shared builder (created on first use)."""
        if self._builder is None:
            with self._builder_lock:
                if self._builder is None:
                    self._builder = self.query()
        return self._builder

    # -- CRUD ----------------------------------------------------------------

    def find_by_id(self, entry_id: int) -> Row | None:
        return self.query().where([("id", entry_id)]).first()

    def find_all(self) -> list[Row]:
        return self.query().get()

    def insert(self, data: Mapping[str, Any]) -> int | None:
        entry_id = self.query().insert(data)
        logger.debug(
            "row_inserted",
            extra={"table": self._table, "entry_id": entry_id},
        )
        return entry_id

    def update_by_id(self, entry_id: int, data: Mapping[str, Any]) -> int:
        return self.query().where([("id", entry_id)]).update(data)

    def delete_by_id(self, entry_id: int) -> int:
        return self.query().where([("id", entry_id)]).delete()

    def soft_delete(self, entry_id: int) -> int:
        """Mark the row inactive (status = 1) instead of deleting it."""
        return self.update_by_id(entry_id, {"status": STATUS_INACTIVE})

    def restore(self, entry_id: int) -> int:
        """Mark a soft-deleted row active again (status = 0)."""
        return self.update_by_id(entry_id, {"status": STATUS_ACTIVE})

    def test_connection(self) -> ExecutionResult:
        return self._executor.execute("SELECT 1 AS test")

    # -- shared builder pass-throughs ----------------------------------------

    def select(self, fields: str | Iterable[str] = ("*",)) -> StatementBuilder:
        return self.builder.select(fields)

    def join(self, table: str, predicate: str, kind: str = "INNER") -> StatementBuilder:
        return self.builder.join(table, predicate, kind)

    def where(self, conditions: Iterable[Sequence[Any]] = ()) -> StatementBuilder:
        return self.builder.where(conditions)

    def order_by(self, fields: str | Iterable[str | Sequence[str]]) -> StatementBuilder:
        return self.builder.order_by(fields)

    def group_by(self, fields: str | Iterable[str]) -> StatementBuilder:
        return self.builder.group_by(fields)

    def limit(self, n: int) -> StatementBuilder:
        return self.builder.limit(n)

    def execute(self, sql: str, params: Params = ()) -> ExecutionResult:
        """Run hand-written parameterized SQL (joins/aggregates beyond the builder)."""
        return self._executor.execute(sql, params)

    def __repr__(self) -> str:
        return f"<Repository {self._table}>"
