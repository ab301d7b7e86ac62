"""
HistorySelector -- read-time resolution of the polymorphic audit trail.

Responsibility:
    Reconstructs human-readable history by joining ``history`` against
    the actor's user row and against every referenceable entity table,
    picking the display name that matches each row's ``entity_type``.

Architecture position:
    Kernel > Selectors -- read-only.  Never inserts, updates or deletes.

Invariants enforced:
    - ``get_history`` returns at most HISTORY_LIMIT rows, newest first
      (``created_at DESC, id DESC``).
    - ``target_name`` is non-null exactly when the row's ``entity_type``
      is an EntityType member and the referenced row exists.
    - Writes stay O(1) and schema-agnostic; reads pay one LEFT JOIN per
      EntityType member.

Reference schemes:
    History rows carry two references: the normalized
    ``entity_type`` / ``entity_id`` pair and the legacy ``target_user`` /
    ``target_product`` mirror.  ``ReferenceScheme`` picks which one the
    secondary accessors (by type / user / product / date range) resolve
    through:

    - NORMALIZED: every accessor resolves through ``entity_type`` /
      ``entity_id`` and returns the ``get_history`` row shape.  Legacy
      columns are only a write-time mirror.
    - LEGACY: secondary accessors resolve through ``target_user`` /
      ``target_product`` and return ``target_user_name`` /
      ``target_product_name``.  Entries that reference brands, categories,
      locations or providers are returned without a resolved name, and
      ``get_logs_by_product`` / ``get_logs_by_user`` miss entries written
      before the mirror columns were populated.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from inventory_kernel.db.executor import StatementExecutor
from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.logging_config import get_logger

logger = get_logger("selectors.history")

HISTORY_LIMIT = 1000

_HISTORY_COLUMNS = (
    "h.id",
    "h.action_type",
    "h.performed_by",
    "h.entity_type",
    "h.entity_id",
    "h.target_user",
    "h.target_product",
    "h.old_value",
    "h.new_value",
    "h.description",
    "h.created_at",
)

_ORDER = "ORDER BY h.created_at DESC, h.id DESC"


class ReferenceScheme(str, Enum):
    NORMALIZED = "normalized"
    LEGACY = "legacy"


def _normalized_select() -> str:
    """SELECT ... FROM history with one keyed LEFT JOIN per EntityType."""
    cases = " ".join(
        f"WHEN h.entity_type = '{et.value}' THEN {et.alias}.{et.display_column}"
        for et in EntityType
    )
    joins = " ".join(
        f"LEFT JOIN {et.table} {et.alias} "
        f"ON h.entity_type = '{et.value}' AND h.entity_id = {et.alias}.id"
        for et in EntityType
    )
    columns = ", ".join(_HISTORY_COLUMNS)
    return (
        f"SELECT {columns}, actor.name AS performed_by_name, "
        f"CASE {cases} ELSE NULL END AS target_name "
        f"FROM history h "
        f"LEFT JOIN user actor ON h.performed_by = actor.id "
        f"{joins}"
    )


def _legacy_select() -> str:
    """SELECT ... FROM history resolved through target_user / target_product."""
    columns = ", ".join(_HISTORY_COLUMNS)
    return (
        f"SELECT {columns}, actor.name AS performed_by_name, "
        f"tu.name AS target_user_name, tp.part_number AS target_product_name "
        f"FROM history h "
        f"LEFT JOIN user actor ON h.performed_by = actor.id "
        f"LEFT JOIN user tu ON h.target_user = tu.id "
        f"LEFT JOIN products tp ON h.target_product = tp.id"
    )


NORMALIZED_SELECT = _normalized_select()
LEGACY_SELECT = _legacy_select()


class HistorySelector:
    """
    Read access to the audit trail.

    Contract:
        Rows are plain dicts.  Every row carries all ``history`` columns plus
        ``performed_by_name`` and either ``target_name`` (NORMALIZED) or
        ``target_user_name`` / ``target_product_name`` (LEGACY secondary
        accessors).

    Non-goals:
        - No pagination beyond the fixed HISTORY_LIMIT cap on get_history.
        - No deletion or retention management.
    """

    def __init__(
        self,
        executor: StatementExecutor,
        scheme: ReferenceScheme | str = ReferenceScheme.NORMALIZED,
        clock: Clock | None = None,
    ):
        self._executor = executor
        self._scheme = ReferenceScheme(scheme)
        self._clock = clock or SystemClock()

    @property
    def scheme(self) -> ReferenceScheme:
        return self._scheme

    def _rows(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        return list(self._executor.execute(sql, params).rows)

    def get_history(self) -> list[dict[str, Any]]:
        """The most recent HISTORY_LIMIT entries with resolved names."""
        rows = self._rows(f"{NORMALIZED_SELECT} {_ORDER} LIMIT {HISTORY_LIMIT}")
        logger.info("history_loaded", extra={"row_count": len(rows)})
        return rows

    def get_all_logs(self) -> list[dict[str, Any]]:
        return self.get_history()

    def get_logs_by_type(self, action_type: str) -> list[dict[str, Any]]:
        return self._filtered("h.action_type = ?", (action_type,))

    def get_logs_by_user(self, user_id: int) -> list[dict[str, Any]]:
        """Entries performed by the user or targeting the user."""
        if self._scheme is ReferenceScheme.LEGACY:
            return self._filtered(
                "h.performed_by = ? OR h.target_user = ?", (user_id, user_id)
            )
        return self._filtered(
            "h.performed_by = ? OR (h.entity_type = ? AND h.entity_id = ?)",
            (user_id, EntityType.USER.value, user_id),
        )

    def get_logs_by_product(self, product_id: int) -> list[dict[str, Any]]:
        if self._scheme is ReferenceScheme.LEGACY:
            return self._filtered("h.target_product = ?", (product_id,))
        return self._filtered(
            "h.entity_type = ? AND h.entity_id = ?",
            (EntityType.PRODUCTS.value, product_id),
        )

    def get_logs_by_date_range(
        self, start: datetime, end: datetime
    ) -> list[dict[str, Any]]:
        """Entries with ``start <= created_at <= end``."""
        return self._filtered("h.created_at >= ? AND h.created_at <= ?", (start, end))

    def get_history_stats(self, days: int = 30) -> list[dict[str, Any]]:
        """Entry count per action_type per calendar day over the last ``days`` days."""
        since = self._clock.now() - timedelta(days=days)
        return self._rows(
            "SELECT action_type, COUNT(*) AS count, DATE(created_at) AS date "
            "FROM history WHERE created_at >= ? "
            "GROUP BY action_type, DATE(created_at) "
            "ORDER BY date DESC, count DESC",
            (since,),
        )

    def _filtered(self, predicate: str, params: tuple) -> list[dict[str, Any]]:
        base = LEGACY_SELECT if self._scheme is ReferenceScheme.LEGACY else NORMALIZED_SELECT
        return self._rows(f"{base} WHERE {predicate} {_ORDER}", params)
