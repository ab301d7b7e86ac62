"""
AuditRecorder -- append one history row per reported change.

Responsibility:
    Validates and normalizes an ``AuditEvent``, checks that the referenced
    row still exists for the entity types it has a lookup for, encodes the
    before/after snapshots, stamps ``created_at`` and inserts exactly one
    row into ``history``.

Architecture position:
    Kernel > Services -- imperative shell.  Called by business code AFTER
    its own write has succeeded (see inventory_services.catalog_service).

Invariants enforced:
    - A referential miss never drops the entry: it is logged as a warning
      and the entry is written with ``entity_id`` (and its legacy mirror)
      set to NULL.
    - ``created_at`` comes from the injected Clock; callers cannot set it.
    - Each call builds its own statement builder; the recorder holds no
      per-call state and may be shared by concurrent callers.

Failure modes:
    - InvalidAuditEventError / UnknownEntityTypeError before anything is
      written.
    - Store errors from the lookup or the insert propagate unchanged.  The
      caller's business write is already committed at that point, so a
      failure here leaves a change without an audit entry.  There is no
      retry and no compensation.

Audit relevance:
    This IS the audit write path.  Entity types without an injected lookup
    (by default everything except ``user`` and ``products``) are written
    without an existence check.
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from inventory_kernel.db.executor import StatementExecutor
from inventory_kernel.domain.audit import (
    AuditEntry,
    AuditEvent,
    legacy_mirror,
    resolve_reference,
)
from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.query.builder import StatementBuilder
from inventory_kernel.repositories.registry import EntityLookup, RepositoryRegistry
from inventory_kernel.utils.snapshots import encode_snapshot

logger = get_logger("services.audit_recorder")

HISTORY_TABLE = "history"

DEFAULT_VALIDATED_TYPES = (EntityType.USER, EntityType.PRODUCTS)


class AuditRecorder:
    """
    Writes audit entries to the ``history`` table.

    Contract:
        ``register_log`` appends exactly one row per successful call and
        returns the persisted ``AuditEntry``.

    Guarantees:
        - Explicit entity references win over legacy ``target_*`` fields.
        - ``target_user`` / ``target_product`` mirror the resolved
          reference so legacy readers keep working.

    Non-goals:
        - Does NOT share a transaction with the business write.
        - Does NOT update or delete history rows (retention is external).
    """

    def __init__(
        self,
        executor: StatementExecutor,
        lookups: Mapping[EntityType, EntityLookup] | None = None,
        clock: Clock | None = None,
    ):
        """
        Args:
            executor: Executor for the history insert.
            lookups: Existence check per entity type, returning the row or
                None.  Types absent from the mapping are not validated.
            clock: Source of ``created_at``.  Defaults to SystemClock.
        """
        self._executor = executor
        self._lookups = dict(lookups or {})
        self._clock = clock or SystemClock()

    @property
    def validated_types(self) -> frozenset[EntityType]:
        return frozenset(self._lookups)

    def register_log(self, event: AuditEvent | Mapping[str, Any]) -> AuditEntry:
        """
        Record one change.

        Raises:
            InvalidAuditEventError: Required field missing.
            UnknownEntityTypeError: ``entity_type`` outside EntityType.
        """
        if not isinstance(event, AuditEvent):
            event = AuditEvent.from_mapping(event)
        event.validate()

        with LogContext.bind(
            actor_id=event.performed_by,
            table=HISTORY_TABLE,
            action_type=event.action_type,
        ):
            return self._append(event)

    def _append(self, event: AuditEvent) -> AuditEntry:
        entity_type, entity_id = resolve_reference(event)
        entity_id = self._verify_reference(entity_type, entity_id)
        target_user, target_product = legacy_mirror(entity_type, entity_id)

        entry = AuditEntry(
            id=None,
            action_type=event.action_type,
            performed_by=event.performed_by,
            entity_type=entity_type,
            entity_id=entity_id,
            target_user=target_user,
            target_product=target_product,
            old_value=encode_snapshot(event.old_value),
            new_value=encode_snapshot(event.new_value),
            description=event.description,
            created_at=self._clock.now(),
        )

        entry_id = StatementBuilder(HISTORY_TABLE, self._executor).insert(entry.to_row())
        entry = replace(entry, id=entry_id)

        logger.info(
            "audit_entry_recorded",
            extra={
                "history_id": entry_id,
                "entity_type": entity_type.value if entity_type else None,
                "entity_id": entity_id,
            },
        )
        return entry

    def _verify_reference(
        self, entity_type: EntityType | None, entity_id: int | None
    ) -> int | None:
        if entity_type is None or entity_id is None:
            return entity_id
        lookup = self._lookups.get(entity_type)
        if lookup is None:
            return entity_id
        if lookup(entity_id) is None:
            logger.warning(
                "audit_reference_missing",
                extra={"entity_type": entity_type.value, "entity_id": entity_id},
            )
            return None
        return entity_id


def build_audit_recorder(
    registry: RepositoryRegistry,
    clock: Clock | None = None,
    validated_types: Iterable[EntityType | str] = DEFAULT_VALIDATED_TYPES,
) -> AuditRecorder:
    """Wire an AuditRecorder with ``find_by_id`` lookups from ``registry``."""
    types = [EntityType.parse(t) for t in validated_types]
    return AuditRecorder(
        registry.executor,
        lookups=registry.lookups(types),
        clock=clock,
    )
