"""
inventory_services.catalog_service -- audited writes for catalog tables.

Responsibility:
    Create, update, deactivate, reactivate and delete rows in the
    name-keyed catalog tables (brands, categories, locations, provider),
    recording one history entry per successful change.

Architecture position:
    Services -- orchestration over kernel repositories and the
    AuditRecorder.  Holds no state beyond its collaborators.

Invariants enforced:
    - The audit entry is written only after the business write returned.
    - Catalog names are unique per table at creation time.

Failure modes:
    - DuplicateEntryError: ``create`` with a name already present.
    - EntryNotFoundError: any by-id operation on a missing row.
    - UnknownEntityTypeError: ``entity_type`` is not a catalog table.
    - Audit write failure propagates AFTER the business write committed.
      The change stays in place without a history entry.
"""

from collections.abc import Mapping
from typing import Any

from inventory_kernel.domain.audit import AuditEntry, AuditEvent
from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.exceptions import (
    DuplicateEntryError,
    EntryNotFoundError,
    UnknownEntityTypeError,
)
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.repositories import catalog
from inventory_kernel.repositories.registry import RepositoryRegistry
from inventory_kernel.repositories.repository import Repository, Row
from inventory_kernel.services.audit_recorder import AuditRecorder

logger = get_logger("services.catalog")

_LABELS = {
    EntityType.BRANDS: "Brand",
    EntityType.CATEGORIES: "Category",
    EntityType.LOCATIONS: "Location",
    EntityType.PROVIDER: "Provider",
}


def action_label(entity_type: EntityType, verb: str) -> str:
    """History ``action_type`` for a catalog change, e.g. "Brand Created"."""
    return f"{_LABELS[entity_type]} {verb}"


class CatalogService:
    """
    Audited catalog maintenance.

    Contract:
        Every public method returns the AuditEntry it wrote, except
        ``create`` which returns ``(new_id, entry)``.

    Non-goals:
        - No transaction spanning the business write and the audit write.
        - No cascading to products that reference a deleted row.
    """

    def __init__(self, registry: RepositoryRegistry, recorder: AuditRecorder):
        self._registry = registry
        self._recorder = recorder

    def _repository(self, entity_type: EntityType | str) -> tuple[EntityType, Repository]:
        try:
            parsed = EntityType.parse(entity_type)
        except ValueError:
            raise UnknownEntityTypeError(str(entity_type)) from None
        if parsed not in catalog.CATALOG_TYPES:
            raise UnknownEntityTypeError(str(entity_type))
        return parsed, self._registry.get(parsed)

    def _require(self, repository: Repository, entry_id: int) -> Row:
        row = repository.find_by_id(entry_id)
        if row is None:
            raise EntryNotFoundError(repository.table, entry_id)
        return row

    def _record(
        self,
        entity_type: EntityType,
        verb: str,
        entry_id: int,
        actor_id: int,
        description: str,
        old_value: Any = None,
        new_value: Any = None,
    ) -> AuditEntry:
        return self._recorder.register_log(
            AuditEvent(
                action_type=action_label(entity_type, verb),
                performed_by=actor_id,
                description=description,
                entity_type=entity_type,
                entity_id=entry_id,
                old_value=old_value,
                new_value=new_value,
            )
        )

    def create(
        self,
        entity_type: EntityType | str,
        data: Mapping[str, Any],
        actor_id: int,
    ) -> tuple[int, AuditEntry]:
        """
        Insert a catalog row and record it.

        Raises:
            DuplicateEntryError: A row with ``data["name"]`` already exists.
        """
        parsed, repository = self._repository(entity_type)
        name = data.get("name")
        existing = catalog.find_by_name(repository, name) if name else None
        if existing is not None:
            raise DuplicateEntryError(repository.table, name, existing["id"])

        with LogContext.bind(actor_id=actor_id, table=repository.table):
            entry_id = catalog.create_entry(repository, data)
            logger.info("catalog_entry_created", extra={"entry_id": entry_id})
            entry = self._record(
                parsed,
                "Created",
                entry_id,
                actor_id,
                f"{_LABELS[parsed]} '{name}' created",
                new_value=repository.find_by_id(entry_id),
            )
        return entry_id, entry

    def update(
        self,
        entity_type: EntityType | str,
        entry_id: int,
        data: Mapping[str, Any],
        actor_id: int,
    ) -> AuditEntry:
        parsed, repository = self._repository(entity_type)
        before = self._require(repository, entry_id)

        with LogContext.bind(actor_id=actor_id, table=repository.table):
            repository.update_by_id(entry_id, data)
            after = repository.find_by_id(entry_id)
            logger.info("catalog_entry_updated", extra={"entry_id": entry_id})
            return self._record(
                parsed,
                "Updated",
                entry_id,
                actor_id,
                f"{_LABELS[parsed]} '{after['name']}' updated",
                old_value=before,
                new_value=after,
            )

    def deactivate(
        self, entity_type: EntityType | str, entry_id: int, actor_id: int
    ) -> AuditEntry:
        """Soft delete: status -> inactive."""
        parsed, repository = self._repository(entity_type)
        before = self._require(repository, entry_id)

        with LogContext.bind(actor_id=actor_id, table=repository.table):
            repository.soft_delete(entry_id)
            logger.info("catalog_entry_deactivated", extra={"entry_id": entry_id})
            return self._record(
                parsed,
                "Deactivated",
                entry_id,
                actor_id,
                f"{_LABELS[parsed]} '{before['name']}' deactivated",
                old_value=before,
                new_value=repository.find_by_id(entry_id),
            )

    def reactivate(
        self, entity_type: EntityType | str, entry_id: int, actor_id: int
    ) -> AuditEntry:
        parsed, repository = self._repository(entity_type)
        before = self._require(repository, entry_id)

        with LogContext.bind(actor_id=actor_id, table=repository.table):
            repository.restore(entry_id)
            logger.info("catalog_entry_reactivated", extra={"entry_id": entry_id})
            return self._record(
                parsed,
                "Reactivated",
                entry_id,
                actor_id,
                f"{_LABELS[parsed]} '{before['name']}' reactivated",
                old_value=before,
                new_value=repository.find_by_id(entry_id),
            )

    def delete(
        self, entity_type: EntityType | str, entry_id: int, actor_id: int
    ) -> AuditEntry:
        """Hard delete.  The history entry keeps the last snapshot."""
        parsed, repository = self._repository(entity_type)
        before = self._require(repository, entry_id)

        with LogContext.bind(actor_id=actor_id, table=repository.table):
            repository.delete_by_id(entry_id)
            logger.info("catalog_entry_deleted", extra={"entry_id": entry_id})
            return self._record(
                parsed,
                "Deleted",
                entry_id,
                actor_id,
                f"{_LABELS[parsed]} '{before['name']}' deleted",
                old_value=before,
            )
