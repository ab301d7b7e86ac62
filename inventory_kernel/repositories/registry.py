"""
RepositoryRegistry -- one Repository per table, created on demand.

Responsibility:
    Single construction point for repositories sharing one executor, and
    for the entity lookups injected into the AuditRecorder.

Architecture position:
    Kernel > Repositories.
"""

import threading
from collections.abc import Callable

from inventory_kernel.db.executor import StatementExecutor
from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.repositories.repository import Repository, Row

EntityLookup = Callable[[int], Row | None]


class RepositoryRegistry:
    """Lazily builds and caches repositories by table name."""

    def __init__(self, executor: StatementExecutor | None = None):
        self._executor = executor or StatementExecutor()
        self._repositories: dict[str, Repository] = {}
        self._lock = threading.Lock()

    @property
    def executor(self) -> StatementExecutor:
        return self._executor

    def get(self, table: str | EntityType) -> Repository:
        name = table.table if isinstance(table, EntityType) else table
        with self._lock:
            repository = self._repositories.get(name)
            if repository is None:
                repository = Repository(name, self._executor)
                self._repositories[name] = repository
            return repository

    def lookup(self, entity_type: EntityType) -> EntityLookup:
        """Existence lookup (``find_by_id``) for one entity type."""
        return self.get(entity_type).find_by_id

    def lookups(self, entity_types) -> dict[EntityType, EntityLookup]:
        return {entity_type: self.lookup(entity_type) for entity_type in entity_types}
