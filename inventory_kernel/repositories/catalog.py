"""
Catalog queries shared by the name-keyed reference tables: brands,
categories, locations and providers.
"""

from collections.abc import Mapping
from typing import Any

from inventory_kernel.db.base import STATUS_ACTIVE
from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.repositories.repository import Repository, Row

CATALOG_TYPES = (
    EntityType.BRANDS,
    EntityType.CATEGORIES,
    EntityType.LOCATIONS,
    EntityType.PROVIDER,
)


def find_by_name(repository: Repository, name: str) -> Row | None:
    return repository.query().where([("name", name)]).first()


def list_entries(repository: Repository, show_inactive: bool = False) -> list[Row]:
    query = repository.query()
    if not show_inactive:
        query = query.where([("status", STATUS_ACTIVE)])
    return query.order_by([("created_at", "DESC"), ("id", "DESC")]).get()


def create_entry(repository: Repository, data: Mapping[str, Any]) -> int | None:
    """Insert a catalog row; new rows are active unless ``status`` is given."""
    row = dict(data)
    row.setdefault("status", STATUS_ACTIVE)
    return repository.insert(row)
