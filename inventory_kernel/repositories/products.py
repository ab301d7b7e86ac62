"""Product queries (composition over the generic Repository)."""

from collections.abc import Mapping
from typing import Any

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.repositories.repository import Repository, Row

PRODUCTS_TABLE = "products"

# Columns callers may write through create/update
PRODUCT_FIELDS = (
    "part_number",
    "description",
    "brand_id",
    "category_id",
    "quantity",
    "min_stock",
    "max_stock",
    "price",
    "location_id",
    "provider_id",
    "status",
)

_DEFAULTS: dict[str, Any] = {
    "description": None,
    "brand_id": None,
    "category_id": None,
    "quantity": 0,
    "min_stock": 0,
    "max_stock": 0,
    "price": 0,
    "location_id": None,
    "provider_id": None,
    "status": 0,
}

_LISTING_FIELDS = (
    "products.id",
    "products.part_number",
    "products.description",
    "b.name AS brand",
    "c.name AS category",
    "products.quantity",
    "products.min_stock",
    "products.max_stock",
    "products.price",
    "l.name AS location",
    "pr.name AS supplier",
    "products.status",
    "products.created_at",
    "products.updated_at",
    "products.brand_id",
    "products.category_id",
    "products.location_id",
    "products.provider_id",
)


def _with_references(repository: Repository):
    return (
        repository.query()
        .select(_LISTING_FIELDS)
        .join("brands b", "products.brand_id = b.id", "LEFT")
        .join("categories c", "products.category_id = c.id", "LEFT")
        .join("locations l", "products.location_id = l.id", "LEFT")
        .join("provider pr", "products.provider_id = pr.id", "LEFT")
    )


def find_product(repository: Repository, product_id: int) -> Row | None:
    return repository.find_by_id(product_id)


def list_products(repository: Repository) -> list[Row]:
    """Every product with its brand/category/location/supplier names, newest first."""
    return (
        _with_references(repository)
        .order_by([("products.created_at", "DESC"), ("products.id", "DESC")])
        .get()
    )


def search_products(
    repository: Repository,
    *,
    part_number: str | None = None,
    category_id: int | None = None,
    brand_id: int | None = None,
    status: int | None = None,
) -> list[Row]:
    """Filter products; every filter value is bound, never interpolated."""
    conditions: list[tuple] = []
    if part_number:
        conditions.append(("products.part_number", f"%{part_number}%", "LIKE"))
    if category_id is not None:
        conditions.append(("products.category_id", category_id))
    if brand_id is not None:
        conditions.append(("products.brand_id", brand_id))
    if status is not None:
        conditions.append(("products.status", status))

    return (
        _with_references(repository)
        .where(conditions)
        .order_by([("products.created_at", "DESC"), ("products.id", "DESC")])
        .get()
    )


def create_product(repository: Repository, data: Mapping[str, Any]) -> int | None:
    row = {"part_number": data["part_number"]}
    for field in PRODUCT_FIELDS[1:]:
        value = data.get(field)
        row[field] = _DEFAULTS[field] if value is None else value
    return repository.insert(row)


def update_product(
    repository: Repository,
    product_id: int,
    data: Mapping[str, Any],
    clock: Clock | None = None,
) -> int:
    """Write only the known product columns and stamp ``updated_at``."""
    changes = {field: data[field] for field in PRODUCT_FIELDS if field in data}
    changes["updated_at"] = (clock or SystemClock()).now()
    return repository.update_by_id(product_id, changes)
