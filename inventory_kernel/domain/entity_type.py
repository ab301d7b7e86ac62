"""
EntityType -- the closed set of tables an audit entry may reference.

Responsibility:
    Names every referenceable entity table and the column that gives a row
    its human-readable name.  The history selector builds its polymorphic
    joins from this enum, and the recorder rejects any other tag.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - Every member has exactly one ``EntityReference`` in ``_REFERENCES``
      (checked at import time), so adding a member without a display
      column fails immediately instead of silently producing NULL names.
"""

from dataclasses import dataclass
from enum import Enum


class EntityType(str, Enum):
    """Entity tables an audit entry can point at (values are table names)."""

    USER = "user"
    PRODUCTS = "products"
    BRANDS = "brands"
    CATEGORIES = "categories"
    LOCATIONS = "locations"
    PROVIDER = "provider"

    @classmethod
    def parse(cls, value: "EntityType | str | None") -> "EntityType | None":
        """Coerce a tag to an EntityType.

        Raises:
            ValueError: If ``value`` is a string outside the closed set.
        """
        if value is None or isinstance(value, EntityType):
            return value
        return cls(value)

    @property
    def table(self) -> str:
        return _REFERENCES[self].table

    @property
    def display_column(self) -> str:
        return _REFERENCES[self].display_column

    @property
    def alias(self) -> str:
        """SQL alias used for this table in history joins."""
        return _REFERENCES[self].alias


@dataclass(frozen=True)
class EntityReference:
    """How to resolve an entity id into a display name."""

    table: str
    display_column: str
    alias: str


_REFERENCES: dict[EntityType, EntityReference] = {
    EntityType.USER: EntityReference("user", "name", "ref_user"),
    EntityType.PRODUCTS: EntityReference("products", "part_number", "ref_products"),
    EntityType.BRANDS: EntityReference("brands", "name", "ref_brands"),
    EntityType.CATEGORIES: EntityReference("categories", "name", "ref_categories"),
    EntityType.LOCATIONS: EntityReference("locations", "name", "ref_locations"),
    EntityType.PROVIDER: EntityReference("provider", "name", "ref_provider"),
}

_missing = set(EntityType) - set(_REFERENCES)
if _missing:
    raise RuntimeError(f"EntityType members without a reference: {sorted(m.value for m in _missing)}")
