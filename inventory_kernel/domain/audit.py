"""
Audit value objects -- the change event a caller reports and the entry the
recorder persists.

Responsibility:
    ``AuditEvent`` is the recorder's input, accepting both the normalized
    reference (``entity_type`` / ``entity_id``) and the legacy one
    (``target_user`` / ``target_product``).  ``resolve_reference`` folds
    the two into a single (EntityType, id) pair.  ``AuditEntry`` is the
    immutable record of what was written.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - Explicit ``entity_type`` / ``entity_id`` win over legacy fields.
    - ``entity_type`` is always an ``EntityType`` or None after resolution.
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.exceptions import InvalidAuditEventError, UnknownEntityTypeError


@dataclass(frozen=True)
class AuditEvent:
    """A change a caller wants on the audit trail."""

    action_type: str
    performed_by: int
    description: str
    entity_type: EntityType | str | None = None
    entity_id: int | None = None
    target_user: int | None = None
    target_product: int | None = None
    old_value: Any = None
    new_value: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AuditEvent":
        """Build from a dict; keys that are not AuditEvent fields are ignored."""
        names = {f.name for f in fields(cls)}
        for required in ("action_type", "performed_by", "description"):
            if required not in data:
                raise InvalidAuditEventError(required)
        return cls(**{k: v for k, v in data.items() if k in names})

    def validate(self) -> None:
        """
        Raises:
            InvalidAuditEventError: If a required field is missing or empty.
        """
        if not self.action_type:
            raise InvalidAuditEventError("action_type")
        if self.performed_by is None:
            raise InvalidAuditEventError("performed_by")
        if not self.description:
            raise InvalidAuditEventError("description")


@dataclass(frozen=True)
class AuditEntry:
    """One persisted row of the ``history`` table."""

    id: int | None
    action_type: str
    performed_by: int
    entity_type: EntityType | None
    entity_id: int | None
    target_user: int | None
    target_product: int | None
    old_value: str | None
    new_value: str | None
    description: str
    created_at: datetime

    def to_row(self) -> dict[str, Any]:
        """Column values for INSERT (``id`` is generated by the store)."""
        return {
            "action_type": self.action_type,
            "performed_by": self.performed_by,
            "entity_type": self.entity_type.value if self.entity_type else None,
            "entity_id": self.entity_id,
            "target_user": self.target_user,
            "target_product": self.target_product,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "description": self.description,
            "created_at": self.created_at,
        }


def parse_entity_type(value: EntityType | str | None) -> EntityType | None:
    """
    Raises:
        UnknownEntityTypeError: If ``value`` is not a known entity tag.
    """
    try:
        return EntityType.parse(value)
    except ValueError:
        raise UnknownEntityTypeError(str(value)) from None


def resolve_reference(event: AuditEvent) -> tuple[EntityType | None, int | None]:
    """
    Fold legacy and normalized references into one (type, id) pair.

    Priority: explicit ``entity_type`` -> ``target_user`` -> ``target_product``.
    With no type at all, ``entity_id`` is passed through untyped.
    """
    entity_type = parse_entity_type(event.entity_type)
    if entity_type is not None:
        return entity_type, event.entity_id
    if event.target_user is not None:
        return EntityType.USER, event.target_user
    if event.target_product is not None:
        return EntityType.PRODUCTS, event.target_product
    return None, event.entity_id


def legacy_mirror(
    entity_type: EntityType | None, entity_id: int | None
) -> tuple[int | None, int | None]:
    """(target_user, target_product) mirror of a resolved reference."""
    if entity_type is EntityType.USER:
        return entity_id, None
    if entity_type is EntityType.PRODUCTS:
        return None, entity_id
    return None, None
