"""Pure domain types for the inventory kernel (no I/O)."""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from inventory_kernel.domain.entity_type import EntityType

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "EntityType",
]
