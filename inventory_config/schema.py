"""
InventoryConfiguration schema.

Frozen dataclasses the loader parses ``sets/*.yaml`` into.  Nothing outside
``inventory_config`` reads configuration files or environment variables;
everything else receives these objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.selectors.history_selector import ReferenceScheme

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseConfig:
    """Store location and pool sizing."""

    url: str
    pool_size: int = 10
    max_overflow: int = 0
    pool_timeout: int = 30
    pool_recycle: int = 1800
    echo: bool = False


# ---------------------------------------------------------------------------
# Audit trail
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuditConfig:
    """Which references the recorder verifies and how history is read."""

    validated_entity_types: tuple[EntityType, ...] = (
        EntityType.USER,
        EntityType.PRODUCTS,
    )
    reference_scheme: ReferenceScheme = ReferenceScheme.NORMALIZED


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InventoryConfiguration:
    """The complete runtime configuration."""

    config_id: str
    database: DatabaseConfig
    audit: AuditConfig = field(default_factory=AuditConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
