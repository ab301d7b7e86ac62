"""
inventory_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component may read configuration
    files or environment variables directly.

Architecture position:
    Configuration -- sits above ``inventory_kernel`` and below
    ``inventory_services``.  The kernel MUST NEVER import from
    ``inventory_config``; it receives the parsed dataclasses.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``ConfigurationError`` -- a value fails validation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from inventory_config.loader import load_yaml_file, parse_configuration
from inventory_config.schema import (
    AuditConfig,
    DatabaseConfig,
    InventoryConfiguration,
    LoggingConfig,
)

_logger = logging.getLogger("inventory_kernel.config")

# Default configuration sets directory
_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> InventoryConfiguration:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to sets/default.yaml.
        environ: Environment to read overrides from.  Defaults to os.environ.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        ConfigurationError: If a value fails validation.
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
    data = load_yaml_file(path)
    config = parse_configuration(
        data,
        os.environ if environ is None else environ,
        default_id=path.stem,
    )

    _logger.info(
        "config_loaded",
        extra={
            "config_id": config.config_id,
            "config_path": str(path),
            "pool_size": config.database.pool_size,
            "reference_scheme": config.audit.reference_scheme.value,
            "validated_entity_types": [t.value for t in config.audit.validated_entity_types],
        },
    )
    return config


__all__ = [
    "get_active_config",
    "InventoryConfiguration",
    "DatabaseConfig",
    "AuditConfig",
    "LoggingConfig",
]
