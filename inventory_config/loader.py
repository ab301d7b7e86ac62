"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML configuration file, applies environment overrides and parses
the result into the frozen dataclasses in ``schema.py``.  Callers go
through ``inventory_config.get_active_config()``.

Environment overrides
---------------------
* ``INVENTORY_DATABASE_URL`` -- full SQLAlchemy URL, wins over everything.
* ``DB_HOST``, ``DB_PORT``, ``DB_USER``, ``DB_PASS``, ``DB_NAME`` --
  override the matching ``database`` component when no URL is set.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values  -> ``ConfigurationError`` naming the setting.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from sqlalchemy.engine import URL

from inventory_config.schema import (
    AuditConfig,
    DatabaseConfig,
    InventoryConfiguration,
    LoggingConfig,
)
from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.exceptions import ConfigurationError
from inventory_kernel.selectors.history_selector import ReferenceScheme

_COMPONENT_ENV = {
    "host": "DB_HOST",
    "port": "DB_PORT",
    "user": "DB_USER",
    "password": "DB_PASS",
    "name": "DB_NAME",
}

_COMPONENT_DEFAULTS: dict[str, Any] = {
    "driver": "mysql+pymysql",
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "name": "nauticstock",
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _int_setting(setting: str, value: Any, minimum: int = 0) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(setting, f"expected an integer, got {value!r}") from None
    if number < minimum:
        raise ConfigurationError(setting, f"must be at least {minimum}, got {number}")
    return number


def parse_database(data: Mapping[str, Any], environ: Mapping[str, str]) -> DatabaseConfig:
    """Build a DatabaseConfig; see module docstring for override order."""
    url = environ.get("INVENTORY_DATABASE_URL") or data.get("url")
    if not url:
        parts = {**_COMPONENT_DEFAULTS, **{k: v for k, v in data.items() if v is not None}}
        for key, env_name in _COMPONENT_ENV.items():
            if env_name in environ:
                parts[key] = environ[env_name]
        url = URL.create(
            parts["driver"],
            username=parts["user"],
            password=parts["password"] or None,
            host=parts["host"],
            port=_int_setting("database.port", parts["port"], minimum=1),
            database=parts["name"],
        ).render_as_string(hide_password=False)

    return DatabaseConfig(
        url=url,
        pool_size=_int_setting("database.pool_size", data.get("pool_size", 10), minimum=1),
        max_overflow=_int_setting("database.max_overflow", data.get("max_overflow", 0)),
        pool_timeout=_int_setting("database.pool_timeout", data.get("pool_timeout", 30)),
        pool_recycle=_int_setting("database.pool_recycle", data.get("pool_recycle", 1800)),
        echo=bool(data.get("echo", False)),
    )


def parse_audit(data: Mapping[str, Any]) -> AuditConfig:
    raw_types = data.get("validated_entity_types")
    if raw_types is None:
        types = AuditConfig().validated_entity_types
    else:
        try:
            types = tuple(EntityType(t) for t in raw_types)
        except ValueError as exc:
            raise ConfigurationError("audit.validated_entity_types", str(exc)) from None

    raw_scheme = data.get("reference_scheme", ReferenceScheme.NORMALIZED.value)
    try:
        scheme = ReferenceScheme(raw_scheme)
    except ValueError:
        raise ConfigurationError(
            "audit.reference_scheme",
            f"expected one of {[s.value for s in ReferenceScheme]}, got {raw_scheme!r}",
        ) from None

    return AuditConfig(validated_entity_types=types, reference_scheme=scheme)


def parse_logging(data: Mapping[str, Any]) -> LoggingConfig:
    level = str(data.get("level", "INFO")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError("logging.level", f"unknown level {level!r}")
    return LoggingConfig(level=level)


def parse_configuration(
    data: Mapping[str, Any],
    environ: Mapping[str, str],
    default_id: str = "default",
) -> InventoryConfiguration:
    """Parse a loaded YAML document into an InventoryConfiguration."""
    return InventoryConfiguration(
        config_id=str(data.get("config_id", default_id)),
        database=parse_database(data.get("database") or {}, environ),
        audit=parse_audit(data.get("audit") or {}),
        logging=parse_logging(data.get("logging") or {}),
    )
