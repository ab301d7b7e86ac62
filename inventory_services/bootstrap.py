"""
inventory_services.bootstrap -- composition root.

Builds the engine, executor, repository registry, audit recorder, history
selector and catalog service from one InventoryConfiguration.  This is the
only place where configuration reaches the kernel.
"""

from dataclasses import dataclass

from inventory_config import InventoryConfiguration, get_active_config
from inventory_kernel.db.engine import init_engine_from_config
from inventory_kernel.db.executor import StatementExecutor
from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.logging_config import configure_logging, get_logger
from inventory_kernel.repositories.registry import RepositoryRegistry
from inventory_kernel.selectors.history_selector import HistorySelector
from inventory_kernel.services.audit_recorder import AuditRecorder, build_audit_recorder
from inventory_services.catalog_service import CatalogService

logger = get_logger("services.bootstrap")


@dataclass(frozen=True)
class InventoryServices:
    config: InventoryConfiguration
    executor: StatementExecutor
    registry: RepositoryRegistry
    recorder: AuditRecorder
    history: HistorySelector
    catalog: CatalogService


def build_services(
    config: InventoryConfiguration | None = None,
    clock: Clock | None = None,
    *,
    configure_logs: bool = True,
) -> InventoryServices:
    """Wire every service against the configured store."""
    config = config or get_active_config()
    clock = clock or SystemClock()
    if configure_logs:
        configure_logging(level=config.logging.level)

    engine = init_engine_from_config(config.database)
    executor = StatementExecutor(engine)
    registry = RepositoryRegistry(executor)
    recorder = build_audit_recorder(
        registry,
        clock=clock,
        validated_types=config.audit.validated_entity_types,
    )
    history = HistorySelector(executor, config.audit.reference_scheme, clock=clock)

    logger.info(
        "services_built",
        extra={
            "config_id": config.config_id,
            "reference_scheme": config.audit.reference_scheme.value,
        },
    )
    return InventoryServices(
        config=config,
        executor=executor,
        registry=registry,
        recorder=recorder,
        history=history,
        catalog=CatalogService(registry, recorder),
    )
