"""Composition root wiring from configuration."""

import pytest

from inventory_config.loader import parse_configuration
from inventory_kernel.db.engine import create_tables, reset_engine
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.selectors.history_selector import ReferenceScheme
from inventory_services import build_services


@pytest.fixture
def services(tmp_path):
    config = parse_configuration(
        {
            "database": {"url": f"sqlite:///{tmp_path / 'boot.db'}", "pool_size": 2},
            "audit": {
                "validated_entity_types": ["user", "products", "brands"],
                "reference_scheme": "legacy",
            },
        },
        environ={},
    )
    built = build_services(config, DeterministicClock(), configure_logs=False)
    create_tables()
    yield built
    reset_engine()


def test_services_share_one_executor(services):
    assert services.registry.executor is services.executor
    assert services.history.scheme is ReferenceScheme.LEGACY


def test_configured_validated_types_are_applied(services):
    assert services.recorder.validated_types == frozenset(
        {EntityType.USER, EntityType.PRODUCTS, EntityType.BRANDS}
    )
    entry = services.recorder.register_log(
        {
            "action_type": "Brand Updated",
            "performed_by": 1,
            "description": "x",
            "entity_type": "brands",
            "entity_id": 12,
        }
    )
    assert entry.entity_id is None


def test_catalog_round_trip(services):
    actor = services.registry.get("user").insert(
        {"name": "Admin", "email": "admin@example.com", "status": 0}
    )
    brand_id, _ = services.catalog.create("brands", {"name": "Yamaha"}, actor)
    rows = services.history.get_history()
    assert rows[0]["entity_id"] == brand_id
    assert rows[0]["performed_by_name"] == "Admin"
