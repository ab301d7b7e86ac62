"""
Pytest fixtures for the inventory kernel test suite.

Provides:
- A fresh SQLite file database per test (same engine module as production)
- Executor, registry, recorder, selector and catalog service fixtures
- Deterministic clock
- Captured structured logs
- Seed helpers for users, products and catalog rows

Environment Variables:
- INVENTORY_TEST_DATABASE_URL: run against another store instead of the
  per-test SQLite file (e.g. mysql+pymysql://root:pw@localhost/nauticstock_test).
  The schema is dropped and recreated for every test.
"""

import json
import logging
import os
from datetime import UTC, datetime
from io import StringIO

import pytest

from inventory_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
)
from inventory_kernel.db.executor import StatementExecutor
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from inventory_kernel.repositories import catalog
from inventory_kernel.repositories.products import create_product
from inventory_kernel.repositories.registry import RepositoryRegistry
from inventory_kernel.selectors.history_selector import HistorySelector, ReferenceScheme
from inventory_kernel.services.audit_recorder import build_audit_recorder
from inventory_services.catalog_service import CatalogService

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, recorder):
            recorder.register_log(...)
            assert any(r["message"] == "audit_entry_recorded" for r in captured_logs())
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine(tmp_path):
    url = os.environ.get("INVENTORY_TEST_DATABASE_URL") or f"sqlite:///{tmp_path / 'inventory.db'}"
    eng = init_engine_from_url(url, pool_size=5, max_overflow=10)
    drop_tables()
    create_tables()
    yield eng
    reset_engine()


@pytest.fixture
def executor(engine):
    return StatementExecutor(engine)


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def registry(executor):
    return RepositoryRegistry(executor)


@pytest.fixture
def recorder(registry, deterministic_clock):
    return build_audit_recorder(registry, clock=deterministic_clock)


@pytest.fixture
def history(executor, deterministic_clock):
    return HistorySelector(executor, ReferenceScheme.NORMALIZED, clock=deterministic_clock)


@pytest.fixture
def legacy_history(executor, deterministic_clock):
    return HistorySelector(executor, ReferenceScheme.LEGACY, clock=deterministic_clock)


@pytest.fixture
def catalog_service(registry, recorder):
    return CatalogService(registry, recorder)


# =============================================================================
# Seed helpers
# =============================================================================


@pytest.fixture
def make_user(registry):
    """Insert a user row and return its id."""
    counter = iter(range(1, 10_000))

    def _make(name: str = "Operator", **overrides) -> int:
        n = next(counter)
        row = {
            "name": name,
            "account": f"acct{n}",
            "email": f"user{n}@example.com",
            "password": "x",
            "status": 0,
        }
        row.update(overrides)
        return registry.get("user").insert(row)

    return _make


@pytest.fixture
def make_product(registry):
    def _make(part_number: str = "PN-001", **overrides) -> int:
        return create_product(registry.get("products"), {"part_number": part_number, **overrides})

    return _make


@pytest.fixture
def make_catalog_entry(registry):
    def _make(table: str, name: str, **overrides) -> int:
        return catalog.create_entry(registry.get(table), {"name": name, **overrides})

    return _make


@pytest.fixture
def actor_id(make_user):
    return make_user("Admin")
