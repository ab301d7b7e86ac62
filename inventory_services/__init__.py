"""Business-facing services built on the inventory kernel."""

from inventory_services.bootstrap import InventoryServices, build_services
from inventory_services.catalog_service import CatalogService, action_label

__all__ = [
    "CatalogService",
    "InventoryServices",
    "action_label",
    "build_services",
]
