"""Table definitions for the inventory store.

Importing this package registers every table on ``Base.metadata``.
"""

from inventory_kernel.models.catalog import Brand, Category, Location, Provider
from inventory_kernel.models.history import HistoryEntry
from inventory_kernel.models.product import Product
from inventory_kernel.models.user import Rank, Role, User

__all__ = [
    "Brand",
    "Category",
    "Location",
    "Provider",
    "Product",
    "Rank",
    "Role",
    "User",
    "HistoryEntry",
]
