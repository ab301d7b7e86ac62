"""Read-only query selectors."""

from inventory_kernel.selectors.history_selector import (
    HISTORY_LIMIT,
    HistorySelector,
    ReferenceScheme,
)

__all__ = ["HistorySelector", "ReferenceScheme", "HISTORY_LIMIT"]
