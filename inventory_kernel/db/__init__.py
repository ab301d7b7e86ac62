"""Database layer - engine, base classes, statement execution."""

from inventory_kernel.db.base import STATUS_ACTIVE, STATUS_INACTIVE, Base
from inventory_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    init_engine_from_config,
    init_engine_from_url,
    reset_engine,
)
from inventory_kernel.db.executor import ExecutionResult, StatementExecutor, bind_statement

__all__ = [
    "Base",
    "STATUS_ACTIVE",
    "STATUS_INACTIVE",
    "get_engine",
    "init_engine_from_url",
    "init_engine_from_config",
    "create_tables",
    "drop_tables",
    "reset_engine",
    "StatementExecutor",
    "ExecutionResult",
    "bind_statement",
]
