"""Statement builder shared by every repository."""

from inventory_kernel.query.builder import StatementBuilder
from inventory_kernel.query.statement import (
    NOT_NULL,
    FilterClause,
    JoinClause,
    QueryState,
    Statement,
    compile_conditions,
)

__all__ = [
    "StatementBuilder",
    "Statement",
    "QueryState",
    "JoinClause",
    "FilterClause",
    "NOT_NULL",
    "compile_conditions",
]
