"""Repositories: generic per-table CRUD plus entity query modules."""

from inventory_kernel.repositories.registry import EntityLookup, RepositoryRegistry
from inventory_kernel.repositories.repository import Repository, Row

__all__ = [
    "Repository",
    "RepositoryRegistry",
    "EntityLookup",
    "Row",
]
