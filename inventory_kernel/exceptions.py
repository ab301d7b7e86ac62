"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the kernel (controllers, background jobs, scripts) need to react
to kernel-level misuse by type, not by parsing messages:

  1. Every kernel error has a TYPED exception class (catch by type)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Store errors are NOT part of this hierarchy.  Connectivity and driver
failures raised by SQLAlchemy (``sqlalchemy.exc.DBAPIError`` and its
subclasses) propagate to the caller unchanged; the kernel never retries,
wraps, or translates them.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from InventoryKernelError:

    InventoryKernelError (base)
    |
    +-- ConfigurationError
    |
    +-- QueryError
    |   +-- InvalidConditionError
    |
    +-- RepositoryError
    |   +-- MissingTableNameError
    |   +-- EntryNotFoundError
    |   +-- DuplicateEntryError
    |
    +-- AuditError
        +-- InvalidAuditEventError
        +-- UnknownEntityTypeError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Config          | CONFIGURATION_ERROR         | Config file or override is invalid
----------------|-----------------------------|-----------------------------------------
Query           | INVALID_CONDITION           | where() condition is not (field, value[, op])
----------------|-----------------------------|-----------------------------------------
Repository      | MISSING_TABLE_NAME          | Repository built without a table
                | ENTRY_NOT_FOUND             | Row with given id doesn't exist
                | DUPLICATE_ENTRY             | Name already taken in catalog table
----------------|-----------------------------|-----------------------------------------
Audit           | INVALID_AUDIT_EVENT         | Required audit field missing
                | UNKNOWN_ENTITY_TYPE         | entity_type outside the closed set
"""


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Configuration exceptions


class ConfigurationError(InventoryKernelError):
    """Configuration file or environment override is invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, reason: str):
        self.setting = setting
        self.reason = reason
        super().__init__(f"Invalid configuration for {setting}: {reason}")


# Query exceptions


class QueryError(InventoryKernelError):
    """Base exception for statement-building errors."""

    code: str = "QUERY_ERROR"


class InvalidConditionError(QueryError):
    """A where() condition is not a (field, value[, operator]) sequence."""

    code: str = "INVALID_CONDITION"

    def __init__(self, condition: object):
        self.condition = repr(condition)
        super().__init__(
            f"Condition must be (field, value) or (field, value, operator): {condition!r}"
        )


# Repository exceptions


class RepositoryError(InventoryKernelError):
    """Base exception for repository errors."""

    code: str = "REPOSITORY_ERROR"


class MissingTableNameError(RepositoryError):
    """Repository or builder constructed without a table name."""

    code: str = "MISSING_TABLE_NAME"

    def __init__(self, owner: str):
        self.owner = owner
        super().__init__(f"Table name is not defined for {owner}")


class EntryNotFoundError(RepositoryError):
    """Row with the given id does not exist."""

    code: str = "ENTRY_NOT_FOUND"

    def __init__(self, table: str, entry_id: int):
        self.table = table
        self.entry_id = entry_id
        super().__init__(f"No row {entry_id} in {table}")


class DuplicateEntryError(RepositoryError):
    """A catalog row with the same name already exists."""

    code: str = "DUPLICATE_ENTRY"

    def __init__(self, table: str, name: str, existing_id: int):
        self.table = table
        self.name = name
        self.existing_id = existing_id
        super().__init__(f"{table} already has an entry named {name!r} (id {existing_id})")


# Audit exceptions


class AuditError(InventoryKernelError):
    """Base exception for audit-related errors."""

    code: str = "AUDIT_ERROR"


class InvalidAuditEventError(AuditError):
    """A required audit field is missing or empty."""

    code: str = "INVALID_AUDIT_EVENT"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Audit event is missing required field: {field}")


class UnknownEntityTypeError(AuditError):
    """entity_type is not one of the referenceable entity tables."""

    code: str = "UNKNOWN_ENTITY_TYPE"

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        super().__init__(f"Unknown audit entity type: {entity_type!r}")
