"""
Module: inventory_kernel.db.base
Responsibility: Declarative base for the SQLAlchemy table definitions.  The
    models exist to describe the schema (DDL for create_tables and tests);
    all reads and writes go through the statement builder.
Architecture position: Kernel > DB.  Lowest-level import target within the
    kernel.  MUST NOT import from models/, services/, selectors/, or outer layers.

Invariants enforced:
    - Integer auto-increment primary keys named ``id`` on every table; the
      statement builder's insert() returns this value.
    - datetime maps to DateTime(timezone=True).
"""

from datetime import datetime
from typing import ClassVar

from sqlalchemy import DateTime, Integer, SmallInteger, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Row status convention shared by every soft-deletable table
STATUS_ACTIVE = 0
STATUS_INACTIVE = 1


class Base(DeclarativeBase):
    """
    Declarative base for all table definitions.

    Guarantees:
        - id is an auto-increment Integer primary key.
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
    }

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class StatusMixin:
    """Soft-delete flag: 0 is active, 1 is inactive."""

    status: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        default=STATUS_ACTIVE,
        server_default="0",
    )


class TimestampMixin:
    """Creation / modification timestamps maintained by the store."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )
