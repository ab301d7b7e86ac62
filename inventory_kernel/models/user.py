"""
Module: inventory_kernel.models.user
Responsibility: Users and the two lookup tables a user row points at
    (``ranks`` and ``role``).  Table and column names follow the existing
    store, including the camel-case ``roleId`` column.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base, StatusMixin, TimestampMixin


class Rank(Base):
    __tablename__ = "ranks"

    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Role(Base):
    __tablename__ = "role"

    role: Mapped[str] = mapped_column(String(100), nullable=False)


class User(StatusMixin, TimestampMixin, Base):
    """An operator of the system; also the actor of every audit entry."""

    __tablename__ = "user"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    account: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    rank_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ranks.id"), nullable=True
    )
    role_id: Mapped[int | None] = mapped_column(
        "roleId", Integer, ForeignKey("role.id"), nullable=True
    )
    last_access: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
