"""
Module: inventory_kernel.models.history
Responsibility: Table definition for the audit trail (``history``).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Rows are append-only; the kernel never updates or deletes them.
    - ``created_at`` is stamped by the AuditRecorder, never by the caller.
    - ``target_user`` / ``target_product`` mirror ``entity_id`` when
      ``entity_type`` is ``user`` / ``products``; they exist for readers that
      still resolve through the legacy columns.

Audit relevance:
    This IS the audit trail.  ``entity_type`` / ``entity_id`` form a
    polymorphic reference resolved at read time by HistorySelector.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base


class HistoryEntry(Base):
    """One immutable audit record."""

    __tablename__ = "history"

    __table_args__ = (
        Index("idx_history_entity", "entity_type", "entity_id"),
        Index("idx_history_action", "action_type"),
        Index("idx_history_created", "created_at"),
    )

    action_type: Mapped[str] = mapped_column(String(100), nullable=False)

    performed_by: Mapped[int] = mapped_column(Integer, nullable=False)

    # Polymorphic reference (EntityType value + row id)
    entity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Legacy mirror columns
    target_user: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    target_product: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )

    # Independent before/after snapshots (JSON text)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<HistoryEntry {self.action_type} on {self.entity_type}:{self.entity_id}>"
