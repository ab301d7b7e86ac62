"""
Module: inventory_kernel.models.product
Responsibility: Stocked parts.  ``part_number`` is the display name used when
    an audit entry references a product.
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base, StatusMixin, TimestampMixin


class Product(StatusMixin, TimestampMixin, Base):
    __tablename__ = "products"

    part_number: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    brand_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("brands.id"), nullable=True
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=True
    )
    location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("locations.id"), nullable=True
    )
    provider_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("provider.id"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.part_number}>"
