"""
Module: checkout_kernel.models.flat_tax
Responsibility: ORM mapping of the flat_taxes table owned by the tax
    configuration back office.  Each row is a fixed per-unit tax amount,
    e.g. "Cook County Large Cigar 60ct" at $18.00.
Architecture position: Kernel > Models.  May import from db/base.py only.

The checkout kernel only ever reads this table.  Rows are created and edited
by the tax-configuration collaborator; an edit must affect the very next
checkout, so nothing in the kernel holds on to a loaded row.
"""

from decimal import Decimal

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from checkout_kernel.db.base import TimestampedBase


class FlatTax(TimestampedBase):
    """Flat per-unit tax rule."""

    __tablename__ = "flat_taxes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Human-readable label printed on receipts
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Per-unit amount in dollars
    tax_amount: Mapped[Decimal] = mapped_column(nullable=False)

    # tobacco, county, state, federal
    tax_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<FlatTax {self.id} {self.name!r} = {self.tax_amount}>"
