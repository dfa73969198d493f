"""
Breakdown -- The checkout calculation's single output artifact.

Responsibility:
    Immutable record of every monetary figure the checkout engine derived,
    plus the receipt-ordered lines that explain them.  Created fresh per
    calculation; never mutated once the invariant verifier accepts it.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from checkout_kernel.domain.values import Money


class CheckoutLineKind(str, Enum):
    """Kinds of receipt line, in the order they are emitted."""

    ITEM = "item"
    FLAT_TAX = "flat_tax"
    DELIVERY = "delivery"
    LOYALTY_REDEEM = "loyalty_redeem"


@dataclass(frozen=True)
class FlatTaxLine:
    """
    One applied flat tax.

    label and amount are what the receipt shows.  flat_tax_id, unit_amount
    and quantity record the rule value that was read at calculation time.
    """

    label: str
    amount: Money
    flat_tax_id: int
    product_id: str
    unit_amount: Money
    quantity: int


@dataclass(frozen=True)
class CheckoutLine:
    """Receipt line. Fields that do not apply to a kind are left as None."""

    kind: CheckoutLineKind
    amount: Money
    label: str | None = None
    product_id: str | None = None
    quantity: int | None = None
    unit_price: Money | None = None
    points_used: int | None = None


@dataclass(frozen=True)
class CheckoutBreakdown:
    """
    Verified monetary breakdown of one checkout.

    Every Money field was produced by dividing an integer cent total by 100.
    points_* are whole loyalty points (1 point = $0.01 at the default rate).
    """

    items_subtotal: Money
    flat_tax_lines: tuple[FlatTaxLine, ...]
    flat_tax_total: Money
    subtotal_before_delivery: Money
    delivery_fee: Money
    subtotal_before_redemption: Money
    loyalty_eligible_subtotal: Money
    points_earned: int
    points_redeemed: int
    loyalty_redeem_value: Money
    final_total: Money
    lines: tuple[CheckoutLine, ...] = ()

    @property
    def currency(self) -> str:
        return self.final_total.currency

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe rendering; amounts are two-place decimal strings."""
        return {
            "currency": self.currency,
            "items_subtotal": str(self.items_subtotal.amount),
            "flat_tax_lines": [
                {
                    "label": line.label,
                    "amount": str(line.amount.amount),
                    "flat_tax_id": line.flat_tax_id,
                    "product_id": line.product_id,
                    "unit_amount": str(line.unit_amount.amount),
                    "quantity": line.quantity,
                }
                for line in self.flat_tax_lines
            ],
            "flat_tax_total": str(self.flat_tax_total.amount),
            "subtotal_before_delivery": str(self.subtotal_before_delivery.amount),
            "delivery_fee": str(self.delivery_fee.amount),
            "subtotal_before_redemption": str(self.subtotal_before_redemption.amount),
            "loyalty_eligible_subtotal": str(self.loyalty_eligible_subtotal.amount),
            "points_earned": self.points_earned,
            "points_redeemed": self.points_redeemed,
            "loyalty_redeem_value": str(self.loyalty_redeem_value.amount),
            "final_total": str(self.final_total.amount),
            "lines": [_line_to_dict(line) for line in self.lines],
        }


def _line_to_dict(line: CheckoutLine) -> dict[str, Any]:
    data: dict[str, Any] = {"kind": line.kind.value, "amount": str(line.amount.amount)}
    if line.label is not None:
        data["label"] = line.label
    if line.product_id is not None:
        data["product_id"] = line.product_id
    if line.quantity is not None:
        data["quantity"] = line.quantity
    if line.unit_price is not None:
        data["unit_price"] = str(line.unit_price.amount)
    if line.points_used is not None:
        data["points_used"] = line.points_used
    return data
