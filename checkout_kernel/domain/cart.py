"""
Cart -- Checkout input value objects.

Responsibility:
    The plain structured values a checkout calculation consumes: the cart
    lines, the customer's tax/loyalty attributes, and the order options.
    They are snapshots handed over by the calling layer; nothing here is
    looked up or re-priced.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - quantity is a positive int; unit_price is a non-negative Decimal.
    - delivery_fee is non-negative and forced to zero for pickup orders.
    - redeem_points is a non-negative int.
    - has_flat_tax is a real bool and customer_tier an int; nothing is coerced.

Failure modes:
    - ValueError / TypeError at construction on invalid values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from checkout_kernel.domain.values import parse_amount


class OrderType(str, Enum):
    """How the order leaves the warehouse."""

    PICKUP = "pickup"
    DELIVERY = "delivery"


@dataclass(frozen=True)
class CartLine:
    """
    One entry being priced.

    unit_price is the agreed per-unit price for this customer's tier,
    supplied by the external pricing collaborator.  flat_tax_ids keeps the
    product's ordering; only the first entry is ever applied.
    """

    product_id: str
    quantity: int
    unit_price: Decimal
    category: str = ""
    flat_tax_ids: tuple[int, ...] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool):
            raise TypeError(f"quantity must be int, got {type(self.quantity).__name__}")
        if self.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {self.quantity}")
        price = parse_amount(self.unit_price)
        if price < Decimal("0"):
            raise ValueError(f"unit_price cannot be negative, got {price}")
        object.__setattr__(self, "unit_price", price)
        object.__setattr__(self, "product_id", str(self.product_id))
        object.__setattr__(self, "category", (self.category or "").strip().lower())
        object.__setattr__(self, "flat_tax_ids", tuple(self.flat_tax_ids or ()))

    @property
    def primary_flat_tax_id(self) -> int | None:
        """The one flat-tax rule that applies to this line, if any."""
        return self.flat_tax_ids[0] if self.flat_tax_ids else None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CartLine:
        """Build a line from a JSON-style mapping (camelCase or snake_case keys)."""
        def pick(snake: str, camel: str, default: Any = None) -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        return cls(
            product_id=pick("product_id", "productId"),
            quantity=pick("quantity", "quantity"),
            unit_price=parse_amount(pick("unit_price", "unitPrice")),
            category=pick("category", "category", ""),
            flat_tax_ids=tuple(pick("flat_tax_ids", "flatTaxIds") or ()),
            name=pick("name", "name"),
        )


@dataclass(frozen=True)
class CustomerAttributes:
    """Customer attributes the calculation depends on."""

    has_flat_tax: bool
    customer_tier: int = 1
    customer_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.has_flat_tax, bool):
            raise TypeError(
                f"has_flat_tax must be bool, got {type(self.has_flat_tax).__name__}"
            )
        if not isinstance(self.customer_tier, int) or isinstance(self.customer_tier, bool):
            raise TypeError(
                f"customer_tier must be int, got {type(self.customer_tier).__name__}"
            )


@dataclass(frozen=True)
class OrderOptions:
    """Delivery and redemption options chosen at checkout."""

    order_type: OrderType = OrderType.PICKUP
    delivery_fee: Decimal = field(default_factory=lambda: Decimal("0"))
    redeem_points: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "order_type", OrderType(self.order_type))
        fee = parse_amount(self.delivery_fee)
        if fee < Decimal("0"):
            raise ValueError(f"delivery_fee cannot be negative, got {fee}")
        if self.order_type is OrderType.PICKUP:
            fee = Decimal("0")
        object.__setattr__(self, "delivery_fee", fee)
        if not isinstance(self.redeem_points, int) or isinstance(self.redeem_points, bool):
            raise TypeError(
                f"redeem_points must be int, got {type(self.redeem_points).__name__}"
            )
        if self.redeem_points < 0:
            raise ValueError(f"redeem_points cannot be negative, got {self.redeem_points}")
