"""
Pure domain layer.

Value objects and interfaces with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

All domain objects are immutable and deterministic.
"""

from checkout_kernel.domain.breakdown import (
    CheckoutBreakdown,
    CheckoutLine,
    CheckoutLineKind,
    FlatTaxLine,
)
from checkout_kernel.domain.cart import (
    CartLine,
    CustomerAttributes,
    OrderOptions,
    OrderType,
)
from checkout_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from checkout_kernel.domain.tax_lookup import FlatTaxRule, TaxLookupProvider
from checkout_kernel.domain.values import Money, from_cents, to_cents

__all__ = [
    "CartLine",
    "CheckoutBreakdown",
    "CheckoutLine",
    "CheckoutLineKind",
    "Clock",
    "CustomerAttributes",
    "DeterministicClock",
    "FlatTaxLine",
    "FlatTaxRule",
    "Money",
    "OrderOptions",
    "OrderType",
    "SystemClock",
    "TaxLookupProvider",
    "from_cents",
    "to_cents",
]
