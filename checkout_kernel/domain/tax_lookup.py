"""
Tax lookup -- Contract for reading flat-tax rules at calculation time.

Responsibility:
    Declares the FlatTaxRule DTO and the TaxLookupProvider interface that the
    checkout engine depends on.  The engine never touches a database; it is
    handed a provider.

Architecture position:
    Kernel > Domain -- interface only, zero I/O.  The SQLAlchemy-backed
    implementation lives in checkout_kernel.selectors.flat_tax_selector.

Invariants enforced:
    - Freshness: implementations read the authoritative store on every call.
      No layer-local cache, no reuse of a value fetched earlier in the same
      calculation even when the id repeats.  A changed rule must affect the
      very next checkout.

Failure modes:
    - TaxRuleNotFoundError when the id has no rule.
    - TaxStoreUnavailableError when the store cannot be read.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from checkout_kernel.domain.values import parse_amount


@dataclass(frozen=True)
class FlatTaxRule:
    """A fixed per-unit tax amount, e.g. a county's per-cigar tobacco tax."""

    id: int
    label: str
    amount: Decimal
    tax_type: str | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        amount = parse_amount(self.amount)
        if amount < Decimal("0"):
            raise ValueError(f"Flat tax amount cannot be negative: {amount}")
        object.__setattr__(self, "amount", amount)


class TaxLookupProvider(ABC):
    """
    Read accessor for flat-tax rules.

    Contract:
        get_flat_tax_or_throw performs a direct read for exactly one id and
        returns the rule as it is right now.

    Non-goals:
        - No writes, no caching, no defaulting of missing rules.
    """

    @abstractmethod
    def get_flat_tax_or_throw(self, flat_tax_id: int) -> FlatTaxRule:
        """Return the current rule for flat_tax_id or raise TaxRuleNotFoundError."""
        ...
