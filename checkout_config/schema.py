"""
Checkout policy schema (``checkout_config.schema``).

Responsibility
--------------
Frozen dataclasses describing the tunable parts of checkout math: loyalty
earn and redeem rates, the upstream redemption cap, the categories excluded
from loyalty, and the verifier's currency-boundary tolerance.

The defaults ARE the production policy: 2 points per eligible dollar,
1 point = $0.01, redemption capped at 50% of the order, tobacco excluded,
1 cent tolerance.  ``CheckoutPolicy()`` with no arguments equals
``sets/default.yaml``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LoyaltyPolicy:
    """Loyalty earn/redeem parameters."""

    points_per_dollar: int = 2
    cents_per_point: int = 1
    max_redeem_percent: int = 50
    excluded_categories: frozenset[str] = frozenset({"tobacco"})

    def __post_init__(self) -> None:
        if self.points_per_dollar < 0:
            raise ValueError("points_per_dollar cannot be negative")
        if self.cents_per_point <= 0:
            raise ValueError("cents_per_point must be positive")
        if not 0 <= self.max_redeem_percent <= 100:
            raise ValueError("max_redeem_percent must be between 0 and 100")
        object.__setattr__(
            self,
            "excluded_categories",
            frozenset(c.strip().lower() for c in self.excluded_categories),
        )


@dataclass(frozen=True)
class VerificationPolicy:
    """Invariant verifier parameters."""

    tolerance_cents: int = 1

    def __post_init__(self) -> None:
        if self.tolerance_cents < 0:
            raise ValueError("tolerance_cents cannot be negative")


@dataclass(frozen=True)
class CheckoutPolicy:
    """Complete checkout policy."""

    config_id: str = "default"
    version: int = 1
    currency: str = "USD"
    loyalty: LoyaltyPolicy = field(default_factory=LoyaltyPolicy)
    verification: VerificationPolicy = field(default_factory=VerificationPolicy)
    checksum: str = ""
