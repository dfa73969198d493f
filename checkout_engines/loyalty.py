"""
Loyalty Engine - Points earned and redeemed on a checkout.

Rule: 2% back on the order excluding delivery, flat taxes and tobacco items.
With 1 point = $0.01 that is 2 points per eligible dollar.  Rates and the
excluded categories come from the checkout policy.

Pure functions with no I/O.  All amounts are integer cents.

Usage:
    from checkout_engines.loyalty import LoyaltyCalculator

    loyalty = LoyaltyCalculator()
    eligible = loyalty.eligible_subtotal_cents(cart_lines)   # 5155
    loyalty.points_earned(eligible)                           # 103
"""

from __future__ import annotations

from typing import Sequence

from checkout_config.schema import LoyaltyPolicy
from checkout_kernel.domain.cart import CartLine
from checkout_kernel.domain.values import CENTS_PER_UNIT, to_cents


def line_cents(line: CartLine) -> int:
    """round(unit_price * 100) * quantity -- the line's contribution in cents."""
    return to_cents(line.unit_price) * line.quantity


class LoyaltyCalculator:
    """
    Loyalty point arithmetic.

    Handles:
        - Eligible subtotal (non-excluded item lines only)
        - Points earned, floored, with no float involved
        - Redemption value of a point count
        - The upstream redemption cap callers apply before checkout
    """

    def __init__(self, policy: LoyaltyPolicy | None = None):
        self.policy = policy or LoyaltyPolicy()

    def is_eligible(self, line: CartLine) -> bool:
        return line.category not in self.policy.excluded_categories

    def eligible_subtotal_cents(self, lines: Sequence[CartLine]) -> int:
        """
        Sum of item cents for lines whose category earns points.

        Flat taxes and delivery are not item lines, so they never count.
        """
        return sum(line_cents(line) for line in lines if self.is_eligible(line))

    def points_earned(self, eligible_cents: int) -> int:
        """
        floor(eligible_dollars * points_per_dollar).

        Computed as (cents * rate) // 100: the cent value is scaled back to
        dollars in one exact integer division, so 51.55 -> 103, 75.55 -> 151.
        """
        if eligible_cents <= 0:
            return 0
        return (eligible_cents * self.policy.points_per_dollar) // CENTS_PER_UNIT

    def redeem_value_cents(self, points: int) -> int:
        return points * self.policy.cents_per_point

    def max_redeemable_points(
        self,
        subtotal_before_redemption_cents: int,
        available_points: int,
    ) -> int:
        """
        Largest redemption a caller may submit for this order.

        The smallest of: the customer's balance, max_redeem_percent of the
        order, and the whole order.  The checkout calculator does not apply
        this cap; it only rejects redemptions worth more than the order.
        """
        if subtotal_before_redemption_cents <= 0 or available_points <= 0:
            return 0
        cents_per_point = self.policy.cents_per_point
        cap_cents = (
            subtotal_before_redemption_cents * self.policy.max_redeem_percent
        ) // 100
        by_percent = cap_cents // cents_per_point
        by_subtotal = subtotal_before_redemption_cents // cents_per_point
        return max(0, min(available_points, by_percent, by_subtotal))
