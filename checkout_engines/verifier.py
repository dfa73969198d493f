"""
Invariant Verifier - Post-computation consistency checks on a breakdown.

Runs after every checkout calculation and before the breakdown is handed to
any caller.  A failed check raises InvariantViolationError; the breakdown is
rejected outright, never returned with a warning.

Checks re-derive each figure from the breakdown itself.  The tolerance only
absorbs rounding at the currency-conversion boundary; the engine's own
integer arithmetic is exact, so any real discrepancy is a defect.

Usage:
    from checkout_engines.verifier import InvariantVerifier

    InvariantVerifier(policy).verify(breakdown)   # None, or raises
"""

from __future__ import annotations

from checkout_config.schema import CheckoutPolicy
from checkout_kernel.domain.breakdown import CheckoutBreakdown
from checkout_kernel.domain.values import CENTS_PER_UNIT, from_cents
from checkout_kernel.exceptions import InvariantViolationError
from checkout_kernel.invariants import CheckoutInvariant
from checkout_kernel.logging_config import get_logger

logger = get_logger("engines.verifier")


class InvariantVerifier:
    """Verifies the CheckoutInvariant set against one breakdown."""

    def __init__(self, policy: CheckoutPolicy | None = None):
        self.policy = policy or CheckoutPolicy()

    @property
    def tolerance_cents(self) -> int:
        return self.policy.verification.tolerance_cents

    def verify(self, breakdown: CheckoutBreakdown) -> None:
        """
        Check every invariant.

        Raises:
            InvariantViolationError: on the first invariant that does not hold.
        """
        items = breakdown.items_subtotal.cents
        flat_tax = breakdown.flat_tax_total.cents
        before_delivery = breakdown.subtotal_before_delivery.cents
        delivery = breakdown.delivery_fee.cents
        redeem = breakdown.loyalty_redeem_value.cents
        eligible = breakdown.loyalty_eligible_subtotal.cents

        self._check_close(
            breakdown,
            CheckoutInvariant.SUBTOTAL_ADDITIVITY,
            expected=items + flat_tax,
            actual=before_delivery,
        )

        self._check_close(
            breakdown,
            CheckoutInvariant.FLAT_TAX_LINES_SUM,
            expected=sum(line.amount.cents for line in breakdown.flat_tax_lines),
            actual=flat_tax,
        )

        self._check_close(
            breakdown,
            CheckoutInvariant.FINAL_TOTAL_FORMULA,
            expected=max(0, before_delivery + delivery - redeem),
            actual=breakdown.final_total.cents,
        )

        if eligible > items:
            self._fail(
                breakdown,
                CheckoutInvariant.LOYALTY_SUBSET,
                expected=f"<= {_dollars(items)}",
                actual=_dollars(eligible),
            )

        expected_points = (
            eligible * self.policy.loyalty.points_per_dollar
        ) // CENTS_PER_UNIT if eligible > 0 else 0
        if breakdown.points_earned != expected_points:
            self._fail(
                breakdown,
                CheckoutInvariant.POINTS_REDERIVABLE,
                expected=str(expected_points),
                actual=str(breakdown.points_earned),
            )

    def _check_close(
        self,
        breakdown: CheckoutBreakdown,
        invariant: CheckoutInvariant,
        expected: int,
        actual: int,
    ) -> None:
        if abs(expected - actual) > self.tolerance_cents:
            self._fail(breakdown, invariant, _dollars(expected), _dollars(actual))

    def _fail(
        self,
        breakdown: CheckoutBreakdown,
        invariant: CheckoutInvariant,
        expected: str,
        actual: str,
    ) -> None:
        logger.error(
            "checkout_invariant_violated",
            extra={
                "invariant": invariant.value,
                "expected": expected,
                "actual": actual,
                "breakdown": breakdown,
            },
        )
        raise InvariantViolationError(invariant.value, expected, actual, breakdown.to_dict())


def _dollars(cents: int) -> str:
    return str(from_cents(cents))
