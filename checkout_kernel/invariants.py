"""
Checkout Invariants Contract.

These invariants are structural law for every CheckoutBreakdown.  No policy
value may switch them off; policy only supplies the rates they are checked
against (points per dollar) and the currency-boundary tolerance.

Enforcement lives in checkout_engines.verifier.InvariantVerifier, which runs
after every calculation and before any caller sees the result.
"""

from enum import Enum, unique


@unique
class CheckoutInvariant(str, Enum):
    """Non-configurable invariants enforced on every checkout breakdown."""

    SUBTOTAL_ADDITIVITY = "subtotal_additivity"
    """subtotal_before_delivery == items_subtotal + flat_tax_total."""

    FINAL_TOTAL_FORMULA = "final_total_formula"
    """final_total == max(0, subtotal_before_delivery + delivery_fee
    - loyalty_redeem_value)."""

    LOYALTY_SUBSET = "loyalty_subset"
    """loyalty_eligible_subtotal <= items_subtotal.  The eligible subtotal is
    a filtered subset of the item lines."""

    POINTS_REDERIVABLE = "points_rederivable"
    """points_earned == floor(loyalty_eligible_subtotal * points_per_dollar).
    Re-derived from the breakdown, never trusted."""

    FLAT_TAX_LINES_SUM = "flat_tax_lines_sum"
    """The individual flat-tax lines add up to flat_tax_total."""


ALL_CHECKOUT_INVARIANTS: frozenset[CheckoutInvariant] = frozenset(CheckoutInvariant)

# The kernel package may not import from these packages.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "checkout_engines",
    "checkout_services",
    "checkout_config",
)
