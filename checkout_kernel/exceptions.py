"""
Typed Exception Hierarchy for the Checkout Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The checkout endpoint must tell a customer either "tax configuration error,
contact support" or "reduce the number of points you want to redeem".  It
cannot do that by parsing message strings, so:

  1. Every failure has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        breakdown = calculator.calculate(cart_lines=lines, customer=customer,
                                         order_options=options)
    except InvalidRedemptionError as e:
        return api_error(code=e.code, available=str(e.available_value))
    except CalculationError as e:
        log.error("checkout_failed", extra={"code": e.code})
        raise

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CheckoutKernelError (base)
    |
    +-- CalculationError
        +-- TaxRuleNotFoundError
        +-- TaxStoreUnavailableError
        +-- EmptyCartError
        +-- InvalidRedemptionError
        +-- InvariantViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                    | When Raised
------------------------|------------------------------------------------------
TAX_RULE_NOT_FOUND      | Flat-tax id referenced by a cart line has no rule
TAX_STORE_UNAVAILABLE   | The tax-rule store could not be read
EMPTY_CART              | Calculation requested with zero cart lines
INVALID_REDEMPTION      | Redeemed points are worth more than the order
INVARIANT_VIOLATION     | Post-computation consistency check failed

No partial breakdown is ever returned alongside any of these.  Every one of
them aborts the calculation that raised it.
"""

from typing import Any


class CheckoutKernelError(Exception):
    """
    Base exception for all checkout kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CHECKOUT_KERNEL_ERROR"


class CalculationError(CheckoutKernelError):
    """Base exception for anything that aborts a checkout calculation."""

    code: str = "CALCULATION_ERROR"


class TaxRuleNotFoundError(CalculationError):
    """
    Flat-tax id does not resolve to a rule.

    A data-integrity fault: the product references a rule that the tax
    configuration no longer (or never) had.  Never defaulted to zero.
    """

    code: str = "TAX_RULE_NOT_FOUND"

    def __init__(self, flat_tax_id: int):
        self.flat_tax_id = flat_tax_id
        super().__init__(f"Flat tax rule not found: {flat_tax_id}")


class TaxStoreUnavailableError(CalculationError):
    """The authoritative tax-rule store could not be read."""

    code: str = "TAX_STORE_UNAVAILABLE"

    def __init__(self, flat_tax_id: int | None, reason: str):
        self.flat_tax_id = flat_tax_id
        self.reason = reason
        super().__init__(
            f"Tax rule store unavailable (flat tax {flat_tax_id}): {reason}"
        )


class EmptyCartError(CalculationError):
    """Checkout requested with no line items."""

    code: str = "EMPTY_CART"

    def __init__(self):
        super().__init__("Cannot calculate checkout for an empty cart")


class InvalidRedemptionError(CalculationError):
    """Requested loyalty redemption is worth more than the order."""

    code: str = "INVALID_REDEMPTION"

    def __init__(self, points_requested: int, redeem_value: str, available_value: str):
        self.points_requested = points_requested
        self.redeem_value = redeem_value
        self.available_value = available_value
        super().__init__(
            f"Cannot redeem {points_requested} points worth {redeem_value}: "
            f"order subtotal is only {available_value}"
        )


class InvariantViolationError(CalculationError):
    """
    Calculated breakdown is internally inconsistent.

    Treated as a defect signal.  The breakdown is attached for diagnosis but
    must never be served to a customer.
    """

    code: str = "INVARIANT_VIOLATION"

    def __init__(self, invariant: str, expected: str, actual: str, breakdown: dict[str, Any]):
        self.invariant = invariant
        self.expected = expected
        self.actual = actual
        self.breakdown = breakdown
        super().__init__(
            f"Checkout invariant {invariant} violated: expected {expected}, got {actual}"
        )
