"""
Checkout Engine - Authoritative monetary breakdown for one checkout.

Turns cart lines, customer attributes and order options into a verified
CheckoutBreakdown: item subtotal, flat per-unit taxes, delivery, loyalty
points earned and redeemed, final total.  No percentage sales tax is ever
applied (B2B exemption).

All arithmetic is integer cents.  Decimal currency appears only when a line
is read (round(price * 100)) and when a total is written out (cents / 100).

Flat-tax rules are read through the injected TaxLookupProvider on every
calculation, one lookup per taxed line, so an edited rule changes the very
next checkout.  Only the first id in a line's flat_tax_ids applies.

Usage:
    from checkout_engines.checkout import CheckoutCalculator

    calculator = CheckoutCalculator(tax_lookup=FlatTaxSelector(session))
    breakdown = calculator.calculate(
        cart_lines=[CartLine("testtob", 2, Decimal("33.50"), "tobacco", (5,))],
        customer=CustomerAttributes(has_flat_tax=True),
        order_options=OrderOptions(),
    )
    print(breakdown.final_total)  # 103.00 USD
"""

from __future__ import annotations

from typing import Sequence

from checkout_config.schema import CheckoutPolicy
from checkout_engines.loyalty import LoyaltyCalculator, line_cents
from checkout_engines.tracer import traced_engine
from checkout_engines.verifier import InvariantVerifier
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
from checkout_kernel.domain.tax_lookup import TaxLookupProvider
from checkout_kernel.domain.values import Money, from_cents, to_cents
from checkout_kernel.exceptions import EmptyCartError, InvalidRedemptionError
from checkout_kernel.logging_config import get_logger

logger = get_logger("engines.checkout")

ENGINE_NAME = "checkout"
ENGINE_VERSION = "1.0"


class CheckoutCalculator:
    """
    Checkout-time calculation.

    Depends only on the TaxLookupProvider abstraction; tests drive it with
    fake providers returning fixed or sequenced rule values.  Holds no
    per-calculation state, so one instance may serve concurrent checkouts.
    """

    def __init__(
        self,
        tax_lookup: TaxLookupProvider,
        policy: CheckoutPolicy | None = None,
        verifier: InvariantVerifier | None = None,
    ):
        self.tax_lookup = tax_lookup
        self.policy = policy or CheckoutPolicy()
        self.loyalty = LoyaltyCalculator(self.policy.loyalty)
        self.verifier = verifier or InvariantVerifier(self.policy)

    @traced_engine(
        ENGINE_NAME,
        ENGINE_VERSION,
        fingerprint_fields=("cart_lines", "customer", "order_options"),
    )
    def calculate(
        self,
        *,
        cart_lines: Sequence[CartLine],
        customer: CustomerAttributes,
        order_options: OrderOptions,
    ) -> CheckoutBreakdown:
        """
        Calculate and verify the checkout breakdown.

        Raises:
            EmptyCartError: cart_lines is empty.
            TaxRuleNotFoundError: a taxed line references a missing rule.
            TaxStoreUnavailableError: the tax-rule store could not be read.
            InvalidRedemptionError: redeemed points are worth more than the order.
            InvariantViolationError: the result failed verification.
        """
        lines = tuple(cart_lines)
        if not lines:
            logger.warning("checkout_empty_cart")
            raise EmptyCartError()

        currency = self.policy.currency

        # 1) Items subtotal
        items_subtotal_c = 0
        receipt: list[CheckoutLine] = []
        for line in lines:
            line_c = line_cents(line)
            items_subtotal_c += line_c
            receipt.append(
                CheckoutLine(
                    kind=CheckoutLineKind.ITEM,
                    amount=Money.from_cents(line_c, currency),
                    label=line.name,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=Money.from_cents(to_cents(line.unit_price), currency),
                )
            )

        # 2) Flat taxes, read fresh
        flat_tax_lines = self._flat_tax_lines(lines, customer, currency)
        flat_tax_total_c = sum(t.amount.cents for t in flat_tax_lines)
        for tax_line in flat_tax_lines:
            receipt.append(
                CheckoutLine(
                    kind=CheckoutLineKind.FLAT_TAX,
                    amount=tax_line.amount,
                    label=tax_line.label,
                    product_id=tax_line.product_id,
                    quantity=tax_line.quantity,
                )
            )

        # 3) + 4) Subtotals
        subtotal_before_delivery_c = items_subtotal_c + flat_tax_total_c
        delivery_fee_c = 0
        if order_options.order_type is OrderType.DELIVERY:
            delivery_fee_c = to_cents(order_options.delivery_fee)
        if delivery_fee_c > 0:
            receipt.append(
                CheckoutLine(
                    kind=CheckoutLineKind.DELIVERY,
                    amount=Money.from_cents(delivery_fee_c, currency),
                    label="Delivery",
                )
            )
        subtotal_before_redemption_c = subtotal_before_delivery_c + delivery_fee_c

        # 5) + 6) Loyalty earned
        eligible_c = self.loyalty.eligible_subtotal_cents(lines)
        points_earned = self.loyalty.points_earned(eligible_c)

        # 7) + 8) Loyalty redeemed
        points_redeemed = order_options.redeem_points
        redeem_c = self.loyalty.redeem_value_cents(points_redeemed)
        if redeem_c > subtotal_before_redemption_c:
            logger.warning(
                "checkout_redemption_rejected",
                extra={
                    "points_requested": points_redeemed,
                    "redeem_value": str(from_cents(redeem_c)),
                    "subtotal_before_redemption": str(
                        from_cents(subtotal_before_redemption_c)
                    ),
                },
            )
            raise InvalidRedemptionError(
                points_redeemed,
                str(from_cents(redeem_c)),
                str(from_cents(subtotal_before_redemption_c)),
            )
        if redeem_c > 0:
            receipt.append(
                CheckoutLine(
                    kind=CheckoutLineKind.LOYALTY_REDEEM,
                    amount=Money.from_cents(redeem_c, currency),
                    label="Loyalty points",
                    points_used=points_redeemed,
                )
            )

        # 9) Final total
        final_total_c = subtotal_before_redemption_c - redeem_c
        if final_total_c < 0:
            logger.warning(
                "final_total_clamped",
                extra={"unclamped_total": str(from_cents(final_total_c))},
            )
            final_total_c = 0

        breakdown = CheckoutBreakdown(
            items_subtotal=Money.from_cents(items_subtotal_c, currency),
            flat_tax_lines=flat_tax_lines,
            flat_tax_total=Money.from_cents(flat_tax_total_c, currency),
            subtotal_before_delivery=Money.from_cents(subtotal_before_delivery_c, currency),
            delivery_fee=Money.from_cents(delivery_fee_c, currency),
            subtotal_before_redemption=Money.from_cents(
                subtotal_before_redemption_c, currency
            ),
            loyalty_eligible_subtotal=Money.from_cents(eligible_c, currency),
            points_earned=points_earned,
            points_redeemed=points_redeemed,
            loyalty_redeem_value=Money.from_cents(redeem_c, currency),
            final_total=Money.from_cents(final_total_c, currency),
            lines=tuple(receipt),
        )

        self.verifier.verify(breakdown)

        logger.info(
            "checkout_calculated",
            extra={
                "line_count": len(lines),
                "items_subtotal": breakdown.items_subtotal,
                "flat_tax_total": breakdown.flat_tax_total,
                "final_total": breakdown.final_total,
                "points_earned": points_earned,
                "points_redeemed": points_redeemed,
            },
        )
        return breakdown

    def _flat_tax_lines(
        self,
        lines: tuple[CartLine, ...],
        customer: CustomerAttributes,
        currency: str,
    ) -> tuple[FlatTaxLine, ...]:
        """One lookup per taxed line; repeated ids are looked up again."""
        if not customer.has_flat_tax:
            return ()

        tax_lines: list[FlatTaxLine] = []
        for line in lines:
            flat_tax_id = line.primary_flat_tax_id
            if flat_tax_id is None:
                continue
            if len(line.flat_tax_ids) > 1:
                logger.debug(
                    "flat_tax_ids_truncated",
                    extra={
                        "product_id": line.product_id,
                        "applied": flat_tax_id,
                        "ignored": list(line.flat_tax_ids[1:]),
                    },
                )
            rule = self.tax_lookup.get_flat_tax_or_throw(flat_tax_id)
            unit_c = to_cents(rule.amount)
            amount_c = unit_c * line.quantity
            tax_lines.append(
                FlatTaxLine(
                    label=rule.label,
                    amount=Money.from_cents(amount_c, currency),
                    flat_tax_id=rule.id,
                    product_id=line.product_id,
                    unit_amount=Money.from_cents(unit_c, currency),
                    quantity=line.quantity,
                )
            )
        return tuple(tax_lines)
