"""
CheckoutService -- checkout-time recalculation against the live tax store.

Responsibility:
    Wires a session-backed FlatTaxSelector, the active checkout policy and a
    clock into the CheckoutCalculator.  ``quote()`` prices a cart for
    display; ``finalize()`` prices it again and freezes the result into a
    CheckoutSnapshot for the order record.

Architecture position:
    Services -- imperative shell.  Called by the checkout/quote HTTP handler.

Invariants enforced:
    - Checkout-time recalculation: every quote and finalize reads current
      flat-tax rules; nothing is taken from a prior quote or from the client.
    - Frozen snapshots: a finalized snapshot is never recomputed.  Rendering
      a historical order returns the stored breakdown verbatim, even after
      a tax rule changes.
    - Read-only: never adds, flushes, commits, or rolls back.

Failure modes:
    - Every CalculationError subclass propagates unchanged to the caller
      after being logged with its code.

Usage:
    with session_scope() as session:
        service = CheckoutService(session, policy=get_active_policy())
        quote = service.quote(cart_lines=lines, customer=customer,
                              order_options=options)
        snapshot = service.finalize(order_id="12", cart_lines=lines,
                                    customer=customer, order_options=options)
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence
from uuid import uuid4

from sqlalchemy.orm import Session

from checkout_config.schema import CheckoutPolicy
from checkout_engines.checkout import CheckoutCalculator
from checkout_kernel.domain.breakdown import CheckoutBreakdown
from checkout_kernel.domain.cart import CartLine, CustomerAttributes, OrderOptions
from checkout_kernel.domain.clock import Clock, SystemClock
from checkout_kernel.exceptions import CalculationError
from checkout_kernel.logging_config import LogContext, get_logger
from checkout_kernel.selectors.flat_tax_selector import FlatTaxSelector

logger = get_logger("services.checkout")


@dataclass(frozen=True)
class CheckoutSnapshot:
    """
    Historical record of a finalized checkout.

    flat_tax_values records the per-unit amount of every rule applied, so an
    auditor can see which tax configuration the order was charged under.
    """

    order_id: str
    breakdown: CheckoutBreakdown
    computed_at: datetime
    policy_checksum: str
    flat_tax_values: tuple[tuple[int, str], ...]
    content_hash: str
    finalized: bool = True

    def render(self) -> CheckoutBreakdown:
        """The stored breakdown, exactly as finalized."""
        return self.breakdown

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": self.order_id,
            "computed_at": self.computed_at.isoformat(),
            "finalized": self.finalized,
            "policy_checksum": self.policy_checksum,
            "flat_tax_values": [
                {"id": tax_id, "amount": amount} for tax_id, amount in self.flat_tax_values
            ],
            "content_hash": self.content_hash,
            "breakdown": self.breakdown.to_dict(),
        }


def compute_content_hash(breakdown: CheckoutBreakdown) -> str:
    canonical = json.dumps(breakdown.to_dict(), sort_keys=True)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class CheckoutService:
    """
    Checkout quote and finalize operations.

    Contract:
        Accepts the caller's Session; builds a fresh FlatTaxSelector on it.
        Each call is an independent calculation with no shared mutable state.
    """

    def __init__(
        self,
        session: Session,
        policy: CheckoutPolicy | None = None,
        clock: Clock | None = None,
    ):
        self._session = session
        self._policy = policy or CheckoutPolicy()
        self._clock = clock or SystemClock()
        self._calculator = CheckoutCalculator(
            tax_lookup=FlatTaxSelector(session),
            policy=self._policy,
        )

    def quote(
        self,
        cart_lines: Sequence[CartLine],
        customer: CustomerAttributes,
        order_options: OrderOptions,
        correlation_id: str | None = None,
    ) -> CheckoutBreakdown:
        """Price a cart against the current tax rules."""
        with LogContext.bind(
            correlation_id=correlation_id or str(uuid4()),
            customer_id=customer.customer_id,
        ):
            return self._calculate(cart_lines, customer, order_options)

    def finalize(
        self,
        order_id: str,
        cart_lines: Sequence[CartLine],
        customer: CustomerAttributes,
        order_options: OrderOptions,
        correlation_id: str | None = None,
    ) -> CheckoutSnapshot:
        """
        Recalculate at checkout time and freeze the result.

        The caller persists the snapshot with the order.  Later renders use
        ``snapshot.render()``; they must not call ``quote()`` again.
        """
        with LogContext.bind(
            correlation_id=correlation_id or str(uuid4()),
            order_id=str(order_id),
            customer_id=customer.customer_id,
        ):
            breakdown = self._calculate(cart_lines, customer, order_options)
            snapshot = CheckoutSnapshot(
                order_id=str(order_id),
                breakdown=breakdown,
                computed_at=self._clock.now(),
                policy_checksum=self._policy.checksum,
                flat_tax_values=tuple(
                    (line.flat_tax_id, str(line.unit_amount.amount))
                    for line in breakdown.flat_tax_lines
                ),
                content_hash=compute_content_hash(breakdown),
            )
            logger.info(
                "checkout_finalized",
                extra={
                    "final_total": breakdown.final_total,
                    "content_hash": snapshot.content_hash,
                },
            )
            return snapshot

    def _calculate(
        self,
        cart_lines: Sequence[CartLine],
        customer: CustomerAttributes,
        order_options: OrderOptions,
    ) -> CheckoutBreakdown:
        try:
            return self._calculator.calculate(
                cart_lines=cart_lines,
                customer=customer,
                order_options=order_options,
            )
        except CalculationError as exc:
            logger.warning(
                "checkout_calculation_failed",
                extra={"error_code": exc.code},
                exc_info=True,
            )
            raise
