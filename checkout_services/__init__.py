"""Checkout services -- imperative shell around the checkout engines."""

from checkout_services.checkout_service import (
    CheckoutService,
    CheckoutSnapshot,
    compute_content_hash,
)

__all__ = ["CheckoutService", "CheckoutSnapshot", "compute_content_hash"]
