"""ORM models read by the checkout kernel."""

from checkout_kernel.models.flat_tax import FlatTax

__all__ = ["FlatTax"]
