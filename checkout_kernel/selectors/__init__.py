"""Selectors for the checkout kernel (read side)."""

from checkout_kernel.selectors.flat_tax_selector import FlatTaxSelector

__all__ = ["FlatTaxSelector"]
