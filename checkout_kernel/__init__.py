"""
Checkout Kernel

Authoritative checkout-time money math for the wholesale ordering platform:
- Integer-cent arithmetic, decimal only at the boundary
- Flat per-unit taxes read fresh from the tax-rule store
- Loyalty points earned and redeemed
- Typed failures and hard invariant checks
"""

__version__ = "0.1.0"
