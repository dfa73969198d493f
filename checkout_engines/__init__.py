"""
Module: checkout_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the checkout
    calculation engines.

Architecture position:
    Engines -- calculation layer.  Imports checkout_kernel and the policy
    schema only; I/O reaches the engines solely through the injected
    TaxLookupProvider.

Invariants enforced:
    - Integer-cent arithmetic; floats are rejected at the value boundary.
    - Determinism: identical inputs against an unchanged tax store produce
      identical breakdowns.
    - Every checkout calculation emits a CHECKOUT_ENGINE_TRACE log record.

Usage:
    from checkout_engines import CheckoutCalculator, InvariantVerifier, LoyaltyCalculator
"""

from checkout_engines.checkout import CheckoutCalculator
from checkout_engines.loyalty import LoyaltyCalculator, line_cents
from checkout_engines.tracer import compute_input_fingerprint, traced_engine
from checkout_engines.verifier import InvariantVerifier

__all__ = [
    "CheckoutCalculator",
    "InvariantVerifier",
    "LoyaltyCalculator",
    "compute_input_fingerprint",
    "line_cents",
    "traced_engine",
]
