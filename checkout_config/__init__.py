"""
checkout_config -- single public entrypoint for checkout policy.

Responsibility:
    ``get_active_policy()`` is the only way runtime code obtains a
    ``CheckoutPolicy``.  Engines receive the policy by injection and never
    read files themselves.

Audit relevance:
    Every successful ``get_active_policy()`` call emits a
    ``CHECKOUT_CONFIG_TRACE`` log entry with config_id, version and
    checksum.  Finalized checkout snapshots record the checksum so a receipt
    can be tied back to the exact policy that produced it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from checkout_config.loader import load_policy
from checkout_config.schema import CheckoutPolicy, LoyaltyPolicy, VerificationPolicy

_logger = logging.getLogger("checkout_kernel.config")

DEFAULT_POLICY_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_policy(config_path: Path | None = None) -> CheckoutPolicy:
    """
    Load the checkout policy.

    Args:
        config_path: Policy YAML file.  Defaults to ``sets/default.yaml``.

    Raises:
        FileNotFoundError: The file does not exist.
        ValueError: The file fails validation.
    """
    path = config_path or DEFAULT_POLICY_PATH
    policy = load_policy(path)
    _logger.info(
        "CHECKOUT_CONFIG_TRACE",
        extra={
            "trace_type": "CHECKOUT_CONFIG_TRACE",
            "config_id": policy.config_id,
            "config_version": policy.version,
            "checksum": policy.checksum,
            "path": str(path),
        },
    )
    return policy


__all__ = [
    "CheckoutPolicy",
    "DEFAULT_POLICY_PATH",
    "LoyaltyPolicy",
    "VerificationPolicy",
    "get_active_policy",
]
