"""
Configuration Loader (``checkout_config.loader``).

Responsibility
--------------
Loads a checkout policy YAML file and parses it into the frozen dataclasses
of ``checkout_config.schema``.  Runtime callers go through
``checkout_config.get_active_policy()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong types or out-of-range values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from checkout_config.schema import CheckoutPolicy, LoyaltyPolicy, VerificationPolicy


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def _require_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def parse_loyalty(data: dict[str, Any]) -> LoyaltyPolicy:
    """Parse a LoyaltyPolicy from a dict."""
    defaults = LoyaltyPolicy()
    categories = data.get("excluded_categories", sorted(defaults.excluded_categories))
    if not isinstance(categories, list):
        raise ValueError(f"excluded_categories must be a list, got {categories!r}")
    return LoyaltyPolicy(
        points_per_dollar=_require_int(data, "points_per_dollar", defaults.points_per_dollar),
        cents_per_point=_require_int(data, "cents_per_point", defaults.cents_per_point),
        max_redeem_percent=_require_int(data, "max_redeem_percent", defaults.max_redeem_percent),
        excluded_categories=frozenset(str(c) for c in categories),
    )


def parse_verification(data: dict[str, Any]) -> VerificationPolicy:
    """Parse a VerificationPolicy from a dict."""
    defaults = VerificationPolicy()
    return VerificationPolicy(
        tolerance_cents=_require_int(data, "tolerance_cents", defaults.tolerance_cents),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of the parsed YAML content."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def parse_policy(data: dict[str, Any]) -> CheckoutPolicy:
    """
    Parse a ``CheckoutPolicy`` from a dict.

    Sections that are absent fall back to the schema defaults.
    """
    currency = str(data.get("currency", "USD")).upper()
    if len(currency) != 3 or not currency.isalpha():
        raise ValueError(f"Invalid currency code: {currency!r}")
    return CheckoutPolicy(
        config_id=str(data.get("config_id", "default")),
        version=_require_int(data, "version", 1),
        currency=currency,
        loyalty=parse_loyalty(data.get("loyalty") or {}),
        verification=parse_verification(data.get("verification") or {}),
        checksum=compute_checksum(data),
    )


def load_policy(path: Path) -> CheckoutPolicy:
    """Load and parse a policy file."""
    return parse_policy(load_yaml_file(path))
