#!/usr/bin/env python3
"""
Quote a cart against the live flat-tax table, or list the configured taxes.

The cart file is JSON (camelCase or snake_case keys)::

    {
      "customer": {"hasFlatTax": true, "customerTier": 2},
      "orderOptions": {"orderType": "delivery", "deliveryFee": "5.00",
                       "redeemPoints": 0},
      "lines": [
        {"productId": "testtob", "quantity": 2, "unitPrice": "33.50",
         "category": "tobacco", "flatTaxIds": [5]}
      ]
    }

Numbers in the file are parsed as Decimal, never float.

Usage:
    python -m scripts.quote_checkout --db-url sqlite:///shop.db quote cart.json
    python -m scripts.quote_checkout --db-url postgresql://... list-taxes

Exit status: 0 on success, 2 when the cart is malformed or the calculation
is rejected (the error code is printed as JSON), 1 on infrastructure failure.
"""

import argparse
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping

from checkout_config import get_active_policy
from checkout_kernel.db.engine import init_engine_from_url, reset_engine, session_scope
from checkout_kernel.domain.cart import CartLine, CustomerAttributes, OrderOptions
from checkout_kernel.exceptions import CalculationError
from checkout_kernel.logging_config import configure_logging
from checkout_kernel.selectors.flat_tax_selector import FlatTaxSelector
from checkout_services.checkout_service import CheckoutService


def _pick(data: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel, default)


def load_cart(path: Path) -> tuple[list[CartLine], CustomerAttributes, OrderOptions]:
    """Parse a cart file into checkout inputs.

    Values are handed to the domain objects as parsed, so a fractional
    point count or a quoted boolean is rejected rather than coerced.

    Raises:
        ValueError: Malformed JSON or an out-of-range value.
        TypeError: A value of the wrong type.
    """
    with open(path) as f:
        data = json.load(f, parse_float=Decimal)

    customer_data = data.get("customer") or {}
    options_data = _pick(data, "order_options", "orderOptions") or {}

    customer = CustomerAttributes(
        has_flat_tax=_pick(customer_data, "has_flat_tax", "hasFlatTax", False),
        customer_tier=_pick(customer_data, "customer_tier", "customerTier", 1),
        customer_id=_pick(customer_data, "customer_id", "customerId"),
    )
    options = OrderOptions(
        order_type=_pick(options_data, "order_type", "orderType", "pickup"),
        delivery_fee=_pick(options_data, "delivery_fee", "deliveryFee", "0"),
        redeem_points=_pick(options_data, "redeem_points", "redeemPoints", 0),
    )
    lines = [CartLine.from_dict(line) for line in data.get("lines") or []]
    return lines, customer, options


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def cmd_quote(args: argparse.Namespace) -> int:
    policy = get_active_policy(args.config)
    try:
        lines, customer, options = load_cart(args.cart)
    except (ValueError, TypeError) as exc:
        _print_json({"error": "INVALID_CART", "message": str(exc)})
        return 2
    with session_scope() as session:
        try:
            breakdown = CheckoutService(session, policy=policy).quote(
                cart_lines=lines,
                customer=customer,
                order_options=options,
            )
        except CalculationError as exc:
            _print_json({"error": exc.code, "message": str(exc)})
            return 2
    _print_json(breakdown.to_dict())
    return 0


def cmd_list_taxes(args: argparse.Namespace) -> int:
    with session_scope() as session:
        rules = FlatTaxSelector(session).list_flat_taxes()
    _print_json(
        [
            {
                "id": rule.id,
                "label": rule.label,
                "amount": str(rule.amount),
                "tax_type": rule.tax_type,
                "is_active": rule.is_active,
            }
            for rule in rules
        ]
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Checkout-time totals from the live flat-tax table."
    )
    parser.add_argument("--db-url", required=True, help="SQLAlchemy database URL")
    parser.add_argument(
        "--config", type=Path, default=None, help="Checkout policy YAML (default: built-in)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG logging to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    quote = sub.add_parser("quote", help="Price a cart file")
    quote.add_argument("cart", type=Path, help="Cart JSON file")
    quote.set_defaults(func=cmd_quote)

    list_taxes = sub.add_parser("list-taxes", help="Show every configured flat tax")
    list_taxes.set_defaults(func=cmd_list_taxes)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        init_engine_from_url(args.db_url)
    except Exception as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1
    try:
        return args.func(args)
    finally:
        reset_engine()


if __name__ == "__main__":
    sys.exit(main())
