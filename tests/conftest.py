"""
Pytest fixtures for the checkout kernel test suite.

Provides:
- Structured logging configured once per session, LogContext cleared per test
- captured_logs for asserting on emitted JSON log records
- In-memory SQLite sessions with the flat_taxes table created
- Common cart fixtures (the Cook County tobacco line)

Engine tests never touch a database; they hand the calculator one of the
fakes in tests/fakes.py.  Selector, service and CLI tests use SQLite.
"""

import json
import logging
from decimal import Decimal
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from checkout_kernel.db.engine import (
    create_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from checkout_kernel.domain.cart import CartLine, CustomerAttributes, OrderOptions
from checkout_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from checkout_kernel.models.flat_tax import FlatTax
from tests.fakes import StaticTaxLookup, cook_county_rule


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture checkout_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculator.calculate(...)
            logs = captured_logs()
            assert any(r["message"] == "checkout_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("checkout_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database with all tables created."""
    engine = init_engine_from_url("sqlite://")
    create_tables()
    yield engine
    reset_engine()


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    sess = get_session()
    yield sess
    sess.close()


@pytest.fixture
def add_flat_tax(session):
    """
    Insert a flat-tax row and commit it.

    Usage::

        add_flat_tax(5, "Cook County Large Cigar 60ct", "15.00")
    """

    def _add(
        flat_tax_id: int,
        name: str,
        amount: str,
        tax_type: str | None = "tobacco",
        is_active: bool = True,
    ) -> FlatTax:
        row = FlatTax(
            id=flat_tax_id,
            name=name,
            tax_amount=Decimal(amount),
            tax_type=tax_type,
            is_active=is_active,
        )
        session.add(row)
        session.commit()
        return row

    return _add


# =============================================================================
# Cart fixtures
# =============================================================================


@pytest.fixture
def cook_county_lookup() -> StaticTaxLookup:
    """Flat tax 5 = $18.00 per unit, as configured in production."""
    return StaticTaxLookup([cook_county_rule("18.00")])


@pytest.fixture
def tobacco_line() -> CartLine:
    """Two units of a $33.50 cigar box carrying flat tax 5."""
    return CartLine(
        product_id="testtob",
        quantity=2,
        unit_price=Decimal("33.50"),
        category="tobacco",
        flat_tax_ids=(5,),
        name="Test Cigar Box",
    )


@pytest.fixture
def flat_tax_customer() -> CustomerAttributes:
    return CustomerAttributes(has_flat_tax=True, customer_tier=2, customer_id="cust-1")


@pytest.fixture
def pickup() -> OrderOptions:
    return OrderOptions()
