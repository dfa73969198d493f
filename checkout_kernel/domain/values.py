"""
Values -- Immutable, self-validating monetary value object.

Responsibility:
    Provides Money, the only representation of a monetary amount that leaves
    the checkout engines, and the cent conversions the engines use for their
    internal integer arithmetic.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Money amounts are always Decimal, never float.
    - Cent conversion rounds ROUND_HALF_UP at two decimal places, once, at
      the input boundary.  Output Money is always built from an integer cent
      count, so it never carries accumulated rounding error.

Failure modes:
    - TypeError when constructed from a float.
    - ValueError on unparseable amounts or mixed-currency arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

DEFAULT_CURRENCY = "USD"

CENTS_PER_UNIT = 100
_CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> int:
    """
    Convert a decimal currency amount to whole cents.

    Preconditions:
        - amount is a Decimal (floats are rejected upstream).

    Postconditions:
        - Returns round_half_up(amount * 100) as an int.
    """
    return int((amount * CENTS_PER_UNIT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert whole cents to a two-place Decimal (e.g. 1050 -> 10.50)."""
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(_CENT)


def parse_amount(value: Decimal | str | int) -> Decimal:
    """
    Parse a monetary input into Decimal.

    Raises:
        TypeError: If value is a float (binary floats cannot represent cents).
        ValueError: If value cannot be parsed.
    """
    if isinstance(value, float):
        raise TypeError(f"Monetary amounts must not be float: {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {value!r}") from e


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its currency code.  Arithmetic refuses to
        mix currencies.

    Guarantees:
        - Immutable and hashable.
        - amount is always a Decimal.
        - currency is an uppercase three-letter code.

    Non-goals:
        - No currency conversion and no non-US tax handling.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", parse_amount(self.amount))
        code = self.currency.upper().strip() if self.currency else ""
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Invalid currency code: {self.currency!r}")
        object.__setattr__(self, "currency", code)

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str = DEFAULT_CURRENCY) -> Money:
        """Factory method for creating Money from a Decimal, str, or int."""
        return cls(amount=parse_amount(amount), currency=currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls.from_cents(0, currency)

    @classmethod
    def from_cents(cls, cents: int, currency: str = DEFAULT_CURRENCY) -> Money:
        """Build Money from an integer cent count (the engines' output path)."""
        if not isinstance(cents, int) or isinstance(cents, bool):
            raise TypeError(f"cents must be int, got {type(cents).__name__}")
        return cls(amount=from_cents(cents), currency=currency)

    @property
    def cents(self) -> int:
        """Amount in whole cents, rounded half-up."""
        return to_cents(self.amount)

    @property
    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    @property
    def is_negative(self) -> bool:
        return self.amount < Decimal("0")

    def _check_currency(self, other: Money, op: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {op} Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"
