"""
Structured JSON logging for checkout calculations.

Every record is one JSON object per line.  Records carry the checkout
identifiers bound with ``LogContext`` (correlation, order, customer, actor,
trace), any ``extra=`` fields, and for failures an ``error`` object built
from the exception's structured attributes.

Checkout values may be passed to ``extra=`` as they are: ``Money`` renders
as ``{"amount": "18.00", "currency": "USD"}``, and anything with a
``to_dict()`` (a ``CheckoutBreakdown``, a snapshot) renders through it.

Usage::

    logger = get_logger("engines.checkout")
    with LogContext.bind(order_id="ord-17", customer_id="cust-1"):
        logger.info("checkout_calculated", extra={"final_total": breakdown.final_total})
"""

__all__ = [
    "CONTEXT_FIELDS",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, Mapping
from uuid import UUID

from checkout_kernel.domain.values import Money

CONTEXT_FIELDS: tuple[str, ...] = (
    "correlation_id",
    "order_id",
    "customer_id",
    "actor_id",
    "trace_id",
)

_context: ContextVar[Mapping[str, str]] = ContextVar("checkout_log_context", default={})


def _checked(fields: Mapping[str, Any]) -> dict[str, str]:
    unknown = set(fields) - set(CONTEXT_FIELDS)
    if unknown:
        raise TypeError(f"Unknown log context field(s): {', '.join(sorted(unknown))}")
    return {name: str(value) for name, value in fields.items() if value is not None}


class LogContext:
    """
    Checkout identifiers attached to every record logged in this context.

    Backed by a single ContextVar holding an immutable snapshot, so
    concurrent requests (threads or tasks) never see each other's ids.
    None values are skipped rather than clearing an existing field.
    """

    @staticmethod
    def set(**fields: Any) -> None:
        merged = dict(_context.get())
        merged.update(_checked(fields))
        _context.set(merged)

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_context.get())

    @staticmethod
    def clear() -> None:
        _context.set({})

    @staticmethod
    @contextmanager
    def bind(**fields: Any) -> Iterator[dict[str, str]]:
        """Add fields for the duration of the block, then restore the outer context."""
        merged = dict(_context.get())
        merged.update(_checked(fields))
        token = _context.set(merged)
        try:
            yield dict(merged)
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# JSON rendering
# ---------------------------------------------------------------------------

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


def _jsonable(value: Any) -> Any:
    """Fallback for json.dumps: checkout values first, then plain scalars."""
    if isinstance(value, Money):
        return {"amount": str(value.amount), "currency": value.currency}
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return repr(value)


def _error_fields(exc: BaseException) -> dict[str, Any]:
    fields = {
        key: val
        for key, val in vars(exc).items()
        if not key.startswith("_") and key != "code"
    }
    error: dict[str, Any] = {"type": type(exc).__name__, "message": str(exc)}
    code = getattr(exc, "code", None)
    if code is not None:
        error["code"] = code
    if fields:
        error["fields"] = fields
    return error


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: header, context ids, extras, error."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_context.get())
        payload.update(
            (key, val)
            for key, val in vars(record).items()
            if key not in _STDLIB_KEYS and key not in payload
        )
        if record.exc_info and record.exc_info[1] is not None:
            payload["error"] = _error_fields(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_jsonable)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_LOGGER_PREFIX = "checkout_kernel"

_configured = False
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Logger under the checkout_kernel namespace, e.g. ``checkout_kernel.engines.checkout``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach one JSON handler to the ``checkout_kernel`` logger.

    Only the first call in a process has any effect.  Records do not
    propagate to the root logger.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.setLevel(level)
    logger.propagate = False

    out = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    out.setFormatter(StructuredFormatter())
    logger.addHandler(out)


def reset_logging() -> None:
    """Drop the JSON handlers so configure_logging() can run again (tests only)."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    for h in list(logger.handlers):
        if isinstance(h.formatter, StructuredFormatter):
            logger.removeHandler(h)
    logger.setLevel(logging.WARNING)
