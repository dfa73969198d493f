"""
Module: checkout_kernel.selectors.flat_tax_selector
Responsibility: The authoritative TaxLookupProvider.  Reads flat-tax rules
    straight from the flat_taxes table for every lookup.
Architecture position: Kernel > Selectors.  Implements
    checkout_kernel.domain.tax_lookup.TaxLookupProvider.

Invariants enforced:
    - Freshness: queries select plain columns, never ORM entities, so the
      session identity map cannot serve a row loaded by an earlier lookup.
      Each call issues its own SELECT even when the id repeats.
    - Read-only: no add/flush/commit.

Failure modes:
    - TaxRuleNotFoundError when no row has the requested id.
    - TaxStoreUnavailableError wrapping any SQLAlchemyError; the original
      error is chained.  No retry.
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from checkout_kernel.domain.tax_lookup import FlatTaxRule, TaxLookupProvider
from checkout_kernel.exceptions import TaxRuleNotFoundError, TaxStoreUnavailableError
from checkout_kernel.logging_config import get_logger
from checkout_kernel.models.flat_tax import FlatTax
from checkout_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.flat_tax")

_RULE_COLUMNS = (
    FlatTax.id,
    FlatTax.name,
    FlatTax.tax_amount,
    FlatTax.tax_type,
    FlatTax.is_active,
)


def _to_rule(row) -> FlatTaxRule:
    return FlatTaxRule(
        id=row.id,
        label=row.name,
        amount=row.tax_amount,
        tax_type=row.tax_type,
        is_active=row.is_active,
    )


class FlatTaxSelector(BaseSelector, TaxLookupProvider):
    """Read-only access to flat-tax rules."""

    def get_flat_tax_or_throw(self, flat_tax_id: int) -> FlatTaxRule:
        """
        Read the current rule for flat_tax_id.

        Raises:
            TaxRuleNotFoundError: No rule with this id.
            TaxStoreUnavailableError: The store could not be queried.
        """
        stmt = select(*_RULE_COLUMNS).where(FlatTax.id == flat_tax_id)
        try:
            row = self.session.execute(stmt).one_or_none()
        except SQLAlchemyError as exc:
            logger.error(
                "flat_tax_lookup_failed",
                extra={"flat_tax_id": flat_tax_id},
                exc_info=True,
            )
            raise TaxStoreUnavailableError(flat_tax_id, str(exc)) from exc

        if row is None:
            logger.warning("flat_tax_not_found", extra={"flat_tax_id": flat_tax_id})
            raise TaxRuleNotFoundError(flat_tax_id)

        rule = _to_rule(row)
        logger.debug(
            "flat_tax_lookup",
            extra={
                "flat_tax_id": rule.id,
                "label": rule.label,
                "amount": str(rule.amount),
            },
        )
        return rule

    def list_flat_taxes(self) -> list[FlatTaxRule]:
        """
        Every configured rule ordered by id.

        Used by operators to confirm which amounts checkout will apply.
        """
        stmt = select(*_RULE_COLUMNS).order_by(FlatTax.id)
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise TaxStoreUnavailableError(None, str(exc)) from exc
        return [_to_rule(row) for row in rows]
