"""
VAT Resolver

Nets output against input VAT, adds carried debt and expands the annual
liability into monthly or quarterly settlement deadlines.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal

from .models import ZERO, NormalizedInput, format_date, round_fields
from .rate_tables import MONTH_NAMES, VAT_MONTHLY, VAT_QUARTERLY, vat_frequency

logger = logging.getLogger(__name__)

# Scadenze fisse liquidazione trimestrale: (giorno, mese, anni dopo l'esercizio)
QUARTERLY_DUE_DATES = (
    (16, 4, 0),
    (16, 7, 0),
    (16, 10, 0),
    (16, 1, 1),
)


@dataclass(frozen=True)
class VATDeadline:
    """Single VAT settlement due date."""

    due_date: date
    amount: Decimal
    type: str

    def to_dict(self) -> dict:
        return {
            "date": format_date(self.due_date),
            "amount": float(self.amount),
            "type": self.type,
        }


@dataclass(frozen=True)
class VATComputation:
    """Annual VAT position."""

    vat_on_sales: Decimal
    vat_on_purchases: Decimal
    vat_amount: Decimal
    frequency: int
    vat_quarterly: Decimal
    deadlines: list[VATDeadline] = field(default_factory=list)

    def rounded(self) -> "VATComputation":
        rounded = round_fields(self, "vat_on_sales", "vat_on_purchases", "vat_amount", "vat_quarterly")
        return replace(rounded, deadlines=[round_fields(d, "amount") for d in self.deadlines])


def build_vat_deadlines(
    vat_regime: str,
    total_vat: Decimal,
    fiscal_year: int,
) -> list[VATDeadline]:
    """Expand the annual VAT liability into settlement deadlines.

    Args:
        vat_regime: MENSILE or TRIMESTRALE
        total_vat: Annual VAT due
        fiscal_year: Fiscal year

    Returns:
        Deadlines in chronological order; empty for unrecognized regimes
    """
    deadlines = []

    if vat_regime == VAT_QUARTERLY:
        quarterly_amount = total_vat / 4
        for quarter, (day, month, year_offset) in enumerate(QUARTERLY_DUE_DATES, start=1):
            deadlines.append(VATDeadline(
                due_date=date(fiscal_year + year_offset, month, day),
                amount=quarterly_amount,
                type=f"IVA Q{quarter} {fiscal_year}",
            ))

    elif vat_regime == VAT_MONTHLY:
        monthly_amount = total_vat / 12
        for month in range(1, 13):
            # Versamento il 16 del mese successivo
            payment_month = 1 if month == 12 else month + 1
            payment_year = fiscal_year + 1 if month == 12 else fiscal_year
            deadlines.append(VATDeadline(
                due_date=date(payment_year, payment_month, 16),
                amount=monthly_amount,
                type=f"IVA {MONTH_NAMES[month - 1]} {fiscal_year}",
            ))

    else:
        logger.warning(f"Unrecognized VAT regime {vat_regime!r}: no deadlines generated")

    return deadlines


def resolve_vat(data: NormalizedInput) -> VATComputation:
    """Compute the annual VAT position and its deadlines."""
    vat_amount = max(ZERO, data.vat_on_sales - data.vat_on_purchases)
    vat_amount += data.vat_debt

    frequency = vat_frequency(data.vat_regime)
    vat_quarterly = vat_amount / (Decimal(frequency) / 4)

    deadlines = build_vat_deadlines(data.vat_regime, vat_amount, data.fiscal_year)
    logger.debug(f"VAT due {vat_amount} in {len(deadlines)} deadlines")

    return VATComputation(
        vat_on_sales=data.vat_on_sales,
        vat_on_purchases=data.vat_on_purchases,
        vat_amount=vat_amount,
        frequency=frequency,
        vat_quarterly=vat_quarterly,
        deadlines=deadlines,
    )
