"""
Fiscal Calendar Module

Merges VAT deadlines, IRES/IRAP acconti and INPS quarterly contributions
into one chronologically sorted list of fiscal events.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from ..tax.acconti import AccontiComputation
from ..tax.models import format_date, round_fields
from ..tax.vat import VATDeadline


class EventCategory(Enum):
    """Categories of calendar and schedule events."""
    IRES = "IRES"
    IRAP = "IRAP"
    IVA = "IVA"
    INPS = "INPS"
    ACCUMULO = "ACCUMULO"  # monthly set-aside deposit


@dataclass(frozen=True)
class FiscalEvent:
    """Single dated payment obligation."""

    due_date: date
    amount: Decimal
    type: str
    category: EventCategory
    description: str

    def rounded(self) -> "FiscalEvent":
        return round_fields(self, "amount")

    def to_dict(self) -> dict:
        return {
            "date": format_date(self.due_date),
            "amount": float(self.amount),
            "type": self.type,
            "category": self.category.value,
            "description": self.description,
        }


def _acconto_events(
    category: EventCategory,
    first: Decimal,
    second: Decimal,
    fiscal_year: int,
) -> tuple[list[FiscalEvent], list[FiscalEvent]]:
    tax = category.value
    first_events = []
    second_events = []

    if first > 0:
        first_events.append(FiscalEvent(
            due_date=date(fiscal_year, 6, 30),
            amount=first,
            type=f"{tax} I Acconto {fiscal_year}",
            category=category,
            description=f"Primo acconto {tax} {fiscal_year} (40% imposta {fiscal_year - 1})",
        ))

    if second > 0:
        second_events.append(FiscalEvent(
            due_date=date(fiscal_year, 11, 30),
            amount=second,
            type=f"{tax} II Acconto {fiscal_year}",
            category=category,
            description=f"Secondo acconto {tax} {fiscal_year} (60% imposta {fiscal_year - 1})",
        ))

    return first_events, second_events


def _contribution_events(total: Decimal, fiscal_year: int) -> list[FiscalEvent]:
    quarterly = total / 4
    if quarterly <= 0:
        return []

    due_dates = (
        ("I", date(fiscal_year, 5, 16)),
        ("II", date(fiscal_year, 8, 20)),
        ("III", date(fiscal_year, 11, 16)),
        ("IV", date(fiscal_year + 1, 2, 16)),
    )

    return [
        FiscalEvent(
            due_date=due_date,
            amount=quarterly,
            type=f"INPS {quarter} Trim {fiscal_year}",
            category=EventCategory.INPS,
            description=f"Contributi INPS anno {fiscal_year} - {quarter} trimestre",
        )
        for quarter, due_date in due_dates
    ]


def build_fiscal_calendar(
    vat_deadlines: list[VATDeadline],
    acconti: AccontiComputation,
    contributions_total: Decimal,
    fiscal_year: int,
) -> list[FiscalEvent]:
    """Build the fiscal calendar for the year.

    Args:
        vat_deadlines: VAT settlement deadlines
        acconti: IRES/IRAP installments
        contributions_total: Annual INPS contributions
        fiscal_year: Fiscal year

    Returns:
        Events sorted by date; events on the same date keep build order
        (VAT, IRES, IRAP, INPS)
    """
    calendar = [
        FiscalEvent(
            due_date=deadline.due_date,
            amount=deadline.amount,
            type=deadline.type,
            category=EventCategory.IVA,
            description=deadline.type,
        )
        for deadline in vat_deadlines
    ]

    # Acconti solo per attività già esistenti
    if not acconti.is_new_business:
        ires_first, ires_second = _acconto_events(
            EventCategory.IRES, acconti.ires_first, acconti.ires_second, fiscal_year
        )
        irap_first, irap_second = _acconto_events(
            EventCategory.IRAP, acconti.irap_first, acconti.irap_second, fiscal_year
        )
        calendar.extend(ires_first + irap_first + ires_second + irap_second)

    calendar.extend(_contribution_events(contributions_total, fiscal_year))

    return sorted(calendar, key=lambda event: event.due_date)
