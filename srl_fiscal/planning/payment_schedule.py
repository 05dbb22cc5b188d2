"""
Payment Schedule Module

Replays upcoming fiscal events together with monthly set-aside deposits,
tracking the running cash balance and any shortfall per payment.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..tax.models import ZERO, format_date, money
from .fiscal_calendar import EventCategory, FiscalEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleEntry:
    """One row of the payment schedule, amounts rounded to cents."""

    due_date: date
    amount: Decimal
    type: str
    category: EventCategory
    description: str
    previous_balance: Decimal
    new_balance: Decimal
    deficit: Decimal
    is_income: bool
    required_payment: Decimal

    def to_dict(self) -> dict:
        return {
            "date": format_date(self.due_date),
            "amount": float(self.amount),
            "type": self.type,
            "category": self.category.value,
            "description": self.description,
            "previousBalance": float(self.previous_balance),
            "newBalance": float(self.new_balance),
            "deficit": float(self.deficit),
            "isIncome": self.is_income,
            "requiredPayment": float(self.required_payment),
        }


def monthly_deposit_events(
    monthly_accrual: Decimal,
    fiscal_year: int,
    today: date,
) -> list[FiscalEvent]:
    """Set-aside deposits on the first of each remaining month of the year."""
    events = []
    for month in range(1, 13):
        deposit_date = date(fiscal_year, month, 1)
        if deposit_date < today:
            continue
        events.append(FiscalEvent(
            due_date=deposit_date,
            amount=monthly_accrual,
            type=f"Versamento Mensile {month}",
            category=EventCategory.ACCUMULO,
            description="Accantonamento mensile consigliato",
        ))
    return events


def build_payment_schedule(
    calendar: list[FiscalEvent],
    current_balance: Decimal,
    monthly_accrual: Decimal,
    fiscal_year: int,
    today: date | None = None,
) -> list[ScheduleEntry]:
    """Build the payment schedule from today onwards.

    Past-due calendar events are left out. A payment larger than the
    available balance records the shortfall as the required payment and
    resets the balance to zero.

    Args:
        calendar: Fiscal events (any order)
        current_balance: Cash available today
        monthly_accrual: Recommended monthly set-aside
        fiscal_year: Fiscal year
        today: Processing date (defaults to the current date)

    Returns:
        Schedule rows sorted by date
    """
    if today is None:
        today = date.today()

    deposits = monthly_deposit_events(monthly_accrual, fiscal_year, today)
    payments = [event for event in calendar if event.due_date >= today]

    events = [(event, True) for event in deposits] + [(event, False) for event in payments]
    events.sort(key=lambda item: item[0].due_date)

    # Rows are rounded independently; the next row starts from the rounded balance
    running_balance = money(current_balance)
    schedule = []

    for event, is_income in events:
        amount = money(event.amount)
        previous_balance = running_balance

        if is_income:
            running_balance += amount
            required_payment = amount
        else:
            balance_after_payment = running_balance - amount
            if balance_after_payment < 0:
                required_payment = abs(balance_after_payment)
                running_balance = ZERO
            else:
                required_payment = ZERO
                running_balance = balance_after_payment

        # Always zero after the clamp above; kept as part of the row contract
        deficit = abs(running_balance) if running_balance < 0 else ZERO

        schedule.append(ScheduleEntry(
            due_date=event.due_date,
            amount=amount,
            type=event.type,
            category=event.category,
            description=event.description,
            previous_balance=previous_balance,
            new_balance=running_balance,
            deficit=deficit,
            is_income=is_income,
            required_payment=required_payment,
        ))

    shortfalls = [row for row in schedule if not row.is_income and row.required_payment > 0]
    if shortfalls:
        logger.info(
            f"{len(shortfalls)} payment(s) not covered by the balance, "
            f"first on {format_date(shortfalls[0].due_date)}"
        )

    return schedule
