"""
Installment Planner

Standalone helper: how much to set aside each month to cover an amount
due by a deadline.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING

from ..tax.models import CENT, ZERO, money, to_decimal


@dataclass(frozen=True)
class InstallmentPlan:
    """Monthly savings plan towards a deadline."""

    monthly_amount: Decimal
    covered: bool
    deficit: Decimal

    def to_dict(self) -> dict:
        return {
            "monthlyAmount": float(self.monthly_amount),
            "covered": self.covered,
            "deficit": float(self.deficit),
        }


def calculate_installments(total_due, current_balance, months_until_deadline) -> InstallmentPlan:
    """Compute the equal monthly amount needed to close the gap.

    Args:
        total_due: Amount due at the deadline
        current_balance: Cash available now
        months_until_deadline: Months left; zero means the gap is due at
            once, negative values are not validated

    Returns:
        InstallmentPlan (monthly amount rounded up to the cent)
    """
    total_due = to_decimal(total_due, "total_due")
    current_balance = to_decimal(current_balance, "current_balance")
    months = to_decimal(months_until_deadline, "months_until_deadline")

    if current_balance >= total_due:
        return InstallmentPlan(monthly_amount=ZERO, covered=True, deficit=ZERO)

    deficit = total_due - current_balance
    monthly_amount = deficit / months if months != 0 else deficit

    return InstallmentPlan(
        monthly_amount=monthly_amount.quantize(CENT, rounding=ROUND_CEILING),
        covered=False,
        deficit=money(deficit),
    )
