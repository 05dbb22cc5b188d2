"""
IRAP Resolver

Regional production tax: value-of-production base, specific deductions
and the regional rate.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from .models import ZERO, NormalizedInput, round_fields
from .rate_tables import IRAP_RATES
from .rules import TaxRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IrapComputation:
    """IRAP computation result."""

    base: Decimal
    deductions: Decimal
    taxable_income: Decimal
    rate: Decimal
    amount: Decimal

    def rounded(self) -> "IrapComputation":
        return round_fields(self, "base", "deductions", "taxable_income", "amount")


def irap_rate_for(region: str, rules: TaxRules) -> Decimal:
    """Regional IRAP rate as a fraction, ordinary rate for unknown regions."""
    percent = IRAP_RATES.get(region)
    if percent is None:
        logger.warning(
            f"Unknown region {region!r}, using ordinary IRAP rate "
            f"{rules.irap_default_rate_percent}%"
        )
        return rules.irap_default_rate_percent / 100
    return Decimal(str(percent)) / 100


def compute_irap_deductions(data: NormalizedInput, rules: TaxRules) -> Decimal:
    """Estimated employee social contributions plus any regional bonus."""
    deductions = data.employee_costs * rules.irap_employee_contribution_estimate
    deductions += rules.irap_regional_bonus.get(data.region, ZERO)
    return deductions


def resolve_irap(data: NormalizedInput, rules: TaxRules) -> IrapComputation:
    """Compute IRAP for the fiscal year.

    Personnel costs are not deductible for IRAP, so they are added back
    into the base.
    """
    base = data.revenue - (data.costs - data.employee_costs)
    deductions = compute_irap_deductions(data, rules)
    taxable_income = max(ZERO, base - deductions)
    rate = irap_rate_for(data.region, rules)

    return IrapComputation(
        base=base,
        deductions=deductions,
        taxable_income=taxable_income,
        rate=rate,
        amount=taxable_income * rate,
    )
