"""
Acconti Resolver

First and second IRES/IRAP prepayments for businesses that existed
before the fiscal year.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from .models import ZERO, NormalizedInput, round_fields
from .rules import TaxRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccontiComputation:
    """IRES and IRAP installments (40% first, 60% second)."""

    ires_first: Decimal
    ires_second: Decimal
    irap_first: Decimal
    irap_second: Decimal
    is_new_business: bool
    based_on_prior_year: bool
    first_rate: Decimal

    def rounded(self) -> "AccontiComputation":
        return round_fields(self, "ires_first", "ires_second", "irap_first", "irap_second")

    def details_dict(self) -> dict:
        return {
            "isNewBusiness": self.is_new_business,
            "accontiBasedOn2024": self.based_on_prior_year,
            "accontiRate": float(self.first_rate),
        }


def resolve_acconti(
    data: NormalizedInput,
    ires_amount: Decimal,
    irap_amount: Decimal,
    irap_rate: Decimal,
    rules: TaxRules,
) -> AccontiComputation:
    """Compute the installments due during the fiscal year.

    The base for each tax comes from prior-year figures when supplied,
    otherwise it is estimated as 80% of the current year's tax.

    Args:
        data: Normalized input
        ires_amount: IRES computed for the fiscal year
        irap_amount: IRAP computed for the fiscal year
        irap_rate: Regional IRAP rate as a fraction
        rules: Regime parameters

    Returns:
        AccontiComputation (all zero for businesses started this year)
    """
    if data.is_new_business:
        logger.debug(f"No acconti: activity started in {data.start_year}")
        return AccontiComputation(
            ires_first=ZERO,
            ires_second=ZERO,
            irap_first=ZERO,
            irap_second=ZERO,
            is_new_business=True,
            based_on_prior_year=False,
            first_rate=rules.acconto_first_share,
        )

    if data.prior_profit:
        ires_base = data.prior_profit * rules.ires_standard_rate
    else:
        ires_base = ires_amount * rules.acconto_estimate_share

    if data.revenue_2024:
        irap_base = (data.revenue_2024 - data.costs_2024) * irap_rate
    else:
        irap_base = irap_amount * rules.acconto_estimate_share

    return AccontiComputation(
        ires_first=ires_base * rules.acconto_first_share,
        ires_second=ires_base * rules.acconto_second_share,
        irap_first=irap_base * rules.acconto_first_share,
        irap_second=irap_base * rules.acconto_second_share,
        is_new_business=False,
        based_on_prior_year=True,
        first_rate=rules.acconto_first_share,
    )
