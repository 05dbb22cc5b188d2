"""
Income Tax (IRES) Resolvers

Interest deductibility under the ROL cap, loss carry-forward, the
super deduction for new hires, and the IRES premiale eligibility test.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal

from .models import ZERO, NormalizedInput, round_fields
from .rules import TaxRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ROLDetails:
    """Passive interest split under the 30% ROL cap (art. 96 TUIR)."""

    rol_fiscale: Decimal
    interest_income_total: Decimal
    deductible_interest: Decimal
    non_deductible_interest: Decimal
    rol_limit: Decimal

    def rounded(self) -> "ROLDetails":
        return round_fields(
            self,
            "rol_fiscale",
            "interest_income_total",
            "deductible_interest",
            "non_deductible_interest",
            "rol_limit",
        )

    def to_dict(self) -> dict:
        return {
            "rolFiscale": float(self.rol_fiscale),
            "interessiAttiviTotali": float(self.interest_income_total),
            "interessiPassiviDeducibili": float(self.deductible_interest),
            "interessiPassiviIndeducibili": float(self.non_deductible_interest),
            "limitROL": float(self.rol_limit),
        }


@dataclass(frozen=True)
class LossUsage:
    """Tax losses consumed against current income."""

    losses_used: Decimal
    first_three_years_used: Decimal
    ordinary_used: Decimal
    remaining_losses: Decimal  # ordinary losses still available


@dataclass(frozen=True)
class PremialeDetails:
    """Outcome of the five cumulative IRES premiale conditions."""

    reserve_allocated: bool
    qualifying_investment: bool
    headcount_maintained: bool
    new_hires: bool
    no_cig: bool
    required_investment: Decimal
    actual_investment: Decimal
    required_reserve: Decimal
    minimum_new_hires: int

    @property
    def is_applicable(self) -> bool:
        return all((
            self.reserve_allocated,
            self.qualifying_investment,
            self.headcount_maintained,
            self.new_hires,
            self.no_cig,
        ))

    def rounded(self) -> "PremialeDetails":
        return round_fields(self, "required_investment", "actual_investment", "required_reserve")

    def to_dict(self) -> dict:
        return {
            "condition1_utiliAccantonati": self.reserve_allocated,
            "condition2_investimenti": self.qualifying_investment,
            "condition3_livelloOccupazionale": self.headcount_maintained,
            "condition4_nuoveAssunzioni": self.new_hires,
            "condition5_noCIG": self.no_cig,
            "requiredInvestment": float(self.required_investment),
            "actualInvestment": float(self.actual_investment),
            "requiredReserve": float(self.required_reserve),
            "incrementoMinimo": self.minimum_new_hires,
        }


def resolve_interest(
    interest_income: Decimal,
    interest_expense: Decimal,
    rol_fiscale: Decimal,
    rules: TaxRules,
) -> ROLDetails:
    """Split passive interest into deductible and non-deductible parts.

    Passive interest is first covered one-to-one by active interest; the
    excess is deductible up to 30% of the fiscal ROL.

    Args:
        interest_income: Active interest for the year
        interest_expense: Passive interest for the year
        rol_fiscale: Fiscal gross operating margin
        rules: Regime parameters

    Returns:
        ROLDetails with the split (deductible + non-deductible = expense)
    """
    covered_by_income = max(ZERO, min(interest_expense, interest_income))
    excess = interest_expense - covered_by_income

    rol_limit = rol_fiscale * rules.rol_cap
    covered_by_rol = max(ZERO, min(excess, rol_limit))

    deductible = covered_by_income + covered_by_rol
    non_deductible = interest_expense - deductible

    logger.debug(
        f"Interest split: deductible={deductible}, non_deductible={non_deductible}, "
        f"rol_limit={rol_limit}"
    )

    return ROLDetails(
        rol_fiscale=rol_fiscale,
        interest_income_total=interest_income,
        deductible_interest=deductible,
        non_deductible_interest=non_deductible,
        rol_limit=rol_limit,
    )


def apply_losses(
    taxable_income: Decimal,
    first_three_years_losses: Decimal,
    ordinary_losses: Decimal,
    rules: TaxRules,
) -> LossUsage:
    """Apply prior tax losses against current taxable income.

    Losses from the first three years of activity are used first without
    limit; ordinary losses then cover at most 80% of the remaining income.
    """
    if taxable_income <= 0:
        return LossUsage(
            losses_used=ZERO,
            first_three_years_used=ZERO,
            ordinary_used=ZERO,
            remaining_losses=ordinary_losses,
        )

    first_three_used = max(ZERO, min(first_three_years_losses, taxable_income))
    residual_income = taxable_income - first_three_used

    ordinary_limit = residual_income * rules.ordinary_losses_cap
    ordinary_used = max(ZERO, min(ordinary_losses, ordinary_limit))

    return LossUsage(
        losses_used=first_three_used + ordinary_used,
        first_three_years_used=first_three_used,
        ordinary_used=ordinary_used,
        remaining_losses=ordinary_losses - ordinary_used,
    )


def compute_super_deduction(
    new_hires_cost: Decimal,
    personnel_cost_increase: Decimal,
    rules: TaxRules,
) -> Decimal:
    """Extra 20% deduction on the cost of new permanent hires (120% total)."""
    if new_hires_cost == 0:
        return ZERO

    eligible_cost = max(ZERO, min(new_hires_cost, personnel_cost_increase))
    return eligible_cost * rules.super_deduction_rate


def check_premiale(data: NormalizedInput, rules: TaxRules) -> PremialeDetails | None:
    """Evaluate the IRES premiale conditions.

    Returns:
        PremialeDetails, or None when the fiscal year is not the one the
        reduced rate is available for
    """
    if data.fiscal_year != rules.premiale_year:
        return None

    # 1. Almeno l'80% dell'utile 2024 accantonato a riserva
    required_reserve = data.prior_profit * rules.premiale_reserve_share
    reserve_allocated = data.prior_profit > 0

    # 2. Investimenti qualificati, comunque non inferiori a 20.000
    required_investment = max(
        required_reserve * rules.premiale_investment_share_of_reserve,
        data.profit_two_years_prior * rules.premiale_investment_share_of_prior_profit,
        rules.premiale_investment_floor,
    )
    qualifying_investment = data.planned_investment >= required_investment

    # 3. ULA 2025 non inferiori alla media del triennio 2022-2024
    headcount_maintained = (
        data.average_ula_2022_2024 > 0
        and data.headcount_2024 >= data.average_ula_2022_2024
    )

    # 4. Nuove assunzioni a tempo indeterminato
    minimum_new_hires = max(
        rules.premiale_min_new_hires,
        math.ceil(data.headcount_2024 * rules.premiale_new_hires_share),
    )
    new_hires = data.new_hires_2025 >= minimum_new_hires

    # 5. Nessun ricorso alla CIG
    no_cig = not data.has_used_cig

    details = PremialeDetails(
        reserve_allocated=reserve_allocated,
        qualifying_investment=qualifying_investment,
        headcount_maintained=headcount_maintained,
        new_hires=new_hires,
        no_cig=no_cig,
        required_investment=required_investment,
        actual_investment=data.planned_investment,
        required_reserve=required_reserve,
        minimum_new_hires=minimum_new_hires,
    )
    logger.debug(f"IRES premiale check: applicable={details.is_applicable}")
    return details
