"""
Tax Input Models

Input record for an SRL tax calculation, plus the normalization step that
resolves every optional field to a concrete value before any resolver runs.
"""

import logging
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .rules import TaxRules

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")

DATE_FORMAT = "%d/%m/%Y"


def to_decimal(value, field_name: str = "value") -> Decimal:
    """Convert a numeric input to Decimal (None becomes zero)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Invalid numeric value for {field_name}: {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Invalid numeric value for {field_name}: {value!r}") from None

    if not result.is_finite():
        raise ValueError(f"Invalid numeric value for {field_name}: {value!r}")
    return result


def money(value: Decimal) -> Decimal:
    """Round a currency amount to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_fields(record, *names: str):
    """Copy a dataclass record with the named currency fields rounded to cents."""
    return replace(record, **{name: money(getattr(record, name)) for name in names})


def format_date(value: date) -> str:
    """Format a date as DD/MM/YYYY."""
    return value.strftime(DATE_FORMAT)


def parse_start_year(start_date: str | None, default: int) -> int:
    """Extract the year from a start date string.

    Accepts ISO dates (optionally with a time part), DD/MM/YYYY and bare
    years. Unparseable values fall back to the default year.
    """
    if not start_date:
        return default

    text = str(start_date).strip()

    if re.fullmatch(r"\d{4}", text):
        return int(text)

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).year
    except ValueError:
        pass

    try:
        return datetime.strptime(text, DATE_FORMAT).year
    except ValueError:
        logger.warning(f"Unparseable start date {start_date!r}, using {default}")
        return default


class SRLTaxInput(BaseModel):
    """Snapshot of financial and organizational data for one calculation.

    Fields accept their snake_case names or the camelCase keys posted by
    the form front end (e.g. ``employeeCosts``, ``utile2024``). Blank or
    null values count as missing.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    revenue: Decimal = ZERO
    costs: Decimal = ZERO
    employees: int = 0
    employee_costs: Decimal = Field(ZERO, alias="employeeCosts")
    admin_salary: Decimal = Field(ZERO, alias="adminSalary")
    region: str = ""
    business_sector: str = Field("", alias="businessSector")  # not used by the 2025 rules
    vat_regime: str = Field("TRIMESTRALE", alias="vatRegime")
    has_vat_debt: bool = Field(False, alias="hasVatDebt")
    vat_debt: Decimal = Field(ZERO, alias="vatDebt")
    current_balance: Decimal = Field(ZERO, alias="currentBalance")

    # Data di inizio attività
    start_date: str | None = Field(None, alias="startDate")
    start_year: int | None = Field(None, alias="startYear")

    # IVA dettagliata
    vat_on_sales: Decimal | None = Field(None, alias="vatOnSales")
    vat_on_purchases: Decimal | None = Field(None, alias="vatOnPurchases")

    fiscal_year: int | None = Field(None, alias="fiscalYear")

    # Dati 2024
    revenue_2024: Decimal | None = Field(None, alias="revenue2024")
    costs_2024: Decimal | None = Field(None, alias="costs2024")

    # IRES premiale
    prior_profit: Decimal | None = Field(None, alias="utile2024")
    profit_two_years_prior: Decimal | None = Field(None, alias="utile2023")
    planned_investment: Decimal | None = Field(None, alias="investimentiPrevisti")
    average_ula_2022_2024: Decimal | None = Field(None, alias="mediaULA2022_2024")
    headcount_2024: Decimal | None = Field(None, alias="dipendentiTempo2024")
    new_hires_2025: Decimal | None = Field(None, alias="nuoveAssunzioni2025")
    has_used_cig: bool = Field(False, alias="hasUsedCIG")

    # ROL e interessi
    interest_income: Decimal | None = Field(None, alias="interessiAttivi")
    interest_expense: Decimal | None = Field(None, alias="interessiPassivi")
    rol_fiscale: Decimal | None = Field(None, alias="rolFiscale")
    ordinary_losses: Decimal | None = Field(None, alias="perditePregresseOrdinarie")
    first_three_years_losses: Decimal | None = Field(None, alias="perditePrimi3Esercizi")

    # Super deduzione
    new_hires_cost: Decimal | None = Field(None, alias="costoNuoveAssunzioni")
    personnel_cost_increase: Decimal | None = Field(None, alias="incrementoCostoPersonale")

    @field_validator(
        "revenue", "costs", "employees", "employee_costs", "admin_salary",
        "region", "business_sector", "vat_regime", "has_vat_debt", "vat_debt",
        "current_balance", "has_used_cig",
        mode="before",
    )
    @classmethod
    def blank_as_default(cls, value, info: ValidationInfo):
        if _is_blank(value):
            return cls.model_fields[info.field_name].default
        return value

    @field_validator(
        "start_date", "start_year", "vat_on_sales", "vat_on_purchases", "fiscal_year",
        "revenue_2024", "costs_2024", "prior_profit", "profit_two_years_prior",
        "planned_investment", "average_ula_2022_2024", "headcount_2024",
        "new_hires_2025", "interest_income", "interest_expense", "rol_fiscale",
        "ordinary_losses", "first_three_years_losses", "new_hires_cost",
        "personnel_cost_increase",
        mode="before",
    )
    @classmethod
    def blank_as_missing(cls, value):
        return None if _is_blank(value) else value

    @classmethod
    def from_dict(cls, data: dict) -> "SRLTaxInput":
        """Build an input record from a form payload.

        Raises:
            pydantic.ValidationError: If a numeric field cannot be read as
                a number (a ``ValueError`` subclass)
        """
        return cls.model_validate(data)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass(frozen=True)
class NormalizedInput:
    """Input with every optional field resolved to a concrete value."""

    revenue: Decimal
    costs: Decimal
    employees: int
    employee_costs: Decimal
    admin_salary: Decimal
    region: str
    business_sector: str
    vat_regime: str
    vat_debt: Decimal  # zero unless a positive debt is flagged
    current_balance: Decimal
    fiscal_year: int
    start_year: int
    vat_on_sales: Decimal
    vat_on_purchases: Decimal
    revenue_2024: Decimal
    costs_2024: Decimal
    prior_profit: Decimal
    profit_two_years_prior: Decimal
    planned_investment: Decimal
    average_ula_2022_2024: Decimal
    headcount_2024: Decimal
    new_hires_2025: Decimal
    has_used_cig: bool
    interest_income: Decimal
    interest_expense: Decimal
    rol_fiscale: Decimal
    ordinary_losses: Decimal
    first_three_years_losses: Decimal
    new_hires_cost: Decimal
    personnel_cost_increase: Decimal

    @property
    def is_new_business(self) -> bool:
        """Activity started in the fiscal year itself (no prior-year baseline)."""
        return self.start_year >= self.fiscal_year


def _estimate(value, estimate: Decimal, field_name: str) -> Decimal:
    # Unfilled form fields arrive as zero as often as missing
    value = to_decimal(value, field_name)
    if value == 0:
        return estimate
    return value


def normalize_input(data: SRLTaxInput, rules: TaxRules) -> NormalizedInput:
    """Resolve defaults and estimates for every optional field."""
    revenue = to_decimal(data.revenue, "revenue")
    costs = to_decimal(data.costs, "costs")

    fiscal_year = data.fiscal_year or rules.default_fiscal_year
    start_year = data.start_year or parse_start_year(data.start_date, rules.default_start_year)

    vat_debt = to_decimal(data.vat_debt, "vat_debt")
    if not data.has_vat_debt or vat_debt <= 0:
        vat_debt = ZERO

    return NormalizedInput(
        revenue=revenue,
        costs=costs,
        employees=int(data.employees or 0),
        employee_costs=to_decimal(data.employee_costs, "employee_costs"),
        admin_salary=to_decimal(data.admin_salary, "admin_salary"),
        region=data.region or "",
        business_sector=data.business_sector or "",
        vat_regime=data.vat_regime or "",
        vat_debt=vat_debt,
        current_balance=to_decimal(data.current_balance, "current_balance"),
        fiscal_year=fiscal_year,
        start_year=start_year,
        vat_on_sales=_estimate(data.vat_on_sales, revenue * rules.vat_estimate_rate, "vat_on_sales"),
        vat_on_purchases=_estimate(data.vat_on_purchases, costs * rules.vat_estimate_rate, "vat_on_purchases"),
        revenue_2024=to_decimal(data.revenue_2024, "revenue_2024"),
        costs_2024=to_decimal(data.costs_2024, "costs_2024"),
        prior_profit=to_decimal(data.prior_profit, "prior_profit"),
        profit_two_years_prior=to_decimal(data.profit_two_years_prior, "profit_two_years_prior"),
        planned_investment=to_decimal(data.planned_investment, "planned_investment"),
        average_ula_2022_2024=to_decimal(data.average_ula_2022_2024, "average_ula_2022_2024"),
        headcount_2024=to_decimal(data.headcount_2024, "headcount_2024"),
        new_hires_2025=to_decimal(data.new_hires_2025, "new_hires_2025"),
        has_used_cig=bool(data.has_used_cig),
        interest_income=to_decimal(data.interest_income, "interest_income"),
        interest_expense=to_decimal(data.interest_expense, "interest_expense"),
        rol_fiscale=_estimate(data.rol_fiscale, revenue * rules.rol_estimate_rate, "rol_fiscale"),
        ordinary_losses=to_decimal(data.ordinary_losses, "ordinary_losses"),
        first_three_years_losses=to_decimal(data.first_three_years_losses, "first_three_years_losses"),
        new_hires_cost=to_decimal(data.new_hires_cost, "new_hires_cost"),
        personnel_cost_increase=to_decimal(data.personnel_cost_increase, "personnel_cost_increase"),
    )
