"""
Pytest configuration and fixtures for SRL fiscal planner tests.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from srl_fiscal.tax.models import SRLTaxInput, normalize_input
from srl_fiscal.tax.rules import TaxRules

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rules() -> TaxRules:
    """Return the shipped 2025 regime rules."""
    return TaxRules.load()


@pytest.fixture
def processing_date() -> date:
    """Fixed 'today' before every 2025 deadline."""
    return date(2025, 1, 1)


@pytest.fixture
def lazio_input() -> SRLTaxInput:
    """Established SRL in Lazio, quarterly VAT, no preferential inputs."""
    return SRLTaxInput(
        revenue=Decimal("500000"),
        costs=Decimal("300000"),
        employees=2,
        employee_costs=Decimal("80000"),
        admin_salary=Decimal("40000"),
        region="LAZIO",
        business_sector="servizi",
        vat_regime="TRIMESTRALE",
        has_vat_debt=False,
        vat_debt=Decimal("0"),
        current_balance=Decimal("50000"),
        fiscal_year=2025,
        start_year=2023,
    )


@pytest.fixture
def premiale_input() -> SRLTaxInput:
    """Input meeting all five IRES premiale conditions."""
    return SRLTaxInput(
        revenue=Decimal("500000"),
        costs=Decimal("300000"),
        employees=5,
        employee_costs=Decimal("80000"),
        admin_salary=Decimal("40000"),
        region="LAZIO",
        vat_regime="TRIMESTRALE",
        fiscal_year=2025,
        start_year=2020,
        prior_profit=Decimal("100000"),
        planned_investment=Decimal("25000"),
        average_ula_2022_2024=Decimal("5"),
        headcount_2024=Decimal("5"),
        new_hires_2025=Decimal("1"),
        has_used_cig=False,
    )


@pytest.fixture
def normalize(rules: TaxRules):
    """Return a helper normalizing an input with the shipped rules."""
    def _normalize(data: SRLTaxInput):
        return normalize_input(data, rules)
    return _normalize
