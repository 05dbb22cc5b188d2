"""
Tax Module

Regime rules, rate tables, input normalization and the individual
IRES, IRAP, VAT, INPS and acconti resolvers.
"""

from .rules import TaxRules
from .rate_tables import IRAP_RATES, VAT_REGIMES, vat_frequency
from .models import SRLTaxInput, NormalizedInput, normalize_input, parse_start_year
from .income_tax import (
    ROLDetails,
    LossUsage,
    PremialeDetails,
    resolve_interest,
    apply_losses,
    compute_super_deduction,
    check_premiale,
)
from .irap import IrapComputation, resolve_irap, irap_rate_for
from .vat import VATComputation, VATDeadline, resolve_vat, build_vat_deadlines
from .contributions import ContributionsComputation, resolve_contributions
from .acconti import AccontiComputation, resolve_acconti

__all__ = [
    # Rules and reference data
    "TaxRules",
    "IRAP_RATES",
    "VAT_REGIMES",
    "vat_frequency",
    # Input
    "SRLTaxInput",
    "NormalizedInput",
    "normalize_input",
    "parse_start_year",
    # IRES
    "ROLDetails",
    "LossUsage",
    "PremialeDetails",
    "resolve_interest",
    "apply_losses",
    "compute_super_deduction",
    "check_premiale",
    # IRAP
    "IrapComputation",
    "resolve_irap",
    "irap_rate_for",
    # IVA
    "VATComputation",
    "VATDeadline",
    "resolve_vat",
    "build_vat_deadlines",
    # INPS
    "ContributionsComputation",
    "resolve_contributions",
    # Acconti
    "AccontiComputation",
    "resolve_acconti",
]
