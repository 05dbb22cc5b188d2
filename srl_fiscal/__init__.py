"""
SRL Fiscal Planner

Annual IRES/IRAP/VAT/INPS computation and payment planning for Italian
limited-liability companies.
"""

from .calculator import SRLTaxCalculator, SRLTaxResult
from .tax import SRLTaxInput, TaxRules
from .planning import calculate_installments

__version__ = "1.0.0"

__all__ = [
    "SRLTaxCalculator",
    "SRLTaxResult",
    "SRLTaxInput",
    "TaxRules",
    "calculate_installments",
]
