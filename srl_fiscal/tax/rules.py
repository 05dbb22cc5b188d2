"""
Tax Rules Module

Regime parameters (rates, thresholds, estimate percentages) for the
SRL fiscal regime, loaded from YAML with built-in 2025 defaults.
"""

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

RULES_FILENAME = "tax_rules.yaml"


def _default_regional_bonus() -> dict[str, Decimal]:
    return {"FRIULI": Decimal("2000")}


@dataclass(frozen=True)
class TaxRules:
    """Numeric constants of the regime."""

    default_fiscal_year: int = 2025
    default_start_year: int = 2025

    # IRES
    ires_standard_rate: Decimal = Decimal("0.24")
    ires_premiale_rate: Decimal = Decimal("0.20")

    # IRAP
    irap_default_rate_percent: Decimal = Decimal("3.9")
    irap_employee_contribution_estimate: Decimal = Decimal("0.30")
    irap_regional_bonus: dict[str, Decimal] = field(default_factory=_default_regional_bonus)

    # IVA
    vat_estimate_rate: Decimal = Decimal("0.22")

    # Interessi passivi / ROL (art. 96 TUIR)
    rol_estimate_rate: Decimal = Decimal("0.15")
    rol_cap: Decimal = Decimal("0.30")

    # Perdite fiscali
    ordinary_losses_cap: Decimal = Decimal("0.80")

    # Super deduzione nuove assunzioni
    super_deduction_rate: Decimal = Decimal("0.20")

    # IRES premiale
    premiale_year: int = 2025
    premiale_reserve_share: Decimal = Decimal("0.80")
    premiale_investment_share_of_reserve: Decimal = Decimal("0.30")
    premiale_investment_share_of_prior_profit: Decimal = Decimal("0.24")
    premiale_investment_floor: Decimal = Decimal("20000")
    premiale_new_hires_share: Decimal = Decimal("0.01")
    premiale_min_new_hires: int = 1

    # INPS
    admin_contribution_floor: Decimal = Decimal("18324")
    admin_contribution_ceiling: Decimal = Decimal("105014")
    admin_contribution_rate: Decimal = Decimal("0.24")
    employee_contribution_rate: Decimal = Decimal("0.30")

    # Acconti
    acconto_first_share: Decimal = Decimal("0.40")
    acconto_second_share: Decimal = Decimal("0.60")
    acconto_estimate_share: Decimal = Decimal("0.80")

    @classmethod
    def load(cls, config_dir: Path | str | None = None) -> "TaxRules":
        """Load rules from YAML configuration.

        Args:
            config_dir: Directory containing tax_rules.yaml (defaults to
                this module's directory)

        Returns:
            TaxRules with YAML values applied over the defaults
        """
        config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        rules_file = config_dir / RULES_FILENAME

        if not rules_file.exists():
            logger.warning(f"Rules file not found: {rules_file}, using built-in defaults")
            return cls()

        with open(rules_file) as f:
            raw = yaml.safe_load(f) or {}

        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict) -> "TaxRules":
        """Build rules from a parsed YAML mapping, keeping defaults for missing keys."""
        overrides = {}

        for (section, key), attr in _YAML_FIELDS.items():
            section_data = raw.get(section) or {}
            if key not in section_data:
                continue
            value = section_data[key]
            if attr in _INT_FIELDS:
                overrides[attr] = int(value)
            else:
                overrides[attr] = Decimal(str(value))

        bonus = (raw.get("irap") or {}).get("regional_bonus")
        if bonus is not None:
            overrides["irap_regional_bonus"] = {
                region: Decimal(str(amount)) for region, amount in bonus.items()
            }

        return replace(cls(), **overrides)


_YAML_FIELDS = {
    ("fiscal_year", "default"): "default_fiscal_year",
    ("fiscal_year", "default_start_year"): "default_start_year",
    ("ires", "standard_rate"): "ires_standard_rate",
    ("ires", "premiale_rate"): "ires_premiale_rate",
    ("irap", "default_rate_percent"): "irap_default_rate_percent",
    ("irap", "employee_contribution_estimate"): "irap_employee_contribution_estimate",
    ("vat", "estimate_rate"): "vat_estimate_rate",
    ("interest", "rol_estimate_rate"): "rol_estimate_rate",
    ("interest", "rol_cap"): "rol_cap",
    ("losses", "ordinary_cap"): "ordinary_losses_cap",
    ("super_deduction", "bonus_rate"): "super_deduction_rate",
    ("premiale", "year"): "premiale_year",
    ("premiale", "reserve_share"): "premiale_reserve_share",
    ("premiale", "investment_share_of_reserve"): "premiale_investment_share_of_reserve",
    ("premiale", "investment_share_of_prior_profit"): "premiale_investment_share_of_prior_profit",
    ("premiale", "investment_floor"): "premiale_investment_floor",
    ("premiale", "new_hires_share"): "premiale_new_hires_share",
    ("premiale", "min_new_hires"): "premiale_min_new_hires",
    ("contributions", "admin_floor"): "admin_contribution_floor",
    ("contributions", "admin_ceiling"): "admin_contribution_ceiling",
    ("contributions", "admin_rate"): "admin_contribution_rate",
    ("contributions", "employee_rate"): "employee_contribution_rate",
    ("acconti", "first_share"): "acconto_first_share",
    ("acconti", "second_share"): "acconto_second_share",
    ("acconti", "estimate_share"): "acconto_estimate_share",
}

_INT_FIELDS = {
    "default_fiscal_year",
    "default_start_year",
    "premiale_year",
    "premiale_min_new_hires",
}
