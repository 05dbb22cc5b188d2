"""
SRL Tax Calculator Module

Computes the annual IRES, IRAP, VAT and INPS obligations of an SRL,
the acconti due during the year, the fiscal calendar and a payment
schedule against the current cash balance.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path

from .planning.fiscal_calendar import FiscalEvent, build_fiscal_calendar
from .planning.payment_schedule import ScheduleEntry, build_payment_schedule
from .tax.acconti import AccontiComputation, resolve_acconti
from .tax.contributions import ContributionsComputation, resolve_contributions
from .tax.income_tax import (
    LossUsage,
    PremialeDetails,
    ROLDetails,
    apply_losses,
    check_premiale,
    compute_super_deduction,
    resolve_interest,
)
from .tax.irap import IrapComputation, resolve_irap
from .tax.models import ZERO, SRLTaxInput, format_date, money, normalize_input
from .tax.rules import TaxRules
from .tax.vat import VATComputation, VATDeadline, resolve_vat

logger = logging.getLogger(__name__)


@dataclass
class SRLTaxResult:
    """Complete SRL tax computation, amounts rounded to cents."""

    fiscal_year: int

    # Redditi
    gross_profit: Decimal
    taxable_income: Decimal
    taxable_income_after_losses: Decimal

    # IRES
    ires_amount: Decimal
    ires_rate: Decimal
    is_ires_premiale_applicable: bool
    premiale_details: PremialeDetails | None

    # IRAP
    irap_base: Decimal
    irap_deductions: Decimal
    irap_taxable_income: Decimal
    irap_amount: Decimal
    irap_rate: Decimal

    # Perdite, super deduzione, interessi
    losses_used: Decimal
    remaining_losses: Decimal
    super_deduction_amount: Decimal
    rol_details: ROLDetails

    # IVA
    vat_on_sales: Decimal
    vat_on_purchases: Decimal
    vat_amount: Decimal
    vat_quarterly: Decimal
    vat_deadlines: list[VATDeadline]

    # INPS
    inps_admin: Decimal
    inps_employees: Decimal
    inps_total_amount: Decimal

    # Totali
    total_taxes: Decimal
    total_due: Decimal

    # Acconti
    ires_first_acconto: Decimal
    ires_second_acconto: Decimal
    irap_first_acconto: Decimal
    irap_second_acconto: Decimal
    acconti_details: AccontiComputation

    # Pianificazione
    monthly_accrual: Decimal
    quarterly_payments: Decimal
    calendar: list[FiscalEvent] = field(default_factory=list)
    payment_schedule: list[ScheduleEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Export with the camelCase keys used by the form front end.

        ``iresPremialeDetails`` is filled whenever the preferential-rate
        conditions were evaluated (fiscal year 2025), eligible or not, so
        callers can see which condition failed. It is ``None`` for other
        years; check ``isIresPremialeApplicable`` for eligibility.
        """
        return {
            "fiscalYear": self.fiscal_year,
            "grossProfit": float(self.gross_profit),
            "taxableIncome": float(self.taxable_income),
            "taxableIncomeAfterLosses": float(self.taxable_income_after_losses),
            "iresAmount": float(self.ires_amount),
            "iresRate": float(self.ires_rate),
            "isIresPremialeApplicable": self.is_ires_premiale_applicable,
            "iresPremialeDetails": (
                self.premiale_details.to_dict() if self.premiale_details else None
            ),
            "irapBase": float(self.irap_base),
            "irapDeductions": float(self.irap_deductions),
            "irapTaxableIncome": float(self.irap_taxable_income),
            "irapAmount": float(self.irap_amount),
            "irapRate": float(self.irap_rate),
            "lossesUsed": float(self.losses_used),
            "remainingLosses": float(self.remaining_losses),
            "superDeductionAmount": float(self.super_deduction_amount),
            "rolDetails": self.rol_details.to_dict(),
            "vatOnSales": float(self.vat_on_sales),
            "vatOnPurchases": float(self.vat_on_purchases),
            "vatAmount": float(self.vat_amount),
            "vatQuarterly": float(self.vat_quarterly),
            "vatDeadlines": [d.to_dict() for d in self.vat_deadlines],
            "inpsAdmin": float(self.inps_admin),
            "inpsEmployees": float(self.inps_employees),
            "inpsTotalAmount": float(self.inps_total_amount),
            "totalTaxes": float(self.total_taxes),
            "totalDue": float(self.total_due),
            "iresFirstAcconto": float(self.ires_first_acconto),
            "iresSecondAcconto": float(self.ires_second_acconto),
            "irapFirstAcconto": float(self.irap_first_acconto),
            "irapSecondAcconto": float(self.irap_second_acconto),
            "accontiDetails": self.acconti_details.details_dict(),
            "monthlyAccrual": float(self.monthly_accrual),
            "quarterlyPayments": float(self.quarterly_payments),
            "calendar": [e.to_dict() for e in self.calendar],
            "paymentSchedule": [e.to_dict() for e in self.payment_schedule],
        }


class SRLTaxCalculator:
    """Annual tax, contribution and payment planner for Italian SRLs."""

    def __init__(self, config_dir: Path | str | None = None, rules: TaxRules | None = None):
        """Initialize calculator with regime rules.

        Args:
            config_dir: Directory containing tax_rules.yaml
            rules: Ready rules instance (takes precedence over config_dir)
        """
        self.rules = rules if rules is not None else TaxRules.load(config_dir)

    def calculate(self, data: SRLTaxInput | dict, today: date | None = None) -> SRLTaxResult:
        """Run the full computation.

        Args:
            data: Input record, or a dict accepted by SRLTaxInput.from_dict
            today: Processing date for the payment schedule (defaults to today)

        Returns:
            SRLTaxResult

        Raises:
            ValueError: If a numeric input cannot be read as a number
        """
        if isinstance(data, dict):
            data = SRLTaxInput.from_dict(data)

        rules = self.rules
        normalized = normalize_input(data, rules)

        logger.info(
            f"Calculating SRL taxes for {normalized.fiscal_year} "
            f"(region={normalized.region}, vat_regime={normalized.vat_regime})"
        )

        # ==================== Reddito imponibile ====================

        gross_profit = normalized.revenue - normalized.costs - normalized.employee_costs
        taxable_income = max(ZERO, gross_profit - normalized.admin_salary)

        rol_details = resolve_interest(
            normalized.interest_income,
            normalized.interest_expense,
            normalized.rol_fiscale,
            rules,
        )
        # A negative expense yields a negative non-deductible share; it never adds to the base
        taxable_income -= max(ZERO, rol_details.non_deductible_interest)

        super_deduction = compute_super_deduction(
            normalized.new_hires_cost,
            normalized.personnel_cost_increase,
            rules,
        )
        taxable_income = max(ZERO, taxable_income - super_deduction)

        loss_usage = apply_losses(
            taxable_income,
            normalized.first_three_years_losses,
            normalized.ordinary_losses,
            rules,
        )
        taxable_income_after_losses = max(ZERO, taxable_income - loss_usage.losses_used)

        # ==================== IRES ====================

        premiale = check_premiale(normalized, rules)
        is_premiale = premiale is not None and premiale.is_applicable
        ires_rate = rules.ires_premiale_rate if is_premiale else rules.ires_standard_rate
        ires_amount = taxable_income_after_losses * ires_rate

        logger.debug(
            f"IRES: taxable={taxable_income_after_losses}, rate={ires_rate}, amount={ires_amount}"
        )

        # ==================== IRAP, IVA, INPS ====================

        irap = resolve_irap(normalized, rules)
        vat = resolve_vat(normalized)
        contributions = resolve_contributions(normalized, rules)

        total_taxes = ires_amount + irap.amount
        total_due = total_taxes + contributions.total + vat.vat_amount

        # ==================== Acconti e pianificazione ====================

        acconti = resolve_acconti(normalized, ires_amount, irap.amount, irap.rate, rules)

        monthly_accrual = total_due / 12
        quarterly_payments = vat.vat_quarterly + contributions.total / 4

        calendar = build_fiscal_calendar(
            vat.deadlines,
            acconti,
            contributions.total,
            normalized.fiscal_year,
        )
        payment_schedule = build_payment_schedule(
            calendar,
            normalized.current_balance,
            monthly_accrual,
            normalized.fiscal_year,
            today=today,
        )

        result = self._assemble_result(
            fiscal_year=normalized.fiscal_year,
            gross_profit=gross_profit,
            taxable_income=taxable_income,
            taxable_income_after_losses=taxable_income_after_losses,
            ires_amount=ires_amount,
            ires_rate=ires_rate,
            is_premiale=is_premiale,
            premiale=premiale,
            irap=irap,
            loss_usage=loss_usage,
            super_deduction=super_deduction,
            rol_details=rol_details,
            vat=vat,
            contributions=contributions,
            total_taxes=total_taxes,
            total_due=total_due,
            acconti=acconti,
            monthly_accrual=monthly_accrual,
            quarterly_payments=quarterly_payments,
            calendar=calendar,
            payment_schedule=payment_schedule,
        )

        logger.info(
            f"SRL taxes {normalized.fiscal_year}: total due {result.total_due}, "
            f"{len(result.calendar)} calendar events"
        )
        return result

    def _assemble_result(
        self,
        *,
        fiscal_year: int,
        gross_profit: Decimal,
        taxable_income: Decimal,
        taxable_income_after_losses: Decimal,
        ires_amount: Decimal,
        ires_rate: Decimal,
        is_premiale: bool,
        premiale: PremialeDetails | None,
        irap: IrapComputation,
        loss_usage: LossUsage,
        super_deduction: Decimal,
        rol_details: ROLDetails,
        vat: VATComputation,
        contributions: ContributionsComputation,
        total_taxes: Decimal,
        total_due: Decimal,
        acconti: AccontiComputation,
        monthly_accrual: Decimal,
        quarterly_payments: Decimal,
        calendar: list[FiscalEvent],
        payment_schedule: list[ScheduleEntry],
    ) -> SRLTaxResult:
        """Round every currency figure to cents for output."""
        irap = irap.rounded()
        vat = vat.rounded()
        contributions = contributions.rounded()
        acconti = acconti.rounded()

        return SRLTaxResult(
            fiscal_year=fiscal_year,
            gross_profit=money(gross_profit),
            taxable_income=money(taxable_income),
            taxable_income_after_losses=money(taxable_income_after_losses),
            ires_amount=money(ires_amount),
            ires_rate=ires_rate,
            is_ires_premiale_applicable=is_premiale,
            premiale_details=premiale.rounded() if premiale else None,
            irap_base=irap.base,
            irap_deductions=irap.deductions,
            irap_taxable_income=irap.taxable_income,
            irap_amount=irap.amount,
            irap_rate=irap.rate,
            losses_used=money(loss_usage.losses_used),
            remaining_losses=money(loss_usage.remaining_losses),
            super_deduction_amount=money(super_deduction),
            rol_details=rol_details.rounded(),
            vat_on_sales=vat.vat_on_sales,
            vat_on_purchases=vat.vat_on_purchases,
            vat_amount=vat.vat_amount,
            vat_quarterly=vat.vat_quarterly,
            vat_deadlines=vat.deadlines,
            inps_admin=contributions.admin,
            inps_employees=contributions.employees,
            inps_total_amount=contributions.total,
            total_taxes=money(total_taxes),
            total_due=money(total_due),
            ires_first_acconto=acconti.ires_first,
            ires_second_acconto=acconti.ires_second,
            irap_first_acconto=acconti.irap_first,
            irap_second_acconto=acconti.irap_second,
            acconti_details=acconti,
            monthly_accrual=money(monthly_accrual),
            quarterly_payments=money(quarterly_payments),
            calendar=[event.rounded() for event in calendar],
            payment_schedule=payment_schedule,
        )

    def format_summary(self, result: SRLTaxResult, upcoming: int = 5) -> str:
        """Format the computation as a plain-text summary.

        Args:
            result: SRLTaxResult to format
            upcoming: Number of schedule rows to list

        Returns:
            Formatted summary string
        """
        lines = [
            f"Riepilogo fiscale SRL {result.fiscal_year}",
            "",
            "IRES:",
            f"- Reddito imponibile: €{result.taxable_income_after_losses:,.2f}",
            f"- Aliquota: {result.ires_rate * 100:.0f}%"
            + (" (premiale)" if result.is_ires_premiale_applicable else ""),
            f"- IRES dovuta: €{result.ires_amount:,.2f}",
            "",
            "IRAP:",
            f"- Base imponibile: €{result.irap_taxable_income:,.2f}",
            f"- Aliquota: {result.irap_rate * 100:.2f}%",
            f"- IRAP dovuta: €{result.irap_amount:,.2f}",
            "",
            "IVA:",
            f"- IVA a debito: €{result.vat_on_sales:,.2f}",
            f"- IVA a credito: €{result.vat_on_purchases:,.2f}",
            f"- IVA da versare: €{result.vat_amount:,.2f}",
            "",
            "INPS:",
            f"- Amministratore: €{result.inps_admin:,.2f}",
            f"- Dipendenti: €{result.inps_employees:,.2f}",
            "",
            f"Totale dovuto: €{result.total_due:,.2f}",
            f"Accantonamento mensile: €{result.monthly_accrual:,.2f}",
        ]

        if not result.acconti_details.is_new_business:
            lines += [
                "",
                "Acconti:",
                f"- IRES: €{result.ires_first_acconto:,.2f} + €{result.ires_second_acconto:,.2f}",
                f"- IRAP: €{result.irap_first_acconto:,.2f} + €{result.irap_second_acconto:,.2f}",
            ]

        payments = [row for row in result.payment_schedule if not row.is_income][:upcoming]
        if payments:
            lines += ["", "Prossime scadenze:"]
            for row in payments:
                line = f"- {format_date(row.due_date)} {row.type}: €{row.amount:,.2f}"
                if row.required_payment > 0:
                    line += f" (scoperto €{row.required_payment:,.2f})"
                lines.append(line)

        return "\n".join(lines)
