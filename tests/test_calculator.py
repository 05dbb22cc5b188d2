"""
Tests for SRL Tax Calculator

End-to-end scenarios for the orchestrator: taxable income sequencing,
IRES rate selection, acconti, calendar and payment schedule assembly.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from srl_fiscal import SRLTaxCalculator, SRLTaxResult, TaxRules
from srl_fiscal.planning import EventCategory


class TestSRLTaxCalculator:
    """Tests for the full calculation."""

    @pytest.fixture
    def calculator(self) -> SRLTaxCalculator:
        """Create calculator with the shipped rules."""
        return SRLTaxCalculator()

    @pytest.fixture
    def result(self, calculator, lazio_input, processing_date) -> SRLTaxResult:
        return calculator.calculate(lazio_input, today=processing_date)

    # Established business in Lazio

    def test_income(self, result):
        assert isinstance(result, SRLTaxResult)
        assert result.fiscal_year == 2025
        assert result.gross_profit == Decimal("120000")
        assert result.taxable_income == Decimal("80000")
        assert result.taxable_income_after_losses == Decimal("80000")

    def test_standard_ires_without_premiale_inputs(self, result):
        assert result.ires_rate == Decimal("0.24")
        assert result.is_ires_premiale_applicable is False
        assert result.ires_amount == Decimal("19200.00")
        assert result.premiale_details is not None
        assert result.premiale_details.reserve_allocated is False

    def test_irap(self, result):
        assert result.irap_rate == Decimal("0.0482")
        assert result.irap_base == Decimal("280000")
        assert result.irap_taxable_income == Decimal("256000")
        assert result.irap_amount == Decimal("12339.20")

    def test_contributions(self, result):
        assert result.inps_admin == Decimal("9600.00")  # 40000 x 0.24
        assert result.inps_employees == Decimal("24000.00")
        assert result.inps_total_amount == Decimal("33600.00")

    def test_vat(self, result):
        assert result.vat_amount == Decimal("44000.00")
        assert len(result.vat_deadlines) == 4
        assert {d.amount for d in result.vat_deadlines} == {Decimal("11000.00")}

    def test_totals(self, result):
        assert result.total_taxes == Decimal("31539.20")
        assert result.total_due == Decimal("109139.20")
        assert result.monthly_accrual == Decimal("9094.93")
        assert result.quarterly_payments == Decimal("52400.00")

    def test_acconti(self, result):
        assert result.acconti_details.is_new_business is False
        assert result.acconti_details.based_on_prior_year is True
        assert result.ires_first_acconto == Decimal("6144.00")
        assert result.ires_second_acconto == Decimal("9216.00")
        assert result.irap_first_acconto == Decimal("3948.54")
        assert result.irap_second_acconto == Decimal("5922.82")

    def test_calendar(self, result):
        categories = [e.category for e in result.calendar]

        assert len(result.calendar) == 12
        assert categories.count(EventCategory.IRES) == 2
        assert categories.count(EventCategory.IRAP) == 2
        dates = [e.due_date for e in result.calendar]
        assert dates == sorted(dates)

    def test_payment_schedule(self, result):
        assert len(result.payment_schedule) == 24
        dates = [row.due_date for row in result.payment_schedule]
        assert dates == sorted(dates)
        assert result.payment_schedule[0].previous_balance == Decimal("50000.00")

    # New business

    def test_new_business(self, calculator, lazio_input, processing_date):
        result = calculator.calculate(lazio_input.model_copy(update=dict(start_year=2025)), today=processing_date)

        assert result.acconti_details.is_new_business is True
        assert result.ires_first_acconto == Decimal("0")
        assert result.ires_second_acconto == Decimal("0")
        assert result.irap_first_acconto == Decimal("0")
        assert result.irap_second_acconto == Decimal("0")
        categories = {e.category for e in result.calendar}
        assert EventCategory.IRES not in categories
        assert EventCategory.IRAP not in categories

    def test_unparseable_start_date(self, calculator, lazio_input, processing_date):
        """A malformed start date falls back to the default year."""
        data = lazio_input.model_copy(update=dict(start_year=None, start_date="domani"))
        result = calculator.calculate(data, today=processing_date)

        assert result.acconti_details.is_new_business is True

    # IRES premiale

    def test_premiale_rate(self, calculator, premiale_input, processing_date):
        result = calculator.calculate(premiale_input, today=processing_date)

        assert result.is_ires_premiale_applicable is True
        assert result.ires_rate == Decimal("0.20")
        assert result.ires_amount == Decimal("16000.00")
        details = result.premiale_details
        assert details.required_investment == Decimal("24000.00")
        assert details.actual_investment == Decimal("25000.00")

    def test_premiale_only_in_2025(self, calculator, premiale_input, processing_date):
        result = calculator.calculate(
            premiale_input.model_copy(update=dict(fiscal_year=2026)), today=date(2026, 1, 1)
        )

        assert result.ires_rate == Decimal("0.24")
        assert result.premiale_details is None

    # Taxable income sequencing

    def test_deductions_sequence(self, calculator, lazio_input, processing_date):
        data = lazio_input.model_copy(update=dict(
            interest_expense=Decimal("30000"),
            rol_fiscale=Decimal("50000"),
            new_hires_cost=Decimal("10000"),
            personnel_cost_increase=Decimal("20000"),
            first_three_years_losses=Decimal("8000"),
            ordinary_losses=Decimal("100000"),
        ))
        result = calculator.calculate(data, today=processing_date)

        # 80000 - 15000 non-deductible interest - 2000 super deduction
        assert result.rol_details.non_deductible_interest == Decimal("15000.00")
        assert result.super_deduction_amount == Decimal("2000.00")
        assert result.taxable_income == Decimal("63000.00")
        # 8000 first-years losses, then 80% of the remaining 55000
        assert result.losses_used == Decimal("52000.00")
        assert result.remaining_losses == Decimal("56000.00")
        assert result.taxable_income_after_losses == Decimal("11000.00")

    @pytest.mark.parametrize("overrides", [
        {},
        {"ordinary_losses": Decimal("500000")},
        {"first_three_years_losses": Decimal("90000")},
        {"interest_expense": Decimal("200000"), "rol_fiscale": Decimal("1000")},
        {"new_hires_cost": Decimal("90000"), "personnel_cost_increase": Decimal("90000")},
        {"costs": Decimal("480000")},
        {"interest_expense": Decimal("-5000")},
        {"admin_salary": Decimal("0"), "interest_expense": Decimal("-5000")},
    ])
    def test_base_only_narrows(self, calculator, lazio_input, processing_date, overrides):
        result = calculator.calculate(lazio_input.model_copy(update=overrides), today=processing_date)

        assert result.taxable_income_after_losses <= result.taxable_income
        assert result.taxable_income <= max(result.gross_profit, Decimal("0"))
        assert result.taxable_income_after_losses >= 0

    def test_negative_interest_expense_does_not_raise_base(self, calculator, lazio_input, processing_date):
        data = lazio_input.model_copy(update=dict(
            admin_salary=Decimal("0"),
            interest_expense=Decimal("-5000"),
        ))
        result = calculator.calculate(data, today=processing_date)

        assert result.rol_details.non_deductible_interest == Decimal("-5000.00")
        assert result.gross_profit == Decimal("120000.00")
        assert result.taxable_income == Decimal("120000.00")
        assert result.taxable_income <= result.gross_profit

    def test_interest_split_sums_to_total(self, calculator, lazio_input, processing_date):
        data = lazio_input.model_copy(update=dict(
            interest_income=Decimal("1234.56"),
            interest_expense=Decimal("98765.43"),
            rol_fiscale=Decimal("77777.77"),
        ))
        rol = calculator.calculate(data, today=processing_date).rol_details

        assert rol.deductible_interest + rol.non_deductible_interest == Decimal("98765.43")

    # Input forms

    def test_dict_input(self, calculator, processing_date):
        result = calculator.calculate({
            "revenue": 500000,
            "costs": 300000,
            "employees": 2,
            "employeeCosts": 80000,
            "adminSalary": 40000,
            "region": "LAZIO",
            "vatRegime": "TRIMESTRALE",
            "hasVatDebt": False,
            "vatDebt": 0,
            "currentBalance": 0,
            "fiscalYear": 2025,
            "startYear": 2023,
        }, today=processing_date)

        assert result.ires_amount == Decimal("19200.00")
        assert result.irap_rate == Decimal("0.0482")

    def test_dict_input_with_blank_fields(self, calculator, processing_date):
        """Unfilled form fields arrive as empty strings."""
        result = calculator.calculate({
            "revenue": 500000,
            "costs": 300000,
            "employees": 2,
            "employeeCosts": 80000,
            "adminSalary": 40000,
            "region": "LAZIO",
            "vatRegime": "TRIMESTRALE",
            "fiscalYear": 2025,
            "startYear": "",
            "utile2024": "",
            "interessiPassivi": "",
        }, today=processing_date)

        assert result.ires_amount == Decimal("19200.00")
        assert result.acconti_details.is_new_business is True

    def test_unknown_vat_regime(self, calculator, lazio_input, processing_date):
        result = calculator.calculate(lazio_input.model_copy(update=dict(vat_regime="ANNUALE")), today=processing_date)

        assert result.vat_deadlines == []
        assert all(e.category != EventCategory.IVA for e in result.calendar)
        assert result.vat_amount == Decimal("44000.00")

    def test_custom_rules(self, lazio_input, processing_date):
        calculator = SRLTaxCalculator(rules=replace(TaxRules(), ires_standard_rate=Decimal("0.25")))
        result = calculator.calculate(lazio_input, today=processing_date)

        assert result.ires_amount == Decimal("20000.00")

    # Output

    def test_to_dict(self, result):
        output = result.to_dict()

        assert output["iresRate"] == 0.24
        assert output["irapRate"] == 0.0482
        assert output["accontiDetails"] == {
            "isNewBusiness": False,
            "accontiBasedOn2024": True,
            "accontiRate": 0.4,
        }
        assert output["vatDeadlines"][0] == {"date": "16/04/2025", "amount": 11000.0, "type": "IVA Q1 2025"}
        assert output["paymentSchedule"][0]["date"] == "01/01/2025"
        assert output["paymentSchedule"][0]["isIncome"] is True
        assert output["rolDetails"]["limitROL"] == 22500.0
        assert output["isIresPremialeApplicable"] is False
        assert output["iresPremialeDetails"]["condition1_utiliAccantonati"] is False

    def test_format_summary(self, calculator, result):
        summary = calculator.format_summary(result)

        assert "Riepilogo fiscale SRL 2025" in summary
        assert "IRES dovuta: €19,200.00" in summary
        assert "Aliquota: 4.82%" in summary
        assert "Acconti:" in summary
        assert "16/04/2025 IVA Q1 2025" in summary
