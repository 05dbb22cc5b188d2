"""
INPS Contributions Resolver

Mandatory social contributions for the administrator and employees.
"""

from dataclasses import dataclass
from decimal import Decimal

from .models import ZERO, NormalizedInput, round_fields
from .rules import TaxRules


@dataclass(frozen=True)
class ContributionsComputation:
    """INPS contributions for the year."""

    admin: Decimal
    employees: Decimal

    @property
    def total(self) -> Decimal:
        return self.admin + self.employees

    def rounded(self) -> "ContributionsComputation":
        return round_fields(self, "admin", "employees")


def compute_admin_contribution(admin_salary: Decimal, rules: TaxRules) -> Decimal:
    """Administrator contribution on the salary clamped to the floor/ceiling."""
    if admin_salary <= 0:
        return ZERO

    base = max(
        rules.admin_contribution_floor,
        min(admin_salary, rules.admin_contribution_ceiling),
    )
    return base * rules.admin_contribution_rate


def compute_employee_contributions(
    employees: int,
    employee_costs: Decimal,
    rules: TaxRules,
) -> Decimal:
    if employees > 0 and employee_costs > 0:
        return employee_costs * rules.employee_contribution_rate
    return ZERO


def resolve_contributions(data: NormalizedInput, rules: TaxRules) -> ContributionsComputation:
    return ContributionsComputation(
        admin=compute_admin_contribution(data.admin_salary, rules),
        employees=compute_employee_contributions(data.employees, data.employee_costs, rules),
    )
