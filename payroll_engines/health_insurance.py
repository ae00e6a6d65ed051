"""
Health Insurance Calculator -- premium on a clamped salary base.

    base           = salary clamped to [floor, ceiling]
    employee share = base * premium rate / 2
    employer share = base * premium rate / 2

A zero or missing salary is clamped to the floor like any other
below-floor salary.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_config.schema import HealthInsuranceTable
from payroll_kernel.domain.dtos import ContributionResult
from payroll_kernel.domain.values import ZERO, format_percent, format_peso, round_money
from payroll_engines.tracer import traced_engine


class HealthInsuranceCalculator:
    """Stateless premium-split calculator."""

    def __init__(self, table: HealthInsuranceTable):
        self.table = table

    def contribution_base(self, monthly_salary: Decimal | None) -> Decimal:
        if monthly_salary is None or monthly_salary < self.table.salary_floor:
            return self.table.salary_floor
        if monthly_salary > self.table.salary_ceiling:
            return self.table.salary_ceiling
        return monthly_salary

    @traced_engine("health_insurance", "1.0", fingerprint_fields=("monthly_salary",))
    def calculate(self, monthly_salary: Decimal | None) -> ContributionResult:
        base = self.contribution_base(monthly_salary)
        employee_share = round_money(base * self.table.employee_rate)
        employer_share = round_money(base * self.table.employer_rate)
        explanation = (
            f"{self.table.label}: {format_peso(base)} × "
            f"{format_percent(self.table.employee_rate)} = {format_peso(employee_share)} "
            f"(base clamped to {format_peso(self.table.salary_floor)}"
            f"–{format_peso(self.table.salary_ceiling)})"
        )
        return ContributionResult(
            label=self.table.label,
            monthly_salary=monthly_salary if monthly_salary is not None else ZERO,
            base_amount=base,
            employee_rate=self.table.employee_rate,
            employer_rate=self.table.employer_rate,
            employee_share=employee_share,
            employer_share=employer_share,
            explanation=explanation,
        )

    def explain(self, monthly_salary: Decimal | None) -> str:
        return self.calculate(monthly_salary).explanation
