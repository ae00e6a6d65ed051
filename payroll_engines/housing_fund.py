"""
Housing Fund Calculator -- flat rate under two independent caps.

    base           = min(salary, salary cap)
    employee share = min(base * employee rate, employee contribution cap)
    employer share = base * employer rate

Both caps are honored separately: lowering the salary cap does not lift
the peso ceiling, and vice versa. A zero or missing salary contributes
nothing.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_config.schema import HousingFundTable
from payroll_kernel.domain.dtos import ContributionResult
from payroll_kernel.domain.values import ZERO, format_percent, format_peso, round_money
from payroll_engines.tracer import traced_engine


class HousingFundCalculator:
    """Stateless capped flat-rate calculator."""

    def __init__(self, table: HousingFundTable):
        self.table = table

    def contribution_base(self, monthly_salary: Decimal | None) -> Decimal:
        if monthly_salary is None or monthly_salary <= ZERO:
            return ZERO
        return min(monthly_salary, self.table.salary_cap)

    @traced_engine("housing_fund", "1.0", fingerprint_fields=("monthly_salary",))
    def calculate(self, monthly_salary: Decimal | None) -> ContributionResult:
        base = self.contribution_base(monthly_salary)
        employee_share = min(
            round_money(base * self.table.employee_rate),
            self.table.employee_contribution_cap,
        )
        employer_share = round_money(base * self.table.employer_rate)
        explanation = (
            f"{self.table.label}: {format_peso(base)} × "
            f"{format_percent(self.table.employee_rate)} = {format_peso(employee_share)} "
            f"(base cap {format_peso(self.table.salary_cap)}, "
            f"contribution cap {format_peso(self.table.employee_contribution_cap)})"
        )
        return ContributionResult(
            label=self.table.label,
            monthly_salary=monthly_salary if monthly_salary is not None else ZERO,
            base_amount=base,
            employee_rate=self.table.employee_rate,
            employer_rate=self.table.employer_rate,
            employee_share=round_money(employee_share),
            employer_share=employer_share,
            explanation=explanation,
        )

    def explain(self, monthly_salary: Decimal | None) -> str:
        return self.calculate(monthly_salary).explanation
