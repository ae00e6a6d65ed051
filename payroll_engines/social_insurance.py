"""
Social Insurance Calculator -- banded monthly salary credit (MSC).

Contributions are priced from a banded proxy salary, not the salary
itself:

    MSC                   = credit of the band containing the salary
    employee contribution = MSC * employee rate
    employer contribution = MSC * employer rate

Lookup never fails: a salary below the lowest band (or a zero/missing
salary) takes the floor credit, a salary above the highest band takes
the ceiling credit, and a salary falling in a gap between two bands
takes the lower band.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_config.schema import SocialInsuranceTable
from payroll_kernel.domain.dtos import ContributionResult
from payroll_kernel.domain.values import ZERO, format_percent, format_peso, round_money
from payroll_kernel.logging_config import get_logger
from payroll_engines.tracer import traced_engine

logger = get_logger("engines.social_insurance")


class SocialInsuranceCalculator:
    """Stateless MSC-band contribution calculator."""

    def __init__(self, table: SocialInsuranceTable):
        self.table = table

    def salary_credit(self, monthly_salary: Decimal | None) -> Decimal:
        """Monthly salary credit for a salary, degrading to the boundary bands."""
        bands = self.table.bands
        if monthly_salary is None or monthly_salary <= ZERO:
            return self.table.floor_credit
        if monthly_salary < bands[0].salary_from:
            return self.table.floor_credit

        for band in reversed(bands):
            if band.salary_from <= monthly_salary:
                if not band.contains(monthly_salary):
                    logger.debug(
                        "salary_credit_band_fallback",
                        extra={
                            "monthly_salary": str(monthly_salary),
                            "band_from": str(band.salary_from),
                            "credit": str(band.credit),
                        },
                    )
                return band.credit
        return self.table.floor_credit

    @traced_engine("social_insurance", "1.0", fingerprint_fields=("monthly_salary",))
    def calculate(self, monthly_salary: Decimal | None) -> ContributionResult:
        msc = self.salary_credit(monthly_salary)
        employee_share = round_money(msc * self.table.employee_rate)
        employer_share = round_money(msc * self.table.employer_rate)
        return ContributionResult(
            label=self.table.label,
            monthly_salary=monthly_salary if monthly_salary is not None else ZERO,
            base_amount=msc,
            employee_rate=self.table.employee_rate,
            employer_rate=self.table.employer_rate,
            employee_share=employee_share,
            employer_share=employer_share,
            explanation=self._explain(msc, employee_share, employer_share),
        )

    def explain(self, monthly_salary: Decimal | None) -> str:
        return self.calculate(monthly_salary).explanation

    def _explain(self, msc: Decimal, employee_share: Decimal, employer_share: Decimal) -> str:
        return (
            f"{self.table.label}: MSC {format_peso(msc)} × "
            f"{format_percent(self.table.employee_rate)} = {format_peso(employee_share)} "
            f"(employer {format_percent(self.table.employer_rate)} = "
            f"{format_peso(employer_share)})"
        )
