"""
Income Tax Calculator -- progressive annual brackets, withheld per period.

Algorithm
---------
1. Non-positive or missing taxable income -> zero tax.
2. Annualize: ``annual = taxable income * periods_per_year`` (12 for a
   monthly period, 24 for semi-monthly).
3. Income at or below the first threshold is exempt.
4. Otherwise select the bracket with the highest threshold not
   exceeding the annual income (searching from the top down) and compute
   ``annual_tax = base_tax + (annual - excess_over) * marginal_rate``.
5. De-annualize: ``tax = annual_tax / periods_per_year``, rounded
   half-up to centavos, never negative.

The annual tax is kept exact until the final division so the period
tax carries a single rounding step.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_config.schema import IncomeTaxTable, TaxBracket
from payroll_kernel.domain.dtos import TaxResult
from payroll_kernel.domain.values import ZERO, format_percent, format_peso, round_money
from payroll_kernel.logging_config import get_logger
from payroll_engines.tracer import traced_engine

logger = get_logger("engines.income_tax")

MONTHLY_PERIODS = 12
SEMI_MONTHLY_PERIODS = 24


class IncomeTaxCalculator:
    """Stateless progressive-bracket withholding calculator."""

    def __init__(self, table: IncomeTaxTable):
        self.table = table

    def find_bracket(self, annual_income: Decimal) -> TaxBracket | None:
        """Highest bracket whose threshold does not exceed the income; None when exempt."""
        if annual_income <= self.table.exemption_threshold:
            return None
        for bracket in reversed(self.table.brackets):
            if bracket.threshold <= annual_income:
                return bracket
        return None

    def annual_tax(self, annual_income: Decimal) -> Decimal:
        bracket = self.find_bracket(annual_income)
        if bracket is None:
            return ZERO
        return max(ZERO, bracket.annual_tax(annual_income))

    @traced_engine(
        "income_tax", "1.0",
        fingerprint_fields=("taxable_income", "periods_per_year"),
    )
    def calculate(
        self,
        taxable_income: Decimal | None,
        periods_per_year: int = MONTHLY_PERIODS,
    ) -> TaxResult:
        if periods_per_year <= 0:
            raise ValueError(f"periods_per_year must be positive, got {periods_per_year}")

        income = taxable_income if taxable_income is not None and taxable_income > ZERO else ZERO
        annual_income = income * periods_per_year
        bracket = self.find_bracket(annual_income)
        annual_tax = self.annual_tax(annual_income)
        tax = round_money(max(ZERO, annual_tax / periods_per_year))

        description = self.describe_bracket(bracket)
        explanation = (
            f"{self.table.label}: Taxable {format_peso(round_money(income))}/period "
            f"(Annual {format_peso(round_money(annual_income))}) → {description} "
            f"→ {format_peso(tax)}"
        )

        logger.debug(
            "income_tax_calculated",
            extra={
                "taxable_income": str(income),
                "annual_income": str(annual_income),
                "bracket_threshold": str(bracket.threshold) if bracket else None,
                "tax": str(tax),
            },
        )

        return TaxResult(
            label=self.table.label,
            taxable_income=round_money(income),
            annual_income=round_money(annual_income),
            annual_tax=round_money(annual_tax),
            tax=tax,
            periods_per_year=periods_per_year,
            bracket_description=description,
            explanation=explanation,
        )

    def explain(self, taxable_income: Decimal | None, periods_per_year: int = MONTHLY_PERIODS) -> str:
        return self.calculate(taxable_income, periods_per_year).explanation

    def describe_bracket(self, bracket: TaxBracket | None) -> str:
        if bracket is None:
            return "exempt"
        rate = f"{format_percent(bracket.marginal_rate)} of excess over {format_peso(bracket.excess_over)}"
        if bracket.base_tax == ZERO:
            return rate
        return f"{format_peso(bracket.base_tax)} + {rate}"
