"""
Tests for IncomeTaxCalculator.

Covers:
- Exemption at or below the first threshold
- Bracket selection (highest threshold not exceeding income)
- Annualize / de-annualize with 12 and 24 periods
- Non-positive and missing income
- Table validation that keeps the schedule monotonic
"""

from decimal import Decimal

import pytest

from payroll_config.schema import IncomeTaxTable, TaxBracket
from payroll_engines.income_tax import SEMI_MONTHLY_PERIODS, IncomeTaxCalculator


@pytest.fixture
def calculator(tables):
    return IncomeTaxCalculator(tables.income_tax)


class TestExemption:
    def test_below_threshold(self, calculator):
        result = calculator.calculate(Decimal("19980.00"))
        assert result.annual_income == Decimal("239760.00")
        assert result.tax == Decimal("0.00")
        assert result.bracket_description == "exempt"

    def test_at_threshold_is_exempt(self, calculator):
        assert calculator.calculate(Decimal("250000"), periods_per_year=1).tax == Decimal("0.00")

    @pytest.mark.parametrize("income", [Decimal("0"), Decimal("-5000"), None])
    def test_non_positive_income(self, calculator, income):
        result = calculator.calculate(income)
        assert result.tax == Decimal("0.00")
        assert result.taxable_income == Decimal("0.00")


class TestBrackets:
    @pytest.mark.parametrize(
        "monthly,expected",
        [
            ("30000", "1375.00"),  # 110,000 * 15% / 12
            ("50000", "5208.33"),  # (22,500 + 200,000 * 20%) / 12
            ("100000", "16875.00"),  # (102,500 + 400,000 * 25%) / 12
            ("200000", "43541.67"),  # (402,500 + 400,000 * 30%) / 12
            ("1000000", "300208.33"),  # (2,202,500 + 4,000,000 * 35%) / 12
        ],
    )
    def test_monthly_withholding(self, calculator, monthly, expected):
        assert calculator.calculate(Decimal(monthly)).tax == Decimal(expected)

    def test_exact_threshold_selects_that_bracket(self, calculator):
        bracket = calculator.find_bracket(Decimal("400000"))
        assert bracket.threshold == Decimal("400000")
        assert calculator.annual_tax(Decimal("400000")) == Decimal("22500")

    def test_continuous_at_boundary(self, calculator):
        below = calculator.calculate(Decimal("399999.99"), periods_per_year=1).tax
        at = calculator.calculate(Decimal("400000"), periods_per_year=1).tax
        assert below <= at

    def test_semi_monthly(self, calculator):
        result = calculator.calculate(Decimal("15000"), periods_per_year=SEMI_MONTHLY_PERIODS)
        assert result.annual_income == Decimal("360000.00")
        assert result.tax == Decimal("687.50")

    def test_invalid_periods_per_year(self, calculator):
        with pytest.raises(ValueError, match="periods_per_year"):
            calculator.calculate(Decimal("30000"), periods_per_year=0)


class TestExplanation:
    def test_first_bracket_description(self, calculator):
        assert calculator.calculate(Decimal("30000")).bracket_description == (
            "15% of excess over ₱250,000.00"
        )

    def test_higher_bracket_description(self, calculator):
        assert calculator.calculate(Decimal("50000")).bracket_description == (
            "₱22,500.00 + 20% of excess over ₱400,000.00"
        )

    def test_explain(self, calculator):
        assert calculator.explain(Decimal("30000")) == (
            "BIR Withholding Tax: Taxable ₱30,000.00/period (Annual ₱360,000.00) "
            "→ 15% of excess over ₱250,000.00 → ₱1,375.00"
        )


class TestTableValidation:
    def test_thresholds_must_ascend(self):
        with pytest.raises(ValueError, match="strictly ascending"):
            IncomeTaxTable(
                label="T",
                brackets=(
                    TaxBracket(Decimal("100"), Decimal("0"), Decimal("0.1"), Decimal("100")),
                    TaxBracket(Decimal("100"), Decimal("0"), Decimal("0.2"), Decimal("100")),
                ),
            )

    def test_schedule_may_not_drop(self):
        with pytest.raises(ValueError, match="decreases"):
            IncomeTaxTable(
                label="T",
                brackets=(
                    TaxBracket(Decimal("100"), Decimal("0"), Decimal("0.5"), Decimal("100")),
                    TaxBracket(Decimal("200"), Decimal("10"), Decimal("0.5"), Decimal("200")),
                ),
            )

    def test_excess_over_cannot_exceed_threshold(self):
        with pytest.raises(ValueError, match="excess_over"):
            TaxBracket(Decimal("100"), Decimal("0"), Decimal("0.1"), Decimal("150"))
