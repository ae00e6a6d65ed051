"""
Payroll Computation Engine -- attendance, rates and tables to net pay.

Pipeline (strict data dependency, no concurrency inside one employee):

    1. Validate inputs; normalize the rate into an hourly rate (4 dp)
       and a monthly-equivalent salary.
    2. Classify and aggregate the period's attendance.
    3. Earnings, each rounded half-up to centavos:
         basic      = regular hours  * hourly rate
         overtime   = overtime hours * hourly rate * overtime multiplier
         night diff = night hours    * hourly rate * differential rate
         holiday    = holiday hours  * hourly rate * holiday multiplier
       Night-differential pay is a premium on top of hours already paid
       as regular/overtime/holiday time.
    4. gross = basic + overtime + night diff + holiday + allowances
    5. Contributions from the monthly equivalent; then
         taxable = max(0, gross - non-taxable allowances - contributions)
       and withholding tax from the taxable income.
    6. total deductions = contributions + tax + other deductions
       net = max(0, gross - total deductions)
    7. Render the computation trail.

Invariants enforced:
    - gross and net reconcile exactly with the stored 2-decimal
      components; nothing is re-derived after rounding.
    - ``compute`` is a pure function of its arguments: the same inputs
      give an equal breakdown and byte-identical trail text.

Failure modes:
    - Missing or invalid profile, inverted period, or negative
      allowance/deduction input raises a ``ConfigurationError`` subclass.
    - Bad attendance data never raises; see ``HoursClassifier``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from decimal import Decimal, InvalidOperation

from payroll_config.schema import PayPolicy, StatutoryTables
from payroll_kernel.domain.dtos import (
    Allowances,
    AttendanceEntry,
    CompensationProfile,
    PayPeriod,
    PayrollBreakdown,
)
from payroll_kernel.domain.values import ZERO, round_money, to_decimal
from payroll_kernel.exceptions import (
    ConfigurationError,
    InvalidAdjustmentError,
    InvalidPayPeriodError,
)
from payroll_kernel.logging_config import get_logger
from payroll_engines.aggregation import PeriodAggregator
from payroll_engines.health_insurance import HealthInsuranceCalculator
from payroll_engines.hours import HoursClassifier
from payroll_engines.housing_fund import HousingFundCalculator
from payroll_engines.income_tax import MONTHLY_PERIODS, IncomeTaxCalculator
from payroll_engines.rates import RateNormalizer
from payroll_engines.social_insurance import SocialInsuranceCalculator
from payroll_engines.tracer import traced_engine
from payroll_engines.trail import render_trail

logger = get_logger("engines.payroll")


class PayrollComputationEngine:
    """
    Computes one employee's payroll for one period.

    The engine holds only immutable configuration (tables and policy),
    so a single instance may be shared across threads.
    """

    def __init__(self, tables: StatutoryTables, policy: PayPolicy | None = None):
        self.tables = tables
        self.policy = policy or PayPolicy()
        self.aggregator = PeriodAggregator(HoursClassifier(self.policy.shift))
        self.social_insurance = SocialInsuranceCalculator(tables.social_insurance)
        self.health_insurance = HealthInsuranceCalculator(tables.health_insurance)
        self.housing_fund = HousingFundCalculator(tables.housing_fund)
        self.income_tax = IncomeTaxCalculator(tables.income_tax)

    @traced_engine(
        "payroll_computation", "1.0",
        fingerprint_fields=("profile", "period", "entries", "allowances", "other_deductions"),
    )
    def compute(
        self,
        profile: CompensationProfile | None,
        period: PayPeriod,
        entries: Iterable[AttendanceEntry],
        allowances: Allowances | None = None,
        other_deductions: Decimal = ZERO,
    ) -> PayrollBreakdown:
        """Compute the itemized payroll breakdown, trail included."""
        entries = tuple(entries)
        allowances = allowances or Allowances()
        employee_code = profile.employee_code if profile is not None else None

        try:
            rates = RateNormalizer(profile, self.policy.rate_basis)
            self._validate(period, allowances, other_deductions)
        except ConfigurationError as exc:
            logger.warning(
                "payroll_computation_rejected",
                extra={
                    "employee_code": employee_code,
                    "error_code": exc.code,
                    "detail": str(exc),
                },
            )
            raise

        hourly_rate = rates.to_hourly_rate()
        monthly_equivalent = rates.to_monthly_equivalent()
        totals = self.aggregator.aggregate(entries)
        premiums = self.policy.premiums

        basic_pay = round_money(totals.regular_hours * hourly_rate)
        overtime_pay = round_money(
            totals.overtime_hours * hourly_rate * premiums.overtime_multiplier
        )
        night_diff_pay = round_money(
            totals.night_diff_hours * hourly_rate * premiums.night_differential_rate
        )
        holiday_pay = round_money(
            totals.holiday_hours * hourly_rate * premiums.holiday_multiplier
        )
        taxable_allowances = round_money(to_decimal(allowances.taxable))
        non_taxable_allowances = round_money(to_decimal(allowances.non_taxable))
        gross_pay = (
            basic_pay + overtime_pay + night_diff_pay + holiday_pay
            + taxable_allowances + non_taxable_allowances
        )

        social = self.social_insurance.calculate(monthly_equivalent)
        health = self.health_insurance.calculate(monthly_equivalent)
        housing = self.housing_fund.calculate(monthly_equivalent)
        contributions = social.employee_share + health.employee_share + housing.employee_share

        taxable_income = round_money(
            max(ZERO, gross_pay - non_taxable_allowances - contributions)
        )
        tax = self.income_tax.calculate(taxable_income, MONTHLY_PERIODS)

        other = round_money(to_decimal(other_deductions))
        total_deductions = contributions + tax.tax + other
        net_pay = round_money(max(ZERO, gross_pay - total_deductions))

        breakdown = PayrollBreakdown(
            period=period,
            rate_type=rates.rate_type,
            hourly_rate=hourly_rate,
            monthly_equivalent=monthly_equivalent,
            totals=totals,
            basic_pay=basic_pay,
            overtime_pay=overtime_pay,
            night_diff_pay=night_diff_pay,
            holiday_pay=holiday_pay,
            taxable_allowances=taxable_allowances,
            non_taxable_allowances=non_taxable_allowances,
            gross_pay=gross_pay,
            social_insurance=social,
            health_insurance=health,
            housing_fund=housing,
            taxable_income=taxable_income,
            income_tax=tax,
            other_deductions=other,
            total_deductions=total_deductions,
            net_pay=net_pay,
            employee_code=employee_code,
            table_version=self.tables.version,
        )
        trail = render_trail(
            breakdown,
            tables=self.tables,
            premiums=premiums,
            rate_description=rates.describe(),
            employee_name=profile.employee_name,
        )

        logger.info(
            "payroll_computed",
            extra={
                "employee_code": employee_code,
                "table_version": self.tables.version,
                "rate_type": rates.rate_type.value,
                "gross_pay": str(gross_pay),
                "total_deductions": str(total_deductions),
                "net_pay": str(net_pay),
                "flag_count": len(totals.flags),
            },
        )
        return replace(breakdown, computation_trail=trail)

    @staticmethod
    def _validate(period: PayPeriod, allowances: Allowances, other_deductions: Decimal) -> None:
        if period.start > period.end:
            raise InvalidPayPeriodError(period.start, period.end)
        for name, amount in (
            ("taxable_allowances", allowances.taxable),
            ("non_taxable_allowances", allowances.non_taxable),
            ("other_deductions", other_deductions),
        ):
            try:
                value = to_decimal(amount)
            except TypeError as exc:
                raise InvalidAdjustmentError(name, amount, reason=str(exc)) from exc
            except InvalidOperation as exc:
                raise InvalidAdjustmentError(name, amount, reason="not a number") from exc
            if not value.is_finite():
                raise InvalidAdjustmentError(name, amount, reason="not a finite number")
            if value < ZERO:
                raise InvalidAdjustmentError(name, amount)

