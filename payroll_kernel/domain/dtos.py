"""
DTOs -- Immutable inputs and results of the payroll computation.

Responsibility:
    Defines the data that flows one way through the pipeline:

        CompensationProfile + AttendanceEntry[] + PayPeriod + Allowances
            -> HourBreakdown (per entry)
            -> PeriodTotals (per period)
            -> ContributionResult / TaxResult (per statutory calculator)
            -> PayrollBreakdown (final output, with computation trail)

Architecture position:
    Kernel > Domain -- pure data, zero I/O. Produced and consumed by
    ``payroll_engines``; never imports engines or config.

Invariants enforced:
    - All DTOs are frozen dataclasses (immutable, comparable by value).
    - Monetary fields are Decimal, never float.
    - Hour categories are carried as whole minutes and exposed as
      2-decimal hours, so period totals are summed before rounding.

Audit relevance:
    ``PayrollBreakdown`` is the record persisted by the caller. Its
    reconciliation properties (gross = components, net = gross - deductions)
    hold exactly on the stored fields; consumers must not re-derive them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum

from payroll_kernel.domain.values import ZERO, minutes_to_hours


class RateType(str, Enum):
    """How an employee's base rate is expressed."""

    HOURLY = "HOURLY"
    DAILY = "DAILY"
    MONTHLY = "MONTHLY"


class FlagCode(str, Enum):
    """Reasons an attendance entry could not be classified."""

    MISSING_TIME_IN = "MISSING_TIME_IN"
    MISSING_TIME_OUT = "MISSING_TIME_OUT"
    NEGATIVE_SPAN = "NEGATIVE_SPAN"  # Evening-out before morning-in
    NON_CHRONOLOGICAL_PUNCHES = "NON_CHRONOLOGICAL_PUNCHES"


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True)
class CompensationProfile:
    """
    Employee pay configuration, read-only to the core.

    Validation is deferred to ``RateNormalizer`` so that a malformed
    profile becomes a reported per-employee failure rather than an error
    at record-loading time. ``rate_type`` may be given as a ``RateType``
    or its string name.
    """

    rate_type: RateType | str | None
    base_rate: Decimal | None
    employee_code: str | None = None
    employee_name: str | None = None


@dataclass(frozen=True)
class AttendanceEntry:
    """
    One day of already-parsed punches for one employee.

    Punches are local times of day. When ``absent`` is set the punches
    are ignored entirely.
    """

    work_date: date
    time_in: time | None = None  # Morning in
    lunch_out: time | None = None
    lunch_in: time | None = None
    time_out: time | None = None  # Evening out
    absent: bool = False
    holiday: bool = False
    rest_day: bool = False

    @property
    def is_premium_day(self) -> bool:
        """Holiday and rest-day hours share the holiday bucket."""
        return self.holiday or self.rest_day


@dataclass(frozen=True)
class PayPeriod:
    """Pay period window (inclusive on both ends)."""

    start: date
    end: date
    name: str | None = None
    pay_date: date | None = None

    @property
    def day_count(self) -> int:
        """Number of calendar dates in the window."""
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class Allowances:
    """Caller-computed allowance totals, passed through unchanged."""

    taxable: Decimal = ZERO
    non_taxable: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.taxable + self.non_taxable


# =============================================================================
# Hours
# =============================================================================


@dataclass(frozen=True)
class DataQualityFlag:
    """Non-fatal attendance problem surfaced for human review."""

    work_date: date
    code: FlagCode
    message: str

    def __str__(self) -> str:
        return f"{self.work_date.isoformat()} {self.code.value}: {self.message}"


@dataclass(frozen=True)
class HourBreakdown:
    """
    Categorized time for a single attendance entry.

    Night-differential minutes overlap regular/overtime/holiday minutes;
    they are a premium add-on, not a disjoint bucket.
    """

    work_date: date
    regular_minutes: int = 0
    overtime_minutes: int = 0
    night_diff_minutes: int = 0
    holiday_minutes: int = 0
    late_minutes: int = 0
    undertime_minutes: int = 0
    flag: DataQualityFlag | None = None

    def __post_init__(self) -> None:
        for name in (
            "regular_minutes",
            "overtime_minutes",
            "night_diff_minutes",
            "holiday_minutes",
            "late_minutes",
            "undertime_minutes",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

    @property
    def is_classified(self) -> bool:
        return self.flag is None

    @property
    def worked_minutes(self) -> int:
        """Paid minutes (regular + overtime + holiday)."""
        return self.regular_minutes + self.overtime_minutes + self.holiday_minutes

    @property
    def regular_hours(self) -> Decimal:
        return minutes_to_hours(self.regular_minutes)

    @property
    def overtime_hours(self) -> Decimal:
        return minutes_to_hours(self.overtime_minutes)

    @property
    def night_diff_hours(self) -> Decimal:
        return minutes_to_hours(self.night_diff_minutes)

    @property
    def holiday_hours(self) -> Decimal:
        return minutes_to_hours(self.holiday_minutes)


@dataclass(frozen=True)
class PeriodTotals:
    """Sums of HourBreakdown across a pay period, plus day counters."""

    regular_minutes: int = 0
    overtime_minutes: int = 0
    night_diff_minutes: int = 0
    holiday_minutes: int = 0
    late_minutes: int = 0
    undertime_minutes: int = 0
    days_worked: int = 0
    days_absent: int = 0
    flags: tuple[DataQualityFlag, ...] = ()

    @property
    def regular_hours(self) -> Decimal:
        return minutes_to_hours(self.regular_minutes)

    @property
    def overtime_hours(self) -> Decimal:
        return minutes_to_hours(self.overtime_minutes)

    @property
    def night_diff_hours(self) -> Decimal:
        return minutes_to_hours(self.night_diff_minutes)

    @property
    def holiday_hours(self) -> Decimal:
        return minutes_to_hours(self.holiday_minutes)

    @property
    def has_flags(self) -> bool:
        return len(self.flags) > 0


# =============================================================================
# Statutory results
# =============================================================================


@dataclass(frozen=True)
class ContributionResult:
    """
    Output of one contribution calculator.

    ``base_amount`` is the figure the rates were applied to: the monthly
    salary credit for social insurance, the clamped salary for health
    insurance, the capped salary for the housing fund.
    """

    label: str
    monthly_salary: Decimal
    base_amount: Decimal
    employee_rate: Decimal
    employer_rate: Decimal
    employee_share: Decimal
    employer_share: Decimal
    explanation: str


@dataclass(frozen=True)
class TaxResult:
    """Output of the progressive income-tax calculator."""

    label: str
    taxable_income: Decimal
    annual_income: Decimal
    annual_tax: Decimal
    tax: Decimal
    periods_per_year: int
    bracket_description: str
    explanation: str


# =============================================================================
# Output
# =============================================================================


@dataclass(frozen=True)
class PayrollBreakdown:
    """
    Fully itemized payroll result for one employee and one period.

    Reconciliation (exact, on the stored 2-decimal fields):
        gross_pay == basic_pay + overtime_pay + night_diff_pay
                     + holiday_pay + total_allowances
        net_pay == max(0, gross_pay - total_deductions)
    """

    period: PayPeriod
    rate_type: RateType
    hourly_rate: Decimal
    monthly_equivalent: Decimal
    totals: PeriodTotals

    basic_pay: Decimal
    overtime_pay: Decimal
    night_diff_pay: Decimal
    holiday_pay: Decimal
    taxable_allowances: Decimal
    non_taxable_allowances: Decimal
    gross_pay: Decimal

    social_insurance: ContributionResult
    health_insurance: ContributionResult
    housing_fund: ContributionResult
    taxable_income: Decimal
    income_tax: TaxResult
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal

    computation_trail: str = field(repr=False, default="")
    employee_code: str | None = None
    table_version: str | None = None

    @property
    def total_allowances(self) -> Decimal:
        return self.taxable_allowances + self.non_taxable_allowances

    @property
    def social_insurance_contribution(self) -> Decimal:
        return self.social_insurance.employee_share

    @property
    def health_insurance_contribution(self) -> Decimal:
        return self.health_insurance.employee_share

    @property
    def housing_fund_contribution(self) -> Decimal:
        return self.housing_fund.employee_share

    @property
    def withholding_tax(self) -> Decimal:
        return self.income_tax.tax

    @property
    def statutory_deductions(self) -> Decimal:
        return (
            self.social_insurance.employee_share
            + self.health_insurance.employee_share
            + self.housing_fund.employee_share
            + self.income_tax.tax
        )

    @property
    def employer_contributions(self) -> Decimal:
        """Employer-side shares; informational, never deducted."""
        return (
            self.social_insurance.employer_share
            + self.health_insurance.employer_share
            + self.housing_fund.employer_share
        )

    @property
    def flags(self) -> tuple[DataQualityFlag, ...]:
        return self.totals.flags
