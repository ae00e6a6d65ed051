"""
Statutory table and pay policy schema.

Defines the human-authored, reviewable configuration that parameterizes
the payroll engines. YAML table sets are parsed into these types by the
loader; engines receive them as already-selected, immutable arguments.

Every type validates itself at construction and raises ``ValueError``
with a descriptive message. A table that constructs is a table every
calculator can use: bracket lookups never fail at computation time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal

_ZERO = Decimal("0")
_ONE = Decimal("1")


def _check_rate(name: str, rate: Decimal) -> None:
    if rate < _ZERO or rate > _ONE:
        raise ValueError(f"{name} must be between 0 and 1, got {rate}")


# ---------------------------------------------------------------------------
# Social insurance (monthly salary credit bands)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SalaryCreditBand:
    """One ``[salary_from, salary_to] -> credit`` row. Open-ended when salary_to is None."""

    salary_from: Decimal
    salary_to: Decimal | None
    credit: Decimal

    def __post_init__(self) -> None:
        if self.salary_from < _ZERO:
            raise ValueError("salary_from cannot be negative")
        if self.salary_to is not None and self.salary_to < self.salary_from:
            raise ValueError(
                f"salary_to ({self.salary_to}) is below salary_from ({self.salary_from})"
            )
        if self.credit <= _ZERO:
            raise ValueError("credit must be positive")

    def contains(self, salary: Decimal) -> bool:
        if salary < self.salary_from:
            return False
        return self.salary_to is None or salary <= self.salary_to


@dataclass(frozen=True)
class SocialInsuranceTable:
    """Monthly-salary-credit schedule with employee and employer rates."""

    label: str
    employee_rate: Decimal
    employer_rate: Decimal
    bands: tuple[SalaryCreditBand, ...]

    def __post_init__(self) -> None:
        _check_rate("employee_rate", self.employee_rate)
        _check_rate("employer_rate", self.employer_rate)
        if not self.bands:
            raise ValueError("Social insurance table needs at least one band")
        for prev, band in zip(self.bands, self.bands[1:]):
            if prev.salary_to is None:
                raise ValueError("Only the last band may be open-ended")
            if band.salary_from <= prev.salary_to:
                raise ValueError(
                    f"Bands must be ascending and non-overlapping: "
                    f"{band.salary_from} <= {prev.salary_to}"
                )
            if band.credit < prev.credit:
                raise ValueError("Band credits must not decrease")

    @property
    def floor_credit(self) -> Decimal:
        return self.bands[0].credit

    @property
    def ceiling_credit(self) -> Decimal:
        return self.bands[-1].credit


# ---------------------------------------------------------------------------
# Health insurance (premium on a clamped base)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HealthInsuranceTable:
    """Premium rate split equally between employee and employer."""

    label: str
    premium_rate: Decimal
    salary_floor: Decimal
    salary_ceiling: Decimal

    def __post_init__(self) -> None:
        _check_rate("premium_rate", self.premium_rate)
        if self.salary_floor <= _ZERO:
            raise ValueError("salary_floor must be positive")
        if self.salary_ceiling < self.salary_floor:
            raise ValueError("salary_ceiling cannot be below salary_floor")

    @property
    def employee_rate(self) -> Decimal:
        return self.premium_rate / 2

    @property
    def employer_rate(self) -> Decimal:
        return self.premium_rate - self.employee_rate


# ---------------------------------------------------------------------------
# Housing fund (two independent caps)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HousingFundTable:
    """
    Flat-rate contribution with a cap on the salary base and a separate
    peso ceiling on the employee share.
    """

    label: str
    employee_rate: Decimal
    employer_rate: Decimal
    salary_cap: Decimal
    employee_contribution_cap: Decimal

    def __post_init__(self) -> None:
        _check_rate("employee_rate", self.employee_rate)
        _check_rate("employer_rate", self.employer_rate)
        if self.salary_cap <= _ZERO:
            raise ValueError("salary_cap must be positive")
        if self.employee_contribution_cap <= _ZERO:
            raise ValueError("employee_contribution_cap must be positive")


# ---------------------------------------------------------------------------
# Income tax (progressive annual brackets)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TaxBracket:
    """``annual_tax = base_tax + (income - excess_over) * marginal_rate`` above threshold."""

    threshold: Decimal
    base_tax: Decimal
    marginal_rate: Decimal
    excess_over: Decimal

    def __post_init__(self) -> None:
        if self.threshold < _ZERO:
            raise ValueError("threshold cannot be negative")
        if self.base_tax < _ZERO:
            raise ValueError("base_tax cannot be negative")
        _check_rate("marginal_rate", self.marginal_rate)
        if self.excess_over > self.threshold:
            raise ValueError(
                f"excess_over ({self.excess_over}) cannot exceed threshold ({self.threshold})"
            )

    def annual_tax(self, annual_income: Decimal) -> Decimal:
        return self.base_tax + (annual_income - self.excess_over) * self.marginal_rate


@dataclass(frozen=True)
class IncomeTaxTable:
    """
    Strictly ascending bracket table.

    Income at or below the first threshold is exempt. The schedule may
    not drop at any boundary, which keeps tax monotonic in income.
    """

    label: str
    brackets: tuple[TaxBracket, ...]

    def __post_init__(self) -> None:
        if not self.brackets:
            raise ValueError("Income tax table needs at least one bracket")
        for prev, bracket in zip(self.brackets, self.brackets[1:]):
            if bracket.threshold <= prev.threshold:
                raise ValueError(
                    f"Bracket thresholds must be strictly ascending: "
                    f"{bracket.threshold} <= {prev.threshold}"
                )
            if bracket.annual_tax(bracket.threshold) < prev.annual_tax(bracket.threshold):
                raise ValueError(
                    f"Tax schedule decreases at threshold {bracket.threshold}"
                )

    @property
    def exemption_threshold(self) -> Decimal:
        return self.brackets[0].threshold


# ---------------------------------------------------------------------------
# Pay policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateBasis:
    """Labor calendar used to convert between pay frequencies."""

    working_days_per_month: int = 26
    hours_per_day: int = 8

    def __post_init__(self) -> None:
        if self.working_days_per_month <= 0:
            raise ValueError("working_days_per_month must be positive")
        if self.hours_per_day <= 0:
            raise ValueError("hours_per_day must be positive")


@dataclass(frozen=True)
class ShiftPolicy:
    """Fixed shift model used to classify punches."""

    shift_start: time = time(8, 0)
    shift_end: time = time(17, 0)
    regular_minutes_per_day: int = 480
    default_lunch_minutes: int = 60
    lunch_inference_threshold_minutes: int = 300
    night_start: time = time(22, 0)
    night_end: time = time(6, 0)

    def __post_init__(self) -> None:
        if self.shift_end <= self.shift_start:
            raise ValueError("shift_end must be after shift_start")
        if self.regular_minutes_per_day <= 0:
            raise ValueError("regular_minutes_per_day must be positive")
        if self.default_lunch_minutes < 0:
            raise ValueError("default_lunch_minutes cannot be negative")
        if self.lunch_inference_threshold_minutes < 0:
            raise ValueError("lunch_inference_threshold_minutes cannot be negative")
        if self.night_end >= self.night_start:
            raise ValueError("night window must wrap past midnight")


@dataclass(frozen=True)
class PremiumRates:
    """Multipliers applied to the hourly rate per hour category."""

    overtime_multiplier: Decimal = Decimal("1.25")
    night_differential_rate: Decimal = Decimal("0.10")
    holiday_multiplier: Decimal = Decimal("2.00")

    def __post_init__(self) -> None:
        if self.overtime_multiplier < _ZERO:
            raise ValueError("overtime_multiplier cannot be negative")
        _check_rate("night_differential_rate", self.night_differential_rate)
        if self.holiday_multiplier < _ZERO:
            raise ValueError("holiday_multiplier cannot be negative")


@dataclass(frozen=True)
class PayPolicy:
    """Employer-wide pay rules: calendar, shift model and premiums."""

    rate_basis: RateBasis = field(default_factory=RateBasis)
    shift: ShiftPolicy = field(default_factory=ShiftPolicy)
    premiums: PremiumRates = field(default_factory=PremiumRates)


# ---------------------------------------------------------------------------
# Table set
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatutoryTables:
    """One versioned, already-selected set of statutory tables."""

    version: str
    effective_from: date
    social_insurance: SocialInsuranceTable
    health_insurance: HealthInsuranceTable
    housing_fund: HousingFundTable
    income_tax: IncomeTaxTable
    checksum: str | None = None


@dataclass(frozen=True)
class PayrollConfigSet:
    """Everything parsed from one YAML table-set document."""

    tables: StatutoryTables
    policy: PayPolicy
    checksum: str
    source_path: str | None = None
