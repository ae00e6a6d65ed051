"""
Pure domain layer.

Immutable inputs, intermediate values and results of the payroll
computation, plus the shared rounding rules. No I/O, no clock, no
dependency on engines or configuration.
"""

from payroll_kernel.domain.dtos import (
    AttendanceEntry,
    Allowances,
    CompensationProfile,
    ContributionResult,
    DataQualityFlag,
    FlagCode,
    HourBreakdown,
    PayPeriod,
    PayrollBreakdown,
    PeriodTotals,
    RateType,
    TaxResult,
)
from payroll_kernel.domain.values import (
    CENTS,
    ZERO,
    format_percent,
    format_peso,
    minutes_to_hours,
    round_money,
    round_rate,
    to_decimal,
)

__all__ = [
    # Inputs
    "AttendanceEntry",
    "Allowances",
    "CompensationProfile",
    "PayPeriod",
    "RateType",
    # Hours
    "DataQualityFlag",
    "FlagCode",
    "HourBreakdown",
    "PeriodTotals",
    # Results
    "ContributionResult",
    "PayrollBreakdown",
    "TaxResult",
    # Values
    "CENTS",
    "ZERO",
    "format_percent",
    "format_peso",
    "minutes_to_hours",
    "round_money",
    "round_rate",
    "to_decimal",
]
