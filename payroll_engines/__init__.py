"""
Payroll engines -- pure calculation layer.

Each engine is a plain class over immutable configuration with no I/O
and no clock reads:

    RateNormalizer             profile -> hourly rate, monthly equivalent
    HoursClassifier            one attendance entry -> HourBreakdown
    PeriodAggregator           entries -> PeriodTotals
    SocialInsuranceCalculator  monthly salary -> MSC-banded contribution
    HealthInsuranceCalculator  monthly salary -> clamped premium share
    HousingFundCalculator      monthly salary -> capped contribution
    IncomeTaxCalculator        taxable income -> progressive withholding
    PayrollComputationEngine   all of the above -> PayrollBreakdown

Usage:
    from payroll_config import get_pay_policy, get_statutory_tables
    from payroll_engines import PayrollComputationEngine

    engine = PayrollComputationEngine(get_statutory_tables(), get_pay_policy())
    breakdown = engine.compute(profile, period, entries)
    print(breakdown.computation_trail)
"""

from payroll_engines.aggregation import PeriodAggregator
from payroll_engines.health_insurance import HealthInsuranceCalculator
from payroll_engines.hours import HoursClassifier
from payroll_engines.housing_fund import HousingFundCalculator
from payroll_engines.income_tax import (
    MONTHLY_PERIODS,
    SEMI_MONTHLY_PERIODS,
    IncomeTaxCalculator,
)
from payroll_engines.payroll import PayrollComputationEngine
from payroll_engines.rates import RateNormalizer
from payroll_engines.social_insurance import SocialInsuranceCalculator
from payroll_engines.tracer import compute_input_fingerprint, traced_engine
from payroll_engines.trail import render_trail

__all__ = [
    "HealthInsuranceCalculator",
    "HoursClassifier",
    "HousingFundCalculator",
    "IncomeTaxCalculator",
    "MONTHLY_PERIODS",
    "PayrollComputationEngine",
    "PeriodAggregator",
    "RateNormalizer",
    "SEMI_MONTHLY_PERIODS",
    "SocialInsuranceCalculator",
    "compute_input_fingerprint",
    "render_trail",
    "traced_engine",
]
