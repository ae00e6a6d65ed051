"""
Hypothesis-based property tests for the payroll core.

Properties checked over generated profiles, attendance and adjustments:
- Idempotence: identical inputs give an equal breakdown and trail
- Reconciliation: gross and net reconcile exactly with the components
- Non-negativity: gross, net and every contribution are >= 0
- Tax monotonicity: more taxable income never means less tax
- Classification: hour buckets are never negative and flags zero them
"""

from datetime import date, time, timedelta
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from payroll_config import get_config_set
from payroll_engines.hours import HoursClassifier
from payroll_engines.income_tax import IncomeTaxCalculator
from payroll_engines.payroll import PayrollComputationEngine
from payroll_kernel.domain.dtos import (
    Allowances,
    AttendanceEntry,
    CompensationProfile,
    PayPeriod,
    RateType,
)

_CONFIG = get_config_set()
_ENGINE = PayrollComputationEngine(_CONFIG.tables, _CONFIG.policy)
_TAX = IncomeTaxCalculator(_CONFIG.tables.income_tax)
_CLASSIFIER = HoursClassifier(_CONFIG.policy.shift)
_PERIOD = PayPeriod(start=date(2024, 3, 1), end=date(2024, 3, 31))

_ZERO = Decimal("0")

money = st.decimals(min_value=Decimal("0"), max_value=Decimal("500000"), places=2)
optional_time = st.one_of(st.none(), st.times().map(lambda t: time(t.hour, t.minute)))


@composite
def profiles(draw):
    rate_type = draw(st.sampled_from(list(RateType)))
    upper = {"HOURLY": "2000", "DAILY": "20000", "MONTHLY": "500000"}[rate_type.value]
    base_rate = draw(st.decimals(min_value=Decimal("1"), max_value=Decimal(upper), places=2))
    return CompensationProfile(rate_type=rate_type, base_rate=base_rate)


@composite
def entries(draw, work_date=date(2024, 3, 4)):
    return AttendanceEntry(
        work_date=work_date,
        time_in=draw(optional_time),
        lunch_out=draw(optional_time),
        lunch_in=draw(optional_time),
        time_out=draw(optional_time),
        absent=draw(st.booleans()),
        holiday=draw(st.booleans()),
        rest_day=draw(st.booleans()),
    )


@composite
def periods_of_entries(draw):
    count = draw(st.integers(min_value=0, max_value=12))
    return [draw(entries(work_date=date(2024, 3, 1) + timedelta(days=i))) for i in range(count)]


_SUPPRESSED = [HealthCheck.too_slow, HealthCheck.function_scoped_fixture]

_SETTINGS = settings(max_examples=60, deadline=None, suppress_health_check=_SUPPRESSED)


class TestComputationProperties:
    @_SETTINGS
    @given(
        profile=profiles(),
        attendance=periods_of_entries(),
        taxable=money,
        non_taxable=money,
        other=money,
    )
    def test_reconciliation_and_non_negativity(self, profile, attendance, taxable, non_taxable, other):
        b = _ENGINE.compute(
            profile, _PERIOD, attendance,
            allowances=Allowances(taxable=taxable, non_taxable=non_taxable),
            other_deductions=other,
        )
        assert b.gross_pay == (
            b.basic_pay + b.overtime_pay + b.night_diff_pay + b.holiday_pay
            + b.taxable_allowances + b.non_taxable_allowances
        )
        assert b.net_pay == max(_ZERO, b.gross_pay - b.total_deductions)
        assert b.gross_pay >= _ZERO
        assert b.net_pay >= _ZERO
        assert b.taxable_income >= _ZERO
        for share in (
            b.social_insurance.employee_share,
            b.health_insurance.employee_share,
            b.housing_fund.employee_share,
            b.income_tax.tax,
            b.social_insurance.employer_share,
        ):
            assert share >= _ZERO

    @_SETTINGS
    @given(profile=profiles(), attendance=periods_of_entries())
    def test_idempotence(self, profile, attendance):
        first = _ENGINE.compute(profile, _PERIOD, attendance)
        second = _ENGINE.compute(profile, _PERIOD, attendance)
        assert first == second
        assert first.computation_trail == second.computation_trail


class TestTaxProperties:
    @settings(max_examples=200, deadline=None, suppress_health_check=_SUPPRESSED)
    @given(
        a=st.decimals(min_value=Decimal("-1000"), max_value=Decimal("2000000"), places=2),
        b=st.decimals(min_value=Decimal("-1000"), max_value=Decimal("2000000"), places=2),
    )
    def test_monotonic(self, a, b):
        low, high = min(a, b), max(a, b)
        assert _TAX.calculate(low).tax <= _TAX.calculate(high).tax

    @settings(max_examples=100, deadline=None, suppress_health_check=_SUPPRESSED)
    @given(income=st.decimals(min_value=Decimal("-1000000"), max_value=Decimal("0"), places=2))
    def test_non_positive_income_is_untaxed(self, income):
        assert _TAX.calculate(income).tax == _ZERO


class TestClassificationProperties:
    @settings(max_examples=300, deadline=None, suppress_health_check=_SUPPRESSED)
    @given(entry=entries())
    def test_buckets_never_negative(self, entry):
        hb = _CLASSIFIER.classify(entry)
        for minutes in (
            hb.regular_minutes, hb.overtime_minutes, hb.night_diff_minutes,
            hb.holiday_minutes, hb.late_minutes, hb.undertime_minutes,
        ):
            assert minutes >= 0
        if hb.flag is not None or entry.absent:
            assert hb.worked_minutes == 0
        assert hb.regular_minutes <= _CONFIG.policy.shift.regular_minutes_per_day
