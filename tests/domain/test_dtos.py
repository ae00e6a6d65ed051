"""Tests for payroll domain DTOs and value helpers."""

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from payroll_kernel.domain.dtos import (
    Allowances,
    AttendanceEntry,
    HourBreakdown,
    PayPeriod,
    PeriodTotals,
)
from payroll_kernel.domain.values import (
    format_percent,
    format_peso,
    minutes_to_hours,
    round_money,
    round_rate,
    to_decimal,
)


class TestValues:
    def test_round_money_half_up(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")

    def test_round_rate(self):
        assert round_rate(Decimal("120.192307")) == Decimal("120.1923")
        assert round_rate(Decimal("0.00005")) == Decimal("0.0001")

    def test_minutes_to_hours(self):
        assert minutes_to_hours(450) == Decimal("7.50")
        assert minutes_to_hours(20) == Decimal("0.33")
        assert minutes_to_hours(0) == Decimal("0.00")

    def test_to_decimal_rejects_float(self):
        with pytest.raises(TypeError):
            to_decimal(1.5)

    def test_to_decimal(self):
        assert to_decimal("12.50") == Decimal("12.50")
        assert to_decimal(7) == Decimal("7")

    def test_format_peso(self):
        assert format_peso(Decimal("1234567.5")) == "₱1,234,567.50"
        assert format_peso(Decimal("125"), places=4) == "₱125.0000"

    @pytest.mark.parametrize(
        "rate,text",
        [("0.045", "4.5%"), ("0.02", "2%"), ("0.10", "10%"), ("0.025", "2.5%"), ("1", "100%")],
    )
    def test_format_percent(self, rate, text):
        assert format_percent(Decimal(rate)) == text


class TestDTOs:
    def test_frozen(self):
        entry = AttendanceEntry(work_date=date(2024, 3, 4))
        with pytest.raises(FrozenInstanceError):
            entry.absent = True

    def test_premium_day(self):
        assert AttendanceEntry(work_date=date(2024, 3, 4), rest_day=True).is_premium_day
        assert not AttendanceEntry(work_date=date(2024, 3, 4)).is_premium_day

    def test_period_day_count(self):
        assert PayPeriod(date(2024, 3, 1), date(2024, 3, 31)).day_count == 31

    def test_allowances_total(self):
        assert Allowances(Decimal("100"), Decimal("50")).total == Decimal("150")

    def test_hour_breakdown_rejects_negative(self):
        with pytest.raises(ValueError, match="overtime_minutes"):
            HourBreakdown(work_date=date(2024, 3, 4), overtime_minutes=-1)

    def test_period_totals_hours(self):
        totals = PeriodTotals(regular_minutes=10560, night_diff_minutes=90)
        assert totals.regular_hours == Decimal("176.00")
        assert totals.night_diff_hours == Decimal("1.50")
        assert not totals.has_flags
