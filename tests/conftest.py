"""
Pytest fixtures for the payroll core test suite.

Provides:
- The bundled statutory tables and pay policy
- A shared PayrollComputationEngine
- Attendance entry / period factories
"""

from datetime import date, time, timedelta
from decimal import Decimal

import pytest

from payroll_config import get_config_set
from payroll_engines.payroll import PayrollComputationEngine
from payroll_kernel.domain.dtos import (
    AttendanceEntry,
    CompensationProfile,
    PayPeriod,
    RateType,
)
from payroll_kernel.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    """Keep logging configuration and context from leaking between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture(scope="session")
def config_set():
    return get_config_set("ph-2024")


@pytest.fixture(scope="session")
def tables(config_set):
    return config_set.tables


@pytest.fixture(scope="session")
def policy(config_set):
    return config_set.policy


@pytest.fixture(scope="session")
def engine(tables, policy):
    return PayrollComputationEngine(tables, policy)


@pytest.fixture
def march_2024():
    return PayPeriod(start=date(2024, 3, 1), end=date(2024, 3, 31), name="March 2024")


@pytest.fixture
def monthly_profile():
    return CompensationProfile(
        rate_type=RateType.MONTHLY,
        base_rate=Decimal("26000"),
        employee_code="E-001",
        employee_name="Juan Dela Cruz",
    )


@pytest.fixture
def make_entry():
    """Build an AttendanceEntry from ``"HH:MM"`` strings."""

    def _make(
        work_date: date = date(2024, 3, 4),
        time_in: str | None = "08:00",
        lunch_out: str | None = "12:00",
        lunch_in: str | None = "13:00",
        time_out: str | None = "17:00",
        **flags,
    ) -> AttendanceEntry:
        def t(value: str | None) -> time | None:
            return None if value is None else time.fromisoformat(value)

        return AttendanceEntry(
            work_date=work_date,
            time_in=t(time_in),
            lunch_out=t(lunch_out),
            lunch_in=t(lunch_in),
            time_out=t(time_out),
            **flags,
        )

    return _make


@pytest.fixture
def standard_days(make_entry):
    """``standard_days(n)``: n consecutive 08:00-17:00 days with a punched lunch hour."""

    def _days(count: int, start: date = date(2024, 3, 1)) -> list[AttendanceEntry]:
        return [make_entry(work_date=start + timedelta(days=i)) for i in range(count)]

    return _days
