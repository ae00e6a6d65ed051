"""
Rate Normalizer -- canonical hourly rate and monthly-equivalent salary.

Every downstream figure is priced from one of two numbers derived here:
the hourly rate (earnings) and the monthly-equivalent salary (statutory
contributions). A profile that cannot produce them is a fatal
configuration error for that employee.

Conversions, with the default 26-day / 8-hour labor calendar:

    rate type  | hourly rate        | monthly equivalent
    -----------|--------------------|-------------------
    MONTHLY    | rate / 26 / 8      | rate
    DAILY      | rate / 8           | rate * 26
    HOURLY     | rate               | rate * 8 * 26

The hourly rate keeps 4 decimals so rounding does not compound across
hour categories; the monthly equivalent is a 2-decimal amount.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from payroll_config.schema import RateBasis
from payroll_kernel.domain.dtos import CompensationProfile, RateType
from payroll_kernel.domain.values import format_peso, round_money, round_rate
from payroll_kernel.exceptions import (
    InvalidBaseRateError,
    InvalidRateTypeError,
    MissingCompensationProfileError,
)
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.rates")


def parse_rate_type(value: RateType | str | None, employee_code: str | None = None) -> RateType:
    """Resolve a RateType from an enum member or its (case-insensitive) name."""
    if isinstance(value, RateType):
        return value
    if isinstance(value, str):
        try:
            return RateType(value.strip().upper())
        except ValueError:
            pass
    raise InvalidRateTypeError(value, employee_code)


def parse_base_rate(value: object, employee_code: str | None = None) -> Decimal:
    """Resolve a positive, finite Decimal base rate."""
    if value is None:
        raise InvalidBaseRateError(None, employee_code)
    if isinstance(value, (bool, float)):
        raise InvalidBaseRateError(value, employee_code, reason="use Decimal, int or str")
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidBaseRateError(value, employee_code, reason="not a number") from None
    if not rate.is_finite() or rate <= 0:
        raise InvalidBaseRateError(rate, employee_code)
    return rate


class RateNormalizer:
    """
    Validated view of a compensation profile.

    Construction validates the profile and raises a ``ConfigurationError``
    subclass when it is missing or malformed.
    """

    def __init__(self, profile: CompensationProfile | None, basis: RateBasis | None = None):
        if profile is None:
            raise MissingCompensationProfileError()
        self.basis = basis or RateBasis()
        self.employee_code = profile.employee_code
        try:
            self.rate_type = parse_rate_type(profile.rate_type, profile.employee_code)
            self.base_rate = parse_base_rate(profile.base_rate, profile.employee_code)
        except (InvalidRateTypeError, InvalidBaseRateError) as exc:
            logger.warning(
                "compensation_profile_invalid",
                extra={
                    "employee_code": profile.employee_code,
                    "error_code": exc.code,
                    "rate_type": str(profile.rate_type),
                    "base_rate": str(profile.base_rate),
                },
            )
            raise

    @property
    def _hours_per_month(self) -> Decimal:
        return Decimal(self.basis.working_days_per_month * self.basis.hours_per_day)

    def to_hourly_rate(self) -> Decimal:
        """Canonical hourly rate, 4 decimals."""
        if self.rate_type == RateType.MONTHLY:
            return round_rate(self.base_rate / self._hours_per_month)
        if self.rate_type == RateType.DAILY:
            return round_rate(self.base_rate / Decimal(self.basis.hours_per_day))
        return round_rate(self.base_rate)

    def to_monthly_equivalent(self) -> Decimal:
        """Monthly-equivalent salary used by the statutory calculators."""
        if self.rate_type == RateType.MONTHLY:
            return round_money(self.base_rate)
        if self.rate_type == RateType.DAILY:
            return round_money(self.base_rate * Decimal(self.basis.working_days_per_month))
        return round_money(self.base_rate * self._hours_per_month)

    def describe(self) -> str:
        return f"{self.rate_type.value} {format_peso(self.base_rate)}"
