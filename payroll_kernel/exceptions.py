"""
Typed Exception Hierarchy for the Payroll Kernel.

Every error a caller is expected to handle has its own class, a
machine-readable ``code`` attribute and structured data attributes, so
callers catch by type and report by code instead of parsing messages.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollKernelError (base)
    |
    +-- ConfigurationError
    |   +-- MissingCompensationProfileError
    |   +-- InvalidRateTypeError
    |   +-- InvalidBaseRateError
    |   +-- InvalidPayPeriodError
    |   +-- InvalidAdjustmentError
    |
    +-- ComputationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|---------------------------------
Configuration   | MISSING_COMPENSATION_PROFILE  | No profile supplied for employee
                | INVALID_RATE_TYPE             | Rate type missing or unknown
                | INVALID_BASE_RATE             | Base rate missing, zero or negative
                | INVALID_PAY_PERIOD            | Period start after period end
                | INVALID_ADJUSTMENT            | Negative or non-numeric adjustment
----------------|-------------------------------|---------------------------------
Computation     | COMPUTATION_ERROR             | Per-employee failure in a batch

Data-quality problems in attendance (missing punches, punch-out before
punch-in) are NOT exceptions. They are reported as ``DataQualityFlag``
values inside the computed ``PayrollBreakdown``.

===============================================================================
HANDLING PATTERN
===============================================================================

    try:
        breakdown = engine.compute(profile, period, entries)
    except ConfigurationError as e:
        report_failure(employee_id, code=e.code, reason=str(e))
"""


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Configuration exceptions


class ConfigurationError(PayrollKernelError):
    """
    Base exception for invalid employee-level configuration.

    Fatal for the employee's computation: no partial result is produced.
    """

    code: str = "CONFIGURATION_ERROR"


class MissingCompensationProfileError(ConfigurationError):
    """No compensation profile was supplied."""

    code: str = "MISSING_COMPENSATION_PROFILE"

    def __init__(self, employee_code: str | None = None):
        self.employee_code = employee_code
        subject = f" for employee {employee_code}" if employee_code else ""
        super().__init__(f"Compensation profile is missing{subject}")


class InvalidRateTypeError(ConfigurationError):
    """Rate type is missing or is not HOURLY, DAILY or MONTHLY."""

    code: str = "INVALID_RATE_TYPE"

    def __init__(self, rate_type: object, employee_code: str | None = None):
        self.rate_type = None if rate_type is None else str(rate_type)
        self.employee_code = employee_code
        if rate_type is None:
            message = "Rate type is missing"
        else:
            message = (
                f"Unknown rate type {rate_type!r} "
                f"(expected HOURLY, DAILY or MONTHLY)"
            )
        if employee_code:
            message = f"{message} for employee {employee_code}"
        super().__init__(message)


class InvalidBaseRateError(ConfigurationError):
    """Base rate is missing, zero or negative."""

    code: str = "INVALID_BASE_RATE"

    def __init__(
        self,
        base_rate: object,
        employee_code: str | None = None,
        reason: str | None = None,
    ):
        self.base_rate = None if base_rate is None else str(base_rate)
        self.employee_code = employee_code
        if base_rate is None:
            message = "Base rate is missing"
        elif reason:
            message = f"Base rate {base_rate!r} is invalid: {reason}"
        else:
            message = f"Base rate must be positive, got {base_rate}"
        if employee_code:
            message = f"{message} for employee {employee_code}"
        super().__init__(message)


class InvalidPayPeriodError(ConfigurationError):
    """Pay period window is inverted."""

    code: str = "INVALID_PAY_PERIOD"

    def __init__(self, start: object, end: object):
        self.start = str(start)
        self.end = str(end)
        super().__init__(
            f"Pay period start {start} is after pay period end {end}"
        )


class InvalidAdjustmentError(ConfigurationError):
    """A pass-through allowance or deduction amount is negative or not a finite number."""

    code: str = "INVALID_ADJUSTMENT"

    def __init__(self, field_name: str, amount: object, reason: str | None = None):
        self.field_name = field_name
        self.amount = str(amount)
        if reason:
            message = f"{field_name} {amount!r} is invalid: {reason}"
        else:
            message = f"{field_name} cannot be negative, got {amount}"
        super().__init__(message)



# Computation exceptions


class ComputationError(PayrollKernelError):
    """Per-employee computation failure reported by the batch runner."""

    code: str = "COMPUTATION_ERROR"

    def __init__(self, employee_key: str, reason: str, cause_code: str | None = None):
        self.employee_key = employee_key
        self.reason = reason
        self.cause_code = cause_code
        super().__init__(f"Payroll computation failed for {employee_key}: {reason}")
