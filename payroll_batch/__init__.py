"""
payroll_batch -- Per-employee payroll runs over a shared pay period.

Wraps ``PayrollComputationEngine`` in a runner that computes every
employee independently, records configuration failures per employee
instead of aborting the run, and optionally fans out over a thread pool.

Architecture:
    payroll_batch/ is a top-level package.  Nothing in payroll_kernel/,
    payroll_engines/ or payroll_config/ imports from payroll_batch.
"""

from payroll_batch.domain.types import (
    BatchRunResult,
    BatchRunStatus,
    EmployeePayrollInput,
    EmployeeRunResult,
    RunItemStatus,
)
from payroll_batch.services.runner import PayrollBatchRunner

__all__ = [
    "BatchRunResult",
    "BatchRunStatus",
    "EmployeePayrollInput",
    "EmployeeRunResult",
    "PayrollBatchRunner",
    "RunItemStatus",
]
