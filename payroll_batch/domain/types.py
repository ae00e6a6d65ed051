"""
payroll_batch.domain.types -- Pure frozen dataclasses for batch payroll runs.

Frozen dataclasses with enum status fields and tuples for immutable
collections.  ZERO I/O.

Invariants enforced:
    - A SUCCEEDED item carries a breakdown and no error; a FAILED item
      carries an error code and message and no breakdown.
    - ``BatchRunResult.item_results`` preserves input order.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from payroll_kernel.domain.dtos import (
    Allowances,
    AttendanceEntry,
    CompensationProfile,
    PayrollBreakdown,
)
from payroll_kernel.domain.values import ZERO
from payroll_kernel.exceptions import ComputationError


# =============================================================================
# Status enums
# =============================================================================


class BatchRunStatus(str, Enum):
    """Run-level outcome."""

    COMPLETED = "completed"  # Every employee computed
    PARTIALLY_COMPLETED = "partially_completed"  # Some employees failed
    FAILED = "failed"  # No employee computed


class RunItemStatus(str, Enum):
    """Per-employee outcome."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True)
class EmployeePayrollInput:
    """One employee's inputs for a run. ``employee_key`` identifies it in results."""

    employee_key: str
    profile: CompensationProfile | None
    entries: tuple[AttendanceEntry, ...] = ()
    allowances: Allowances | None = None
    other_deductions: Decimal = ZERO


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class EmployeeRunResult:
    """Immutable outcome of computing one employee."""

    item_index: int  # 0-indexed position in the input
    employee_key: str
    status: RunItemStatus
    breakdown: PayrollBreakdown | None = None
    error_code: str | None = None
    error_message: str | None = None
    duration_ms: int = 0

    def __post_init__(self) -> None:
        if self.status == RunItemStatus.SUCCEEDED and self.breakdown is None:
            raise ValueError("SUCCEEDED result requires a breakdown")
        if self.status == RunItemStatus.FAILED and self.error_code is None:
            raise ValueError("FAILED result requires an error_code")

    @property
    def succeeded(self) -> bool:
        return self.status == RunItemStatus.SUCCEEDED

    def as_error(self) -> ComputationError | None:
        """The failure as a ``ComputationError``, or None when it succeeded."""
        if self.succeeded:
            return None
        return ComputationError(
            self.employee_key,
            self.error_message or "",
            cause_code=self.error_code,
        )


@dataclass(frozen=True)
class BatchRunResult:
    """Immutable result of running a whole batch.

    Returned by ``PayrollBatchRunner.run()``.
    """

    batch_id: str
    status: BatchRunStatus
    total_items: int
    succeeded: int
    failed: int
    item_results: tuple[EmployeeRunResult, ...] = ()
    duration_ms: int = 0

    @property
    def breakdowns(self) -> tuple[PayrollBreakdown, ...]:
        return tuple(r.breakdown for r in self.item_results if r.breakdown is not None)

    @property
    def failures(self) -> tuple[EmployeeRunResult, ...]:
        return tuple(r for r in self.item_results if not r.succeeded)

    def failure_report(self) -> str:
        """One line per failed employee: ``key [CODE] message``."""
        return "\n".join(
            f"{r.employee_key} [{r.error_code}] {r.error_message}"
            for r in self.failures
        )
