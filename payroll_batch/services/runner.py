"""
PayrollBatchRunner -- per-employee isolated payroll computation.

Contract:
    ``run()`` computes every employee of a batch against one pay period
    and returns a ``BatchRunResult`` with one ``EmployeeRunResult`` per
    input, in input order.

Invariants enforced:
    - A ``PayrollKernelError`` for one employee (missing profile,
      invalid rate, negative adjustment, ...) is recorded as that
      employee's FAILED result and never aborts the batch.
    - Any other exception is a defect, not a data problem, and propagates.
    - Employees share no mutable state, so running on a thread pool
      yields the same results as running sequentially.

Non-goals:
    - Does NOT persist results or select tables -- the caller owns both.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

from payroll_kernel.domain.dtos import PayPeriod
from payroll_kernel.exceptions import PayrollKernelError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_engines.payroll import PayrollComputationEngine

from payroll_batch.domain.types import (
    BatchRunResult,
    BatchRunStatus,
    EmployeePayrollInput,
    EmployeeRunResult,
    RunItemStatus,
)

logger = get_logger("batch.runner")


class PayrollBatchRunner:
    """Runs one engine over many employees.

    ``max_workers`` > 1 fans employees out over a thread pool.
    """

    def __init__(self, engine: PayrollComputationEngine, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._engine = engine
        self._max_workers = max_workers

    def run(
        self,
        period: PayPeriod,
        items: Iterable[EmployeePayrollInput],
        batch_id: str | None = None,
    ) -> BatchRunResult:
        """Compute every employee and summarize the run."""
        start_time = time.monotonic()
        batch_id = batch_id or str(uuid4())
        items = tuple(items)
        period_id = period.name or f"{period.start.isoformat()}/{period.end.isoformat()}"

        logger.info(
            "payroll_batch_started",
            extra={
                "batch_id": batch_id,
                "period_id": period_id,
                "total_items": len(items),
                "max_workers": self._max_workers,
            },
        )

        def run_one(indexed: tuple[int, EmployeePayrollInput]) -> EmployeeRunResult:
            index, item = indexed
            with LogContext.bind(
                batch_id=batch_id,
                employee_id=item.employee_key,
                period_id=period_id,
            ):
                return self._run_item(index, item, period)

        if self._max_workers == 1 or len(items) <= 1:
            results = [run_one(pair) for pair in enumerate(items)]
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                results = list(pool.map(run_one, enumerate(items)))

        succeeded = sum(1 for r in results if r.succeeded)
        failed = len(results) - succeeded
        if failed == 0:
            status = BatchRunStatus.COMPLETED
        elif succeeded == 0:
            status = BatchRunStatus.FAILED
        else:
            status = BatchRunStatus.PARTIALLY_COMPLETED

        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            "payroll_batch_completed",
            extra={
                "batch_id": batch_id,
                "period_id": period_id,
                "status": status.value,
                "succeeded": succeeded,
                "failed": failed,
                "duration_ms": duration_ms,
            },
        )

        return BatchRunResult(
            batch_id=batch_id,
            status=status,
            total_items=len(results),
            succeeded=succeeded,
            failed=failed,
            item_results=tuple(results),
            duration_ms=duration_ms,
        )

    def _run_item(
        self,
        index: int,
        item: EmployeePayrollInput,
        period: PayPeriod,
    ) -> EmployeeRunResult:
        item_start = time.monotonic()
        try:
            breakdown = self._engine.compute(
                item.profile,
                period,
                item.entries,
                allowances=item.allowances,
                other_deductions=item.other_deductions,
            )
        except PayrollKernelError as exc:
            logger.warning(
                "payroll_batch_item_failed",
                extra={
                    "item_index": index,
                    "employee_key": item.employee_key,
                    "error_code": exc.code,
                    "error_message": str(exc),
                },
            )
            return EmployeeRunResult(
                item_index=index,
                employee_key=item.employee_key,
                status=RunItemStatus.FAILED,
                error_code=exc.code,
                error_message=str(exc),
                duration_ms=int((time.monotonic() - item_start) * 1000),
            )

        return EmployeeRunResult(
            item_index=index,
            employee_key=item.employee_key,
            status=RunItemStatus.SUCCEEDED,
            breakdown=breakdown,
            duration_ms=int((time.monotonic() - item_start) * 1000),
        )
