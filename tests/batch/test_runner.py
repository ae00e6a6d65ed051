"""
Tests for PayrollBatchRunner.

Covers:
- Per-employee failure isolation
- Run status (COMPLETED / PARTIALLY_COMPLETED / FAILED)
- Input order preserved on a thread pool
- Sequential and parallel runs agree
- Non-kernel exceptions propagate
"""

import logging
from decimal import Decimal

import pytest

from payroll_batch import (
    BatchRunStatus,
    EmployeePayrollInput,
    EmployeeRunResult,
    PayrollBatchRunner,
    RunItemStatus,
)
from payroll_kernel.domain.dtos import Allowances, CompensationProfile, RateType
from payroll_kernel.exceptions import ComputationError


def _item(key: str, base_rate, entries=(), rate_type=RateType.MONTHLY) -> EmployeePayrollInput:
    return EmployeePayrollInput(
        employee_key=key,
        profile=CompensationProfile(rate_type=rate_type, base_rate=base_rate, employee_code=key),
        entries=tuple(entries),
    )


@pytest.fixture
def items(standard_days):
    days = standard_days(22)
    return [
        _item("E-001", Decimal("26000"), days),
        EmployeePayrollInput(employee_key="E-002", profile=None, entries=tuple(days)),
        _item("E-003", Decimal("610"), days, rate_type=RateType.DAILY),
        _item("E-004", Decimal("-5"), days),
    ]


class TestRunStatus:
    def test_partial_failure(self, engine, march_2024, items):
        result = PayrollBatchRunner(engine).run(march_2024, items, batch_id="B-1")
        assert result.batch_id == "B-1"
        assert result.status == BatchRunStatus.PARTIALLY_COMPLETED
        assert result.total_items == 4
        assert result.succeeded == 2
        assert result.failed == 2

    def test_failures_itemized(self, engine, march_2024, items):
        result = PayrollBatchRunner(engine).run(march_2024, items)
        failures = {r.employee_key: r for r in result.failures}
        assert failures["E-002"].error_code == "MISSING_COMPENSATION_PROFILE"
        assert failures["E-004"].error_code == "INVALID_BASE_RATE"
        assert failures["E-004"].breakdown is None
        assert "E-002 [MISSING_COMPENSATION_PROFILE]" in result.failure_report()

    def test_failure_as_error(self, engine, march_2024, items):
        result = PayrollBatchRunner(engine).run(march_2024, items)
        error = result.failures[0].as_error()
        assert isinstance(error, ComputationError)
        assert error.employee_key == "E-002"
        assert error.cause_code == "MISSING_COMPENSATION_PROFILE"
        assert result.item_results[0].as_error() is None

    def test_successful_breakdowns(self, engine, march_2024, items):
        result = PayrollBatchRunner(engine).run(march_2024, items)
        assert [b.employee_code for b in result.breakdowns] == ["E-001", "E-003"]
        assert result.breakdowns[0].net_pay == Decimal("19980.00")

    def test_all_succeed(self, engine, march_2024, items):
        result = PayrollBatchRunner(engine).run(march_2024, [items[0], items[2]])
        assert result.status == BatchRunStatus.COMPLETED
        assert result.failure_report() == ""

    def test_all_fail(self, engine, march_2024, items):
        result = PayrollBatchRunner(engine).run(march_2024, [items[1], items[3]])
        assert result.status == BatchRunStatus.FAILED

    def test_empty_batch(self, engine, march_2024):
        result = PayrollBatchRunner(engine).run(march_2024, [])
        assert result.status == BatchRunStatus.COMPLETED
        assert result.total_items == 0

    @pytest.mark.parametrize(
        "allowances, other_deductions",
        [
            (Allowances(taxable=12.5), Decimal("0")),
            (None, Decimal("NaN")),
            (None, "abc"),
        ],
    )
    def test_bad_adjustment_isolated(
        self, engine, march_2024, standard_days, allowances, other_deductions
    ):
        days = tuple(standard_days(22))
        items = [
            _item("E-001", Decimal("26000"), days),
            EmployeePayrollInput(
                employee_key="E-002",
                profile=CompensationProfile(
                    rate_type=RateType.MONTHLY, base_rate=Decimal("26000"), employee_code="E-002"
                ),
                entries=days,
                allowances=allowances,
                other_deductions=other_deductions,
            ),
        ]
        result = PayrollBatchRunner(engine).run(march_2024, items)
        assert result.status == BatchRunStatus.PARTIALLY_COMPLETED
        assert result.item_results[0].succeeded
        assert result.item_results[1].error_code == "INVALID_ADJUSTMENT"
        assert "E-002 [INVALID_ADJUSTMENT]" in result.failure_report()



class TestParallel:
    def test_parallel_matches_sequential(self, engine, march_2024, standard_days):
        items = [_item(f"E-{i:03d}", Decimal(20000 + i * 750), standard_days(i % 23)) for i in range(20)]
        sequential = PayrollBatchRunner(engine).run(march_2024, items)
        parallel = PayrollBatchRunner(engine, max_workers=4).run(march_2024, items)

        assert [r.employee_key for r in parallel.item_results] == [i.employee_key for i in items]
        assert [r.item_index for r in parallel.item_results] == list(range(20))
        assert parallel.breakdowns == sequential.breakdowns

    def test_invalid_worker_count(self, engine):
        with pytest.raises(ValueError, match="max_workers"):
            PayrollBatchRunner(engine, max_workers=0)


class TestErrorPropagation:
    def test_non_kernel_error_propagates(self, march_2024):
        class BrokenEngine:
            def compute(self, *args, **kwargs):
                raise RuntimeError("defect")

        with pytest.raises(RuntimeError, match="defect"):
            PayrollBatchRunner(BrokenEngine()).run(march_2024, [_item("E-1", Decimal("1"))])


class TestLogging:
    def test_failure_logged_with_employee_context(self, engine, march_2024, items, caplog):
        with caplog.at_level(logging.WARNING, logger="payroll_kernel.batch.runner"):
            PayrollBatchRunner(engine).run(march_2024, items)
        failed = [r for r in caplog.records if r.getMessage() == "payroll_batch_item_failed"]
        assert [r.employee_key for r in failed] == ["E-002", "E-004"]


class TestResultTypes:
    def test_succeeded_requires_breakdown(self):
        with pytest.raises(ValueError, match="breakdown"):
            EmployeeRunResult(item_index=0, employee_key="E", status=RunItemStatus.SUCCEEDED)

    def test_failed_requires_code(self):
        with pytest.raises(ValueError, match="error_code"):
            EmployeeRunResult(item_index=0, employee_key="E", status=RunItemStatus.FAILED)
