"""
Computation Trail -- deterministic text rendering of a payroll result.

The trail lists every intermediate figure behind a ``PayrollBreakdown``:
the rate conversion, each hour category with its multiplier and peso
amount, each statutory calculator's explanation, the taxable-income
derivation, employer shares, data-quality flags and the net summary.

Rendering is a pure function of its arguments. It reads no clock, no
locale and no environment, and formats every Decimal with explicit
precision, so identical inputs always produce byte-identical text.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_config.schema import PremiumRates, StatutoryTables
from payroll_kernel.domain.dtos import PayrollBreakdown
from payroll_kernel.domain.values import format_percent, format_peso

TRAIL_TITLE = "=== Payroll Computation Breakdown ==="

_LABEL_WIDTH = 16


def _line(label: str, value: str) -> str:
    return f"{label:<{_LABEL_WIDTH}}: {value}"


def _rate(amount: Decimal) -> str:
    return format_peso(amount, places=4)


def _multiplier(value: Decimal) -> str:
    return f"{value:.2f}"


def render_trail(
    breakdown: PayrollBreakdown,
    *,
    tables: StatutoryTables,
    premiums: PremiumRates,
    rate_description: str,
    employee_name: str | None = None,
) -> str:
    """Render the audit trail for a computed breakdown."""
    b = breakdown
    t = b.totals
    rate = b.hourly_rate
    lines: list[str] = [TRAIL_TITLE]

    # Header
    if b.employee_code or employee_name:
        who = " - ".join(part for part in (b.employee_code, employee_name) if part)
        lines.append(_line("Employee", who))
    period = f"{b.period.start.isoformat()} to {b.period.end.isoformat()}"
    if b.period.name:
        period = f"{period} ({b.period.name})"
    lines.append(_line("Period", period))
    if b.period.pay_date is not None:
        lines.append(_line("Pay Date", b.period.pay_date.isoformat()))
    lines.append(_line("Tables", f"{tables.version} (effective {tables.effective_from.isoformat()})"))
    lines.append(_line("Rate", rate_description))
    lines.append(_line("Monthly Equiv.", format_peso(b.monthly_equivalent)))
    lines.append(_line("Hourly Rate", _rate(rate)))

    lines += [
        "",
        "--- Attendance ---",
        _line("Days Worked", str(t.days_worked)),
        _line("Days Absent", str(t.days_absent)),
        _line("Late", f"{t.late_minutes} min"),
        _line("Undertime", f"{t.undertime_minutes} min"),
    ]

    lines += [
        "",
        "--- Earnings ---",
        _line(
            "Regular Hours",
            f"{t.regular_hours} hrs × {_rate(rate)} = {format_peso(b.basic_pay)}",
        ),
        _line(
            "Overtime Hours",
            f"{t.overtime_hours} hrs × {_rate(rate)} × "
            f"{_multiplier(premiums.overtime_multiplier)} = {format_peso(b.overtime_pay)}",
        ),
        _line(
            "Night Diff Hrs",
            f"{t.night_diff_hours} hrs × {_rate(rate)} × "
            f"{format_percent(premiums.night_differential_rate)} = {format_peso(b.night_diff_pay)}",
        ),
        _line(
            "Holiday Hours",
            f"{t.holiday_hours} hrs × {_rate(rate)} × "
            f"{_multiplier(premiums.holiday_multiplier)} = {format_peso(b.holiday_pay)}",
        ),
        _line(
            "Allowances",
            f"{format_peso(b.taxable_allowances)} taxable + "
            f"{format_peso(b.non_taxable_allowances)} non-taxable = "
            f"{format_peso(b.total_allowances)}",
        ),
        _line("Gross Pay", format_peso(b.gross_pay)),
    ]

    contributions = (
        b.social_insurance.employee_share
        + b.health_insurance.employee_share
        + b.housing_fund.employee_share
    )
    lines += [
        "",
        "--- Deductions ---",
        b.social_insurance.explanation,
        b.health_insurance.explanation,
        b.housing_fund.explanation,
        _line(
            "Taxable Income",
            f"{format_peso(b.gross_pay)} - {format_peso(b.non_taxable_allowances)} non-taxable"
            f" - {format_peso(contributions)} contributions = {format_peso(b.taxable_income)}",
        ),
        b.income_tax.explanation,
        _line("Other", format_peso(b.other_deductions)),
        _line("Total Deductions", format_peso(b.total_deductions)),
    ]

    lines += [
        "",
        "--- Employer Contributions (not deducted) ---",
        _line(b.social_insurance.label, format_peso(b.social_insurance.employer_share)),
        _line(b.health_insurance.label, format_peso(b.health_insurance.employer_share)),
        _line(b.housing_fund.label, format_peso(b.housing_fund.employer_share)),
        _line("Total", format_peso(b.employer_contributions)),
    ]

    lines += ["", "--- Data Quality ---"]
    if t.flags:
        lines += [str(flag) for flag in t.flags]
    else:
        lines.append("(none)")

    lines += [
        "",
        "--- Summary ---",
        _line("Gross Pay", format_peso(b.gross_pay)),
        _line("Total Deductions", format_peso(b.total_deductions)),
        _line("NET PAY", format_peso(b.net_pay)),
    ]
    return "\n".join(lines)
