"""
Period Aggregator -- fold per-day classifications into period totals.

Pure summation: every entry is classified once and added once. Counters
follow the punches, not the hours: an entry counts as a day worked when
it is not absent and has a morning-in punch (even if it is otherwise
unclassifiable), and as a day absent when it is marked absent.

The aggregator does not filter by date. Entries outside the pay period
must be removed by the caller before aggregation.
"""

from __future__ import annotations

from collections.abc import Iterable

from payroll_kernel.domain.dtos import AttendanceEntry, HourBreakdown, PeriodTotals
from payroll_kernel.logging_config import get_logger
from payroll_engines.hours import HoursClassifier

logger = get_logger("engines.aggregation")


class PeriodAggregator:
    """Classify and sum a period's attendance entries."""

    def __init__(self, classifier: HoursClassifier | None = None):
        self.classifier = classifier or HoursClassifier()

    def classify_all(self, entries: Iterable[AttendanceEntry]) -> tuple[HourBreakdown, ...]:
        return tuple(self.classifier.classify(e) for e in entries)

    def aggregate(self, entries: Iterable[AttendanceEntry]) -> PeriodTotals:
        entries = tuple(entries)
        return self.fold(entries, self.classify_all(entries))

    def fold(
        self,
        entries: tuple[AttendanceEntry, ...],
        breakdowns: tuple[HourBreakdown, ...],
    ) -> PeriodTotals:
        """Sum already-classified entries. ``breakdowns[i]`` belongs to ``entries[i]``."""
        if len(entries) != len(breakdowns):
            raise ValueError(
                f"Got {len(breakdowns)} breakdowns for {len(entries)} entries"
            )

        regular = overtime = night = holiday = late = undertime = 0
        days_worked = days_absent = 0
        flags = []

        for entry, hb in zip(entries, breakdowns):
            if entry.absent:
                days_absent += 1
                continue
            if entry.time_in is not None:
                days_worked += 1
            if hb.flag is not None:
                flags.append(hb.flag)
            regular += hb.regular_minutes
            overtime += hb.overtime_minutes
            night += hb.night_diff_minutes
            holiday += hb.holiday_minutes
            late += hb.late_minutes
            undertime += hb.undertime_minutes

        totals = PeriodTotals(
            regular_minutes=regular,
            overtime_minutes=overtime,
            night_diff_minutes=night,
            holiday_minutes=holiday,
            late_minutes=late,
            undertime_minutes=undertime,
            days_worked=days_worked,
            days_absent=days_absent,
            flags=tuple(flags),
        )

        logger.info(
            "period_hours_aggregated",
            extra={
                "entry_count": len(entries),
                "days_worked": days_worked,
                "days_absent": days_absent,
                "regular_hours": str(totals.regular_hours),
                "overtime_hours": str(totals.overtime_hours),
                "night_diff_hours": str(totals.night_diff_hours),
                "holiday_hours": str(totals.holiday_hours),
                "flag_count": len(flags),
            },
        )
        return totals
