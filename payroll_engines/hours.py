"""
Hours Classifier (``payroll_engines.hours``).

Responsibility
--------------
Turns one attendance entry's raw punches into categorized minutes under
a fixed shift model (default 08:00-17:00, one unpaid lunch hour, night
window 22:00-06:00):

1. Absent entries classify to all zeros; punches are ignored.
2. Entries without a morning-in or evening-out punch, with evening-out
   before morning-in, or with out-of-order punches are unclassifiable:
   zero minutes plus a ``DataQualityFlag``.
3. Worked minutes = evening-out - morning-in, minus the punched lunch
   interval, or minus a default lunch when no lunch was punched and the
   span exceeds the inference threshold.
4. The first regular-day's worth of worked minutes is regular time
   (holiday time on holidays and rest days); the rest is overtime.
5. Night-differential minutes are the shift's overlap with the night
   window. They overlap the buckets above; they are a premium add-on.
6. Late = minutes after shift start; undertime = minutes before shift
   end, on non-holiday entries only.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.

Failure modes
-------------
* Never raises for bad attendance data; returns a flagged breakdown.
* Shifts that cross midnight are not supported and are flagged as
  ``NEGATIVE_SPAN``.
"""

from __future__ import annotations

from datetime import time

from payroll_config.schema import ShiftPolicy
from payroll_kernel.domain.dtos import (
    AttendanceEntry,
    DataQualityFlag,
    FlagCode,
    HourBreakdown,
)
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.hours")

_MINUTES_PER_DAY = 24 * 60


def minute_of_day(t: time) -> int:
    """Minutes since midnight. Seconds are truncated."""
    return t.hour * 60 + t.minute


def overlap_minutes(start: int, end: int, window_start: int, window_end: int) -> int:
    """Length of the intersection of ``[start, end)`` and ``[window_start, window_end)``."""
    return max(0, min(end, window_end) - max(start, window_start))


class HoursClassifier:
    """Classify single attendance entries under a fixed shift model."""

    def __init__(self, shift: ShiftPolicy | None = None):
        self.shift = shift or ShiftPolicy()

    def classify(self, entry: AttendanceEntry) -> HourBreakdown:
        """Classify one entry. Never raises for bad punch data."""
        if entry.absent:
            return HourBreakdown(work_date=entry.work_date)

        flag = self._check_punches(entry)
        if flag is not None:
            logger.warning(
                "attendance_entry_unclassifiable",
                extra={
                    "work_date": entry.work_date.isoformat(),
                    "flag_code": flag.code.value,
                    "detail": flag.message,
                },
            )
            return HourBreakdown(work_date=entry.work_date, flag=flag)

        start = minute_of_day(entry.time_in)
        end = minute_of_day(entry.time_out)
        worked = self.worked_minutes(entry)

        bucket = min(worked, self.shift.regular_minutes_per_day)
        overtime = worked - bucket
        if entry.is_premium_day:
            regular, holiday = 0, bucket
        else:
            regular, holiday = bucket, 0

        breakdown = HourBreakdown(
            work_date=entry.work_date,
            regular_minutes=regular,
            overtime_minutes=overtime,
            night_diff_minutes=self.night_minutes(start, end),
            holiday_minutes=holiday,
            late_minutes=max(0, start - minute_of_day(self.shift.shift_start)),
            undertime_minutes=(
                0 if entry.holiday
                else max(0, minute_of_day(self.shift.shift_end) - end)
            ),
        )

        logger.debug(
            "attendance_entry_classified",
            extra={
                "work_date": entry.work_date.isoformat(),
                "worked_minutes": worked,
                "regular_minutes": breakdown.regular_minutes,
                "overtime_minutes": breakdown.overtime_minutes,
                "holiday_minutes": breakdown.holiday_minutes,
                "night_diff_minutes": breakdown.night_diff_minutes,
            },
        )
        return breakdown

    def worked_minutes(self, entry: AttendanceEntry) -> int:
        """Paid minutes for a punch-complete, chronological entry."""
        span = minute_of_day(entry.time_out) - minute_of_day(entry.time_in)
        if entry.lunch_out is not None and entry.lunch_in is not None:
            lunch = minute_of_day(entry.lunch_in) - minute_of_day(entry.lunch_out)
            span -= max(0, lunch)
        elif span > self.shift.lunch_inference_threshold_minutes:
            span -= self.shift.default_lunch_minutes
        return max(0, span)

    def night_minutes(self, start: int, end: int) -> int:
        """Minutes of ``[start, end)`` inside the overnight night window."""
        night_start = minute_of_day(self.shift.night_start)
        night_end = minute_of_day(self.shift.night_end)
        return (
            overlap_minutes(start, end, 0, night_end)
            + overlap_minutes(start, end, night_start, _MINUTES_PER_DAY)
        )

    def _check_punches(self, entry: AttendanceEntry) -> DataQualityFlag | None:
        if entry.time_in is None:
            return DataQualityFlag(
                entry.work_date,
                FlagCode.MISSING_TIME_IN,
                "no morning time-in punch",
            )
        if entry.time_out is None:
            return DataQualityFlag(
                entry.work_date,
                FlagCode.MISSING_TIME_OUT,
                "no evening time-out punch",
            )
        if entry.time_out < entry.time_in:
            return DataQualityFlag(
                entry.work_date,
                FlagCode.NEGATIVE_SPAN,
                f"time-out {entry.time_out:%H:%M} is before time-in {entry.time_in:%H:%M}",
            )

        punches = [
            p for p in (entry.time_in, entry.lunch_out, entry.lunch_in, entry.time_out)
            if p is not None
        ]
        for earlier, later in zip(punches, punches[1:]):
            if later < earlier:
                return DataQualityFlag(
                    entry.work_date,
                    FlagCode.NON_CHRONOLOGICAL_PUNCHES,
                    f"punch {later:%H:%M} comes after {earlier:%H:%M}",
                )
        return None
