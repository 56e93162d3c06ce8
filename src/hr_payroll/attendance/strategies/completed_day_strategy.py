from __future__ import annotations

from ...common.datetime_utils import hours_between
from ...core.enums import AttendanceStatus
from ...core.exceptions import InvalidPunchSequence
from ...core.policy import AttendancePolicy
from ..model import AttendanceRecord
from .base import AttendanceStrategy, StatusDecision, expected_window


class CompletedDayStrategy(AttendanceStrategy):
    """Both punches present: classify by working hours and the late/early flags.

    A day in the half-day band with either flag set is reported as ``late``,
    including when the flag came from leaving early.
    """

    def decide(self, record: AttendanceRecord, *, policy: AttendancePolicy) -> StatusDecision:
        if record.check_out_time < record.check_in_time:
            raise InvalidPunchSequence(
                f"Check-out {record.check_out_time:%H:%M} is before check-in {record.check_in_time:%H:%M}"
            )

        expected_in, expected_out = expected_window(record, policy)
        is_late = record.check_in_time > expected_in
        is_early = record.check_out_time < expected_out

        total_hours = hours_between(record.check_in_time, record.check_out_time)
        working_hours = total_hours - record.total_break_minutes / 60

        if working_hours >= policy.full_day_hours and not is_late and not is_early:
            status = AttendanceStatus.PRESENT
        elif working_hours >= policy.half_day_hours:
            status = AttendanceStatus.LATE if (is_late or is_early) else AttendanceStatus.HALF_DAY
        else:
            status = AttendanceStatus.EARLY_CHECKOUT

        return StatusDecision(
            status=status,
            is_late_check_in=is_late,
            is_early_check_out=is_early,
            total_hours=total_hours,
            working_hours=working_hours,
            overtime_hours=max(0.0, working_hours - policy.full_day_hours),
        )
