from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Tuple

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class BreakInterval:
    """One break: left the desk at ``break_out``, came back at ``break_in``."""

    break_out: datetime
    break_in: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.break_in is None

    @property
    def duration_minutes(self) -> float:
        if self.break_in is None:
            return 0.0
        return (self.break_in - self.break_out).total_seconds() / 60


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee on one calendar date.

    ``status``, the flags and the hour fields are outputs of
    ``evaluate_attendance``; nothing else should set them.
    """

    employee_id: int
    work_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.ABSENT
    is_late_check_in: bool = False
    is_early_check_out: bool = False
    total_hours: float = 0.0
    working_hours: float = 0.0
    overtime_hours: float = 0.0
    breaks: Tuple[BreakInterval, ...] = ()
    expected_check_in: Optional[str] = None
    expected_check_out: Optional[str] = None
    notes: str = ""
    attendance_id: Optional[int] = None

    @property
    def total_break_minutes(self) -> float:
        return sum(b.duration_minutes for b in self.breaks)

    @property
    def open_break(self) -> Optional[BreakInterval]:
        for b in reversed(self.breaks):
            if b.is_open:
                return b
        return None


@dataclass(frozen=True)
class MonthlyAttendanceSummary:
    """Fold of one employee's evaluated records over a date range."""

    total_days: int = 0
    present_days: int = 0
    late_days: int = 0
    half_days: int = 0
    absent_days: int = 0
    early_checkout_days: int = 0
    total_working_hours: float = 0.0
    total_overtime_hours: float = 0.0
    average_check_in: Optional[datetime] = None
    average_check_out: Optional[datetime] = None

    @property
    def average_check_in_time(self) -> Optional[time]:
        return self.average_check_in.time() if self.average_check_in else None

    @property
    def average_check_out_time(self) -> Optional[time]:
        return self.average_check_out.time() if self.average_check_out else None
