from __future__ import annotations

from typing import Iterable

from ..common.datetime_utils import mean_datetime
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, MonthlyAttendanceSummary


def summarize_attendance(records: Iterable[AttendanceRecord]) -> MonthlyAttendanceSummary:
    """Fold evaluated records (one employee, one period) into counts, sums and average punches.

    Averages cover only the records that have the punch; with none they stay ``None``.
    """
    records = list(records)
    counts = {status: 0 for status in AttendanceStatus}
    total_working = 0.0
    total_overtime = 0.0
    check_ins = []
    check_outs = []

    for r in records:
        counts[r.status] += 1
        total_working += r.working_hours or 0.0
        total_overtime += r.overtime_hours or 0.0
        if r.check_in_time:
            check_ins.append(r.check_in_time)
        if r.check_out_time:
            check_outs.append(r.check_out_time)

    return MonthlyAttendanceSummary(
        total_days=len(records),
        present_days=counts[AttendanceStatus.PRESENT],
        late_days=counts[AttendanceStatus.LATE],
        half_days=counts[AttendanceStatus.HALF_DAY],
        absent_days=counts[AttendanceStatus.ABSENT],
        early_checkout_days=counts[AttendanceStatus.EARLY_CHECKOUT],
        total_working_hours=total_working,
        total_overtime_hours=total_overtime,
        average_check_in=mean_datetime(check_ins) if check_ins else None,
        average_check_out=mean_datetime(check_outs) if check_outs else None,
    )
