from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_month
from ..core.exceptions import EmployeeNotFound, InvalidDateRange, ValidationError
from ..core.policy import AttendancePolicy
from ..employees.repository import EmployeeRepository
from ..logging_config import get_logger
from .aggregator import summarize_attendance
from .evaluator import evaluate_attendance
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, BreakInterval, MonthlyAttendanceSummary
from .repository import AttendanceRepository

logger = get_logger("attendance.service")


class AttendanceService:
    """Use case: record punches and breaks, read summaries.

    Every write goes through ``_save``, which re-evaluates the record before the
    upsert so the stored status always matches the punches.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        policy: Optional[AttendancePolicy] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policy = policy or AttendancePolicy()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise EmployeeNotFound(int(employee_id))

    def _new_day(self, employee_id: int, work_date: date) -> AttendanceRecord:
        return AttendanceRecord(
            employee_id=int(employee_id),
            work_date=work_date,
            expected_check_in=self._policy.expected_check_in,
            expected_check_out=self._policy.expected_check_out,
        )

    def _save(self, record: AttendanceRecord) -> AttendanceRecord:
        evaluated = evaluate_attendance(record, self._policy, factory=self._factory)
        return self._attendance.upsert(evaluated)

    def _open_day(self, employee_id: int, work_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if not record or record.check_in_time is None:
            raise ValidationError("No check-in recorded for today")
        if record.check_out_time is not None:
            raise ValidationError("Already checked out today")
        return record

    def ensure_day_record(self, employee_id: int, work_date: date) -> AttendanceRecord:
        """Return the day's record, creating an ``absent`` placeholder if there is none."""
        self._require_employee(employee_id)
        existing = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if existing:
            return existing
        return self._save(self._new_day(employee_id, work_date))

    def check_in(self, employee_id: int, *, now: Optional[datetime] = None, notes: str = "") -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        self._require_employee(employee_id)

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if record and record.check_in_time is not None:
            raise ValidationError("Already checked in today")

        record = replace(record or self._new_day(employee_id, today), check_in_time=now)
        if notes:
            record = replace(record, notes=notes.strip())

        saved = self._save(record)
        logger.info(
            "check-in recorded",
            extra={"employee_id": saved.employee_id, "work_date": today, "status": saved.status.value},
        )
        return saved

    def check_out(self, employee_id: int, *, now: Optional[datetime] = None, notes: str = "") -> AttendanceRecord:
        now = now or now_local()
        record = self._open_day(employee_id, now.date())

        # A break still open at check-out ends with the day.
        breaks = tuple(replace(b, break_in=now) if b.is_open else b for b in record.breaks)
        record = replace(record, check_out_time=now, breaks=breaks)
        if notes:
            record = replace(record, notes=notes.strip())

        saved = self._save(record)
        logger.info(
            "check-out recorded",
            extra={
                "employee_id": saved.employee_id,
                "work_date": saved.work_date,
                "status": saved.status.value,
                "working_hours": round(saved.working_hours, 2),
            },
        )
        return saved

    def start_break(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        record = self._open_day(employee_id, now.date())
        if record.open_break:
            raise ValidationError("A break is already in progress")
        if now < record.check_in_time:
            raise ValidationError("Break cannot start before check-in")
        return self._save(replace(record, breaks=record.breaks + (BreakInterval(break_out=now),)))

    def end_break(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        record = self._open_day(employee_id, now.date())
        current = record.open_break
        if not current:
            raise ValidationError("No break in progress")
        if now < current.break_out:
            raise ValidationError("Break cannot end before it started")
        breaks = tuple(replace(b, break_in=now) if b is current else b for b in record.breaks)
        return self._save(replace(record, breaks=breaks))

    def get_today_record(self, employee_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), today)

    def report(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records in range, newest first."""
        if end < start:
            raise InvalidDateRange(start, end)
        rows = self._attendance.list_for_employee(int(employee_id), start_date=start, end_date=end)
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def monthly_summary(self, employee_id: int, *, year: int, month: int) -> MonthlyAttendanceSummary:
        start, end = month_bounds(int(year), require_month(month))
        rows = self._attendance.list_for_employee(int(employee_id), start_date=start, end_date=end)
        return summarize_attendance(rows)
