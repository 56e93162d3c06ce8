"""In-memory repositories used by the service and API tests."""

from __future__ import annotations

from dataclasses import replace

from hr_payroll.core.enums import LeaveStatus
from hr_payroll.employees.model import Employee
from hr_payroll.leave.calculator import find_conflicts, overlaps


class FakeEmployeesRepo:
    def __init__(self, employees=()):
        self._by_id = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> None:
        self._by_id[employee.employee_id] = employee

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def list_active_ids(self):
        return [e.employee_id for e in sorted(self._by_id.values(), key=lambda e: e.employee_id) if e.is_active]


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.rows = {}

    def get_for_employee_and_date(self, employee_id, work_date):
        return self.rows.get((int(employee_id), work_date))

    def list_for_employee(self, employee_id, *, start_date, end_date):
        return sorted(
            (
                r
                for (eid, day), r in self.rows.items()
                if eid == int(employee_id) and start_date <= day <= end_date
            ),
            key=lambda r: r.work_date,
        )

    def upsert(self, record):
        key = (int(record.employee_id), record.work_date)
        existing = self.rows.get(key)
        if existing:
            record = replace(record, attendance_id=existing.attendance_id)
        else:
            record = replace(record, attendance_id=self._next_id)
            self._next_id += 1
        self.rows[key] = record
        return record


class FakeLeaveRepo:
    def __init__(self):
        self._next_id = 1
        self.rows = {}

    def create(self, request):
        request = replace(request, leave_id=self._next_id)
        self._next_id += 1
        self.rows[request.leave_id] = request
        return request

    def get_by_id(self, leave_id):
        return self.rows.get(int(leave_id))

    def update(self, request):
        self.rows[request.leave_id] = request
        return request

    def list_for_employee(self, employee_id, *, statuses=None, year=None, limit=200):
        rows = [
            r
            for r in self.rows.values()
            if r.employee_id == int(employee_id)
            and (not statuses or r.status in statuses)
            and (year is None or r.start_date.year == year)
        ]
        return sorted(rows, key=lambda r: r.leave_id, reverse=True)[:limit]

    def list_approved_in_year(self, employee_id, year):
        return [
            r
            for r in self.rows.values()
            if r.employee_id == int(employee_id) and r.status == LeaveStatus.APPROVED and r.start_date.year == year
        ]

    def find_overlapping(self, employee_id, *, start_date, end_date, statuses, exclude_leave_id=None):
        return find_conflicts(
            self.rows.values(),
            employee_id=employee_id,
            start=start_date,
            end=end_date,
            exclude_leave_id=exclude_leave_id,
            statuses=statuses,
        )

    def list_approved_overlapping(self, *, start_date, end_date, employee_id=None):
        rows = [
            r
            for r in self.rows.values()
            if r.status == LeaveStatus.APPROVED
            and (employee_id is None or r.employee_id == int(employee_id))
            and overlaps(r.start_date, r.end_date, start_date, end_date)
        ]
        return sorted(rows, key=lambda r: r.start_date)


class FakePayrollRepo:
    def __init__(self):
        self._next_id = 1
        self.rows = {}

    def _key(self, record):
        return (record.employee_id, record.period.month, record.period.year)

    def get_for_period(self, employee_id, period):
        return self.rows.get((int(employee_id), period.month, period.year))

    def get_by_id(self, payroll_id):
        for r in self.rows.values():
            if r.payroll_id == int(payroll_id):
                return r
        return None

    def upsert(self, record):
        existing = self.rows.get(self._key(record))
        if existing:
            record = replace(record, payroll_id=existing.payroll_id)
        else:
            record = replace(record, payroll_id=self._next_id)
            self._next_id += 1
        self.rows[self._key(record)] = record
        return record

    def update_payment(self, payroll_id, *, status, method, reference, payment_date):
        r = self.get_by_id(payroll_id)
        if not r:
            return None
        r = replace(
            r,
            payment_status=status,
            payment_method=method or r.payment_method,
            payment_reference=reference or r.payment_reference,
            payment_date=payment_date or r.payment_date,
        )
        self.rows[self._key(r)] = r
        return r

    def approve(self, payroll_id, *, approved_by, approved_at):
        r = self.get_by_id(payroll_id)
        if not r:
            return None
        r = replace(r, approved_by=approved_by, approved_at=approved_at)
        self.rows[self._key(r)] = r
        return r

    def list_for_year(self, year):
        return [r for r in self.rows.values() if r.period.year == int(year)]

    def list_records(self, *, employee_id=None, month=None, year=None, status=None, limit=200):
        rows = [
            r
            for r in self.rows.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (month is None or r.period.month == month)
            and (year is None or r.period.year == year)
            and (status is None or r.payment_status == status)
        ]
        rows.sort(key=lambda r: (r.period.year, r.period.month), reverse=True)
        return rows[:limit]
