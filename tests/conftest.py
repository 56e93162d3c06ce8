from __future__ import annotations

from datetime import datetime

import pytest

from fakes import FakeAttendanceRepo, FakeEmployeesRepo, FakeLeaveRepo, FakePayrollRepo
from hr_payroll.attendance.service import AttendanceService
from hr_payroll.core.policy import HrPolicy
from hr_payroll.employees.model import Employee
from hr_payroll.leave.service import LeaveService
from hr_payroll.payroll.service import PayrollService


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 3, 3, 8, 0, 0)


@pytest.fixture
def policy() -> HrPolicy:
    return HrPolicy()


@pytest.fixture
def employees() -> FakeEmployeesRepo:
    return FakeEmployeesRepo(
        [
            Employee(employee_id=1, full_name="Asha Rao", monthly_salary=50_000.0),
            Employee(employee_id=3, full_name="Ben Ortiz", monthly_salary=30_000.0),
            Employee(employee_id=9, full_name="Former Staff", monthly_salary=20_000.0, is_active=False),
        ]
    )


@pytest.fixture
def attendance_repo() -> FakeAttendanceRepo:
    return FakeAttendanceRepo()


@pytest.fixture
def leave_repo() -> FakeLeaveRepo:
    return FakeLeaveRepo()


@pytest.fixture
def payroll_repo() -> FakePayrollRepo:
    return FakePayrollRepo()


@pytest.fixture
def attendance_service(attendance_repo, employees, policy) -> AttendanceService:
    return AttendanceService(attendance_repo, employees, policy=policy.attendance)


@pytest.fixture
def leave_service(leave_repo, employees, policy) -> LeaveService:
    return LeaveService(leave_repo, employees, policy=policy.leave)


@pytest.fixture
def payroll_service(payroll_repo, employees, attendance_repo, leave_repo, policy) -> PayrollService:
    return PayrollService(payroll_repo, employees, attendance_repo, leave_repo, policy=policy.payroll)
