from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.policy import HrPolicy
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    policy: HrPolicy

    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService


def build_container(*, db_config: dict, policy: Optional[HrPolicy] = None) -> Container:
    policy = policy or HrPolicy()
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        policy=policy.attendance,
        strategy_factory=AttendanceStrategyFactory(),
    )
    leave_service = LeaveService(leave_repo, employees_repo, policy=policy.leave)
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        attendance_repo,
        leave_repo,
        policy=policy.payroll,
        calculator=StandardPayrollCalculator(),
    )

    return Container(
        policy=policy,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
    )
