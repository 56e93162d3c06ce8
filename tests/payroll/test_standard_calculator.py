from dataclasses import astuple
from datetime import date, timedelta

import pytest

from hr_payroll.attendance.model import AttendanceRecord
from hr_payroll.core.enums import AttendanceStatus, LeaveStatus, LeaveType
from hr_payroll.core.exceptions import DivisionDegenerate
from hr_payroll.core.policy import PayrollPolicy
from hr_payroll.employees.model import Employee
from hr_payroll.leave.model import LeaveRequest
from hr_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator, working_days_in_month
from hr_payroll.payroll.model import PayPeriod, PayrollAdjustments

EMPLOYEE = Employee(employee_id=1, full_name="Asha Rao", monthly_salary=50_000.0)
MARCH = PayPeriod(month=3, year=2025)


def _march_business_days():
    day = date(2025, 3, 1)
    while day.month == 3:
        if day.weekday() < 5:
            yield day
        day += timedelta(days=1)


def _records(statuses, overtime=0.0, late=0):
    days = list(_march_business_days())
    rows = []
    for i, status in enumerate(statuses):
        rows.append(
            AttendanceRecord(
                employee_id=1,
                work_date=days[i],
                status=status,
                overtime_hours=overtime if i == 0 else 0.0,
                is_late_check_in=i < late,
            )
        )
    return rows


def _leave(leave_type, days, start=date(2025, 3, 31), end=date(2025, 3, 31)):
    return LeaveRequest(
        employee_id=1,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        reason="r",
        status=LeaveStatus.APPROVED,
        total_days=days,
    )


def test_working_days_in_march_2025():
    assert working_days_in_month(2025, 3) == 21


def test_full_month_with_overtime_and_paid_leave():
    attendance = _records([AttendanceStatus.PRESENT] * 20, overtime=2.5, late=2)
    leaves = [_leave(LeaveType.ANNUAL, 1)]

    record = StandardPayrollCalculator().calculate(EMPLOYEE, MARCH, attendance, leaves, policy=PayrollPolicy())

    assert record.attendance.total_working_days == 21
    assert record.attendance.actual_working_days == 21
    assert record.attendance.late_coming_days == 2
    assert record.basic_salary == pytest.approx(50_000)
    assert record.allowances.hra == pytest.approx(20_000)
    assert record.allowances.da == pytest.approx(5_000)
    assert record.allowances.overtime == pytest.approx(500)
    assert record.gross_salary == pytest.approx(79_000)
    assert record.deductions.provident_fund == pytest.approx(6_000)
    assert record.deductions.state_insurance == pytest.approx(1_382.5)
    assert record.deductions.tax == 8_508.33
    assert record.total_deductions == 15_890.83
    assert record.net_salary == 63_109.17


def test_half_days_and_unpaid_leave_reduce_basic():
    attendance = _records([AttendanceStatus.PRESENT] * 10 + [AttendanceStatus.HALF_DAY] * 4 + [AttendanceStatus.ABSENT] * 2)
    leaves = [_leave(LeaveType.UNPAID, 2), _leave(LeaveType.MATERNITY, 1)]

    record = StandardPayrollCalculator().calculate(EMPLOYEE, MARCH, attendance, leaves, policy=PayrollPolicy())

    assert record.attendance.half_days == 4
    assert record.attendance.absent_days == 2
    assert record.attendance.actual_working_days == 12
    assert record.leave.unpaid_leaves == 2
    assert record.leave.paid_leaves == 0
    assert record.basic_salary == 28_571.43


def test_leave_spanning_months_counts_in_full():
    leaves = [_leave(LeaveType.SICK, 4, start=date(2025, 3, 27), end=date(2025, 4, 1))]

    record = StandardPayrollCalculator().calculate(EMPLOYEE, MARCH, [], leaves, policy=PayrollPolicy())

    assert record.leave.sick_leaves == 4
    assert record.leave.paid_leaves == 4
    assert record.attendance.actual_working_days == 4


def test_personal_leave_is_casual():
    record = StandardPayrollCalculator().calculate(
        EMPLOYEE, MARCH, [], [_leave(LeaveType.PERSONAL, 1.5)], policy=PayrollPolicy()
    )

    assert record.leave.casual_leaves == 1.5


def test_adjustments_flow_into_components():
    adjustments = PayrollAdjustments(bonus=1_000, other_allowance=250, loan=500, advance=300, other_deduction=50)

    record = StandardPayrollCalculator().calculate(
        EMPLOYEE, MARCH, [], [], adjustments=adjustments, policy=PayrollPolicy()
    )

    assert record.allowances.bonus == 1_000
    assert record.allowances.other == 250
    assert record.deductions.loan == 500
    assert record.deductions.advance == 300
    assert record.deductions.other == 50
    # basic is 0: gross is travel + medical + adjustments
    assert record.gross_salary == pytest.approx(2_000 + 1_500 + 1_000 + 250)


def test_zero_working_days_pro_rates_to_zero():
    policy = PayrollPolicy(weekend_days=(0, 1, 2, 3, 4, 5, 6))

    record = StandardPayrollCalculator().calculate(
        EMPLOYEE, MARCH, _records([AttendanceStatus.PRESENT] * 3), [], policy=policy
    )

    assert record.attendance.total_working_days == 0
    assert record.basic_salary == 0.0


def test_zero_working_days_can_raise():
    policy = PayrollPolicy(weekend_days=(0, 1, 2, 3, 4, 5, 6), raise_on_zero_working_days=True)

    with pytest.raises(DivisionDegenerate):
        StandardPayrollCalculator().calculate(EMPLOYEE, MARCH, [], [], policy=policy)


def _cents(value):
    return int(round(value * 100))


@pytest.mark.parametrize("salary", [20_000, 23_456.78, 31_111, 47_500.5, 63_333.33, 80_000])
def test_totals_are_exact_sums_of_cent_components(salary):
    employee = Employee(employee_id=7, full_name="Ravi Menon", monthly_salary=salary)

    for present in range(1, 22):
        attendance = _records([AttendanceStatus.PRESENT] * present, overtime=present / 7)
        record = StandardPayrollCalculator().calculate(employee, MARCH, attendance, [], policy=PayrollPolicy())

        allowances = [_cents(v) for v in astuple(record.allowances)]
        deductions = [_cents(v) for v in astuple(record.deductions)]
        for value in (record.basic_salary, *astuple(record.allowances), *astuple(record.deductions)):
            assert value == round(value, 2)
        assert _cents(record.total_allowances) == sum(allowances)
        assert _cents(record.gross_salary) == _cents(record.basic_salary) + sum(allowances)
        assert _cents(record.total_deductions) == sum(deductions)
        assert _cents(record.net_salary) == _cents(record.gross_salary) - _cents(record.total_deductions)
