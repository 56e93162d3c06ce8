from __future__ import annotations

from datetime import date, datetime

import pytest

from hr_payroll.attendance.model import AttendanceRecord
from hr_payroll.core.enums import AttendanceStatus, LeaveStatus, LeaveType, PaymentMethod, PaymentStatus
from hr_payroll.core.exceptions import EmployeeNotFound, NotFoundError, ValidationError
from hr_payroll.leave.model import LeaveRequest

NOW = datetime(2025, 4, 1, 9, 0)


def test_calculate_reads_month_attendance_and_leave(payroll_service, attendance_repo, leave_repo):
    attendance_repo.upsert(AttendanceRecord(employee_id=1, work_date=date(2025, 3, 3), status=AttendanceStatus.PRESENT))
    attendance_repo.upsert(AttendanceRecord(employee_id=1, work_date=date(2025, 3, 4), status=AttendanceStatus.HALF_DAY))
    attendance_repo.upsert(AttendanceRecord(employee_id=1, work_date=date(2025, 4, 1), status=AttendanceStatus.PRESENT))
    leave_repo.create(
        LeaveRequest(
            employee_id=1,
            leave_type=LeaveType.ANNUAL,
            start_date=date(2025, 3, 10),
            end_date=date(2025, 3, 11),
            reason="trip",
            status=LeaveStatus.APPROVED,
            total_days=2,
        )
    )
    leave_repo.create(
        LeaveRequest(
            employee_id=1,
            leave_type=LeaveType.ANNUAL,
            start_date=date(2025, 3, 20),
            end_date=date(2025, 3, 20),
            reason="pending",
            total_days=1,
        )
    )

    record = payroll_service.calculate(1, month=3, year=2025)

    assert record.attendance.present_days == 1
    assert record.attendance.half_days == 1
    assert record.leave.paid_leaves == 2
    assert record.attendance.actual_working_days == 3.5
    assert record.payroll_id is None


def test_calculate_unknown_employee(payroll_service):
    with pytest.raises(EmployeeNotFound):
        payroll_service.calculate(2, month=3, year=2025)


@pytest.mark.parametrize("month", [0, 13])
def test_calculate_invalid_month(payroll_service, month):
    with pytest.raises(ValidationError):
        payroll_service.calculate(1, month=month, year=2025)


def test_update_payment_sets_date_only_when_paid(payroll_service):
    report = payroll_service.generate_bulk([1], month=3, year=2025, generated_by=7, now=NOW)
    payroll_id = report.results[0].payroll.payroll_id

    processed = payroll_service.update_payment(payroll_id, status=PaymentStatus.PROCESSED, method=PaymentMethod.CHEQUE)
    assert processed.payment_date is None
    assert processed.payment_method == PaymentMethod.CHEQUE

    paid = payroll_service.update_payment(payroll_id, status=PaymentStatus.PAID, now=NOW)
    assert paid.payment_date == NOW


def test_update_payment_missing_record(payroll_service):
    with pytest.raises(NotFoundError):
        payroll_service.update_payment(99, status=PaymentStatus.PAID)


def test_history_groups_by_month(payroll_service):
    payroll_service.generate_bulk([1, 3], month=2, year=2025, generated_by=7, now=NOW)
    march = payroll_service.generate_bulk([1, 3], month=3, year=2025, generated_by=7, now=NOW)
    for r in march.results:
        payroll_service.update_payment(r.payroll.payroll_id, status=PaymentStatus.PAID, now=NOW)

    history = payroll_service.history(year=2025)

    assert [h["month"] for h in history] == [3, 2]
    assert history[0]["month_name"] == "March"
    assert history[0]["employee_count"] == 2
    assert history[0]["status"] == "completed"
    assert history[1]["status"] == "pending"
    assert history[1]["payment_status"]["pending"] == 2
    assert history[0]["total_amount"] == pytest.approx(march.total_amount)


def test_history_processed_when_nothing_pending(payroll_service):
    report = payroll_service.generate_bulk([1, 3], month=3, year=2025, generated_by=7, now=NOW)
    ids = [r.payroll.payroll_id for r in report.results]
    payroll_service.update_payment(ids[0], status=PaymentStatus.PAID, now=NOW)
    payroll_service.update_payment(ids[1], status=PaymentStatus.PROCESSED, now=NOW)

    assert payroll_service.history(year=2025)[0]["status"] == "processed"


def test_stats(payroll_service):
    report = payroll_service.generate_bulk([1, 3], month=3, year=2025, generated_by=7, now=NOW)
    payroll_service.generate_bulk([1], month=4, year=2025, generated_by=7, now=NOW)
    nets = [r.net_salary for r in payroll_service.list_records(year=2025)]

    stats = payroll_service.stats(year=2025)

    assert stats["total_employees"] == 2
    assert stats["total_payrolls"] == 3
    assert stats["total_amount"] == pytest.approx(sum(nets))
    assert stats["avg_salary"] == pytest.approx(sum(nets) / 3)
    assert stats["max_salary"] == max(nets)
    assert stats["min_salary"] == min(nets)
    assert stats["payment_status_breakdown"] == {"pending": 3, "processed": 0, "paid": 0, "failed": 0}
    assert report.successful == 2


def test_stats_empty_year(payroll_service):
    stats = payroll_service.stats(year=2030)

    assert stats["total_payrolls"] == 0
    assert stats["avg_salary"] == 0.0
