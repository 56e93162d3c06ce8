from __future__ import annotations

import calendar
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_month
from ..core.enums import BulkOutcome, PaymentMethod, PaymentStatus
from ..core.exceptions import ComputationError, DomainError, EmployeeNotFound, NotFoundError, ValidationError
from ..core.policy import PayrollPolicy
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from ..logging_config import get_logger
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .derivation import finalize_totals, money
from .model import BulkPayrollReport, BulkPayrollResult, PayPeriod, PayrollAdjustments, PayrollRecord
from .repository import PayrollRepository

logger = get_logger("payroll.service")


class PayrollService:
    """Use case: compute, persist, pay and report monthly payroll."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        *,
        policy: Optional[PayrollPolicy] = None,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._policy = policy or PayrollPolicy()
        self._calculator = calculator or StandardPayrollCalculator()

    def _get(self, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        return record

    def calculate(
        self,
        employee_id: int,
        *,
        month: int,
        year: int,
        adjustments: Optional[PayrollAdjustments] = None,
    ) -> PayrollRecord:
        """Compute (without saving) one employee's payroll for the month."""
        period = PayPeriod(month=require_month(month), year=int(year))
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise EmployeeNotFound(int(employee_id))

        start, end = month_bounds(period.year, period.month)
        attendance = self._attendance.list_for_employee(int(employee_id), start_date=start, end_date=end)
        leaves = self._leaves.list_approved_overlapping(start_date=start, end_date=end, employee_id=int(employee_id))

        return self._calculator.calculate(
            employee,
            period,
            attendance,
            leaves,
            adjustments=adjustments,
            policy=self._policy,
        )

    def _generate_one(self, employee_id: int, period: PayPeriod, generated_by: int, now: datetime) -> BulkPayrollResult:
        computed = self.calculate(employee_id, month=period.month, year=period.year)
        computed = replace(computed, generated_by=int(generated_by), generated_at=now)

        existing = self._payroll.get_for_period(int(employee_id), period)
        if existing:
            # Recalculation keeps the stored identity, payment and approval state.
            computed = replace(
                computed,
                payroll_id=existing.payroll_id,
                payment_status=existing.payment_status,
                payment_method=existing.payment_method,
                payment_reference=existing.payment_reference,
                payment_date=existing.payment_date,
                approved_by=existing.approved_by,
                approved_at=existing.approved_at,
                remarks=existing.remarks,
            )
            outcome = BulkOutcome.UPDATED
        else:
            outcome = BulkOutcome.CREATED

        saved = self._payroll.upsert(finalize_totals(computed))
        return BulkPayrollResult(employee_id=int(employee_id), outcome=outcome, payroll=saved)

    def generate_bulk(
        self,
        employee_ids: Sequence[int],
        *,
        month: int,
        year: int,
        generated_by: int,
        now: Optional[datetime] = None,
    ) -> BulkPayrollReport:
        """Generate payroll for each id in order; a failing employee never stops the batch."""
        period = PayPeriod(month=require_month(month), year=int(year))
        now = now or now_local()

        results: list[BulkPayrollResult] = []
        for employee_id in employee_ids:
            try:
                results.append(self._generate_one(employee_id, period, generated_by, now))
            except DomainError as exc:
                logger.warning(
                    "payroll generation failed",
                    extra={"employee_id": employee_id, "month": period.month, "year": period.year, "error": str(exc)},
                )
                results.append(BulkPayrollResult(employee_id=employee_id, outcome=BulkOutcome.ERROR, error=str(exc)))
            except Exception as exc:
                wrapped = ComputationError(f"Unexpected error for employee {employee_id}: {exc}")
                logger.exception(
                    "payroll generation crashed",
                    extra={"employee_id": employee_id, "month": period.month, "year": period.year},
                )
                results.append(
                    BulkPayrollResult(employee_id=employee_id, outcome=BulkOutcome.ERROR, error=str(wrapped))
                )

        ok = [r for r in results if r.outcome != BulkOutcome.ERROR]
        report = BulkPayrollReport(
            results=results,
            successful=len(ok),
            failed=len(results) - len(ok),
            total_amount=money(sum(r.payroll.net_salary for r in ok if r.payroll)),
        )
        logger.info(
            "payroll batch finished",
            extra={
                "month": period.month,
                "year": period.year,
                "successful": report.successful,
                "failed": report.failed,
                "total_amount": round(report.total_amount, 2),
            },
        )
        return report

    def generate_for_active(
        self,
        *,
        month: int,
        year: int,
        generated_by: int,
        employee_ids: Optional[Sequence[int]] = None,
        now: Optional[datetime] = None,
    ) -> BulkPayrollReport:
        """Run the batch for the given ids, or for every active employee when none are given."""
        require_month(month)
        ids = list(employee_ids) if employee_ids else list(self._employees.list_active_ids())
        if not ids:
            raise ValidationError("No active employees found")
        return self.generate_bulk(ids, month=month, year=year, generated_by=generated_by, now=now)

    def update_payment(
        self,
        payroll_id: int,
        *,
        status: PaymentStatus,
        method: Optional[PaymentMethod] = None,
        reference: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PayrollRecord:
        self._get(payroll_id)
        payment_date = (now or now_local()) if status == PaymentStatus.PAID else None
        updated = self._payroll.update_payment(
            int(payroll_id),
            status=status,
            method=method,
            reference=(reference or "").strip() or None,
            payment_date=payment_date,
        )
        logger.info("payment status updated", extra={"payroll_id": int(payroll_id), "status": status.value})
        return updated

    def approve(self, payroll_id: int, *, approved_by: int, now: Optional[datetime] = None) -> PayrollRecord:
        self._get(payroll_id)
        approved = self._payroll.approve(int(payroll_id), approved_by=int(approved_by), approved_at=now or now_local())
        logger.info("payroll approved", extra={"payroll_id": int(payroll_id), "approved_by": int(approved_by)})
        return approved

    def get(self, payroll_id: int) -> PayrollRecord:
        return self._get(payroll_id)

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PaymentStatus] = None,
    ) -> Sequence[PayrollRecord]:
        if month is not None:
            require_month(month)
        return self._payroll.list_records(employee_id=employee_id, month=month, year=year, status=status)

    def history(self, *, year: int) -> list[dict]:
        """Per-month totals for the year, latest month first."""
        summary_map: dict[int, dict] = {}
        for r in self._payroll.list_for_year(int(year)):
            s = summary_map.get(r.period.month)
            if not s:
                s = {
                    "month": r.period.month,
                    "year": r.period.year,
                    "month_name": calendar.month_name[r.period.month],
                    "employee_count": 0,
                    "total_amount": 0.0,
                    "total_basic_salary": 0.0,
                    "total_allowances": 0.0,
                    "total_deductions": 0.0,
                    "generated_at": r.generated_at,
                    "payment_status": {st.value: 0 for st in PaymentStatus},
                }
                summary_map[r.period.month] = s
            s["employee_count"] += 1
            s["total_amount"] += r.net_salary
            s["total_basic_salary"] += r.basic_salary
            s["total_allowances"] += r.total_allowances
            s["total_deductions"] += r.total_deductions
            s["payment_status"][r.payment_status.value] += 1

        history = []
        for s in summary_map.values():
            counts = s["payment_status"]
            if counts[PaymentStatus.PAID.value] == s["employee_count"]:
                s["status"] = "completed"
            elif counts[PaymentStatus.PENDING.value] > 0:
                s["status"] = "pending"
            else:
                s["status"] = "processed"
            history.append(s)

        history.sort(key=lambda x: x["month"], reverse=True)
        return history

    def stats(self, *, year: int) -> dict:
        records = list(self._payroll.list_for_year(int(year)))
        nets = [r.net_salary for r in records]
        breakdown = {st.value: 0 for st in PaymentStatus}
        for r in records:
            breakdown[r.payment_status.value] += 1

        return {
            "year": int(year),
            "total_employees": len({r.employee_id for r in records}),
            "total_payrolls": len(records),
            "total_amount": sum(nets),
            "total_basic_salary": sum(r.basic_salary for r in records),
            "total_allowances": sum(r.total_allowances for r in records),
            "total_deductions": sum(r.total_deductions for r in records),
            "avg_salary": sum(nets) / len(nets) if nets else 0.0,
            "max_salary": max(nets) if nets else 0.0,
            "min_salary": min(nets) if nets else 0.0,
            "payment_status_breakdown": breakdown,
        }
