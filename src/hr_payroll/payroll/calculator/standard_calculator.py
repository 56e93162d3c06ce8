from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from .base import PayrollCalculator
from ..derivation import finalize_totals
from ..model import (
    Allowances,
    AttendanceMetrics,
    Deductions,
    LeaveMetrics,
    PayPeriod,
    PayrollAdjustments,
    PayrollRecord,
)
from ..tax import monthly_income_tax
from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import count_business_days, month_bounds
from ...core.constants import DEFAULT_WEEKEND_DAYS
from ...core.enums import AttendanceStatus, LeaveType
from ...core.exceptions import DivisionDegenerate
from ...core.policy import PayrollPolicy
from ...leave.model import LeaveRequest


def working_days_in_month(year: int, month: int, weekend_days=DEFAULT_WEEKEND_DAYS) -> int:
    start, end = month_bounds(year, month)
    return int(count_business_days(start, end, weekend_days))


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: salary pro-rated by days worked, fixed-rate allowances, slab tax.

    Approved leave is counted with its full ``total_days`` even when it spills
    over into the next or previous month.
    """

    def attendance_metrics(self, records: Iterable[AttendanceRecord], total_working_days: int) -> AttendanceMetrics:
        records = list(records)
        return AttendanceMetrics(
            total_working_days=total_working_days,
            present_days=sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
            absent_days=sum(1 for r in records if r.status == AttendanceStatus.ABSENT),
            half_days=sum(1 for r in records if r.status == AttendanceStatus.HALF_DAY),
            overtime_hours=sum(r.overtime_hours or 0.0 for r in records),
            late_coming_days=sum(1 for r in records if r.is_late_check_in),
            early_going_days=sum(1 for r in records if r.is_early_check_out),
        )

    def leave_metrics(self, leaves: Iterable[LeaveRequest], policy: PayrollPolicy) -> LeaveMetrics:
        leaves = list(leaves)

        def days(pred) -> float:
            return sum(l.total_days for l in leaves if pred(l.leave_type))

        return LeaveMetrics(
            paid_leaves=days(lambda t: t.value in policy.paid_leave_types),
            unpaid_leaves=days(lambda t: t == LeaveType.UNPAID),
            sick_leaves=days(lambda t: t == LeaveType.SICK),
            casual_leaves=days(lambda t: t == LeaveType.PERSONAL),
        )

    def calculate(
        self,
        employee,
        period: PayPeriod,
        attendance: Iterable[AttendanceRecord],
        leaves: Iterable[LeaveRequest],
        *,
        adjustments: Optional[PayrollAdjustments] = None,
        policy: PayrollPolicy,
    ) -> PayrollRecord:
        adjustments = adjustments or PayrollAdjustments()

        total_days = working_days_in_month(period.year, period.month, policy.weekend_days)
        att = self.attendance_metrics(attendance, total_days)
        lv = self.leave_metrics(leaves, policy)

        actual_days = att.present_days + att.half_days * 0.5 + lv.paid_leaves
        att = replace(att, actual_working_days=actual_days)

        if total_days == 0:
            if policy.raise_on_zero_working_days:
                raise DivisionDegenerate(f"No working days in {period.year}-{period.month:02d}")
            factor = 0.0
        else:
            factor = actual_days / total_days
        basic = float(employee.monthly_salary or 0) * factor

        allowances = Allowances(
            hra=basic * policy.hra_rate,
            da=basic * policy.da_rate,
            travel=policy.travel_allowance,
            medical=policy.medical_allowance,
            bonus=adjustments.bonus,
            overtime=att.overtime_hours * policy.overtime_rate,
            other=adjustments.other_allowance,
        )
        gross = basic + allowances.total

        deductions = Deductions(
            provident_fund=basic * policy.pf_rate,
            state_insurance=gross * policy.esi_rate,
            tax=monthly_income_tax(gross * 12, policy.tax_slabs),
            loan=adjustments.loan,
            advance=adjustments.advance,
            other=adjustments.other_deduction,
        )

        return finalize_totals(
            PayrollRecord(
                employee_id=int(employee.employee_id),
                period=period,
                basic_salary=basic,
                allowances=allowances,
                deductions=deductions,
                attendance=att,
                leave=lv,
            )
        )
