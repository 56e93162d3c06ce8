from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import PaymentMethod, PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import (
    Allowances,
    AttendanceMetrics,
    Deductions,
    LeaveMetrics,
    PayPeriod,
    PayrollRecord,
)
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, pay_month, pay_year, basic_salary,
    hra, da, travel_allowance, medical_allowance, bonus, overtime_allowance, other_allowance,
    provident_fund, state_insurance, income_tax, loan, advance, other_deduction,
    total_working_days, actual_working_days, present_days, absent_days, half_days,
    overtime_hours, late_coming_days, early_going_days,
    paid_leaves, unpaid_leaves, sick_leaves, casual_leaves,
    total_allowances, gross_salary, total_deductions, net_salary,
    payment_status, payment_method, payment_reference, payment_date,
    generated_by, generated_at, approved_by, approved_at, remarks
"""


def _to_record(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        period=PayPeriod(month=int(r["pay_month"]), year=int(r["pay_year"])),
        basic_salary=as_float(r["basic_salary"]),
        allowances=Allowances(
            hra=as_float(r["hra"]),
            da=as_float(r["da"]),
            travel=as_float(r["travel_allowance"]),
            medical=as_float(r["medical_allowance"]),
            bonus=as_float(r["bonus"]),
            overtime=as_float(r["overtime_allowance"]),
            other=as_float(r["other_allowance"]),
        ),
        deductions=Deductions(
            provident_fund=as_float(r["provident_fund"]),
            state_insurance=as_float(r["state_insurance"]),
            tax=as_float(r["income_tax"]),
            loan=as_float(r["loan"]),
            advance=as_float(r["advance"]),
            other=as_float(r["other_deduction"]),
        ),
        attendance=AttendanceMetrics(
            total_working_days=int(r["total_working_days"] or 0),
            actual_working_days=as_float(r["actual_working_days"]),
            present_days=int(r["present_days"] or 0),
            absent_days=int(r["absent_days"] or 0),
            half_days=int(r["half_days"] or 0),
            overtime_hours=as_float(r["overtime_hours"]),
            late_coming_days=int(r["late_coming_days"] or 0),
            early_going_days=int(r["early_going_days"] or 0),
        ),
        leave=LeaveMetrics(
            paid_leaves=as_float(r["paid_leaves"]),
            unpaid_leaves=as_float(r["unpaid_leaves"]),
            sick_leaves=as_float(r["sick_leaves"]),
            casual_leaves=as_float(r["casual_leaves"]),
        ),
        total_allowances=as_float(r["total_allowances"]),
        gross_salary=as_float(r["gross_salary"]),
        total_deductions=as_float(r["total_deductions"]),
        net_salary=as_float(r["net_salary"]),
        payment_status=PaymentStatus(r["payment_status"]),
        payment_method=PaymentMethod(r["payment_method"]),
        payment_reference=r.get("payment_reference"),
        payment_date=r.get("payment_date"),
        generated_by=r.get("generated_by"),
        generated_at=r.get("generated_at"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        remarks=r.get("remarks") or "",
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_period(self, employee_id: int, period: PayPeriod) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records WHERE employee_id=%s AND pay_month=%s AND pay_year=%s",
                (int(employee_id), int(period.month), int(period.year)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert(self, record: PayrollRecord) -> PayrollRecord:
        a, d, att, lv = record.allowances, record.deductions, record.attendance, record.leave
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(
                    employee_id, pay_month, pay_year, basic_salary,
                    hra, da, travel_allowance, medical_allowance, bonus, overtime_allowance, other_allowance,
                    provident_fund, state_insurance, income_tax, loan, advance, other_deduction,
                    total_working_days, actual_working_days, present_days, absent_days, half_days,
                    overtime_hours, late_coming_days, early_going_days,
                    paid_leaves, unpaid_leaves, sick_leaves, casual_leaves,
                    total_allowances, gross_salary, total_deductions, net_salary,
                    payment_status, payment_method, payment_reference, payment_date,
                    generated_by, generated_at, approved_by, approved_at, remarks
                )
                VALUES(
                    %s,%s,%s,%s, %s,%s,%s,%s,%s,%s,%s, %s,%s,%s,%s,%s,%s,
                    %s,%s,%s,%s,%s, %s,%s,%s, %s,%s,%s,%s, %s,%s,%s,%s,
                    %s,%s,%s,%s, %s,%s,%s,%s,%s
                )
                ON DUPLICATE KEY UPDATE
                    basic_salary=VALUES(basic_salary),
                    hra=VALUES(hra), da=VALUES(da),
                    travel_allowance=VALUES(travel_allowance), medical_allowance=VALUES(medical_allowance),
                    bonus=VALUES(bonus), overtime_allowance=VALUES(overtime_allowance),
                    other_allowance=VALUES(other_allowance),
                    provident_fund=VALUES(provident_fund), state_insurance=VALUES(state_insurance),
                    income_tax=VALUES(income_tax), loan=VALUES(loan), advance=VALUES(advance),
                    other_deduction=VALUES(other_deduction),
                    total_working_days=VALUES(total_working_days),
                    actual_working_days=VALUES(actual_working_days),
                    present_days=VALUES(present_days), absent_days=VALUES(absent_days),
                    half_days=VALUES(half_days), overtime_hours=VALUES(overtime_hours),
                    late_coming_days=VALUES(late_coming_days), early_going_days=VALUES(early_going_days),
                    paid_leaves=VALUES(paid_leaves), unpaid_leaves=VALUES(unpaid_leaves),
                    sick_leaves=VALUES(sick_leaves), casual_leaves=VALUES(casual_leaves),
                    total_allowances=VALUES(total_allowances), gross_salary=VALUES(gross_salary),
                    total_deductions=VALUES(total_deductions), net_salary=VALUES(net_salary),
                    payment_status=VALUES(payment_status), payment_method=VALUES(payment_method),
                    payment_reference=VALUES(payment_reference), payment_date=VALUES(payment_date),
                    generated_by=VALUES(generated_by), generated_at=VALUES(generated_at),
                    approved_by=VALUES(approved_by), approved_at=VALUES(approved_at),
                    remarks=VALUES(remarks)
                """,
                (
                    int(record.employee_id),
                    int(record.period.month),
                    int(record.period.year),
                    record.basic_salary,
                    a.hra, a.da, a.travel, a.medical, a.bonus, a.overtime, a.other,
                    d.provident_fund, d.state_insurance, d.tax, d.loan, d.advance, d.other,
                    att.total_working_days, att.actual_working_days, att.present_days,
                    att.absent_days, att.half_days, att.overtime_hours,
                    att.late_coming_days, att.early_going_days,
                    lv.paid_leaves, lv.unpaid_leaves, lv.sick_leaves, lv.casual_leaves,
                    record.total_allowances,
                    record.gross_salary,
                    record.total_deductions,
                    record.net_salary,
                    record.payment_status.value,
                    record.payment_method.value,
                    record.payment_reference,
                    record.payment_date,
                    record.generated_by,
                    record.generated_at,
                    record.approved_by,
                    record.approved_at,
                    record.remarks,
                ),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records WHERE employee_id=%s AND pay_month=%s AND pay_year=%s",
                (int(record.employee_id), int(record.period.month), int(record.period.year)),
            )
            return _to_record(fetchone(cur))

    def update_payment(
        self,
        payroll_id: int,
        *,
        status: PaymentStatus,
        method: Optional[PaymentMethod],
        reference: Optional[str],
        payment_date: Optional[datetime],
    ) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET payment_status=%s,
                    payment_method=COALESCE(%s, payment_method),
                    payment_reference=COALESCE(%s, payment_reference),
                    payment_date=COALESCE(%s, payment_date)
                WHERE payroll_id=%s
                """,
                (status.value, method.value if method else None, reference, payment_date, int(payroll_id)),
            )
        return self.get_by_id(payroll_id)

    def approve(self, payroll_id: int, *, approved_by: int, approved_at: datetime) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_records SET approved_by=%s, approved_at=%s WHERE payroll_id=%s",
                (int(approved_by), approved_at, int(payroll_id)),
            )
        return self.get_by_id(payroll_id)

    def list_for_year(self, year: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records WHERE pay_year=%s ORDER BY pay_month, employee_id",
                (int(year),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PaymentStatus] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[PayrollRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if month is not None:
            clauses.append("pay_month=%s")
            params.append(int(month))
        if year is not None:
            clauses.append("pay_year=%s")
            params.append(int(year))
        if status is not None:
            clauses.append("payment_status=%s")
            params.append(status.value)

        where = ("WHERE " + " AND ".join(clauses)) if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                {where}
                ORDER BY pay_year DESC, pay_month DESC, employee_id
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_record(r) for r in fetchall(cur)]
