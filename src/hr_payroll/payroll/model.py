from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import BulkOutcome, PaymentMethod, PaymentStatus


@dataclass(frozen=True)
class PayPeriod:
    month: int
    year: int


@dataclass(frozen=True)
class Allowances:
    hra: float = 0.0
    da: float = 0.0
    travel: float = 0.0
    medical: float = 0.0
    bonus: float = 0.0
    overtime: float = 0.0
    other: float = 0.0

    @property
    def total(self) -> float:
        return self.hra + self.da + self.travel + self.medical + self.bonus + self.overtime + self.other


@dataclass(frozen=True)
class Deductions:
    provident_fund: float = 0.0
    state_insurance: float = 0.0
    tax: float = 0.0
    loan: float = 0.0
    advance: float = 0.0
    other: float = 0.0

    @property
    def total(self) -> float:
        return self.provident_fund + self.state_insurance + self.tax + self.loan + self.advance + self.other


@dataclass(frozen=True)
class AttendanceMetrics:
    total_working_days: int = 0
    actual_working_days: float = 0.0
    present_days: int = 0
    absent_days: int = 0
    half_days: int = 0
    overtime_hours: float = 0.0
    late_coming_days: int = 0
    early_going_days: int = 0


@dataclass(frozen=True)
class LeaveMetrics:
    paid_leaves: float = 0.0
    unpaid_leaves: float = 0.0
    sick_leaves: float = 0.0
    casual_leaves: float = 0.0


@dataclass(frozen=True)
class PayrollAdjustments:
    """One-off amounts entered by HR for a single run."""

    bonus: float = 0.0
    other_allowance: float = 0.0
    loan: float = 0.0
    advance: float = 0.0
    other_deduction: float = 0.0


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: one employee's payroll for one month.

    The four totals are derived by ``finalize_totals`` from the components and
    are overwritten on every write.
    """

    employee_id: int
    period: PayPeriod
    basic_salary: float
    allowances: Allowances = field(default_factory=Allowances)
    deductions: Deductions = field(default_factory=Deductions)
    attendance: AttendanceMetrics = field(default_factory=AttendanceMetrics)
    leave: LeaveMetrics = field(default_factory=LeaveMetrics)
    total_allowances: float = 0.0
    gross_salary: float = 0.0
    total_deductions: float = 0.0
    net_salary: float = 0.0
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    payment_reference: Optional[str] = None
    payment_date: Optional[datetime] = None
    generated_by: Optional[int] = None
    generated_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    remarks: str = ""
    payroll_id: Optional[int] = None


@dataclass(frozen=True)
class BulkPayrollResult:
    employee_id: int
    outcome: BulkOutcome
    payroll: Optional[PayrollRecord] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class BulkPayrollReport:
    results: Sequence[BulkPayrollResult]
    successful: int
    failed: int
    total_amount: float
