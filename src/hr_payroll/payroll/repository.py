from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import PaymentMethod, PaymentStatus
from .model import PayPeriod, PayrollRecord


class PayrollRepository(Protocol):
    def get_for_period(self, employee_id: int, period: PayPeriod) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def upsert(self, record: PayrollRecord) -> PayrollRecord:
        """Insert or update by (employee, month, year) and return the stored record."""

        raise NotImplementedError

    def update_payment(
        self,
        payroll_id: int,
        *,
        status: PaymentStatus,
        method: Optional[PaymentMethod],
        reference: Optional[str],
        payment_date: Optional[datetime],
    ) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def approve(self, payroll_id: int, *, approved_by: int, approved_at: datetime) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_for_year(self, year: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PaymentStatus] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[PayrollRecord]:
        """Newest period first."""

        raise NotImplementedError
