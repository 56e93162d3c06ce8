from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ...attendance.model import AttendanceRecord
from ...core.policy import PayrollPolicy
from ...employees.model import Employee
from ...leave.model import LeaveRequest
from ..model import PayPeriod, PayrollAdjustments, PayrollRecord


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        employee: Employee,
        period: PayPeriod,
        attendance: Iterable[AttendanceRecord],
        leaves: Iterable[LeaveRequest],
        *,
        adjustments: Optional[PayrollAdjustments] = None,
        policy: PayrollPolicy,
    ) -> PayrollRecord:
        raise NotImplementedError
