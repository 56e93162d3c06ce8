from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional

from ..core.enums import HalfDayPeriod, LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a leave request.

    ``total_days`` is derived from the dates and the half-day flag by
    ``with_recomputed_days`` before every write; callers never supply it.
    """

    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None
    status: LeaveStatus = LeaveStatus.PENDING
    total_days: float = 0.0
    applied_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    handover_to: Optional[int] = None
    handover_notes: str = ""
    leave_id: Optional[int] = None


@dataclass(frozen=True)
class LeaveBalanceEntry:
    total: float
    used: float
    remaining: float


LeaveBalance = Dict[str, LeaveBalanceEntry]
