from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Collection, Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_max_length, require_month, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import HalfDayPeriod, LeaveStatus, LeaveType
from ..core.exceptions import (
    AuthorizationError,
    EmployeeNotFound,
    InvalidDateRange,
    LeaveConflict,
    NotFoundError,
    ValidationError,
)
from ..core.policy import LeavePolicy
from ..employees.repository import EmployeeRepository
from ..logging_config import get_logger
from .calculator import BLOCKING_STATUSES, compute_leave_balance, with_recomputed_days
from .model import LeaveBalance, LeaveRequest
from .repository import LeaveRepository

logger = get_logger("leave.service")


@dataclass(frozen=True)
class NewLeaveRequest:
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None
    handover_to: Optional[int] = None
    handover_notes: str = ""


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        policy: Optional[LeavePolicy] = None,
    ):
        self._leaves = leaves
        self._employees = employees
        self._policy = policy or LeavePolicy()

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise EmployeeNotFound(int(employee_id))

    def _get_pending(self, leave_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(leave_id))
        if not req:
            raise NotFoundError("Leave request not found")
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Leave request has already been processed")
        return req

    def _validate_dates(self, start: date, end: date, today: date) -> None:
        if end < start:
            raise InvalidDateRange(start, end)
        if start < today:
            raise ValidationError("Start date cannot be in the past")

    def conflicts(
        self,
        employee_id: int,
        *,
        start: date,
        end: date,
        exclude_leave_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        if end < start:
            raise InvalidDateRange(start, end)
        return self._leaves.find_overlapping(
            int(employee_id),
            start_date=start,
            end_date=end,
            statuses=BLOCKING_STATUSES,
            exclude_leave_id=exclude_leave_id,
        )

    def submit(
        self,
        data: NewLeaveRequest,
        *,
        now: Optional[datetime] = None,
        allow_conflicts: bool = False,
    ) -> LeaveRequest:
        now = now or now_local()
        self._require_employee(data.employee_id)

        reason = require_non_empty(data.reason, "Reason")
        require_max_length(reason, "Reason", self._policy.max_reason_length)
        self._validate_dates(data.start_date, data.end_date, now.date())

        if data.half_day_period is not None and not data.is_half_day:
            raise ValidationError("Half-day period is only allowed for half-day leave")

        clashes = self.conflicts(data.employee_id, start=data.start_date, end=data.end_date)
        if clashes and not allow_conflicts:
            raise LeaveConflict(clashes)

        request = LeaveRequest(
            employee_id=int(data.employee_id),
            leave_type=data.leave_type,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=reason,
            is_half_day=bool(data.is_half_day),
            half_day_period=data.half_day_period,
            applied_at=now,
            handover_to=data.handover_to,
            handover_notes=(data.handover_notes or "").strip(),
        )
        created = self._leaves.create(with_recomputed_days(request, self._policy))
        logger.info(
            "leave submitted",
            extra={
                "employee_id": created.employee_id,
                "leave_id": created.leave_id,
                "leave_type": created.leave_type.value,
                "total_days": created.total_days,
            },
        )
        return created

    def reschedule(
        self,
        leave_id: int,
        *,
        employee_id: int,
        start: date,
        end: date,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        """Move a pending request to new dates; its own range never counts as a conflict."""
        now = now or now_local()
        req = self._get_pending(leave_id)
        if req.employee_id != int(employee_id):
            raise AuthorizationError("Not authorized to change this leave request")
        self._validate_dates(start, end, now.date())

        clashes = self.conflicts(req.employee_id, start=start, end=end, exclude_leave_id=req.leave_id)
        if clashes:
            raise LeaveConflict(clashes)

        updated = replace(req, start_date=start, end_date=end)
        return self._leaves.update(with_recomputed_days(updated, self._policy))

    def approve(self, leave_id: int, *, decided_by: int, now: Optional[datetime] = None) -> LeaveRequest:
        req = self._get_pending(leave_id)
        decided = replace(
            req,
            status=LeaveStatus.APPROVED,
            decided_by=int(decided_by),
            decided_at=now or now_local(),
            rejection_reason=None,
        )
        saved = self._leaves.update(with_recomputed_days(decided, self._policy))
        logger.info("leave approved", extra={"leave_id": saved.leave_id, "decided_by": saved.decided_by})
        return saved

    def reject(
        self,
        leave_id: int,
        *,
        decided_by: int,
        reason: str = "",
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        req = self._get_pending(leave_id)
        decided = replace(
            req,
            status=LeaveStatus.REJECTED,
            decided_by=int(decided_by),
            decided_at=now or now_local(),
            rejection_reason=(reason or "").strip() or None,
        )
        saved = self._leaves.update(with_recomputed_days(decided, self._policy))
        logger.info("leave rejected", extra={"leave_id": saved.leave_id, "decided_by": saved.decided_by})
        return saved

    def cancel(self, leave_id: int, *, employee_id: int, now: Optional[datetime] = None) -> LeaveRequest:
        req = self._leaves.get_by_id(int(leave_id))
        if not req:
            raise NotFoundError("Leave request not found")
        if req.employee_id != int(employee_id):
            raise AuthorizationError("Not authorized to cancel this leave request")
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Can only cancel pending leave requests")
        today = (now or now_local()).date()
        if req.start_date <= today:
            raise ValidationError("Cannot cancel leave that has already started")

        saved = self._leaves.update(with_recomputed_days(replace(req, status=LeaveStatus.CANCELLED), self._policy))
        logger.info("leave cancelled", extra={"leave_id": saved.leave_id, "employee_id": saved.employee_id})
        return saved

    def balance(self, employee_id: int, *, year: int) -> LeaveBalance:
        self._require_employee(employee_id)
        approved = self._leaves.list_approved_in_year(int(employee_id), int(year))
        return compute_leave_balance(approved, year=int(year), allotments=self._policy.allotments)

    def calendar(self, *, year: int, month: int, employee_id: Optional[int] = None) -> Sequence[LeaveRequest]:
        """Approved leave overlapping the month."""
        start, end = month_bounds(int(year), require_month(month))
        return self._leaves.list_approved_overlapping(start_date=start, end_date=end, employee_id=employee_id)

    def list_requests(
        self,
        employee_id: int,
        *,
        statuses: Optional[Collection[LeaveStatus]] = None,
        year: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_employee(
            int(employee_id), statuses=statuses, year=year, limit=DEFAULT_HISTORY_LIMIT
        )
