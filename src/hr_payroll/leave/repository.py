from __future__ import annotations

from datetime import date
from typing import Collection, Optional, Protocol, Sequence

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(self, request: LeaveRequest) -> LeaveRequest:
        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def update(self, request: LeaveRequest) -> LeaveRequest:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        statuses: Optional[Collection[LeaveStatus]] = None,
        year: Optional[int] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[LeaveRequest]:
        """Newest application first; ``year`` filters on the start date."""

        raise NotImplementedError

    def list_approved_in_year(self, employee_id: int, year: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def find_overlapping(
        self,
        employee_id: int,
        *,
        start_date: date,
        end_date: date,
        statuses: Collection[LeaveStatus],
        exclude_leave_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_approved_overlapping(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Approved requests overlapping the range, ordered by start date."""

        raise NotImplementedError
