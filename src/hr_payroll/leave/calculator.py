from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Collection, Iterable, List, Mapping, Optional

from ..common.datetime_utils import count_business_days
from ..core.constants import DEFAULT_WEEKEND_DAYS
from ..core.enums import LeaveStatus
from ..core.exceptions import InvalidDateRange
from ..core.policy import LeavePolicy
from .model import LeaveBalance, LeaveBalanceEntry, LeaveRequest

BLOCKING_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


def count_leave_days(
    start: date,
    end: date,
    *,
    is_half_day: bool = False,
    weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS,
) -> float:
    """Business days from start to end inclusive; a half-day on a single business day counts 0.5."""
    if end < start:
        raise InvalidDateRange(start, end)
    days = count_business_days(start, end, weekend_days)
    if is_half_day and days == 1:
        return 0.5
    return days


def with_recomputed_days(request: LeaveRequest, policy: Optional[LeavePolicy] = None) -> LeaveRequest:
    """Overwrite ``total_days`` from the request's own dates and half-day flag."""
    policy = policy or LeavePolicy()
    total = count_leave_days(
        request.start_date,
        request.end_date,
        is_half_day=request.is_half_day,
        weekend_days=policy.weekend_days,
    )
    return replace(request, total_days=total)


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and a_end >= b_start


def find_conflicts(
    existing: Iterable[LeaveRequest],
    *,
    employee_id: int,
    start: date,
    end: date,
    exclude_leave_id: Optional[int] = None,
    statuses: Collection[LeaveStatus] = BLOCKING_STATUSES,
) -> List[LeaveRequest]:
    """Requests of the employee whose range overlaps [start, end], earliest first.

    Only pending and approved requests block by default.
    """
    found = [
        r
        for r in existing
        if r.employee_id == int(employee_id)
        and r.status in statuses
        and (exclude_leave_id is None or r.leave_id != exclude_leave_id)
        and overlaps(r.start_date, r.end_date, start, end)
    ]
    return sorted(found, key=lambda r: r.start_date)


def compute_leave_balance(
    requests: Iterable[LeaveRequest],
    *,
    year: int,
    allotments: Mapping[str, float],
) -> LeaveBalance:
    """Per allotted type: used days of approved requests starting in ``year``, remaining clamped at 0.

    Leave types without an allotment (e.g. unpaid) are ignored.
    """
    used = {leave_type: 0.0 for leave_type in allotments}
    for r in requests:
        if r.status != LeaveStatus.APPROVED or r.start_date.year != year:
            continue
        key = r.leave_type.value
        if key in used:
            used[key] += r.total_days

    return {
        leave_type: LeaveBalanceEntry(
            total=total,
            used=used[leave_type],
            remaining=max(0, total - used[leave_type]),
        )
        for leave_type, total in allotments.items()
    }
