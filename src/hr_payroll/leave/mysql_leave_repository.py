from __future__ import annotations

from datetime import date
from typing import Any, Collection, Dict, Optional, Sequence

from ..common.datetime_utils import year_bounds
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import HalfDayPeriod, LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    leave_id, employee_id, leave_type, start_date, end_date, is_half_day, half_day_period,
    reason, status, total_days, applied_at, decided_by, decided_at, rejection_reason,
    handover_to, handover_notes
"""


def _to_request(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        is_half_day=bool(r["is_half_day"]),
        half_day_period=HalfDayPeriod(r["half_day_period"]) if r.get("half_day_period") else None,
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        total_days=as_float(r["total_days"]),
        applied_at=r.get("applied_at"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        rejection_reason=r.get("rejection_reason"),
        handover_to=r.get("handover_to"),
        handover_notes=r.get("handover_notes") or "",
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: LeaveRequest) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type, start_date, end_date, is_half_day, half_day_period,
                    reason, status, total_days, applied_at, handover_to, handover_notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(request.employee_id),
                    request.leave_type.value,
                    request.start_date,
                    request.end_date,
                    int(request.is_half_day),
                    request.half_day_period.value if request.half_day_period else None,
                    request.reason,
                    request.status.value,
                    request.total_days,
                    request.applied_at,
                    request.handover_to,
                    request.handover_notes,
                ),
            )
            leave_id = int(cur.lastrowid)
        return self.get_by_id(leave_id)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def update(self, request: LeaveRequest) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET start_date=%s, end_date=%s, is_half_day=%s, half_day_period=%s, reason=%s,
                    status=%s, total_days=%s, decided_by=%s, decided_at=%s, rejection_reason=%s,
                    handover_to=%s, handover_notes=%s
                WHERE leave_id=%s
                """,
                (
                    request.start_date,
                    request.end_date,
                    int(request.is_half_day),
                    request.half_day_period.value if request.half_day_period else None,
                    request.reason,
                    request.status.value,
                    request.total_days,
                    request.decided_by,
                    request.decided_at,
                    request.rejection_reason,
                    request.handover_to,
                    request.handover_notes,
                    int(request.leave_id),
                ),
            )
        return self.get_by_id(int(request.leave_id))

    def list_for_employee(
        self,
        employee_id: int,
        *,
        statuses: Optional[Collection[LeaveStatus]] = None,
        year: Optional[int] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[LeaveRequest]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]

        if statuses:
            clauses.append(f"status IN ({in_clause(statuses)})")
            params.extend(s.value for s in statuses)
        if year is not None:
            start, end = year_bounds(int(year))
            clauses.append("start_date BETWEEN %s AND %s")
            params.extend([start, end])

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY applied_at DESC, leave_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_approved_in_year(self, employee_id: int, year: int) -> Sequence[LeaveRequest]:
        start, end = year_bounds(int(year))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE employee_id=%s AND status=%s AND start_date BETWEEN %s AND %s
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, start, end),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def find_overlapping(
        self,
        employee_id: int,
        *,
        start_date: date,
        end_date: date,
        statuses: Collection[LeaveStatus],
        exclude_leave_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = [
            "employee_id=%s",
            f"status IN ({in_clause(statuses)})",
            "start_date <= %s",
            "end_date >= %s",
        ]
        params: list[object] = [int(employee_id), *(s.value for s in statuses), end_date, start_date]
        if exclude_leave_id is not None:
            clauses.append("leave_id <> %s")
            params.append(int(exclude_leave_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE {' AND '.join(clauses)} ORDER BY start_date",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_approved_overlapping(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["status=%s", "start_date <= %s", "end_date >= %s"]
        params: list[object] = [LeaveStatus.APPROVED.value, end_date, start_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE {' AND '.join(clauses)} ORDER BY start_date",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]
