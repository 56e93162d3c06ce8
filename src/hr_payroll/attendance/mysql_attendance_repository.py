from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import AttendanceRecord, BreakInterval
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, check_in_time, check_out_time, status,
    is_late_check_in, is_early_check_out, total_hours, working_hours, overtime_hours,
    breaks_json, expected_check_in, expected_check_out, notes
"""


def _breaks_to_json(breaks) -> str:
    return json.dumps(
        [
            {
                "break_out": b.break_out.isoformat(),
                "break_in": b.break_in.isoformat() if b.break_in else None,
            }
            for b in breaks
        ]
    )


def _breaks_from_json(raw: Optional[str]):
    if not raw:
        return ()
    return tuple(
        BreakInterval(
            break_out=datetime.fromisoformat(item["break_out"]),
            break_in=datetime.fromisoformat(item["break_in"]) if item.get("break_in") else None,
        )
        for item in json.loads(raw)
    )


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        is_late_check_in=bool(r["is_late_check_in"]),
        is_early_check_out=bool(r["is_early_check_out"]),
        total_hours=as_float(r["total_hours"]),
        working_hours=as_float(r["working_hours"]),
        overtime_hours=as_float(r["overtime_hours"]),
        breaks=_breaks_from_json(r.get("breaks_json")),
        expected_check_in=r.get("expected_check_in"),
        expected_check_out=r.get("expected_check_out"),
        notes=r.get("notes") or "",
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, check_in_time, check_out_time, status,
                    is_late_check_in, is_early_check_out, total_hours, working_hours, overtime_hours,
                    breaks_json, total_break_minutes, expected_check_in, expected_check_out, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    status=VALUES(status),
                    is_late_check_in=VALUES(is_late_check_in),
                    is_early_check_out=VALUES(is_early_check_out),
                    total_hours=VALUES(total_hours),
                    working_hours=VALUES(working_hours),
                    overtime_hours=VALUES(overtime_hours),
                    breaks_json=VALUES(breaks_json),
                    total_break_minutes=VALUES(total_break_minutes),
                    expected_check_in=VALUES(expected_check_in),
                    expected_check_out=VALUES(expected_check_out),
                    notes=VALUES(notes)
                """,
                (
                    int(record.employee_id),
                    record.work_date,
                    record.check_in_time,
                    record.check_out_time,
                    record.status.value,
                    int(record.is_late_check_in),
                    int(record.is_early_check_out),
                    record.total_hours,
                    record.working_hours,
                    record.overtime_hours,
                    _breaks_to_json(record.breaks),
                    int(round(record.total_break_minutes)),
                    record.expected_check_in,
                    record.expected_check_out,
                    record.notes,
                ),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(record.employee_id), record.work_date),
            )
            return _to_record(fetchone(cur))
