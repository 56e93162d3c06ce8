from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request
from werkzeug.exceptions import BadRequest

from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_primitive
from ..common.validators import optional_enum, require_enum
from ..container import Container
from ..core.enums import HalfDayPeriod, LeaveStatus, LeaveType
from ..core.exceptions import LeaveConflict
from .service import NewLeaveRequest


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    def _body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise BadRequest("Request body must be a JSON object")
        return data

    def _required_int(data: dict, key: str) -> int:
        try:
            return int(data[key])
        except (KeyError, TypeError, ValueError):
            raise BadRequest(f"{key} is required")

    def _required_date(data: dict, key: str) -> date:
        if not data.get(key):
            raise BadRequest(f"{key} is required")
        return parse_iso_date(data[key])

    @app.errorhandler(LeaveConflict)
    def on_conflict(exc: LeaveConflict):
        return jsonify({"message": str(exc), "conflicts": to_primitive(exc.conflicts)}), 409

    @app.route("/api/leave/request", methods=["POST"], endpoint="leave_submit")
    def submit():
        data = _body()
        handover = data.get("handover_to")
        new = NewLeaveRequest(
            employee_id=_required_int(data, "employee_id"),
            leave_type=require_enum(LeaveType, data.get("leave_type"), "leave type"),
            start_date=_required_date(data, "start_date"),
            end_date=_required_date(data, "end_date"),
            reason=data.get("reason") or "",
            is_half_day=bool(data.get("is_half_day", False)),
            half_day_period=optional_enum(HalfDayPeriod, data.get("half_day_period"), "half-day period"),
            handover_to=int(handover) if handover else None,
            handover_notes=data.get("handover_notes") or "",
        )
        created = service.submit(new)
        return jsonify({"message": "Leave request submitted successfully", "data": to_primitive(created)}), 201

    @app.route("/api/leave/<int:employee_id>", methods=["GET"], endpoint="leave_list")
    def list_requests(employee_id: int):
        status = optional_enum(LeaveStatus, request.args.get("status"), "status")
        year = request.args.get("year", type=int)
        rows = service.list_requests(employee_id, statuses=[status] if status else None, year=year)
        return jsonify({"data": to_primitive(rows)})

    @app.route("/api/leave/<int:employee_id>/balance", methods=["GET"], endpoint="leave_balance")
    def balance(employee_id: int):
        year = request.args.get("year", date.today().year, type=int)
        return jsonify({"data": to_primitive(service.balance(employee_id, year=year))})

    @app.route("/api/leave/<int:employee_id>/conflicts", methods=["GET"], endpoint="leave_conflicts")
    def conflicts(employee_id: int):
        start = _required_date(request.args, "start")
        end = _required_date(request.args, "end")
        exclude = request.args.get("exclude", type=int)
        rows = service.conflicts(employee_id, start=start, end=end, exclude_leave_id=exclude)
        return jsonify({"data": to_primitive(rows), "has_conflicts": bool(rows)})

    @app.route("/api/leave/<int:leave_id>/status", methods=["PUT"], endpoint="leave_decide")
    def decide(leave_id: int):
        data = _body()
        status = require_enum(LeaveStatus, data.get("status"), "status")
        decided_by = _required_int(data, "decided_by")
        if status == LeaveStatus.APPROVED:
            saved = service.approve(leave_id, decided_by=decided_by)
        elif status == LeaveStatus.REJECTED:
            saved = service.reject(leave_id, decided_by=decided_by, reason=data.get("rejection_reason") or "")
        else:
            raise BadRequest("Status must be approved or rejected")
        return jsonify({"message": f"Leave request {status.value} successfully", "data": to_primitive(saved)})

    @app.route("/api/leave/<int:leave_id>/cancel", methods=["PUT"], endpoint="leave_cancel")
    def cancel(leave_id: int):
        data = _body()
        saved = service.cancel(leave_id, employee_id=_required_int(data, "employee_id"))
        return jsonify({"message": "Leave request cancelled successfully", "data": to_primitive(saved)})

    @app.route("/api/leave/<int:leave_id>/reschedule", methods=["PUT"], endpoint="leave_reschedule")
    def reschedule(leave_id: int):
        data = _body()
        saved = service.reschedule(
            leave_id,
            employee_id=_required_int(data, "employee_id"),
            start=_required_date(data, "start_date"),
            end=_required_date(data, "end_date"),
        )
        return jsonify({"message": "Leave request updated successfully", "data": to_primitive(saved)})

    @app.route("/api/leave/calendar", methods=["GET"], endpoint="leave_calendar")
    def calendar_view():
        today = date.today()
        year = request.args.get("year", today.year, type=int)
        month = request.args.get("month", today.month, type=int)
        employee_id = request.args.get("employee_id", type=int)
        rows = service.calendar(year=year, month=month, employee_id=employee_id)
        return jsonify({"data": to_primitive(rows)})
