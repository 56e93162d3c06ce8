from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request
from werkzeug.exceptions import BadRequest

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.serialization import to_primitive
from ..container import Container


def _record_json(record):
    data = to_primitive(record)
    data["total_break_minutes"] = record.total_break_minutes
    return data


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise BadRequest("Request body must be a JSON object")
        return data

    def _employee_id(data: dict) -> int:
        try:
            return int(data["employee_id"])
        except (KeyError, TypeError, ValueError):
            raise BadRequest("employee_id is required")

    def _when(data: dict):
        raw = data.get("timestamp")
        return parse_iso_datetime(raw) if raw else None

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def check_in():
        data = _body()
        record = service.check_in(_employee_id(data), now=_when(data), notes=data.get("notes") or "")
        return jsonify({"message": "Checked in successfully", "data": _record_json(record)}), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    def check_out():
        data = _body()
        record = service.check_out(_employee_id(data), now=_when(data), notes=data.get("notes") or "")
        return jsonify({"message": "Checked out successfully", "data": _record_json(record)})

    @app.route("/api/attendance/break/start", methods=["POST"], endpoint="attendance_break_start")
    def break_start():
        data = _body()
        record = service.start_break(_employee_id(data), now=_when(data))
        return jsonify({"message": "Break started", "data": _record_json(record)})

    @app.route("/api/attendance/break/end", methods=["POST"], endpoint="attendance_break_end")
    def break_end():
        data = _body()
        record = service.end_break(_employee_id(data), now=_when(data))
        return jsonify({"message": "Break ended", "data": _record_json(record)})

    @app.route("/api/attendance/<int:employee_id>/today", methods=["GET"], endpoint="attendance_today")
    def today(employee_id: int):
        day_s = request.args.get("date")
        day = parse_iso_date(day_s) if day_s else date.today()
        record = service.get_today_record(employee_id, day)
        return jsonify({"data": _record_json(record) if record else None})

    @app.route("/api/attendance/<int:employee_id>/report", methods=["GET"], endpoint="attendance_report")
    def report(employee_id: int):
        today_ = date.today()
        start_s = request.args.get("start") or today_.replace(day=1).isoformat()
        end_s = request.args.get("end") or today_.isoformat()

        rows = service.report(employee_id, start=parse_iso_date(start_s), end=parse_iso_date(end_s))
        return jsonify({"data": [_record_json(r) for r in rows]})

    @app.route("/api/attendance/<int:employee_id>/summary", methods=["GET"], endpoint="attendance_summary")
    def summary(employee_id: int):
        today_ = date.today()
        year = request.args.get("year", today_.year, type=int)
        month = request.args.get("month", today_.month, type=int)

        result = service.monthly_summary(employee_id, year=year, month=month)
        data = to_primitive(result)
        data["average_check_in_time"] = to_primitive(result.average_check_in_time)
        data["average_check_out_time"] = to_primitive(result.average_check_out_time)
        return jsonify({"data": data})
