from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request
from werkzeug.exceptions import BadRequest

from ..common.serialization import to_primitive
from ..common.validators import optional_enum, require_enum
from ..container import Container
from ..core.enums import PaymentMethod, PaymentStatus
from .model import PayrollAdjustments


def _payroll_json(record):
    data = to_primitive(record)
    data["allowances"]["total"] = record.total_allowances
    data["deductions"]["total"] = record.total_deductions
    return data


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

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

    def _int_list(data: dict, key: str) -> list[int]:
        raw = data.get(key) or []
        if not isinstance(raw, list):
            raise BadRequest(f"{key} must be a list of integers")
        try:
            return [int(x) for x in raw]
        except (TypeError, ValueError):
            raise BadRequest(f"{key} must be a list of integers")

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    def generate():
        data = _body()
        if not data.get("month") or not data.get("year"):
            raise BadRequest("Month and year are required")

        report = service.generate_for_active(
            month=_required_int(data, "month"),
            year=_required_int(data, "year"),
            generated_by=_required_int(data, "generated_by"),
            employee_ids=_int_list(data, "employee_ids"),
        )
        results = []
        for r in report.results:
            item = {"employee_id": r.employee_id, "status": r.outcome.value}
            if r.payroll:
                item["payroll"] = _payroll_json(r.payroll)
            if r.error:
                item["error"] = r.error
            results.append(item)

        return jsonify(
            {
                "message": "Payroll generation completed",
                "data": {
                    "results": results,
                    "summary": {
                        "total": len(report.results),
                        "successful": report.successful,
                        "failed": report.failed,
                        "total_amount": report.total_amount,
                    },
                },
            }
        )

    @app.route("/api/payroll/calculate/<int:employee_id>", methods=["POST"], endpoint="payroll_calculate")
    def calculate(employee_id: int):
        data = _body()
        adjustments = PayrollAdjustments(
            bonus=float(data.get("bonus") or 0),
            other_allowance=float(data.get("other_allowance") or 0),
            loan=float(data.get("loan") or 0),
            advance=float(data.get("advance") or 0),
            other_deduction=float(data.get("other_deduction") or 0),
        )
        record = service.calculate(
            employee_id,
            month=_required_int(data, "month"),
            year=_required_int(data, "year"),
            adjustments=adjustments,
        )
        return jsonify({"data": _payroll_json(record)})

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    def list_records():
        rows = service.list_records(
            employee_id=request.args.get("employee_id", type=int),
            month=request.args.get("month", type=int),
            year=request.args.get("year", type=int),
            status=optional_enum(PaymentStatus, request.args.get("status"), "payment status"),
        )
        return jsonify({"data": [_payroll_json(r) for r in rows]})

    @app.route("/api/payroll/history", methods=["GET"], endpoint="payroll_history")
    def history():
        year = request.args.get("year", date.today().year, type=int)
        return jsonify({"data": to_primitive(service.history(year=year))})

    @app.route("/api/payroll/stats", methods=["GET"], endpoint="payroll_stats")
    def stats():
        year = request.args.get("year", date.today().year, type=int)
        return jsonify({"data": service.stats(year=year)})

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    def get(payroll_id: int):
        return jsonify({"data": _payroll_json(service.get(payroll_id))})

    @app.route("/api/payroll/<int:payroll_id>/payment", methods=["PUT"], endpoint="payroll_payment")
    def payment(payroll_id: int):
        data = _body()
        status = require_enum(PaymentStatus, data.get("payment_status"), "payment status")
        method = optional_enum(PaymentMethod, data.get("payment_method"), "payment method")
        record = service.update_payment(
            payroll_id,
            status=status,
            method=method,
            reference=data.get("payment_reference"),
        )
        return jsonify({"message": "Payment status updated successfully", "data": _payroll_json(record)})

    @app.route("/api/payroll/<int:payroll_id>/approve", methods=["PUT"], endpoint="payroll_approve")
    def approve(payroll_id: int):
        data = _body()
        record = service.approve(payroll_id, approved_by=_required_int(data, "approved_by"))
        return jsonify({"message": "Payroll approved successfully", "data": _payroll_json(record)})
