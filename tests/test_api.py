from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from hr_payroll.container import Container
from hr_payroll.main import create_app


@pytest.fixture
def client(monkeypatch, policy, attendance_service, leave_service, payroll_service):
    monkeypatch.setenv("APP_ENV", "testing")
    container = Container(
        policy=policy,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
    )
    app = create_app(container=container)
    return app.test_client()


def test_check_in_and_out(client):
    resp = client.post("/api/attendance/check-in", json={"employee_id": 1, "timestamp": "2025-03-03T08:55:00"})
    assert resp.status_code == 201
    assert resp.get_json()["data"]["status"] == "present"

    resp = client.post("/api/attendance/check-out", json={"employee_id": 1, "timestamp": "2025-03-03T18:10:00"})
    body = resp.get_json()["data"]
    assert resp.status_code == 200
    assert body["working_hours"] == pytest.approx(9.25)
    assert body["check_out_time"] == "2025-03-03T18:10:00"
    assert body["total_break_minutes"] == 0


def test_check_in_with_utc_offset_is_stored_as_local_time(client):
    aware = datetime(2025, 3, 3, 8, 55, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    resp = client.post("/api/attendance/check-in", json={"employee_id": 1, "timestamp": aware.isoformat()})

    assert resp.status_code == 201
    assert resp.get_json()["data"]["check_in_time"] == aware.astimezone().replace(tzinfo=None).isoformat()


def test_unknown_employee_is_404(client):
    resp = client.post("/api/attendance/check-in", json={"employee_id": 404})

    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Employee 404 not found"


def test_malformed_body_is_400(client):
    resp = client.post("/api/attendance/check-in", data="not json", content_type="text/plain")

    assert resp.status_code == 400
    assert "JSON" in resp.get_json()["message"]


def test_monthly_summary(client):
    client.post("/api/attendance/check-in", json={"employee_id": 1, "timestamp": "2025-03-03T09:30:00"})
    client.post("/api/attendance/check-out", json={"employee_id": 1, "timestamp": "2025-03-03T18:00:00"})

    resp = client.get("/api/attendance/1/summary?year=2025&month=3")

    data = resp.get_json()["data"]
    assert data["late_days"] == 1
    assert data["average_check_in_time"] == "09:30"


def test_leave_flow(client):
    start = date.today() + timedelta(days=30)
    payload = {
        "employee_id": 1,
        "leave_type": "annual",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=2)).isoformat(),
        "reason": "Family wedding",
    }

    resp = client.post("/api/leave/request", json=payload)
    assert resp.status_code == 201
    leave_id = resp.get_json()["data"]["leave_id"]

    resp = client.post("/api/leave/request", json=payload)
    assert resp.status_code == 409
    assert len(resp.get_json()["conflicts"]) == 1

    resp = client.put(f"/api/leave/{leave_id}/status", json={"status": "approved", "decided_by": 5})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "approved"

    resp = client.put(f"/api/leave/{leave_id}/cancel", json={"employee_id": 1})
    assert resp.status_code == 400

    resp = client.get(f"/api/leave/1/balance?year={start.year}")
    assert resp.get_json()["data"]["annual"]["used"] > 0


def test_leave_bad_type(client):
    resp = client.post(
        "/api/leave/request",
        json={"employee_id": 1, "leave_type": "vacation", "start_date": "2099-01-05", "end_date": "2099-01-05", "reason": "x"},
    )

    assert resp.status_code == 400
    assert "leave type" in resp.get_json()["message"]


def test_cancel_someone_elses_leave_is_403(client):
    start = date.today() + timedelta(days=40)
    resp = client.post(
        "/api/leave/request",
        json={
            "employee_id": 1,
            "leave_type": "sick",
            "start_date": start.isoformat(),
            "end_date": start.isoformat(),
            "reason": "Checkup",
        },
    )
    leave_id = resp.get_json()["data"]["leave_id"]

    resp = client.put(f"/api/leave/{leave_id}/cancel", json={"employee_id": 3})

    assert resp.status_code == 403


def test_generate_payroll_summary(client):
    resp = client.post("/api/payroll/generate", json={"month": 3, "year": 2025, "generated_by": 7, "employee_ids": [1, 2, 3]})

    body = resp.get_json()["data"]
    assert resp.status_code == 200
    assert [r["status"] for r in body["results"]] == ["created", "error", "created"]
    assert body["summary"]["successful"] == 2
    assert body["summary"]["failed"] == 1
    payroll = body["results"][0]["payroll"]
    assert round(payroll["gross_salary"] - payroll["deductions"]["total"], 2) == payroll["net_salary"]
    assert payroll["allowances"]["total"] == payroll["total_allowances"]


def test_generate_payroll_month_validation(client):
    resp = client.post("/api/payroll/generate", json={"month": 13, "year": 2025, "generated_by": 7})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid month. Must be between 1 and 12"


@pytest.mark.parametrize("employee_ids", [["1", "abc"], [1, None], "1,3"])
def test_generate_payroll_rejects_bad_employee_ids(client, employee_ids):
    resp = client.post(
        "/api/payroll/generate", json={"month": 3, "year": 2025, "generated_by": 7, "employee_ids": employee_ids}
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "employee_ids must be a list of integers"


def test_payment_and_stats(client):
    resp = client.post("/api/payroll/generate", json={"month": 3, "year": 2025, "generated_by": 7})
    payroll_id = resp.get_json()["data"]["results"][0]["payroll"]["payroll_id"]

    resp = client.put(f"/api/payroll/{payroll_id}/payment", json={"payment_status": "paid", "payment_reference": "TX-9"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["payment_date"] is not None

    resp = client.put(f"/api/payroll/{payroll_id}/payment", json={"payment_status": "lost"})
    assert resp.status_code == 400

    resp = client.get("/api/payroll/stats?year=2025")
    assert resp.get_json()["data"]["payment_status_breakdown"]["paid"] == 1

    resp = client.get("/api/payroll/history?year=2025")
    assert resp.get_json()["data"][0]["employee_count"] == 2


def test_missing_payroll_is_404(client):
    assert client.get("/api/payroll/999").status_code == 404
