from __future__ import annotations

from datetime import datetime

import pytest

from hrms_attendance.container import Container
from hrms_attendance.core.constants import MAX_DEVICE_LENGTH
from hrms_attendance.core.exceptions import ConcurrentUpdateError
from hrms_attendance.employees.model import Employee
from hrms_attendance.main import create_app


@pytest.fixture
def client(monkeypatch, service, attendance_repo, employees_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    clock = {"now": datetime(2026, 2, 2, 10, 0)}
    monkeypatch.setattr("hrms_attendance.attendance.service.now_local", lambda: clock["now"])

    container = Container(
        conn=None,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        attendance_service=service,
    )
    app = create_app(container)
    with app.test_client() as c:
        c.clock = clock
        yield c


def test_punch_in_then_out(client, office):
    resp = client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In", "location": office})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Punched in successfully"
    assert body["canPunchOut"] is True
    assert body["punches"][0]["punchType"] == "Punch In"

    client.clock["now"] = datetime(2026, 2, 2, 18, 55)
    resp = client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch Out", "location": office})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["status"] == "Early Exit"
    assert body["hoursWorked"] == 8.92
    assert body["hoursRemaining"] == 0.08
    assert body["isEarlyExit"] is True
    assert body["lastPunchOut"] == "2026-02-02T18:55:00"


def test_punch_out_first_returns_400(client, office):
    resp = client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch Out", "location": office})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Cannot punch out without punching in first"


def test_missing_location_returns_400(client):
    resp = client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In"})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Location is required for attendance"


def test_missing_employee_id_returns_400(client, office):
    resp = client.post("/api/attendance/punch", json={"punchType": "Punch In", "location": office})
    assert resp.status_code == 400


def test_unknown_employee_returns_404(client, office):
    resp = client.post("/api/attendance/punch", json={"employeeId": 42, "punchType": "Punch In", "location": office})
    assert resp.status_code == 404


def test_storage_failure_returns_500(client, attendance_repo, office, monkeypatch):
    def boom(record):
        raise ConnectionError("database unreachable")

    monkeypatch.setattr(attendance_repo, "save", boom)
    resp = client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In", "location": office})

    assert resp.status_code == 500
    assert "Server error" in resp.get_json()["message"]


def test_today_endpoint(client, office):
    client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In", "location": office})

    resp = client.get("/api/attendance/today?employeeId=1")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["date"] == "2026-02-02"
    assert body["canPunchIn"] is False
    assert body["canPunchOut"] is True
    assert body["hoursRemaining"] == 9.0


def test_monthly_endpoint(client, office):
    client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In", "location": office})

    resp = client.get("/api/attendance/monthly/1?month=2&year=2026")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["stats"]["totalDays"] == 28
    assert body["calendarData"][1]["date"] == "2026-02-02"
    assert body["calendarData"][0]["status"] == "Not Marked"


def test_monthly_invalid_month_returns_400(client):
    resp = client.get("/api/attendance/monthly/1?month=13&year=2026")
    assert resp.status_code == 400


@pytest.mark.parametrize("location", ["office", [18.4575, 73.8508], 42])
def test_non_object_location_returns_400(client, location):
    resp = client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In", "location": location})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Location is required for attendance"


@pytest.mark.parametrize("body", [[1, 2], "Punch In", 7])
def test_non_object_body_returns_400(client, attendance_repo, body):
    resp = client.post("/api/attendance/punch", json=body)

    assert resp.status_code == 400
    assert attendance_repo.records() == []


def test_long_user_agent_is_stored_truncated(client, attendance_repo, office):
    resp = client.post(
        "/api/attendance/punch",
        json={"employeeId": 1, "punchType": "Punch In", "location": office},
        headers={"User-Agent": "Mozilla/5.0 " + "a" * 1000},
    )

    assert resp.status_code == 200
    assert len(attendance_repo.records()[0].punches[0].device) == MAX_DEVICE_LENGTH


def test_contended_save_returns_409(client, attendance_repo, office, monkeypatch):
    def always_stale(record):
        raise ConcurrentUpdateError("stale")

    monkeypatch.setattr(attendance_repo, "save", always_stale)
    resp = client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In", "location": office})

    assert resp.status_code == 409
    assert "try again" in resp.get_json()["message"]


def test_daily_stats_endpoint(client, employees_repo, office):
    employees_repo.employees[2] = Employee(employee_id=2, employee_code="EMP-2026-00002", full_name="Bhavesh Kulkarni")
    client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In", "location": office})
    client.clock["now"] = datetime(2026, 2, 2, 19, 0)
    client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch Out", "location": office})

    resp = client.get("/api/attendance/daily-stats?date=2026-02-02")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["stats"]["date"] == "2026-02-02"
    assert body["stats"]["totalEmployees"] == 2
    assert body["stats"]["present"] == 1
    assert body["stats"]["notMarked"] == 1
    assert body["stats"]["attendancePercentage"] == 50.0
    rows = {row["employeeId"]: row for row in body["dailyAttendance"]}
    assert rows[1]["status"] == "Complete"
    assert rows[1]["punchIn"] == "2026-02-02T10:00:00"
    assert rows[2]["status"] == "Not Marked"
    assert rows[2]["punches"] == []


def test_daily_stats_invalid_date_returns_400(client):
    resp = client.get("/api/attendance/daily-stats?date=02-02-2026")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid date format"


def test_list_endpoint(client, office):
    client.post("/api/attendance/punch", json={"employeeId": 1, "punchType": "Punch In", "location": office})

    resp = client.get("/api/attendance?employeeId=1&startDate=2026-02-01&endDate=2026-02-28")

    body = resp.get_json()
    assert resp.status_code == 200
    assert len(body) == 1
    assert body[0]["date"] == "2026-02-02"
    assert body[0]["employeeId"] == 1
    assert body[0]["punches"][0]["punchType"] == "Punch In"


def test_list_endpoint_requires_date_range(client):
    resp = client.get("/api/attendance?employeeId=1&startDate=2026-02-01")
    assert resp.status_code == 400
