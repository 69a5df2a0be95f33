from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.validators import require_date
from ..core.exceptions import ConcurrentUpdateError, NotFoundError, ValidationError
from ..container import Container
from .model import AttendanceRecord, AttendanceSnapshot, DailyReport, MonthlyAttendance, PunchEvent

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def punch_to_dict(p: PunchEvent) -> dict[str, Any]:
    return {
        "punchType": p.punch_type.value,
        "time": p.time.isoformat(),
        "location": p.location,
        "coordinates": (
            {"latitude": p.coordinates.latitude, "longitude": p.coordinates.longitude} if p.coordinates else None
        ),
    }


def snapshot_to_dict(s: AttendanceSnapshot) -> dict[str, Any]:
    out = {
        "employeeId": s.employee_id,
        "date": s.work_date.isoformat(),
        "punches": [punch_to_dict(p) for p in s.punches],
        "status": s.status.value,
        "currentStatus": s.status.value,
        "totalWorkingHours": s.hours_worked,
        "hoursWorked": s.hours_worked,
        "hoursRemaining": s.hours_remaining,
        "overtime": s.overtime,
        "firstPunchIn": _iso(s.first_punch_in),
        "lastPunchOut": _iso(s.last_punch_out),
        "isLateEntry": s.is_late_entry,
        "isEarlyExit": s.is_early_exit,
        "canPunchIn": s.can_punch_in,
        "canPunchOut": s.can_punch_out,
    }
    if s.message:
        out["message"] = s.message
    return out


def monthly_to_dict(m: MonthlyAttendance) -> dict[str, Any]:
    return {
        "employeeId": m.employee_id,
        "month": m.month,
        "year": m.year,
        "stats": {
            "totalDays": m.stats.total_days,
            "present": m.stats.present,
            "absent": m.stats.absent,
            "notMarked": m.stats.not_marked,
            "lateEntry": m.stats.late_entry,
            "earlyExit": m.stats.early_exit,
            "totalWorkingHours": m.stats.total_working_hours,
            "averageWorkingHours": m.stats.average_working_hours,
            "attendancePercentage": m.stats.attendance_percentage,
        },
        "calendarData": [
            {
                "day": d.day,
                "date": d.work_date.isoformat(),
                "status": d.status,
                "workingHours": d.working_hours,
                "punches": [punch_to_dict(p) for p in d.punches],
                "isLateEntry": d.is_late_entry,
                "isEarlyExit": d.is_early_exit,
            }
            for d in m.days
        ],
    }


def record_to_dict(r: AttendanceRecord) -> dict[str, Any]:
    return {
        "attendanceId": r.attendance_id,
        "employeeId": r.employee_id,
        "date": r.work_date.isoformat(),
        "punches": [punch_to_dict(p) for p in r.sorted_punches()],
        "status": r.status.value,
        "totalWorkingHours": r.total_working_hours,
        "overtime": r.overtime,
        "firstPunchIn": _iso(r.first_punch_in),
        "lastPunchOut": _iso(r.last_punch_out),
        "isLateEntry": r.is_late_entry,
        "isEarlyExit": r.is_early_exit,
        "isHoliday": r.is_holiday,
        "holidayName": r.holiday_name,
        "calculatedAt": _iso(r.calculated_at),
    }


def daily_report_to_dict(d: DailyReport) -> dict[str, Any]:
    s = d.stats
    return {
        "stats": {
            "date": s.work_date.isoformat(),
            "totalEmployees": s.total_employees,
            "present": s.present,
            "absent": s.absent,
            "notMarked": s.not_marked,
            "lateEntry": s.late_entry,
            "earlyExit": s.early_exit,
            "shortHours": s.short_hours,
            "attendancePercentage": s.attendance_percentage,
        },
        "dailyAttendance": [
            {
                "employeeId": e.employee_id,
                "employeeCode": e.employee_code,
                "employeeName": e.employee_name,
                "department": e.department,
                "status": e.status,
                "workingHours": e.working_hours,
                "punches": [punch_to_dict(p) for p in e.punches],
                "punchIn": _iso(e.punch_in),
                "punchOut": _iso(e.punch_out),
                "isLateEntry": e.is_late_entry,
                "isEarlyExit": e.is_early_exit,
            }
            for e in d.employees
        ],
    }


def _employee_id(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("employeeId is required") from None


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# Raised through to the app-level handlers instead of the per-route 500.
_CLIENT_ERRORS = (ValidationError, NotFoundError, ConcurrentUpdateError)


def register(app: Flask, container: Container) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return jsonify({"message": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return jsonify({"message": str(e)}), 404

    @app.errorhandler(ConcurrentUpdateError)
    def handle_conflict(e: ConcurrentUpdateError):
        logger.warning("Gave up on contended attendance update: %s", e)
        return jsonify({"message": "Attendance was updated by another request. Please try again."}), 409

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def list_records():
        raw_employee = request.args.get("employeeId")
        employee_id = _employee_id(raw_employee) if raw_employee is not None else None
        try:
            records = container.attendance_service.list_records(
                start_date=request.args.get("startDate"),
                end_date=request.args.get("endDate"),
                employee_id=employee_id,
            )
        except _CLIENT_ERRORS:
            raise
        except Exception:
            logger.exception("Listing attendance failed (employee=%s)", employee_id)
            return jsonify({"message": "Server error"}), 500
        return jsonify([record_to_dict(r) for r in records]), 200

    @app.route("/api/attendance/punch", methods=["POST"], endpoint="attendance_punch")
    def punch():
        data = _json_body()
        employee_id = _employee_id(data.get("employeeId"))
        try:
            snapshot = container.attendance_service.submit_punch(
                employee_id,
                data.get("punchType"),
                data.get("location"),
                device=request.headers.get("User-Agent"),
                ip=request.remote_addr,
            )
        except _CLIENT_ERRORS:
            raise
        except Exception:
            logger.exception("Punch failed for employee %s", employee_id)
            return jsonify({"message": "Server error occurred while processing attendance. Please try again."}), 500
        return jsonify(snapshot_to_dict(snapshot)), 200

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    def today():
        employee_id = _employee_id(request.args.get("employeeId"))
        try:
            snapshot = container.attendance_service.get_today(employee_id)
        except _CLIENT_ERRORS:
            raise
        except Exception:
            logger.exception("Loading today's attendance failed for employee %s", employee_id)
            return jsonify({"message": "Server error occurred while fetching attendance. Please try again."}), 500
        return jsonify(snapshot_to_dict(snapshot)), 200

    @app.route("/api/attendance/daily-stats", methods=["GET"], endpoint="attendance_daily_stats")
    def daily_stats():
        raw_date = request.args.get("date")
        work_date = require_date(raw_date) if raw_date else now_local().date()
        try:
            report = container.attendance_service.get_daily_stats(work_date)
        except _CLIENT_ERRORS:
            raise
        except Exception:
            logger.exception("Daily attendance stats failed for %s", work_date)
            return jsonify({"message": "Server error"}), 500
        return jsonify(daily_report_to_dict(report)), 200

    @app.route("/api/attendance/monthly/<int:employee_id>", methods=["GET"], endpoint="attendance_monthly")
    def monthly(employee_id: int):
        current = now_local()
        month = request.args.get("month", default=current.month, type=int)
        year = request.args.get("year", default=current.year, type=int)
        try:
            data = container.attendance_service.get_monthly(employee_id, year=year, month=month)
        except _CLIENT_ERRORS:
            raise
        except Exception:
            logger.exception("Monthly attendance failed for employee %s", employee_id)
            return jsonify({"message": "Server error"}), 500
        return jsonify(monthly_to_dict(data)), 200
