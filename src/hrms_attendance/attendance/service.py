from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import month_days, now_local
from ..common.validators import require_date_range, require_location, require_month, require_punch_type
from ..core.constants import (
    HOURS_PRECISION,
    MAX_DEVICE_LENGTH,
    MAX_IP_LENGTH,
    MAX_SAVE_ATTEMPTS,
    NOT_MARKED_LABEL,
    TARGET_WORKING_HOURS,
)
from ..core.enums import DayStatus, PunchType
from ..core.exceptions import ConcurrentUpdateError, DuplicateAttendanceError, NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .engine import recalculate
from .location import CoordinateLabelResolver, LocationResolver, coordinate_label
from .model import (
    AttendanceRecord,
    AttendanceSnapshot,
    Coordinates,
    DailyEmployeeAttendance,
    DailyReport,
    DailyStats,
    DerivedAttendance,
    MonthlyAttendance,
    MonthlyDay,
    MonthlyStats,
    PunchEvent,
)
from .notifications import AttendanceNotifier, LoggingNotifier
from .repository import AttendanceRepository
from .state import PunchCycle

logger = logging.getLogger(__name__)

_RUNNING_OUT_OF_TIME = "running_out_of_time"
_SHORT_HOURS = "short_hours"

_SHORT_HOURS_STATUSES = {DayStatus.SHORT_HOURS.value, DayStatus.RUNNING_OUT_OF_TIME.value}


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        notifier: AttendanceNotifier | None = None,
        location_resolver: LocationResolver | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._notifier = notifier or LoggingNotifier()
        self._locations = location_resolver or CoordinateLabelResolver()

    def submit_punch(
        self,
        employee_id: int,
        punch_type: Any,
        location: Optional[Mapping[str, Any]],
        *,
        now: datetime | None = None,
        device: str | None = None,
        ip: str | None = None,
    ) -> AttendanceSnapshot:
        """Validate and record a punch, then re-derive the day.

        The day is reloaded and validated again whenever another request saved
        it in between, so a punch is either stored with consistent derived
        fields or rejected.

        Raises:
            ValidationError: bad punch type, missing location or out-of-sequence punch.
            NotFoundError: the employee does not exist.
            ConcurrentUpdateError: the day kept changing underneath us.
        """
        now = now or now_local()
        kind = require_punch_type(punch_type)
        latitude, longitude = require_location(location)
        employee = self._require_employee(employee_id)

        label: str | None = None
        alerted: set[str] = set()
        for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
            record = self._load_for_punch(employee_id, now.date(), kind, now)
            if label is None:
                label = self._resolve_location(latitude, longitude)

            record.punches.append(
                PunchEvent(
                    punch_type=kind,
                    time=now,
                    location=label,
                    coordinates=Coordinates(latitude=latitude, longitude=longitude),
                    device=device[:MAX_DEVICE_LENGTH] if device else device,
                    ip=ip[:MAX_IP_LENGTH] if ip else ip,
                )
            )
            derived = recalculate(record, now=now)
            self._dispatch_alerts(record, derived, employee, alerted)
            try:
                self._attendance.save(record)
                break
            except ConcurrentUpdateError:
                if attempt == MAX_SAVE_ATTEMPTS:
                    raise
                logger.info(
                    "Attendance for employee %s on %s changed concurrently, retrying %s (attempt %d)",
                    employee_id,
                    record.work_date,
                    kind.value,
                    attempt,
                )

        logger.info(
            "Recorded %s for employee %s on %s: status=%s hours=%.2f",
            kind.value,
            employee_id,
            record.work_date,
            record.status.value,
            record.total_working_hours,
        )
        message = "Punched in successfully" if kind == PunchType.PUNCH_IN else "Punched out successfully"
        return self._snapshot(record, message=message)

    def get_today(self, employee_id: int, *, now: datetime | None = None) -> AttendanceSnapshot:
        now = now or now_local()
        self._require_employee(employee_id)

        record = self._get_or_create(employee_id, now.date())
        if record.punches:
            record = self._rederive(record, now=now)
        return self._snapshot(record)

    def recalculate_day(self, employee_id: int, work_date: date, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        """Re-derive a stored record in place; used by maintenance scripts."""
        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if not record:
            return None
        return self._rederive(record, now=now or now_local())

    def get_monthly(self, employee_id: int, *, year: int, month: int) -> MonthlyAttendance:
        month, year = require_month(month, year)
        self._require_employee(employee_id)

        days = month_days(year, month)
        records = self._attendance.list_between(days[0], days[-1], employee_id=employee_id)
        by_date = {r.work_date: r for r in records}

        rows: list[MonthlyDay] = []
        for d in days:
            r = by_date.get(d)
            rows.append(
                MonthlyDay(
                    day=d.day,
                    work_date=d,
                    status=r.status.value if r else NOT_MARKED_LABEL,
                    working_hours=r.total_working_hours if r else 0.0,
                    punches=tuple(r.sorted_punches()) if r else (),
                    is_late_entry=bool(r and r.is_late_entry),
                    is_early_exit=bool(r and r.is_early_exit),
                )
            )

        return MonthlyAttendance(employee_id=employee_id, year=year, month=month, days=tuple(rows), stats=_monthly_stats(rows))

    def get_daily_stats(self, work_date: date) -> DailyReport:
        """Attendance of every active employee on one date, from stored derived fields."""
        by_employee = {r.employee_id: r for r in self._attendance.list_between(work_date, work_date)}

        rows: list[DailyEmployeeAttendance] = []
        for emp in self._employees.list_active():
            r = by_employee.get(emp.employee_id)
            rows.append(
                DailyEmployeeAttendance(
                    employee_id=emp.employee_id,
                    employee_code=emp.employee_code,
                    employee_name=emp.full_name,
                    department=emp.department,
                    status=r.status.value if r else NOT_MARKED_LABEL,
                    working_hours=r.total_working_hours if r else 0.0,
                    punches=tuple(r.sorted_punches()) if r else (),
                    punch_in=r.first_punch_in if r else None,
                    punch_out=r.last_punch_out if r else None,
                    is_late_entry=bool(r and r.is_late_entry),
                    is_early_exit=bool(r and r.is_early_exit),
                )
            )
        rows.sort(key=lambda row: row.employee_name.lower())

        return DailyReport(stats=_daily_stats(work_date, rows), employees=tuple(rows))

    def list_records(
        self,
        *,
        start_date: Any,
        end_date: Any,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Stored records in [start_date, end_date], newest day first."""
        start, end = require_date_range(start_date, end_date)
        records = self._attendance.list_between(start, end, employee_id=employee_id)
        return sorted(records, key=lambda r: (r.work_date, r.employee_id), reverse=True)

    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee profile not found. Please contact HR.")
        return employee

    def _get_or_create(self, employee_id: int, work_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if record:
            return record
        return self._create_or_fetch(employee_id, work_date)

    def _load_for_punch(self, employee_id: int, work_date: date, kind: PunchType, now: datetime) -> AttendanceRecord:
        # Validate before creating anything so a rejected punch leaves no trace.
        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        PunchCycle.from_punches(record.punches if record else []).transition(kind, at=now)
        if record is None:
            record = self._create_or_fetch(employee_id, work_date)
            if record.punches:
                PunchCycle.from_punches(record.punches).transition(kind, at=now)
        return record

    def _create_or_fetch(self, employee_id: int, work_date: date) -> AttendanceRecord:
        try:
            return self._attendance.create_empty(employee_id=employee_id, work_date=work_date)
        except DuplicateAttendanceError:
            # A concurrent first punch won the insert; use the surviving record.
            logger.info("Attendance for employee %s on %s created concurrently, re-fetching", employee_id, work_date)
            record = self._attendance.get_for_employee_and_date(employee_id, work_date)
            if not record:
                raise
            return record

    def _rederive(self, record: AttendanceRecord, *, now: datetime) -> AttendanceRecord:
        for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
            recalculate(record, now=now)
            try:
                self._attendance.save(record)
                return record
            except ConcurrentUpdateError:
                if attempt == MAX_SAVE_ATTEMPTS:
                    raise
                logger.info(
                    "Attendance for employee %s on %s changed concurrently, reloading",
                    record.employee_id,
                    record.work_date,
                )
                record = self._attendance.get_for_employee_and_date(record.employee_id, record.work_date)
        return record

    def _resolve_location(self, latitude: float, longitude: float) -> str:
        try:
            return self._locations.resolve(latitude, longitude)
        except Exception:
            logger.warning("Location lookup failed for (%s, %s), using coordinates", latitude, longitude, exc_info=True)
            return coordinate_label(latitude, longitude)

    def _dispatch_alerts(
        self,
        record: AttendanceRecord,
        derived: DerivedAttendance,
        employee: Employee,
        alerted: set[str],
    ) -> None:
        """Send each alert at most once per day.

        ``alerted`` holds the alerts this request already sent on an earlier
        attempt; those only get their guard set again on the reloaded record.
        """
        hours = derived.total_working_hours
        flags = record.notifications_sent

        if not derived.day_ended and 0 < hours < TARGET_WORKING_HOURS and not flags.running_out_of_time:
            if _RUNNING_OUT_OF_TIME in alerted:
                flags.running_out_of_time = True
            else:
                try:
                    self._notifier.notify_running_out_of_time(record, employee)
                    flags.running_out_of_time = True
                    alerted.add(_RUNNING_OUT_OF_TIME)
                except Exception:
                    logger.exception("Failed to send running-out-of-time alert to employee %s", record.employee_id)

        if derived.day_ended and hours < TARGET_WORKING_HOURS and not flags.short_hours:
            if _SHORT_HOURS in alerted:
                flags.short_hours = True
            else:
                try:
                    self._notifier.notify_short_hours(record, employee)
                    flags.short_hours = True
                    alerted.add(_SHORT_HOURS)
                except Exception:
                    logger.exception("Failed to send short-hours alert to employee %s", record.employee_id)

    def _snapshot(self, record: AttendanceRecord, *, message: str | None = None) -> AttendanceSnapshot:
        ordered = record.sorted_punches()
        first = ordered[0] if ordered else None
        last = ordered[-1] if ordered else None
        cycle = PunchCycle.from_punches(ordered)
        hours = record.total_working_hours

        return AttendanceSnapshot(
            employee_id=record.employee_id,
            work_date=record.work_date,
            punches=tuple(ordered),
            status=record.status,
            hours_worked=hours,
            hours_remaining=round(max(0.0, TARGET_WORKING_HOURS - hours), HOURS_PRECISION),
            overtime=record.overtime,
            first_punch_in=record.first_punch_in,
            last_punch_out=record.last_punch_out,
            is_late_entry=record.is_late_entry and first is not None and first.punch_type == PunchType.PUNCH_IN,
            is_early_exit=record.is_early_exit and last is not None and last.punch_type == PunchType.PUNCH_OUT,
            can_punch_in=cycle.can_punch_in,
            can_punch_out=cycle.can_punch_out,
            message=message,
        )


def _monthly_stats(rows: list[MonthlyDay]) -> MonthlyStats:
    total_days = len(rows)
    present = sum(1 for r in rows if r.status in (DayStatus.PRESENT.value, DayStatus.COMPLETE.value))
    worked = [r.working_hours for r in rows if r.working_hours > 0]
    total_hours = round(sum(r.working_hours for r in rows), HOURS_PRECISION)

    return MonthlyStats(
        total_days=total_days,
        present=present,
        absent=sum(1 for r in rows if r.status == DayStatus.ABSENT.value),
        not_marked=sum(1 for r in rows if r.status == NOT_MARKED_LABEL),
        late_entry=sum(1 for r in rows if r.is_late_entry),
        early_exit=sum(1 for r in rows if r.is_early_exit),
        total_working_hours=total_hours,
        average_working_hours=round(sum(worked) / len(worked), HOURS_PRECISION) if worked else 0.0,
        attendance_percentage=round(present / total_days * 100, 1) if total_days else 0.0,
    )


def _daily_stats(work_date: date, rows: list[DailyEmployeeAttendance]) -> DailyStats:
    # Any stored status other than Absent means the employee turned up.
    total = len(rows)
    present = sum(1 for r in rows if r.status not in (DayStatus.ABSENT.value, NOT_MARKED_LABEL))

    return DailyStats(
        work_date=work_date,
        total_employees=total,
        present=present,
        absent=sum(1 for r in rows if r.status == DayStatus.ABSENT.value),
        not_marked=sum(1 for r in rows if r.status == NOT_MARKED_LABEL),
        late_entry=sum(1 for r in rows if r.status == DayStatus.LATE_ENTRY.value),
        early_exit=sum(1 for r in rows if r.status == DayStatus.EARLY_EXIT.value),
        short_hours=sum(1 for r in rows if r.status in _SHORT_HOURS_STATUSES),
        attendance_percentage=round(present / total * 100, 1) if total else 0.0,
    )
