from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

import pytest

from hrms_attendance.attendance.model import AttendanceRecord
from hrms_attendance.attendance.service import AttendanceService
from hrms_attendance.core.exceptions import ConcurrentUpdateError, DuplicateAttendanceError
from hrms_attendance.employees.model import Employee


def _copy(record: AttendanceRecord) -> AttendanceRecord:
    # Hand out copies so tests only see what was actually saved.
    return replace(
        record,
        punches=list(record.punches),
        notifications_sent=replace(record.notifications_sent),
    )


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def list_active(self) -> list[Employee]:
        return sorted((e for e in self.employees.values() if e.is_active), key=lambda e: e.full_name)


class InMemoryAttendance:
    """Attendance store enforcing uniqueness of (employee_id, work_date) and versioned saves."""

    def __init__(self):
        self._by_key: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()
        self.create_calls = 0
        self.save_calls = 0

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            rec = self._by_key.get((employee_id, work_date))
            return _copy(rec) if rec else None

    def create_empty(self, *, employee_id: int, work_date: date) -> AttendanceRecord:
        with self._lock:
            self.create_calls += 1
            if (employee_id, work_date) in self._by_key:
                raise DuplicateAttendanceError("duplicate")
            self._id += 1
            rec = AttendanceRecord(employee_id=employee_id, work_date=work_date, attendance_id=self._id)
            self._by_key[(employee_id, work_date)] = rec
            return _copy(rec)

    def save(self, record: AttendanceRecord) -> None:
        with self._lock:
            self.save_calls += 1
            key = (record.employee_id, record.work_date)
            stored = self._by_key.get(key)
            if stored is None or stored.version != record.version:
                raise ConcurrentUpdateError(f"stale version {record.version}")
            record.version += 1
            self._by_key[key] = _copy(record)

    def list_between(self, start_date: date, end_date: date, *, employee_id: Optional[int] = None):
        with self._lock:
            rows = [
                _copy(r)
                for (emp, d), r in self._by_key.items()
                if start_date <= d <= end_date and (employee_id is None or emp == employee_id)
            ]
        return sorted(rows, key=lambda r: (r.work_date, r.employee_id))

    def records(self) -> list[AttendanceRecord]:
        return list(self._by_key.values())


@dataclass
class RecordingNotifier:
    running_out_of_time: list[AttendanceRecord] = field(default_factory=list)
    short_hours: list[AttendanceRecord] = field(default_factory=list)
    fail: bool = False

    def notify_running_out_of_time(self, record, employee) -> None:
        if self.fail:
            raise RuntimeError("smtp down")
        self.running_out_of_time.append(record)

    def notify_short_hours(self, record, employee) -> None:
        if self.fail:
            raise RuntimeError("smtp down")
        self.short_hours.append(record)


OFFICE = {"latitude": 18.4575, "longitude": 73.8508}


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 10, 0, 0)


@pytest.fixture
def employee() -> Employee:
    return Employee(employee_id=1, employee_code="EMP-2026-00001", full_name="Asha Patil", email="asha@example.com")


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def employees_repo(employee) -> InMemoryEmployees:
    return InMemoryEmployees({employee.employee_id: employee})


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(attendance_repo, employees_repo, notifier) -> AttendanceService:
    return AttendanceService(attendance_repo, employees_repo, notifier=notifier)


@pytest.fixture
def office() -> dict:
    return dict(OFFICE)
