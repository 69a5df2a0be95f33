from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import DayStatus, PunchType


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class PunchEvent:
    """Domain entity: a single clock-in or clock-out.

    Punches are appended to a record and never edited afterwards.
    """

    punch_type: PunchType
    time: datetime
    location: str
    coordinates: Optional[Coordinates] = None
    device: Optional[str] = None
    ip: Optional[str] = None


@dataclass
class NotificationFlags:
    """At-most-once guards for the day's alerts.

    Persisted with the record and only ever flipped to True by the punch
    workflow; derivation does not touch them.
    """

    running_out_of_time: bool = False
    short_hours: bool = False


@dataclass(frozen=True)
class DerivedAttendance:
    """Output of one derivation run over a punch list."""

    total_working_hours: float
    first_punch_in: Optional[datetime]
    last_punch_out: Optional[datetime]
    is_late_entry: bool
    is_early_exit: bool
    status: DayStatus
    overtime: float
    day_ended: bool
    calculated_at: datetime


@dataclass
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    employee_id: int
    work_date: date
    punches: list[PunchEvent] = field(default_factory=list)
    attendance_id: Optional[int] = None
    # Bumped by storage on every save; a stale version means someone else saved first.
    version: int = 0

    total_working_hours: float = 0.0
    first_punch_in: Optional[datetime] = None
    last_punch_out: Optional[datetime] = None
    is_late_entry: bool = False
    is_early_exit: bool = False
    status: DayStatus = DayStatus.ABSENT
    overtime: float = 0.0
    calculated_at: Optional[datetime] = None

    notifications_sent: NotificationFlags = field(default_factory=NotificationFlags)

    is_holiday: bool = False
    holiday_name: Optional[str] = None

    def sorted_punches(self) -> list[PunchEvent]:
        return sorted(self.punches, key=lambda p: p.time)

    def apply(self, derived: DerivedAttendance) -> None:
        """Overwrite the derived fields; guard flags are left as they are."""
        self.total_working_hours = derived.total_working_hours
        self.first_punch_in = derived.first_punch_in
        self.last_punch_out = derived.last_punch_out
        self.is_late_entry = derived.is_late_entry
        self.is_early_exit = derived.is_early_exit
        self.status = derived.status
        self.overtime = derived.overtime
        self.calculated_at = derived.calculated_at


@dataclass(frozen=True)
class AttendanceSnapshot:
    """Read-model returned to the punch/today endpoints."""

    employee_id: int
    work_date: date
    punches: tuple[PunchEvent, ...]
    status: DayStatus
    hours_worked: float
    hours_remaining: float
    overtime: float
    first_punch_in: Optional[datetime]
    last_punch_out: Optional[datetime]
    is_late_entry: bool
    is_early_exit: bool
    can_punch_in: bool
    can_punch_out: bool
    message: Optional[str] = None


@dataclass(frozen=True)
class MonthlyDay:
    day: int
    work_date: date
    status: str
    working_hours: float
    punches: tuple[PunchEvent, ...]
    is_late_entry: bool
    is_early_exit: bool


@dataclass(frozen=True)
class MonthlyStats:
    total_days: int
    present: int
    absent: int
    not_marked: int
    late_entry: int
    early_exit: int
    total_working_hours: float
    average_working_hours: float
    attendance_percentage: float


@dataclass(frozen=True)
class MonthlyAttendance:
    employee_id: int
    year: int
    month: int
    days: tuple[MonthlyDay, ...]
    stats: MonthlyStats


@dataclass(frozen=True)
class DailyEmployeeAttendance:
    employee_id: int
    employee_code: str
    employee_name: str
    department: Optional[str]
    status: str
    working_hours: float
    punches: tuple[PunchEvent, ...]
    punch_in: Optional[datetime]
    punch_out: Optional[datetime]
    is_late_entry: bool
    is_early_exit: bool


@dataclass(frozen=True)
class DailyStats:
    work_date: date
    total_employees: int
    present: int
    absent: int
    not_marked: int
    late_entry: int
    early_exit: int
    short_hours: int
    attendance_percentage: float


@dataclass(frozen=True)
class DailyReport:
    """Per-date view across all employees, built from stored derived fields."""

    stats: DailyStats
    employees: tuple[DailyEmployeeAttendance, ...]
