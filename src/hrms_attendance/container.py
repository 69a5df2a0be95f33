from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .attendance.location import CoordinateLabelResolver
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.notifications import LoggingNotifier
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection | None

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService


def build_container(*, db_config: Mapping[str, object]) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        notifier=LoggingNotifier(),
        location_resolver=CoordinateLabelResolver(),
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
    )
