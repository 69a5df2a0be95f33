from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import DayStatus, PunchType
from ..core.exceptions import ConcurrentUpdateError, DuplicateAttendanceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, Coordinates, NotificationFlags, PunchEvent
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    attendance_id, employee_id, work_date, total_working_hours, first_punch_in, last_punch_out,
    is_late_entry, is_early_exit, status, overtime, notified_running_out_of_time,
    notified_short_hours, is_holiday, holiday_name, calculated_at, version
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (employee_id, work_date),
            )
            row = fetchone(cur)
            if not row:
                return None
            punches = self._load_punches(cur, [int(row["attendance_id"])])
            return self._to_record(row, punches.get(int(row["attendance_id"]), []))

    def create_empty(self, *, employee_id: int, work_date: date) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, status, total_working_hours)
                    VALUES(%s,%s,%s,0)
                    """,
                    (employee_id, work_date, DayStatus.ABSENT.value),
                )
                attendance_id = int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateAttendanceError(
                    f"Attendance for employee {employee_id} on {work_date} already exists"
                ) from e
            raise
        return AttendanceRecord(employee_id=employee_id, work_date=work_date, attendance_id=attendance_id)

    def save(self, record: AttendanceRecord) -> None:
        if record.attendance_id is None:
            raise ValueError("Cannot save an attendance record that was never created")

        with db_cursor(self._conn_factory) as (_, cur):
            # The version predicate row-locks the record until commit, so concurrent
            # savers of the same load serialize here and all but the first miss.
            cur.execute(
                """
                UPDATE attendance_records
                SET total_working_hours=%s, first_punch_in=%s, last_punch_out=%s,
                    is_late_entry=%s, is_early_exit=%s, status=%s, overtime=%s,
                    notified_running_out_of_time=%s, notified_short_hours=%s, calculated_at=%s,
                    version=version+1
                WHERE attendance_id=%s AND version=%s
                """,
                (
                    record.total_working_hours,
                    record.first_punch_in,
                    record.last_punch_out,
                    int(record.is_late_entry),
                    int(record.is_early_exit),
                    record.status.value,
                    record.overtime,
                    int(record.notifications_sent.running_out_of_time),
                    int(record.notifications_sent.short_hours),
                    record.calculated_at,
                    record.attendance_id,
                    record.version,
                ),
            )
            if cur.rowcount != 1:
                raise ConcurrentUpdateError(
                    f"Attendance {record.attendance_id} changed since it was loaded (version {record.version})"
                )

            cur.execute(
                "SELECT COUNT(*) AS stored FROM attendance_punches WHERE attendance_id=%s",
                (record.attendance_id,),
            )
            stored = int(fetchone(cur)["stored"])
            for seq, punch in enumerate(record.punches[stored:], start=stored):
                coords = punch.coordinates
                cur.execute(
                    """
                    INSERT INTO attendance_punches(
                        attendance_id, seq, punch_type, punch_time, location, latitude, longitude, device, ip
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.attendance_id,
                        seq,
                        punch.punch_type.value,
                        punch.time,
                        punch.location,
                        coords.latitude if coords else None,
                        coords.longitude if coords else None,
                        punch.device,
                        punch.ip,
                    ),
                )
        record.version += 1

    def list_between(
        self, start_date: date, end_date: date, *, employee_id: Optional[int] = None
    ) -> Sequence[AttendanceRecord]:
        where = "work_date BETWEEN %s AND %s"
        params: tuple[Any, ...] = (start_date, end_date)
        if employee_id is not None:
            where += " AND employee_id=%s"
            params += (employee_id,)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date ASC, employee_id ASC
                """,
                params,
            )
            rows = fetchall(cur)
            punches = self._load_punches(cur, [int(r["attendance_id"]) for r in rows])
            return [self._to_record(r, punches.get(int(r["attendance_id"]), [])) for r in rows]

    def _load_punches(self, cur, attendance_ids: list[int]) -> Dict[int, list[PunchEvent]]:
        if not attendance_ids:
            return {}
        placeholders = ",".join(["%s"] * len(attendance_ids))
        cur.execute(
            f"""
            SELECT attendance_id, seq, punch_type, punch_time, location, latitude, longitude, device, ip
            FROM attendance_punches
            WHERE attendance_id IN ({placeholders})
            ORDER BY attendance_id, seq
            """,
            tuple(attendance_ids),
        )
        out: Dict[int, list[PunchEvent]] = {}
        for r in fetchall(cur):
            coords = None
            if r.get("latitude") is not None and r.get("longitude") is not None:
                coords = Coordinates(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
            out.setdefault(int(r["attendance_id"]), []).append(
                PunchEvent(
                    punch_type=PunchType(r["punch_type"]),
                    time=r["punch_time"],
                    location=r["location"],
                    coordinates=coords,
                    device=r.get("device"),
                    ip=r.get("ip"),
                )
            )
        return out

    @staticmethod
    def _to_record(r: Dict[str, Any], punches: list[PunchEvent]) -> AttendanceRecord:
        return AttendanceRecord(
            attendance_id=int(r["attendance_id"]),
            version=int(r.get("version") or 0),
            employee_id=int(r["employee_id"]),
            work_date=r["work_date"],
            punches=punches,
            total_working_hours=float(r.get("total_working_hours") or 0),
            first_punch_in=r.get("first_punch_in"),
            last_punch_out=r.get("last_punch_out"),
            is_late_entry=bool(r.get("is_late_entry")),
            is_early_exit=bool(r.get("is_early_exit")),
            status=DayStatus(r["status"]),
            overtime=float(r.get("overtime") or 0),
            calculated_at=r.get("calculated_at"),
            notifications_sent=NotificationFlags(
                running_out_of_time=bool(r.get("notified_running_out_of_time")),
                short_hours=bool(r.get("notified_short_hours")),
            ),
            is_holiday=bool(r.get("is_holiday")),
            holiday_name=r.get("holiday_name"),
        )
