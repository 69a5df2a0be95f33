from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_EMPLOYEE_COLUMNS = "employee_id, employee_code, full_name, email, mobile, department, is_active"


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employees
                WHERE employee_id=%s
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            return self._to_employee(row) if row else None

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employees
                WHERE is_active=1
                ORDER BY full_name ASC
                """
            )
            return [self._to_employee(r) for r in fetchall(cur)]

    @staticmethod
    def _to_employee(row: Dict[str, Any]) -> Employee:
        return Employee(
            employee_id=int(row["employee_id"]),
            employee_code=row["employee_code"],
            full_name=row["full_name"],
            email=row.get("email"),
            mobile=row.get("mobile"),
            department=row.get("department"),
            is_active=bool(row.get("is_active", True)),
        )
