from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_empty(self, *, employee_id: int, work_date: date) -> AttendanceRecord:
        """Insert an empty record for (employee_id, work_date).

        Must be atomic with respect to the (employee_id, work_date) uniqueness
        constraint and raise ``DuplicateAttendanceError`` when a concurrent
        request created the record first.
        """

        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> None:
        """Persist derived fields, notification guards and any appended punches.

        The write only succeeds if the stored record still has ``record.version``;
        otherwise nothing is written and ``ConcurrentUpdateError`` is raised.
        On success ``record.version`` is advanced.
        """

        raise NotImplementedError

    def list_between(
        self, start_date: date, end_date: date, *, employee_id: Optional[int] = None
    ) -> Sequence[AttendanceRecord]:
        """Records with start_date <= work_date <= end_date, oldest first."""

        raise NotImplementedError
