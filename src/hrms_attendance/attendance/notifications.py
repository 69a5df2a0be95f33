from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..core.constants import TARGET_WORKING_HOURS
from ..employees.model import Employee
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


class AttendanceNotifier(Protocol):
    """Alert collaborator. Delivery (e-mail/SMS) lives behind this interface."""

    def notify_running_out_of_time(self, record: AttendanceRecord, employee: Optional[Employee]) -> None:
        raise NotImplementedError

    def notify_short_hours(self, record: AttendanceRecord, employee: Optional[Employee]) -> None:
        raise NotImplementedError


def running_out_of_time_message(record: AttendanceRecord, employee: Optional[Employee]) -> tuple[str, str]:
    """Subject and body for the in-progress alert."""
    name = employee.full_name if employee else "Employee"
    worked = record.total_working_hours
    remaining = TARGET_WORKING_HOURS - worked
    subject = f"Running Out of Time - Complete Your {TARGET_WORKING_HOURS:g} Hours"
    body = (
        f"Dear {name}, you have worked {worked} hours today. "
        f"You need to work {remaining:.2f} more hours to complete your required {TARGET_WORKING_HOURS:g} hours."
    )
    return subject, body


def short_hours_message(record: AttendanceRecord, employee: Optional[Employee]) -> tuple[str, str]:
    """Subject and body for the end-of-day alert."""
    name = employee.full_name if employee else "Employee"
    worked = record.total_working_hours
    short = TARGET_WORKING_HOURS - worked
    subject = "Short Working Hours Alert"
    body = (
        f"Dear {name}, you have worked only {worked} hours today, which is {short:.2f} hours short "
        f"of the required {TARGET_WORKING_HOURS:g} hours. If this was unintentional, please contact HR."
    )
    return subject, body


class LoggingNotifier(AttendanceNotifier):
    """Renders the alerts and writes them to the log instead of sending them."""

    def notify_running_out_of_time(self, record: AttendanceRecord, employee: Optional[Employee]) -> None:
        subject, body = running_out_of_time_message(record, employee)
        logger.info("Alert for employee %s: %s | %s", record.employee_id, subject, body)

    def notify_short_hours(self, record: AttendanceRecord, employee: Optional[Employee]) -> None:
        subject, body = short_hours_message(record, employee)
        logger.info("Alert for employee %s: %s | %s", record.employee_id, subject, body)
