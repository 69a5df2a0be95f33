from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    """Kind of punch event submitted by an employee."""

    PUNCH_IN = "Punch In"
    PUNCH_OUT = "Punch Out"


class DayStatus(str, Enum):
    """Day status stored on an attendance record."""

    ABSENT = "Absent"
    PRESENT = "Present"
    COMPLETE = "Complete"
    RUNNING_OUT_OF_TIME = "Running Out of Time"
    LATE_ENTRY = "Late Entry"
    EARLY_EXIT = "Early Exit"
    SHORT_HOURS = "Short Hours"
    MISSING_PUNCH_OUT = "Missing Punch Out"
    HOLIDAY_WORKED = "Holiday Worked"


class PunchState(str, Enum):
    """Where an employee stands in the day's In/Out cycle."""

    NO_PUNCHES = "NO_PUNCHES"
    AWAITING_PUNCH_OUT = "AWAITING_PUNCH_OUT"
    AWAITING_PUNCH_IN = "AWAITING_PUNCH_IN"
