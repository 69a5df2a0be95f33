from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..common.datetime_utils import minutes_since_midnight
from ..core.constants import (
    EARLY_EXIT_WINDOW_END,
    EARLY_EXIT_WINDOW_START,
    LATE_ENTRY_WINDOW_END,
    LATE_ENTRY_WINDOW_START,
)


@dataclass(frozen=True)
class TimeWindow:
    """Wall-clock window applied on the calendar day of the punch being checked.

    Comparison is done on minutes since midnight with sub-minute precision, so
    the window never leaks into a neighbouring day.
    """

    start: time
    end: time
    end_inclusive: bool = True

    def contains(self, moment: datetime) -> bool:
        value = minutes_since_midnight(moment)
        if value < minutes_since_midnight(self.start):
            return False
        end = minutes_since_midnight(self.end)
        return value <= end if self.end_inclusive else value < end


# First punch-in inside this band is flagged late; earlier or later is not.
LATE_ENTRY_WINDOW = TimeWindow(LATE_ENTRY_WINDOW_START, LATE_ENTRY_WINDOW_END, end_inclusive=True)

# Last punch-out inside this band is flagged as an early exit.
EARLY_EXIT_WINDOW = TimeWindow(EARLY_EXIT_WINDOW_START, EARLY_EXIT_WINDOW_END, end_inclusive=False)
