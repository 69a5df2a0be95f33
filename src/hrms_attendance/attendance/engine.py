"""Attendance derivation: punch list in, working hours and day status out.

The routine is a pure function of the punches and the supplied clock. It
never raises for a list of ``PunchEvent`` values; unsorted input is
normalized by sorting on ``time``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import hours_between, now_local
from ..core.constants import HOURS_PRECISION, TARGET_WORKING_HOURS
from ..core.enums import DayStatus, PunchType
from .factory import DayStatusStrategyFactory
from .model import AttendanceRecord, DerivedAttendance, PunchEvent
from .rules import EARLY_EXIT_WINDOW, LATE_ENTRY_WINDOW, TimeWindow

logger = logging.getLogger(__name__)

# Statuses that keep their value on a late day.
_LATE_PROOF_STATUSES = frozenset({DayStatus.COMPLETE, DayStatus.RUNNING_OUT_OF_TIME})


def sum_paired_hours(punches: Sequence[PunchEvent]) -> float:
    """Sum In->Out intervals of time-sorted punches, in hours (unrounded).

    Each Punch In is closed by the first later Punch Out that has not already
    closed another Punch In. An open Punch In contributes nothing.
    """
    consumed: set[int] = set()
    total = 0.0
    for i, punch in enumerate(punches):
        if punch.punch_type != PunchType.PUNCH_IN:
            continue
        for j in range(i + 1, len(punches)):
            if j in consumed or punches[j].punch_type != PunchType.PUNCH_OUT:
                continue
            consumed.add(j)
            total += hours_between(punch.time, punches[j].time)
            break
    return total


def derive_attendance(
    punches: Iterable[PunchEvent],
    *,
    now: Optional[datetime] = None,
    target_hours: float = TARGET_WORKING_HOURS,
    late_window: TimeWindow = LATE_ENTRY_WINDOW,
    early_window: TimeWindow = EARLY_EXIT_WINDOW,
    strategy_factory: Optional[DayStatusStrategyFactory] = None,
) -> DerivedAttendance:
    calculated_at = now or now_local()
    factory = strategy_factory or DayStatusStrategyFactory()

    ordered = sorted(punches, key=lambda p: p.time)
    if not ordered:
        return DerivedAttendance(
            total_working_hours=0.0,
            first_punch_in=None,
            last_punch_out=None,
            is_late_entry=False,
            is_early_exit=False,
            status=DayStatus.ABSENT,
            overtime=0.0,
            day_ended=False,
            calculated_at=calculated_at,
        )

    first, last = ordered[0], ordered[-1]
    day_ended = last.punch_type == PunchType.PUNCH_OUT

    is_late_entry = first.punch_type == PunchType.PUNCH_IN and late_window.contains(first.time)
    is_early_exit = day_ended and early_window.contains(last.time)
    if is_early_exit:
        logger.debug("Early exit detected: punched out at %s", last.time.strftime("%H:%M:%S"))

    hours = round(sum_paired_hours(ordered), HOURS_PRECISION)

    strategy = factory.for_day(day_ended=day_ended, hours=hours)
    status = strategy.decide(hours=hours, target_hours=target_hours, is_early_exit=is_early_exit)

    # Late only replaces statuses outside the two hour-based outcomes.
    if is_late_entry and status != DayStatus.ABSENT and status not in _LATE_PROOF_STATUSES:
        status = DayStatus.LATE_ENTRY

    overtime = round(max(0.0, hours - target_hours), HOURS_PRECISION)

    return DerivedAttendance(
        total_working_hours=hours,
        first_punch_in=first.time,
        last_punch_out=last.time if day_ended else None,
        is_late_entry=is_late_entry,
        is_early_exit=is_early_exit,
        status=status,
        overtime=overtime,
        day_ended=day_ended,
        calculated_at=calculated_at,
    )


def recalculate(record: AttendanceRecord, *, now: Optional[datetime] = None) -> DerivedAttendance:
    """Derive from the record's punches and write the result back onto it."""
    derived = derive_attendance(record.punches, now=now)
    record.apply(derived)
    return derived
