from __future__ import annotations

from datetime import datetime

import pytest

from hrms_attendance.attendance.model import PunchEvent
from hrms_attendance.attendance.state import PunchCycle
from hrms_attendance.core.enums import PunchState, PunchType
from hrms_attendance.core.exceptions import PunchSequenceError

IN, OUT = PunchType.PUNCH_IN, PunchType.PUNCH_OUT


def punch(kind: PunchType, moment: datetime) -> PunchEvent:
    return PunchEvent(punch_type=kind, time=moment, location="Pune")


def test_empty_day_accepts_punch_in_only():
    cycle = PunchCycle.from_punches([])

    assert cycle.state == PunchState.NO_PUNCHES
    assert cycle.can_punch_in and not cycle.can_punch_out
    assert cycle.transition(IN, at=datetime(2026, 2, 2, 10)) == PunchState.AWAITING_PUNCH_OUT

    with pytest.raises(PunchSequenceError, match="without punching in first"):
        cycle.transition(OUT, at=datetime(2026, 2, 2, 10))


def test_second_punch_in_same_day_is_rejected():
    cycle = PunchCycle.from_punches([punch(IN, datetime(2026, 2, 2, 10))])

    assert cycle.state == PunchState.AWAITING_PUNCH_OUT
    with pytest.raises(PunchSequenceError, match="already punched in"):
        cycle.transition(IN, at=datetime(2026, 2, 2, 12))


def test_open_punch_from_previous_day_does_not_block_punch_in():
    cycle = PunchCycle.from_punches([punch(IN, datetime(2026, 2, 1, 22))])

    assert cycle.transition(IN, at=datetime(2026, 2, 2, 9)) == PunchState.AWAITING_PUNCH_OUT


def test_punch_out_after_punch_out_is_rejected():
    cycle = PunchCycle.from_punches(
        [punch(IN, datetime(2026, 2, 2, 10)), punch(OUT, datetime(2026, 2, 2, 13))]
    )

    assert cycle.state == PunchState.AWAITING_PUNCH_IN
    with pytest.raises(PunchSequenceError):
        cycle.transition(OUT, at=datetime(2026, 2, 2, 14))
    assert cycle.transition(IN, at=datetime(2026, 2, 2, 14)) == PunchState.AWAITING_PUNCH_OUT


def test_state_uses_latest_punch_not_list_tail():
    # Stored out of order: the chronologically last punch is the Punch In.
    cycle = PunchCycle.from_punches(
        [punch(IN, datetime(2026, 2, 2, 14)), punch(OUT, datetime(2026, 2, 2, 13)), punch(IN, datetime(2026, 2, 2, 9))]
    )

    assert cycle.state == PunchState.AWAITING_PUNCH_OUT
    assert cycle.transition(OUT, at=datetime(2026, 2, 2, 18)) == PunchState.AWAITING_PUNCH_IN
