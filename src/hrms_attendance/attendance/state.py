from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PunchState, PunchType
from ..core.exceptions import PunchSequenceError
from .model import PunchEvent

ALREADY_PUNCHED_IN = "You are already punched in. Please punch out first."
NOT_PUNCHED_IN = "Cannot punch out without punching in first"


@dataclass(frozen=True)
class PunchCycle:
    """Explicit In/Out state for one employee on one day.

    Rebuilt from the stored punch list whenever a record is loaded, so the
    state is never inferred ad hoc at call sites.
    """

    state: PunchState
    last_punch: Optional[PunchEvent] = None

    @classmethod
    def from_punches(cls, punches: Sequence[PunchEvent]) -> "PunchCycle":
        if not punches:
            return cls(PunchState.NO_PUNCHES)
        last = max(punches, key=lambda p: p.time)
        if last.punch_type == PunchType.PUNCH_IN:
            return cls(PunchState.AWAITING_PUNCH_OUT, last)
        return cls(PunchState.AWAITING_PUNCH_IN, last)

    @property
    def can_punch_in(self) -> bool:
        return self.state != PunchState.AWAITING_PUNCH_OUT

    @property
    def can_punch_out(self) -> bool:
        return self.state == PunchState.AWAITING_PUNCH_OUT

    def transition(self, punch_type: PunchType, *, at: datetime) -> PunchState:
        """Validate ``punch_type`` submitted at ``at`` and return the next state.

        Raises:
            PunchSequenceError: the punch does not fit the current state.
        """
        if punch_type == PunchType.PUNCH_IN:
            if self.state == PunchState.AWAITING_PUNCH_OUT and self.last_punch.time.date() == at.date():
                raise PunchSequenceError(ALREADY_PUNCHED_IN)
            return PunchState.AWAITING_PUNCH_OUT

        if self.state != PunchState.AWAITING_PUNCH_OUT:
            raise PunchSequenceError(NOT_PUNCHED_IN)
        return PunchState.AWAITING_PUNCH_IN
