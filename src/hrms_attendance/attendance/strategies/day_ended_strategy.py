from __future__ import annotations

from ...core.enums import DayStatus
from .base import DayStatusStrategy


class DayEndedStrategy(DayStatusStrategy):
    """Last punch is a Punch Out; an early exit overrides the hour outcome."""

    def decide(self, *, hours: float, target_hours: float, is_early_exit: bool) -> DayStatus:
        if is_early_exit:
            return DayStatus.EARLY_EXIT
        if hours < target_hours:
            return DayStatus.RUNNING_OUT_OF_TIME
        return DayStatus.COMPLETE
