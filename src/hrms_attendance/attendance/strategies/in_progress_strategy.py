from __future__ import annotations

from ...core.enums import DayStatus
from .base import DayStatusStrategy


class InProgressStrategy(DayStatusStrategy):
    """Employee is still clocked in and has closed at least one In/Out pair."""

    def decide(self, *, hours: float, target_hours: float, is_early_exit: bool) -> DayStatus:
        if hours < target_hours:
            return DayStatus.RUNNING_OUT_OF_TIME
        return DayStatus.COMPLETE
