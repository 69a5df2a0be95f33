from __future__ import annotations

from ...core.enums import DayStatus
from .base import DayStatusStrategy


class AbsentStrategy(DayStatusStrategy):
    """No punches, or an open Punch In with nothing closed yet."""

    def decide(self, *, hours: float, target_hours: float, is_early_exit: bool) -> DayStatus:
        return DayStatus.ABSENT
