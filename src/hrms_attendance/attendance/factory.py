from __future__ import annotations

from dataclasses import dataclass

from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import DayStatusStrategy
from .strategies.day_ended_strategy import DayEndedStrategy
from .strategies.in_progress_strategy import InProgressStrategy


@dataclass
class DayStatusStrategyFactory:
    """Factory Pattern: choose the status strategy for the current punch state."""

    def for_day(self, *, day_ended: bool, hours: float) -> DayStatusStrategy:
        if day_ended:
            return DayEndedStrategy()
        if hours > 0:
            return InProgressStrategy()
        return AbsentStrategy()
