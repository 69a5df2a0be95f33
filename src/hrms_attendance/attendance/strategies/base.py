from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import DayStatus


class DayStatusStrategy(ABC):
    """Strategy Pattern: encapsulate how the hour-based day status is decided."""

    @abstractmethod
    def decide(self, *, hours: float, target_hours: float, is_early_exit: bool) -> DayStatus:
        raise NotImplementedError
