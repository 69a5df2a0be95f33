from __future__ import annotations

from typing import Protocol


class LocationResolver(Protocol):
    """Turns punch coordinates into a human readable place name."""

    def resolve(self, latitude: float, longitude: float) -> str:
        raise NotImplementedError


def coordinate_label(latitude: float, longitude: float) -> str:
    return f"Location ({latitude:.4f}, {longitude:.4f})"


class CoordinateLabelResolver(LocationResolver):
    """Fallback resolver used when no geocoding service is wired in."""

    def resolve(self, latitude: float, longitude: float) -> str:
        return coordinate_label(latitude, longitude)
