from __future__ import annotations

from datetime import date
from numbers import Real
from typing import Any, Mapping

from .datetime_utils import parse_iso_date
from ..core.enums import PunchType
from ..core.exceptions import ValidationError


def require_punch_type(value: Any) -> PunchType:
    if isinstance(value, PunchType):
        return value
    try:
        return PunchType(value)
    except ValueError:
        raise ValidationError('Invalid punch type. Must be "Punch In" or "Punch Out"') from None


def require_location(location: Any) -> tuple[float, float]:
    """Return (latitude, longitude) from a client-supplied location payload."""
    if not isinstance(location, Mapping) or not location:
        raise ValidationError("Location is required for attendance")

    latitude = location.get("latitude")
    longitude = location.get("longitude")
    for value in (latitude, longitude):
        # bool is a Real subclass; a JSON true/false is not a coordinate
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ValidationError("Location is required for attendance")

    latitude, longitude = float(latitude), float(longitude)
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise ValidationError("Location coordinates are out of range")
    return latitude, longitude


def require_month(month: int, year: int) -> tuple[int, int]:
    if month < 1 or month > 12:
        raise ValidationError("Invalid month. Must be between 1 and 12")
    if year < 1:
        raise ValidationError("Invalid year")
    return month, year


def require_date(value: Any) -> date:
    """Parse a YYYY-MM-DD query value."""
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid date format") from None


def require_date_range(start: Any, end: Any) -> tuple[date, date]:
    if start is None or end is None:
        raise ValidationError("startDate and endDate are required")
    start_date, end_date = require_date(start), require_date(end)
    if start_date > end_date:
        raise ValidationError("startDate must not be after endDate")
    return start_date, end_date
