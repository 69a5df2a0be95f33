from datetime import date

import pytest

from hrms_attendance.common.validators import (
    require_date,
    require_date_range,
    require_location,
    require_month,
    require_punch_type,
)
from hrms_attendance.core.enums import PunchType
from hrms_attendance.core.exceptions import ValidationError


def test_punch_type_accepts_labels_and_enum():
    assert require_punch_type("Punch In") is PunchType.PUNCH_IN
    assert require_punch_type(PunchType.PUNCH_OUT) is PunchType.PUNCH_OUT


def test_punch_type_rejects_unknown():
    with pytest.raises(ValidationError):
        require_punch_type("punch in")


def test_location_allows_zero_coordinates():
    assert require_location({"latitude": 0, "longitude": 0}) == (0.0, 0.0)


@pytest.mark.parametrize(
    "location",
    [
        {},
        "office",
        [18.4575, 73.8508],
        (18.4575, 73.8508),
        {"latitude": True, "longitude": 1.0},
        {"latitude": 91.0, "longitude": 0.0},
        {"latitude": 0.0, "longitude": -181.0},
    ],
)
def test_location_rejects_bad_payloads(location):
    with pytest.raises(ValidationError):
        require_location(location)


def test_month_range():
    assert require_month(12, 2026) == (12, 2026)
    with pytest.raises(ValidationError):
        require_month(0, 2026)


def test_date_parsing():
    assert require_date("2026-02-02") == date(2026, 2, 2)
    assert require_date(date(2026, 2, 2)) == date(2026, 2, 2)
    for bad in ("2026-13-01", "yesterday", None):
        with pytest.raises(ValidationError, match="Invalid date format"):
            require_date(bad)


def test_date_range_needs_both_ends_in_order():
    assert require_date_range("2026-02-01", "2026-02-01") == (date(2026, 2, 1), date(2026, 2, 1))
    with pytest.raises(ValidationError):
        require_date_range("2026-02-01", None)
    with pytest.raises(ValidationError):
        require_date_range("2026-02-02", "2026-02-01")
