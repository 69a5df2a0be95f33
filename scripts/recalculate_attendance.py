"""Re-derive stored attendance records for one employee over a date range.

Usage: python scripts/recalculate_attendance.py EMPLOYEE_ID START_DATE [END_DATE]
Dates are YYYY-MM-DD; END_DATE defaults to START_DATE.
"""

from __future__ import annotations

import argparse
import logging
from datetime import timedelta

from hrms_attendance.common.datetime_utils import parse_iso_date
from hrms_attendance.container import build_container
from hrms_attendance.main import configure_logging
from hrms_attendance.settings import load_settings

logger = logging.getLogger("recalculate_attendance")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("employee_id", type=int)
    parser.add_argument("start_date", type=parse_iso_date)
    parser.add_argument("end_date", type=parse_iso_date, nargs="?")
    args = parser.parse_args()

    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=settings.DB_CONFIG)

    day = args.start_date
    end = args.end_date or args.start_date
    while day <= end:
        record = container.attendance_service.recalculate_day(args.employee_id, day)
        if record:
            logger.info(
                "%s: %s (%.2fh, overtime %.2fh)", day, record.status.value, record.total_working_hours, record.overtime
            )
        else:
            logger.info("%s: no record", day)
        day += timedelta(days=1)


if __name__ == "__main__":
    main()
