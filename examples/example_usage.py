"""Example: drive the attendance service directly (no Flask).

Controllers are a thin layer; the punch rules live in the service and engine.
"""

from hrms_attendance.container import build_container
from hrms_attendance.settings import load_settings


def main():
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG)

    snapshot = container.attendance_service.submit_punch(
        1,
        "Punch In",
        {"latitude": 18.4575, "longitude": 73.8508},
    )
    print(snapshot.status.value, snapshot.hours_worked, snapshot.hours_remaining)

    report = container.attendance_service.get_daily_stats(snapshot.work_date)
    print(f"{report.stats.present}/{report.stats.total_employees} present ({report.stats.attendance_percentage}%)")


if __name__ == "__main__":
    main()
