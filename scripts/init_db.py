"""Create the configured MySQL database and apply the attendance schema.

Usage: python scripts/init_db.py [--schema PATH]
Connection settings come from APP_ENV and the environment / .env.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from hrms_attendance.database.bootstrap import SCHEMA_PATH, apply_schema, list_tables
from hrms_attendance.main import configure_logging
from hrms_attendance.settings import load_settings

logger = logging.getLogger("init_db")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--schema", type=Path, default=SCHEMA_PATH, help="schema file (default: packaged schema.sql)")
    args = parser.parse_args()

    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    logger.info(
        "Schema ready on %s@%s:%s/%s: %s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        ", ".join(tables),
    )


if __name__ == "__main__":
    main()
