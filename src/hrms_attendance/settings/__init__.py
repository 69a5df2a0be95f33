from __future__ import annotations

import importlib
import os
from types import ModuleType
from typing import Any

from dotenv import load_dotenv


def get_settings_module() -> str:
    """Settings module for the environment named by APP_ENV (default: development)."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "hrms_attendance.settings.production"

    if env in {"test", "testing"}:
        return "hrms_attendance.settings.testing"

    return "hrms_attendance.settings.development"


def load_settings() -> ModuleType:
    """Read ``.env`` into the environment, then import the active settings module.

    Variables already set in the real environment win over ``.env``.
    """
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def db_config_from_env(*, default_database: str) -> dict[str, Any]:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", default_database),
    }
