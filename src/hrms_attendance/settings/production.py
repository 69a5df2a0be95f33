import os

from . import db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY must be set when APP_ENV=production")

DB_CONFIG = db_config_from_env(default_database="hrms_attendance")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Schema changes go through scripts/init_db.py in production.
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
