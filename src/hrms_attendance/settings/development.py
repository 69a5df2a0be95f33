import os

from . import db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env(default_database="hrms_attendance")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply the packaged schema.sql on startup; every statement is CREATE ... IF NOT EXISTS.
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
