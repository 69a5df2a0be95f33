import os

from . import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_database="hrms_attendance_test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

# Tests inject in-memory repositories and never touch MySQL.
AUTO_INIT_DB = False
