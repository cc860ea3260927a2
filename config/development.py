import os

from .config import db_config_from_env, env_bool, env_int

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Students at or above this many absences in a month are flagged.
ABSENCE_THRESHOLD = env_int("ABSENCE_THRESHOLD", 3)
REPORT_MONTHS = env_int("REPORT_MONTHS", 4)
REPORT_CACHE_ENABLED = env_bool("REPORT_CACHE_ENABLED", True)
# Cached reports are recomputed after this many seconds even without an explicit refresh.
REPORT_CACHE_TTL = env_int("REPORT_CACHE_TTL", 30)
REPORT_CACHE_MAX_ENTRIES = env_int("REPORT_CACHE_MAX_ENTRIES", 128)
