import os

from .config import db_config_from_env, env_bool, env_int

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

ABSENCE_THRESHOLD = env_int("ABSENCE_THRESHOLD", 3)
REPORT_MONTHS = env_int("REPORT_MONTHS", 4)
REPORT_CACHE_ENABLED = env_bool("REPORT_CACHE_ENABLED", True)
REPORT_CACHE_TTL = env_int("REPORT_CACHE_TTL", 300)
REPORT_CACHE_MAX_ENTRIES = env_int("REPORT_CACHE_MAX_ENTRIES", 256)
