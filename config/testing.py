import os

from .config import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

ABSENCE_THRESHOLD = 3
REPORT_MONTHS = 4
REPORT_CACHE_ENABLED = False
REPORT_CACHE_TTL = 300
REPORT_CACHE_MAX_ENTRIES = 64
