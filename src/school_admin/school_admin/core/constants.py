"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PERIOD_PATTERN = r"\d{4}-(0[1-9]|1[0-2])"

DEFAULT_ABSENCE_THRESHOLD = 3
DEFAULT_REPORT_MONTHS = 4
MAX_REPORT_MONTHS = 24
DEFAULT_EVALUATION_LIMIT = 10

DEFAULT_CACHE_TTL_SECONDS = 300
DEFAULT_CACHE_MAX_ENTRIES = 256
