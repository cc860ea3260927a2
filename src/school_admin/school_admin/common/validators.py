from __future__ import annotations

import re
from typing import Optional

from ..core.constants import MAX_REPORT_MONTHS, PERIOD_PATTERN
from ..core.enums import PaymentStatus
from ..core.exceptions import ValidationError

_PERIOD_RE = re.compile(PERIOD_PATTERN)


def require_non_empty(value: str | None, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_period(value: str | None, field_name: str = "period") -> str:
    """Check a ``YYYY-MM`` period string; month must be 01..12."""
    if not isinstance(value, str) or not _PERIOD_RE.fullmatch(value):
        raise ValidationError(f"{field_name} must be a YYYY-MM month, got {value!r}")
    return value


def require_positive_int(value, field_name: str) -> int:
    # Query-string values arrive as text; bools are ints but never valid here.
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return value


def require_month_count(value) -> int:
    count = require_positive_int(value, "months")
    if count > MAX_REPORT_MONTHS:
        raise ValidationError(f"months must be at most {MAX_REPORT_MONTHS}")
    return count


def parse_payment_status(value) -> Optional[PaymentStatus]:
    """``paid`` / ``unpaid`` filter; empty or ``all`` means no filter."""
    if value is None or isinstance(value, PaymentStatus):
        return value
    text = str(value).strip().lower()
    if text in ("", "all"):
        return None
    try:
        return PaymentStatus(text)
    except ValueError:
        raise ValidationError(f"payment_status must be paid, unpaid or all, got {value!r}")
