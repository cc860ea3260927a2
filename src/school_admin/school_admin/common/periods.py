from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError
from .validators import require_period


MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def period_of(day: date) -> str:
    """Format a date as its ``YYYY-MM`` period."""
    return f"{day.year:04d}-{day.month:02d}"


def current_period() -> str:
    return period_of(now_local().date())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def split_period(period: str) -> tuple[int, int]:
    require_period(period)
    year, month = period.split("-")
    return int(year), int(month)


def shift_period(period: str, months: int) -> str:
    year, month = split_period(period)
    index = year * 12 + (month - 1) + months
    if index < 0:
        raise ValidationError(f"{period} shifted by {months} months is before year 0000")
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def last_periods(count: int, *, until: str) -> list[str]:
    """The ``count`` periods ending at ``until``, oldest first."""
    year, month = split_period(until)
    if year * 12 + month < count:
        raise ValidationError(f"cannot go back {count} months from {until}")
    return [shift_period(until, -offset) for offset in range(count - 1, -1, -1)]


def period_label(period: str) -> str:
    year, month = split_period(period)
    return f"{MONTH_NAMES[month - 1]} {year}"
