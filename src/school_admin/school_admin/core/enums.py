from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Dashboard roles used for capability checks."""

    ADMIN = "admin"
    TEACHER = "teacher"

    @classmethod
    def from_value(cls, value: str | None) -> "Role":
        # A user without a profile row is treated as a teacher.
        if not value:
            return cls.TEACHER
        return cls(str(value).strip().lower())


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class PaymentStatus(str, Enum):
    """Monthly subscription state stored per (student, month)."""

    PAID = "paid"
    UNPAID = "unpaid"


class AlertLevel(str, Enum):
    DANGER = "danger"
    WARNING = "warning"


class AlertKind(str, Enum):
    UNPAID_SUBSCRIPTIONS = "unpaid_subscriptions"
    REPEAT_ABSENTEES = "repeat_absentees"
