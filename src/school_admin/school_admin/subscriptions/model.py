from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PaymentStatus


@dataclass(frozen=True)
class SubscriptionRecord:
    """Monthly subscription row; natural key is (student_id, month_year)."""

    student_id: str
    month_year: str
    status: PaymentStatus
    paid_at: Optional[datetime] = None
