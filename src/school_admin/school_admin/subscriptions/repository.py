from __future__ import annotations

from typing import Protocol, Sequence

from .model import SubscriptionRecord


class SubscriptionRepository(Protocol):
    def list_for_period(self, month_year: str) -> Sequence[SubscriptionRecord]:
        """Rows for one month, ordered so that the row meant to win a duplicate comes last."""

        raise NotImplementedError

    def list_for_student(self, student_id: str, months: Sequence[str]) -> Sequence[SubscriptionRecord]:
        raise NotImplementedError
