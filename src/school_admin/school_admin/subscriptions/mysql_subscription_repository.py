from __future__ import annotations

from typing import Sequence

from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchall, normalize_datetime, placeholders, read_cursor
from .model import SubscriptionRecord
from .repository import SubscriptionRepository


class MySQLSubscriptionRepository(SubscriptionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_record(r: dict) -> SubscriptionRecord:
        return SubscriptionRecord(
            student_id=str(r["student_id"]),
            month_year=str(r["month_year"]),
            status=PaymentStatus(r["status"]),
            paid_at=normalize_datetime(r.get("paid_at")),
        )

    def list_for_period(self, month_year: str) -> Sequence[SubscriptionRecord]:
        # NULL paid_at sorts first, so a recorded payment is the row that wins on duplicates.
        with read_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                SELECT student_id, month_year, status, paid_at
                FROM subscriptions
                WHERE month_year=%s
                ORDER BY paid_at, id
                """,
                (month_year,),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: str, months: Sequence[str]) -> Sequence[SubscriptionRecord]:
        if not months:
            return []
        with read_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT student_id, month_year, status, paid_at
                FROM subscriptions
                WHERE student_id=%s AND month_year IN ({placeholders(months)})
                ORDER BY paid_at, id
                """,
                (student_id, *months),
            )
            return [self._to_record(r) for r in fetchall(cur)]
