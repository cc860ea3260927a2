from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchall, fetchone, normalize_datetime, normalize_optional_str, read_cursor
from .model import EvaluationRecord
from .repository import EvaluationRepository


class MySQLEvaluationRepository(EvaluationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(self, student_id: str, *, limit: int) -> Sequence[EvaluationRecord]:
        with read_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                SELECT e.student_id, e.teacher_id, e.note, e.created_at, t.full_name AS teacher_name
                FROM evaluations e
                LEFT JOIN teachers t ON t.id = e.teacher_id
                WHERE e.student_id=%s
                ORDER BY e.created_at DESC
                LIMIT %s
                """,
                (student_id, int(limit)),
            )
            return [
                EvaluationRecord(
                    student_id=str(r["student_id"]),
                    teacher_id=str(r["teacher_id"]),
                    note=str(r["note"] or ""),
                    created_at=normalize_datetime(r["created_at"]),
                    teacher_name=normalize_optional_str(r.get("teacher_name")),
                )
                for r in fetchall(cur)
            ]

    def count_all(self) -> int:
        with read_cursor(self._conn_factory) as cur:
            cur.execute("SELECT COUNT(*) AS n FROM evaluations")
            r = fetchone(cur)
            return int(r["n"]) if r else 0
