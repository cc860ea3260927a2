from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchall, placeholders, read_cursor
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "student_id, class_id, teacher_id, month_year, day_number, session_number, status"


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_record(r: dict) -> AttendanceRecord:
        return AttendanceRecord(
            student_id=str(r["student_id"]),
            class_id=str(r["class_id"]),
            teacher_id=str(r["teacher_id"]),
            month_year=str(r["month_year"]),
            day_number=int(r["day_number"]),
            # session_number is stored as text by the attendance entry screens.
            session_number=int(r["session_number"]),
            status=AttendanceStatus(r["status"]),
        )

    def list_for_period(
        self,
        month_year: str,
        *,
        status: Optional[AttendanceStatus] = None,
        class_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["month_year=%s"]
        params: list = [month_year]
        if status is not None:
            where.append("status=%s")
            params.append(status.value)
        if class_id:
            where.append("class_id=%s")
            params.append(class_id)
        if teacher_id:
            where.append("teacher_id=%s")
            params.append(teacher_id)

        with read_cursor(self._conn_factory) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendances WHERE {' AND '.join(where)}",
                tuple(params),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: str, months: Sequence[str]) -> Sequence[AttendanceRecord]:
        if not months:
            return []
        with read_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE student_id=%s AND month_year IN ({placeholders(months)})
                """,
                (student_id, *months),
            )
            return [self._to_record(r) for r in fetchall(cur)]
