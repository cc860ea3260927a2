from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_period(
        self,
        month_year: str,
        *,
        status: Optional[AttendanceStatus] = None,
        class_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: str, months: Sequence[str]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
