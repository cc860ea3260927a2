from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's mark for one teaching session.

    Natural key: (student_id, class_id, teacher_id, month_year, day_number, session_number).
    """

    student_id: str
    class_id: str
    teacher_id: str
    month_year: str
    day_number: int
    session_number: int
    status: AttendanceStatus
