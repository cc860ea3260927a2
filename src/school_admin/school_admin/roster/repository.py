from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass, Student


class RosterRepository(Protocol):
    def list_students(self, class_id: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError

    def get_student(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_classes(self) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def list_class_ids_for_teacher(self, teacher_id: str) -> Sequence[str]:
        """Classes a teacher is assigned to (class_teachers link table)."""

        raise NotImplementedError

    def count_students(self) -> int:
        raise NotImplementedError

    def count_teachers(self) -> int:
        raise NotImplementedError

    def count_classes(self) -> int:
        raise NotImplementedError
