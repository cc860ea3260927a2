from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchall, fetchone, normalize_optional_str, read_cursor
from .model import SchoolClass, Student
from .repository import RosterRepository


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_student(r: dict) -> Student:
        return Student(
            student_id=str(r["id"]),
            full_name=str(r["full_name"]),
            class_id=normalize_optional_str(r.get("class_id")),
            parent_name=normalize_optional_str(r.get("parent_name")),
            parent_phone=normalize_optional_str(r.get("parent_phone")),
        )

    def list_students(self, class_id: Optional[str] = None) -> Sequence[Student]:
        with read_cursor(self._conn_factory) as cur:
            if class_id:
                cur.execute(
                    """
                    SELECT id, full_name, class_id, parent_name, parent_phone
                    FROM students
                    WHERE class_id=%s
                    ORDER BY full_name
                    """,
                    (class_id,),
                )
            else:
                cur.execute(
                    """
                    SELECT id, full_name, class_id, parent_name, parent_phone
                    FROM students
                    ORDER BY full_name
                    """
                )
            return [self._to_student(r) for r in fetchall(cur)]

    def get_student(self, student_id: str) -> Optional[Student]:
        with read_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                SELECT id, full_name, class_id, parent_name, parent_phone
                FROM students
                WHERE id=%s
                """,
                (student_id,),
            )
            r = fetchone(cur)
            return self._to_student(r) if r else None

    def list_classes(self) -> Sequence[SchoolClass]:
        with read_cursor(self._conn_factory) as cur:
            cur.execute("SELECT id, name FROM classes ORDER BY name")
            return [SchoolClass(class_id=str(r["id"]), name=str(r["name"])) for r in fetchall(cur)]

    def list_class_ids_for_teacher(self, teacher_id: str) -> Sequence[str]:
        with read_cursor(self._conn_factory) as cur:
            cur.execute(
                "SELECT class_id FROM class_teachers WHERE teacher_id=%s",
                (teacher_id,),
            )
            return [str(r["class_id"]) for r in fetchall(cur)]

    def _count(self, table: str) -> int:
        with read_cursor(self._conn_factory) as cur:
            cur.execute(f"SELECT COUNT(*) AS n FROM {table}")
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_students(self) -> int:
        return self._count("students")

    def count_teachers(self) -> int:
        return self._count("teachers")

    def count_classes(self) -> int:
        return self._count("classes")
