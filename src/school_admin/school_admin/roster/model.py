from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled student.

    Note: Plain data object, no DB access code here.
    """

    student_id: str
    full_name: str
    class_id: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None


@dataclass(frozen=True)
class SchoolClass:
    class_id: str
    name: str
