from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class EvaluationRecord:
    """Teacher note about a student. Append-only, full history kept."""

    student_id: str
    teacher_id: str
    note: str
    created_at: datetime
    teacher_name: Optional[str] = None
