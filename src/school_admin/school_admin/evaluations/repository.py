from __future__ import annotations

from typing import Protocol, Sequence

from .model import EvaluationRecord


class EvaluationRepository(Protocol):
    def list_for_student(self, student_id: str, *, limit: int) -> Sequence[EvaluationRecord]:
        """Newest first."""

        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
