from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AlertKind, AlertLevel, PaymentStatus
from ..evaluations.model import EvaluationRecord
from ..roster.model import Student


@dataclass(frozen=True)
class StudentFinanceRow:
    """Read-model: one student's payment state for a period."""

    student: Student
    class_name: Optional[str]
    payment_status: PaymentStatus
    paid_at: Optional[datetime]
    absence_count: int


@dataclass(frozen=True)
class ClassCollectionStat:
    class_id: str
    class_name: str
    total_students: int
    paid_count: int
    unpaid_count: int
    collection_rate_percent: int


@dataclass(frozen=True)
class FinanceTotals:
    total_students: int
    paid_count: int
    unpaid_count: int
    collection_rate_percent: int


@dataclass(frozen=True)
class FinanceReport:
    period: str
    student_rows: tuple[StudentFinanceRow, ...]
    class_stats: tuple[ClassCollectionStat, ...]
    totals: FinanceTotals


@dataclass(frozen=True)
class MonthlyAttendanceStat:
    month: str
    month_label: str
    present_count: int
    absent_count: int
    total_sessions: int
    attendance_rate_percent: int

    @property
    def has_data(self) -> bool:
        """False for a month with no recorded session (not the same as a 0% rate)."""
        return self.total_sessions > 0


@dataclass(frozen=True)
class MonthlyPaymentStat:
    month: str
    month_label: str
    payment_status: PaymentStatus
    paid_at: Optional[datetime]


@dataclass(frozen=True)
class StudentReport:
    student: Student
    class_name: Optional[str]
    months: tuple[str, ...]
    monthly_attendance: tuple[MonthlyAttendanceStat, ...]
    overall_attendance_rate_percent: int
    monthly_payments: tuple[MonthlyPaymentStat, ...]
    evaluations: tuple[EvaluationRecord, ...]


@dataclass(frozen=True)
class DashboardAlert:
    kind: AlertKind
    level: AlertLevel
    count: int
    student_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class DashboardSummary:
    """Headline counts shown at the top of the dashboard."""

    student_count: int
    teacher_count: int
    class_count: int
    evaluation_count: int
