from __future__ import annotations

import logging
from collections import Counter
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.periods import current_period, last_periods
from ..common.validators import (
    parse_payment_status,
    require_month_count,
    require_non_empty,
    require_period,
    require_positive_int,
)
from ..core.constants import DEFAULT_ABSENCE_THRESHOLD, DEFAULT_EVALUATION_LIMIT, DEFAULT_REPORT_MONTHS
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..evaluations.repository import EvaluationRepository
from ..roster.model import SchoolClass, Student
from ..roster.repository import RosterRepository
from ..subscriptions.model import SubscriptionRecord
from ..subscriptions.repository import SubscriptionRepository
from . import access
from .aggregator import (
    compute_dashboard_alerts,
    compute_finance_report,
    compute_student_report,
    filter_by_payment_status,
    flag_roster_absentees,
)
from .cache import CacheKey, ReportCache
from .model import DashboardAlert, DashboardSummary, FinanceReport, StudentReport

logger = logging.getLogger(__name__)


class ReportService:
    """Fetches scoped snapshots, checks role capabilities and runs the aggregator."""

    def __init__(
        self,
        roster: RosterRepository,
        attendance: AttendanceRepository,
        subscriptions: SubscriptionRepository,
        evaluations: EvaluationRepository,
        *,
        cache: Optional[ReportCache] = None,
        absence_threshold: int = DEFAULT_ABSENCE_THRESHOLD,
        report_months: int = DEFAULT_REPORT_MONTHS,
        evaluation_limit: int = DEFAULT_EVALUATION_LIMIT,
    ):
        self._roster = roster
        self._attendance = attendance
        self._subscriptions = subscriptions
        self._evaluations = evaluations
        self._cache = cache if cache is not None else ReportCache()
        self._absence_threshold = require_positive_int(absence_threshold, "absence_threshold")
        self._report_months = require_month_count(report_months)
        self._evaluation_limit = require_positive_int(evaluation_limit, "evaluation_limit")

    @property
    def absence_threshold(self) -> int:
        return self._absence_threshold

    @staticmethod
    def _warn_duplicates(period: str, subs: Sequence[SubscriptionRecord]) -> None:
        counts = Counter(s.student_id for s in subs)
        duplicated = sorted(sid for sid, n in counts.items() if n > 1)
        if duplicated:
            logger.warning(
                "duplicate subscription rows for period %s (students: %s); last row wins",
                period,
                ", ".join(duplicated),
            )

    def _assigned_class_ids(self, role: Role, teacher_id: Optional[str]) -> Sequence[str]:
        if role != Role.TEACHER:
            return ()
        if not teacher_id:
            raise AuthorizationError("Teacher profile not found")
        return self._roster.list_class_ids_for_teacher(teacher_id)

    def _build_finance(self, period: str, class_id: Optional[str]) -> FinanceReport:
        students = self._roster.list_students()
        classes = self._roster.list_classes()
        subs = self._subscriptions.list_for_period(period)
        absences = self._attendance.list_for_period(period, status=AttendanceStatus.ABSENT)
        self._warn_duplicates(period, subs)
        return compute_finance_report(students, subs, classes, period, absences=absences, class_id=class_id)

    def _finance(self, period: str, class_id: Optional[str]) -> FinanceReport:
        key = CacheKey(kind="finance", periods=(period,), class_id=class_id)
        return self._cache.get_or_compute(key, lambda: self._build_finance(period, class_id))

    def finance_report(
        self,
        *,
        current_role: Role,
        period: str,
        class_id: Optional[str] = None,
        payment_status: Optional[str] = None,
    ) -> FinanceReport:
        if not access.can_view_finance(current_role):
            raise AuthorizationError("Only admins can view finance reports")
        require_period(period)
        status = parse_payment_status(payment_status)
        class_id = (class_id or "").strip() or None
        # The unfiltered report is cached; the status filter only narrows its rows.
        return filter_by_payment_status(self._finance(period, class_id), status)

    def dashboard_summary(self, *, current_role: Role) -> DashboardSummary:
        if not access.can_view_dashboard_summary(current_role):
            raise AuthorizationError("You cannot view the dashboard")
        return DashboardSummary(
            student_count=self._roster.count_students(),
            teacher_count=self._roster.count_teachers(),
            class_count=self._roster.count_classes(),
            evaluation_count=self._evaluations.count_all(),
        )

    def dashboard_alerts(self, *, current_role: Role, period: Optional[str] = None) -> tuple[DashboardAlert, ...]:
        if not access.is_admin(current_role):
            # Teachers get an empty alert panel rather than an error.
            return ()
        period = require_period(period or current_period())

        def build() -> tuple[DashboardAlert, ...]:
            report = self._finance(period, None)
            absences = self._attendance.list_for_period(period, status=AttendanceStatus.ABSENT)
            return compute_dashboard_alerts(report, absences, self._absence_threshold)

        return self._cache.get_or_compute(CacheKey(kind="alerts", periods=(period,)), build)

    def student_report(
        self,
        *,
        current_role: Role,
        student_id: str,
        months: Optional[int] = None,
        until: Optional[str] = None,
    ) -> StudentReport:
        if not access.can_view_student_report(current_role):
            raise AuthorizationError("You cannot view student reports")
        student_id = require_non_empty(student_id, "student_id")
        count = require_month_count(months if months is not None else self._report_months)
        periods = tuple(last_periods(count, until=require_period(until or current_period(), "until")))

        def build() -> StudentReport:
            student = self._roster.get_student(student_id)
            if not student:
                raise NotFoundError("Student not found")
            return compute_student_report(
                student,
                self._roster.list_classes(),
                self._attendance.list_for_student(student_id, periods),
                self._subscriptions.list_for_student(student_id, periods),
                self._evaluations.list_for_student(student_id, limit=self._evaluation_limit),
                periods,
            )

        key = CacheKey(kind="student", periods=periods, subject=student_id)
        return self._cache.get_or_compute(key, build)

    def session_absentees(
        self,
        *,
        current_role: Role,
        class_id: str,
        teacher_id: Optional[str] = None,
        period: Optional[str] = None,
    ) -> tuple[Student, ...]:
        """Students of a class already at the absence threshold, for the quick-entry banner.

        Never cached: it is read right before a teacher records a session.
        """
        class_id = require_non_empty(class_id, "class_id")
        period = require_period(period or current_period())
        access.require_class_access(current_role, class_id, self._assigned_class_ids(current_role, teacher_id))

        roster = self._roster.list_students(class_id=class_id)
        absences = self._attendance.list_for_period(
            period,
            status=AttendanceStatus.ABSENT,
            class_id=class_id,
            teacher_id=teacher_id,
        )
        return flag_roster_absentees(roster, absences, self._absence_threshold)

    def visible_classes(self, *, current_role: Role, teacher_id: Optional[str] = None) -> tuple[SchoolClass, ...]:
        classes = self._roster.list_classes()
        return access.visible_classes(current_role, classes, self._assigned_class_ids(current_role, teacher_id))

    def invalidate(self, *, current_role: Role, period: Optional[str] = None, class_id: Optional[str] = None) -> int:
        access.require_admin(current_role, "refresh reports")
        if period is not None:
            require_period(period)
        return self._cache.invalidate(period=period, class_id=(class_id or "").strip() or None)
