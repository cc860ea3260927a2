"""Attendance / subscription reporting aggregator.

Pure functions over already-fetched, already-scoped snapshots: no I/O, no
clock, no shared state. The caller filters rows to the reporting period
before calling; nothing here re-filters by month except where a list of
months is passed explicitly.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.periods import period_label
from ..common.validators import require_period, require_positive_int
from ..core.enums import AlertKind, AlertLevel, AttendanceStatus, PaymentStatus
from ..evaluations.model import EvaluationRecord
from ..roster.model import SchoolClass, Student
from ..subscriptions.model import SubscriptionRecord
from .model import (
    ClassCollectionStat,
    DashboardAlert,
    FinanceReport,
    FinanceTotals,
    MonthlyAttendanceStat,
    MonthlyPaymentStat,
    StudentFinanceRow,
    StudentReport,
)


def default_payment_status() -> PaymentStatus:
    """Status of a student with no subscription row for the period."""
    return PaymentStatus.UNPAID


def rate_percent(numerator: int, denominator: int) -> int:
    """``round(numerator / denominator * 100)`` rounding halves up; 0 when denominator is 0."""
    if denominator <= 0:
        return 0
    return (200 * numerator + denominator) // (2 * denominator)


def _latest_by_student(subscriptions: Iterable[SubscriptionRecord]) -> dict[str, SubscriptionRecord]:
    # Last write wins on a duplicated natural key.
    latest: dict[str, SubscriptionRecord] = {}
    for sub in subscriptions:
        latest[sub.student_id] = sub
    return latest


def count_absences(attendance_rows: Iterable[AttendanceRecord]) -> dict[str, int]:
    """Absences per student, counted as distinct (month, day, session) slots.

    Every absence figure shown to admins or teachers goes through here.
    """
    slots: dict[str, set[tuple[str, int, int]]] = defaultdict(set)
    for row in attendance_rows:
        if row.status != AttendanceStatus.ABSENT:
            continue
        slots[row.student_id].add((row.month_year, int(row.day_number), int(row.session_number)))
    return {student_id: len(taken) for student_id, taken in slots.items()}


def compute_finance_report(
    students: Sequence[Student],
    subscriptions: Iterable[SubscriptionRecord],
    classes: Sequence[SchoolClass],
    period: str,
    *,
    absences: Iterable[AttendanceRecord] = (),
    class_id: Optional[str] = None,
    payment_status: Optional[PaymentStatus] = None,
) -> FinanceReport:
    require_period(period)

    payments = _latest_by_student(subscriptions)
    absence_counts = count_absences(absences)
    class_names: dict[str, str] = {}
    for c in classes:
        class_names.setdefault(c.class_id, c.name)

    scoped = [s for s in students if class_id is None or s.class_id == class_id]

    rows: list[StudentFinanceRow] = []
    for student in scoped:
        sub = payments.get(student.student_id)
        rows.append(
            StudentFinanceRow(
                student=student,
                class_name=class_names.get(student.class_id) if student.class_id else None,
                payment_status=sub.status if sub else default_payment_status(),
                paid_at=sub.paid_at if sub else None,
                absence_count=absence_counts.get(student.student_id, 0),
            )
        )

    per_class: dict[str, list[StudentFinanceRow]] = defaultdict(list)
    for row in rows:
        if row.student.class_id in class_names:
            per_class[row.student.class_id].append(row)

    class_stats: list[ClassCollectionStat] = []
    for cid, name in class_names.items():
        members = per_class.get(cid)
        if not members:
            continue
        paid = sum(1 for r in members if r.payment_status == PaymentStatus.PAID)
        class_stats.append(
            ClassCollectionStat(
                class_id=cid,
                class_name=name,
                total_students=len(members),
                paid_count=paid,
                unpaid_count=len(members) - paid,
                collection_rate_percent=rate_percent(paid, len(members)),
            )
        )
    # sorted() is stable with reverse=True: ties keep class input order.
    class_stats.sort(key=lambda c: c.collection_rate_percent, reverse=True)

    paid_total = sum(1 for r in rows if r.payment_status == PaymentStatus.PAID)
    totals = FinanceTotals(
        total_students=len(rows),
        paid_count=paid_total,
        unpaid_count=len(rows) - paid_total,
        collection_rate_percent=rate_percent(paid_total, len(rows)),
    )
    report = FinanceReport(period=period, student_rows=tuple(rows), class_stats=tuple(class_stats), totals=totals)
    return filter_by_payment_status(report, payment_status)


def filter_by_payment_status(report: FinanceReport, payment_status: Optional[PaymentStatus]) -> FinanceReport:
    """Keep only student rows with ``payment_status``; class stats and totals stay whole-period."""
    if payment_status is None:
        return report
    rows = tuple(r for r in report.student_rows if r.payment_status == payment_status)
    return replace(report, student_rows=rows)


def compute_monthly_attendance(
    attendance_rows: Iterable[AttendanceRecord],
    months: Sequence[str],
) -> tuple[MonthlyAttendanceStat, ...]:
    for month in months:
        require_period(month, "month")

    buckets: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for row in attendance_rows:
        bucket = buckets[row.month_year]
        if row.status == AttendanceStatus.PRESENT:
            bucket[0] += 1
        elif row.status == AttendanceStatus.ABSENT:
            bucket[1] += 1

    stats = []
    for month in months:
        present, absent = buckets.get(month, (0, 0))
        total = present + absent
        stats.append(
            MonthlyAttendanceStat(
                month=month,
                month_label=period_label(month),
                present_count=present,
                absent_count=absent,
                total_sessions=total,
                attendance_rate_percent=rate_percent(present, total),
            )
        )
    return tuple(stats)


def compute_overall_rate(monthly_stats: Iterable[MonthlyAttendanceStat]) -> int:
    """Sum of present over sum of sessions; never the mean of monthly rates."""
    present = 0
    total = 0
    for stat in monthly_stats:
        present += stat.present_count
        total += stat.total_sessions
    return rate_percent(present, total)


def compute_repeat_absentees(attendance_rows: Iterable[AttendanceRecord], threshold: int) -> frozenset[str]:
    threshold = require_positive_int(threshold, "threshold")
    return frozenset(sid for sid, count in count_absences(attendance_rows).items() if count >= threshold)


def compute_monthly_payments(
    subscriptions: Iterable[SubscriptionRecord],
    months: Sequence[str],
) -> tuple[MonthlyPaymentStat, ...]:
    for month in months:
        require_period(month, "month")

    by_month: dict[str, SubscriptionRecord] = {}
    for sub in subscriptions:
        by_month[sub.month_year] = sub

    out = []
    for month in months:
        sub = by_month.get(month)
        out.append(
            MonthlyPaymentStat(
                month=month,
                month_label=period_label(month),
                payment_status=sub.status if sub else default_payment_status(),
                paid_at=sub.paid_at if sub else None,
            )
        )
    return tuple(out)


def compute_student_report(
    student: Student,
    classes: Sequence[SchoolClass],
    attendance_rows: Iterable[AttendanceRecord],
    subscriptions: Iterable[SubscriptionRecord],
    evaluations: Iterable[EvaluationRecord],
    months: Sequence[str],
) -> StudentReport:
    """Per-student printable report: attendance and payments per month plus teacher notes."""
    sid = student.student_id
    own_attendance = [r for r in attendance_rows if r.student_id == sid]
    own_subscriptions = [s for s in subscriptions if s.student_id == sid]
    own_evaluations = sorted(
        (e for e in evaluations if e.student_id == sid),
        key=lambda e: e.created_at,
        reverse=True,
    )

    monthly = compute_monthly_attendance(own_attendance, months)
    class_names = {c.class_id: c.name for c in classes}
    return StudentReport(
        student=student,
        class_name=class_names.get(student.class_id) if student.class_id else None,
        months=tuple(months),
        monthly_attendance=monthly,
        overall_attendance_rate_percent=compute_overall_rate(monthly),
        monthly_payments=compute_monthly_payments(own_subscriptions, months),
        evaluations=tuple(own_evaluations),
    )


def compute_dashboard_alerts(
    report: FinanceReport,
    attendance_rows: Iterable[AttendanceRecord],
    threshold: int,
) -> tuple[DashboardAlert, ...]:
    alerts = []
    if report.totals.unpaid_count > 0:
        alerts.append(
            DashboardAlert(
                kind=AlertKind.UNPAID_SUBSCRIPTIONS,
                level=AlertLevel.DANGER,
                count=report.totals.unpaid_count,
            )
        )

    known = {row.student.student_id for row in report.student_rows}
    absentees = sorted(compute_repeat_absentees(attendance_rows, threshold) & known)
    if absentees:
        alerts.append(
            DashboardAlert(
                kind=AlertKind.REPEAT_ABSENTEES,
                level=AlertLevel.WARNING,
                count=len(absentees),
                student_ids=tuple(absentees),
            )
        )
    return tuple(alerts)


def flag_roster_absentees(
    roster: Sequence[Student],
    attendance_rows: Iterable[AttendanceRecord],
    threshold: int,
) -> tuple[Student, ...]:
    """Roster students (in roster order) to warn about before entering a session."""
    flagged = compute_repeat_absentees(attendance_rows, threshold)
    return tuple(s for s in roster if s.student_id in flagged)
