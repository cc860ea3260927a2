from __future__ import annotations

from datetime import datetime

import pytest

from src.school_admin.school_admin.core.enums import AlertKind, PaymentStatus
from src.school_admin.school_admin.core.exceptions import ValidationError
from src.school_admin.school_admin.reporting.aggregator import (
    compute_dashboard_alerts,
    compute_finance_report,
    compute_monthly_attendance,
    compute_monthly_payments,
    compute_overall_rate,
    compute_repeat_absentees,
    compute_student_report,
    count_absences,
    default_payment_status,
    filter_by_payment_status,
    flag_roster_absentees,
    rate_percent,
)
from src.school_admin.school_admin.evaluations.model import EvaluationRecord
from src.school_admin.school_admin.reporting.model import MonthlyAttendanceStat
from src.school_admin.school_admin.roster.model import SchoolClass, Student
from tests.builders import absent, paid, present, unpaid


def _stat(month: str, present_count: int, total: int) -> MonthlyAttendanceStat:
    return MonthlyAttendanceStat(
        month=month,
        month_label=month,
        present_count=present_count,
        absent_count=total - present_count,
        total_sessions=total,
        attendance_rate_percent=rate_percent(present_count, total),
    )


def test_three_student_scenario_sorts_classes_by_collection_rate(students, classes):
    report = compute_finance_report(students, [paid("S1"), paid("S3")], classes, "2026-02")

    assert [(c.class_id, c.paid_count, c.total_students, c.collection_rate_percent) for c in report.class_stats] == [
        ("B", 1, 1, 100),
        ("A", 1, 2, 50),
    ]
    assert report.totals.total_students == 3
    assert report.totals.paid_count == 2
    assert report.totals.unpaid_count == 1
    assert report.totals.collection_rate_percent == 67


def test_student_without_subscription_row_is_unpaid(students, classes):
    report = compute_finance_report(students, [paid("S1")], classes, "2026-02")

    row = next(r for r in report.student_rows if r.student.student_id == "S2")
    assert row.payment_status == PaymentStatus.UNPAID == default_payment_status()
    assert row.paid_at is None


def test_class_without_students_is_omitted(students, classes):
    report = compute_finance_report(students, [], classes, "2026-02")

    assert "C" not in {c.class_id for c in report.class_stats}
    assert all(c.total_students > 0 for c in report.class_stats)


def test_zero_students_gives_zero_rate(classes):
    report = compute_finance_report([], [paid("S1")], classes, "2026-02")

    assert report.student_rows == ()
    assert report.class_stats == ()
    assert report.totals.collection_rate_percent == 0


def test_orphan_rows_do_not_leak_into_report(students, classes):
    report = compute_finance_report(
        students,
        [paid("GONE"), paid("S3")],
        classes,
        "2026-02",
        absences=[absent("GONE", 1), absent("GONE", 2)],
    )

    assert {r.student.student_id for r in report.student_rows} == {"S1", "S2", "S3"}
    assert report.totals.paid_count == 1
    assert all(r.absence_count == 0 for r in report.student_rows)


def test_duplicate_subscription_rows_last_one_wins(students, classes):
    report = compute_finance_report(students, [paid("S2"), unpaid("S2")], classes, "2026-02")

    row = next(r for r in report.student_rows if r.student.student_id == "S2")
    assert row.payment_status == PaymentStatus.UNPAID


def test_ties_keep_class_input_order():
    classes = [SchoolClass("X", "X"), SchoolClass("Y", "Y")]
    students = [Student("1", "a", class_id="Y"), Student("2", "b", class_id="X")]

    report = compute_finance_report(students, [paid("1"), paid("2")], classes, "2026-02")

    assert [c.class_id for c in report.class_stats] == ["X", "Y"]


def test_unassigned_student_counts_in_totals_only(classes):
    students = [Student("1", "a", class_id=None), Student("2", "b", class_id="A")]

    report = compute_finance_report(students, [paid("1")], classes, "2026-02")

    assert report.totals.total_students == 2
    assert report.totals.paid_count == 1
    assert [(c.class_id, c.total_students, c.paid_count) for c in report.class_stats] == [("A", 1, 0)]
    assert report.student_rows[0].class_name is None


def test_class_filter_narrows_rows_and_totals(students, classes):
    report = compute_finance_report(students, [paid("S1"), paid("S3")], classes, "2026-02", class_id="A")

    assert [r.student.student_id for r in report.student_rows] == ["S1", "S2"]
    assert [c.class_id for c in report.class_stats] == ["A"]
    assert report.totals.collection_rate_percent == 50


def test_absence_counts_per_student(students, classes):
    rows = [absent("S1", 2), absent("S1", 3), present("S1", 4), absent("S2", 2)]

    report = compute_finance_report(students, [], classes, "2026-02", absences=rows)

    counts = {r.student.student_id: r.absence_count for r in report.student_rows}
    assert counts == {"S1": 2, "S2": 1, "S3": 0}
    assert report.student_rows[0].class_name == "Class A"
    assert report.student_rows[2].class_name == "Class B"


@pytest.mark.parametrize("period", ["2026-13", "2026-00", "26-01", "2026-1", "2026-01\n", "", None])
def test_malformed_period_is_rejected(students, classes, period):
    with pytest.raises(ValidationError):
        compute_finance_report(students, [], classes, period)


def test_rate_percent_rounds_half_up_and_stays_in_bounds():
    assert rate_percent(1, 8) == 13
    assert rate_percent(1, 200) == 1
    assert rate_percent(2, 3) == 67
    assert rate_percent(0, 5) == 0
    assert rate_percent(5, 5) == 100
    assert rate_percent(3, 0) == 0


def test_monthly_attendance_keeps_requested_order_and_empty_months():
    rows = [
        present("S1", 1, month="2026-01"),
        absent("S1", 2, month="2026-01"),
        present("S1", 1, month="2026-03"),
        present("S1", 1, month="2025-06"),
    ]

    stats = compute_monthly_attendance(rows, ["2025-12", "2026-01", "2026-02", "2026-03"])

    assert [s.month for s in stats] == ["2025-12", "2026-01", "2026-02", "2026-03"]
    assert [(s.present_count, s.absent_count, s.total_sessions) for s in stats] == [
        (0, 0, 0),
        (1, 1, 2),
        (0, 0, 0),
        (1, 0, 1),
    ]
    assert [s.attendance_rate_percent for s in stats] == [0, 50, 0, 100]
    assert [s.has_data for s in stats] == [False, True, False, True]
    assert stats[1].month_label == "January 2026"


def test_monthly_attendance_rejects_bad_month():
    with pytest.raises(ValidationError):
        compute_monthly_attendance([], ["2026-02", "2026-2"])


def test_overall_rate_is_sum_of_ratios_not_mean():
    stats = [_stat("m1", 8, 10), _stat("m2", 0, 0), _stat("m3", 5, 5), _stat("m4", 10, 20)]

    assert compute_overall_rate(stats) == 66


def test_overall_rate_without_sessions_is_zero():
    assert compute_overall_rate([_stat("m1", 0, 0)]) == 0
    assert compute_overall_rate([]) == 0


def test_repeat_absentees_count_distinct_sessions():
    rows = [
        absent("S1", 2, 1),
        absent("S1", 2, 2),
        absent("S1", 3, 1),
        absent("S2", 2, 1),
        absent("S2", 3, 1),
        # Same slot recorded twice must not count twice.
        absent("S2", 3, 1, teacher_id="T9"),
        present("S2", 4, 1),
    ]

    assert count_absences(rows) == {"S1": 3, "S2": 2}
    assert compute_repeat_absentees(rows, 3) == frozenset({"S1"})
    assert compute_repeat_absentees(rows, 2) == frozenset({"S1", "S2"})


@pytest.mark.parametrize("threshold", [0, -1, 2.5, True, "x"])
def test_repeat_absentees_threshold_must_be_positive(threshold):
    with pytest.raises(ValidationError):
        compute_repeat_absentees([], threshold)


def test_dashboard_and_quick_entry_flag_the_same_students(students, classes):
    rows = [absent("S1", d) for d in (2, 3, 4)] + [absent("S2", d) for d in (2, 3)] + [absent("GONE", d) for d in (2, 3, 4)]
    report = compute_finance_report(students, [], classes, "2026-02", absences=rows)

    alerts = compute_dashboard_alerts(report, rows, 3)
    roster_flags = flag_roster_absentees([s for s in students if s.class_id == "A"], rows, 3)

    absentee_alert = next(a for a in alerts if a.kind == AlertKind.REPEAT_ABSENTEES)
    assert set(absentee_alert.student_ids) == {s.student_id for s in roster_flags} == {"S1"}
    assert absentee_alert.count == 1


def test_dashboard_alerts_skip_zero_counts(students, classes):
    report = compute_finance_report(students, [paid("S1"), paid("S2"), paid("S3")], classes, "2026-02")

    assert compute_dashboard_alerts(report, [], 3) == ()


def test_dashboard_alerts_report_unpaid_count(students, classes):
    report = compute_finance_report(students, [paid("S1")], classes, "2026-02")

    alerts = compute_dashboard_alerts(report, [], 3)

    assert [(a.kind, a.count) for a in alerts] == [(AlertKind.UNPAID_SUBSCRIPTIONS, 2)]


def test_monthly_payments_default_to_unpaid():
    stats = compute_monthly_payments([paid("S1", "2026-01")], ["2025-12", "2026-01"])

    assert [s.payment_status for s in stats] == [PaymentStatus.UNPAID, PaymentStatus.PAID]
    assert stats[0].paid_at is None
    assert stats[1].paid_at == datetime(2026, 2, 3, 9, 30)


def test_student_report_combines_months_and_notes(students, classes):
    months = ["2026-01", "2026-02"]
    rows = [present("S1", 5, month="2026-01"), absent("S1", 6, month="2026-01"), present("S1", 2), present("S2", 2)]
    notes = [
        EvaluationRecord("S1", "T1", "older note here", datetime(2026, 1, 1)),
        EvaluationRecord("S2", "T1", "someone else entirely", datetime(2026, 1, 5)),
        EvaluationRecord("S1", "T1", "newer note here", datetime(2026, 2, 1)),
    ]

    report = compute_student_report(students[0], classes, rows, [paid("S1", "2026-02")], notes, months)

    assert report.class_name == "Class A"
    assert [s.total_sessions for s in report.monthly_attendance] == [2, 1]
    assert report.overall_attendance_rate_percent == 67
    assert [p.payment_status for p in report.monthly_payments] == [PaymentStatus.UNPAID, PaymentStatus.PAID]
    assert [e.note for e in report.evaluations] == ["newer note here", "older note here"]


def test_aggregation_is_idempotent(students, classes):
    subs = [paid("S1"), paid("S3")]
    rows = [absent("S1", 2), absent("S2", 3)]

    first = compute_finance_report(students, subs, classes, "2026-02", absences=rows)
    second = compute_finance_report(students, subs, classes, "2026-02", absences=rows)

    assert first == second
    assert compute_repeat_absentees(rows, 1) == compute_repeat_absentees(rows, 1)
    assert compute_monthly_attendance(rows, ["2026-02"]) == compute_monthly_attendance(rows, ["2026-02"])


def test_payment_status_filter_narrows_rows_only(students, classes):
    subs = [paid("S1"), paid("S3")]
    whole = compute_finance_report(students, subs, classes, "2026-02")

    unpaid_only = compute_finance_report(students, subs, classes, "2026-02", payment_status=PaymentStatus.UNPAID)

    assert [r.student.student_id for r in unpaid_only.student_rows] == ["S2"]
    assert unpaid_only.totals == whole.totals
    assert unpaid_only.class_stats == whole.class_stats
    assert filter_by_payment_status(whole, PaymentStatus.PAID).student_rows == (
        whole.student_rows[0],
        whole.student_rows[2],
    )
    assert filter_by_payment_status(whole, None) is whole
