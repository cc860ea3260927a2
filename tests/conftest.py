from __future__ import annotations

from datetime import datetime

import pytest

from src.school_admin.school_admin.container import build_service_container
from src.school_admin.school_admin.evaluations.model import EvaluationRecord
from src.school_admin.school_admin.roster.model import SchoolClass, Student
from tests.builders import (
    InMemoryAttendance,
    InMemoryEvaluations,
    InMemoryRoster,
    InMemorySubscriptions,
    absent,
    paid,
    present,
)


@pytest.fixture
def classes():
    return [SchoolClass("A", "Class A"), SchoolClass("B", "Class B"), SchoolClass("C", "Class C (empty)")]


@pytest.fixture
def students():
    return [
        Student("S1", "Amina", class_id="A"),
        Student("S2", "Bilal", class_id="A"),
        Student("S3", "Chahra", class_id="B"),
    ]


@pytest.fixture
def school(students, classes):
    """Repositories for a small school: S1/S2 in class A, S3 in class B, February 2026."""
    roster = InMemoryRoster(students=students, classes=classes, assignments={"T1": ["A"], "T2": ["B"]})
    attendance = InMemoryAttendance(
        rows=[
            absent("S1", 2),
            absent("S1", 3),
            absent("S1", 4, 2),
            present("S2", 2),
            absent("S2", 3),
            absent("S3", 2, class_id="B", teacher_id="T2"),
            # Orphan: student deleted since.
            absent("GONE", 2),
            absent("GONE", 3),
            absent("GONE", 4),
        ]
    )
    subscriptions = InMemorySubscriptions(rows=[paid("S1"), paid("S3"), paid("GONE")])
    evaluations = InMemoryEvaluations(
        rows=[
            EvaluationRecord("S1", "T1", "Good progress in reading", datetime(2026, 1, 10), "Teacher One"),
            EvaluationRecord("S1", "T1", "Needs to revise fractions", datetime(2026, 2, 12), "Teacher One"),
        ]
    )
    return roster, attendance, subscriptions, evaluations


@pytest.fixture
def container(school):
    roster, attendance, subscriptions, evaluations = school
    return build_service_container(
        roster_repo=roster,
        attendance_repo=attendance,
        subscriptions_repo=subscriptions,
        evaluations_repo=evaluations,
    )
