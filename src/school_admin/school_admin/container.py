from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .core.constants import (
    DEFAULT_ABSENCE_THRESHOLD,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_REPORT_MONTHS,
)
from .database.connection import DBConfig, DatabaseConnection
from .evaluations.mysql_evaluation_repository import MySQLEvaluationRepository
from .evaluations.repository import EvaluationRepository
from .reporting.cache import ReportCache
from .reporting.service import ReportService
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .subscriptions.mysql_subscription_repository import MySQLSubscriptionRepository
from .subscriptions.repository import SubscriptionRepository


@dataclass(frozen=True)
class Container:
    roster_repo: RosterRepository
    attendance_repo: AttendanceRepository
    subscriptions_repo: SubscriptionRepository
    evaluations_repo: EvaluationRepository

    report_cache: ReportCache
    report_service: ReportService


def build_service_container(
    *,
    roster_repo: RosterRepository,
    attendance_repo: AttendanceRepository,
    subscriptions_repo: SubscriptionRepository,
    evaluations_repo: EvaluationRepository,
    absence_threshold: int = DEFAULT_ABSENCE_THRESHOLD,
    report_months: int = DEFAULT_REPORT_MONTHS,
    cache_enabled: bool = True,
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
) -> Container:
    report_cache = ReportCache(enabled=cache_enabled, ttl_seconds=cache_ttl_seconds, max_entries=cache_max_entries)
    report_service = ReportService(
        roster_repo,
        attendance_repo,
        subscriptions_repo,
        evaluations_repo,
        cache=report_cache,
        absence_threshold=absence_threshold,
        report_months=report_months,
    )
    return Container(
        roster_repo=roster_repo,
        attendance_repo=attendance_repo,
        subscriptions_repo=subscriptions_repo,
        evaluations_repo=evaluations_repo,
        report_cache=report_cache,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    absence_threshold: int = DEFAULT_ABSENCE_THRESHOLD,
    report_months: int = DEFAULT_REPORT_MONTHS,
    cache_enabled: bool = True,
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_service_container(
        roster_repo=MySQLRosterRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        subscriptions_repo=MySQLSubscriptionRepository(conn),
        evaluations_repo=MySQLEvaluationRepository(conn),
        absence_threshold=absence_threshold,
        report_months=report_months,
        cache_enabled=cache_enabled,
        cache_ttl_seconds=cache_ttl_seconds,
        cache_max_entries=cache_max_entries,
    )
