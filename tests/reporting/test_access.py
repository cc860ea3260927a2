import pytest

from src.school_admin.school_admin.core.enums import Role
from src.school_admin.school_admin.core.exceptions import AuthorizationError
from src.school_admin.school_admin.reporting import access


def test_only_admin_views_finance():
    assert access.can_view_finance(Role.ADMIN) is True
    assert access.can_view_finance(Role.TEACHER) is False


def test_unknown_role_is_rejected():
    with pytest.raises(AuthorizationError):
        access.is_admin("parent")
    with pytest.raises(AuthorizationError):
        access.can_view_student_report("parent")
    with pytest.raises(AuthorizationError):
        access.visible_classes("parent", [])


def test_require_admin_message_names_action():
    with pytest.raises(AuthorizationError, match="Only admins can refresh reports"):
        access.require_admin(Role.TEACHER, "refresh reports")
    access.require_admin(Role.ADMIN, "refresh reports")


def test_teacher_sees_only_assigned_classes(classes):
    assert access.visible_classes(Role.TEACHER, classes, ["B", "Z"]) == (classes[1],)
    assert access.visible_classes(Role.TEACHER, classes) == ()
    assert access.visible_classes(Role.ADMIN, classes) == tuple(classes)


def test_class_access():
    access.require_class_access(Role.ADMIN, "A", ())
    access.require_class_access(Role.TEACHER, "A", ["A"])
    with pytest.raises(AuthorizationError):
        access.require_class_access(Role.TEACHER, "B", ["A"])


def test_role_from_session_value():
    assert Role.from_value(None) == Role.TEACHER
    assert Role.from_value(" Admin ") == Role.ADMIN
    with pytest.raises(ValueError):
        Role.from_value("parent")


def test_both_roles_see_dashboard_summary():
    assert access.can_view_dashboard_summary(Role.ADMIN)
    assert access.can_view_dashboard_summary(Role.TEACHER)
    with pytest.raises(AuthorizationError):
        access.can_view_dashboard_summary("parent")
