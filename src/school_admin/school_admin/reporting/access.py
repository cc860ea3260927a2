"""Role capabilities for report views.

Each check handles every ``Role`` member explicitly and rejects anything
else, so adding a role forces a decision here.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..roster.model import SchoolClass


def _unknown_role(role) -> AuthorizationError:
    return AuthorizationError(f"Unsupported role: {role!r}")


def is_admin(role: Role) -> bool:
    if role == Role.ADMIN:
        return True
    if role == Role.TEACHER:
        return False
    raise _unknown_role(role)


def can_view_finance(role: Role) -> bool:
    return is_admin(role)


def require_admin(role: Role, action: str) -> None:
    if not is_admin(role):
        raise AuthorizationError(f"Only admins can {action}")


def visible_classes(
    role: Role,
    classes: Sequence[SchoolClass],
    assigned_class_ids: Iterable[str] = (),
) -> tuple[SchoolClass, ...]:
    """Admins see every class; teachers only the classes they teach."""
    if role == Role.ADMIN:
        return tuple(classes)
    if role == Role.TEACHER:
        allowed = set(assigned_class_ids)
        return tuple(c for c in classes if c.class_id in allowed)
    raise _unknown_role(role)


def require_class_access(role: Role, class_id: str, assigned_class_ids: Iterable[str]) -> None:
    if role == Role.ADMIN:
        return
    if role == Role.TEACHER:
        if class_id not in set(assigned_class_ids):
            raise AuthorizationError("You are not assigned to this class")
        return
    raise _unknown_role(role)


def can_view_student_report(role: Role) -> bool:
    if role in (Role.ADMIN, Role.TEACHER):
        return True
    raise _unknown_role(role)


def can_view_dashboard_summary(role: Role) -> bool:
    if role in (Role.ADMIN, Role.TEACHER):
        return True
    raise _unknown_role(role)
