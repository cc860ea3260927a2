from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..container import Container
from .model import MonthlyAttendanceStat


def to_json(value):
    """Dataclasses / enums / datetimes -> plain JSON-able values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
        if isinstance(value, MonthlyAttendanceStat):
            out["has_data"] = value.has_data
        return out
    if isinstance(value, (frozenset, set)):
        return sorted(to_json(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    return value


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def current_role() -> Role:
        if "user_id" not in session:
            raise AuthenticationError("Please sign in to continue")
        try:
            return Role.from_value(session.get("role"))
        except ValueError:
            raise AuthorizationError("Unknown role")

    def api_view(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except AuthenticationError as e:
                return jsonify({"success": False, "message": str(e)}), 401
            except AuthorizationError as e:
                return jsonify({"success": False, "message": str(e)}), 403
            except NotFoundError as e:
                return jsonify({"success": False, "message": str(e)}), 404
            except Exception:
                app.logger.exception("report endpoint %s failed", request.path)
                return jsonify({"success": False, "message": "Internal error while building the report"}), 500

        return wrapper

    @app.route("/api/reports/finance", methods=["GET"], endpoint="api_finance_report")
    @api_view
    def api_finance_report():
        report = service.finance_report(
            current_role=current_role(),
            period=request.args.get("period", ""),
            class_id=request.args.get("class_id"),
            payment_status=request.args.get("payment_status"),
        )
        return jsonify({"success": True, "data": to_json(report)}), 200

    @app.route("/api/reports/students/<student_id>", methods=["GET"], endpoint="api_student_report")
    @api_view
    def api_student_report(student_id: str):
        report = service.student_report(
            current_role=current_role(),
            student_id=student_id,
            months=request.args.get("months"),
            until=request.args.get("until"),
        )
        return jsonify({"success": True, "data": to_json(report)}), 200

    @app.route("/api/reports/summary", methods=["GET"], endpoint="api_dashboard_summary")
    @api_view
    def api_dashboard_summary():
        summary = service.dashboard_summary(current_role=current_role())
        return jsonify({"success": True, "data": to_json(summary)}), 200

    @app.route("/api/reports/alerts", methods=["GET"], endpoint="api_dashboard_alerts")
    @api_view
    def api_dashboard_alerts():
        alerts = service.dashboard_alerts(current_role=current_role(), period=request.args.get("period"))
        return jsonify({"success": True, "data": to_json(alerts)}), 200

    @app.route("/api/attendance/absentees", methods=["GET"], endpoint="api_session_absentees")
    @api_view
    def api_session_absentees():
        role = current_role()
        # Teachers are always scoped to their own sessions.
        teacher_id = session.get("teacher_id") if role == Role.TEACHER else request.args.get("teacher_id")
        students = service.session_absentees(
            current_role=role,
            class_id=request.args.get("class_id", ""),
            teacher_id=teacher_id,
            period=request.args.get("period"),
        )
        return jsonify({"success": True, "threshold": service.absence_threshold, "data": to_json(students)}), 200

    @app.route("/api/classes", methods=["GET"], endpoint="api_visible_classes")
    @api_view
    def api_visible_classes():
        classes = service.visible_classes(current_role=current_role(), teacher_id=session.get("teacher_id"))
        return jsonify({"success": True, "data": to_json(classes)}), 200

    @app.route("/api/reports/invalidate", methods=["POST"], endpoint="api_invalidate_reports")
    @api_view
    def api_invalidate_reports():
        payload = request.get_json(silent=True) or {}
        dropped = service.invalidate(
            current_role=current_role(),
            period=payload.get("period"),
            class_id=payload.get("class_id"),
        )
        return jsonify({"success": True, "invalidated": dropped}), 200
