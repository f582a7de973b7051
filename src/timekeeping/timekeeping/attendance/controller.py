from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, error_response, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        user_id, _ = current_actor()
        try:
            result = container.attendance_service.check_in(user_id)
        except Exception as e:
            return error_response(e)
        message = "Checked in successfully" if result.record.on_time else "Checked in late"
        return ok(result.to_dict(), message=message, status=201)

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        user_id, _ = current_actor()
        try:
            result = container.attendance_service.check_out(user_id)
        except Exception as e:
            return error_response(e)
        return ok(result.to_dict(), message="Checked out successfully")

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        user_id, _ = current_actor()
        try:
            record = container.attendance_service.get_today_record(user_id)
        except Exception as e:
            return error_response(e)
        return ok(record.to_dict() if record else None)

    @app.route("/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        user_id, _ = current_actor()
        limit = request.args.get("limit", default=15, type=int)
        try:
            rows = container.attendance_service.get_history(user_id, limit=max(1, min(limit, 100)))
        except Exception as e:
            return error_response(e)
        return ok([r.to_dict() for r in rows])
