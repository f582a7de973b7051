from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, error_response, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/reports/employee-stats", methods=["GET"], endpoint="reports_employee_stats")
    @login_required
    def employee_stats():
        _, role = current_actor()
        try:
            report = container.report_service.compute_employee_stats(
                actor_role=role,
                time_range=request.args.get("time_range", "month"),
            )
        except Exception as e:
            return error_response(e)
        return ok(report.to_dict())

    @app.route("/reports/dashboard", methods=["GET"], endpoint="reports_dashboard")
    @login_required
    def dashboard():
        _, role = current_actor()
        try:
            data = container.report_service.dashboard(
                actor_role=role,
                time_range=request.args.get("time_range", "month"),
            )
        except Exception as e:
            return error_response(e)
        return ok(data.to_dict())

    @app.route("/reports/absence-statistics", methods=["GET"], endpoint="reports_absence_statistics")
    @login_required
    def absence_statistics():
        _, role = current_actor()
        try:
            stats = container.report_service.absence_statistics(actor_role=role)
        except Exception as e:
            return error_response(e)
        return ok(stats.to_dict())
