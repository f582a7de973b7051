from __future__ import annotations

from flask import Flask

from ..common.http import current_actor, error_response, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/salary/process", methods=["POST"], endpoint="salary_process")
    @login_required
    def process_salary():
        _, role = current_actor()
        try:
            data = json_body()
            approval = container.payroll_service.process_monthly_salary(
                actor_role=role,
                employee_id=int(data.get("user_id") or 0),
                month=data.get("month") or "",
                bonus=data.get("bonus") or 0,
            )
        except Exception as e:
            return error_response(e)
        return ok(approval.to_dict(), message="Salary submitted for approval", status=201)

    @app.route("/salary/pending", methods=["GET"], endpoint="salary_pending")
    @login_required
    def pending():
        _, role = current_actor()
        try:
            rows = container.payroll_service.list_pending_approvals(actor_role=role)
        except Exception as e:
            return error_response(e)
        return ok([r.to_dict() for r in rows])

    @app.route("/salary/<int:approval_id>/approve", methods=["POST"], endpoint="salary_approve")
    @login_required
    def approve(approval_id: int):
        user_id, role = current_actor()
        try:
            decision = container.payroll_service.approve_salary(actor_id=user_id, actor_role=role, approval_id=approval_id)
        except Exception as e:
            return error_response(e)
        data = decision.approval.to_dict()
        data["ledger_synced"] = decision.ledger_synced
        return ok(data, message="Salary approved")

    @app.route("/salary/<int:approval_id>/reject", methods=["POST"], endpoint="salary_reject")
    @login_required
    def reject(approval_id: int):
        user_id, role = current_actor()
        try:
            decision = container.payroll_service.reject_salary(actor_id=user_id, actor_role=role, approval_id=approval_id)
        except Exception as e:
            return error_response(e)
        return ok(decision.approval.to_dict(), message="Salary rejected")
