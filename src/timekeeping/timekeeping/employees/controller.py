from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import current_actor, error_response, json_body, login_required, ok
from ..common.validators import parse_optional_enum
from ..core.enums import EmployeeStatus, Role
from ..container import Container
from .model import EmployeeFilter


def _change_payload(change) -> dict:
    data = change.employee.to_public_dict()
    data["ledger_synced"] = change.ledger_synced
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/employees", methods=["POST"], endpoint="employees_create")
    @login_required
    def create_employee():
        _, role = current_actor()
        try:
            data = json_body()
            change = container.employee_service.create_employee(
                actor_role=role,
                nickname=data.get("nickname") or "",
                role=data.get("role") or Role.EMPLOYEE.value,
                onboard_date=parse_optional_date(data.get("onboard_date"), "onboard_date"),
                wallet_address=data.get("wallet_address") or "",
                salary=data.get("salary") or 0,
            )
        except Exception as e:
            return error_response(e)
        return ok(_change_payload(change), message="Employee created", status=201)

    @app.route("/employees", methods=["GET"], endpoint="employees_list")
    @login_required
    def list_employees():
        _, role = current_actor()
        args = request.args
        try:
            flt = EmployeeFilter(
                department=(args.get("department") or "").strip() or None,
                status=parse_optional_enum(EmployeeStatus, args.get("status"), "status"),
                role=parse_optional_enum(Role, args.get("role"), "role"),
                onboard_from=parse_optional_date(args.get("onboard_from"), "onboard_from"),
                onboard_to=parse_optional_date(args.get("onboard_to"), "onboard_to"),
                absence_type=(args.get("absence_type") or "").strip() or None,
            )
            rows = container.employee_service.list_employees(actor_role=role, flt=flt)
        except Exception as e:
            return error_response(e)
        return ok([e.to_public_dict() for e in rows])

    @app.route("/employees/me", methods=["GET"], endpoint="employees_me")
    @login_required
    def me():
        user_id, _ = current_actor()
        try:
            employee = container.employee_service.get_employee(user_id)
        except Exception as e:
            return error_response(e)
        return ok(employee.to_public_dict())

    @app.route("/employees/<int:employee_id>", methods=["PATCH", "PUT"], endpoint="employees_update")
    @login_required
    def update_employee(employee_id: int):
        user_id, role = current_actor()
        try:
            change = container.employee_service.update_employee(
                actor_id=user_id,
                actor_role=role,
                employee_id=employee_id,
                changes=json_body(),
            )
        except Exception as e:
            return error_response(e)
        return ok(_change_payload(change), message="Employee updated")
