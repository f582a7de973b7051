from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import current_actor, error_response, json_body, login_required, ok
from ..common.validators import parse_optional_enum
from ..core.enums import AbsenceStatus, AbsenceType
from ..container import Container
from .model import AbsenceFilter


def register(app: Flask, container: Container) -> None:
    @app.route("/absences", methods=["POST"], endpoint="absences_submit")
    @login_required
    def submit():
        user_id, role = current_actor()
        try:
            data = json_body()
            absence = container.absence_service.submit(
                actor_id=user_id,
                actor_role=role,
                absence_date=parse_optional_date(data.get("date"), "date"),
                type=data.get("type"),
                reason=data.get("reason"),
                employee_id=data.get("user_id"),
            )
        except Exception as e:
            return error_response(e)
        return ok(absence.to_dict(), message="Absence submitted", status=201)

    @app.route("/absences", methods=["GET"], endpoint="absences_list")
    @login_required
    def list_absences():
        _, role = current_actor()
        args = request.args
        try:
            flt = AbsenceFilter(
                type=parse_optional_enum(AbsenceType, args.get("type"), "type"),
                status=parse_optional_enum(AbsenceStatus, args.get("status"), "status"),
                department=(args.get("department") or "").strip() or None,
                start_date=parse_optional_date(args.get("start_date"), "start_date"),
                end_date=parse_optional_date(args.get("end_date"), "end_date"),
            )
            rows = container.absence_service.list_absences(actor_role=role, flt=flt)
        except Exception as e:
            return error_response(e)
        return ok([r.to_dict() for r in rows])

    @app.route("/absences/me", methods=["GET"], endpoint="absences_mine")
    @login_required
    def my_absences():
        user_id, _ = current_actor()
        try:
            rows = container.absence_service.my_absences(actor_id=user_id)
        except Exception as e:
            return error_response(e)
        return ok([r.to_dict() for r in rows])

    @app.route("/absences/<int:absence_id>/approve", methods=["POST"], endpoint="absences_approve")
    @login_required
    def approve(absence_id: int):
        user_id, role = current_actor()
        try:
            absence = container.absence_service.approve(actor_id=user_id, actor_role=role, absence_id=absence_id)
        except Exception as e:
            return error_response(e)
        return ok(absence.to_dict(), message="Absence approved")

    @app.route("/absences/<int:absence_id>/reject", methods=["POST"], endpoint="absences_reject")
    @login_required
    def reject(absence_id: int):
        user_id, role = current_actor()
        try:
            absence = container.absence_service.reject(actor_id=user_id, actor_role=role, absence_id=absence_id)
        except Exception as e:
            return error_response(e)
        return ok(absence.to_dict(), message="Absence rejected")
