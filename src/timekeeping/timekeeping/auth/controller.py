from __future__ import annotations

from flask import Flask, session

from ..common.http import current_actor, error_response, json_body, login_required, ok
from ..container import Container
from .service import SessionUser


def _start_session(s_user: SessionUser) -> None:
    session.clear()
    session["user_id"] = s_user.user_id
    session["name"] = s_user.name
    session["role"] = s_user.role.value


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        try:
            data = json_body()
            s_user = container.auth_service.authenticate(data.get("email") or "", data.get("password") or "")
        except Exception as e:
            return error_response(e)
        _start_session(s_user)
        return ok({"user_id": s_user.user_id, "name": s_user.name, "role": s_user.role.value}, message="Logged in")

    @app.route("/auth/login-with-code", methods=["POST"], endpoint="auth_login_with_code")
    def login_with_code():
        try:
            data = json_body()
            s_user = container.auth_service.login_with_code(data.get("nickname") or "", data.get("code") or "")
        except Exception as e:
            return error_response(e)
        _start_session(s_user)
        return ok({"user_id": s_user.user_id, "name": s_user.name, "role": s_user.role.value}, message="Logged in")

    @app.route("/auth/active-code", methods=["GET"], endpoint="auth_active_code")
    @login_required
    def active_code():
        _, role = current_actor()
        try:
            code = container.auth_service.active_code(actor_role=role)
        except Exception as e:
            return error_response(e)
        return ok(code.to_dict())

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return ok(message="Logged out")
