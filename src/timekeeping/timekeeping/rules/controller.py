from __future__ import annotations

from flask import Flask

from ..common.http import current_actor, error_response, json_body, login_required, ok
from ..container import Container


def _rule_dict(rule) -> dict:
    return {
        "rule_name": rule.rule_name,
        "details": rule.details,
        "created_by": rule.created_by,
        "updated_at": rule.updated_at.isoformat() if rule.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/rules", methods=["GET"], endpoint="rules_list")
    @login_required
    def list_rules():
        try:
            rules = container.rule_service.list_rules()
        except Exception as e:
            return error_response(e)
        return ok([_rule_dict(r) for r in rules])

    @app.route("/rules/<rule_name>", methods=["PUT"], endpoint="rules_update")
    @login_required
    def update_rule(rule_name: str):
        user_id, role = current_actor()
        try:
            data = json_body()
            change = container.rule_service.update_rule(
                actor_id=user_id,
                actor_role=role,
                rule_name=rule_name,
                details=data.get("details") or "",
            )
        except Exception as e:
            return error_response(e)
        payload = _rule_dict(change.rule)
        payload["ledger_synced"] = change.ledger_synced
        return ok(payload, message="Rule updated")
