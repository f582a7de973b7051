from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, error_response, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_LIST_LIMIT
from ..employees.access import Action, require


def register(app: Flask, container: Container) -> None:
    @app.route("/ledger/outbox/flush", methods=["POST"], endpoint="ledger_flush_outbox")
    @login_required
    def flush_outbox():
        _, role = current_actor()
        limit = request.args.get("limit", default=DEFAULT_LIST_LIMIT, type=int)
        try:
            require(role, Action.FLUSH_LEDGER, "Only root can flush the ledger outbox")
            result = container.ledger_notifier.flush_outbox(limit=max(1, limit))
        except Exception as e:
            return error_response(e)
        return ok({"sent": result.sent, "failed": result.failed})
