from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DomainError,
    DuplicateSessionError,
    ExternalNotificationError,
    Forbidden,
    InvalidRangeError,
    NotFound,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (InvalidRangeError, 400),
    (AuthenticationError, 401),
    (Forbidden, 403),
    (NotFound, 404),
    (DuplicateSessionError, 409),
    (ConfigurationError, 500),
    (StorageError, 500),
    (ExternalNotificationError, 502),
)

GENERIC_ERROR = "Internal server error"


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status


def fail(error: str, status: int):
    return jsonify({"success": False, "error": error}), status


def status_for(exc: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 400


def error_response(exc: Exception):
    """Translate an exception raised by a service into a JSON failure."""
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.path, exc)
        return fail("Database error", 500)
    if isinstance(exc, DomainError):
        return fail(str(exc), status_for(exc))
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return fail(GENERIC_ERROR, 500)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def current_actor() -> tuple[int, Role]:
    return int(session["user_id"]), Role(session["role"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "role" not in session:
            return fail("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper
