from __future__ import annotations

import hmac
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import LOGIN_CODE_LENGTH


def generate_code() -> str:
    """8 url-safe characters from 6 random bytes."""
    return secrets.token_urlsafe(6)[:LOGIN_CODE_LENGTH]


@dataclass(frozen=True)
class LoginCode:
    code: str
    created_at: datetime

    def to_dict(self) -> dict:
        return {"code": self.code, "created_at": int(self.created_at.timestamp())}


class AuthCodeStore:
    """The single shared login code.

    One instance per application. Every read and write goes through one
    lock, so a successful ``validate`` and the rotation it triggers are a
    single step: of two concurrent calls with the same code, one wins.
    """

    def __init__(
        self,
        *,
        generator: Callable[[], str] = generate_code,
        clock: Callable[[], datetime] = now_local,
    ):
        self._generator = generator
        self._clock = clock
        self._lock = threading.Lock()
        self._active: Optional[LoginCode] = None

    def issue(self) -> LoginCode:
        with self._lock:
            return self._replace()

    def rotate(self) -> LoginCode:
        return self.issue()

    def current(self) -> Optional[LoginCode]:
        with self._lock:
            return self._active

    def current_or_issue(self) -> LoginCode:
        with self._lock:
            if self._active is None:
                return self._replace()
            return self._active

    def validate(self, code: Optional[str]) -> bool:
        """Check ``code`` and rotate on success. Never raises."""
        if not code or not isinstance(code, str):
            return False
        with self._lock:
            if self._active is None:
                return False
            if not hmac.compare_digest(self._active.code.encode(), code.encode()):
                return False
            self._replace()
            return True

    def _replace(self) -> LoginCode:
        # Caller holds the lock.
        self._active = LoginCode(code=self._generator(), created_at=self._clock())
        return self._active
