from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CompanyRule


class RuleRepository(Protocol):
    def get(self, rule_name: str) -> Optional[CompanyRule]:
        raise NotImplementedError

    def list_all(self) -> Sequence[CompanyRule]:
        raise NotImplementedError

    def upsert(self, *, rule_name: str, details: str, created_by: int) -> None:
        raise NotImplementedError
