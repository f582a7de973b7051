from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CompanyRule:
    """A named company-wide rule, e.g. ``check_in_time`` = ``"09:00"``."""

    rule_name: str
    details: str
    created_by: Optional[int] = None
    updated_at: Optional[datetime] = None
