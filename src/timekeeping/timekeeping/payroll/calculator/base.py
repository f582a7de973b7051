from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import Violation


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def deductions(self, base_salary: float, violations: Sequence[Violation]) -> float:
        raise NotImplementedError

    def final_salary(self, base_salary: float, deductions: float, bonus: float) -> float:
        return round(base_salary - deductions + bonus, 2)
