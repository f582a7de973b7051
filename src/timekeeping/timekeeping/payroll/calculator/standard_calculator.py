from __future__ import annotations

from typing import Sequence

from .base import SalaryCalculator
from ...attendance.model import Violation


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule: base * sum(deduction_amount), not above base."""

    def deductions(self, base_salary: float, violations: Sequence[Violation]) -> float:
        fraction = sum(v.deduction_amount for v in violations)
        return min(round(base_salary * fraction, 2), round(base_salary, 2))
