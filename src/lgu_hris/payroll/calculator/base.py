from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PayLine:
    daily_rate: float
    gross_pay: float
    lates_deduction: float


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def daily_rate(self, *, monthly_rate: float, daily_wage: float = 0.0) -> float:
        raise NotImplementedError

    @abstractmethod
    def gross_pay(self, *, days: float, lates: float, daily_rate: float) -> PayLine:
        raise NotImplementedError
