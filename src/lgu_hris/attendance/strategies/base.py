from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class DayContext:
    day: date
    time_credit: float
    has_approved_record: bool
    is_weekend: bool
    holiday: Optional[str] = None

    @property
    def is_rest_day(self) -> bool:
        return self.is_weekend or self.holiday is not None


class DayCreditStrategy(ABC):
    """Strategy Pattern: decide how many days one calendar date is worth."""

    @abstractmethod
    def credit(self, ctx: DayContext) -> float:
        raise NotImplementedError
