from __future__ import annotations

from .base import DayContext, DayCreditStrategy


class RestDayStrategy(DayCreditStrategy):
    """Weekend or holiday without work."""

    def credit(self, ctx: DayContext) -> float:
        return 0.0
