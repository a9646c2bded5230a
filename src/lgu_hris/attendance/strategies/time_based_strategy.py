from __future__ import annotations

from .base import DayContext, DayCreditStrategy


class TimeBasedStrategy(DayCreditStrategy):
    """Credit from the punches captured that day."""

    def credit(self, ctx: DayContext) -> float:
        return ctx.time_credit
