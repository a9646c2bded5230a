from __future__ import annotations

from .base import DayContext, DayCreditStrategy


class ApprovedRecordStrategy(DayCreditStrategy):
    """Travel, CDO, fix log or locator on the date: full day."""

    def credit(self, ctx: DayContext) -> float:
        return 1.0
