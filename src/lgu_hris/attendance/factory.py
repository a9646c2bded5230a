from __future__ import annotations

from dataclasses import dataclass

from .strategies.approved_record_strategy import ApprovedRecordStrategy
from .strategies.base import DayContext, DayCreditStrategy
from .strategies.rest_day_strategy import RestDayStrategy
from .strategies.time_based_strategy import TimeBasedStrategy


@dataclass
class DayCreditStrategyFactory:
    """Factory Pattern: choose the day-credit rule for a date."""

    def for_day(self, ctx: DayContext) -> DayCreditStrategy:
        if ctx.has_approved_record:
            return ApprovedRecordStrategy()
        if ctx.is_rest_day and ctx.time_credit == 0:
            return RestDayStrategy()
        return TimeBasedStrategy()
