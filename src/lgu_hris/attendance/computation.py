"""Daily time record computation for one employee over a date range."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import date_range, is_weekend
from ..core.constants import MINUTES_PER_DAY
from .factory import DayCreditStrategyFactory
from .model import (
    ApprovedDates,
    AttendanceResult,
    DailyRecord,
    ExceptionCounts,
    Holiday,
    ShiftSchedule,
)
from .strategies.base import DayContext
from .windows import DayWindows, late_minutes, select_punches, time_based_credit

logger = logging.getLogger(__name__)


def holiday_name(holidays: Sequence[Holiday], day: date) -> Optional[str]:
    for h in holidays:
        if h.falls_on(day):
            return h.name
    return None


def compute_attendance(
    *,
    dtruserid: int,
    schedule: ShiftSchedule,
    check_times: Iterable[datetime],
    start: date,
    end: date,
    approved: ApprovedDates = ApprovedDates(),
    holidays: Sequence[Holiday] = (),
    counts: ExceptionCounts = ExceptionCounts(),
    factory: Optional[DayCreditStrategyFactory] = None,
) -> AttendanceResult:
    factory = factory or DayCreditStrategyFactory()
    windows = DayWindows.for_schedule(schedule)

    by_day: dict = defaultdict(list)
    logs_count = 0
    for t in check_times:
        by_day[t.date()].append(t)
        logs_count += 1

    rows = []
    total_lates = 0
    total_days = 0.0
    deducted = 0.0

    for day in date_range(start, end):
        punches = select_punches(by_day.get(day, ()), windows)
        late = late_minutes(punches, schedule)

        flags = {
            "hastravel": day in approved.travels,
            "hascdo": day in approved.cdo,
            "hasfixlogs": day in approved.fix_logs,
            "haslocator": day in approved.locators,
        }
        ctx = DayContext(
            day=day,
            time_credit=time_based_credit(punches),
            has_approved_record=any(flags.values()),
            is_weekend=is_weekend(day),
            holiday=holiday_name(holidays, day),
        )
        days = factory.for_day(ctx).credit(ctx)

        rows.append(
            DailyRecord(
                dtruserid=dtruserid,
                day=day,
                punches=punches,
                late=late,
                days=days,
                hasleave=day in approved.leaves,
                is_weekend=ctx.is_weekend,
                holiday=ctx.holiday,
                **flags,
            )
        )
        total_lates += late
        total_days += days
        deducted += late / MINUTES_PER_DAY

    net_days = max(0.0, total_days - total_lates / MINUTES_PER_DAY)
    logger.debug(
        "dtruserid=%s %s..%s days=%s lates=%s net=%.4f",
        dtruserid, start, end, total_days, total_lates, net_days,
    )

    return AttendanceResult(
        dtruserid=dtruserid,
        start=start,
        end=end,
        rows=rows,
        total_lates=round(total_lates),
        total_days=total_days,
        net_days=round(net_days, 4),
        equivalent_days_deducted=round(deducted, 2),
        counts=counts,
        schedule=schedule,
        logs_count=logs_count,
    )
