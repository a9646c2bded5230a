"""Capture windows for the four daily punches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, Optional

from ..common.datetime_utils import minutes_of
from .model import DayPunches, ShiftSchedule

FALLBACK_AM_CHECKIN = (time(4, 0), time(11, 59))
FALLBACK_AM_CHECKOUT = (time(11, 0), time(12, 30))
FALLBACK_PM_CHECKIN = (time(12, 31), time(14, 0))
FALLBACK_PM_CHECKOUT = (time(14, 1), time(23, 59))


@dataclass(frozen=True)
class TimeWindow:
    start: int
    end: int

    def contains(self, value: time) -> bool:
        return self.start <= minutes_of(value) <= self.end


def build_window(
    expected: Optional[time],
    start: Optional[time],
    end: Optional[time],
    fallback: tuple,
) -> Optional[TimeWindow]:
    """Window for one slot; None when the shift does not expect that punch."""

    if expected is None:
        return None
    if start is not None and end is not None:
        return TimeWindow(minutes_of(start), minutes_of(end))
    return TimeWindow(minutes_of(fallback[0]), minutes_of(fallback[1]))


@dataclass(frozen=True)
class DayWindows:
    am_checkin: Optional[TimeWindow]
    am_checkout: Optional[TimeWindow]
    pm_checkin: Optional[TimeWindow]
    pm_checkout: Optional[TimeWindow]

    @classmethod
    def for_schedule(cls, s: ShiftSchedule) -> "DayWindows":
        return cls(
            am_checkin=build_window(s.am_checkin, s.am_checkin_start, s.am_checkin_end, FALLBACK_AM_CHECKIN),
            am_checkout=build_window(s.am_checkout, s.am_checkout_start, s.am_checkout_end, FALLBACK_AM_CHECKOUT),
            pm_checkin=build_window(s.pm_checkin, s.pm_checkin_start, s.pm_checkin_end, FALLBACK_PM_CHECKIN),
            pm_checkout=build_window(s.pm_checkout, s.pm_checkout_start, s.pm_checkout_end, FALLBACK_PM_CHECKOUT),
        )


def _pick(times: list, window: Optional[TimeWindow], *, latest: bool = False) -> Optional[time]:
    if window is None:
        return None
    inside = [t for t in times if window.contains(t)]
    if not inside:
        return None
    return max(inside) if latest else min(inside)


def select_punches(check_times: Iterable[datetime], windows: DayWindows) -> DayPunches:
    """Earliest log per window, except PM check-out which takes the latest."""

    times = [t.time().replace(second=0, microsecond=0) for t in check_times]
    return DayPunches(
        am_checkin=_pick(times, windows.am_checkin),
        am_checkout=_pick(times, windows.am_checkout),
        pm_checkin=_pick(times, windows.pm_checkin),
        pm_checkout=_pick(times, windows.pm_checkout, latest=True),
    )


def _diff(actual: Optional[time], expected: Optional[time]) -> int:
    if actual is None or expected is None:
        return 0
    return minutes_of(actual) - minutes_of(expected)


def late_minutes(punches: DayPunches, schedule: ShiftSchedule) -> int:
    """Tardiness plus undertime, in minutes."""

    late = max(0, _diff(punches.am_checkin, schedule.am_checkin))
    late += max(0, _diff(punches.pm_checkin, schedule.pm_checkin))
    late += max(0, -_diff(punches.am_checkout, schedule.am_checkout))
    late += max(0, -_diff(punches.pm_checkout, schedule.pm_checkout))
    return late


FULL_DAY_PATTERNS = frozenset({
    (True, True, True, True),
    (True, True, False, True),
    (True, False, True, True),
    (True, False, False, True),
})

HALF_DAY_PATTERNS = frozenset({
    (True, True, False, False),
    (False, False, True, True),
    (False, True, True, True),
    (True, True, True, False),
    (True, False, True, False),
    (False, True, False, True),
})


def time_based_credit(punches: DayPunches) -> float:
    pattern = (
        punches.am_checkin is not None,
        punches.am_checkout is not None,
        punches.pm_checkin is not None,
        punches.pm_checkout is not None,
    )
    if pattern in FULL_DAY_PATTERNS:
        return 1.0
    if pattern in HALF_DAY_PATTERNS:
        return 0.5
    return 0.0
