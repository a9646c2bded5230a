from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional, Sequence

from ..common.datetime_utils import format_hhmm
from ..core.enums import ShiftTimeMode


@dataclass(frozen=True)
class AssignedShift:
    """One employee_assignedshifts row joined with shiftscheduletypes."""

    shift_id: int
    name: str
    mode: ShiftTimeMode
    checkin: Optional[time] = None
    checkin_start: Optional[time] = None
    checkin_end: Optional[time] = None
    checkout: Optional[time] = None
    checkout_start: Optional[time] = None
    checkout_end: Optional[time] = None


@dataclass(frozen=True)
class ShiftSchedule:
    """Expected times and capture windows for the four daily punches."""

    name: Optional[str] = None
    am_checkin: Optional[time] = None
    am_checkin_start: Optional[time] = None
    am_checkin_end: Optional[time] = None
    am_checkout: Optional[time] = None
    am_checkout_start: Optional[time] = None
    am_checkout_end: Optional[time] = None
    pm_checkin: Optional[time] = None
    pm_checkin_start: Optional[time] = None
    pm_checkin_end: Optional[time] = None
    pm_checkout: Optional[time] = None
    pm_checkout_start: Optional[time] = None
    pm_checkout_end: Optional[time] = None

    @property
    def has_checkin(self) -> bool:
        return self.am_checkin is not None or self.pm_checkin is not None

    @classmethod
    def combine(cls, shifts: Sequence[AssignedShift]) -> Optional["ShiftSchedule"]:
        """Merge active assignments (newest first) into one schedule.

        The first AM/AMPM shift supplies the morning times and the first
        PM/AMPM shift supplies the afternoon times.
        """

        if not shifts:
            return None

        am = next((s for s in shifts if s.mode.covers_am), None)
        pm = next((s for s in shifts if s.mode.covers_pm), None)

        names: List[str] = []
        for s in shifts:
            if s.name and s.name not in names:
                names.append(s.name)

        return cls(
            name=" / ".join(names) or None,
            am_checkin=am.checkin if am else None,
            am_checkin_start=am.checkin_start if am else None,
            am_checkin_end=am.checkin_end if am else None,
            am_checkout=am.checkout if am else None,
            am_checkout_start=am.checkout_start if am else None,
            am_checkout_end=am.checkout_end if am else None,
            pm_checkin=pm.checkin if pm else None,
            pm_checkin_start=pm.checkin_start if pm else None,
            pm_checkin_end=pm.checkin_end if pm else None,
            pm_checkout=pm.checkout if pm else None,
            pm_checkout_start=pm.checkout_start if pm else None,
            pm_checkout_end=pm.checkout_end if pm else None,
        )

    def to_dict(self) -> dict:
        return {
            "SHIFTNAME": self.name,
            "SHIFT_AMCHECKIN": format_hhmm(self.am_checkin) or None,
            "SHIFT_AMCHECKOUT": format_hhmm(self.am_checkout) or None,
            "SHIFT_PMCHECKIN": format_hhmm(self.pm_checkin) or None,
            "SHIFT_PMCHECKOUT": format_hhmm(self.pm_checkout) or None,
        }


@dataclass(frozen=True)
class Holiday:
    name: str
    holiday_date: date
    recurring: bool = False

    def falls_on(self, day: date) -> bool:
        if self.recurring:
            return (self.holiday_date.month, self.holiday_date.day) == (day.month, day.day)
        return self.holiday_date == day


@dataclass(frozen=True)
class ApprovedDates:
    """Dates covered by approved travel, CDO, fix-log, locator and leave records."""

    travels: frozenset = frozenset()
    cdo: frozenset = frozenset()
    fix_logs: frozenset = frozenset()
    locators: frozenset = frozenset()
    leaves: frozenset = frozenset()


@dataclass(frozen=True)
class ExceptionCounts:
    locators: int = 0
    leaves: int = 0
    travels: int = 0
    cdo: int = 0
    fix_logs: int = 0


@dataclass(frozen=True)
class DayPunches:
    am_checkin: Optional[time] = None
    am_checkout: Optional[time] = None
    pm_checkin: Optional[time] = None
    pm_checkout: Optional[time] = None


@dataclass(frozen=True)
class DailyRecord:
    dtruserid: int
    day: date
    punches: DayPunches
    late: int
    days: float
    hascdo: bool = False
    hastravel: bool = False
    haslocator: bool = False
    hasfixlogs: bool = False
    hasleave: bool = False
    is_weekend: bool = False
    holiday: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "dtruserid": self.dtruserid,
            "dtrdate": self.day.isoformat(),
            "am_checkin": format_hhmm(self.punches.am_checkin),
            "am_checkout": format_hhmm(self.punches.am_checkout),
            "pm_checkin": format_hhmm(self.punches.pm_checkin),
            "pm_checkout": format_hhmm(self.punches.pm_checkout),
            "late": self.late,
            "days": self.days,
            "hascdo": int(self.hascdo),
            "hastravel": int(self.hastravel),
            "haslocator": int(self.haslocator),
            "hasfixlogs": int(self.hasfixlogs),
            "hasleave": int(self.hasleave),
            "is_weekend": self.is_weekend,
            "holiday": self.holiday or "",
        }


@dataclass(frozen=True)
class AttendanceResult:
    dtruserid: int
    start: date
    end: date
    rows: List[DailyRecord] = field(default_factory=list)
    total_lates: int = 0
    total_days: float = 0.0
    net_days: float = 0.0
    equivalent_days_deducted: float = 0.0
    counts: ExceptionCounts = ExceptionCounts()
    schedule: Optional[ShiftSchedule] = None
    logs_count: int = 0

    def totals(self) -> dict:
        return {
            "totalLates": self.total_lates,
            "totalDays": self.total_days,
            "netDays": self.net_days,
            "equivalentDaysDeducted": self.equivalent_days_deducted,
            "locatorsCount": self.counts.locators,
            "leavesCount": self.counts.leaves,
            "travelsCount": self.counts.travels,
            "cdoCount": self.counts.cdo,
            "fixLogsCount": self.counts.fix_logs,
        }

    def to_dict(self) -> dict:
        return {
            **self.totals(),
            "dailyData": [r.to_dict() for r in self.rows],
            "shiftSchedule": self.schedule.to_dict() if self.schedule else None,
            "logsCount": self.logs_count,
        }


@dataclass(frozen=True)
class ComputedDtr:
    """employee_computeddtr header row."""

    compute_id: int
    emp_objid: str
    computed_month: str
    computed_year: int
    period: str
    total_lates: float
    total_days: float
    total_netdays: float
    compute_status: str

    def to_dict(self) -> dict:
        return {
            "computeid": self.compute_id,
            "emp_objid": self.emp_objid,
            "computedmonth": self.computed_month,
            "computedyear": self.computed_year,
            "period": self.period,
            "total_lates": self.total_lates,
            "total_days": self.total_days,
            "total_netdays": self.total_netdays,
            "computestatus": self.compute_status,
        }


def zero_totals() -> dict:
    return {
        "totalLates": 0,
        "totalDays": 0,
        "netDays": 0,
        "equivalentDaysDeducted": 0,
        "locatorsCount": 0,
        "leavesCount": 0,
        "travelsCount": 0,
        "cdoCount": 0,
        "fixLogsCount": 0,
    }
