from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import List, Optional, Tuple

from ..core.enums import ComputePeriod, ComputeStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .computation import compute_attendance
from .factory import DayCreditStrategyFactory
from .model import AttendanceResult, ComputedDtr, ShiftSchedule
from .repository import AttendanceRepository, ComputedDtrRepository, TimeLogRepository

logger = logging.getLogger(__name__)

FIRST_HALF_LAST_DAY = 15

# Only these block a recompute of the same period.
ACTIVE_COMPUTE_STATUSES = (ComputeStatus.FOR_APPROVAL.value, ComputeStatus.APPROVED.value)


def month_name(month: int) -> str:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    return calendar.month_name[int(month)]


def month_number(value) -> int:
    """Accept 1-12 or an English month name."""
    text = str(value).strip()
    if text.isdigit():
        month_name(int(text))
        return int(text)
    for i in range(1, 13):
        if calendar.month_name[i].lower() == text.lower():
            return i
    raise ValidationError(f"Unknown month: {value}")


def period_bounds(year: int, month: int, period: ComputePeriod) -> Tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    if period is ComputePeriod.FIRST:
        return date(year, month, 1), date(year, month, FIRST_HALF_LAST_DAY)
    if period is ComputePeriod.SECOND:
        return date(year, month, FIRST_HALF_LAST_DAY + 1), date(year, month, last)
    return date(year, month, 1), date(year, month, last)


class NoShiftAssignedError(NotFoundError):
    """Raised when an employee has no AM or PM check-in on any active shift."""

    def __init__(self, message: str = "No shift schedule assigned to employee"):
        super().__init__(message)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        time_logs: TimeLogRepository,
        employees: EmployeeRepository,
        computed: ComputedDtrRepository,
        *,
        strategy_factory: Optional[DayCreditStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._time_logs = time_logs
        self._employees = employees
        self._computed = computed
        self._factory = strategy_factory or DayCreditStrategyFactory()

    def _emp_objid(self, dtruserid: int) -> str:
        objid = self._employees.get_objid_by_dtruserid(dtruserid)
        if not objid:
            raise NotFoundError("Employee not found for this DTR user")
        return objid

    def schedule_for(self, emp_objid: str) -> ShiftSchedule:
        schedule = ShiftSchedule.combine(self._attendance.list_assigned_shifts(emp_objid))
        if schedule is None or not schedule.has_checkin:
            raise NoShiftAssignedError()
        return schedule

    def calculate(self, dtruserid: int, start: date, end: date) -> AttendanceResult:
        if start > end:
            raise ValidationError("Start date must not be after end date")

        emp_objid = self._emp_objid(dtruserid)
        schedule = self.schedule_for(emp_objid)

        result = compute_attendance(
            dtruserid=dtruserid,
            schedule=schedule,
            check_times=self._time_logs.list_check_times(dtruserid, start=start, end=end),
            start=start,
            end=end,
            approved=self._attendance.approved_dates(emp_objid, start=start, end=end),
            holidays=self._attendance.list_holidays(start=start, end=end),
            counts=self._attendance.exception_counts(emp_objid, start=start, end=end),
            factory=self._factory,
        )
        logger.info(
            "computed DTR for %s (%s..%s): days=%s lates=%s",
            dtruserid, start, end, result.total_days, result.total_lates,
        )
        return result

    def calculate_period(self, dtruserid: int, *, month: int, year: int, period: ComputePeriod) -> AttendanceResult:
        start, end = period_bounds(year, month, period)
        return self.calculate(dtruserid, start, end)

    def save_computed(
        self,
        dtruserid: int,
        *,
        month: int,
        year: int,
        period: ComputePeriod,
        created_by: Optional[int] = None,
        remarks: Optional[str] = None,
    ) -> int:
        emp_objid = self._emp_objid(dtruserid)
        name = month_name(month)
        existing = self._computed.find(emp_objid=emp_objid, computed_month=name, computed_year=year, period=period.value)
        if existing and existing.compute_status in ACTIVE_COMPUTE_STATUSES:
            raise ConflictError(f"DTR already computed for {name} {year} ({period.value})")

        result = self.calculate_period(dtruserid, month=month, year=year, period=period)
        compute_id = self._computed.create(
            emp_objid=emp_objid,
            computed_month=name,
            computed_year=year,
            period=period.value,
            totals={
                "total_lates": result.total_lates,
                "total_days": result.total_days,
                "total_netdays": result.net_days,
                "total_cdo": result.counts.cdo,
                "total_travels": result.counts.travels,
                "total_leaves": result.counts.leaves,
                "total_fixtimes": result.counts.fix_logs,
            },
            details=result.rows,
            created_by=created_by,
            remarks=remarks,
            status=ComputeStatus.FOR_APPROVAL.value,
        )
        logger.info("saved computed DTR %s for %s %s %s", compute_id, emp_objid, name, year)
        return compute_id

    def check_computed(self, emp_objid: str, *, month: int, year: int, period: ComputePeriod) -> Optional[ComputedDtr]:
        return self._computed.find(
            emp_objid=emp_objid, computed_month=month_name(month), computed_year=year, period=period.value
        )

    def computed_employees(self, *, month: int, year: int, period: ComputePeriod) -> List[str]:
        return list(
            self._computed.list_emp_objids(computed_month=month_name(month), computed_year=year, period=period.value)
        )


def period_query(source) -> dict:
    """``month``/``year``/``period`` keyword arguments from request args or a JSON body."""

    for key in ("computedmonth", "computedyear", "period"):
        if not source.get(key):
            raise ValidationError("computedmonth, computedyear, and period are required")
    try:
        period = ComputePeriod.parse(str(source.get("period")))
    except ValueError:
        raise ValidationError("period must be full, first or second")
    try:
        year = int(source.get("computedyear"))
    except (TypeError, ValueError):
        raise ValidationError("computedyear must be a number")
    return {"month": month_number(source.get("computedmonth")), "year": year, "period": period}
