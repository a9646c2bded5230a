from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import ApprovedDates, AssignedShift, ComputedDtr, DailyRecord, ExceptionCounts, Holiday


class AttendanceRepository(Protocol):
    """HR201 inputs to the DTR computation."""

    def list_assigned_shifts(self, emp_objid: str) -> Sequence[AssignedShift]:
        raise NotImplementedError

    def list_holidays(self, *, start: date, end: date) -> Sequence[Holiday]:
        raise NotImplementedError

    def approved_dates(self, emp_objid: str, *, start: date, end: date) -> ApprovedDates:
        raise NotImplementedError

    def exception_counts(self, emp_objid: str, *, start: date, end: date) -> ExceptionCounts:
        raise NotImplementedError


class TimeLogRepository(Protocol):
    """DTR CHECKINOUT reads."""

    def list_check_times(self, user_id: int, *, start: date, end: date) -> Sequence[datetime]:
        raise NotImplementedError


class ComputedDtrRepository(Protocol):
    def create(
        self,
        *,
        emp_objid: str,
        computed_month: str,
        computed_year: int,
        period: str,
        totals: dict,
        details: Sequence[DailyRecord],
        created_by: Optional[int],
        remarks: Optional[str],
        status: str,
    ) -> int:
        raise NotImplementedError

    def find(self, *, emp_objid: str, computed_month: str, computed_year: int, period: str) -> Optional[ComputedDtr]:
        raise NotImplementedError

    def list_emp_objids(self, *, computed_month: str, computed_year: int, period: str) -> Sequence[str]:
        raise NotImplementedError

    def list_for_period(self, *, computed_month: str, computed_year: int, period: str) -> Sequence[dict]:
        """Computed rows joined with employee names and current monthly rate."""
        raise NotImplementedError
