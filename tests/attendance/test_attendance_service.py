from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

import pytest

from lgu_hris.attendance.model import ApprovedDates, AssignedShift, ComputedDtr, ExceptionCounts
from lgu_hris.attendance.service import (
    ACTIVE_COMPUTE_STATUSES,
    AttendanceService,
    NoShiftAssignedError,
    month_number,
    period_bounds,
    period_query,
)
from lgu_hris.core.enums import ComputePeriod, ComputeStatus, ShiftTimeMode
from lgu_hris.core.exceptions import ConflictError, NotFoundError, ValidationError


@dataclass
class FakeAttendanceRepo:
    shifts: dict[str, list] = field(default_factory=dict)

    def list_assigned_shifts(self, emp_objid: str):
        return self.shifts.get(emp_objid, [])

    def list_holidays(self, *, start, end):
        return []

    def approved_dates(self, emp_objid, *, start, end):
        return ApprovedDates(cdo=frozenset({date(2025, 3, 4)}))

    def exception_counts(self, emp_objid, *, start, end):
        return ExceptionCounts(cdo=1)


@dataclass
class FakeTimeLogs:
    logs: list[datetime] = field(default_factory=list)
    calls: list = field(default_factory=list)

    def list_check_times(self, user_id, *, start, end):
        self.calls.append((user_id, start, end))
        return [t for t in self.logs if start <= t.date() <= end]


@dataclass
class FakeEmployees:
    dtr_map: dict[int, str] = field(default_factory=lambda: {7: "E1", 8: "E2"})

    def get_objid_by_dtruserid(self, dtruserid: int) -> Optional[str]:
        return self.dtr_map.get(dtruserid)


@dataclass
class InMemoryComputed:
    saved: list[dict] = field(default_factory=list)

    def create(self, **row) -> int:
        self.saved.append(row)
        return len(self.saved)

    def find(self, *, emp_objid, computed_month, computed_year, period) -> Optional[ComputedDtr]:
        for i, row in reversed(list(enumerate(self.saved, start=1))):
            key = (row["emp_objid"], row["computed_month"], row["computed_year"], row["period"])
            if key == (emp_objid, computed_month, computed_year, period):
                t = row["totals"]
                return ComputedDtr(i, emp_objid, computed_month, computed_year, period,
                                   t["total_lates"], t["total_days"], t["total_netdays"], row["status"])
        return None

    def list_emp_objids(self, *, computed_month, computed_year, period):
        return [r["emp_objid"] for r in self.saved
                if (r["computed_month"], r["computed_year"], r["period"]) == (computed_month, computed_year, period)
                and r["status"] in ACTIVE_COMPUTE_STATUSES]

    def list_for_period(self, **kwargs):
        return []


REGULAR = AssignedShift(1, "Regular", ShiftTimeMode.AMPM, checkin=time(8, 0), checkout=time(17, 0))


def _service(logs=(), computed=None):
    time_logs = FakeTimeLogs(list(logs))
    service = AttendanceService(
        FakeAttendanceRepo({"E1": [REGULAR]}),
        time_logs,
        FakeEmployees(),
        computed if computed is not None else InMemoryComputed(),
    )
    return service, time_logs


def test_calculate_reads_logs_for_the_range():
    service, time_logs = _service([datetime(2025, 3, 3, 8, 5), datetime(2025, 3, 3, 17, 0)])

    result = service.calculate(7, date(2025, 3, 3), date(2025, 3, 4))

    assert time_logs.calls == [(7, date(2025, 3, 3), date(2025, 3, 4))]
    assert [r.days for r in result.rows] == [1.0, 1.0]
    assert result.rows[1].hascdo
    assert result.total_lates == 5
    assert result.totals()["cdoCount"] == 1


def test_calculate_without_shift_or_employee():
    service, _ = _service()
    with pytest.raises(NoShiftAssignedError):
        service.calculate(8, date(2025, 3, 3), date(2025, 3, 4))
    with pytest.raises(NotFoundError):
        service.calculate(99, date(2025, 3, 3), date(2025, 3, 4))
    with pytest.raises(ValidationError):
        service.calculate(7, date(2025, 3, 4), date(2025, 3, 3))


def test_save_computed_once_per_period():
    computed = InMemoryComputed()
    service, time_logs = _service(computed=computed)

    compute_id = service.save_computed(7, month=2, year=2024, period=ComputePeriod.SECOND, created_by=2)

    assert compute_id == 1
    row = computed.saved[0]
    assert row["computed_month"] == "February"
    assert row["period"] == "2nd Half"
    assert row["status"] == "For Approval"
    assert row["totals"]["total_cdo"] == 1
    assert len(row["details"]) == 14
    assert time_logs.calls[0][1:] == (date(2024, 2, 16), date(2024, 2, 29))

    with pytest.raises(ConflictError):
        service.save_computed(7, month=2, year=2024, period=ComputePeriod.SECOND)
    assert service.check_computed("E1", month=2, year=2024, period=ComputePeriod.SECOND).compute_status == "For Approval"
    assert service.check_computed("E1", month=2, year=2024, period=ComputePeriod.FIRST) is None
    assert service.computed_employees(month=2, year=2024, period=ComputePeriod.SECOND) == ["E1"]


def test_rejected_computation_can_be_recomputed():
    computed = InMemoryComputed()
    service, _ = _service(computed=computed)
    service.save_computed(7, month=2, year=2024, period=ComputePeriod.SECOND)
    computed.saved[0]["status"] = ComputeStatus.REJECTED.value

    assert service.computed_employees(month=2, year=2024, period=ComputePeriod.SECOND) == []

    compute_id = service.save_computed(7, month=2, year=2024, period=ComputePeriod.SECOND)

    assert compute_id == 2
    assert service.check_computed("E1", month=2, year=2024, period=ComputePeriod.SECOND).compute_id == 2
    assert service.computed_employees(month=2, year=2024, period=ComputePeriod.SECOND) == ["E1"]


def test_period_bounds():
    assert period_bounds(2025, 4, ComputePeriod.FIRST) == (date(2025, 4, 1), date(2025, 4, 15))
    assert period_bounds(2025, 4, ComputePeriod.SECOND) == (date(2025, 4, 16), date(2025, 4, 30))
    assert period_bounds(2025, 4, ComputePeriod.FULL) == (date(2025, 4, 1), date(2025, 4, 30))


def test_period_query_accepts_names_and_aliases():
    assert period_query({"computedmonth": "march", "computedyear": "2025", "period": "first"}) == {
        "month": 3,
        "year": 2025,
        "period": ComputePeriod.FIRST,
    }
    assert period_query({"computedmonth": "12", "computedyear": 2025, "period": "Full Month"})["month"] == 12
    assert month_number("September") == 9


@pytest.mark.parametrize(
    "query",
    [
        {"computedyear": "2025", "period": "full"},
        {"computedmonth": "13", "computedyear": "2025", "period": "full"},
        {"computedmonth": "March", "computedyear": "2025", "period": "third"},
        {"computedmonth": "March", "computedyear": "soon", "period": "full"},
    ],
)
def test_period_query_rejects(query):
    with pytest.raises(ValidationError):
        period_query(query)
