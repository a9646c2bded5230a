from datetime import date, datetime, time

from lgu_hris.attendance.computation import compute_attendance
from lgu_hris.attendance.model import ApprovedDates, AssignedShift, ExceptionCounts, Holiday, ShiftSchedule
from lgu_hris.attendance.windows import DayWindows, select_punches
from lgu_hris.core.enums import ShiftTimeMode

REGULAR = ShiftSchedule(
    name="Regular",
    am_checkin=time(8, 0),
    am_checkout=time(12, 0),
    pm_checkin=time(13, 0),
    pm_checkout=time(17, 0),
)


def _logs(day: date, *hhmm: str):
    out = []
    for value in hhmm:
        parts = [int(p) for p in value.split(":")]
        out.append(datetime(day.year, day.month, day.day, *parts))
    return out


def test_week_with_lates_undertime_travel_and_weekend():
    logs = (
        _logs(date(2025, 3, 3), "08:10", "12:01", "12:55", "17:05", "18:00:30")
        + _logs(date(2025, 3, 4), "07:55", "17:30")
        + _logs(date(2025, 3, 5), "07:50", "11:30")
    )

    result = compute_attendance(
        dtruserid=7,
        schedule=REGULAR,
        check_times=logs,
        start=date(2025, 3, 3),
        end=date(2025, 3, 9),
        approved=ApprovedDates(travels=frozenset({date(2025, 3, 6)}), leaves=frozenset({date(2025, 3, 7)})),
        counts=ExceptionCounts(travels=1, leaves=1),
    )

    assert [r.days for r in result.rows] == [1.0, 1.0, 0.5, 1.0, 0.0, 0.0, 0.0]
    assert [r.late for r in result.rows] == [10, 0, 30, 0, 0, 0, 0]
    assert result.total_days == 3.5
    assert result.total_lates == 40
    assert result.net_days == 3.4167
    assert result.equivalent_days_deducted == 0.08
    assert result.logs_count == 9

    monday = result.rows[0].to_dict()
    assert monday["am_checkin"] == "08:10"
    assert monday["pm_checkout"] == "18:00"
    assert result.rows[3].to_dict()["hastravel"] == 1
    # Leave is flagged but earns nothing on its own.
    assert result.rows[4].hasleave and result.rows[4].days == 0.0
    assert result.rows[5].is_weekend

    totals = result.totals()
    assert totals["travelsCount"] == 1
    assert totals["leavesCount"] == 1
    assert result.to_dict()["shiftSchedule"]["SHIFT_AMCHECKIN"] == "08:00"


def test_holiday_without_logs_is_zero_but_worked_holiday_counts():
    holidays = [Holiday("Christmas Day", date(2000, 12, 25), recurring=True), Holiday("Rizal Day", date(2030, 12, 30))]

    result = compute_attendance(
        dtruserid=7,
        schedule=REGULAR,
        check_times=_logs(date(2030, 12, 30), "07:59", "17:00"),
        start=date(2030, 12, 25),
        end=date(2030, 12, 30),
        holidays=holidays,
    )

    christmas, worked = result.rows[0], result.rows[-1]
    assert christmas.holiday == "Christmas Day"
    assert christmas.days == 0.0
    assert worked.holiday == "Rizal Day"
    assert worked.days == 1.0


def test_explicit_windows_ignore_punches_outside_them():
    schedule = ShiftSchedule(
        am_checkin=time(8, 0),
        am_checkin_start=time(7, 0),
        am_checkin_end=time(9, 0),
        pm_checkout=time(17, 0),
    )
    punches = select_punches(_logs(date(2025, 3, 3), "06:30", "07:15", "16:45"), DayWindows.for_schedule(schedule))

    assert punches.am_checkin == time(7, 15)
    assert punches.am_checkout is None
    assert punches.pm_checkout == time(16, 45)


def test_pm_only_shift_gets_half_day():
    schedule = ShiftSchedule.combine(
        [AssignedShift(2, "Afternoon", ShiftTimeMode.PM, checkin=time(13, 0), checkout=time(17, 0))]
    )
    result = compute_attendance(
        dtruserid=7,
        schedule=schedule,
        check_times=_logs(date(2025, 3, 3), "08:00", "13:05", "17:00"),
        start=date(2025, 3, 3),
        end=date(2025, 3, 3),
    )

    row = result.rows[0]
    assert row.punches.am_checkin is None
    assert row.late == 5
    assert row.days == 0.5


def test_combine_takes_first_am_and_pm_shift():
    shifts = [
        AssignedShift(1, "Morning", ShiftTimeMode.AM, checkin=time(7, 0), checkout=time(11, 0)),
        AssignedShift(2, "Regular", ShiftTimeMode.AMPM, checkin=time(8, 0), checkout=time(17, 0)),
        AssignedShift(3, "Morning", ShiftTimeMode.AM, checkin=time(9, 0), checkout=time(12, 0)),
    ]

    schedule = ShiftSchedule.combine(shifts)

    assert schedule.name == "Morning / Regular"
    assert schedule.am_checkin == time(7, 0)
    assert schedule.pm_checkin == time(8, 0)
    assert ShiftSchedule.combine([]) is None
