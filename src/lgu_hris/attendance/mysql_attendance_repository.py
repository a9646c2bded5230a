from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ComputeStatus, ShiftTimeMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, normalize_mysql_time
from .model import ApprovedDates, AssignedShift, ComputedDtr, ExceptionCounts, Holiday
from .repository import AttendanceRepository, ComputedDtrRepository

# Approved exception sources: (date column, FROM/WHERE body, distinct key for counting).
# Every body takes (emp_objid, start, end).
EXCEPTION_SOURCES = {
    "travels": (
        "etd.traveldate",
        """
        FROM employee_travels_dates etd
        INNER JOIN employee_travels et ON et.objid = etd.travel_objid
        WHERE etd.emp_objid = %s
          AND UPPER(COALESCE(et.travelstatus, '')) = 'APPROVED'
          AND DATE(etd.traveldate) BETWEEN %s AND %s
        """,
        "DISTINCT etd.travel_objid",
    ),
    "cdo": (
        "u.cdodate",
        """
        FROM employee_cdo_usedates u
        INNER JOIN employee_cdo c ON c.id = u.cdo_id
        WHERE c.emp_objid = %s
          AND UPPER(COALESCE(u.cdodatestatus, c.cdostatus, '')) = 'APPROVED'
          AND DATE(u.cdodate) BETWEEN %s AND %s
        """,
        "*",
    ),
    "fix_logs": (
        "checktimedate",
        """
        FROM employee_fixchecktimes
        WHERE emp_objid = %s
          AND UPPER(COALESCE(fixstatus, '')) = 'APPROVED'
          AND DATE(checktimedate) BETWEEN %s AND %s
        """,
        "*",
    ),
    "locators": (
        "locatordate",
        """
        FROM employee_locators
        WHERE emp_objid = %s AND locstatus = 'Approved'
          AND DATE(locatordate) BETWEEN %s AND %s
        """,
        "*",
    ),
    "leaves": (
        "eltd.leavedate",
        """
        FROM employee_leave_trans elt
        INNER JOIN employee_leave_trans_details eltd ON elt.objid = eltd.leave_objid
        WHERE elt.emp_objid = %s
          AND UPPER(COALESCE(elt.leavestatus, '')) = 'APPROVED'
          AND DATE(eltd.leavedate) BETWEEN %s AND %s
        """,
        "DISTINCT elt.objid",
    ),
}


def _to_shift(row: dict) -> AssignedShift:
    return AssignedShift(
        shift_id=int(row["shift_id"]),
        name=row.get("shiftname") or "",
        mode=ShiftTimeMode(str(row.get("shifttimemode") or "AMPM").upper()),
        checkin=normalize_mysql_time(row.get("shift_checkin")),
        checkin_start=normalize_mysql_time(row.get("shift_checkin_start")),
        checkin_end=normalize_mysql_time(row.get("shift_checkin_end")),
        checkout=normalize_mysql_time(row.get("shift_checkout")),
        checkout_start=normalize_mysql_time(row.get("shift_checkout_start")),
        checkout_end=normalize_mysql_time(row.get("shift_checkout_end")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_assigned_shifts(self, emp_objid: str) -> Sequence[AssignedShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id AS shift_id, s.shiftname, s.shifttimemode,
                       s.shift_checkin, s.shift_checkin_start, s.shift_checkin_end,
                       s.shift_checkout, s.shift_checkout_start, s.shift_checkout_end
                FROM employee_assignedshifts a
                JOIN shiftscheduletypes s ON s.id = a.shiftid
                WHERE a.emp_objid = %s AND a.is_used = 1
                ORDER BY a.createddate DESC
                """,
                (emp_objid,),
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def list_holidays(self, *, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holidayname, holidaydate, isrecurring
                FROM holidays
                WHERE status = 1
                  AND (isrecurring = 1 OR (isrecurring = 0 AND DATE(holidaydate) BETWEEN %s AND %s))
                """,
                (start, end),
            )
            rows = fetchall(cur)

        holidays = []
        for r in rows:
            holiday_date = normalize_mysql_date(r.get("holidaydate"))
            if holiday_date is None:
                continue
            holidays.append(
                Holiday(
                    name=r.get("holidayname") or "Holiday",
                    holiday_date=holiday_date,
                    recurring=str(r.get("isrecurring")).strip().lower() in ("1", "true", "yes"),
                )
            )
        return holidays

    def approved_dates(self, emp_objid: str, *, start: date, end: date) -> ApprovedDates:
        found = {}
        with db_cursor(self._conn_factory) as (_, cur):
            for name, (column, body, _) in EXCEPTION_SOURCES.items():
                cur.execute(f"SELECT DISTINCT DATE({column}) AS d {body}", (emp_objid, start, end))
                found[name] = frozenset(d for d in (normalize_mysql_date(r.get("d")) for r in fetchall(cur)) if d)
        return ApprovedDates(**found)

    def exception_counts(self, emp_objid: str, *, start: date, end: date) -> ExceptionCounts:
        counts = {}
        with db_cursor(self._conn_factory) as (_, cur):
            for name, (_, body, key) in EXCEPTION_SOURCES.items():
                cur.execute(f"SELECT COUNT({key}) AS n {body}", (emp_objid, start, end))
                row = fetchone(cur)
                counts[name] = int(row["n"]) if row else 0
        return ExceptionCounts(**counts)


def _to_computed(row: dict) -> ComputedDtr:
    return ComputedDtr(
        compute_id=int(row["computeid"]),
        emp_objid=row["emp_objid"],
        computed_month=row["computedmonth"],
        computed_year=int(row["computedyear"]),
        period=row["period"],
        total_lates=float(row.get("total_lates") or 0),
        total_days=float(row.get("total_days") or 0),
        total_netdays=float(row.get("total_netdays") or 0),
        compute_status=row.get("computestatus") or "",
    )


_ACTIVE_STATUSES = (ComputeStatus.FOR_APPROVAL.value, ComputeStatus.APPROVED.value)


class MySQLComputedDtrRepository(ComputedDtrRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, emp_objid, computed_month, computed_year, period, totals, details, created_by, remarks, status) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_computeddtr (
                    emp_objid, computedmonth, computedyear, period,
                    total_lates, total_days, total_netdays,
                    total_cdo, total_travels, total_leaves, total_fixtimes,
                    createdby, createddate, computeremarks, computestatus
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, NOW(), %s, %s)
                """,
                (
                    emp_objid, computed_month, computed_year, period,
                    totals.get("total_lates", 0), totals.get("total_days", 0), totals.get("total_netdays", 0),
                    totals.get("total_cdo", 0), totals.get("total_travels", 0),
                    totals.get("total_leaves", 0), totals.get("total_fixtimes", 0),
                    created_by, remarks, status,
                ),
            )
            compute_id = int(cur.lastrowid)
            cur.executemany(
                """
                INSERT INTO employee_computeddtr_details (
                    computeid, dtruserid, dtrdate, am_checkin, am_checkout, pm_checkin, pm_checkout,
                    ot_checkin, ot_checkout, hascdo, hasleave, hastravel, haslocator, hasfixlogs
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, NULL, NULL, %s, %s, %s, %s, %s)
                """,
                [
                    (
                        compute_id, d.dtruserid, d.day,
                        d.punches.am_checkin, d.punches.am_checkout, d.punches.pm_checkin, d.punches.pm_checkout,
                        int(d.hascdo), int(d.hasleave), int(d.hastravel), int(d.haslocator), int(d.hasfixlogs),
                    )
                    for d in details
                ],
            )
            return compute_id

    def find(self, *, emp_objid, computed_month, computed_year, period) -> Optional[ComputedDtr]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM employee_computeddtr
                WHERE emp_objid = %s AND computedmonth = %s AND computedyear = %s AND period = %s
                ORDER BY computeid DESC
                LIMIT 1
                """,
                (emp_objid, computed_month, computed_year, period),
            )
            row = fetchone(cur)
            return _to_computed(row) if row else None

    def list_emp_objids(self, *, computed_month, computed_year, period) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT emp_objid FROM employee_computeddtr
                WHERE computedmonth = %s AND computedyear = %s AND period = %s
                  AND computestatus IN (%s, %s)
                """,
                (computed_month, computed_year, period, *_ACTIVE_STATUSES),
            )
            return [r["emp_objid"] for r in fetchall(cur)]

    def list_for_period(self, *, computed_month, computed_year, period) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.computeid, c.emp_objid, c.total_lates, c.total_days, c.total_netdays,
                       c.computestatus,
                       e.surname, e.firstname, e.middlename, e.extension, e.idno,
                       cur.position AS position_title,
                       COALESCE(cur.salary, 0) AS monthly_rate,
                       COALESCE(cur.dailywage, 0) AS daily_wage
                FROM employee_computeddtr c
                INNER JOIN employees e ON e.objid = c.emp_objid
                LEFT JOIN employee_designation cur ON cur.emp_objid = c.emp_objid AND cur.ispresent = 1
                WHERE c.computedmonth = %s AND c.computedyear = %s AND c.period = %s
                  AND c.computestatus IN (%s, %s)
                ORDER BY e.surname, e.firstname
                """,
                (computed_month, computed_year, period, *_ACTIVE_STATUSES),
            )
            return fetchall(cur)
