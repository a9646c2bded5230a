from __future__ import annotations

from typing import Optional, Sequence

from ..common.names import format_employee_name
from ..core.enums import ShiftTimeMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ShiftAssignment, ShiftType
from .repository import ShiftAssignmentRepository, ShiftTypeRepository

_SHIFT_COLUMNS = """
    id, shiftname, shifttimemode,
    shift_checkin, shift_checkin_start, shift_checkin_end,
    shift_checkout, shift_checkout_start, shift_checkout_end,
    is_ot, credits
"""


def _to_shift(r: dict) -> ShiftType:
    mode = str(r.get("shifttimemode") or "AM").upper()
    return ShiftType(
        shift_id=int(r["id"]),
        name=r.get("shiftname") or "",
        mode=ShiftTimeMode(mode) if mode in ShiftTimeMode.__members__ else ShiftTimeMode.AM,
        checkin=normalize_mysql_time(r.get("shift_checkin")),
        checkin_start=normalize_mysql_time(r.get("shift_checkin_start")),
        checkin_end=normalize_mysql_time(r.get("shift_checkin_end")),
        checkout=normalize_mysql_time(r.get("shift_checkout")),
        checkout_start=normalize_mysql_time(r.get("shift_checkout_start")),
        checkout_end=normalize_mysql_time(r.get("shift_checkout_end")),
        is_ot=bool(r.get("is_ot")),
        credits=float(r["credits"]) if r.get("credits") is not None else None,
    )


def _shift_params(s: ShiftType) -> tuple:
    return (
        s.name, s.mode.value,
        s.checkin, s.checkin_start, s.checkin_end,
        s.checkout, s.checkout_start, s.checkout_end,
        int(s.is_ot), s.credits,
    )


class MySQLShiftTypeRepository(ShiftTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ShiftType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHIFT_COLUMNS} FROM shiftscheduletypes ORDER BY shiftname")
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, shift_id: int) -> Optional[ShiftType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHIFT_COLUMNS} FROM shiftscheduletypes WHERE id=%s", (shift_id,))
            r = fetchone(cur)
            return _to_shift(r) if r else None

    def create(self, shift: ShiftType) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shiftscheduletypes (
                    shiftname, shifttimemode,
                    shift_checkin, shift_checkin_start, shift_checkin_end,
                    shift_checkout, shift_checkout_start, shift_checkout_end,
                    is_ot, credits
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                _shift_params(shift),
            )
            return int(cur.lastrowid)

    def update(self, shift: ShiftType) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shiftscheduletypes
                SET shiftname=%s, shifttimemode=%s,
                    shift_checkin=%s, shift_checkin_start=%s, shift_checkin_end=%s,
                    shift_checkout=%s, shift_checkout_start=%s, shift_checkout_end=%s,
                    is_ot=%s, credits=%s
                WHERE id=%s
                """,
                (*_shift_params(shift), shift.shift_id),
            )
            return cur.rowcount > 0

    def delete(self, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shiftscheduletypes WHERE id=%s", (shift_id,))
            return cur.rowcount > 0


def _to_assignment(r: dict) -> ShiftAssignment:
    return ShiftAssignment(
        objid=r["objid"],
        emp_objid=r["emp_objid"],
        shift_id=int(r["shiftid"]),
        is_used=bool(r.get("is_used")),
        created_by=int(r["createdby"]) if r.get("createdby") is not None else None,
        created_date=r.get("createddate"),
        employee_name=format_employee_name(
            r.get("surname"), r.get("firstname"), r.get("middlename"), r.get("extension")
        ),
        shift_name=r.get("shiftname"),
        shift_mode=r.get("shifttimemode"),
        created_by_username=r.get("createdby_username"),
    )


_ASSIGNMENT_SELECT = """
    SELECT a.objid, a.emp_objid, a.shiftid, a.is_used, a.createdby, a.createddate,
           e.surname, e.firstname, e.middlename, e.extension,
           s.shiftname, s.shifttimemode,
           su.username AS createdby_username
    FROM employee_assignedshifts a
    LEFT JOIN employees e ON e.objid = a.emp_objid
    LEFT JOIN shiftscheduletypes s ON s.id = a.shiftid
    LEFT JOIN sysusers su ON su.id = a.createdby
"""


class MySQLShiftAssignmentRepository(ShiftAssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, emp_objid: Optional[str] = None) -> Sequence[ShiftAssignment]:
        where, params = ("WHERE a.emp_objid=%s", (emp_objid,)) if emp_objid else ("", ())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_ASSIGNMENT_SELECT} {where} ORDER BY e.surname, e.firstname, a.createddate DESC",
                params,
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def get(self, objid: str) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_ASSIGNMENT_SELECT} WHERE a.objid=%s", (objid,))
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def create(self, assignment: ShiftAssignment) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_assignedshifts (objid, emp_objid, shiftid, is_used, createdby, createddate)
                VALUES (%s, %s, %s, %s, %s, NOW())
                """,
                (assignment.objid, assignment.emp_objid, assignment.shift_id,
                 int(assignment.is_used), assignment.created_by),
            )

    def update(self, objid: str, *, shift_id: Optional[int] = None, is_used: Optional[bool] = None) -> bool:
        sets, params = [], []
        if shift_id is not None:
            sets.append("shiftid=%s")
            params.append(shift_id)
        if is_used is not None:
            sets.append("is_used=%s")
            params.append(int(is_used))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employee_assignedshifts SET {', '.join(sets)} WHERE objid=%s", (*params, objid))
            return cur.rowcount > 0

    def delete(self, objid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employee_assignedshifts WHERE objid=%s", (objid,))
            return cur.rowcount > 0

    def assign_to_unassigned(self, *, shift_id: int, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_assignedshifts (objid, emp_objid, shiftid, is_used, createdby, createddate)
                SELECT UUID(), e.objid, %s, 1, %s, NOW()
                FROM employees e
                LEFT JOIN employee_assignedshifts a ON a.emp_objid = e.objid AND a.shiftid = %s
                WHERE a.emp_objid IS NULL
                """,
                (shift_id, created_by, shift_id),
            )
            return int(cur.rowcount or 0)
