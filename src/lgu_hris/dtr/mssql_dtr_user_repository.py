from __future__ import annotations

from typing import Optional, Sequence

import pyodbc

from ..database.connection import MSSQLConnection
from ..database.mssql_base import fetchall_dict, fetchone_dict, mssql_cursor
from .model import DTRUser, DTRUserInput
from .repository import DTRUserRepository

_SELECT = """
    SELECT USERID, BADGENUMBER, NAME, DEFAULTDEPTID, SSN, TITLE, GENDER, BIRTHDAY, HIREDDAY,
           STREET, privilege, Appointment, InheritDeptSchClass,
           CASE WHEN PHOTO IS NULL THEN 0 ELSE 1 END AS HASPHOTO
    FROM USERINFO
"""

_WRITABLE = (
    "NAME", "BADGENUMBER", "DEFAULTDEPTID", "SSN", "TITLE", "GENDER", "BIRTHDAY", "HIREDDAY",
    "STREET", "privilege", "Appointment", "InheritDeptSchClass",
)


def _to_user(row: dict) -> DTRUser:
    def _date(value):
        return value.date() if hasattr(value, "date") and callable(value.date) else value

    return DTRUser(
        user_id=int(row["USERID"]),
        badge_number=str(row.get("BADGENUMBER") or ""),
        name=row.get("NAME") or "",
        default_dept_id=row.get("DEFAULTDEPTID"),
        ssn=row.get("SSN"),
        title=row.get("TITLE"),
        gender=row.get("GENDER"),
        birthday=_date(row.get("BIRTHDAY")),
        hired_day=_date(row.get("HIREDDAY")),
        street=row.get("STREET"),
        privilege=int(row.get("privilege") or 0),
        appointment=row.get("Appointment"),
        inherit_dept_sch_class=row.get("InheritDeptSchClass"),
        has_photo=bool(row.get("HASPHOTO")),
    )


def _values(data: DTRUserInput) -> list:
    return [
        data.name,
        data.badge_number,
        data.default_dept_id,
        data.ssn,
        data.title,
        data.gender,
        data.birthday,
        data.hired_day,
        data.street,
        int(data.privilege or 0),
        data.appointment,
        data.inherit_dept_sch_class,
    ]


class MSSQLDTRUserRepository(DTRUserRepository):
    def __init__(self, conn_factory: MSSQLConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: int) -> Optional[DTRUser]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE USERID = ?", user_id)
            row = fetchone_dict(cur)
            return _to_user(row) if row else None

    def list(self, *, search: Optional[str] = None) -> Sequence[DTRUser]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            if search:
                like = f"%{search}%"
                cur.execute(
                    _SELECT + " WHERE NAME LIKE ? OR BADGENUMBER LIKE ? OR CAST(USERID AS VARCHAR(20)) LIKE ? ORDER BY NAME",
                    like, like, like,
                )
            else:
                cur.execute(_SELECT + " ORDER BY NAME")
            return [_to_user(r) for r in fetchall_dict(cur)]

    def find_duplicates(
        self, *, user_id: Optional[int], badge_number: Optional[str], exclude_user_id: Optional[int]
    ) -> Sequence[dict]:
        clauses = []
        params: list = []
        if user_id is not None:
            clauses.append("USERID = ?")
            params.append(user_id)
        if badge_number:
            clauses.append("BADGENUMBER = ?")
            params.append(badge_number)
        if not clauses:
            return []
        query = f"SELECT USERID, BADGENUMBER FROM USERINFO WHERE ({' OR '.join(clauses)})"
        if exclude_user_id is not None:
            query += " AND USERID <> ?"
            params.append(exclude_user_id)
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(query, *params)
            return fetchall_dict(cur)

    def create(self, data: DTRUserInput) -> int:
        columns = list(_WRITABLE)
        values = _values(data)
        if data.password_hash:
            columns.append("PASSWORD")
            values.append(data.password_hash)
        if data.photo:
            columns.append("PHOTO")
            values.append(pyodbc.Binary(data.photo))
        placeholders = ", ".join("?" for _ in columns)
        with mssql_cursor(self._conn_factory) as (_, cur):
            # USERID is an IDENTITY column.
            cur.execute(
                f"INSERT INTO USERINFO ({', '.join(columns)}) OUTPUT INSERTED.USERID VALUES ({placeholders})",
                *values,
            )
            return int(cur.fetchone()[0])

    def update(self, user_id: int, data: DTRUserInput) -> bool:
        assignments = [f"{c} = ?" for c in _WRITABLE]
        values = _values(data)
        if data.password_hash:
            assignments.append("PASSWORD = ?")
            values.append(data.password_hash)
        if data.photo:
            assignments.append("PHOTO = ?")
            values.append(pyodbc.Binary(data.photo))
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE USERINFO SET {', '.join(assignments)} WHERE USERID = ?", *values, user_id)
            return cur.rowcount > 0

    def delete(self, user_id: int) -> bool:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM USERINFO WHERE USERID = ?", user_id)
            return cur.rowcount > 0

    def set_ssn(self, user_id: int, ssn: str) -> bool:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE USERINFO SET SSN = ? WHERE USERID = ?", ssn, user_id)
            return cur.rowcount > 0

    def get_photo(self, user_id: int) -> Optional[bytes]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT PHOTO FROM USERINFO WHERE USERID = ?", user_id)
            row = cur.fetchone()
            return bytes(row[0]) if row and row[0] is not None else None
