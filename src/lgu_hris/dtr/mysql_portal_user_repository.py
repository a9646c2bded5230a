from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PortalUser
from .repository import PortalUserRepository


def _to_portal_user(row: dict) -> PortalUser:
    return PortalUser(
        portal_user_id=int(row["userportalid"]),
        dtruserid=int(row["dtruserid"]),
        emp_objid=row.get("emp_objid"),
        dtrname=row.get("dtrname") or "",
        username=row.get("username"),
        pin=str(row.get("pin") or ""),
        email=row.get("emailaddress"),
        status=int(row.get("status") if row.get("status") is not None else 1),
    )


class MySQLPortalUserRepository(PortalUserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_dtruserid(self, dtruserid: int) -> Optional[PortalUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT userportalid, emp_objid, dtruserid, dtrname, username, pin, emailaddress, status
                FROM sysusers_portal
                WHERE dtruserid=%s
                """,
                (dtruserid,),
            )
            row = fetchone(cur)
            return _to_portal_user(row) if row else None

    def list(self) -> Sequence[PortalUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT userportalid, emp_objid, dtruserid, dtrname, username, pin, emailaddress, status
                FROM sysusers_portal
                ORDER BY dtrname
                """
            )
            return [_to_portal_user(r) for r in fetchall(cur)]

    def create(self, *, dtruserid, emp_objid, dtrname, username, pin, email, status, created_by) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sysusers_portal(emp_objid, dtruserid, dtrname, username, pin, emailaddress, status,
                                            createdby, createddate, updateddate)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,NOW(),NOW())
                """,
                (emp_objid, dtruserid, dtrname, username, pin, email, status, created_by),
            )
            return int(cur.lastrowid)

    def update(self, *, dtruserid, emp_objid, dtrname, username, pin, email, status) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sysusers_portal
                SET username=%s, pin=%s, emailaddress=%s, status=%s, dtrname=%s, emp_objid=%s, updateddate=NOW()
                WHERE dtruserid=%s
                """,
                (username, pin, email, status, dtrname, emp_objid, dtruserid),
            )
            return cur.rowcount > 0

    def delete(self, dtruserid: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sysusers_portal WHERE dtruserid=%s", (dtruserid,))
            return cur.rowcount > 0
