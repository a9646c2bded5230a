from __future__ import annotations

from typing import Sequence

import pyodbc

from ..database.connection import MSSQLConnection
from ..database.mssql_base import fetchall_dict, mssql_cursor
from .model import EnrolledFinger
from .repository import FingerTemplateRepository


class MSSQLFingerTemplateRepository(FingerTemplateRepository):
    def __init__(self, conn_factory: MSSQLConnection):
        self._conn_factory = conn_factory

    def has_template(self, *, user_id: int, finger_id: int) -> bool:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT TOP 1 1
                FROM FingerTemplates
                WHERE USERID = ? AND FINGERID = ?
                  AND FINGERTEMPLATE IS NOT NULL AND DATALENGTH(FINGERTEMPLATE) > 0
                """,
                user_id, finger_id,
            )
            return cur.fetchone() is not None

    def list_enrolled(self, user_id: int) -> Sequence[EnrolledFinger]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT FUID, FINGERID, NAME,
                       DATALENGTH(FINGERTEMPLATE) AS TEMPLATE_SIZE,
                       DATALENGTH(FINGERIMAGE) AS IMAGE_SIZE,
                       CREATEDDATE
                FROM FingerTemplates
                WHERE USERID = ? AND FINGERTEMPLATE IS NOT NULL AND DATALENGTH(FINGERTEMPLATE) > 0
                ORDER BY FINGERID
                """,
                user_id,
            )
            return [
                EnrolledFinger(
                    fuid=str(r["FUID"]),
                    finger_id=int(r["FINGERID"]),
                    name=r.get("NAME"),
                    template_size=int(r.get("TEMPLATE_SIZE") or 0),
                    image_size=r.get("IMAGE_SIZE"),
                    created_date=r.get("CREATEDDATE"),
                )
                for r in fetchall_dict(cur)
            ]

    def save_template(self, *, fuid: str, user_id: int, finger_id: int, name: str, template: bytes) -> None:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO FingerTemplates (FUID, USERID, FINGERID, NAME, FINGERTEMPLATE, FINGERIMAGE, CREATEDDATE)
                VALUES (?, ?, ?, ?, ?, NULL, GETDATE())
                """,
                fuid, user_id, finger_id, (name or "")[:50], pyodbc.Binary(template),
            )

    def delete(self, *, user_id: int, finger_id: int) -> int:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM FingerTemplates WHERE USERID = ? AND FINGERID = ?", user_id, finger_id)
            return int(cur.rowcount or 0)
