from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..database.connection import MSSQLConnection
from ..database.mssql_base import mssql_cursor
from .repository import TimeLogRepository


class MSSQLTimeLogRepository(TimeLogRepository):
    def __init__(self, conn_factory: MSSQLConnection):
        self._conn_factory = conn_factory

    def list_check_times(self, user_id: int, *, start: date, end: date) -> Sequence[datetime]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT CHECKTIME
                FROM CHECKINOUT
                WHERE USERID = ?
                  AND CAST(CHECKTIME AS DATE) BETWEEN ? AND ?
                ORDER BY CHECKTIME
                """,
                user_id, start, end,
            )
            return [row[0] for row in cur.fetchall()]
