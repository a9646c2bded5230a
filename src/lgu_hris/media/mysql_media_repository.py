from __future__ import annotations

from typing import Optional

from ..core.enums import MediaKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import MediaRepository


class MySQLMediaRepository(MediaRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_paths(self, emp_objid: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT emp_objid, photo_path, signature_path, thumb_path, date_accomplished
                FROM employees_media
                WHERE emp_objid=%s
                """,
                (emp_objid,),
            )
            return fetchone(cur)

    def set_path(self, emp_objid: str, kind: MediaKind, path: Optional[str]) -> None:
        # Column name comes from the enum, never from request data.
        column = kind.column
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT emp_objid FROM employees_media WHERE emp_objid=%s", (emp_objid,))
            if fetchone(cur):
                cur.execute(f"UPDATE employees_media SET {column}=%s WHERE emp_objid=%s", (path, emp_objid))
            else:
                cur.execute(f"INSERT INTO employees_media(emp_objid, {column}) VALUES(%s,%s)", (emp_objid, path))
