from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import RolePermission, SysUser
from .repository import PermissionRepository, UserRepository


def _to_user(row: dict) -> SysUser:
    return SysUser(
        user_id=int(row["id"]),
        username=row["username"],
        password_hash=row.get("password") or "",
        usertype_id=int(row["usertype"]) if row.get("usertype") is not None else None,
        usertype_name=row.get("typename"),
        emp_objid=row.get("emp_objid"),
        is_active=int(row.get("status") or 0) == 1,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_by_username(self, username: str) -> Optional[SysUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.username, s.password, s.usertype, s.emp_objid, s.status, u.typename
                FROM sysusers s
                LEFT JOIN usertypes u ON s.usertype = u.id
                WHERE s.username=%s AND s.status=1
                LIMIT 1
                """,
                (username,),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[SysUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.username, s.password, s.usertype, s.emp_objid, s.status, u.typename
                FROM sysusers s
                LEFT JOIN usertypes u ON s.usertype = u.id
                WHERE s.id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_display_name(self, emp_objid: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT surname, firstname, middlename, extension FROM employees WHERE objid=%s LIMIT 1",
                (emp_objid,),
            )
            return fetchone(cur)


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_component_id(self, component_name: str) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM syscomponents WHERE componentname=%s LIMIT 1", (component_name,))
            row = fetchone(cur)
            return int(row["id"]) if row else None

    def get_role_permission(self, *, role_id: int, component_id: int) -> Optional[RolePermission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT canread, cancreate, canupdate, candelete
                FROM sysusers_roles
                WHERE sysroleid=%s AND component=%s
                LIMIT 1
                """,
                (role_id, component_id),
            )
            row = fetchone(cur)
            if not row:
                return None
            return RolePermission(
                can_read=bool(row.get("canread")),
                can_create=bool(row.get("cancreate")),
                can_update=bool(row.get("canupdate")),
                can_delete=bool(row.get("candelete")),
            )
