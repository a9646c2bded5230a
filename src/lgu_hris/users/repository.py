from __future__ import annotations

from typing import Optional, Protocol

from .model import RolePermission, SysUser


class UserRepository(Protocol):
    """sysusers access.

    Services depend on this interface, not on a concrete database.
    """

    def get_active_by_username(self, username: str) -> Optional[SysUser]:
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[SysUser]:
        raise NotImplementedError

    def get_display_name(self, emp_objid: str) -> Optional[dict]:
        raise NotImplementedError


class PermissionRepository(Protocol):
    def get_component_id(self, component_name: str) -> Optional[int]:
        raise NotImplementedError

    def get_role_permission(self, *, role_id: int, component_id: int) -> Optional[RolePermission]:
        raise NotImplementedError
