from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SysUser:
    """HR201 sysusers row (administrative accounts)."""

    user_id: int
    username: str
    password_hash: str
    usertype_id: Optional[int]
    usertype_name: Optional[str]
    emp_objid: Optional[str]
    is_active: bool = True


@dataclass(frozen=True)
class RolePermission:
    """sysusers_roles flags for one role and component."""

    can_read: bool = False
    can_create: bool = False
    can_update: bool = False
    can_delete: bool = False

    def allows(self, action: str) -> bool:
        return bool(getattr(self, f"can_{action}", False))
