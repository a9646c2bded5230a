from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..common.names import format_employee_name
from ..common.passwords import verify_password
from ..core.constants import ROOT_USER_ID, ROOT_USERTYPE_ID
from ..core.enums import Permission
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import PermissionRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    full_name: str
    usertype_id: Optional[int]
    usertype_name: Optional[str]
    emp_objid: Optional[str]

    @property
    def is_root(self) -> bool:
        return self.user_id == ROOT_USER_ID or self.usertype_id == ROOT_USERTYPE_ID


class AuthService:
    """Use case: authenticate a sysusers account (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self._users.get_active_by_username(username.strip())
        if not user or not user.is_active or not verify_password(password, user.password_hash):
            logger.info("failed login for %r", username)
            raise AuthenticationError("Invalid username or password")

        full_name = user.username
        if user.emp_objid:
            emp = self._users.get_display_name(user.emp_objid)
            if emp:
                full_name = format_employee_name(
                    emp.get("surname"), emp.get("firstname"), emp.get("middlename"), emp.get("extension")
                ) or user.username

        return SessionUser(
            user_id=user.user_id,
            username=user.username,
            full_name=full_name,
            usertype_id=user.usertype_id,
            usertype_name=user.usertype_name,
            emp_objid=user.emp_objid,
        )


class PermissionService:
    """Component-level RBAC (syscomponents + sysusers_roles).

    The root administrator passes every check. Everyone else needs a
    sysusers_roles row for their user type and the component.
    """

    def __init__(self, permissions: PermissionRepository):
        self._permissions = permissions

    def can(self, *, user_id: int, usertype_id: Optional[int], component: str, action: Permission) -> bool:
        if user_id == ROOT_USER_ID or usertype_id == ROOT_USERTYPE_ID:
            return True
        if not usertype_id:
            logger.warning("user %s has no usertype; denying %s on %s", user_id, action.value, component)
            return False

        component_id = self._permissions.get_component_id(component)
        if component_id is None:
            logger.warning("unknown component %r", component)
            return False

        role = self._permissions.get_role_permission(role_id=int(usertype_id), component_id=component_id)
        return bool(role and role.allows(action.value))

    def can_any(self, *, user_id: int, usertype_id: Optional[int], component: str, actions) -> bool:
        return any(
            self.can(user_id=user_id, usertype_id=usertype_id, component=component, action=a) for a in actions
        )
