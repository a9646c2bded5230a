from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest
from flask import Flask
from werkzeug.security import generate_password_hash

from lgu_hris.common.passwords import legacy_hash
from lgu_hris.core.enums import Permission
from lgu_hris.core.exceptions import AuthenticationError, ValidationError
from lgu_hris.users.guards import login_required, permission_guard
from lgu_hris.users.model import RolePermission, SysUser
from lgu_hris.users.service import AuthService, PermissionService


@dataclass
class InMemoryUsers:
    users: dict[str, SysUser] = field(default_factory=dict)
    names: dict[str, dict] = field(default_factory=dict)

    def get_active_by_username(self, username: str) -> Optional[SysUser]:
        return self.users.get(username)

    def get_by_id(self, user_id: int) -> Optional[SysUser]:
        return next((u for u in self.users.values() if u.user_id == user_id), None)

    def get_display_name(self, emp_objid: str) -> Optional[dict]:
        return self.names.get(emp_objid)


def _users() -> InMemoryUsers:
    return InMemoryUsers(
        users={
            "hradmin": SysUser(2, "hradmin", generate_password_hash("secret"), 3, "HR Staff", "EMP1"),
            "legacy": SysUser(3, "legacy", legacy_hash("old-pass"), 3, "HR Staff", None),
            "disabled": SysUser(4, "disabled", generate_password_hash("secret"), 3, "HR Staff", None, is_active=False),
        },
        names={"EMP1": {"surname": "SANTOS", "firstname": "ANA", "middlename": "LIM", "extension": None}},
    )


def test_authenticate_uses_employee_display_name():
    user = AuthService(_users()).authenticate("hradmin", "secret")

    assert user.user_id == 2
    assert user.full_name == "Santos, Ana Lim"
    assert user.usertype_name == "HR Staff"
    assert not user.is_root


def test_authenticate_accepts_legacy_hash():
    user = AuthService(_users()).authenticate(" legacy ", "old-pass")
    assert user.full_name == "legacy"


@pytest.mark.parametrize("username,password", [("hradmin", "wrong"), ("nobody", "secret"), ("disabled", "secret")])
def test_authenticate_rejects(username, password):
    with pytest.raises(AuthenticationError, match="Invalid username or password"):
        AuthService(_users()).authenticate(username, password)


def test_authenticate_requires_both_fields():
    with pytest.raises(ValidationError):
        AuthService(_users()).authenticate("hradmin", "")


@dataclass
class InMemoryPermissions:
    components: dict[str, int] = field(default_factory=lambda: {"employees": 10, "machines": 11})
    roles: dict[tuple, RolePermission] = field(default_factory=dict)

    def get_component_id(self, component_name: str) -> Optional[int]:
        return self.components.get(component_name)

    def get_role_permission(self, *, role_id: int, component_id: int) -> Optional[RolePermission]:
        return self.roles.get((role_id, component_id))


def _permissions() -> PermissionService:
    return PermissionService(InMemoryPermissions(roles={(3, 10): RolePermission(can_read=True)}))


def test_root_passes_every_check():
    service = _permissions()
    assert service.can(user_id=1, usertype_id=None, component="anything", action=Permission.DELETE)
    assert service.can(user_id=9, usertype_id=1, component="machines", action=Permission.UPDATE)


def test_role_flags_decide():
    service = _permissions()
    assert service.can(user_id=2, usertype_id=3, component="employees", action=Permission.READ)
    assert not service.can(user_id=2, usertype_id=3, component="employees", action=Permission.UPDATE)
    assert not service.can(user_id=2, usertype_id=3, component="machines", action=Permission.READ)
    assert not service.can(user_id=2, usertype_id=3, component="unknown", action=Permission.READ)
    assert not service.can(user_id=2, usertype_id=None, component="employees", action=Permission.READ)


def test_can_any():
    service = _permissions()
    assert service.can_any(
        user_id=2, usertype_id=3, component="employees", actions=(Permission.UPDATE, Permission.READ)
    )


def _guarded_app() -> Flask:
    app = Flask(__name__)
    app.secret_key = "test"
    permission_required = permission_guard(_permissions())

    @app.get("/me")
    @login_required
    def me():
        return {"ok": True}

    @app.delete("/employees")
    @permission_required("employees", Permission.DELETE)
    def delete_employee():
        return {"ok": True}

    @app.get("/employees")
    @permission_required("employees")
    def list_employees():
        return {"ok": True}

    return app


def test_guards_require_login():
    client = _guarded_app().test_client()
    assert client.get("/me").status_code == 401
    assert client.get("/employees").status_code == 401


def test_permission_guard_checks_session_role():
    client = _guarded_app().test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = 2
        sess["usertype_id"] = 3

    assert client.get("/me").status_code == 200
    assert client.get("/employees").status_code == 200
    resp = client.delete("/employees")
    assert resp.status_code == 403
    assert resp.get_json()["success"] is False
