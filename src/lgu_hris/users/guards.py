"""Route guards shared by the feature controllers."""

from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Permission
from .service import PermissionService


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def permission_guard(permissions: PermissionService):
    """Build a ``permission_required(component, *actions)`` decorator.

    Any one of ``actions`` is enough.
    """

    def permission_required(component: str, *actions: Permission):
        wanted = actions or (Permission.READ,)

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if "user_id" not in session:
                    return jsonify({"success": False, "message": "Please log in to continue"}), 401
                allowed = permissions.can_any(
                    user_id=int(session["user_id"]),
                    usertype_id=session.get("usertype_id"),
                    component=component,
                    actions=wanted,
                )
                if not allowed:
                    return jsonify({"success": False, "message": "You do not have permission for this action"}), 403
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return permission_required
