from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..container import Container
from .guards import login_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        payload = request.get_json(silent=True) or request.form
        username = payload.get("username", "")
        password = payload.get("password", "")
        remember = bool(payload.get("remember_me"))

        s_user = container.auth_service.authenticate(username, password)

        session.clear()
        session.permanent = remember
        app.permanent_session_lifetime = timedelta(days=container.settings.session_days)

        session["user_id"] = s_user.user_id
        session["username"] = s_user.username
        session["name"] = s_user.full_name
        session["usertype_id"] = s_user.usertype_id
        session["usertype"] = s_user.usertype_name
        session["emp_objid"] = s_user.emp_objid

        return jsonify({"success": True, "user": _session_payload()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": _session_payload()})


def _session_payload() -> dict:
    return {
        "id": session.get("user_id"),
        "username": session.get("username"),
        "fullname": session.get("name"),
        "usertype_id": session.get("usertype_id"),
        "usertype": session.get("usertype"),
        "emp_objid": session.get("emp_objid"),
    }
