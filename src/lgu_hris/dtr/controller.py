from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file, session

from ..container import Container
from ..common.validators import require_int
from ..core.enums import Permission
from ..users.guards import permission_guard
from .service import build_user_input


def _int_arg(name: str):
    value = request.args.get(name)
    if value in (None, "", "new"):
        return None
    return require_int(value, name)


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)

    @app.route("/api/dtr-users", endpoint="dtr_users_list")
    @permission_required("dtr-users", Permission.READ)
    def dtr_users_list():
        users = container.dtr_user_service.list(request.args.get("search"))
        return jsonify({"success": True, "data": [u.to_dict() for u in users]})

    @app.route("/api/dtr-users/validate-unique", endpoint="dtr_users_validate")
    @permission_required("dtr-users", Permission.READ)
    def dtr_users_validate():
        result = container.dtr_user_service.validate_unique_fields(
            user_id=_int_arg("userId"),
            badge_number=request.args.get("badgeNumber") or None,
            current_user_id=_int_arg("currentUserId"),
        )
        return jsonify(result)

    @app.route("/api/dtr-users", methods=["POST"], endpoint="dtr_users_create")
    @permission_required("dtr-users", Permission.CREATE)
    def dtr_users_create():
        photo = request.files.get("PHOTO")
        payload = request.form if request.form else (request.get_json(silent=True) or {})
        data = build_user_input(payload, photo.read() if photo else None)
        user_id = container.dtr_user_service.create(data)
        return jsonify({"success": True, "USERID": user_id}), 201

    @app.route("/api/dtr-users/<int:user_id>", endpoint="dtr_users_get")
    @permission_required("dtr-users", Permission.READ)
    def dtr_users_get(user_id: int):
        return jsonify({"success": True, "data": container.dtr_user_service.get(user_id).to_dict()})

    @app.route("/api/dtr-users/<int:user_id>/photo", endpoint="dtr_users_photo")
    @permission_required("dtr-users", Permission.READ)
    def dtr_users_photo(user_id: int):
        data = container.dtr_user_service.photo(user_id)
        return send_file(io.BytesIO(data), mimetype="image/jpeg", download_name=f"{user_id}.jpg")

    @app.route("/api/dtr-users/<int:user_id>", methods=["PUT"], endpoint="dtr_users_update")
    @permission_required("dtr-users", Permission.UPDATE)
    def dtr_users_update(user_id: int):
        photo = request.files.get("PHOTO")
        payload = request.form if request.form else (request.get_json(silent=True) or {})
        container.dtr_user_service.update(user_id, build_user_input(payload, photo.read() if photo else None))
        return jsonify({"success": True})

    @app.route("/api/dtr-users/<int:user_id>", methods=["DELETE"], endpoint="dtr_users_delete")
    @permission_required("dtr-users", Permission.DELETE)
    def dtr_users_delete(user_id: int):
        container.dtr_user_service.delete(user_id)
        return jsonify({"success": True})

    @app.route("/api/dtr-users/<int:user_id>/reset-pin", methods=["PUT"], endpoint="dtr_users_reset_pin")
    @permission_required("dtr-users", Permission.UPDATE)
    def dtr_users_reset_pin(user_id: int):
        payload = request.get_json(silent=True) or {}
        container.dtr_user_service.reset_pin(user_id, str(payload.get("pin", "")))
        return jsonify({"success": True, "message": "PIN reset successfully"})

    @app.route("/api/dtr-portal-users", endpoint="portal_users_list")
    @permission_required("dtr-portal-users", Permission.READ)
    def portal_users_list():
        return jsonify({"success": True, "data": [u.to_dict() for u in container.portal_user_service.list()]})

    @app.route("/api/dtr-portal-users/<int:dtruserid>", endpoint="portal_users_get")
    @permission_required("dtr-portal-users", Permission.READ)
    def portal_users_get(dtruserid: int):
        return jsonify({"success": True, "data": container.portal_user_service.get(dtruserid).to_dict()})

    @app.route("/api/dtr-portal-users/<int:dtruserid>", methods=["POST"], endpoint="portal_users_register")
    @permission_required("dtr-portal-users", Permission.CREATE)
    def portal_users_register(dtruserid: int):
        payload = request.get_json(silent=True) or {}
        portal_id = container.portal_user_service.register(
            dtruserid=dtruserid,
            username=payload.get("username"),
            pin=payload.get("pin"),
            email=payload.get("emailaddress"),
            status=int(payload.get("status", 1)),
            dtrname=payload.get("dtrname"),
            emp_objid=payload.get("emp_objid"),
            created_by=session.get("user_id"),
        )
        return jsonify({"success": True, "userportalid": portal_id}), 201

    @app.route("/api/dtr-portal-users/<int:dtruserid>", methods=["PUT"], endpoint="portal_users_update")
    @permission_required("dtr-portal-users", Permission.UPDATE)
    def portal_users_update(dtruserid: int):
        payload = request.get_json(silent=True) or {}
        status = payload.get("status")
        container.portal_user_service.update(
            dtruserid=dtruserid,
            username=payload.get("username"),
            pin=payload.get("pin"),
            email=payload.get("emailaddress"),
            status=int(status) if status is not None else None,
            dtrname=payload.get("dtrname"),
            emp_objid=payload.get("emp_objid"),
        )
        return jsonify({"success": True})

    @app.route("/api/dtr-portal-users/<int:dtruserid>", methods=["DELETE"], endpoint="portal_users_delete")
    @permission_required("dtr-portal-users", Permission.DELETE)
    def portal_users_delete(dtruserid: int):
        container.portal_user_service.delete(dtruserid)
        return jsonify({"success": True})
