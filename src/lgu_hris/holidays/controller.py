from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.enums import Permission
from ..users.guards import permission_guard


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)
    holidays = container.holiday_service

    @app.route("/api/dtr-holidays/types", endpoint="holiday_types_list")
    @permission_required("dtr-holidays", Permission.READ)
    def holiday_types_list():
        return jsonify({"success": True, "data": [t.to_dict() for t in holidays.list_types()]})

    @app.route("/api/dtr-holidays/types/<int:type_id>", endpoint="holiday_types_get")
    @permission_required("dtr-holidays", Permission.READ)
    def holiday_types_get(type_id: int):
        return jsonify({"success": True, "data": holidays.get_type(type_id).to_dict()})

    @app.route("/api/dtr-holidays/types", methods=["POST"], endpoint="holiday_types_create")
    @permission_required("dtr-holidays", Permission.CREATE)
    def holiday_types_create():
        payload = request.get_json(silent=True) or {}
        created = holidays.create_type(payload.get("typesname"))
        return jsonify({"success": True, "message": "Holiday type created successfully", "data": created.to_dict()}), 201

    @app.route("/api/dtr-holidays/types/<int:type_id>", methods=["PUT"], endpoint="holiday_types_update")
    @permission_required("dtr-holidays", Permission.UPDATE)
    def holiday_types_update(type_id: int):
        payload = request.get_json(silent=True) or {}
        updated = holidays.update_type(type_id, payload.get("typesname"))
        return jsonify({"success": True, "message": "Holiday type updated successfully", "data": updated.to_dict()})

    @app.route("/api/dtr-holidays/types/<int:type_id>", methods=["DELETE"], endpoint="holiday_types_delete")
    @permission_required("dtr-holidays", Permission.DELETE)
    def holiday_types_delete(type_id: int):
        holidays.delete_type(type_id)
        return jsonify({"success": True, "message": "Holiday type deleted successfully"})

    @app.route("/api/dtr-holidays", endpoint="holidays_list")
    @permission_required("dtr-holidays", Permission.READ)
    def holidays_list():
        return jsonify({"success": True, "data": [h.to_dict() for h in holidays.list()]})

    @app.route("/api/dtr-holidays/<int:holiday_id>", endpoint="holidays_get")
    @permission_required("dtr-holidays", Permission.READ)
    def holidays_get(holiday_id: int):
        return jsonify({"success": True, "data": holidays.get(holiday_id).to_dict()})

    @app.route("/api/dtr-holidays", methods=["POST"], endpoint="holidays_create")
    @permission_required("dtr-holidays", Permission.CREATE)
    def holidays_create():
        new_id = holidays.create(request.get_json(silent=True) or {}, created_by=session.get("user_id"))
        return jsonify({"success": True, "message": "Holiday created successfully", "id": new_id}), 201

    @app.route("/api/dtr-holidays/<int:holiday_id>", methods=["PUT"], endpoint="holidays_update")
    @permission_required("dtr-holidays", Permission.UPDATE)
    def holidays_update(holiday_id: int):
        updated = holidays.update(holiday_id, request.get_json(silent=True) or {})
        return jsonify({"success": True, "message": "Holiday updated successfully", "data": updated.to_dict()})

    @app.route("/api/dtr-holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    @permission_required("dtr-holidays", Permission.DELETE)
    def holidays_delete(holiday_id: int):
        holidays.delete(holiday_id)
        return jsonify({"success": True, "message": "Holiday deleted successfully"})
