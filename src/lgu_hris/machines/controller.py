from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..common.datetime_utils import parse_iso_date
from ..core.enums import Permission
from ..core.exceptions import ValidationError
from ..users.guards import permission_guard


def _date_arg(payload: dict, name: str):
    value = payload.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)

    @app.route("/api/machines", endpoint="machines_list")
    @permission_required("machines", Permission.READ)
    def machines_list():
        enabled_only = request.args.get("enabled") in ("1", "true")
        machines = container.machine_service.list(enabled_only=enabled_only)
        return jsonify({"success": True, "data": [m.to_dict() for m in machines]})

    @app.route("/api/machines/<int:machine_id>", endpoint="machines_get")
    @permission_required("machines", Permission.READ)
    def machines_get(machine_id: int):
        return jsonify({"success": True, "data": container.machine_service.get(machine_id).to_dict()})

    @app.route("/api/machines", methods=["POST"], endpoint="machines_create")
    @permission_required("machines", Permission.CREATE)
    def machines_create():
        new_id = container.machine_service.create(request.get_json(silent=True) or {})
        return jsonify({"success": True, "ID": new_id}), 201

    @app.route("/api/machines/<int:machine_id>", methods=["PUT"], endpoint="machines_update")
    @permission_required("machines", Permission.UPDATE)
    def machines_update(machine_id: int):
        container.machine_service.update(machine_id, request.get_json(silent=True) or {})
        return jsonify({"success": True})

    @app.route("/api/machines/<int:machine_id>", methods=["DELETE"], endpoint="machines_delete")
    @permission_required("machines", Permission.DELETE)
    def machines_delete(machine_id: int):
        container.machine_service.delete(machine_id)
        return jsonify({"success": True})

    @app.route("/api/machines/<int:machine_id>/test", methods=["POST"], endpoint="machines_test")
    @permission_required("machines", Permission.READ)
    def machines_test(machine_id: int):
        info = container.machine_sync_service.test_connection(machine_id)
        return jsonify({
            "success": True,
            "data": {
                "firmware": info.firmware,
                "serialNumber": info.serial_number,
                "deviceName": info.device_name,
                "userCount": info.user_count,
            },
        })

    @app.route("/api/machines/<int:machine_id>/sync", methods=["POST"], endpoint="machines_sync")
    @permission_required("machines", Permission.UPDATE)
    def machines_sync(machine_id: int):
        payload = request.get_json(silent=True) or {}
        result = container.machine_sync_service.sync(
            machine_id, _date_arg(payload, "startDate"), _date_arg(payload, "endDate")
        )
        return jsonify({"success": True, "data": result.to_dict()})

    @app.route("/api/machines/sync-all", methods=["POST"], endpoint="machines_sync_all")
    @permission_required("machines", Permission.UPDATE)
    def machines_sync_all():
        payload = request.get_json(silent=True) or {}
        results = container.machine_sync_service.sync_all(
            _date_arg(payload, "startDate"), _date_arg(payload, "endDate")
        )
        return jsonify({
            "success": all(not r.errors for r in results),
            "data": [r.to_dict() for r in results],
        })
