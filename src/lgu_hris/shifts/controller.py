from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.enums import Permission
from ..users.guards import permission_guard


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)
    shifts = container.shift_service
    assignments = container.shift_assignment_service

    @app.route("/api/dtr-shifts", endpoint="shifts_list")
    @permission_required("dtr-shifts", Permission.READ)
    def shifts_list():
        return jsonify({"success": True, "data": [s.to_dict() for s in shifts.list()]})

    @app.route("/api/dtr-shifts/<int:shift_id>", endpoint="shifts_get")
    @permission_required("dtr-shifts", Permission.READ)
    def shifts_get(shift_id: int):
        return jsonify({"success": True, "data": shifts.get(shift_id).to_dict()})

    @app.route("/api/dtr-shifts", methods=["POST"], endpoint="shifts_create")
    @permission_required("dtr-shifts", Permission.CREATE)
    def shifts_create():
        new_id = shifts.create(request.get_json(silent=True) or {})
        return jsonify({"success": True, "id": new_id}), 201

    @app.route("/api/dtr-shifts/<int:shift_id>", methods=["PUT"], endpoint="shifts_update")
    @permission_required("dtr-shifts", Permission.UPDATE)
    def shifts_update(shift_id: int):
        shift = shifts.update(shift_id, request.get_json(silent=True) or {})
        return jsonify({"success": True, "data": shift.to_dict()})

    @app.route("/api/dtr-shifts/<int:shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    @permission_required("dtr-shifts", Permission.DELETE)
    def shifts_delete(shift_id: int):
        shifts.delete(shift_id)
        return jsonify({"success": True})

    @app.route("/api/dtr-assigned-shifts", endpoint="assigned_shifts_list")
    @permission_required("dtr-assign-shift", Permission.READ)
    def assigned_shifts_list():
        rows = assignments.list(request.args.get("emp_objid"))
        return jsonify({"success": True, "data": [a.to_dict() for a in rows]})

    @app.route("/api/dtr-assigned-shifts/<objid>", endpoint="assigned_shifts_get")
    @permission_required("dtr-assign-shift", Permission.READ)
    def assigned_shifts_get(objid: str):
        return jsonify({"success": True, "data": assignments.get(objid).to_dict()})

    @app.route("/api/dtr-assigned-shifts", methods=["POST"], endpoint="assigned_shifts_create")
    @permission_required("dtr-assign-shift", Permission.CREATE)
    def assigned_shifts_create():
        payload = request.get_json(silent=True) or {}
        assignment = assignments.assign(
            emp_objid=payload.get("emp_objid"),
            shift_id=payload.get("shiftid"),
            created_by=session.get("user_id"),
        )
        return jsonify({"success": True, "data": assignment.to_dict()}), 201

    @app.route("/api/dtr-assigned-shifts/bulk-assign", methods=["POST"], endpoint="assigned_shifts_bulk")
    @permission_required("dtr-assign-shift", Permission.CREATE)
    def assigned_shifts_bulk():
        payload = request.get_json(silent=True) or {}
        inserted = assignments.bulk_assign(shift_id=payload.get("shiftid"), created_by=session.get("user_id"))
        return jsonify({"success": True, "insertedCount": inserted})

    @app.route("/api/dtr-assigned-shifts/<objid>", methods=["PUT"], endpoint="assigned_shifts_update")
    @permission_required("dtr-assign-shift", Permission.UPDATE)
    def assigned_shifts_update(objid: str):
        assignments.update(objid, request.get_json(silent=True) or {})
        return jsonify({"success": True})

    @app.route("/api/dtr-assigned-shifts/<objid>", methods=["DELETE"], endpoint="assigned_shifts_delete")
    @permission_required("dtr-assign-shift", Permission.DELETE)
    def assigned_shifts_delete(objid: str):
        assignments.delete(objid)
        return jsonify({"success": True})
