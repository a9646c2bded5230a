from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from ..core.enums import Permission
from ..users.guards import permission_guard


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)

    @app.route("/api/201-employees", endpoint="employees_list")
    @permission_required("201-employees", Permission.READ)
    def employees_list():
        data = container.employee_service.list_employees()
        return jsonify({"success": True, "data": data, "count": len(data)})

    @app.route("/api/201-employees/stats", endpoint="employees_stats")
    @permission_required("201-employees", Permission.READ)
    def employees_stats():
        return jsonify({"success": True, "data": container.employee_service.stats()})

    @app.route("/api/201-employees/search/<term>", endpoint="employees_search")
    @permission_required("201-employees", Permission.READ)
    def employees_search(term: str):
        data = container.employee_service.search(term)
        return jsonify({"success": True, "data": data, "count": len(data)})

    @app.route("/api/201-employees/lookup/<name>", endpoint="employees_lookup")
    @permission_required("201-employees", Permission.READ)
    def employees_lookup(name: str):
        return jsonify({"success": True, "data": container.employee_service.lookup(name)})

    @app.route("/api/201-employees/pds/<int:dtruserid>/recalculate-progress", methods=["POST"], endpoint="pds_recalculate")
    @permission_required("201-pds", Permission.READ)
    def pds_recalculate(dtruserid: int):
        progress = container.pds_service.recalculate_progress(dtruserid)
        return jsonify({"success": True, "progress": progress, "message": f"Progress recalculated: {progress}%"})

    @app.route("/api/201-employees/missing-fields/<int:dtruserid>", endpoint="pds_missing_fields")
    @permission_required("201-pds", Permission.READ)
    def pds_missing_fields(dtruserid: int):
        result = container.pds_service.missing_fields(dtruserid)
        return jsonify({"success": True, **result})

    @app.route("/api/201-employees/<objid>", endpoint="employees_get")
    @permission_required("201-employees", Permission.READ)
    def employees_get(objid: str):
        return jsonify({"success": True, "data": container.employee_service.get(objid)})
