from __future__ import annotations

from flask import Flask, jsonify, request, send_file, session

from ..container import Container
from ..common.datetime_utils import parse_iso_date
from ..common.export import XLSX_MIMETYPE, rows_to_csv, rows_to_xlsx
from ..common.validators import require_int
from ..core.enums import Permission
from ..core.exceptions import ValidationError
from ..users.guards import permission_guard
from .model import AttendanceResult, zero_totals
from .service import NoShiftAssignedError, period_query

DTR_FIELDS = [
    "dtrdate",
    "am_checkin",
    "am_checkout",
    "pm_checkin",
    "pm_checkout",
    "late",
    "days",
    "hastravel",
    "hascdo",
    "haslocator",
    "hasfixlogs",
    "hasleave",
    "holiday",
]


def _date_arg(name: str):
    value = request.args.get(name)
    if not value:
        raise ValidationError(f"{name} is required")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)
    service = container.attendance_service

    def _calculate() -> AttendanceResult:
        dtruserid = require_int(request.args.get("userId"), "userId")
        return service.calculate(dtruserid, _date_arg("startDate"), _date_arg("endDate"))

    @app.route("/api/compute-attendance/calculate", endpoint="attendance_calculate")
    @permission_required("compute-attendance", Permission.READ)
    def attendance_calculate():
        try:
            result = _calculate()
        except NoShiftAssignedError as e:
            return jsonify({"success": False, "message": str(e), "data": zero_totals()}), 404
        return jsonify({"success": True, "data": result.to_dict()})

    @app.route("/api/compute-attendance/export.csv", endpoint="attendance_export_csv")
    @permission_required("compute-attendance", Permission.READ)
    def attendance_export_csv():
        result = _calculate()
        filename = f"dtr_{result.dtruserid}_{result.start:%Y%m%d}_{result.end:%Y%m%d}.csv"
        return app.response_class(
            rows_to_csv((r.to_dict() for r in result.rows), DTR_FIELDS),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/compute-attendance/export.xlsx", endpoint="attendance_export_xlsx")
    @permission_required("compute-attendance", Permission.READ)
    def attendance_export_xlsx():
        result = _calculate()
        output = rows_to_xlsx((r.to_dict() for r in result.rows), DTR_FIELDS, sheet_name="DTR")
        return send_file(
            output,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"dtr_{result.dtruserid}_{result.start:%Y%m%d}_{result.end:%Y%m%d}.xlsx",
        )

    @app.route("/api/compute-attendance/check-computed-dtr", endpoint="attendance_check_computed")
    @permission_required("compute-attendance", Permission.READ)
    def attendance_check_computed():
        args = period_query(request.args)
        emp_objid = request.args.get("emp_objid")
        if emp_objid:
            found = service.check_computed(emp_objid, **args)
            return jsonify({"success": True, "data": found.to_dict() if found else None})
        objids = service.computed_employees(**args)
        return jsonify({"success": True, "empObjIds": objids, "count": len(objids)})

    @app.route("/api/computed-dtr", methods=["POST"], endpoint="computed_dtr_create")
    @permission_required("computed-dtr", Permission.CREATE)
    def computed_dtr_create():
        payload = request.get_json(silent=True) or {}
        compute_id = service.save_computed(
            require_int(payload.get("dtruserid"), "dtruserid"),
            created_by=session.get("user_id"),
            remarks=payload.get("computeremarks"),
            **period_query(payload),
        )
        return jsonify({"success": True, "computeid": compute_id}), 201
