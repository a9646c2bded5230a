from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..container import Container
from ..common.export import XLSX_MIMETYPE, rows_to_csv, rows_to_xlsx
from ..core.enums import Permission
from ..users.guards import permission_guard
from ..attendance.service import period_query
from .service import PAYROLL_FIELDS


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)
    service = container.payroll_report_service

    def _filename(summary: dict, ext: str) -> str:
        period = summary["period"].replace(" ", "_").lower()
        return f"payroll_{summary['month'].lower()}_{summary['year']}_{period}.{ext}"

    @app.route("/api/payroll/report", endpoint="payroll_report")
    @permission_required("payroll", Permission.READ)
    def payroll_report():
        data = service.build_payroll_report(**period_query(request.args))
        return jsonify({"success": True, "data": data.rows, "summary": data.summary})

    @app.route("/api/payroll/report.csv", endpoint="payroll_report_csv")
    @permission_required("payroll", Permission.READ)
    def payroll_report_csv():
        data = service.build_payroll_report(**period_query(request.args))
        return app.response_class(
            rows_to_csv(data.rows, PAYROLL_FIELDS),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={_filename(data.summary, 'csv')}"},
        )

    @app.route("/api/payroll/report.xlsx", endpoint="payroll_report_xlsx")
    @permission_required("payroll", Permission.READ)
    def payroll_report_xlsx():
        data = service.build_payroll_report(**period_query(request.args))
        return send_file(
            rows_to_xlsx(data.rows, PAYROLL_FIELDS, sheet_name="Payroll"),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=_filename(data.summary, "xlsx"),
        )
