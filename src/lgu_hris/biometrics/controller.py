from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import Permission
from ..users.guards import permission_guard


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)
    enrollment = container.enrollment_service

    @app.route("/api/bio-enroll/health", endpoint="bio_health")
    @permission_required("bio-enroll", Permission.READ)
    def bio_health():
        return jsonify({"success": True, **enrollment.check_availability()})

    @app.route("/api/bio-enroll/check-finger/<int:user_id>/<int:finger_id>", endpoint="bio_check_finger")
    @permission_required("bio-enroll", Permission.READ)
    def bio_check_finger(user_id: int, finger_id: int):
        return jsonify({"success": True, **enrollment.check_finger(user_id, finger_id)})

    @app.route("/api/bio-enroll/start", methods=["POST"], endpoint="bio_start")
    @permission_required("bio-enroll", Permission.CREATE)
    def bio_start():
        payload = request.get_json(silent=True) or {}
        progress = enrollment.start(
            user_id=payload.get("userId"),
            finger_id=payload.get("fingerId"),
            user_name=payload.get("name") or "",
        )
        return jsonify(
            {
                "success": True,
                "message": "Enrollment started",
                "enrollment_id": progress.enrollment_id,
                "user_id": progress.user_id,
                "finger_id": progress.finger_id,
            }
        ), 202

    @app.route("/api/bio-enroll/progress/<enrollment_id>", endpoint="bio_progress")
    @permission_required("bio-enroll", Permission.READ)
    def bio_progress(enrollment_id: str):
        return jsonify({"success": True, **enrollment.progress(enrollment_id).to_dict()})

    @app.route("/api/bio-enroll/save", methods=["POST"], endpoint="bio_save")
    @permission_required("bio-enroll", Permission.CREATE)
    def bio_save():
        payload = request.get_json(silent=True) or {}
        fuid = enrollment.save(
            enrollment_id=payload.get("enrollmentId"),
            user_id=payload.get("userId"),
            finger_id=payload.get("fingerId"),
            name=payload.get("name"),
            template_base64=payload.get("templateBase64"),
        )
        return jsonify({"success": True, "message": "Fingerprint saved successfully", "fuid": fuid})

    @app.route("/api/bio-enroll/progress/<enrollment_id>", methods=["DELETE"], endpoint="bio_cancel")
    @permission_required("bio-enroll", Permission.CREATE)
    def bio_cancel(enrollment_id: str):
        enrollment.cancel(enrollment_id)
        return jsonify({"success": True})

    @app.route("/api/bio-enroll/status/<int:user_id>", endpoint="bio_status")
    @permission_required("bio-enroll", Permission.READ)
    def bio_status(user_id: int):
        return jsonify({"success": True, **enrollment.enrollment_status(user_id)})

    @app.route("/api/bio-enroll/<int:user_id>/<int:finger_id>", methods=["DELETE"], endpoint="bio_delete_finger")
    @permission_required("bio-enroll", Permission.DELETE)
    def bio_delete_finger(user_id: int, finger_id: int):
        enrollment.delete_finger(user_id=user_id, finger_id=finger_id)
        return jsonify({"success": True, "message": f"Finger {finger_id} deleted"})
