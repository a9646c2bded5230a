from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import MediaKind, Permission
from ..core.exceptions import ValidationError
from ..users.guards import permission_guard


def _kind(value: str) -> MediaKind:
    try:
        return MediaKind(value)
    except ValueError:
        raise ValidationError("Media kind must be photo, signature or thumb")


def register(app: Flask, container: Container) -> None:
    permission_required = permission_guard(container.permission_service)

    @app.route("/api/201-employees/<objid>/media", endpoint="media_get")
    @permission_required("201-pds", Permission.READ)
    def media_get(objid: str):
        return jsonify({"success": True, "data": container.media_service.data_urls(objid)})

    @app.route("/api/201-employees/<objid>/media/<kind>", methods=["POST"], endpoint="media_upload")
    @permission_required("201-pds", Permission.CREATE, Permission.UPDATE)
    def media_upload(objid: str, kind: str):
        upload = request.files.get("file")
        data = upload.read() if upload else b""
        result = container.media_service.upload(emp_objid=objid, kind=_kind(kind), data=data)
        return jsonify(
            {
                "success": True,
                "path": result.path,
                "width": result.width,
                "height": result.height,
                "bytes": result.size,
            }
        )

    @app.route("/api/201-employees/<objid>/media/<kind>", methods=["DELETE"], endpoint="media_delete")
    @permission_required("201-pds", Permission.DELETE, Permission.UPDATE)
    def media_delete(objid: str, kind: str):
        container.media_service.remove(emp_objid=objid, kind=_kind(kind))
        return jsonify({"success": True})
