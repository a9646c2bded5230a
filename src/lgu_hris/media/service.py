from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.enums import ImageFormat, MediaKind
from ..core.exceptions import NotFoundError, ValidationError
from .image import MAX_BYTES, MAX_PHOTO_BYTES, MAX_SIGNATURE_BYTES, FitOptions, fit_image_under_bytes
from .repository import MediaRepository
from .storage import MediaStorage

logger = logging.getLogger(__name__)

FIT_OPTIONS = {
    MediaKind.PHOTO: FitOptions(output=ImageFormat.JPEG, maintain_quality=True, max_bytes=MAX_PHOTO_BYTES),
    MediaKind.SIGNATURE: FitOptions(output=ImageFormat.PNG, normalize_colors=True, max_bytes=MAX_SIGNATURE_BYTES),
    MediaKind.THUMB: FitOptions(output=ImageFormat.BMP, max_bytes=MAX_BYTES),
}


@dataclass(frozen=True)
class UploadResult:
    path: str
    width: int
    height: int
    size: int


class MediaService:
    def __init__(self, media: MediaRepository, storage: MediaStorage):
        self._media = media
        self._storage = storage

    def upload(self, *, emp_objid: str, kind: MediaKind, data: bytes) -> UploadResult:
        if not emp_objid:
            raise ValidationError("Employee is required")
        if not data:
            raise ValidationError("No file uploaded")

        fitted = fit_image_under_bytes(data, FIT_OPTIONS[kind])
        if fitted.placeholder:
            raise ValidationError("Uploaded file is not a readable image")

        try:
            path = self._storage.save(kind, emp_objid, fitted.data, fitted.format)
        except ValueError as e:
            raise ValidationError(str(e))
        self._media.set_path(emp_objid, kind, path)
        return UploadResult(path=path, width=fitted.width, height=fitted.height, size=fitted.size)

    def remove(self, *, emp_objid: str, kind: MediaKind) -> None:
        paths = self._media.get_paths(emp_objid)
        if not paths or not paths.get(kind.column):
            raise NotFoundError(f"No {kind.value} on file")
        try:
            self._storage.delete(paths[kind.column])
        except ValueError as e:
            raise ValidationError(str(e))
        self._media.set_path(emp_objid, kind, None)
        logger.info("removed %s for %s", kind.value, emp_objid)

    def data_urls(self, emp_objid: str) -> dict:
        paths = self._media.get_paths(emp_objid) or {}
        return {k.value: self._storage.read_data_url(paths.get(k.column)) for k in MediaKind}
