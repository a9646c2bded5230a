from __future__ import annotations

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from ..core.enums import ImageFormat, MediaKind

logger = logging.getLogger(__name__)


class MediaStorage:
    """Files under MEDIA_ROOT; paths stored in HR201 are relative to it."""

    def __init__(self, root: Path | str):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, relative: str) -> Path:
        path = (self._root / relative).resolve()
        if self._root.resolve() not in path.parents:
            raise ValueError(f"path escapes media root: {relative!r}")
        return path

    def save(self, kind: MediaKind, emp_objid: str, data: bytes, fmt: ImageFormat) -> str:
        relative = f"{kind.value}/{emp_objid}.{fmt.extension}"
        path = self._resolve(relative)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("stored %s for %s (%d bytes)", kind.value, emp_objid, len(data))
        return relative

    def read_data_url(self, relative: Optional[str]) -> Optional[str]:
        if not relative:
            return None
        try:
            path = self._resolve(relative)
        except ValueError:
            logger.warning("ignoring media path outside root: %s", relative)
            return None
        if not path.is_file():
            return None
        mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        return f"data:{mime};base64,{encoded}"

    def delete(self, relative: Optional[str]) -> bool:
        if not relative:
            return False
        path = self._resolve(relative)
        if path.is_file():
            path.unlink()
            return True
        return False
