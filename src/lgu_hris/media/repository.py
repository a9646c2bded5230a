from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import MediaKind


class MediaRepository(Protocol):
    """employees_media rows (one per employee)."""

    def get_paths(self, emp_objid: str) -> Optional[dict]:
        raise NotImplementedError

    def set_path(self, emp_objid: str, kind: MediaKind, path: Optional[str]) -> None:
        raise NotImplementedError
