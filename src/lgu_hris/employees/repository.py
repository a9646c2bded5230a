from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PdsSnapshot


class EmployeeRepository(Protocol):
    """HR201 employees and their PDS sections."""

    def list_with_details(self) -> Sequence[dict]:
        raise NotImplementedError

    def search(self, term: str, *, limit: int) -> Sequence[dict]:
        raise NotImplementedError

    def stats(self) -> dict:
        raise NotImplementedError

    def get_by_objid(self, objid: str) -> Optional[dict]:
        raise NotImplementedError

    def get_objid_by_dtruserid(self, dtruserid: int) -> Optional[str]:
        raise NotImplementedError

    def list_objids(self) -> Sequence[str]:
        raise NotImplementedError

    def load_pds_snapshot(self, objid: str) -> Optional[PdsSnapshot]:
        raise NotImplementedError

    def set_pds_progress(self, objid: str, progress: float) -> None:
        raise NotImplementedError

    def list_lookup(self, name: str) -> Sequence[dict]:
        raise NotImplementedError
