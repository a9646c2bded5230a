from __future__ import annotations

import logging
from typing import Optional

from ..common.names import format_employee_name
from ..core.constants import DEFAULT_SEARCH_LIMIT
from ..core.exceptions import NotFoundError, ValidationError
from ..media.storage import MediaStorage
from .pds import find_missing_fields, group_missing_fields, score_pds
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """201 file listing and lookups."""

    def __init__(self, employees: EmployeeRepository, storage: MediaStorage):
        self._employees = employees
        self._storage = storage

    def _present(self, row: dict) -> dict:
        out = dict(row)
        out["fullname"] = format_employee_name(
            row.get("surname"), row.get("firstname"), row.get("middlename"), row.get("extension")
        )
        if "photo_path" in row:
            try:
                out["photo_path"] = self._storage.read_data_url(row.get("photo_path"))
            except OSError:
                logger.warning("could not read photo for %s", row.get("objid"))
                out["photo_path"] = None
        if "cancreatetravel" in row:
            out["cancreatetravel"] = int(row.get("cancreatetravel") or 0) == 1
        return out

    def list_employees(self) -> list[dict]:
        return [self._present(r) for r in self._employees.list_with_details()]

    def search(self, term: str) -> list[dict]:
        term = (term or "").strip()
        if not term:
            raise ValidationError("Search term is required")
        return [self._present(r) for r in self._employees.search(term, limit=DEFAULT_SEARCH_LIMIT)]

    def stats(self) -> dict:
        return self._employees.stats()

    def get(self, objid: str) -> dict:
        row = self._employees.get_by_objid(objid)
        if not row:
            raise NotFoundError("Employee not found")
        return self._present(row)

    def lookup(self, name: str) -> list:
        try:
            return list(self._employees.list_lookup(name))
        except KeyError:
            raise NotFoundError(f"Unknown lookup: {name}")


class PdsService:
    """PDS completeness score and the missing-field checklist."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def calculate_progress(self, objid: str) -> float:
        try:
            snapshot = self._employees.load_pds_snapshot(objid)
        except Exception:
            logger.exception("PDS progress failed for %s", objid)
            return 0.0
        if snapshot is None:
            return 0.0
        score = score_pds(snapshot)
        logger.debug("PDS progress %s: %d/%d", objid, score.filled, score.total)
        return score.percent

    def _objid_for(self, dtruserid: int) -> str:
        objid = self._employees.get_objid_by_dtruserid(dtruserid)
        if not objid:
            raise NotFoundError("Employee not found")
        return objid

    def recalculate_progress(self, dtruserid: int) -> float:
        objid = self._objid_for(dtruserid)
        progress = self.calculate_progress(objid)
        self._employees.set_pds_progress(objid, progress)
        return progress

    def recalculate_all(self, objid: Optional[str] = None) -> dict[str, float]:
        objids = [objid] if objid else list(self._employees.list_objids())
        out: dict[str, float] = {}
        for oid in objids:
            progress = self.calculate_progress(oid)
            self._employees.set_pds_progress(oid, progress)
            out[oid] = progress
        return out

    def missing_fields(self, dtruserid: int) -> dict:
        objid = self._objid_for(dtruserid)
        snapshot = self._employees.load_pds_snapshot(objid)
        if snapshot is None:
            raise NotFoundError("Employee record not found")
        missing = find_missing_fields(snapshot)
        return {
            "total_missing": len(missing),
            "missing_fields": group_missing_fields(missing),
            "message": (
                "All required fields are completed"
                if not missing
                else f"{len(missing)} required field(s) are missing"
            ),
        }
