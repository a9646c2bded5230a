from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import time
from typing import List, Optional

from ..common.datetime_utils import parse_hhmm
from ..common.validators import as_flag, require_int, require_non_empty
from ..core.enums import ShiftTimeMode
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import ShiftAssignment, ShiftType
from .repository import ShiftAssignmentRepository, ShiftTypeRepository

logger = logging.getLogger(__name__)

TIME_FIELDS = {
    "shift_checkin": "checkin",
    "shift_checkin_start": "checkin_start",
    "shift_checkin_end": "checkin_end",
    "shift_checkout": "checkout",
    "shift_checkout_start": "checkout_start",
    "shift_checkout_end": "checkout_end",
}


def _optional_time(value, field_name: str) -> Optional[time]:
    if value is None or not str(value).strip():
        return None
    try:
        return parse_hhmm(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM or HH:MM:SS")


def _mode(value) -> ShiftTimeMode:
    # Unknown modes fall back to a morning-only shift.
    text = str(value or "").strip().upper()
    return ShiftTimeMode(text) if text in ShiftTimeMode.__members__ else ShiftTimeMode.AM


def _credits(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError("credits must be a number")


class ShiftService:
    """Maintenance of shiftscheduletypes."""

    def __init__(self, shifts: ShiftTypeRepository):
        self._shifts = shifts

    def list(self) -> List[ShiftType]:
        return list(self._shifts.list_all())

    def get(self, shift_id: int) -> ShiftType:
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise NotFoundError("Shift not found")
        return shift

    def create(self, payload: dict) -> int:
        shift = self._apply(ShiftType(shift_id=0, name=""), {"shifttimemode": None, **payload})
        new_id = self._shifts.create(shift)
        logger.info("shift %s created: %s (%s)", new_id, shift.name, shift.mode.value)
        return new_id

    def update(self, shift_id: int, payload: dict) -> ShiftType:
        """Only the keys present in ``payload`` change."""
        shift = self._apply(self.get(shift_id), payload)
        self._shifts.update(shift)
        return shift

    def delete(self, shift_id: int) -> None:
        if not self._shifts.delete(shift_id):
            raise NotFoundError("Shift not found")

    @staticmethod
    def _apply(shift: ShiftType, payload: dict) -> ShiftType:
        changes = {}
        if "shiftname" in payload or not shift.name:
            changes["name"] = require_non_empty(payload.get("shiftname"), "shiftname")
        if "shifttimemode" in payload:
            changes["mode"] = _mode(payload.get("shifttimemode"))
        for key, attr in TIME_FIELDS.items():
            if key in payload:
                changes[attr] = _optional_time(payload.get(key), key)
        if "is_ot" in payload:
            changes["is_ot"] = as_flag(payload.get("is_ot"))
        if "credits" in payload:
            changes["credits"] = _credits(payload.get("credits"))
        return replace(shift, **changes)


class ShiftAssignmentService:
    """Maintenance of employee_assignedshifts.

    Single assignments start unused and are switched on with ``update``;
    bulk assignment marks the new rows as in use straight away.
    """

    def __init__(self, assignments: ShiftAssignmentRepository, shifts: ShiftTypeRepository):
        self._assignments = assignments
        self._shifts = shifts

    def list(self, emp_objid: Optional[str] = None) -> List[ShiftAssignment]:
        return list(self._assignments.list(emp_objid or None))

    def get(self, objid: str) -> ShiftAssignment:
        assignment = self._assignments.get(objid)
        if not assignment:
            raise NotFoundError("Assigned shift not found")
        return assignment

    def _require_shift(self, value) -> int:
        shift_id = require_int(value, "shiftid")
        if not self._shifts.get_by_id(shift_id):
            raise NotFoundError("Shift not found")
        return shift_id

    def assign(self, *, emp_objid: str, shift_id, created_by: Optional[int]) -> ShiftAssignment:
        if not emp_objid or not shift_id:
            raise ValidationError("emp_objid and shiftid are required")
        if not created_by:
            raise AuthenticationError("User not authenticated")

        assignment = ShiftAssignment(
            objid=str(uuid.uuid4()),
            emp_objid=emp_objid,
            shift_id=self._require_shift(shift_id),
            is_used=False,
            created_by=int(created_by),
        )
        self._assignments.create(assignment)
        logger.info("shift %s assigned to %s", assignment.shift_id, emp_objid)
        return assignment

    def update(self, objid: str, payload: dict) -> None:
        has_shift = payload.get("shiftid") not in (None, "")
        if not has_shift and "is_used" not in payload:
            raise ValidationError("Nothing to update")
        self.get(objid)
        self._assignments.update(
            objid,
            shift_id=self._require_shift(payload["shiftid"]) if has_shift else None,
            is_used=as_flag(payload["is_used"]) if "is_used" in payload else None,
        )

    def delete(self, objid: str) -> None:
        if not self._assignments.delete(objid):
            raise NotFoundError("Assigned shift not found")

    def bulk_assign(self, *, shift_id, created_by: Optional[int]) -> int:
        if not shift_id:
            raise ValidationError("shiftid is required")
        if not created_by:
            raise AuthenticationError("User not authenticated")
        inserted = self._assignments.assign_to_unassigned(
            shift_id=self._require_shift(shift_id), created_by=int(created_by)
        )
        logger.info("bulk assigned shift %s to %d employees", shift_id, inserted)
        return inserted
