from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.enums import ShiftTimeMode


def _time_text(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None


@dataclass(frozen=True)
class ShiftType:
    """shiftscheduletypes row: expected punches and their capture windows."""

    shift_id: int
    name: str
    mode: ShiftTimeMode = ShiftTimeMode.AM
    checkin: Optional[time] = None
    checkin_start: Optional[time] = None
    checkin_end: Optional[time] = None
    checkout: Optional[time] = None
    checkout_start: Optional[time] = None
    checkout_end: Optional[time] = None
    is_ot: bool = False
    credits: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "shiftname": self.name,
            "shifttimemode": self.mode.value,
            "shift_checkin": _time_text(self.checkin),
            "shift_checkin_start": _time_text(self.checkin_start),
            "shift_checkin_end": _time_text(self.checkin_end),
            "shift_checkout": _time_text(self.checkout),
            "shift_checkout_start": _time_text(self.checkout_start),
            "shift_checkout_end": _time_text(self.checkout_end),
            "is_ot": int(self.is_ot),
            "credits": self.credits,
        }


@dataclass(frozen=True)
class ShiftAssignment:
    """employee_assignedshifts row; only rows with is_used drive the DTR."""

    objid: str
    emp_objid: str
    shift_id: int
    is_used: bool = False
    created_by: Optional[int] = None
    created_date: Optional[datetime] = None
    employee_name: str = ""
    shift_name: Optional[str] = None
    shift_mode: Optional[str] = None
    created_by_username: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "objid": self.objid,
            "emp_objid": self.emp_objid,
            "shiftid": self.shift_id,
            "is_used": int(self.is_used),
            "createdby": self.created_by,
            "createddate": self.created_date.isoformat(sep=" ") if self.created_date else None,
            "employee_name": self.employee_name,
            "shiftname": self.shift_name,
            "shifttimemode": self.shift_mode,
            "createdby_username": self.created_by_username,
        }
