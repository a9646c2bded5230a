from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import HolidayCategory


@dataclass(frozen=True)
class HolidayType:
    type_id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.type_id, "typesname": self.name}


@dataclass(frozen=True)
class HolidayRecord:
    """holidays row as maintained by HR; recurring ones repeat every year on the same month/day."""

    holiday_id: int
    name: str
    category: HolidayCategory
    type_id: int
    holiday_date: date
    description: Optional[str] = None
    recurring: bool = False
    status: int = 1
    created_by: Optional[int] = None
    type_name: Optional[str] = None
    created_by_username: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.holiday_id,
            "holidayname": self.name,
            "holidaycategory": self.category.value,
            "holidaytype": self.type_id,
            "holiday_type_name": self.type_name,
            "holidaydesc": self.description,
            "holidaydate": self.holiday_date.isoformat(),
            "isrecurring": int(self.recurring),
            "status": self.status,
            "createdby": self.created_by,
            "createdby_username": self.created_by_username,
        }
