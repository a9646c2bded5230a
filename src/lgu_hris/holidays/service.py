from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import as_flag, require_int, require_non_empty
from ..core.enums import HolidayCategory
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import HolidayRecord, HolidayType
from .repository import HolidayRepository, HolidayTypeRepository

logger = logging.getLogger(__name__)


class HolidayService:
    """Holidays and holiday types. Only holidays with status 1 count in the DTR."""

    def __init__(self, holidays: HolidayRepository, types: HolidayTypeRepository):
        self._holidays = holidays
        self._types = types

    # holiday types

    def list_types(self) -> List[HolidayType]:
        return list(self._types.list_all())

    def get_type(self, type_id: int) -> HolidayType:
        found = self._types.get(type_id)
        if not found:
            raise NotFoundError("Holiday type not found")
        return found

    def create_type(self, name) -> HolidayType:
        name = require_non_empty(name, "Type name")
        if self._types.find_by_name(name):
            raise ConflictError("Holiday type name already exists")
        return HolidayType(self._types.create(name), name)

    def update_type(self, type_id: int, name) -> HolidayType:
        name = require_non_empty(name, "Type name")
        self.get_type(type_id)
        if self._types.find_by_name(name, exclude_id=type_id):
            raise ConflictError("Holiday type name already exists")
        self._types.update(type_id, name)
        return HolidayType(type_id, name)

    def delete_type(self, type_id: int) -> None:
        if self._types.count_holidays(type_id) > 0:
            raise ConflictError("Cannot delete holiday type: it is being used by existing holidays")
        if not self._types.delete(type_id):
            raise NotFoundError("Holiday type not found")

    # holidays

    def list(self) -> List[HolidayRecord]:
        return list(self._holidays.list_all())

    def get(self, holiday_id: int) -> HolidayRecord:
        found = self._holidays.get(holiday_id)
        if not found:
            raise NotFoundError("Holiday not found")
        return found

    def create(self, payload: dict, *, created_by: Optional[int]) -> int:
        holiday = self._from_payload(payload, holiday_id=0)
        if not created_by:
            raise AuthenticationError("User not authenticated")
        new_id = self._holidays.create(replace(holiday, created_by=int(created_by)))
        logger.info("holiday %s created: %s on %s", new_id, holiday.name, holiday.holiday_date)
        return new_id

    def update(self, holiday_id: int, payload: dict) -> HolidayRecord:
        existing = self.get(holiday_id)
        holiday = self._from_payload(payload, holiday_id=holiday_id)
        holiday = replace(holiday, created_by=existing.created_by)
        self._holidays.update(holiday)
        return holiday

    def delete(self, holiday_id: int) -> None:
        if not self._holidays.delete(holiday_id):
            raise NotFoundError("Holiday not found")

    def _from_payload(self, payload: dict, *, holiday_id: int) -> HolidayRecord:
        name = require_non_empty(payload.get("holidayname"), "Holiday name")
        try:
            category = HolidayCategory(payload.get("holidaycategory"))
        except ValueError:
            raise ValidationError("Holiday category is required and must be Local or National")
        if not payload.get("holidaytype"):
            raise ValidationError("Holiday type is required")
        type_id = require_int(payload.get("holidaytype"), "Holiday type")
        if not self._types.get(type_id):
            raise NotFoundError("Holiday type not found")
        if not payload.get("holidaydate"):
            raise ValidationError("Holiday date is required")
        try:
            holiday_date = parse_iso_date(str(payload.get("holidaydate"))[:10])
        except ValueError:
            raise ValidationError("Holiday date must be YYYY-MM-DD")

        return HolidayRecord(
            holiday_id=holiday_id,
            name=name,
            category=category,
            type_id=type_id,
            holiday_date=holiday_date,
            description=(payload.get("holidaydesc") or None),
            recurring=as_flag(payload.get("isrecurring")),
            status=int(as_flag(payload.get("status"), default=True)),
        )
