from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

import pytest

from lgu_hris.core.enums import HolidayCategory
from lgu_hris.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from lgu_hris.holidays.model import HolidayRecord, HolidayType
from lgu_hris.holidays.service import HolidayService


@dataclass
class InMemoryHolidayTypes:
    rows: dict[int, str] = field(default_factory=lambda: {1: "Regular Holiday", 2: "Special Non-Working"})
    holidays: Optional["InMemoryHolidays"] = None

    def list_all(self):
        return [HolidayType(i, n) for i, n in sorted(self.rows.items(), key=lambda kv: kv[1])]

    def get(self, type_id: int):
        return HolidayType(type_id, self.rows[type_id]) if type_id in self.rows else None

    def find_by_name(self, name: str, *, exclude_id=None):
        for i, n in self.rows.items():
            if n == name and i != exclude_id:
                return HolidayType(i, n)
        return None

    def create(self, name: str) -> int:
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = name
        return new_id

    def update(self, type_id: int, name: str) -> bool:
        self.rows[type_id] = name
        return True

    def delete(self, type_id: int) -> bool:
        return self.rows.pop(type_id, None) is not None

    def count_holidays(self, type_id: int) -> int:
        if self.holidays is None:
            return 0
        return sum(1 for h in self.holidays.rows.values() if h.type_id == type_id)


@dataclass
class InMemoryHolidays:
    rows: dict[int, HolidayRecord] = field(default_factory=dict)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda h: h.holiday_date, reverse=True)

    def get(self, holiday_id: int):
        return self.rows.get(holiday_id)

    def create(self, holiday: HolidayRecord) -> int:
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = replace(holiday, holiday_id=new_id)
        return new_id

    def update(self, holiday: HolidayRecord) -> bool:
        self.rows[holiday.holiday_id] = holiday
        return True

    def delete(self, holiday_id: int) -> bool:
        return self.rows.pop(holiday_id, None) is not None


def _service():
    holidays = InMemoryHolidays()
    types = InMemoryHolidayTypes(holidays=holidays)
    return HolidayService(holidays, types), holidays, types


RIZAL_DAY = {
    "holidayname": " Rizal Day ",
    "holidaycategory": "National",
    "holidaytype": "1",
    "holidaydate": "2025-12-30",
    "isrecurring": True,
}


def test_create_holiday_defaults_to_active():
    service, holidays, _ = _service()

    new_id = service.create(RIZAL_DAY, created_by=4)

    holiday = holidays.rows[new_id]
    assert holiday.name == "Rizal Day"
    assert holiday.category is HolidayCategory.NATIONAL
    assert holiday.holiday_date == date(2025, 12, 30)
    assert holiday.recurring is True
    assert holiday.status == 1
    assert holiday.created_by == 4
    assert holiday.to_dict()["holidaydate"] == "2025-12-30"


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"holidayname": "  "}, "Holiday name"),
        ({"holidaycategory": "Regional"}, "Local or National"),
        ({"holidaytype": None}, "Holiday type is required"),
        ({"holidaydate": ""}, "Holiday date is required"),
        ({"holidaydate": "30/12/2025"}, "YYYY-MM-DD"),
    ],
)
def test_create_holiday_validation(changes, message):
    service, _, _ = _service()
    with pytest.raises(ValidationError, match=message):
        service.create({**RIZAL_DAY, **changes}, created_by=4)


def test_create_holiday_needs_known_type_and_user():
    service, _, _ = _service()
    with pytest.raises(NotFoundError, match="Holiday type"):
        service.create({**RIZAL_DAY, "holidaytype": 9}, created_by=4)
    with pytest.raises(AuthenticationError):
        service.create(RIZAL_DAY, created_by=None)


def test_update_holiday_keeps_creator_and_can_deactivate():
    service, holidays, _ = _service()
    new_id = service.create(RIZAL_DAY, created_by=4)

    service.update(new_id, {**RIZAL_DAY, "holidaycategory": "Local", "status": 0, "holidaydesc": ""})

    holiday = holidays.rows[new_id]
    assert holiday.category is HolidayCategory.LOCAL
    assert holiday.status == 0
    assert holiday.description is None
    assert holiday.created_by == 4

    with pytest.raises(NotFoundError):
        service.update(99, RIZAL_DAY)


def test_holiday_type_names_are_unique():
    service, _, types = _service()

    created = service.create_type(" Local Fiesta ")
    assert types.rows[created.type_id] == "Local Fiesta"

    with pytest.raises(ConflictError):
        service.create_type("Regular Holiday")
    with pytest.raises(ConflictError):
        service.update_type(created.type_id, "Special Non-Working")

    service.update_type(created.type_id, "Local Fiesta")
    with pytest.raises(NotFoundError):
        service.update_type(42, "Anything")
    with pytest.raises(ValidationError):
        service.create_type("")


def test_holiday_type_in_use_cannot_be_deleted():
    service, _, types = _service()
    service.create(RIZAL_DAY, created_by=4)

    with pytest.raises(ConflictError, match="being used"):
        service.delete_type(1)

    service.delete_type(2)
    assert 2 not in types.rows
    with pytest.raises(NotFoundError):
        service.delete_type(2)


def test_delete_holiday():
    service, holidays, _ = _service()
    new_id = service.create(RIZAL_DAY, created_by=4)

    service.delete(new_id)

    assert holidays.rows == {}
    with pytest.raises(NotFoundError):
        service.get(new_id)
