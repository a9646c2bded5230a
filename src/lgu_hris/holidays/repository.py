from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import HolidayRecord, HolidayType


class HolidayTypeRepository(Protocol):
    def list_all(self) -> Sequence[HolidayType]:
        raise NotImplementedError

    def get(self, type_id: int) -> Optional[HolidayType]:
        raise NotImplementedError

    def find_by_name(self, name: str, *, exclude_id: Optional[int] = None) -> Optional[HolidayType]:
        raise NotImplementedError

    def create(self, name: str) -> int:
        raise NotImplementedError

    def update(self, type_id: int, name: str) -> bool:
        raise NotImplementedError

    def delete(self, type_id: int) -> bool:
        raise NotImplementedError

    def count_holidays(self, type_id: int) -> int:
        raise NotImplementedError


class HolidayRepository(Protocol):
    def list_all(self) -> Sequence[HolidayRecord]:
        raise NotImplementedError

    def get(self, holiday_id: int) -> Optional[HolidayRecord]:
        raise NotImplementedError

    def create(self, holiday: HolidayRecord) -> int:
        raise NotImplementedError

    def update(self, holiday: HolidayRecord) -> bool:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
