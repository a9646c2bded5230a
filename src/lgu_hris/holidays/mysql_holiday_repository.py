from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import HolidayCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import HolidayRecord, HolidayType
from .repository import HolidayRepository, HolidayTypeRepository


class MySQLHolidayTypeRepository(HolidayTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[HolidayType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, typesname FROM holidaytypes ORDER BY typesname")
            return [HolidayType(int(r["id"]), r["typesname"]) for r in fetchall(cur)]

    def get(self, type_id: int) -> Optional[HolidayType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, typesname FROM holidaytypes WHERE id=%s", (type_id,))
            r = fetchone(cur)
            return HolidayType(int(r["id"]), r["typesname"]) if r else None

    def find_by_name(self, name: str, *, exclude_id: Optional[int] = None) -> Optional[HolidayType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, typesname FROM holidaytypes WHERE typesname=%s AND id<>%s LIMIT 1",
                (name, exclude_id or 0),
            )
            r = fetchone(cur)
            return HolidayType(int(r["id"]), r["typesname"]) if r else None

    def create(self, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO holidaytypes (typesname) VALUES (%s)", (name,))
            return int(cur.lastrowid)

    def update(self, type_id: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE holidaytypes SET typesname=%s WHERE id=%s", (name, type_id))
            return cur.rowcount > 0

    def delete(self, type_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidaytypes WHERE id=%s", (type_id,))
            return cur.rowcount > 0

    def count_holidays(self, type_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM holidays WHERE holidaytype=%s", (type_id,))
            r = fetchone(cur)
            return int(r["n"]) if r else 0


_HOLIDAY_SELECT = """
    SELECT h.id, h.holidayname, h.holidaycategory, h.holidaytype, h.holidaydesc,
           h.holidaydate, h.isrecurring, h.status, h.createdby,
           ht.typesname AS holiday_type_name,
           s.username AS createdby_username
    FROM holidays h
    LEFT JOIN holidaytypes ht ON h.holidaytype = ht.id
    LEFT JOIN sysusers s ON h.createdby = s.id
"""


def _to_holiday(r: dict) -> Optional[HolidayRecord]:
    holiday_date = normalize_mysql_date(r.get("holidaydate"))
    if holiday_date is None:
        return None
    category = str(r.get("holidaycategory") or HolidayCategory.NATIONAL.value).title()
    return HolidayRecord(
        holiday_id=int(r["id"]),
        name=r.get("holidayname") or "",
        category=HolidayCategory(category) if category in ("Local", "National") else HolidayCategory.NATIONAL,
        type_id=int(r.get("holidaytype") or 0),
        holiday_date=holiday_date,
        description=r.get("holidaydesc"),
        recurring=str(r.get("isrecurring")).strip().lower() in ("1", "true", "yes"),
        status=int(r["status"]) if r.get("status") is not None else 1,
        created_by=int(r["createdby"]) if r.get("createdby") is not None else None,
        type_name=r.get("holiday_type_name"),
        created_by_username=r.get("createdby_username"),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[HolidayRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_HOLIDAY_SELECT} ORDER BY h.holidaydate DESC")
            rows = fetchall(cur)
        # Rows with zero dates cannot be shown or edited.
        return [h for h in (_to_holiday(r) for r in rows) if h]

    def get(self, holiday_id: int) -> Optional[HolidayRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_HOLIDAY_SELECT} WHERE h.id=%s", (holiday_id,))
            r = fetchone(cur)
        return _to_holiday(r) if r else None

    def create(self, holiday: HolidayRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays (holidayname, holidaycategory, holidaytype, holidaydesc, holidaydate,
                                      isrecurring, createdby, createddate, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s, NOW(), %s)
                """,
                (
                    holiday.name, holiday.category.value, holiday.type_id, holiday.description,
                    holiday.holiday_date, int(holiday.recurring), holiday.created_by, holiday.status,
                ),
            )
            return int(cur.lastrowid)

    def update(self, holiday: HolidayRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE holidays
                SET holidayname=%s, holidaycategory=%s, holidaytype=%s, holidaydesc=%s,
                    holidaydate=%s, isrecurring=%s, status=%s
                WHERE id=%s
                """,
                (
                    holiday.name, holiday.category.value, holiday.type_id, holiday.description,
                    holiday.holiday_date, int(holiday.recurring), holiday.status, holiday.holiday_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE id=%s", (holiday_id,))
            return cur.rowcount > 0
