"""mysql-connector helpers for the HR201 database.

Repositories open one short-lived connection per operation through
`db_cursor` and read rows as dicts (dictionary cursors).
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from .connection import DatabaseConnection

# HR201 still carries zero dates from the legacy forms.
ZERO_DATES = {"", "0000-00-00", "0000-00-00 00:00:00"}


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as time, timedelta (seconds since midnight) or 'HH:MM:SS'."""

    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(hour=seconds // 3600, minute=(seconds % 3600) // 60, second=seconds % 60)
    if isinstance(value, str):
        return parse_hhmm(value)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def normalize_mysql_date(value: Any) -> Optional[date]:
    """DATE/DATETIME columns as a date; zero dates read as None."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text in ZERO_DATES:
        return None
    return parse_iso_date(text[:10])
