"""pyodbc helpers for the DTR database.

pyodbc rows are tuples with attribute access; repositories work with dicts
keyed by column name, like the HR201 side does with dictionary cursors.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import MSSQLConnection


@contextmanager
def mssql_cursor(conn_factory: MSSQLConnection):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
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


def _columns(cur) -> List[str]:
    return [d[0] for d in (cur.description or [])]


def fetchone_dict(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    if not row:
        return None
    return dict(zip(_columns(cur), row))


def fetchall_dict(cur) -> List[Dict[str, Any]]:
    cols = _columns(cur)
    return [dict(zip(cols, row)) for row in cur.fetchall() or []]
