"""ZKTeco terminal access through pyzk."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterator, List, Optional

from zk import ZK

from ..core.exceptions import DeviceConnectionError
from .model import DeviceInfo, DeviceLog, Machine

logger = logging.getLogger(__name__)


class ZKDeviceClient:
    def __init__(self, machine: Machine, *, timeout: int = 5):
        self._machine = machine
        self._timeout = timeout

    @contextmanager
    def _connected(self, *, lock_device: bool = False) -> Iterator:
        zk = ZK(
            self._machine.ip,
            port=int(self._machine.port),
            timeout=self._timeout,
            password=int(self._machine.comm_password or 0),
        )
        try:
            conn = zk.connect()
        except Exception as e:
            raise DeviceConnectionError(
                f"Cannot connect to {self._machine.alias} at {self._machine.ip}:{self._machine.port}: {e}"
            )
        try:
            if lock_device:
                conn.disable_device()
            try:
                yield conn
            finally:
                if lock_device:
                    conn.enable_device()
        except DeviceConnectionError:
            raise
        except Exception as e:
            raise DeviceConnectionError(f"{self._machine.alias}: device error: {e}") from e
        finally:
            try:
                conn.disconnect()
            except Exception as e:
                logger.warning("%s: disconnect failed: %s", self._machine.alias, e)

    def test_connection(self) -> DeviceInfo:
        with self._connected() as conn:
            users = conn.get_users() or []
            return DeviceInfo(
                firmware=conn.get_firmware_version(),
                serial_number=conn.get_serialnumber(),
                device_name=conn.get_device_name(),
                user_count=len(users),
            )

    def fetch_attendance(self, *, start: Optional[date] = None, end: Optional[date] = None) -> List[DeviceLog]:
        with self._connected(lock_device=True) as conn:
            records = conn.get_attendance() or []
        logs = []
        for r in records:
            day = r.timestamp.date()
            if start and day < start:
                continue
            if end and day > end:
                continue
            logs.append(
                DeviceLog(
                    device_user_id=str(r.user_id),
                    timestamp=r.timestamp,
                    status=int(getattr(r, "status", 0) or 0),
                    punch=int(getattr(r, "punch", 0) or 0),
                )
            )
        logger.info("%s: %d of %d logs in range", self._machine.alias, len(logs), len(records))
        return logs
