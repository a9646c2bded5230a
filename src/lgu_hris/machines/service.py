from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, List, Optional

from ..common.validators import require_int, require_non_empty
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from .device import ZKDeviceClient
from .model import DeviceInfo, Machine, SyncResult
from .repository import CheckInOutRepository, MachineRepository

logger = logging.getLogger(__name__)

DEFAULT_VERIFY_CODE = 1

# pyzk punch code -> CHECKINOUT.CHECKTYPE as written by ZKTeco software.
CHECK_TYPES = {0: "I", 1: "O", 2: "0", 3: "1", 4: "i", 5: "o"}


class MachineService:
    def __init__(self, machines: MachineRepository):
        self._machines = machines

    def list(self, *, enabled_only: bool = False) -> List[Machine]:
        if enabled_only:
            return list(self._machines.list_enabled())
        return list(self._machines.list_all())

    def get(self, machine_id: int) -> Machine:
        machine = self._machines.get(machine_id)
        if not machine:
            raise NotFoundError("Machine not found")
        return machine

    def create(self, payload: dict) -> int:
        machine = self._from_payload(payload, machine_id=0)
        new_id = self._machines.create(machine)
        logger.info("machine %s created (%s:%s)", new_id, machine.ip, machine.port)
        return new_id

    def update(self, machine_id: int, payload: dict) -> None:
        existing = self.get(machine_id)
        merged = {**existing.to_dict(), **payload}
        self._machines.update(self._from_payload(merged, machine_id=machine_id, base=existing))

    def delete(self, machine_id: int) -> None:
        if not self._machines.delete(machine_id):
            raise NotFoundError("Machine not found")

    @staticmethod
    def _from_payload(payload: dict, *, machine_id: int, base: Optional[Machine] = None) -> Machine:
        alias = require_non_empty(payload.get("MachineAlias"), "MachineAlias")
        ip = require_non_empty(payload.get("IP"), "IP")
        port = require_int(payload.get("Port") or 4370, "Port")
        if not 0 < port < 65536:
            raise ValidationError("Port must be between 1 and 65535")
        machine = base or Machine(machine_id=machine_id, alias=alias, ip=ip)
        return replace(
            machine,
            machine_id=machine_id,
            alias=alias,
            ip=ip,
            port=port,
            machine_number=require_int(payload.get("MachineNumber") or 1, "MachineNumber"),
            enabled=str(payload.get("Enabled", True)).lower() not in ("0", "false", "no"),
            serial_number=payload.get("sn") or machine.serial_number,
        )


class MachineSyncService:
    """Pull punches from terminals into CHECKINOUT."""

    def __init__(
        self,
        machines: MachineRepository,
        logs: CheckInOutRepository,
        *,
        timeout: int = 5,
        client_factory: Optional[Callable[[Machine], ZKDeviceClient]] = None,
    ):
        self._machines = machines
        self._logs = logs
        self._client_factory = client_factory or (lambda m: ZKDeviceClient(m, timeout=timeout))

    def _machine(self, machine_id: int) -> Machine:
        machine = self._machines.get(machine_id)
        if not machine:
            raise NotFoundError("Machine not found")
        return machine

    def test_connection(self, machine_id: int) -> DeviceInfo:
        return self._client_factory(self._machine(machine_id)).test_connection()

    def sync(self, machine_id: int, start: Optional[date] = None, end: Optional[date] = None) -> SyncResult:
        if start and end and start > end:
            raise ValidationError("Start date must not be after end date")

        machine = self._machine(machine_id)
        result = SyncResult(machine_id=machine.machine_id, machine_alias=machine.alias)
        device_logs = self._client_factory(machine).fetch_attendance(start=start, end=end)
        result.found = len(device_logs)

        badge_cache: dict = {}
        serial = machine.serial_number or ""
        for log in device_logs:
            result.processed += 1
            if log.device_user_id not in badge_cache:
                badge_cache[log.device_user_id] = self._logs.user_id_for_badge(log.device_user_id)
            user_id = badge_cache[log.device_user_id]
            if user_id is None:
                result.skipped += 1
                continue

            check_time = log.timestamp.replace(microsecond=0)
            if self._logs.log_exists(user_id=user_id, check_time=check_time):
                result.duplicates += 1
                continue

            self._logs.insert_log(
                user_id=user_id,
                check_time=check_time,
                check_type=CHECK_TYPES.get(log.punch, "I"),
                verify_code=log.status or DEFAULT_VERIFY_CODE,
                sensor_id=str(machine.machine_number),
                work_code=0,
                serial_number=serial,
            )
            result.saved += 1

        logger.info(
            "sync %s: found=%d saved=%d duplicates=%d skipped=%d",
            machine.alias, result.found, result.saved, result.duplicates, result.skipped,
        )
        return result

    def sync_all(self, start: Optional[date] = None, end: Optional[date] = None) -> List[SyncResult]:
        results = []
        for machine in self._machines.list_enabled():
            try:
                results.append(self.sync(machine.machine_id, start, end))
            except DomainError as e:
                logger.warning("sync %s failed: %s", machine.alias, e)
                results.append(self._failed(machine, e))
            except Exception as e:
                logger.exception("sync %s failed", machine.alias)
                results.append(self._failed(machine, e))
        return results

    @staticmethod
    def _failed(machine: Machine, error: Exception) -> SyncResult:
        failed = SyncResult(machine_id=machine.machine_id, machine_alias=machine.alias)
        failed.errors.append(str(error))
        return failed
