from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Machine:
    """DTR Machines row (one biometric terminal)."""

    machine_id: int
    alias: str
    ip: str
    port: int = 4370
    machine_number: int = 1
    enabled: bool = True
    serial_number: Optional[str] = None
    comm_password: int = 0

    def to_dict(self) -> dict:
        return {
            "ID": self.machine_id,
            "MachineAlias": self.alias,
            "IP": self.ip,
            "Port": self.port,
            "MachineNumber": self.machine_number,
            "Enabled": self.enabled,
            "sn": self.serial_number,
        }


@dataclass(frozen=True)
class DeviceLog:
    """A punch read from a terminal."""

    device_user_id: str
    timestamp: datetime
    status: int = 0  # verify mode
    punch: int = 0  # in/out code


@dataclass(frozen=True)
class DeviceInfo:
    firmware: Optional[str]
    serial_number: Optional[str]
    device_name: Optional[str]
    user_count: int


@dataclass
class SyncResult:
    machine_id: int
    machine_alias: str
    found: int = 0
    processed: int = 0
    saved: int = 0
    duplicates: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "machine_id": self.machine_id,
            "machine_alias": self.machine_alias,
            "found": self.found,
            "processed": self.processed,
            "saved": self.saved,
            "duplicates": self.duplicates,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }
