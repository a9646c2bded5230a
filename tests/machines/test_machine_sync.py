from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from types import SimpleNamespace
from typing import Optional

import pytest

from lgu_hris.core.exceptions import DeviceConnectionError, NotFoundError, ValidationError
from lgu_hris.machines import device
from lgu_hris.machines.device import ZKDeviceClient
from lgu_hris.machines.model import DeviceLog, Machine
from lgu_hris.machines.service import MachineService, MachineSyncService


@dataclass
class InMemoryMachines:
    rows: dict[int, Machine] = field(default_factory=dict)

    def list_all(self):
        return list(self.rows.values())

    def list_enabled(self):
        return [m for m in self.rows.values() if m.enabled]

    def get(self, machine_id: int) -> Optional[Machine]:
        return self.rows.get(machine_id)

    def create(self, machine: Machine) -> int:
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = replace(machine, machine_id=new_id)
        return new_id

    def update(self, machine: Machine) -> bool:
        self.rows[machine.machine_id] = machine
        return True

    def delete(self, machine_id: int) -> bool:
        return self.rows.pop(machine_id, None) is not None


@dataclass
class InMemoryCheckInOut:
    badges: dict[str, int]
    existing: set = field(default_factory=set)
    inserted: list = field(default_factory=list)
    lookups: list = field(default_factory=list)

    def user_id_for_badge(self, badge_number: str) -> Optional[int]:
        self.lookups.append(badge_number)
        return self.badges.get(badge_number)

    def log_exists(self, *, user_id: int, check_time: datetime) -> bool:
        return (user_id, check_time) in self.existing

    def insert_log(self, **row) -> None:
        self.inserted.append(row)


class FakeClient:
    def __init__(self, logs=None, error=None):
        self.logs = logs or []
        self.error = error

    def fetch_attendance(self, *, start=None, end=None):
        if self.error:
            raise self.error
        return self.logs


def _machines() -> InMemoryMachines:
    return InMemoryMachines(
        {
            1: Machine(1, "Main Lobby", "192.168.1.201", machine_number=1, serial_number="SN-A"),
            2: Machine(2, "Annex", "192.168.1.202", machine_number=2),
            3: Machine(3, "Old Unit", "192.168.1.203", enabled=False),
        }
    )


def test_sync_saves_new_logs_and_counts_the_rest():
    logs = InMemoryCheckInOut(badges={"101": 5}, existing={(5, datetime(2025, 3, 3, 8, 0))})
    punches = [
        DeviceLog("101", datetime(2025, 3, 3, 8, 0), status=1, punch=0),
        DeviceLog("101", datetime(2025, 3, 3, 17, 5, 12, 500), status=15, punch=1),
        DeviceLog("999", datetime(2025, 3, 3, 8, 3)),
    ]
    service = MachineSyncService(_machines(), logs, client_factory=lambda m: FakeClient(punches))

    result = service.sync(1, date(2025, 3, 1), date(2025, 3, 31))

    assert result.to_dict() == {
        "machine_id": 1,
        "machine_alias": "Main Lobby",
        "found": 3,
        "processed": 3,
        "saved": 1,
        "duplicates": 1,
        "skipped": 1,
        "errors": [],
    }
    assert logs.inserted == [
        {
            "user_id": 5,
            "check_time": datetime(2025, 3, 3, 17, 5, 12),
            "check_type": "O",
            "verify_code": 15,
            "sensor_id": "1",
            "work_code": 0,
            "serial_number": "SN-A",
        }
    ]
    # Badge lookups are cached per sync.
    assert logs.lookups == ["101", "999"]


def test_sync_rejects_reversed_range_and_unknown_machine():
    service = MachineSyncService(_machines(), InMemoryCheckInOut({}), client_factory=lambda m: FakeClient())
    with pytest.raises(ValidationError):
        service.sync(1, date(2025, 3, 31), date(2025, 3, 1))
    with pytest.raises(NotFoundError):
        service.sync(42)


def test_sync_all_covers_enabled_machines_and_keeps_going():
    def factory(machine):
        if machine.machine_id == 2:
            return FakeClient(error=DeviceConnectionError("Cannot connect to Annex"))
        return FakeClient([DeviceLog("101", datetime(2025, 3, 3, 8, 0))])

    service = MachineSyncService(_machines(), InMemoryCheckInOut({"101": 5}), client_factory=factory)

    results = service.sync_all()

    assert [r.machine_id for r in results] == [1, 2]
    assert results[0].saved == 1
    assert results[1].errors == ["Cannot connect to Annex"]


def test_machine_crud_validation():
    repo = _machines()
    service = MachineService(repo)

    new_id = service.create({"MachineAlias": "Gate", "IP": "10.0.0.5", "Port": "4370"})
    assert repo.rows[new_id].port == 4370
    assert [m.machine_id for m in service.list(enabled_only=True)] == [1, 2, new_id]

    with pytest.raises(ValidationError):
        service.create({"MachineAlias": "Gate", "IP": "10.0.0.5", "Port": 70000})
    with pytest.raises(ValidationError):
        service.create({"IP": "10.0.0.5"})

    service.update(1, {"Enabled": "false"})
    assert repo.rows[1].enabled is False
    assert repo.rows[1].serial_number == "SN-A"

    service.delete(new_id)
    with pytest.raises(NotFoundError):
        service.get(new_id)


class FakeConnection:
    def __init__(self, records, error=None):
        self.records = records
        self.error = error
        self.calls = []

    def disable_device(self):
        self.calls.append("disable")

    def enable_device(self):
        self.calls.append("enable")

    def disconnect(self):
        self.calls.append("disconnect")

    def get_attendance(self):
        if self.error:
            raise self.error
        return self.records


def test_client_filters_by_date_and_releases_device(monkeypatch):
    records = [
        SimpleNamespace(user_id=101, timestamp=datetime(2025, 2, 28, 8, 0), status=1, punch=0),
        SimpleNamespace(user_id=101, timestamp=datetime(2025, 3, 3, 8, 0), status=1, punch=0),
        SimpleNamespace(user_id="102", timestamp=datetime(2025, 3, 3, 17, 0), status=1, punch=1),
    ]
    conn = FakeConnection(records)
    monkeypatch.setattr(device, "ZK", lambda *args, **kwargs: SimpleNamespace(connect=lambda: conn))

    logs = ZKDeviceClient(Machine(1, "Main Lobby", "192.168.1.201")).fetch_attendance(start=date(2025, 3, 1))

    assert [(log.device_user_id, log.punch) for log in logs] == [("101", 0), ("102", 1)]
    assert conn.calls == ["disable", "enable", "disconnect"]


def test_client_wraps_connection_failures(monkeypatch):
    def refuse():
        raise OSError("timed out")

    monkeypatch.setattr(device, "ZK", lambda *args, **kwargs: SimpleNamespace(connect=refuse))

    with pytest.raises(DeviceConnectionError, match="Main Lobby"):
        ZKDeviceClient(Machine(1, "Main Lobby", "192.168.1.201")).fetch_attendance()


def test_client_wraps_read_failures_and_still_releases_device(monkeypatch):
    conn = FakeConnection([], error=RuntimeError("can't read attendance records"))
    monkeypatch.setattr(device, "ZK", lambda *args, **kwargs: SimpleNamespace(connect=lambda: conn))

    with pytest.raises(DeviceConnectionError, match="can't read attendance records"):
        ZKDeviceClient(Machine(1, "Main Lobby", "192.168.1.201")).fetch_attendance()
    assert conn.calls == ["disable", "enable", "disconnect"]


def test_sync_all_survives_device_read_errors(monkeypatch):
    conn = FakeConnection([], error=RuntimeError("can't read attendance records"))
    monkeypatch.setattr(device, "ZK", lambda *args, **kwargs: SimpleNamespace(connect=lambda: conn))
    service = MachineSyncService(_machines(), InMemoryCheckInOut({"101": 5}))

    results = service.sync_all()

    assert [r.machine_id for r in results] == [1, 2]
    assert all("can't read attendance records" in r.errors[0] for r in results)


def test_sync_all_survives_database_errors():
    class BrokenCheckInOut(InMemoryCheckInOut):
        def insert_log(self, **row):
            raise RuntimeError("CHECKINOUT insert failed")

    punches = [DeviceLog("101", datetime(2025, 3, 3, 8, 0))]
    service = MachineSyncService(
        _machines(), BrokenCheckInOut({"101": 5}), client_factory=lambda m: FakeClient(punches)
    )

    results = service.sync_all()

    assert [r.errors for r in results] == [["CHECKINOUT insert failed"], ["CHECKINOUT insert failed"]]
