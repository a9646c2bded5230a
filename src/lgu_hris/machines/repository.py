from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Machine


class MachineRepository(Protocol):
    def list_all(self) -> Sequence[Machine]:
        raise NotImplementedError

    def list_enabled(self) -> Sequence[Machine]:
        raise NotImplementedError

    def get(self, machine_id: int) -> Optional[Machine]:
        raise NotImplementedError

    def create(self, machine: Machine) -> int:
        raise NotImplementedError

    def update(self, machine: Machine) -> bool:
        raise NotImplementedError

    def delete(self, machine_id: int) -> bool:
        raise NotImplementedError


class CheckInOutRepository(Protocol):
    """Writes to DTR CHECKINOUT."""

    def user_id_for_badge(self, badge_number: str) -> Optional[int]:
        raise NotImplementedError

    def log_exists(self, *, user_id: int, check_time: datetime) -> bool:
        raise NotImplementedError

    def insert_log(
        self,
        *,
        user_id: int,
        check_time: datetime,
        check_type: str,
        verify_code: int,
        sensor_id: str,
        work_code: int,
        serial_number: str,
    ) -> None:
        raise NotImplementedError
