from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ShiftAssignment, ShiftType


class ShiftTypeRepository(Protocol):
    def list_all(self) -> Sequence[ShiftType]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[ShiftType]:
        raise NotImplementedError

    def create(self, shift: ShiftType) -> int:
        raise NotImplementedError

    def update(self, shift: ShiftType) -> bool:
        raise NotImplementedError

    def delete(self, shift_id: int) -> bool:
        raise NotImplementedError


class ShiftAssignmentRepository(Protocol):
    def list(self, emp_objid: Optional[str] = None) -> Sequence[ShiftAssignment]:
        raise NotImplementedError

    def get(self, objid: str) -> Optional[ShiftAssignment]:
        raise NotImplementedError

    def create(self, assignment: ShiftAssignment) -> None:
        raise NotImplementedError

    def update(self, objid: str, *, shift_id: Optional[int] = None, is_used: Optional[bool] = None) -> bool:
        raise NotImplementedError

    def delete(self, objid: str) -> bool:
        raise NotImplementedError

    def assign_to_unassigned(self, *, shift_id: int, created_by: int) -> int:
        """Give ``shift_id`` (in use) to every employee without it; returns rows added."""
        raise NotImplementedError
