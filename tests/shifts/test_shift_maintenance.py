from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import time
from typing import Optional

import pytest

from lgu_hris.core.enums import ShiftTimeMode
from lgu_hris.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from lgu_hris.shifts.model import ShiftAssignment, ShiftType
from lgu_hris.shifts.service import ShiftAssignmentService, ShiftService


@dataclass
class InMemoryShiftTypes:
    rows: dict[int, ShiftType] = field(default_factory=dict)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda s: s.name)

    def get_by_id(self, shift_id: int) -> Optional[ShiftType]:
        return self.rows.get(shift_id)

    def create(self, shift: ShiftType) -> int:
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = replace(shift, shift_id=new_id)
        return new_id

    def update(self, shift: ShiftType) -> bool:
        self.rows[shift.shift_id] = shift
        return True

    def delete(self, shift_id: int) -> bool:
        return self.rows.pop(shift_id, None) is not None


@dataclass
class InMemoryAssignments:
    rows: dict[str, ShiftAssignment] = field(default_factory=dict)
    employees: tuple = ("E1", "E2", "E3")

    def list(self, emp_objid=None):
        return [a for a in self.rows.values() if emp_objid is None or a.emp_objid == emp_objid]

    def get(self, objid: str):
        return self.rows.get(objid)

    def create(self, assignment: ShiftAssignment) -> None:
        self.rows[assignment.objid] = assignment

    def update(self, objid, *, shift_id=None, is_used=None) -> bool:
        current = self.rows[objid]
        self.rows[objid] = replace(
            current,
            shift_id=current.shift_id if shift_id is None else shift_id,
            is_used=current.is_used if is_used is None else is_used,
        )
        return True

    def delete(self, objid: str) -> bool:
        return self.rows.pop(objid, None) is not None

    def assign_to_unassigned(self, *, shift_id: int, created_by: int) -> int:
        have = {a.emp_objid for a in self.rows.values() if a.shift_id == shift_id}
        added = 0
        for emp in self.employees:
            if emp not in have:
                objid = f"bulk-{emp}"
                self.rows[objid] = ShiftAssignment(objid, emp, shift_id, is_used=True, created_by=created_by)
                added += 1
        return added


REGULAR = ShiftType(1, "Regular", ShiftTimeMode.AMPM, checkin=time(8, 0), checkout=time(17, 0))


def test_create_shift_normalizes_mode_and_times():
    repo = InMemoryShiftTypes()
    service = ShiftService(repo)

    new_id = service.create({
        "shiftname": "  Night Desk ",
        "shifttimemode": "pm",
        "shift_checkin": "13:00",
        "shift_checkin_start": "12:00:00",
        "shift_checkout": "",
        "is_ot": "1",
        "credits": "0.5",
    })

    shift = repo.rows[new_id]
    assert shift.name == "Night Desk"
    assert shift.mode is ShiftTimeMode.PM
    assert shift.checkin == time(13, 0)
    assert shift.checkin_start == time(12, 0)
    assert shift.checkout is None
    assert shift.is_ot is True
    assert shift.credits == 0.5
    assert shift.to_dict()["shift_checkin"] == "13:00:00"


def test_unknown_mode_defaults_to_morning():
    repo = InMemoryShiftTypes()
    new_id = ShiftService(repo).create({"shiftname": "Half Day", "shifttimemode": "evening"})
    assert repo.rows[new_id].mode is ShiftTimeMode.AM


def test_create_shift_rejects_bad_input():
    service = ShiftService(InMemoryShiftTypes())
    with pytest.raises(ValidationError, match="shiftname"):
        service.create({"shifttimemode": "AM"})
    with pytest.raises(ValidationError, match="shift_checkin"):
        service.create({"shiftname": "Regular", "shift_checkin": "8 o'clock"})
    with pytest.raises(ValidationError, match="credits"):
        service.create({"shiftname": "Regular", "credits": "lots"})


def test_update_shift_changes_only_posted_fields():
    repo = InMemoryShiftTypes({1: REGULAR})
    service = ShiftService(repo)

    service.update(1, {"shift_checkout": "16:30", "shift_checkout_end": None})

    shift = repo.rows[1]
    assert shift.name == "Regular"
    assert shift.mode is ShiftTimeMode.AMPM
    assert shift.checkin == time(8, 0)
    assert shift.checkout == time(16, 30)

    with pytest.raises(NotFoundError):
        service.update(9, {"shiftname": "Ghost"})
    service.delete(1)
    with pytest.raises(NotFoundError):
        service.delete(1)


def _assignment_service(assignments=None):
    assignments = assignments if assignments is not None else InMemoryAssignments()
    return ShiftAssignmentService(assignments, InMemoryShiftTypes({1: REGULAR})), assignments


def test_assign_starts_unused_until_switched_on():
    service, repo = _assignment_service()

    assignment = service.assign(emp_objid="E1", shift_id="1", created_by=3)

    assert repo.rows[assignment.objid].is_used is False
    assert repo.rows[assignment.objid].created_by == 3

    service.update(assignment.objid, {"is_used": True})
    assert repo.rows[assignment.objid].is_used is True
    assert [a.objid for a in service.list("E1")] == [assignment.objid]
    assert service.list("E2") == []


def test_assign_requires_employee_shift_and_user():
    service, _ = _assignment_service()
    with pytest.raises(ValidationError):
        service.assign(emp_objid="", shift_id=1, created_by=3)
    with pytest.raises(AuthenticationError):
        service.assign(emp_objid="E1", shift_id=1, created_by=None)
    with pytest.raises(NotFoundError, match="Shift not found"):
        service.assign(emp_objid="E1", shift_id=7, created_by=3)


def test_update_assignment_needs_something_to_change():
    service, _ = _assignment_service()
    assignment = service.assign(emp_objid="E1", shift_id=1, created_by=3)

    with pytest.raises(ValidationError, match="Nothing to update"):
        service.update(assignment.objid, {})
    with pytest.raises(NotFoundError):
        service.update("missing", {"is_used": 1})
    with pytest.raises(NotFoundError):
        service.update(assignment.objid, {"shiftid": 7})


def test_bulk_assign_skips_employees_that_already_have_the_shift():
    service, repo = _assignment_service()
    service.assign(emp_objid="E2", shift_id=1, created_by=3)

    assert service.bulk_assign(shift_id=1, created_by=3) == 2
    assert service.bulk_assign(shift_id=1, created_by=3) == 0
    assert all(a.is_used for a in repo.rows.values() if a.objid.startswith("bulk-"))

    with pytest.raises(ValidationError):
        service.bulk_assign(shift_id=None, created_by=3)
    with pytest.raises(AuthenticationError):
        service.bulk_assign(shift_id=1, created_by=None)


def test_delete_assignment():
    service, _ = _assignment_service()
    assignment = service.assign(emp_objid="E1", shift_id=1, created_by=3)

    service.delete(assignment.objid)

    with pytest.raises(NotFoundError):
        service.get(assignment.objid)
