from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """HR201 employees row (core identity fields)."""

    objid: str
    dtruserid: Optional[int]
    dtrbadgenumber: Optional[str]
    idno: Optional[str]
    surname: Optional[str]
    firstname: Optional[str]
    middlename: Optional[str]
    extension: Optional[str]
    gender: Optional[str]
    mobile: Optional[str]
    email: Optional[str]
    pds_progress: float = 0.0


@dataclass(frozen=True)
class PdsSnapshot:
    """Everything the PDS progress score looks at for one employee.

    Single-row sections are dicts (empty when there is no row); repeating
    sections are lists of row dicts.
    """

    employee: dict
    address: dict = field(default_factory=dict)
    spouse: dict = field(default_factory=dict)
    media: dict = field(default_factory=dict)
    children: list = field(default_factory=list)
    education: list = field(default_factory=list)
    eligibility: list = field(default_factory=list)
    work_experience: list = field(default_factory=list)
    voluntary_work: list = field(default_factory=list)
    trainings: list = field(default_factory=list)
    hobbies: list = field(default_factory=list)
    recognitions: list = field(default_factory=list)
    memberships: list = field(default_factory=list)
    references: list = field(default_factory=list)
    government_ids: list = field(default_factory=list)


@dataclass(frozen=True)
class PdsScore:
    filled: int
    total: int

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return round(self.filled / self.total * 100, 2)


@dataclass(frozen=True)
class MissingField:
    field: str
    section: str
    element_id: str
    page: int

    @property
    def link(self) -> str:
        return f"#{self.element_id}"

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "section": self.section,
            "link": self.link,
            "page": self.page,
            "focus_selector": self.element_id,
        }
