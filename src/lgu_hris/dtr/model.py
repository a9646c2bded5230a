from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class DTRUser:
    """DTR USERINFO row (a person enrolled on the biometric terminals)."""

    user_id: int
    badge_number: str
    name: str
    default_dept_id: Optional[int] = None
    ssn: Optional[str] = None
    title: Optional[str] = None
    gender: Optional[str] = None
    birthday: Optional[date] = None
    hired_day: Optional[date] = None
    street: Optional[str] = None
    privilege: int = 0
    appointment: Optional[int] = None
    inherit_dept_sch_class: Optional[int] = None
    has_photo: bool = False

    def to_dict(self) -> dict:
        return {
            "USERID": self.user_id,
            "BADGENUMBER": self.badge_number,
            "NAME": self.name,
            "DEFAULTDEPTID": self.default_dept_id,
            "SSN": self.ssn,
            "TITLE": self.title,
            "GENDER": self.gender,
            "BIRTHDAY": self.birthday.isoformat() if self.birthday else None,
            "HIREDDAY": self.hired_day.isoformat() if self.hired_day else None,
            "STREET": self.street,
            "privilege": self.privilege,
            "Appointment": self.appointment,
            "InheritDeptSchClass": self.inherit_dept_sch_class,
            "has_photo": self.has_photo,
        }


@dataclass(frozen=True)
class DTRUserInput:
    """Writable USERINFO fields."""

    name: str
    badge_number: str
    default_dept_id: Optional[int] = None
    ssn: Optional[str] = None
    title: Optional[str] = None
    gender: Optional[str] = None
    birthday: Optional[date] = None
    hired_day: Optional[date] = None
    street: Optional[str] = None
    privilege: int = 0
    appointment: Optional[int] = None
    inherit_dept_sch_class: Optional[int] = None
    password_hash: Optional[str] = None
    photo: Optional[bytes] = None


@dataclass(frozen=True)
class PortalUser:
    """HR201 sysusers_portal row (employee self-service login)."""

    portal_user_id: int
    dtruserid: int
    emp_objid: Optional[str]
    dtrname: str
    username: Optional[str]
    pin: str
    email: Optional[str]
    status: int = 1

    def to_dict(self) -> dict:
        return {
            "userportalid": self.portal_user_id,
            "dtruserid": self.dtruserid,
            "emp_objid": self.emp_objid,
            "dtrname": self.dtrname,
            "username": self.username,
            "emailaddress": self.email,
            "status": self.status,
        }
