from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..common.passwords import legacy_hash, sanitize_portal_pin
from ..common.validators import require_digits, require_non_empty
from ..core.enums import ImageFormat
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..media.image import MAX_PHOTO_BYTES, FitOptions, fit_image_under_bytes
from .model import DTRUser, DTRUserInput, PortalUser
from .repository import DTRUserRepository, PortalUserRepository

logger = logging.getLogger(__name__)

PHOTO_OPTIONS = FitOptions(output=ImageFormat.JPEG, maintain_quality=True, max_bytes=MAX_PHOTO_BYTES)


def _optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number: {value!r}")


def _optional_date(value):
    if not value:
        return None
    try:
        return parse_iso_date(str(value)[:10])
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")


def build_user_input(payload: dict, photo: Optional[bytes] = None) -> DTRUserInput:
    """Map a USERINFO form payload onto DTRUserInput."""

    password = payload.get("PASSWORD") or None
    return DTRUserInput(
        name=require_non_empty(payload.get("NAME", ""), "Name"),
        badge_number=require_non_empty(str(payload.get("BADGENUMBER", "")), "Badge number"),
        default_dept_id=_optional_int(payload.get("DEFAULTDEPTID")),
        ssn=payload.get("SSN") or None,
        title=payload.get("TITLE") or None,
        gender=payload.get("GENDER") or None,
        birthday=_optional_date(payload.get("BIRTHDAY")),
        hired_day=_optional_date(payload.get("HIREDDAY")),
        street=payload.get("STREET") or None,
        privilege=_optional_int(payload.get("privilege")) or 0,
        appointment=_optional_int(payload.get("Appointment")),
        inherit_dept_sch_class=_optional_int(payload.get("InheritDeptSchClass")),
        password_hash=legacy_hash(password) if password else None,
        photo=photo or None,
    )


class DTRUserService:
    """USERINFO maintenance (the people known to the biometric terminals)."""

    def __init__(self, users: DTRUserRepository):
        self._users = users

    def validate_unique_fields(
        self,
        *,
        user_id: Optional[int] = None,
        badge_number: Optional[str] = None,
        current_user_id: Optional[int] = None,
    ) -> dict:
        if user_id is None and not badge_number:
            raise ValidationError("At least one field (userId or badgeNumber) is required for validation")

        rows = self._users.find_duplicates(user_id=user_id, badge_number=badge_number, exclude_user_id=current_user_id)
        errors: dict[str, str] = {}
        if user_id is not None and any(str(r.get("USERID")) == str(user_id) for r in rows):
            errors["userId"] = "User ID already exists"
        if badge_number and any(str(r.get("BADGENUMBER")) == str(badge_number) for r in rows):
            errors["badgeNumber"] = "Badge Number already exists"
        return {"is_valid": not errors, "errors": errors}

    def _ensure_unique(self, badge_number: str, current_user_id: Optional[int]) -> None:
        result = self.validate_unique_fields(badge_number=badge_number, current_user_id=current_user_id)
        if not result["is_valid"]:
            raise ConflictError("; ".join(result["errors"].values()))

    def _fit_photo(self, data: DTRUserInput) -> DTRUserInput:
        if not data.photo:
            return data
        fitted = fit_image_under_bytes(data.photo, PHOTO_OPTIONS)
        return replace(data, photo=fitted.data)

    def get(self, user_id: int) -> DTRUser:
        user = self._users.get(user_id)
        if not user:
            raise NotFoundError("DTR user not found")
        return user

    def list(self, search: Optional[str] = None) -> list[DTRUser]:
        return list(self._users.list(search=(search or "").strip() or None))

    def create(self, data: DTRUserInput) -> int:
        self._ensure_unique(data.badge_number, None)
        user_id = self._users.create(self._fit_photo(data))
        logger.info("created DTR user %s (badge %s)", user_id, data.badge_number)
        return user_id

    def update(self, user_id: int, data: DTRUserInput) -> None:
        self.get(user_id)
        self._ensure_unique(data.badge_number, user_id)
        self._users.update(user_id, self._fit_photo(data))

    def delete(self, user_id: int) -> None:
        if not self._users.delete(user_id):
            raise NotFoundError("DTR user not found")
        logger.info("deleted DTR user %s", user_id)

    def reset_pin(self, user_id: int, pin: str) -> None:
        pin = require_digits(pin, "PIN", 4)
        if not self._users.set_ssn(user_id, pin):
            raise NotFoundError("DTR user not found")

    def photo(self, user_id: int) -> bytes:
        data = self._users.get_photo(user_id)
        if not data:
            raise NotFoundError("No photo on file")
        return data


class PortalUserService:
    """Employee self-service accounts (sysusers_portal), one per DTR user."""

    def __init__(self, portal_users: PortalUserRepository, dtr_users: DTRUserRepository):
        self._portal = portal_users
        self._dtr = dtr_users

    def list(self) -> list[PortalUser]:
        return list(self._portal.list())

    def get(self, dtruserid: int) -> PortalUser:
        user = self._portal.get_by_dtruserid(dtruserid)
        if not user:
            raise NotFoundError("Portal user not found")
        return user

    def register(
        self,
        *,
        dtruserid: int,
        username: Optional[str],
        pin,
        email: Optional[str] = None,
        status: int = 1,
        dtrname: Optional[str] = None,
        emp_objid: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        if self._portal.get_by_dtruserid(dtruserid):
            raise ConflictError("Portal user already registered.")

        if not dtrname:
            dtr_user = self._dtr.get(dtruserid)
            dtrname = dtr_user.name if dtr_user else ""

        return self._portal.create(
            dtruserid=dtruserid,
            emp_objid=emp_objid or None,
            dtrname=dtrname or "",
            username=(username or "").strip() or None,
            pin=sanitize_portal_pin(pin),
            email=email or None,
            status=int(status),
            created_by=created_by,
        )

    def update(
        self,
        *,
        dtruserid: int,
        username: Optional[str],
        pin=None,
        email: Optional[str] = None,
        status: Optional[int] = None,
        dtrname: Optional[str] = None,
        emp_objid: Optional[str] = None,
    ) -> None:
        existing = self.get(dtruserid)
        self._portal.update(
            dtruserid=dtruserid,
            emp_objid=emp_objid or existing.emp_objid,
            dtrname=dtrname or existing.dtrname,
            username=(username or "").strip() or None,
            pin=sanitize_portal_pin(pin, fallback=existing.pin),
            email=email or None,
            status=existing.status if status is None else int(status),
        )

    def delete(self, dtruserid: int) -> None:
        if not self._portal.delete(dtruserid):
            raise NotFoundError("Portal user not found")
