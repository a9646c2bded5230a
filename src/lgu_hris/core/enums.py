from __future__ import annotations

from enum import Enum


class Permission(str, Enum):
    """Actions checked against sysusers_roles."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def column(self) -> str:
        return f"can{self.value}"


class EnrollmentStatus(str, Enum):
    """Fingerprint enrollment progress states."""

    INITIALIZING = "initializing"
    CAPTURING = "capturing"
    CAPTURED = "captured"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def finished(self) -> bool:
        return self in (EnrollmentStatus.CAPTURED, EnrollmentStatus.COMPLETE, EnrollmentStatus.ERROR)


class ShiftTimeMode(str, Enum):
    """shiftscheduletypes.shifttimemode values."""

    AM = "AM"
    PM = "PM"
    AMPM = "AMPM"

    @property
    def covers_am(self) -> bool:
        return self in (ShiftTimeMode.AM, ShiftTimeMode.AMPM)

    @property
    def covers_pm(self) -> bool:
        return self in (ShiftTimeMode.PM, ShiftTimeMode.AMPM)


class HolidayCategory(str, Enum):
    """holidays.holidaycategory values."""

    LOCAL = "Local"
    NATIONAL = "National"


class MediaKind(str, Enum):
    """Files attached to a PDS (employees_media.<kind>_path)."""

    PHOTO = "photo"
    SIGNATURE = "signature"
    THUMB = "thumb"

    @property
    def column(self) -> str:
        return f"{self.value}_path"


class ImageFormat(str, Enum):
    BMP = "bmp"
    JPEG = "jpeg"
    PNG = "png"

    @property
    def mimetype(self) -> str:
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        return "jpg" if self is ImageFormat.JPEG else self.value


class ComputePeriod(str, Enum):
    """employee_computeddtr.period values."""

    FULL = "Full Month"
    FIRST = "1st Half"
    SECOND = "2nd Half"

    @classmethod
    def parse(cls, value: str) -> "ComputePeriod":
        aliases = {"full": cls.FULL, "first": cls.FIRST, "second": cls.SECOND}
        key = (value or "").strip()
        if key.lower() in aliases:
            return aliases[key.lower()]
        return cls(key)


class ComputeStatus(str, Enum):
    FOR_APPROVAL = "For Approval"
    APPROVED = "Approved"
    RETURNED = "Returned"
    REJECTED = "Rejected"
