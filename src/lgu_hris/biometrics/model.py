from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.constants import ENROLLMENT_SPECIMENS
from ..core.enums import EnrollmentStatus


@dataclass(frozen=True)
class EnrollmentProgress:
    """One fingerprint enrollment, polled by the client until captured."""

    enrollment_id: str
    user_id: int
    finger_id: int
    user_name: str
    status: EnrollmentStatus
    started_at: datetime
    updated_at: datetime
    current_specimen: int = 0
    total_specimens: int = ENROLLMENT_SPECIMENS
    quality_scores: tuple[int, ...] = ()
    template_base64: Optional[str] = None
    template_size: int = 0
    requested_finger_id: Optional[int] = None
    error: Optional[str] = None

    @property
    def average_quality(self) -> float:
        if not self.quality_scores:
            return 0.0
        return round(sum(self.quality_scores) / len(self.quality_scores), 2)

    @property
    def message(self) -> str:
        if self.status is EnrollmentStatus.INITIALIZING:
            return "Initializing enrollment..."
        if self.status is EnrollmentStatus.CAPTURING:
            if self.current_specimen:
                return f"Capturing attempt {self.current_specimen}/{self.total_specimens}..."
            return "Starting capture process..."
        if self.status is EnrollmentStatus.CAPTURED:
            return "All samples captured - awaiting confirmation"
        if self.status is EnrollmentStatus.COMPLETE:
            return "Fingerprint saved successfully"
        if self.status is EnrollmentStatus.ERROR:
            return f"Enrollment failed: {self.error}" if self.error else "Enrollment failed"
        return "Processing..."

    def to_dict(self) -> dict:
        return {
            "enrollment_id": self.enrollment_id,
            "user_id": self.user_id,
            "finger_id": self.finger_id,
            "requested_finger_id": self.requested_finger_id,
            "user_name": self.user_name,
            "status": self.status.value,
            "current_specimen": self.current_specimen,
            "total_specimens": self.total_specimens,
            "quality_scores": list(self.quality_scores),
            "avg_quality": self.average_quality,
            "template_base64": self.template_base64,
            "template_size": self.template_size,
            "error": self.error,
            "message": self.message,
            "started_at": self.started_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class CaptureResult:
    """Parsed output of the enrollment helper."""

    template_base64: str
    finger_id: Optional[int] = None
    template_size: int = 0
    quality_scores: tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EnrolledFinger:
    fuid: str
    finger_id: int
    name: Optional[str]
    template_size: int
    image_size: Optional[int]
    created_date: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "fuid": self.fuid,
            "finger_id": self.finger_id,
            "name": self.name,
            "template_size": self.template_size,
            "image_size": self.image_size,
            "created_date": self.created_date.isoformat() if self.created_date else None,
        }
