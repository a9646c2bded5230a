from __future__ import annotations

import base64
import binascii
import logging
import threading
import uuid
from typing import Callable, Optional

from ..core.constants import ENROLLMENT_QUALITY_SCORE, ENROLLMENT_SPECIMENS
from ..core.enums import EnrollmentStatus
from ..core.exceptions import BiometricError, ConflictError, NotFoundError, ValidationError
from .helper import FingerprintHelper
from .model import EnrollmentProgress
from .progress import EnrollmentProgressStore
from .repository import FingerTemplateRepository

logger = logging.getLogger(__name__)


def _start_thread(target: Callable[[], None]) -> None:
    threading.Thread(target=target, name="fingerprint-enrollment", daemon=True).start()


def _require_finger(finger_id) -> int:
    try:
        finger_id = int(finger_id)
    except (TypeError, ValueError):
        raise ValidationError("Finger ID must be a number from 0 to 9")
    if not 0 <= finger_id <= 9:
        raise ValidationError("Finger ID must be a number from 0 to 9")
    return finger_id


class EnrollmentService:
    """Fingerprint enrollment: capture through the helper, then confirm and save.

    ``start`` returns immediately; the helper runs on a worker thread and
    the client polls ``progress``. Once the status is CAPTURED the client
    calls ``save`` to write the template to FingerTemplates.
    """

    def __init__(
        self,
        templates: FingerTemplateRepository,
        helper: FingerprintHelper,
        store: EnrollmentProgressStore,
        *,
        spawn: Callable[[Callable[[], None]], None] = _start_thread,
    ):
        self._templates = templates
        self._helper = helper
        self._store = store
        self._spawn = spawn

    def check_availability(self) -> dict:
        available = self._helper.is_available()
        return {
            "available": available,
            "helper": self._helper.executable,
            "message": "Bio enrollment system is available" if available else "Enrollment helper not found",
        }

    def check_finger(self, user_id: int, finger_id) -> dict:
        finger_id = _require_finger(finger_id)
        enrolled = self._templates.has_template(user_id=int(user_id), finger_id=finger_id)
        return {
            "available": not enrolled,
            "message": (
                f"Finger {finger_id} is already enrolled for this user"
                if enrolled
                else f"Finger {finger_id} is available for enrollment"
            ),
        }

    def start(self, *, user_id: int, finger_id, user_name: str) -> EnrollmentProgress:
        if not user_id:
            raise ValidationError("User ID and Finger ID are required")
        finger_id = _require_finger(finger_id)
        user_id = int(user_id)

        if self._templates.has_template(user_id=user_id, finger_id=finger_id):
            raise ConflictError(f"Finger {finger_id} is already enrolled for this user")
        progress = self._store.create(user_id=user_id, finger_id=finger_id, user_name=user_name or f"User {user_id}")
        if progress is None:
            raise ConflictError(f"An enrollment for finger {finger_id} is already in progress")
        logger.info("enrollment %s started for user %s finger %s", progress.enrollment_id, user_id, finger_id)
        self._spawn(lambda: self._capture(progress.enrollment_id))
        return progress

    def _capture(self, enrollment_id: str) -> None:
        progress = self._store.update(enrollment_id, status=EnrollmentStatus.CAPTURING, current_specimen=1)
        if progress is None:
            return
        try:
            result = self._helper.enroll(progress.user_id, progress.finger_id, progress.user_name)
        except BiometricError as e:
            logger.warning("enrollment %s failed: %s", enrollment_id, e)
            self._store.update(enrollment_id, status=EnrollmentStatus.ERROR, error=str(e))
            return
        except Exception as e:
            logger.exception("enrollment %s crashed", enrollment_id)
            self._store.update(enrollment_id, status=EnrollmentStatus.ERROR, error=str(e))
            return

        self._store.update(
            enrollment_id,
            status=EnrollmentStatus.CAPTURED,
            current_specimen=ENROLLMENT_SPECIMENS,
            finger_id=result.finger_id if result.finger_id is not None else progress.finger_id,
            template_base64=result.template_base64,
            template_size=result.template_size,
            quality_scores=result.quality_scores or (ENROLLMENT_QUALITY_SCORE,) * ENROLLMENT_SPECIMENS,
        )
        logger.info("enrollment %s captured (%d bytes)", enrollment_id, result.template_size)

    def progress(self, enrollment_id: str) -> EnrollmentProgress:
        progress = self._store.get(enrollment_id)
        if progress is None:
            raise NotFoundError("Enrollment not found")
        return progress

    def save(
        self,
        *,
        enrollment_id: Optional[str] = None,
        user_id: Optional[int] = None,
        finger_id=None,
        name: Optional[str] = None,
        template_base64: Optional[str] = None,
    ) -> str:
        """Write the captured template; the template in progress wins over a posted one."""

        progress = self._store.get(enrollment_id) if enrollment_id else None
        if progress is not None:
            if progress.status is not EnrollmentStatus.CAPTURED:
                raise ValidationError(f"Enrollment is not ready to save ({progress.status.value})")
            template_base64 = progress.template_base64 or template_base64
            user_id = user_id or progress.user_id
            finger_id = progress.finger_id if finger_id is None else finger_id
            name = name or progress.user_name

        if not user_id or finger_id is None or not template_base64:
            raise ValidationError("User ID, Finger ID, and template data are required")
        finger_id = _require_finger(finger_id)

        try:
            template = base64.b64decode(template_base64, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Template data is not valid base64")

        fuid = str(uuid.uuid4())
        self._templates.save_template(
            fuid=fuid, user_id=int(user_id), finger_id=finger_id, name=name or "", template=template
        )
        if progress is not None:
            self._store.update(enrollment_id, status=EnrollmentStatus.COMPLETE, template_base64=None)
        logger.info("saved finger %s for user %s (fuid %s)", finger_id, user_id, fuid)
        return fuid

    def cancel(self, enrollment_id: str) -> None:
        self._store.remove(enrollment_id)

    def enrollment_status(self, user_id: int) -> dict:
        fingers = list(self._templates.list_enrolled(int(user_id)))
        return {
            "user_id": int(user_id),
            "enrolled_fingers": [f.to_dict() for f in fingers],
            "total_enrolled": len(fingers),
        }

    def delete_finger(self, *, user_id: int, finger_id) -> None:
        finger_id = _require_finger(finger_id)
        if not self._templates.delete(user_id=int(user_id), finger_id=finger_id):
            raise NotFoundError(f"Finger {finger_id} is not enrolled for this user")
