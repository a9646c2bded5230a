"""In-memory enrollment progress, keyed by enrollment id.

The capture runs on a worker thread while the client polls, so every
access goes through one lock. Finished entries are dropped once they have
been idle for ENROLLMENT_PURGE_SECONDS.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import timedelta
from typing import Callable, Dict, Optional

from ..common.datetime_utils import now_local
from ..core.constants import ENROLLMENT_PURGE_SECONDS
from ..core.enums import EnrollmentStatus
from .model import EnrollmentProgress


class EnrollmentProgressStore:
    def __init__(self, *, clock: Callable = now_local, purge_after_seconds: int = ENROLLMENT_PURGE_SECONDS):
        self._clock = clock
        self._purge_after = timedelta(seconds=purge_after_seconds)
        self._items: Dict[str, EnrollmentProgress] = {}
        self._lock = threading.Lock()

    def create(self, *, user_id: int, finger_id: int, user_name: str) -> Optional[EnrollmentProgress]:
        """New INITIALIZING entry, or None when this finger already has an unfinished one."""
        now = self._clock()
        with self._lock:
            self._purge_locked(now)
            if self._active_locked(user_id, finger_id):
                return None
            progress = EnrollmentProgress(
                enrollment_id=str(uuid.uuid4()),
                user_id=user_id,
                finger_id=finger_id,
                requested_finger_id=finger_id,
                user_name=user_name,
                status=EnrollmentStatus.INITIALIZING,
                started_at=now,
                updated_at=now,
            )
            self._items[progress.enrollment_id] = progress
        return progress

    def update(self, enrollment_id: str, **changes) -> Optional[EnrollmentProgress]:
        with self._lock:
            current = self._items.get(enrollment_id)
            if current is None:
                return None
            updated = replace(current, updated_at=self._clock(), **changes)
            self._items[enrollment_id] = updated
            return updated

    def get(self, enrollment_id: str) -> Optional[EnrollmentProgress]:
        with self._lock:
            self._purge_locked(self._clock())
            return self._items.get(enrollment_id)

    def remove(self, enrollment_id: str) -> None:
        with self._lock:
            self._items.pop(enrollment_id, None)

    def _active_locked(self, user_id: int, finger_id: int) -> Optional[EnrollmentProgress]:
        for p in self._items.values():
            if p.user_id == user_id and p.requested_finger_id == finger_id and not p.status.finished:
                return p
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def purge(self) -> int:
        with self._lock:
            return self._purge_locked(self._clock())

    def _purge_locked(self, now) -> int:
        stale = [
            key
            for key, p in self._items.items()
            if p.status.finished and now - p.updated_at >= self._purge_after
        ]
        for key in stale:
            del self._items[key]
        return len(stale)
