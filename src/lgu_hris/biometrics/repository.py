from __future__ import annotations

from typing import Protocol, Sequence

from .model import EnrolledFinger


class FingerTemplateRepository(Protocol):
    """DTR FingerTemplates table."""

    def has_template(self, *, user_id: int, finger_id: int) -> bool:
        raise NotImplementedError

    def list_enrolled(self, user_id: int) -> Sequence[EnrolledFinger]:
        raise NotImplementedError

    def save_template(self, *, fuid: str, user_id: int, finger_id: int, name: str, template: bytes) -> None:
        raise NotImplementedError

    def delete(self, *, user_id: int, finger_id: int) -> int:
        raise NotImplementedError
