from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import DTRUser, DTRUserInput, PortalUser


class DTRUserRepository(Protocol):
    def get(self, user_id: int) -> Optional[DTRUser]:
        raise NotImplementedError

    def list(self, *, search: Optional[str] = None) -> Sequence[DTRUser]:
        raise NotImplementedError

    def find_duplicates(
        self, *, user_id: Optional[int], badge_number: Optional[str], exclude_user_id: Optional[int]
    ) -> Sequence[dict]:
        raise NotImplementedError

    def create(self, data: DTRUserInput) -> int:
        raise NotImplementedError

    def update(self, user_id: int, data: DTRUserInput) -> bool:
        raise NotImplementedError

    def delete(self, user_id: int) -> bool:
        raise NotImplementedError

    def set_ssn(self, user_id: int, ssn: str) -> bool:
        raise NotImplementedError

    def get_photo(self, user_id: int) -> Optional[bytes]:
        raise NotImplementedError


class PortalUserRepository(Protocol):
    def get_by_dtruserid(self, dtruserid: int) -> Optional[PortalUser]:
        raise NotImplementedError

    def list(self) -> Sequence[PortalUser]:
        raise NotImplementedError

    def create(
        self,
        *,
        dtruserid: int,
        emp_objid: Optional[str],
        dtrname: str,
        username: Optional[str],
        pin: str,
        email: Optional[str],
        status: int,
        created_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        dtruserid: int,
        emp_objid: Optional[str],
        dtrname: str,
        username: Optional[str],
        pin: str,
        email: Optional[str],
        status: int,
    ) -> bool:
        raise NotImplementedError

    def delete(self, dtruserid: int) -> bool:
        raise NotImplementedError
