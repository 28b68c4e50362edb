from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from setlist_share.core.ports.time import TimePort
from setlist_share.domain.entities import CollaborationGrant, User


class GrantRepoPort(Protocol):
    def get(self, setlist_id: UUID, user_id: UUID) -> CollaborationGrant | None: ...
    def list_by_setlist(self, setlist_id: UUID) -> list[CollaborationGrant]: ...
    def upsert(self, grant: CollaborationGrant) -> CollaborationGrant: ...
    def delete(self, setlist_id: UUID, user_id: UUID) -> bool: ...


class UserRepoPort(Protocol):
    def exists(self, user_id: UUID) -> bool: ...
    def get_many(self, user_ids: Sequence[UUID]) -> dict[UUID, User]: ...


__all__ = ["GrantRepoPort", "TimePort", "UserRepoPort"]
