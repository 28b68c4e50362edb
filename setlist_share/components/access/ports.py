"""
Access component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from setlist_share.domain.entities import CollaborationGrant, Setlist


class SetlistReaderPort(Protocol):
    def get_by_id(self, setlist_id: UUID) -> Setlist | None: ...


class GrantReaderPort(Protocol):
    def get(self, setlist_id: UUID, user_id: UUID) -> CollaborationGrant | None: ...
