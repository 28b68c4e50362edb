"""
Membership component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from setlist_share.domain.entities import SetlistSong, Song


class SetlistSongRepoPort(Protocol):
    def list_by_setlist(self, setlist_id: UUID) -> list[SetlistSong]: ...
    def delete_by_setlist(self, setlist_id: UUID) -> int: ...
    def insert_many(self, entries: Sequence[SetlistSong]) -> None: ...


class SongCatalogPort(Protocol):
    def get_many(self, song_ids: Sequence[UUID]) -> dict[UUID, Song]: ...
