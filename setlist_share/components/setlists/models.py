"""
Setlists component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from setlist_share.components.collab.models import Collaborator
from setlist_share.components.membership.models import OrderedItemInput, OrderedSong
from setlist_share.domain.entities import Setlist, SetlistVisibility, User

UPDATABLE_FIELDS = frozenset({"title", "description", "visibility", "songs"})


# --- Input Models ---


@dataclass(frozen=True)
class CreateSetlistInput:
    owner_user_id: UUID
    title: str
    description: str | None = None
    visibility: SetlistVisibility = "private"
    songs: list[OrderedItemInput] = field(default_factory=list)


@dataclass(frozen=True)
class UpdateSetlistInput:
    """
    Partial update.

    A key absent from `updates` keeps the stored value; a key present
    overwrites it, including with None. `songs` replaces the whole order.
    """

    actor_id: UUID
    setlist_id: UUID
    updates: dict[str, Any]


@dataclass(frozen=True)
class GetSetlistInput:
    actor_id: UUID | None
    setlist_id: UUID


@dataclass(frozen=True)
class DeleteSetlistInput:
    actor_id: UUID
    setlist_id: UUID


@dataclass(frozen=True)
class ListSetlistsInput:
    actor_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class SetlistAggregate:
    """Hydrated external view of a setlist."""

    setlist: Setlist
    owner: User | None
    collaborators: list[Collaborator]
    songs: list[OrderedSong]

    @property
    def total_duration_seconds(self) -> int:
        return sum(s.song.duration_seconds or 0 for s in self.songs)

    @property
    def song_ids(self) -> list[UUID]:
        return [s.song.id for s in self.songs]
