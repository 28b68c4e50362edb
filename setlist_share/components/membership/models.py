"""
Membership component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from setlist_share.domain.entities import Song


@dataclass(frozen=True)
class OrderedItemInput:
    """One element of a submitted order. Its index in the list is its position."""

    song_id: UUID
    notes: str = ""


@dataclass(frozen=True)
class OrderedSong:
    """A hydrated membership entry."""

    song: Song
    position: int
    notes: str


@dataclass(frozen=True)
class MembershipLimits:
    max_songs: int = 500
    notes_max_length: int = 2000
