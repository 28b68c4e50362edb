"""
OrderedMembershipManager - positioned song list of a setlist.

Every reorder is a full replace: all entries of the setlist are deleted and
one entry per submitted song is inserted at its list index. Entries carry no
identity across edits, so notes on a song left out of the new list are gone.

The manager never commits. It runs on repositories bound to the caller's
unit of work; a failure anywhere in the caller's transaction rolls the old
entries back into place.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from setlist_share.domain.entities import SetlistSong
from setlist_share.domain.errors import FieldError, ValidationError

from .models import MembershipLimits, OrderedItemInput, OrderedSong
from .ports import SetlistSongRepoPort, SongCatalogPort

logger = logging.getLogger(__name__)

# --- Validation Functions ---


def validate_ordered_items(
    items: Sequence[OrderedItemInput],
    known_song_ids: set[UUID],
    limits: MembershipLimits,
) -> list[FieldError]:
    """Validate a submitted order against the catalog and limits."""
    errors: list[FieldError] = []

    if len(items) > limits.max_songs:
        errors.append(
            FieldError(
                code="too_many_songs",
                message=f"A setlist holds at most {limits.max_songs} songs",
                field="songs",
            )
        )

    seen: set[UUID] = set()
    for index, item in enumerate(items):
        field = f"songs[{index}]"
        if item.song_id in seen:
            errors.append(
                FieldError(
                    code="duplicate_song",
                    message=f"Song {item.song_id} appears more than once",
                    field=field,
                )
            )
        seen.add(item.song_id)

        if item.song_id not in known_song_ids:
            errors.append(
                FieldError(
                    code="song_not_found",
                    message=f"Song {item.song_id} does not exist",
                    field=field,
                )
            )

        if len(item.notes) > limits.notes_max_length:
            errors.append(
                FieldError(
                    code="notes_too_long",
                    message=f"Notes must be {limits.notes_max_length} characters or less",
                    field=f"{field}.notes",
                )
            )

    return errors


def build_entries(setlist_id: UUID, items: Sequence[OrderedItemInput]) -> list[SetlistSong]:
    return [
        SetlistSong(setlist_id=setlist_id, song_id=item.song_id, position=index, notes=item.notes)
        for index, item in enumerate(items)
    ]


# --- Membership Manager ---


class OrderedMembershipManager:
    def __init__(
        self,
        entries: SetlistSongRepoPort,
        catalog: SongCatalogPort,
        limits: MembershipLimits | None = None,
    ) -> None:
        self._entries = entries
        self._catalog = catalog
        self._limits = limits or MembershipLimits()

    def get_ordered(self, setlist_id: UUID) -> list[OrderedSong]:
        """Entries ascending by position, hydrated with catalog metadata."""
        entries = self._entries.list_by_setlist(setlist_id)
        songs = self._catalog.get_many([e.song_id for e in entries])

        ordered: list[OrderedSong] = []
        for entry in entries:
            song = songs.get(entry.song_id)
            if song is None:
                logger.warning(
                    "Setlist %s references missing song %s", setlist_id, entry.song_id
                )
                continue
            ordered.append(OrderedSong(song=song, position=entry.position, notes=entry.notes))
        return ordered

    def replace_all(self, setlist_id: UUID, items: Sequence[OrderedItemInput]) -> list[SetlistSong]:
        """
        Replace the whole membership of a setlist.

        Raises ValidationError before touching storage if the list has a
        duplicate song, an unknown song, or exceeds the limits.
        """
        known = set(self._catalog.get_many([i.song_id for i in items]))
        errors = validate_ordered_items(items, known, self._limits)
        if errors:
            raise ValidationError(errors)

        entries = build_entries(setlist_id, items)
        removed = self._entries.delete_by_setlist(setlist_id)
        self._entries.insert_many(entries)

        logger.info(
            "Replaced setlist %s order: %d removed, %d inserted",
            setlist_id,
            removed,
            len(entries),
        )
        return entries
