"""
Database adapter interfaces.

Protocol-based interfaces for repository operations.
Implementations: SQLite (setlist_share.adapters.sqlite_db).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol
from uuid import UUID

from setlist_share.domain.entities import (
    CollaborationGrant,
    Setlist,
    SetlistSong,
    Song,
    User,
)

# -----------------------------------------------------------------------------
# External collaborators
# -----------------------------------------------------------------------------


class UserRepoPort(Protocol):
    """Identity store. Users are created and managed elsewhere."""

    def get_by_id(self, user_id: UUID) -> User | None:
        ...

    def exists(self, user_id: UUID) -> bool:
        ...

    def get_many(self, user_ids: Sequence[UUID]) -> dict[UUID, User]:
        ...


class SongCatalogPort(Protocol):
    """Song catalog. Songs are referenced by id only."""

    def get_many(self, song_ids: Sequence[UUID]) -> dict[UUID, Song]:
        """Return metadata for every id that resolves; unknown ids are absent."""
        ...


# -----------------------------------------------------------------------------
# Setlist Repository
# -----------------------------------------------------------------------------


class SetlistRepoPort(Protocol):
    def get_by_id(self, setlist_id: UUID) -> Setlist | None:
        ...

    def insert(self, setlist: Setlist) -> Setlist:
        ...

    def update(self, setlist: Setlist) -> Setlist:
        ...

    def delete(self, setlist_id: UUID) -> None:
        """Delete the row; memberships and grants cascade."""
        ...

    def list_visible_to(self, user_id: UUID) -> list[Setlist]:
        """Setlists owned by or granted to the user, newest first."""
        ...


# -----------------------------------------------------------------------------
# Membership Repository
# -----------------------------------------------------------------------------


class SetlistSongRepoPort(Protocol):
    """
    Positioned entries of a setlist.

    Invariants:
    - (setlist_id, song_id) unique
    - (setlist_id, position) unique
    """

    def list_by_setlist(self, setlist_id: UUID) -> list[SetlistSong]:
        """Entries ordered by position ascending."""
        ...

    def delete_by_setlist(self, setlist_id: UUID) -> int:
        ...

    def insert_many(self, entries: Sequence[SetlistSong]) -> None:
        ...


# -----------------------------------------------------------------------------
# Grant Repository
# -----------------------------------------------------------------------------


class GrantRepoPort(Protocol):
    def get(self, setlist_id: UUID, user_id: UUID) -> CollaborationGrant | None:
        ...

    def list_by_setlist(self, setlist_id: UUID) -> list[CollaborationGrant]:
        ...

    def upsert(self, grant: CollaborationGrant) -> CollaborationGrant:
        """Insert, or overwrite the level of the existing (setlist, user) row."""
        ...

    def delete(self, setlist_id: UUID, user_id: UUID) -> bool:
        ...


# -----------------------------------------------------------------------------
# Unit of Work
# -----------------------------------------------------------------------------


class UnitOfWorkPort(Protocol):
    """
    Unit of Work pattern for transaction management.

    Usage:
        with uow_factory(write=True) as uow:
            uow.setlist_songs.delete_by_setlist(setlist_id)
            uow.commit()
    """

    setlists: SetlistRepoPort
    setlist_songs: SetlistSongRepoPort
    grants: GrantRepoPort
    users: UserRepoPort
    songs: SongCatalogPort

    def __enter__(self) -> UnitOfWorkPort:
        """Enter transaction context."""
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit transaction context (rollback on exception)."""
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class UnitOfWorkFactory(Protocol):
    def __call__(self, write: bool = False) -> UnitOfWorkPort:
        ...
