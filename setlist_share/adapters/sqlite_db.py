"""
SQLite Database Adapter.

Implements the DB port interfaces using SQLite.
Designed to be Postgres-compatible (uses standard SQL patterns).

Repositories either own a short-lived connection (standalone use: CLI,
seeding) or share the connection of a SQLiteUnitOfWork, in which case the
unit of work decides when to commit.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from setlist_share.domain.entities import (
    CollaborationGrant,
    Setlist,
    SetlistSong,
    Song,
    User,
)
from setlist_share.domain.errors import ConflictError, SetlistError, StorageUnavailable

logger = logging.getLogger(__name__)

DEFAULT_BUSY_TIMEOUT_SECONDS = 5.0

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def parse_dt(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s) if s else None


def parse_uuid(s: str | None) -> UUID | None:
    """Parse UUID string."""
    return UUID(s) if s else None


def placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


def translate_error(exc: sqlite3.Error) -> SetlistError:
    """Map a sqlite3 failure onto the engine's error taxonomy."""
    if isinstance(exc, sqlite3.IntegrityError):
        return ConflictError(f"Concurrent modification violated a constraint: {exc}")

    message = str(exc).lower()
    if isinstance(exc, sqlite3.OperationalError) and ("locked" in message or "busy" in message):
        return ConflictError("Setlist is being modified by another request; retry")

    return StorageUnavailable(f"Storage failure: {exc}")


def connect(db_path: str, timeout: float = DEFAULT_BUSY_TIMEOUT_SECONDS) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path, timeout=timeout, check_same_thread=False)
    conn.row_factory = dict_factory
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn
        return connect(self.db_path)

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None


# -----------------------------------------------------------------------------
# Users (identity store)
# -----------------------------------------------------------------------------


class SQLiteUserRepo(SQLiteRepoBase):
    """SQLite implementation of UserRepoPort."""

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def get_by_email(self, email: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def exists(self, user_id: UUID) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT 1 FROM users WHERE id = ?", (str(user_id),)).fetchone()
            return row is not None
        finally:
            if self._should_close():
                conn.close()

    def get_many(self, user_ids: Sequence[UUID]) -> dict[UUID, User]:
        ids = list(dict.fromkeys(str(u) for u in user_ids))
        if not ids:
            return {}
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT * FROM users WHERE id IN ({placeholders(len(ids))})", ids
            ).fetchall()
            users = [self._map_row(r) for r in rows]
            return {u.id: u for u in users}
        finally:
            if self._should_close():
                conn.close()

    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (id, email, name, profile_image_url, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    name=excluded.name,
                    profile_image_url=excluded.profile_image_url
                """,
                (
                    str(user.id),
                    user.email,
                    user.name,
                    user.profile_image_url,
                    user.created_at.isoformat(),
                ),
            )
            if self._should_close():
                conn.commit()
            return user
        finally:
            if self._should_close():
                conn.close()

    def _map_row(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            name=row["name"],
            profile_image_url=row["profile_image_url"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# Songs (catalog)
# -----------------------------------------------------------------------------


class SQLiteSongCatalog(SQLiteRepoBase):
    """SQLite implementation of SongCatalogPort."""

    def get_by_id(self, song_id: UUID) -> Song | None:
        return self.get_many([song_id]).get(song_id)

    def get_many(self, song_ids: Sequence[UUID]) -> dict[UUID, Song]:
        ids = list(dict.fromkeys(str(s) for s in song_ids))
        if not ids:
            return {}
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT * FROM songs WHERE id IN ({placeholders(len(ids))})", ids
            ).fetchall()
            songs = [self._map_row(r) for r in rows]
            return {s.id: s for s in songs}
        finally:
            if self._should_close():
                conn.close()

    def save(self, song: Song) -> Song:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO songs (
                    id, title, artist, key, tempo, duration_seconds,
                    lyrics_url, chord_chart_url
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    artist=excluded.artist,
                    key=excluded.key,
                    tempo=excluded.tempo,
                    duration_seconds=excluded.duration_seconds,
                    lyrics_url=excluded.lyrics_url,
                    chord_chart_url=excluded.chord_chart_url
                """,
                (
                    str(song.id),
                    song.title,
                    song.artist,
                    song.key,
                    song.tempo,
                    song.duration_seconds,
                    song.lyrics_url,
                    song.chord_chart_url,
                ),
            )
            if self._should_close():
                conn.commit()
            return song
        finally:
            if self._should_close():
                conn.close()

    def _map_row(self, row: dict[str, Any]) -> Song:
        return Song(
            id=UUID(row["id"]),
            title=row["title"],
            artist=row["artist"],
            key=row["key"],
            tempo=row["tempo"],
            duration_seconds=row["duration_seconds"],
            lyrics_url=row["lyrics_url"],
            chord_chart_url=row["chord_chart_url"],
        )


# -----------------------------------------------------------------------------
# Setlists
# -----------------------------------------------------------------------------


class SQLiteSetlistRepo(SQLiteRepoBase):
    """SQLite implementation of SetlistRepoPort."""

    def get_by_id(self, setlist_id: UUID) -> Setlist | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM setlists WHERE id = ?", (str(setlist_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def insert(self, setlist: Setlist) -> Setlist:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO setlists (
                    id, owner_user_id, title, description, visibility,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(setlist.id),
                    str(setlist.owner_user_id),
                    setlist.title,
                    setlist.description,
                    setlist.visibility,
                    setlist.created_at.isoformat(),
                    setlist.updated_at.isoformat(),
                ),
            )
            if self._should_close():
                conn.commit()
            return setlist
        finally:
            if self._should_close():
                conn.close()

    def update(self, setlist: Setlist) -> Setlist:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                UPDATE setlists SET
                    title = ?,
                    description = ?,
                    visibility = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    setlist.title,
                    setlist.description,
                    setlist.visibility,
                    setlist.updated_at.isoformat(),
                    str(setlist.id),
                ),
            )
            if self._should_close():
                conn.commit()
            return setlist
        finally:
            if self._should_close():
                conn.close()

    def delete(self, setlist_id: UUID) -> None:
        conn = self._get_conn()
        try:
            # setlist_songs and collaboration_grants go via ON DELETE CASCADE
            conn.execute("DELETE FROM setlists WHERE id = ?", (str(setlist_id),))
            if self._should_close():
                conn.commit()
        finally:
            if self._should_close():
                conn.close()

    def list_visible_to(self, user_id: UUID) -> list[Setlist]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT s.* FROM setlists s
                WHERE s.owner_user_id = ?
                   OR EXISTS (
                        SELECT 1 FROM collaboration_grants g
                        WHERE g.setlist_id = s.id AND g.user_id = ?
                   )
                ORDER BY s.created_at DESC, s.id ASC
                """,
                (str(user_id), str(user_id)),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            if self._should_close():
                conn.close()

    def _map_row(self, row: dict[str, Any]) -> Setlist:
        return Setlist(
            id=UUID(row["id"]),
            owner_user_id=UUID(row["owner_user_id"]),
            title=row["title"],
            description=row["description"],
            visibility=row["visibility"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# -----------------------------------------------------------------------------
# Setlist membership
# -----------------------------------------------------------------------------


class SQLiteSetlistSongRepo(SQLiteRepoBase):
    """SQLite implementation of SetlistSongRepoPort."""

    def list_by_setlist(self, setlist_id: UUID) -> list[SetlistSong]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM setlist_songs WHERE setlist_id = ? ORDER BY position ASC",
                (str(setlist_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            if self._should_close():
                conn.close()

    def delete_by_setlist(self, setlist_id: UUID) -> int:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                "DELETE FROM setlist_songs WHERE setlist_id = ?", (str(setlist_id),)
            )
            if self._should_close():
                conn.commit()
            return cursor.rowcount
        finally:
            if self._should_close():
                conn.close()

    def insert_many(self, entries: Sequence[SetlistSong]) -> None:
        if not entries:
            return
        conn = self._get_conn()
        try:
            conn.executemany(
                """
                INSERT INTO setlist_songs (setlist_id, song_id, position, notes)
                VALUES (?, ?, ?, ?)
                """,
                [
                    (str(e.setlist_id), str(e.song_id), e.position, e.notes)
                    for e in entries
                ],
            )
            if self._should_close():
                conn.commit()
        finally:
            if self._should_close():
                conn.close()

    def _map_row(self, row: dict[str, Any]) -> SetlistSong:
        return SetlistSong(
            setlist_id=UUID(row["setlist_id"]),
            song_id=UUID(row["song_id"]),
            position=row["position"],
            notes=row["notes"] or "",
        )


# -----------------------------------------------------------------------------
# Collaboration grants
# -----------------------------------------------------------------------------


class SQLiteGrantRepo(SQLiteRepoBase):
    """SQLite implementation of GrantRepoPort."""

    def get(self, setlist_id: UUID, user_id: UUID) -> CollaborationGrant | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM collaboration_grants WHERE setlist_id = ? AND user_id = ?",
                (str(setlist_id), str(user_id)),
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def list_by_setlist(self, setlist_id: UUID) -> list[CollaborationGrant]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM collaboration_grants WHERE setlist_id = ? "
                "ORDER BY created_at ASC, user_id ASC",
                (str(setlist_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            if self._should_close():
                conn.close()

    def upsert(self, grant: CollaborationGrant) -> CollaborationGrant:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO collaboration_grants (
                    id, setlist_id, user_id, level, created_at
                ) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(setlist_id, user_id) DO UPDATE SET
                    level=excluded.level
                """,
                (
                    str(grant.id),
                    str(grant.setlist_id),
                    str(grant.user_id),
                    grant.level,
                    grant.created_at.isoformat(),
                ),
            )
            row = conn.execute(
                "SELECT * FROM collaboration_grants WHERE setlist_id = ? AND user_id = ?",
                (str(grant.setlist_id), str(grant.user_id)),
            ).fetchone()
            if self._should_close():
                conn.commit()
            return self._map_row(row)
        finally:
            if self._should_close():
                conn.close()

    def delete(self, setlist_id: UUID, user_id: UUID) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                "DELETE FROM collaboration_grants WHERE setlist_id = ? AND user_id = ?",
                (str(setlist_id), str(user_id)),
            )
            if self._should_close():
                conn.commit()
            return cursor.rowcount > 0
        finally:
            if self._should_close():
                conn.close()

    def _map_row(self, row: dict[str, Any]) -> CollaborationGrant:
        return CollaborationGrant(
            id=UUID(row["id"]),
            setlist_id=UUID(row["setlist_id"]),
            user_id=UUID(row["user_id"]),
            level=row["level"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# Unit of Work
# -----------------------------------------------------------------------------


class SQLiteUnitOfWork:
    """
    SQLite Unit of Work implementation.

    Provides transaction management and access to all repositories.
    Uses a shared connection for all operations within a transaction.

    Write units start with BEGIN IMMEDIATE, taking the database write lock
    before the first read so two writers on the same setlist serialize
    instead of interleaving. Read units use a deferred transaction so every
    read inside sees one consistent snapshot.

    Any sqlite3 failure escaping the block is rolled back and re-raised as
    ConflictError or StorageUnavailable.
    """

    def __init__(
        self,
        db_path: str,
        write: bool = False,
        busy_timeout: float = DEFAULT_BUSY_TIMEOUT_SECONDS,
    ):
        self.db_path = db_path
        self.write = write
        self.busy_timeout = busy_timeout
        self._conn: sqlite3.Connection | None = None

        # Lazy-initialized repositories
        self._setlists: SQLiteSetlistRepo | None = None
        self._setlist_songs: SQLiteSetlistSongRepo | None = None
        self._grants: SQLiteGrantRepo | None = None
        self._users: SQLiteUserRepo | None = None
        self._songs: SQLiteSongCatalog | None = None

    def __enter__(self) -> SQLiteUnitOfWork:
        try:
            conn = connect(self.db_path, timeout=self.busy_timeout)
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Could not open database: {e}") from e

        # Explicit BEGIN/COMMIT; disable the module's implicit transactions.
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE" if self.write else "BEGIN")
        except sqlite3.Error as e:
            conn.close()
            raise translate_error(e) from e

        self._conn = conn
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._conn is not None and self._conn.in_transaction:
                # Uncommitted on exit: either an error or a read-only unit.
                self.rollback()
        finally:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

        if isinstance(exc_val, sqlite3.Error):
            raise translate_error(exc_val) from exc_val

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Unit of work is not active")
        return self._conn

    def commit(self) -> None:
        if self._conn is not None and self._conn.in_transaction:
            self._conn.execute("COMMIT")

    def rollback(self) -> None:
        if self._conn is not None and self._conn.in_transaction:
            if self.write:
                logger.warning("Rolling back write transaction on %s", self.db_path)
            self._conn.execute("ROLLBACK")

    @property
    def setlists(self) -> SQLiteSetlistRepo:
        if self._setlists is None:
            self._setlists = SQLiteSetlistRepo(self.db_path, self.connection)
        return self._setlists

    @property
    def setlist_songs(self) -> SQLiteSetlistSongRepo:
        if self._setlist_songs is None:
            self._setlist_songs = SQLiteSetlistSongRepo(self.db_path, self.connection)
        return self._setlist_songs

    @property
    def grants(self) -> SQLiteGrantRepo:
        if self._grants is None:
            self._grants = SQLiteGrantRepo(self.db_path, self.connection)
        return self._grants

    @property
    def users(self) -> SQLiteUserRepo:
        if self._users is None:
            self._users = SQLiteUserRepo(self.db_path, self.connection)
        return self._users

    @property
    def songs(self) -> SQLiteSongCatalog:
        if self._songs is None:
            self._songs = SQLiteSongCatalog(self.db_path, self.connection)
        return self._songs


class SQLiteUnitOfWorkFactory:
    """Builds a fresh unit of work per request; holds no connection itself."""

    def __init__(self, db_path: str, busy_timeout: float = DEFAULT_BUSY_TIMEOUT_SECONDS):
        self.db_path = db_path
        self.busy_timeout = busy_timeout

    def __call__(self, write: bool = False) -> SQLiteUnitOfWork:
        return SQLiteUnitOfWork(self.db_path, write=write, busy_timeout=self.busy_timeout)
