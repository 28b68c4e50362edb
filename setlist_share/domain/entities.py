from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
PermissionLevel = Literal["view", "edit", "admin"]
SetlistVisibility = Literal["private", "public"]


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- Users (owned by the identity store) ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    name: str
    profile_image_url: str | None = None
    created_at: datetime = Field(default_factory=utc_now)

# --- Songs (owned by the catalog) ---

class Song(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    artist: str
    key: str | None = None
    tempo: int | None = None
    duration_seconds: int | None = None
    lyrics_url: str | None = None
    chord_chart_url: str | None = None

# --- Setlists ---

class Setlist(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    owner_user_id: UUID
    title: str
    description: str | None = None
    visibility: SetlistVisibility = "private"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class SetlistSong(BaseModel):
    setlist_id: UUID
    song_id: UUID
    position: int = Field(ge=0)
    notes: str = ""

# --- Collaboration ---

class CollaborationGrant(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    setlist_id: UUID
    user_id: UUID
    level: PermissionLevel
    created_at: datetime = Field(default_factory=utc_now)
