from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from setlist_share.components.setlists import SetlistAggregate

# --- Shared Enums/Types ---
Visibility = Literal["private", "public"]
PermissionLevel = Literal["view", "edit", "admin"]


# --- Requests ---
class SetlistSongModel(BaseModel):
    song_id: UUID
    position: int | None = None  # Ignored; list order is authoritative
    notes: str | None = None


class SetlistCreateRequest(BaseModel):
    title: str
    description: str | None = None
    visibility: Visibility = "private"
    songs: list[SetlistSongModel] = []


class SetlistUpdateRequest(BaseModel):
    # Unset fields keep their value; fields sent as null overwrite it.
    title: str | None = None
    description: str | None = None
    visibility: Visibility | None = None
    songs: list[SetlistSongModel] | None = None


class CollaboratorRequest(BaseModel):
    user_id: UUID
    level: str  # checked by GrantStore (invalid_level)


# --- Responses ---
class UserSummary(BaseModel):
    id: UUID
    name: str
    profile_image_url: str | None = None


class CollaboratorResponse(UserSummary):
    level: PermissionLevel


class SetlistSongResponse(BaseModel):
    id: UUID
    title: str
    artist: str
    key: str | None = None
    tempo: int | None = None
    duration_seconds: int | None = None
    lyrics_url: str | None = None
    chord_chart_url: str | None = None
    position: int
    notes: str


class SetlistResponse(BaseModel):
    id: UUID
    title: str
    description: str | None
    visibility: Visibility
    owner: UserSummary | None
    collaborators: list[CollaboratorResponse] = Field(default_factory=list)
    songs: list[SetlistSongResponse] = Field(default_factory=list)
    total_duration_seconds: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_aggregate(cls, aggregate: SetlistAggregate) -> "SetlistResponse":
        setlist = aggregate.setlist
        owner = aggregate.owner
        return cls(
            id=setlist.id,
            title=setlist.title,
            description=setlist.description,
            visibility=setlist.visibility,
            owner=(
                UserSummary(id=owner.id, name=owner.name, profile_image_url=owner.profile_image_url)
                if owner
                else None
            ),
            collaborators=[
                CollaboratorResponse(
                    id=c.user.id,
                    name=c.user.name,
                    profile_image_url=c.user.profile_image_url,
                    level=c.level,
                )
                for c in aggregate.collaborators
            ],
            songs=[
                SetlistSongResponse(
                    **s.song.model_dump(),
                    position=s.position,
                    notes=s.notes,
                )
                for s in aggregate.songs
            ],
            total_duration_seconds=aggregate.total_duration_seconds,
            created_at=setlist.created_at,
            updated_at=setlist.updated_at,
        )


class ErrorItem(BaseModel):
    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    detail: str
    errors: list[ErrorItem] = []
