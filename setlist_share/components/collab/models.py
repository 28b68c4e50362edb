from dataclasses import dataclass
from uuid import UUID

from setlist_share.domain.entities import CollaborationGrant, PermissionLevel, User


@dataclass
class GrantAccessInput:
    actor_id: UUID
    setlist_id: UUID
    target_user_id: UUID
    level: str


@dataclass
class RevokeAccessInput:
    actor_id: UUID
    setlist_id: UUID
    target_user_id: UUID


@dataclass
class ListCollaboratorsInput:
    actor_id: UUID | None
    setlist_id: UUID


@dataclass(frozen=True)
class Collaborator:
    user: User
    level: PermissionLevel


@dataclass
class CollabOutput:
    grant: CollaborationGrant | None = None
    removed: bool = False
