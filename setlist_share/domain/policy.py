"""
Effective-permission rules for shared setlists.

Access is classified into one of four variants, checked in a fixed order:
owner first, then an explicit grant, then the public read fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import get_args
from uuid import UUID

from setlist_share.domain.entities import (
    CollaborationGrant,
    PermissionLevel,
    Setlist,
)

PERMISSION_LEVELS: tuple[PermissionLevel, ...] = get_args(PermissionLevel)

_RANK: dict[str, int] = {level: rank for rank, level in enumerate(PERMISSION_LEVELS)}


def is_permission_level(value: object) -> bool:
    return isinstance(value, str) and value in _RANK


def level_at_least(level: PermissionLevel, required: PermissionLevel) -> bool:
    """Total order view < edit < admin."""
    return _RANK[level] >= _RANK[required]


# --- Access variants ---


@dataclass(frozen=True)
class OwnerAccess:
    """Ownership implies admin, with or without a grant row."""


@dataclass(frozen=True)
class GrantedAccess:
    level: PermissionLevel


@dataclass(frozen=True)
class PublicViewAccess:
    """Read-only access to a public setlist."""


@dataclass(frozen=True)
class NoAccess:
    pass


Access = OwnerAccess | GrantedAccess | PublicViewAccess | NoAccess


def classify_access(
    setlist: Setlist | None,
    user_id: UUID | None,
    grant: CollaborationGrant | None,
    required: PermissionLevel,
) -> Access:
    """
    Classify what lets `user_id` act on `setlist` at `required`.

    `grant` must be the grant for (setlist, user) or None. A missing setlist
    yields NoAccess, same as a permission failure.
    """
    if setlist is None:
        return NoAccess()

    if user_id is not None and setlist.owner_user_id == user_id:
        return OwnerAccess()

    if grant is not None and level_at_least(grant.level, required):
        return GrantedAccess(level=grant.level)

    if required == "view" and setlist.visibility == "public":
        return PublicViewAccess()

    return NoAccess()


def permits(access: Access) -> bool:
    return not isinstance(access, NoAccess)
