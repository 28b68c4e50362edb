"""
Access component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from setlist_share.domain.entities import PermissionLevel, Setlist
from setlist_share.domain.policy import Access


@dataclass(frozen=True)
class ResolveInput:
    """Input for resolving an actor's permission. `user_id` is None for anonymous callers."""

    user_id: UUID | None
    setlist_id: UUID
    required: PermissionLevel


@dataclass(frozen=True)
class AccessDecision:
    """Allowed or denied, with the variant that decided it."""

    allowed: bool
    access: Access
    setlist: Setlist | None = None
