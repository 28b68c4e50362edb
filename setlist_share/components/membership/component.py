"""
Membership component - Ordered song lists.

Shell Layer - binds the manager to a unit of work.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from setlist_share.core.ports.db import UnitOfWorkPort
from setlist_share.domain.entities import SetlistSong

from ._impl import OrderedMembershipManager
from .models import MembershipLimits, OrderedItemInput, OrderedSong


def manager_for(
    uow: UnitOfWorkPort, limits: MembershipLimits | None = None
) -> OrderedMembershipManager:
    return OrderedMembershipManager(entries=uow.setlist_songs, catalog=uow.songs, limits=limits)


def run_get_ordered(setlist_id: UUID, uow: UnitOfWorkPort) -> list[OrderedSong]:
    return manager_for(uow).get_ordered(setlist_id)


def run_replace_all(
    setlist_id: UUID,
    items: Sequence[OrderedItemInput],
    uow: UnitOfWorkPort,
    limits: MembershipLimits | None = None,
) -> list[SetlistSong]:
    """Replace the order and commit. Use the manager directly to join a larger transaction."""
    entries = manager_for(uow, limits).replace_all(setlist_id, items)
    uow.commit()
    return entries
