"""
AccessResolver - effective permission of an actor on a setlist.

Functional core lives in setlist_share.domain.policy; this class only loads
the two rows it needs. It has no side effects and reads through whatever
connection its repositories share, so calling it inside a unit of work
sees the same state the mutation will act on.
"""

from __future__ import annotations

import logging
from uuid import UUID

from setlist_share.domain.entities import PermissionLevel, Setlist
from setlist_share.domain.errors import AccessDenied
from setlist_share.domain.policy import classify_access, permits

from .models import AccessDecision
from .ports import GrantReaderPort, SetlistReaderPort

logger = logging.getLogger(__name__)


class AccessResolver:
    def __init__(self, setlists: SetlistReaderPort, grants: GrantReaderPort) -> None:
        self._setlists = setlists
        self._grants = grants

    def resolve(
        self,
        user_id: UUID | None,
        setlist_id: UUID,
        required: PermissionLevel,
    ) -> AccessDecision:
        setlist = self._setlists.get_by_id(setlist_id)

        grant = None
        if setlist is not None and user_id is not None and setlist.owner_user_id != user_id:
            grant = self._grants.get(setlist_id, user_id)

        access = classify_access(setlist, user_id, grant, required)
        return AccessDecision(allowed=permits(access), access=access, setlist=setlist)

    def require(
        self,
        user_id: UUID | None,
        setlist_id: UUID,
        required: PermissionLevel,
    ) -> Setlist:
        """Return the setlist, or raise AccessDenied (also when it does not exist)."""
        decision = self.resolve(user_id, setlist_id, required)
        if not decision.allowed or decision.setlist is None:
            logger.info(
                "Access denied: user=%s setlist=%s required=%s", user_id, setlist_id, required
            )
            raise AccessDenied()
        return decision.setlist
